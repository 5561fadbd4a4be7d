from fastapi import Request

from zdock_api.services.container_service import ContainerService
from zdock_api.services.runtime_proxy import RuntimeCommandProxy
from zdock_api.services.system_service import SystemService


def get_container_service(request: Request) -> ContainerService:
    return request.app.state.container_service


def get_runtime(request: Request) -> RuntimeCommandProxy:
    return request.app.state.runtime


def get_system_service(request: Request) -> SystemService:
    return request.app.state.system_service
