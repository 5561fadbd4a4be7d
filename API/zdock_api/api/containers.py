from typing import List

from fastapi import APIRouter, Depends

from zdock_api.api.deps import get_container_service
from zdock_api.schemas.common import DataResponse, MessageResponse
from zdock_api.schemas.container import (
    ContainerCreateRequest,
    ContainerResponse,
    ExecRequest,
    ExecResponse,
)
from zdock_api.services.container_service import ContainerService

router = APIRouter(prefix="/containers", tags=["containers"])


@router.get("", response_model=DataResponse[List[ContainerResponse]])
async def list_containers(service: ContainerService = Depends(get_container_service)):
    return {"data": await service.list_containers()}


@router.post("", response_model=DataResponse[ContainerResponse])
async def create_container(
    payload: ContainerCreateRequest,
    service: ContainerService = Depends(get_container_service),
):
    return {"data": await service.create_container(payload.to_spec())}


@router.get("/logs/{name}", response_model=DataResponse[str])
async def get_container_logs(name: str, service: ContainerService = Depends(get_container_service)):
    return {"data": await service.container_logs(name)}


@router.post("/stop/{name}", response_model=MessageResponse)
async def stop_container(name: str, service: ContainerService = Depends(get_container_service)):
    await service.stop_container(name)
    return {"message": f"Container {name} stopped"}


@router.get("/{container_id}", response_model=DataResponse[ContainerResponse])
async def get_container(container_id: str, service: ContainerService = Depends(get_container_service)):
    return {"data": await service.get_container(container_id)}


@router.post("/{container_id}/start", response_model=MessageResponse)
async def start_container(container_id: str, service: ContainerService = Depends(get_container_service)):
    container = await service.start_container(container_id)
    return {"message": f"Container {container.name} is {container.status}"}


@router.post("/{container_id}/exec", response_model=DataResponse[ExecResponse])
async def exec_container(
    container_id: str,
    payload: ExecRequest,
    service: ContainerService = Depends(get_container_service),
):
    return {"data": await service.exec_in_container(container_id, payload.command)}


@router.delete("/{name}", response_model=MessageResponse)
async def remove_container(name: str, service: ContainerService = Depends(get_container_service)):
    await service.remove_container(name)
    return {"message": f"Container {name} removed"}
