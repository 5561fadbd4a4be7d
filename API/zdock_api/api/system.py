from fastapi import APIRouter, Depends

from zdock_api.api.deps import get_system_service
from zdock_api.schemas.common import DataResponse
from zdock_api.schemas.system import SystemInfoResponse, VersionResponse
from zdock_api.services.system_service import SystemService

router = APIRouter(prefix="/system", tags=["system"])


@router.get("/info", response_model=DataResponse[SystemInfoResponse])
async def get_system_info(service: SystemService = Depends(get_system_service)):
    return {"data": await service.info()}


@router.get("/version", response_model=DataResponse[VersionResponse])
async def get_version(service: SystemService = Depends(get_system_service)):
    return {"data": await service.version()}
