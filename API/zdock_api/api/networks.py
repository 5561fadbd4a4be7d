from typing import List

from fastapi import APIRouter, Depends

from zdock_api.api.deps import get_runtime
from zdock_api.schemas.common import DataResponse, MessageResponse
from zdock_api.schemas.network import NetworkCreateRequest, NetworkResponse
from zdock_api.services.runtime_proxy import RuntimeCommandProxy

router = APIRouter(prefix="/networks", tags=["networks"])


@router.get("", response_model=DataResponse[List[NetworkResponse]])
async def list_networks(runtime: RuntimeCommandProxy = Depends(get_runtime)):
    return {"data": await runtime.network_list()}


@router.post("", response_model=DataResponse[NetworkResponse])
async def create_network(payload: NetworkCreateRequest, runtime: RuntimeCommandProxy = Depends(get_runtime)):
    return {"data": await runtime.network_create(payload.to_spec())}


@router.delete("/{network_id}", response_model=MessageResponse)
async def remove_network(network_id: str, runtime: RuntimeCommandProxy = Depends(get_runtime)):
    await runtime.network_remove(network_id)
    return {"message": f"Network {network_id} removed"}
