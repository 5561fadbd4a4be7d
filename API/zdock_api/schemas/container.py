from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Dict, List

from zdock_api.domain.container import CreateContainerSpec


class ContainerCreateRequest(BaseModel):
    image: str = Field(..., description="Image to run, e.g. busybox")
    command: str = Field(..., description="Entry command, split on whitespace")
    name: str = ""
    detach: bool = False
    tty: bool = False
    volume: str = Field("", description="host:container bind, e.g. /data:/data")
    memory: str = Field("", description="Memory limit, e.g. 100m")
    cpu_share: str = ""
    cpu_set: str = ""
    network: str = ""
    environment: Dict[str, str] = Field(default_factory=dict)
    port_mapping: List[str] = Field(default_factory=list, description="host:container pairs")

    @field_validator("image", "command")
    @classmethod
    def not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be empty")
        return value

    def to_spec(self) -> CreateContainerSpec:
        return CreateContainerSpec(**self.model_dump())

    class Config:
        json_schema_extra = {
            "example": {
                "image": "busybox",
                "command": "top",
                "name": "web",
                "detach": True,
                "environment": {"MODE": "dev"},
                "port_mapping": ["8080:80"],
            }
        }


class ContainerResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    image: str
    command: str
    status: str
    created_time: str
    pid: str
    volume: str
    port_mapping: str


class ExecRequest(BaseModel):
    command: List[str] = Field(..., min_length=1)


class ExecResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    output: str
    exit_code: int
