from pydantic import BaseModel, ConfigDict


class SystemInfoResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    os: str
    architecture: str
    cpus: int
    memory: str
    zdocker_root: str


class VersionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    version: str
    api_version: str
    build_date: str
