from pydantic import BaseModel, ConfigDict, Field

from zdock_api.domain.network import CreateNetworkSpec


class NetworkCreateRequest(BaseModel):
    name: str = Field(..., min_length=1)
    driver: str = ""
    subnet: str = Field("", description="CIDR, e.g. 192.168.10.0/24")

    def to_spec(self) -> CreateNetworkSpec:
        return CreateNetworkSpec(name=self.name, driver=self.driver, subnet=self.subnet)


class NetworkResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    name: str
    driver: str
    subnet: str
