from dataclasses import dataclass


@dataclass(frozen=True)
class NetworkInfo:
    name: str
    driver: str = ""
    subnet: str = ""


@dataclass
class CreateNetworkSpec:
    name: str
    driver: str = ""
    subnet: str = ""


DEFAULT_NETWORK = NetworkInfo(name="bridge", driver="bridge", subnet="172.17.0.0/16")
