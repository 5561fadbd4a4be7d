from dataclasses import dataclass


@dataclass
class SystemInfo:
    os: str
    architecture: str
    cpus: int
    memory: str
    zdocker_root: str


@dataclass
class VersionInfo:
    version: str
    api_version: str
    build_date: str
