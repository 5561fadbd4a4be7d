from pathlib import Path
from typing import List

from pydantic import ConfigDict, Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    ZDOCKER_ROOT: Path = Field(
        default=Path("/var/lib/zdocker"),
        description="Root directory of the container runtime"
    )

    CONTAINER_STATE_DIR: Path = Field(
        default=Path("/var/run/zdocker"),
        description="One sub-directory per container, each holding its JSON record"
    )

    CONFIG_FILE_NAME: str = "config.json"

    RUNTIME_BINARY: str = Field(
        default="zdocker",
        description="Executable every container/network operation is delegated to"
    )

    COMMAND_TIMEOUT_SECONDS: float = 30.0

    # Polling for the record of a freshly created container
    CREATE_POLL_TIMEOUT_SECONDS: float = 5.0
    CREATE_POLL_INTERVAL_SECONDS: float = 0.1
    CREATE_NAME_MARKER: str = "container"

    RECONCILE_INTERVAL_SECONDS: float = 0.0  # 0 disables the background loop

    CORS_ORIGINS: List[str] = ["http://localhost:5173", "http://localhost:3000"]

    HOST: str = "0.0.0.0"
    PORT: int = 8080
    LOG_LEVEL: str = "INFO"

    MEMINFO_PATH: Path = Path("/proc/meminfo")

    model_config = ConfigDict(
        env_file=".env"
    )
