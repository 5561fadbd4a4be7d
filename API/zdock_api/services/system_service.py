import logging
import os
import platform
from pathlib import Path

import aiofiles

from zdock_api.domain.system import SystemInfo, VersionInfo
from zdock_api.services.runtime_proxy import RuntimeCommandProxy

logger = logging.getLogger(__name__)

API_VERSION = "1.0"
BUILD_DATE = "2024-01-01"


def parse_mem_total(meminfo: str) -> str:
    for line in meminfo.splitlines():
        if line.startswith("MemTotal:"):
            fields = line.split()
            if len(fields) >= 2:
                return f"{fields[1]} kB"
            break
    return "Unknown"


class SystemService:
    def __init__(self, runtime: RuntimeCommandProxy, zdocker_root: Path, meminfo_path: Path = Path("/proc/meminfo")):
        self.runtime = runtime
        self.zdocker_root = zdocker_root
        self.meminfo_path = meminfo_path

    async def info(self) -> SystemInfo:
        return SystemInfo(
            os=platform.system().lower(),
            architecture=platform.machine(),
            cpus=os.cpu_count() or 1,
            memory=await self._total_memory(),
            zdocker_root=str(self.zdocker_root),
        )

    async def version(self) -> VersionInfo:
        return VersionInfo(
            version=await self.runtime.version(),
            api_version=API_VERSION,
            build_date=BUILD_DATE,
        )

    async def _total_memory(self) -> str:
        try:
            async with aiofiles.open(self.meminfo_path, "r") as f:
                return parse_mem_total(await f.read())
        except OSError as e:
            logger.debug("[SYSTEM] Cannot read %s: %s", self.meminfo_path, e)
            return "Unknown"
