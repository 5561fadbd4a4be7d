# zdock_api/services/container_service.py
import logging
from typing import List, Sequence

from zdock_api.domain.container import ContainerSummary, CreateContainerSpec, ExecResult
from zdock_api.domain.errors import ContainerNotFound
from zdock_api.services.container_directory import ContainerDirectory
from zdock_api.services.runtime_proxy import RuntimeCommandProxy

logger = logging.getLogger(__name__)


class ContainerService:
    """Umbrella service that exposes all container operations for the API."""

    def __init__(self, directory: ContainerDirectory, runtime: RuntimeCommandProxy):
        self.directory = directory
        self.runtime = runtime

    # -------------------------------
    # Reads
    # -------------------------------
    async def list_containers(self) -> List[ContainerSummary]:
        return await self.directory.list_all()

    async def get_container(self, key: str) -> ContainerSummary:
        return await self.directory.find_by_id_or_name(key)

    # -------------------------------
    # Lifecycle
    # -------------------------------
    async def create_container(self, spec: CreateContainerSpec) -> ContainerSummary:
        return await self.runtime.create(spec)

    async def start_container(self, key: str) -> ContainerSummary:
        """
        The runtime has no start subcommand: containers run from creation
        until they exit. Starting only confirms the container exists.
        """
        container = await self.directory.find_by_id_or_name(key)
        logger.info("[START] %s is %s, nothing to do", container.name, container.status)
        return container

    async def stop_container(self, key: str) -> None:
        await self.runtime.stop(await self._resolve_name(key))

    async def remove_container(self, key: str) -> None:
        await self.runtime.remove(await self._resolve_name(key))

    async def container_logs(self, key: str) -> str:
        return await self.runtime.logs(await self._resolve_name(key))

    async def exec_in_container(self, key: str, argv: Sequence[str]) -> ExecResult:
        return await self.runtime.exec(await self._resolve_name(key), argv)

    async def _resolve_name(self, key: str) -> str:
        """
        The runtime addresses containers by name. Map an id to its name when a
        record matches; otherwise hand the key to the runtime unchanged so
        containers with unreadable records can still be stopped or removed.
        """
        try:
            return (await self.directory.find_by_id_or_name(key)).name
        except ContainerNotFound:
            return key
