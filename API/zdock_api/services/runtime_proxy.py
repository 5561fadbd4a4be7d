import logging
from typing import List, Sequence

from zdock_api.domain.container import ContainerSummary, CreateContainerSpec, ExecResult
from zdock_api.domain.errors import (
    CommandFailed,
    CommandInvocationFailed,
    CommandTimedOut,
    CreateFailed,
    NameUnresolved,
)
from zdock_api.domain.network import DEFAULT_NETWORK, CreateNetworkSpec, NetworkInfo
from zdock_api.domain.ports import CommandRunner
from zdock_api.services.container_directory import ContainerDirectory

logger = logging.getLogger(__name__)


def build_run_args(spec: CreateContainerSpec) -> List[str]:
    args = ["run"]

    if spec.detach:
        args.append("-d")
    if spec.tty:
        args.append("-t")
    if spec.name:
        args += ["--name", spec.name]
    if spec.volume:
        args += ["-v", spec.volume]
    if spec.memory:
        args += ["-m", spec.memory]
    if spec.cpu_share:
        args += ["--cpushare", spec.cpu_share]
    if spec.cpu_set:
        args += ["--cpuset", spec.cpu_set]
    if spec.network:
        args += ["--net", spec.network]

    for key, value in spec.environment.items():
        args += ["-e", f"{key}={value}"]
    for port in spec.port_mapping:
        args += ["-p", port]

    args.append(spec.image)
    args += spec.command.split()
    return args


def find_generated_name(output: str, marker: str = "container") -> str | None:
    """
    Recover a generated container name from ``run`` output: the word after a
    bare ``marker`` ("created container 7f3a9c"), or a word prefixed with
    ``marker-`` ("container-7f3a9c").
    """
    for line in output.splitlines():
        words = line.split()
        for i, word in enumerate(words):
            if word == marker:
                if i + 1 < len(words):
                    return words[i + 1]
            elif word.startswith(marker + "-"):
                return word
    return None


def parse_network_list(output: str) -> List[NetworkInfo]:
    networks = []
    for line in output.splitlines():
        if not line.strip() or "NAME" in line:
            continue
        fields = line.split()
        if len(fields) >= 3:
            networks.append(NetworkInfo(name=fields[0], driver=fields[1], subnet=fields[2]))
    return networks


class RuntimeCommandProxy:
    """Maps container and network operations onto runtime CLI invocations."""

    def __init__(
        self,
        runner: CommandRunner,
        directory: ContainerDirectory,
        *,
        create_timeout: float = 5.0,
        create_poll_interval: float = 0.1,
        name_marker: str = "container",
    ):
        self.runner = runner
        self.directory = directory
        self.create_timeout = create_timeout
        self.create_poll_interval = create_poll_interval
        self.name_marker = name_marker

    # -------------------------------
    # Containers
    # -------------------------------
    async def create(self, spec: CreateContainerSpec) -> ContainerSummary:
        result = await self.runner.run(build_run_args(spec))
        if not result.ok:
            raise CreateFailed(result.output, result.exit_code)

        name = spec.name or find_generated_name(result.output, self.name_marker)
        if not name:
            raise NameUnresolved(result.output)

        # The runtime writes the record asynchronously, poll until it appears
        container = await self.directory.wait_for(
            name, timeout=self.create_timeout, interval=self.create_poll_interval
        )
        logger.info("[CREATE] Container %s created from %s", container.name, spec.image)
        return container

    async def stop(self, name: str) -> None:
        await self._check("stop", ["stop", name])

    async def remove(self, name: str) -> None:
        await self._check("remove", ["rm", name])

    async def logs(self, name: str) -> str:
        return await self._check("logs", ["logs", name])

    async def exec(self, name: str, argv: Sequence[str]) -> ExecResult:
        """A non-zero exit is a normal result; only failing to invoke raises."""
        result = await self.runner.run(["exec", name, *argv])
        return ExecResult(output=result.output, exit_code=result.exit_code)

    # -------------------------------
    # Networks
    # -------------------------------
    async def network_list(self) -> List[NetworkInfo]:
        try:
            output = await self._check("network list", ["network", "list"])
        except (CommandFailed, CommandInvocationFailed, CommandTimedOut) as exc:
            logger.warning("[NETWORK] Listing failed, reporting default network: %s", exc)
            return [DEFAULT_NETWORK]
        return parse_network_list(output)

    async def network_create(self, spec: CreateNetworkSpec) -> NetworkInfo:
        args = ["network", "create"]
        if spec.driver:
            args += ["--driver", spec.driver]
        if spec.subnet:
            args += ["--subnet", spec.subnet]
        args.append(spec.name)

        await self._check("network create", args)
        return NetworkInfo(name=spec.name, driver=spec.driver, subnet=spec.subnet)

    async def network_remove(self, network_id: str) -> None:
        await self._check("network remove", ["network", "remove", network_id])

    # -------------------------------
    # Misc
    # -------------------------------
    async def version(self) -> str:
        try:
            result = await self.runner.run(["--version"])
        except (CommandInvocationFailed, CommandTimedOut):
            return "unknown"
        return result.output.strip() if result.ok else "unknown"

    async def _check(self, op: str, args: List[str]) -> str:
        result = await self.runner.run(args)
        if not result.ok:
            raise CommandFailed(op, result.output, result.exit_code)
        return result.output
