from dataclasses import dataclass
from typing import List, Protocol, Sequence

from zdock_api.domain.container import ContainerRecord


@dataclass
class CommandResult:
    args: List[str]
    exit_code: int
    output: str

    @property
    def ok(self) -> bool:
        return self.exit_code == 0


class ContainerRecordStore(Protocol):
    async def list_entries(self) -> List[str]:
        """Names of the container directories under the state root."""
        ...

    async def read_record(self, name: str) -> ContainerRecord: ...

    async def write_record(self, name: str, record: ContainerRecord) -> None: ...


class LivenessProbe(Protocol):
    def is_running(self, pid: str) -> bool:
        """Check whether the process with this pid still exists."""
        ...


class CommandRunner(Protocol):
    async def run(self, args: Sequence[str]) -> CommandResult:
        """Run the container runtime with these arguments and capture combined output."""
        ...
