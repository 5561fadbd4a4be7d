from dataclasses import dataclass, field
from typing import Any, Dict, List

STATUS_RUNNING = "running"
STATUS_EXITED = "exited"


@dataclass
class ContainerRecord:
    id: str
    name: str
    command: str = ""
    status: str = STATUS_EXITED
    pid: str = ""
    create_time: str = ""
    volume: str = ""
    port_mapping: List[str] = field(default_factory=list)
    image: str = ""
    extra: Dict[str, Any] = field(default_factory=dict)  # keys we don't model, kept on rewrite
    # The document as read, so a rewrite keeps the runtime's own key set and shapes
    source: Dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    @property
    def claims_running(self) -> bool:
        return self.status == STATUS_RUNNING and self.pid != ""


@dataclass(frozen=True)
class ContainerSummary:
    id: str
    name: str
    image: str
    command: str
    status: str
    created_time: str
    pid: str
    volume: str
    port_mapping: str

    @classmethod
    def from_record(cls, record: ContainerRecord) -> "ContainerSummary":
        return cls(
            id=record.id,
            name=record.name,
            image=record.image,
            command=record.command,
            status=record.status,
            created_time=record.create_time,
            pid=record.pid,
            volume=record.volume,
            port_mapping=",".join(record.port_mapping),
        )


@dataclass
class ContainerListing:
    """Result of one enumeration pass, including the entries that were dropped."""
    containers: List[ContainerSummary] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)
    write_failures: List[str] = field(default_factory=list)
    corrected: List[str] = field(default_factory=list)


@dataclass
class CreateContainerSpec:
    image: str
    command: str
    name: str = ""
    detach: bool = False
    tty: bool = False
    volume: str = ""
    memory: str = ""
    cpu_share: str = ""
    cpu_set: str = ""
    network: str = ""
    environment: Dict[str, str] = field(default_factory=dict)
    port_mapping: List[str] = field(default_factory=list)


@dataclass
class ExecResult:
    output: str
    exit_code: int
