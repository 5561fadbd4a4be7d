import json
from pathlib import Path

import pytest

from zdock_api.domain.ports import CommandResult
from zdock_api.repositories.container_record_repository import FileContainerRecordRepository
from zdock_api.services.container_directory import ContainerDirectory
from zdock_api.services.reconciler import StateReconciler


class FakeProbe:
    """Liveness probe that knows a fixed set of live pids."""

    def __init__(self, alive=()):
        self.alive = set(alive)
        self.calls = []

    def is_running(self, pid: str) -> bool:
        self.calls.append(pid)
        return pid in self.alive


def ok(output: str = "", args=None) -> CommandResult:
    return CommandResult(args=args or [], exit_code=0, output=output)


def failed(output: str = "", exit_code: int = 1) -> CommandResult:
    return CommandResult(args=[], exit_code=exit_code, output=output)


def write_config(root: Path, name: str, /, **fields) -> Path:
    doc = {
        "id": f"id-{name}",
        "name": name,
        "command": "top",
        "status": "running",
        "pid": "",
        "createTime": "2024-01-01 10:00:00",
        "volume": "",
        "portMapping": [],
    }
    doc.update(fields)
    container_dir = root / name
    container_dir.mkdir(parents=True, exist_ok=True)
    path = container_dir / "config.json"
    path.write_text(json.dumps(doc), encoding="utf-8")
    return path


def read_config(root: Path, name: str) -> dict:
    return json.loads((root / name / "config.json").read_text(encoding="utf-8"))


@pytest.fixture
def state_root(tmp_path):
    root = tmp_path / "containers"
    root.mkdir()
    return root


@pytest.fixture
def store(state_root):
    return FileContainerRecordRepository(state_root)


@pytest.fixture
def probe():
    return FakeProbe(alive={"4242"})


@pytest.fixture
def directory(store, probe):
    return ContainerDirectory(store, StateReconciler(store, probe))
