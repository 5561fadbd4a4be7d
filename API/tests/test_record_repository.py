import os

import pytest

from conftest import read_config, write_config
from zdock_api.domain.container import ContainerRecord
from zdock_api.domain.errors import (
    DirectoryUnavailable,
    RecordCorrupt,
    RecordUnreadable,
    RecordWriteFailed,
)
from zdock_api.repositories.container_record_repository import FileContainerRecordRepository


@pytest.mark.asyncio
async def test_list_entries_returns_only_directories(store, state_root):
    write_config(state_root, "web")
    write_config(state_root, "db")
    (state_root / "stray.txt").write_text("not a container")

    assert sorted(await store.list_entries()) == ["db", "web"]


@pytest.mark.asyncio
async def test_list_entries_missing_root(tmp_path):
    store = FileContainerRecordRepository(tmp_path / "nope")

    with pytest.raises(DirectoryUnavailable) as exc_info:
        await store.list_entries()
    assert exc_info.value.missing is True


@pytest.mark.asyncio
async def test_list_entries_root_is_a_file(tmp_path):
    root = tmp_path / "file"
    root.write_text("")
    store = FileContainerRecordRepository(root)

    with pytest.raises(DirectoryUnavailable) as exc_info:
        await store.list_entries()
    assert exc_info.value.missing is False


@pytest.mark.asyncio
async def test_read_record_maps_fields(store, state_root):
    write_config(
        state_root, "web",
        id="abc123", pid="4242", volume="/data:/data",
        portMapping=["8080:80", "8443:443"], image="busybox",
    )

    record = await store.read_record("web")

    assert record.id == "abc123"
    assert record.name == "web"
    assert record.status == "running"
    assert record.pid == "4242"
    assert record.create_time == "2024-01-01 10:00:00"
    assert record.volume == "/data:/data"
    assert record.port_mapping == ["8080:80", "8443:443"]
    assert record.image == "busybox"


@pytest.mark.asyncio
async def test_read_record_tolerates_numeric_pid_and_string_ports(store, state_root):
    write_config(state_root, "web", pid=4242, portMapping="8080:80,9090:90")

    record = await store.read_record("web")

    assert record.pid == "4242"
    assert record.port_mapping == ["8080:80", "9090:90"]


@pytest.mark.asyncio
async def test_read_record_missing_file(store, state_root):
    (state_root / "ghost").mkdir()

    with pytest.raises(RecordUnreadable):
        await store.read_record("ghost")


@pytest.mark.asyncio
@pytest.mark.parametrize("content", ["{not json", "[1, 2, 3]", ""])
async def test_read_record_corrupt(store, state_root, content):
    (state_root / "broken").mkdir()
    (state_root / "broken" / "config.json").write_text(content)

    with pytest.raises(RecordCorrupt):
        await store.read_record("broken")


@pytest.mark.asyncio
async def test_read_record_invalid_utf8(store, state_root):
    (state_root / "binary").mkdir()
    (state_root / "binary" / "config.json").write_bytes(b"\xff\xfe{}")

    with pytest.raises(RecordCorrupt):
        await store.read_record("binary")


@pytest.mark.asyncio
async def test_write_record_preserves_unknown_keys(store, state_root):
    write_config(state_root, "web", pid="4242", cgroupPath="/sys/fs/cgroup/web")

    record = await store.read_record("web")
    record.status = "exited"
    record.pid = ""
    await store.write_record("web", record)

    doc = read_config(state_root, "web")
    assert doc["status"] == "exited"
    assert doc["pid"] == ""
    assert doc["cgroupPath"] == "/sys/fs/cgroup/web"
    assert doc["createTime"] == "2024-01-01 10:00:00"
    assert os.listdir(state_root / "web") == ["config.json"]


@pytest.mark.asyncio
async def test_write_record_missing_directory(store):
    with pytest.raises(RecordWriteFailed):
        await store.write_record("gone", ContainerRecord(id="x", name="gone"))


@pytest.mark.asyncio
async def test_write_record_keeps_the_runtime_document_shape(store, state_root):
    write_config(state_root, "web", pid="100", portMapping="8080:80,9090:90")

    record = await store.read_record("web")
    record.status = "exited"
    record.pid = ""
    await store.write_record("web", record)

    doc = read_config(state_root, "web")
    assert "image" not in doc
    assert doc["portMapping"] == "8080:80,9090:90"
    assert doc["status"] == "exited"
