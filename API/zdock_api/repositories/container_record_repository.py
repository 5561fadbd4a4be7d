import json
import logging
from pathlib import Path
from typing import Any, Dict, List
from uuid import uuid4

import aiofiles
import aiofiles.os

from zdock_api.domain.container import ContainerRecord
from zdock_api.domain.errors import (
    DirectoryUnavailable,
    RecordCorrupt,
    RecordUnreadable,
    RecordWriteFailed,
)
from zdock_api.domain.ports import ContainerRecordStore

logger = logging.getLogger(__name__)

# JSON key -> ContainerRecord attribute
_FIELDS = {
    "id": "id",
    "name": "name",
    "command": "command",
    "status": "status",
    "pid": "pid",
    "createTime": "create_time",
    "volume": "volume",
    "image": "image",
}

# Written only when the record has them
_OPTIONAL = {"image"}


def record_from_document(name: str, doc: Dict[str, Any]) -> ContainerRecord:
    values = {attr: _as_text(doc.get(key)) for key, attr in _FIELDS.items()}
    if not values["name"]:
        values["name"] = name

    ports = doc.get("portMapping")
    if ports is None:
        port_mapping = []
    elif isinstance(ports, str):
        port_mapping = [p for p in ports.split(",") if p]
    elif isinstance(ports, list):
        port_mapping = [str(p) for p in ports]
    else:
        raise RecordCorrupt(name, f"portMapping has unexpected type {type(ports).__name__}")

    extra = {k: v for k, v in doc.items() if k not in _FIELDS and k != "portMapping"}
    return ContainerRecord(port_mapping=port_mapping, extra=extra, source=dict(doc), **values)


def record_to_document(record: ContainerRecord) -> Dict[str, Any]:
    doc: Dict[str, Any] = dict(record.extra)
    for key, attr in _FIELDS.items():
        value = getattr(record, attr)
        if key in _OPTIONAL and not value and key not in record.source:
            continue
        doc[key] = value

    if isinstance(record.source.get("portMapping"), str):
        doc["portMapping"] = ",".join(record.port_mapping)
    elif record.port_mapping or "portMapping" in record.source or not record.source:
        doc["portMapping"] = list(record.port_mapping)
    return doc


def _as_text(value: Any) -> str:
    # The runtime writes pids as strings, older records may carry numbers
    if value is None:
        return ""
    return str(value)


class FileContainerRecordRepository(ContainerRecordStore):
    """Container records stored as ``<root>/<name>/<config_name>``."""

    def __init__(self, root: Path, config_name: str = "config.json"):
        self.root = Path(root)
        self.config_name = config_name

    def record_path(self, name: str) -> Path:
        return self.root / name / self.config_name

    async def list_entries(self) -> List[str]:
        try:
            names = await aiofiles.os.listdir(self.root)
        except FileNotFoundError:
            raise DirectoryUnavailable(str(self.root), "does not exist", missing=True)
        except OSError as exc:
            raise DirectoryUnavailable(str(self.root), exc.strerror or str(exc))

        entries = []
        for name in names:
            if await aiofiles.os.path.isdir(self.root / name):
                entries.append(name)
        return entries

    async def read_record(self, name: str) -> ContainerRecord:
        path = self.record_path(name)
        try:
            async with aiofiles.open(path, "r", encoding="utf-8") as f:
                content = await f.read()
        except UnicodeDecodeError as exc:
            raise RecordCorrupt(name, f"not valid UTF-8: {exc}")
        except OSError as exc:
            raise RecordUnreadable(name, exc.strerror or str(exc))

        try:
            doc = json.loads(content)
        except json.JSONDecodeError as exc:
            raise RecordCorrupt(name, f"invalid JSON: {exc}")
        if not isinstance(doc, dict):
            raise RecordCorrupt(name, "document is not a JSON object")

        return record_from_document(name, doc)

    async def write_record(self, name: str, record: ContainerRecord) -> None:
        """
        Replace the record file in one step: write a sibling temp file, then
        rename it over the original so readers never see a partial document.
        """
        path = self.record_path(name)
        tmp_path = path.with_name(f".{self.config_name}.{uuid4().hex}.tmp")
        content = json.dumps(record_to_document(record))

        try:
            async with aiofiles.open(tmp_path, "w", encoding="utf-8") as f:
                await f.write(content)
            await aiofiles.os.replace(tmp_path, path)
        except OSError as exc:
            try:
                await aiofiles.os.remove(tmp_path)
            except OSError:
                pass
            raise RecordWriteFailed(name, exc.strerror or str(exc))

        logger.debug("[STORE] Rewrote %s", path)
