import logging
from dataclasses import dataclass, replace
from typing import Tuple

from zdock_api.domain.container import STATUS_EXITED, ContainerRecord
from zdock_api.domain.errors import RecordWriteFailed
from zdock_api.domain.ports import ContainerRecordStore, LivenessProbe

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Reconciliation:
    record: ContainerRecord
    changed: bool
    persisted: bool = True


class StateReconciler:
    """Brings a record's status in line with whether its process still exists."""

    def __init__(self, store: ContainerRecordStore, probe: LivenessProbe):
        self.store = store
        self.probe = probe

    async def reconcile(self, record: ContainerRecord, entry: str | None = None) -> Tuple[ContainerRecord, bool]:
        result = await self.reconcile_detailed(record, entry)
        return result.record, result.changed

    async def reconcile_detailed(self, record: ContainerRecord, entry: str | None = None) -> Reconciliation:
        """
        A running record whose pid is gone is rewritten as exited with an
        empty pid and persisted. Anything else is returned as-is.

        ``entry`` is the directory the record was read from; the correction
        is written back there even when the document names another container.

        If persisting fails the corrected record is still returned with
        ``persisted=False``; the file keeps its last known content and the
        next pass tries again.
        """
        if not record.claims_running or self.probe.is_running(record.pid):
            return Reconciliation(record, changed=False)

        corrected = replace(record, status=STATUS_EXITED, pid="")
        try:
            await self.store.write_record(entry or record.name, corrected)
        except RecordWriteFailed as exc:
            logger.warning("[RECONCILE] %s", exc)
            return Reconciliation(corrected, changed=True, persisted=False)

        logger.info("[RECONCILE] Container %s (pid %s) is gone, marked exited", record.name, record.pid)
        return Reconciliation(corrected, changed=True)
