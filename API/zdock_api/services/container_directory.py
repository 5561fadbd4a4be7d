import asyncio
import logging
import time
from typing import List

from zdock_api.domain.container import ContainerListing, ContainerSummary
from zdock_api.domain.errors import (
    ContainerNotFound,
    CreationTimedOut,
    DirectoryUnavailable,
    RecordError,
)
from zdock_api.domain.ports import ContainerRecordStore
from zdock_api.services.reconciler import StateReconciler

logger = logging.getLogger(__name__)

MAX_POLL_INTERVAL = 1.0


class ContainerDirectory:
    """
    Read side of the container core. Every call goes back to disk; nothing is
    cached between requests.
    """

    def __init__(self, store: ContainerRecordStore, reconciler: StateReconciler):
        self.store = store
        self.reconciler = reconciler
        self._reconcile_task: asyncio.Task | None = None

    # -------------------------------
    # Listing / lookup
    # -------------------------------
    async def list_all(self) -> List[ContainerSummary]:
        listing = await self.list_all_with_report()
        return listing.containers

    async def list_all_with_report(self) -> ContainerListing:
        """
        Read and reconcile every record. Entries that can't be read or parsed
        are left out and reported in ``skipped``; a missing state root is an
        empty listing.
        """
        listing = ContainerListing()
        try:
            entries = await self.store.list_entries()
        except DirectoryUnavailable as exc:
            if exc.missing:
                return listing
            raise

        for name in sorted(entries):
            try:
                record = await self.store.read_record(name)
            except RecordError as exc:
                # Includes entries deleted by the runtime while we were listing
                logger.warning("[LIST] Skipping %s: %s", name, exc)
                listing.skipped.append(name)
                continue

            result = await self.reconciler.reconcile_detailed(record, entry=name)
            if result.changed:
                listing.corrected.append(name)
            if not result.persisted:
                listing.write_failures.append(name)
            listing.containers.append(ContainerSummary.from_record(result.record))

        listing.containers.sort(key=lambda c: c.name)
        return listing

    async def find_by_id_or_name(self, key: str) -> ContainerSummary:
        for container in await self.list_all():
            if container.id == key or container.name == key:
                return container
        raise ContainerNotFound(key)

    async def wait_for(self, key: str, timeout: float, interval: float = 0.1) -> ContainerSummary:
        """Poll until a record for ``key`` shows up, backing off between attempts."""
        deadline = time.monotonic() + timeout
        delay = interval
        while True:
            try:
                return await self.find_by_id_or_name(key)
            except ContainerNotFound:
                remaining = deadline - time.monotonic()
                if remaining <= 0:
                    raise CreationTimedOut(key, timeout)
                await asyncio.sleep(min(delay, remaining))
                delay = min(delay * 2, MAX_POLL_INTERVAL)

    # --------------------------------------------------------
    #
    #       RECONCILIATION LOOP
    #
    # --------------------------------------------------------
    def start_reconciliation_loop(self, interval: float) -> None:
        """
        Start a background task that reconciles all records every ``interval``
        seconds, so drift is repaired even when nobody lists containers.
        """
        if self._reconcile_task is None or self._reconcile_task.done():
            self._reconcile_task = asyncio.create_task(self._reconcile_loop(interval))

    async def stop_reconciliation_loop(self) -> None:
        task, self._reconcile_task = self._reconcile_task, None
        if task is None:
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass

    async def _reconcile_loop(self, interval: float):
        while True:
            try:
                listing = await self.list_all_with_report()
                if listing.corrected or listing.skipped:
                    logger.info(
                        "[RECONCILE] %d corrected, %d skipped, %d unsaved",
                        len(listing.corrected), len(listing.skipped), len(listing.write_failures),
                    )
            except Exception as e:
                logger.error("[RECONCILE ERROR] %s", e)
            await asyncio.sleep(interval)
