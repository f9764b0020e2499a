"""Concurrency-safe store of the last observed snapshot per service."""

from __future__ import annotations

import asyncio

from ..domain.models import ServiceSnapshot


class SnapshotStore:
    """Holds the snapshot from the most recent successful poll.

    Readers receive a shallow copy, so a snapshot handed out is never
    mutated by a later replace. Snapshots are only ever replaced whole.
    """

    def __init__(self) -> None:
        self._lock = asyncio.Lock()
        self._snapshots: dict[str, ServiceSnapshot] = {}

    async def get(self, service_name: str) -> ServiceSnapshot:
        """Copy of the cached snapshot, empty if the service was never polled."""
        async with self._lock:
            return dict(self._snapshots.get(service_name, {}))

    async def replace(self, service_name: str, snapshot: ServiceSnapshot) -> None:
        async with self._lock:
            self._snapshots[service_name] = dict(snapshot)
