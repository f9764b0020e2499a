"""In-memory debounce state for service registrations."""

from __future__ import annotations

import asyncio
from datetime import datetime, timedelta

from pydantic import BaseModel, ConfigDict, Field

from .config import DEFAULT_DEBOUNCE_WINDOW


class RegistrationRecord(BaseModel):
    """What the cache knows about one sanitized service name."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    service_name: str = Field(..., min_length=1)
    last_hash: str | None = Field(default=None)
    last_checked_at: datetime | None = Field(default=None)
    directory_service_id: str | None = Field(default=None)

    def is_fresh(self, content_hash: str, now: datetime, window: timedelta) -> bool:
        """True when ``content_hash`` was written less than ``window`` ago."""
        if self.last_hash is None or self.last_checked_at is None:
            return False
        return self.last_hash == content_hash and now - self.last_checked_at < window


class RegistrationCache:
    """Per-registry cache of the last successful write for each service.

    Holds three maps keyed by sanitized service name: content hash, last
    check time and directory service id. One lock guards all three and is
    only held while the maps are read or mutated, never across a directory
    call. Two concurrent registrations of the same name may therefore both
    write; the last commit wins.
    """

    def __init__(self, debounce_window: timedelta | None = None):
        if debounce_window is None:
            debounce_window = timedelta(seconds=DEFAULT_DEBOUNCE_WINDOW)
        self._window = debounce_window
        self._lock = asyncio.Lock()
        self._hashes: dict[str, str] = {}
        self._service_ids: dict[str, str] = {}
        self._last_checked: dict[str, datetime] = {}

    @property
    def debounce_window(self) -> timedelta:
        return self._window

    async def get(self, service_name: str) -> RegistrationRecord | None:
        """Get a consistent copy of the record for a name, if any."""
        async with self._lock:
            return self._record(service_name)

    async def is_fresh(self, service_name: str, content_hash: str, now: datetime) -> bool:
        """Whether a write of ``content_hash`` for this name can be skipped."""
        record = await self.get(service_name)
        if record is None:
            return False
        return record.is_fresh(content_hash, now, self._window)

    async def service_id(self, service_name: str) -> str | None:
        async with self._lock:
            return self._service_ids.get(service_name)

    async def commit(
        self, service_name: str, content_hash: str, checked_at: datetime, service_id: str
    ) -> RegistrationRecord:
        """Record a successful write; hash, time and id are replaced together."""
        async with self._lock:
            self._hashes[service_name] = content_hash
            self._last_checked[service_name] = checked_at
            self._service_ids[service_name] = service_id
            return self._record(service_name)  # type: ignore[return-value]

    async def forget(self, service_name: str) -> None:
        """Drop the hash and check time so the next register writes again.

        The resolved directory service id is kept.
        """
        async with self._lock:
            self._hashes.pop(service_name, None)
            self._last_checked.pop(service_name, None)

    def _record(self, service_name: str) -> RegistrationRecord | None:
        if (
            service_name not in self._hashes
            and service_name not in self._service_ids
            and service_name not in self._last_checked
        ):
            return None
        return RegistrationRecord(
            service_name=service_name,
            last_hash=self._hashes.get(service_name),
            last_checked_at=self._last_checked.get(service_name),
            directory_service_id=self._service_ids.get(service_name),
        )
