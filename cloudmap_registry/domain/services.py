"""Domain services for change detection.

These are pure functions over domain models: content hashing, snapshot
construction and snapshot comparison. They hold no state and perform no I/O.
"""

from __future__ import annotations

import hashlib
import json
from collections.abc import Iterable, Iterator
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from .events import InstanceCreated, InstanceRemoved, InstanceUpdated, WatchEvent
from .models import Service, ServiceSnapshot


def _canonical(value: Any) -> Any:
    """Normalise a dumped model so that list order does not affect the hash."""
    if isinstance(value, dict):
        return {key: _canonical(item) for key, item in value.items()}
    if isinstance(value, list):
        items = [_canonical(item) for item in value]
        return sorted(items, key=lambda item: json.dumps(item, sort_keys=True))
    return value


def content_hash(model: BaseModel) -> str:
    """Compute a deterministic, order-independent hash of a model's content.

    Mapping keys are sorted and list elements are ordered by their own
    canonical form, so two values that differ only in ordering hash equal.
    The hash is used for change detection only, never as an identity.

    Args:
        model: Any pydantic model, typically a Service

    Returns:
        Hex-encoded SHA-256 digest
    """
    canonical = _canonical(model.model_dump(mode="json"))
    payload = json.dumps(canonical, sort_keys=True, separators=(",", ":"))
    return hashlib.sha256(payload.encode("utf-8")).hexdigest()


def registration_hash(service: Service) -> str:
    """Hash of what a registration writes: name, version, endpoints and the first node.

    Service-level metadata and any further nodes never reach the directory,
    so they do not take part.
    """
    written = Service(
        name=service.name,
        version=service.version,
        endpoints=service.endpoints,
        nodes=service.nodes[:1],
    )
    return content_hash(written)


def to_snapshot(services: Iterable[Service]) -> ServiceSnapshot:
    """Build an instance-id keyed snapshot from single-node services.

    Services without nodes carry no identity and are left out.
    """
    snapshot: ServiceSnapshot = {}
    for service in services:
        instance_id = service.instance_id
        if instance_id is None:
            continue
        snapshot[instance_id] = service
    return snapshot


def iter_changes(previous: ServiceSnapshot, current: ServiceSnapshot) -> Iterator[WatchEvent]:
    """Yield one event per changed instance between two snapshots.

    Created and updated events come first, in ``current`` iteration order;
    removed events follow, in ``previous`` iteration order. Unchanged
    instances yield nothing.
    """
    for instance_id, service in current.items():
        old = previous.get(instance_id)
        if old is None:
            yield InstanceCreated(service=service)
        elif content_hash(old) != content_hash(service):
            yield InstanceUpdated(service=service)

    for instance_id, old in previous.items():
        if instance_id not in current:
            yield InstanceRemoved(service=old)


class SnapshotDiff(BaseModel):
    """Result of comparing two snapshots, as disjoint id sets."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    created: tuple[str, ...] = Field(default=())
    updated: tuple[str, ...] = Field(default=())
    removed: tuple[str, ...] = Field(default=())

    @property
    def is_empty(self) -> bool:
        return not (self.created or self.updated or self.removed)


def diff_snapshots(previous: ServiceSnapshot, current: ServiceSnapshot) -> SnapshotDiff:
    """Compare two snapshots into created, updated and removed instance ids."""
    created: list[str] = []
    updated: list[str] = []
    removed: list[str] = []

    for event in iter_changes(previous, current):
        instance_id = event.instance_id or ""
        match event:
            case InstanceCreated():
                created.append(instance_id)
            case InstanceUpdated():
                updated.append(instance_id)
            case InstanceRemoved():
                removed.append(instance_id)

    return SnapshotDiff(created=tuple(created), updated=tuple(updated), removed=tuple(removed))
