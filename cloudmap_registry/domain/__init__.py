"""Domain layer - Core models, events and change detection."""

from .enums import HealthStatus, WatchAction, WatcherState
from .events import InstanceCreated, InstanceRemoved, InstanceUpdated, WatchEvent
from .exceptions import (
    ConfigurationMissingError,
    DirectoryUnavailableError,
    InvalidArgumentError,
    RegistryError,
    ServiceNotFoundError,
    WatcherStoppedError,
)
from .models import (
    DirectoryInstance,
    DirectoryService,
    Endpoint,
    Node,
    Service,
    ServiceSnapshot,
    Value,
)
from .services import (
    SnapshotDiff,
    content_hash,
    diff_snapshots,
    iter_changes,
    registration_hash,
    to_snapshot,
)

__all__ = [
    "ConfigurationMissingError",
    "DirectoryInstance",
    "DirectoryService",
    "DirectoryUnavailableError",
    "Endpoint",
    "HealthStatus",
    "InstanceCreated",
    "InstanceRemoved",
    "InstanceUpdated",
    "InvalidArgumentError",
    "Node",
    "RegistryError",
    "Service",
    "ServiceNotFoundError",
    "ServiceSnapshot",
    "SnapshotDiff",
    "Value",
    "WatchAction",
    "WatchEvent",
    "WatcherState",
    "WatcherStoppedError",
    "content_hash",
    "diff_snapshots",
    "iter_changes",
    "registration_hash",
    "to_snapshot",
]
