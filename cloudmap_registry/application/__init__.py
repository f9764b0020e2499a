"""Application layer - Registry and watcher orchestration."""

from .registry import CloudMapRegistry, new_registry
from .watcher import ServiceWatcher

__all__ = ["CloudMapRegistry", "ServiceWatcher", "new_registry"]
