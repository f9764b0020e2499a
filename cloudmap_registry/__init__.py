"""cloudmap-registry - Service registry and polling watcher for AWS Cloud Map."""

from .application.registry import CloudMapRegistry, new_registry
from .application.watcher import ServiceWatcher
from .infrastructure.config import RegistryConfig, WatchOptions

__all__ = ["CloudMapRegistry", "RegistryConfig", "ServiceWatcher", "WatchOptions", "new_registry"]
__version__ = "0.1.0"
