"""Infrastructure layer - Concrete implementations of ports."""

from .cloudmap_directory import CloudMapServiceDirectory
from .config import RegistryConfig, WatchOptions
from .in_memory_directory import InMemoryServiceDirectory
from .registration_cache import RegistrationCache, RegistrationRecord
from .service_name_sanitizer import ServiceNameSanitizer
from .simple_logger import SimpleLogger
from .snapshot_store import SnapshotStore
from .system_clock import SystemClock

__all__ = [
    "CloudMapServiceDirectory",
    "InMemoryServiceDirectory",
    "RegistrationCache",
    "RegistrationRecord",
    "RegistryConfig",
    "ServiceNameSanitizer",
    "SimpleLogger",
    "SnapshotStore",
    "SystemClock",
    "WatchOptions",
]
