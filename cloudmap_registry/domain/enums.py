"""Domain enums for type safety and consistency."""

from enum import Enum


class WatchAction(str, Enum):
    """Kind of change reported by a watcher."""

    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"


class WatcherState(str, Enum):
    """Lifecycle of a watcher.

    CREATED -> POLLING -> STOPPED, where STOPPED is terminal and may be
    entered from any state.
    """

    CREATED = "CREATED"
    POLLING = "POLLING"
    STOPPED = "STOPPED"


class HealthStatus(str, Enum):
    """Health status reported by the directory for an instance."""

    HEALTHY = "HEALTHY"
    UNHEALTHY = "UNHEALTHY"
    UNKNOWN = "UNKNOWN"
