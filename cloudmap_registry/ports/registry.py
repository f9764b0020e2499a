"""Registry port - Interface offered to applications."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from ..domain.events import WatchEvent
from ..domain.models import Service

if TYPE_CHECKING:
    from ..infrastructure.config import RegistryConfig, WatchOptions


class WatcherPort(ABC):
    """Stream of change events for one watched service."""

    @abstractmethod
    async def next(self) -> WatchEvent:
        """Wait for the next change event.

        Raises:
            WatcherStoppedError: Once the watcher has been stopped
        """
        ...

    @abstractmethod
    def stop(self) -> None:
        """Stop producing events. Idempotent."""
        ...


class RegistryPort(ABC):
    """Abstract interface for service registration and discovery."""

    @abstractmethod
    def init(self, config: RegistryConfig) -> None:
        """(Re)configure the registry.

        Raises:
            ConfigurationMissingError: If namespace id or domain is missing
        """
        ...

    @property
    @abstractmethod
    def options(self) -> RegistryConfig:
        """Active configuration."""
        ...

    @abstractmethod
    async def register(self, service: Service) -> None:
        """Register the first node of a service, skipping redundant writes.

        Raises:
            InvalidArgumentError: If the service has no nodes
            DirectoryUnavailableError: If the directory call fails
        """
        ...

    @abstractmethod
    async def deregister(self, service: Service) -> None:
        """Deregister the first node of a service.

        Raises:
            InvalidArgumentError: If the service has no nodes
            DirectoryUnavailableError: If the directory call fails
        """
        ...

    @abstractmethod
    async def get_service(self, name: str) -> list[Service]:
        """Get one single-node Service per healthy instance of ``name``."""
        ...

    @abstractmethod
    async def list_services(self) -> list[Service]:
        """List all services known to the directory (names only)."""
        ...

    @abstractmethod
    async def watch(self, options: WatchOptions | None = None) -> WatcherPort:
        """Start watching a service for instance changes."""
        ...
