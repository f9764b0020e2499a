"""Service Directory port - Interface to the remote discovery backend."""

from __future__ import annotations

from abc import ABC, abstractmethod

from ..domain.models import DirectoryInstance, DirectoryService


class ServiceDirectoryPort(ABC):
    """Abstract interface for a pull-only service directory.

    Implementations must be safe for concurrent callers. Every failure is
    reported as DirectoryUnavailableError.
    """

    @abstractmethod
    async def list_services(self) -> list[DirectoryService]:
        """List every service in the directory.

        Pagination, if the backend uses it, is handled internally.

        Returns:
            One summary per directory service

        Raises:
            DirectoryUnavailableError: If the directory call fails
        """
        ...

    @abstractmethod
    async def create_service(self, name: str) -> str:
        """Create a service record.

        Args:
            name: Sanitized service name

        Returns:
            Directory-side service id

        Raises:
            DirectoryUnavailableError: If the directory call fails
        """
        ...

    @abstractmethod
    async def register_instance(
        self, service_id: str, instance_id: str, attributes: dict[str, str]
    ) -> None:
        """Create or replace an instance record under a service.

        Args:
            service_id: Directory-side service id
            instance_id: Instance identifier
            attributes: Opaque text attributes describing the instance

        Raises:
            DirectoryUnavailableError: If the directory call fails
        """
        ...

    @abstractmethod
    async def deregister_instance(self, service_id: str, instance_id: str) -> None:
        """Remove an instance record.

        Raises:
            DirectoryUnavailableError: If the directory call fails
        """
        ...

    @abstractmethod
    async def discover_instances(
        self, namespace_name: str, service_name: str
    ) -> list[DirectoryInstance]:
        """Discover the healthy instances of a service.

        Instances reporting an UNHEALTHY status are dropped here and never
        reach the caller.

        Args:
            namespace_name: Domain name of the discovery namespace
            service_name: Sanitized service name

        Returns:
            Healthy instance records

        Raises:
            DirectoryUnavailableError: If the directory call fails
        """
        ...
