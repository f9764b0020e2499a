"""In-memory implementation of the Service Directory port.

Used for development and tests where no Cloud Map namespace is available.
"""

from __future__ import annotations

import uuid

from ..domain.enums import HealthStatus
from ..domain.exceptions import DirectoryUnavailableError
from ..domain.models import DirectoryInstance, DirectoryService
from ..ports.service_directory import ServiceDirectoryPort


class InMemoryServiceDirectory(ServiceDirectoryPort):
    """Dict-backed service directory for testing."""

    def __init__(self, namespace_name: str = "local") -> None:
        self._namespace_name = namespace_name
        self._services: dict[str, str] = {}  # id -> name
        # Key is service id, then instance id
        self._instances: dict[str, dict[str, DirectoryInstance]] = {}

    async def list_services(self) -> list[DirectoryService]:
        return [DirectoryService(id=sid, name=name) for sid, name in self._services.items()]

    async def create_service(self, name: str) -> str:
        service_id = f"srv-{uuid.uuid4().hex[:16]}"
        self._services[service_id] = name
        self._instances[service_id] = {}
        return service_id

    async def register_instance(
        self, service_id: str, instance_id: str, attributes: dict[str, str]
    ) -> None:
        if service_id not in self._services:
            raise DirectoryUnavailableError(
                f"Service {service_id} not found", operation="register_instance"
            )
        self._instances[service_id][instance_id] = DirectoryInstance(
            instance_id=instance_id,
            service_name=self._services[service_id],
            health_status=HealthStatus.HEALTHY.value,
            attributes=dict(attributes),
        )

    async def deregister_instance(self, service_id: str, instance_id: str) -> None:
        instances = self._instances.get(service_id)
        if instances is None or instance_id not in instances:
            raise DirectoryUnavailableError(
                f"Instance {instance_id} not found in service {service_id}",
                operation="deregister_instance",
            )
        del instances[instance_id]

    async def discover_instances(
        self, namespace_name: str, service_name: str
    ) -> list[DirectoryInstance]:
        if namespace_name != self._namespace_name:
            raise DirectoryUnavailableError(
                f"Namespace {namespace_name} not found", operation="discover_instances"
            )
        return [
            instance
            for sid, name in self._services.items()
            if name == service_name
            for instance in self._instances[sid].values()
            if instance.health_status != HealthStatus.UNHEALTHY.value
        ]

    def set_health_status(self, service_id: str, instance_id: str, status: HealthStatus) -> None:
        """Override the health status reported for an instance."""
        instance = self._instances[service_id][instance_id]
        self._instances[service_id][instance_id] = instance.model_copy(
            update={"health_status": status.value}
        )

    def clear(self) -> None:
        """Clear all stored services (useful for testing)."""
        self._services.clear()
        self._instances.clear()
