"""Pytest configuration and shared fixtures."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from cloudmap_registry.domain.models import Endpoint, Value
from cloudmap_registry.infrastructure.config import RegistryConfig
from cloudmap_registry.infrastructure.in_memory_directory import InMemoryServiceDirectory
from cloudmap_registry.ports.logger import LoggerPort
from cloudmap_registry.ports.service_directory import ServiceDirectoryPort
from tests.builders import FakeClock


@pytest.fixture(autouse=True)
def clean_cloudmap_env(monkeypatch):
    """Keep the host environment out of configuration."""
    monkeypatch.delenv("MICRO_CLOUDMAP_NAMESPACE_ID", raising=False)
    monkeypatch.delenv("MICRO_CLOUDMAP_DOMAIN", raising=False)


@pytest.fixture
def fake_clock():
    return FakeClock()


@pytest.fixture
def mock_logger():
    """Create a mock logger."""
    return MagicMock(spec=LoggerPort)


@pytest.fixture
def registry_config():
    return RegistryConfig(namespace_id="ns-1234", domain="local", request_timeout=1.0)


@pytest.fixture
def mock_directory():
    """Create a mock service directory with an empty namespace."""
    directory = AsyncMock(spec=ServiceDirectoryPort)
    directory.list_services.return_value = []
    directory.create_service.return_value = "srv-orders"
    directory.register_instance.return_value = None
    directory.deregister_instance.return_value = None
    directory.discover_instances.return_value = []
    return directory


@pytest.fixture
def in_memory_directory():
    return InMemoryServiceDirectory(namespace_name="local")


@pytest.fixture
def sample_endpoints():
    return [
        Endpoint(
            name="Orders.Create",
            request=Value(
                name="CreateRequest",
                type="CreateRequest",
                values=[Value(name="sku", type="string")],
            ),
            response=Value(name="CreateResponse", type="CreateResponse"),
            metadata={"stream": "false"},
        ),
        Endpoint(name="Orders.Get"),
    ]
