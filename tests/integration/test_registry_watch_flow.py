"""End-to-end registry flow against the in-memory directory."""

import pytest

from cloudmap_registry import CloudMapRegistry, WatchOptions
from cloudmap_registry.domain.enums import HealthStatus
from cloudmap_registry.domain.events import InstanceCreated, InstanceRemoved, InstanceUpdated
from tests.builders import make_service

pytestmark = [pytest.mark.integration, pytest.mark.asyncio]


@pytest.fixture
def registry(registry_config, in_memory_directory, fake_clock, mock_logger):
    return CloudMapRegistry(
        config=registry_config,
        directory=in_memory_directory,
        clock=fake_clock,
        logger=mock_logger,
    )


async def test_register_watch_and_deregister(registry, in_memory_directory):
    await registry.register(make_service(instance_id="orders-1"))
    await registry.register(make_service(instance_id="orders-2", address="10.0.0.2"))

    async with await registry.watch(WatchOptions(service="orders")) as watcher:
        assert await watcher.poll() == 2
        created = [await watcher.next(), await watcher.next()]
        assert all(isinstance(e, InstanceCreated) for e in created)
        assert {e.instance_id for e in created} == {"orders-1", "orders-2"}

        await registry.register(make_service(instance_id="orders-1", version="2.0.0"))
        assert await watcher.poll() == 1
        updated = await watcher.next()
        assert isinstance(updated, InstanceUpdated)
        assert updated.service.version == "2.0.0"

        await registry.deregister(make_service(instance_id="orders-2"))
        assert await watcher.poll() == 1
        removed = await watcher.next()
        assert isinstance(removed, InstanceRemoved)
        assert removed.instance_id == "orders-2"


async def test_unhealthy_instance_reported_as_removed(registry, in_memory_directory):
    await registry.register(make_service(instance_id="orders-1"))
    service_id = await registry.cache.service_id("orders")

    async with await registry.watch(WatchOptions(service="orders")) as watcher:
        assert await watcher.poll() == 1
        await watcher.next()

        in_memory_directory.set_health_status(service_id, "orders-1", HealthStatus.UNHEALTHY)

        assert await watcher.poll() == 1
        event = await watcher.next()
        assert isinstance(event, InstanceRemoved)


async def test_registered_services_are_listed_and_found(registry):
    await registry.register(make_service(name="orders"))
    await registry.register(make_service(name="topic:billing", instance_id="billing-1"))

    names = {s.name for s in await registry.list_services()}
    assert names == {"orders", "topic-billing"}

    found = await registry.get_service("topic:billing")
    assert [s.instance_id for s in found] == ["billing-1"]
    assert found[0].nodes[0].port == 8080
