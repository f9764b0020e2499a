"""Tests for domain models and events."""

import pytest
from pydantic import ValidationError

from cloudmap_registry.domain.enums import WatchAction
from cloudmap_registry.domain.events import InstanceCreated, InstanceRemoved, InstanceUpdated
from cloudmap_registry.domain.models import DirectoryInstance, Node, Service
from tests.builders import make_service


class TestService:
    """Test the Service model."""

    def test_instance_id_is_first_node_id(self):
        service = make_service(instance_id="orders-7")
        assert service.instance_id == "orders-7"

    def test_instance_id_none_without_nodes(self):
        assert Service(name="orders").instance_id is None

    def test_name_required(self):
        with pytest.raises(ValidationError):
            Service(name="")

    def test_extra_fields_rejected(self):
        with pytest.raises(ValidationError):
            Service(name="orders", owner="team-a")

    def test_defaults(self):
        service = Service(name="orders")
        assert service.version == ""
        assert service.metadata == {}
        assert service.endpoints == []
        assert service.nodes == []


class TestNode:
    """Test the Node model."""

    def test_node_requires_id(self):
        with pytest.raises(ValidationError):
            Node(id="")

    def test_port_range(self):
        with pytest.raises(ValidationError):
            Node(id="a", port=70000)


class TestDirectoryInstance:
    def test_default_health_unknown(self):
        instance = DirectoryInstance(instance_id="i-1", service_name="orders")
        assert instance.health_status == "UNKNOWN"
        assert instance.attributes == {}


class TestWatchEvents:
    """Test the change event variants."""

    def test_actions(self):
        service = make_service()
        assert InstanceCreated(service=service).action == WatchAction.CREATE
        assert InstanceUpdated(service=service).action == WatchAction.UPDATE
        assert InstanceRemoved(service=service).action == WatchAction.DELETE

    def test_action_serializes_as_string(self):
        event = InstanceRemoved(service=make_service())
        assert event.model_dump(mode="json")["action"] == "delete"

    def test_event_exposes_instance_id(self):
        event = InstanceCreated(service=make_service(instance_id="orders-3"))
        assert event.instance_id == "orders-3"

    def test_events_are_immutable(self):
        event = InstanceCreated(service=make_service())
        with pytest.raises(ValidationError):
            event.service = make_service(instance_id="other")
