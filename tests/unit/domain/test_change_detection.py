"""Tests for content hashing and snapshot comparison."""

from cloudmap_registry.domain.events import InstanceCreated, InstanceRemoved, InstanceUpdated
from cloudmap_registry.domain.models import Endpoint, Node, Service
from cloudmap_registry.domain.services import (
    content_hash,
    diff_snapshots,
    iter_changes,
    registration_hash,
    to_snapshot,
)
from tests.builders import make_service


def v1(instance_id: str) -> Service:
    return make_service(instance_id=instance_id, version="1.0.0")


def v2(instance_id: str) -> Service:
    return make_service(instance_id=instance_id, version="2.0.0")


class TestContentHash:
    """Test content hashing."""

    def test_equal_values_hash_equal(self):
        assert content_hash(v1("a")) == content_hash(v1("a"))

    def test_content_change_changes_hash(self):
        assert content_hash(v1("a")) != content_hash(v2("a"))

    def test_metadata_key_order_ignored(self):
        first = make_service(metadata={"zone": "a", "tier": "web"})
        second = make_service(metadata={"tier": "web", "zone": "a"})
        assert content_hash(first) == content_hash(second)

    def test_endpoint_order_ignored(self):
        first = Service(name="orders", endpoints=[Endpoint(name="A"), Endpoint(name="B")])
        second = Service(name="orders", endpoints=[Endpoint(name="B"), Endpoint(name="A")])
        assert registration_hash(first) == registration_hash(second)

    def test_registration_hash_ignores_service_metadata(self):
        first = make_service()
        second = first.model_copy(update={"metadata": {"owner": "team-a"}})
        assert registration_hash(first) == registration_hash(second)

    def test_registration_hash_ignores_extra_nodes(self):
        first = make_service()
        second = first.model_copy(
            update={"nodes": [*first.nodes, Node(id="orders-2", address="10.0.0.2", port=8080)]}
        )
        assert registration_hash(first) == registration_hash(second)

    def test_registration_hash_covers_written_node(self):
        first = make_service(metadata={"zone": "a"})
        second = make_service(metadata={"zone": "b"})
        assert registration_hash(first) != registration_hash(second)

    def test_address_is_content(self):
        first = make_service(address="10.0.0.1")
        second = make_service(address="10.0.0.2")
        assert content_hash(first) != content_hash(second)

    def test_hash_is_hex_digest(self):
        digest = content_hash(v1("a"))
        assert len(digest) == 64
        int(digest, 16)


class TestToSnapshot:
    def test_keys_by_instance_id(self):
        snapshot = to_snapshot([v1("a"), v1("b")])
        assert set(snapshot) == {"a", "b"}
        assert snapshot["a"].instance_id == "a"

    def test_skips_services_without_nodes(self):
        assert to_snapshot([Service(name="orders")]) == {}

    def test_later_duplicate_wins(self):
        snapshot = to_snapshot([v1("a"), v2("a")])
        assert snapshot["a"].version == "2.0.0"


class TestDiffSnapshots:
    """Test snapshot comparison."""

    def test_added_instance_is_created(self):
        diff = diff_snapshots({"A": v1("A")}, {"A": v1("A"), "B": v1("B")})
        assert diff.created == ("B",)
        assert diff.updated == ()
        assert diff.removed == ()

    def test_changed_and_missing_instances(self):
        diff = diff_snapshots({"A": v1("A"), "B": v1("B")}, {"A": v2("A")})
        assert diff.created == ()
        assert diff.updated == ("A",)
        assert diff.removed == ("B",)

    def test_identical_snapshots_have_no_changes(self):
        snapshot = {"A": v1("A"), "B": v2("B")}
        diff = diff_snapshots(snapshot, dict(snapshot))
        assert diff.is_empty
        assert list(iter_changes(snapshot, snapshot)) == []

    def test_empty_to_empty(self):
        assert diff_snapshots({}, {}).is_empty

    def test_everything_removed(self):
        diff = diff_snapshots({"A": v1("A"), "B": v1("B")}, {})
        assert set(diff.removed) == {"A", "B"}

    def test_categories_are_disjoint(self):
        previous = {"A": v1("A"), "B": v1("B"), "C": v1("C")}
        current = {"A": v2("A"), "C": v1("C"), "D": v1("D")}
        diff = diff_snapshots(previous, current)
        ids = diff.created + diff.updated + diff.removed
        assert sorted(ids) == ["A", "B", "D"]
        assert len(ids) == len(set(ids))


class TestIterChanges:
    """Test event emission order and payloads."""

    def test_created_and_updated_follow_current_order_then_removed(self):
        previous = {"A": v1("A"), "B": v1("B")}
        current = {"C": v1("C"), "A": v2("A")}

        events = list(iter_changes(previous, current))

        assert [type(e) for e in events] == [InstanceCreated, InstanceUpdated, InstanceRemoved]
        assert [e.instance_id for e in events] == ["C", "A", "B"]

    def test_updated_carries_new_value(self):
        events = list(iter_changes({"A": v1("A")}, {"A": v2("A")}))
        assert events[0].service.version == "2.0.0"

    def test_removed_carries_old_value(self):
        events = list(iter_changes({"A": v1("A")}, {}))
        assert isinstance(events[0], InstanceRemoved)
        assert events[0].service.version == "1.0.0"

    def test_node_metadata_change_is_update(self):
        old = Service(name="orders", nodes=[Node(id="A", metadata={"zone": "a"})])
        new = Service(name="orders", nodes=[Node(id="A", metadata={"zone": "b"})])
        events = list(iter_changes({"A": old}, {"A": new}))
        assert len(events) == 1
        assert isinstance(events[0], InstanceUpdated)
