"""Tests for service name sanitization."""

from cloudmap_registry.infrastructure.service_name_sanitizer import ServiceNameSanitizer


class TestServiceNameSanitizer:
    """Test the ServiceNameSanitizer utility."""

    def test_plain_name_unchanged(self):
        assert ServiceNameSanitizer.sanitize("orders") == "orders"

    def test_topic_marker_replaced(self):
        assert ServiceNameSanitizer.sanitize("topic:orders") == "topic-orders"

    def test_topic_marker_replaced_once(self):
        assert ServiceNameSanitizer.sanitize("topic:orders:topic:x") == "topic-orders:topic:x"

    def test_topic_marker_only_as_prefix(self):
        assert ServiceNameSanitizer.sanitize("orders.topic:x") == "orders.topic:x"

    def test_broker_name_hashed(self):
        sanitized = ServiceNameSanitizer.sanitize("broker-10.0.0.1:9000")
        assert sanitized.startswith("broker-")
        assert sanitized != "broker-10.0.0.1:9000"
        suffix = sanitized.removeprefix("broker-")
        assert len(suffix) == 16
        int(suffix, 16)

    def test_broker_hash_is_deterministic(self):
        name = "broker-tcp://10.0.0.1:9000"
        assert ServiceNameSanitizer.sanitize(name) == ServiceNameSanitizer.sanitize(name)

    def test_distinct_broker_names_differ(self):
        first = ServiceNameSanitizer.sanitize("broker-a")
        second = ServiceNameSanitizer.sanitize("broker-b")
        assert first != second

    def test_sanitizing_twice_changes_broker_names(self):
        once = ServiceNameSanitizer.sanitize("broker-a")
        assert ServiceNameSanitizer.sanitize(once) != once

    def test_sanitized_topic_name_is_stable(self):
        once = ServiceNameSanitizer.sanitize("topic:orders")
        assert ServiceNameSanitizer.sanitize(once) == once
