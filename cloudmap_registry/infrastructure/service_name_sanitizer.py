"""Service name sanitization for Cloud Map compatibility.

Cloud Map service names must be valid DNS labels, so a few naming
conventions used by messaging components have to be rewritten before a name
reaches the directory.
"""

import hashlib
from typing import ClassVar


class ServiceNameSanitizer:
    """Maps logical service names to directory-legal names.

    Rules, first match wins:

    1. ``topic:<name>`` becomes ``topic-<name>`` (marker replaced once).
    2. ``broker-<anything>`` becomes ``broker-`` followed by a hash of the whole
       original name. The mapping is one-way.
    3. Anything else is returned unchanged.

    Sanitize a name exactly once per operation: a broker name that has
    already been sanitized still carries the broker prefix and would be
    hashed a second time.
    """

    TOPIC_MARKER: ClassVar[str] = "topic:"
    TOPIC_REPLACEMENT: ClassVar[str] = "topic-"
    BROKER_MARKER: ClassVar[str] = "broker-"
    BROKER_DIGEST_SIZE: ClassVar[int] = 8

    @classmethod
    def sanitize(cls, name: str) -> str:
        """Sanitize a logical service name.

        Args:
            name: The logical service name

        Returns:
            The directory-legal service name
        """
        if name.startswith(cls.TOPIC_MARKER):
            return name.replace(cls.TOPIC_MARKER, cls.TOPIC_REPLACEMENT, 1)

        if name.startswith(cls.BROKER_MARKER):
            return cls.BROKER_MARKER + cls._digest(name)

        return name

    @classmethod
    def _digest(cls, name: str) -> str:
        return hashlib.blake2b(name.encode("utf-8"), digest_size=cls.BROKER_DIGEST_SIZE).hexdigest()
