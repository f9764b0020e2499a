"""Configuration objects for the registry and its watchers."""

from __future__ import annotations

from datetime import timedelta

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..domain.exceptions import ConfigurationMissingError

MINIMUM_POLL_INTERVAL = 30.0
DEFAULT_POLL_INTERVAL = 60.0
DEFAULT_DEBOUNCE_WINDOW = 60.0
DEFAULT_QUEUE_SIZE = 10


class RegistryConfig(BaseSettings):
    """Registry settings.

    Values passed explicitly take precedence over the process environment,
    where every field is read with the ``MICRO_CLOUDMAP_`` prefix
    (``MICRO_CLOUDMAP_NAMESPACE_ID``, ``MICRO_CLOUDMAP_DOMAIN``, ...).
    """

    model_config = SettingsConfigDict(
        env_prefix="MICRO_CLOUDMAP_",
        extra="ignore",
        validate_assignment=True,
    )

    namespace_id: str = Field(
        default="",
        description="Cloud Map namespace id used when creating services",
    )
    domain: str = Field(
        default="",
        description="Namespace domain name used when discovering instances",
    )
    dns_ttl: int = Field(default=60, ge=0, description="TTL of the SRV record created per service")
    request_timeout: float = Field(
        default=30.0,
        gt=0,
        description="Upper bound in seconds for any single directory call",
    )
    debounce_window: float = Field(
        default=DEFAULT_DEBOUNCE_WINDOW,
        ge=0,
        description="Seconds during which an unchanged registration is not rewritten",
    )
    watch_queue_size: int = Field(
        default=DEFAULT_QUEUE_SIZE,
        ge=1,
        description="Capacity of each watcher's event queue",
    )

    @property
    def debounce(self) -> timedelta:
        return timedelta(seconds=self.debounce_window)

    def require_namespace(self) -> RegistryConfig:
        """Check that the namespace options are present.

        Raises:
            ConfigurationMissingError: If namespace id or domain is empty
        """
        missing = []
        if not self.namespace_id:
            missing.append("namespace_id")
        if not self.domain:
            missing.append("domain")
        if missing:
            raise ConfigurationMissingError(missing)
        return self


class WatchOptions(BaseModel):
    """Options for a single watch."""

    model_config = ConfigDict(
        extra="forbid",
        str_strip_whitespace=True,
        validate_assignment=True,
    )

    service: str | None = Field(
        default=None,
        description="Logical name of the service to watch; None means all services",
    )
    poll_interval: float = Field(
        default=DEFAULT_POLL_INTERVAL,
        description="Seconds between polls, never below 30",
    )

    @field_validator("service")
    @classmethod
    def empty_service_means_all(cls, v: str | None) -> str | None:
        return v or None

    @field_validator("poll_interval")
    @classmethod
    def clamp_poll_interval(cls, v: float) -> float:
        """Raise intervals below the floor to the floor."""
        return max(v, MINIMUM_POLL_INTERVAL)
