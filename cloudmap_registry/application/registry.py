"""Cloud Map backed service registry."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable
from typing import TypeVar

from ..domain.enums import HealthStatus
from ..domain.exceptions import (
    DirectoryUnavailableError,
    InvalidArgumentError,
    ServiceNotFoundError,
)
from ..domain.models import Service
from ..domain.services import registration_hash
from ..infrastructure.attribute_codec import decode_instance, encode_attributes
from ..infrastructure.cloudmap_directory import CloudMapServiceDirectory
from ..infrastructure.config import RegistryConfig, WatchOptions
from ..infrastructure.registration_cache import RegistrationCache
from ..infrastructure.service_name_sanitizer import ServiceNameSanitizer
from ..infrastructure.simple_logger import SimpleLogger
from ..infrastructure.system_clock import SystemClock
from ..ports.clock import ClockPort
from ..ports.logger import LoggerPort
from ..ports.registry import RegistryPort
from ..ports.service_directory import ServiceDirectoryPort
from .watcher import ServiceWatcher

T = TypeVar("T")


class CloudMapRegistry(RegistryPort):
    """Service registry on top of a pull-only service directory.

    Registration is debounced: an unchanged service registered again within
    the debounce window causes no directory write. Watching is done by
    polling, see ServiceWatcher.

    Every service name is sanitized exactly once per call, and the sanitized
    name is the key used for the registration cache and for directory lookups.
    """

    def __init__(
        self,
        config: RegistryConfig | None = None,
        directory: ServiceDirectoryPort | None = None,
        cache: RegistrationCache | None = None,
        clock: ClockPort | None = None,
        logger: LoggerPort | None = None,
    ):
        """Initialize the registry.

        Args:
            config: Registry configuration; read from the environment if None
            directory: Service directory; a Cloud Map client is built if None
            cache: Registration cache; a fresh one is created if None
            clock: Time source for the debounce window
            logger: Optional logger

        Raises:
            ConfigurationMissingError: If namespace id or domain is missing
        """
        self._logger = logger or SimpleLogger()
        self._clock = clock or SystemClock()
        self._directory = directory
        self._cache = cache
        self._owns_directory = directory is None
        self._owns_cache = cache is None
        self.init(config or RegistryConfig())

    def init(self, config: RegistryConfig) -> None:
        """Apply a configuration.

        A directory or cache built by the registry is rebuilt from the new
        config, which resets the registration cache. Injected ones are kept.

        Raises:
            ConfigurationMissingError: If namespace id or domain is missing
        """
        self._config = config.require_namespace()

        if self._owns_directory:
            self._directory = CloudMapServiceDirectory(
                namespace_id=config.namespace_id,
                dns_ttl=config.dns_ttl,
                logger=self._logger,
            )
        if self._owns_cache:
            self._cache = RegistrationCache(config.debounce)

    @property
    def options(self) -> RegistryConfig:
        return self._config

    @property
    def cache(self) -> RegistrationCache:
        return self._cache  # type: ignore[return-value]

    def __str__(self) -> str:
        return "cloudmap"

    async def _call(self, operation: str, awaitable: Awaitable[T]) -> T:
        """Await a directory call within the configured timeout."""
        timeout = self._config.request_timeout
        try:
            return await asyncio.wait_for(awaitable, timeout=timeout)
        except TimeoutError as e:
            raise DirectoryUnavailableError(
                f"Directory {operation} timed out after {timeout}s",
                operation=operation,
            ) from e

    async def register(self, service: Service) -> None:
        if not service.nodes:
            raise InvalidArgumentError(
                "Require at least one node", details={"service_name": service.name}
            )

        name = ServiceNameSanitizer.sanitize(service.name)
        content_hash = registration_hash(service)
        node = service.nodes[0]

        if await self.cache.is_fresh(name, content_hash, self._clock.now()):
            self._logger.debug("Registration unchanged, skipping write", service=name)
            return

        # TODO: re-assert liveness once instance health checks exist
        try:
            service_id = await self._resolve_service_id(name, create=True)
            await self._call(
                "register_instance",
                self._directory.register_instance(  # type: ignore[union-attr]
                    service_id, node.id, encode_attributes(service, node)
                ),
            )
        except DirectoryUnavailableError as e:
            self._logger.error(
                "Failed to register service instance",
                service=name,
                instance=node.id,
                error=str(e),
            )
            raise

        await self.cache.commit(name, content_hash, self._clock.now(), service_id)
        self._logger.info(
            "Service instance registered",
            service=name,
            instance=node.id,
            service_id=service_id,
        )

    async def deregister(self, service: Service) -> None:
        if not service.nodes:
            raise InvalidArgumentError(
                "Require at least one node", details={"service_name": service.name}
            )

        name = ServiceNameSanitizer.sanitize(service.name)
        node = service.nodes[0]

        # Forgotten before the remote call, so a failed deregister is not retried.
        await self.cache.forget(name)

        try:
            service_id = await self._resolve_service_id(name, create=False)
            await self._call(
                "deregister_instance",
                self._directory.deregister_instance(service_id, node.id),  # type: ignore[union-attr]
            )
        except (DirectoryUnavailableError, ServiceNotFoundError) as e:
            self._logger.error(
                "Failed to deregister service instance",
                service=name,
                instance=node.id,
                error=str(e),
            )
            raise

        self._logger.info("Service instance deregistered", service=name, instance=node.id)

    async def get_service(self, name: str) -> list[Service]:
        return await self._fetch_services(ServiceNameSanitizer.sanitize(name))

    async def list_services(self) -> list[Service]:
        summaries = await self._call(
            "list_services",
            self._directory.list_services(),  # type: ignore[union-attr]
        )
        return [Service(name=summary.name) for summary in summaries]

    async def watch(self, options: WatchOptions | None = None) -> ServiceWatcher:
        options = options or WatchOptions()
        service_name = ServiceNameSanitizer.sanitize(options.service) if options.service else None

        watcher = ServiceWatcher(
            service_name,
            fetch=self._fetch_services,
            poll_interval=options.poll_interval,
            queue_size=self._config.watch_queue_size,
            logger=self._logger,
        )
        watcher.start()
        return watcher

    async def _fetch_services(self, directory_name: str) -> list[Service]:
        """Discover healthy instances under an already sanitized name."""
        instances = await self._call(
            "discover_instances",
            self._directory.discover_instances(  # type: ignore[union-attr]
                self._config.domain, directory_name
            ),
        )

        services = []
        for instance in instances:
            if instance.service_name != directory_name:
                continue
            if instance.health_status == HealthStatus.UNHEALTHY.value:
                continue

            service = decode_instance(instance)
            if service is None:
                self._logger.debug(
                    "Skipping instance with unusable port",
                    service=directory_name,
                    instance=instance.instance_id,
                )
                continue
            services.append(service)

        return services

    async def _resolve_service_id(self, name: str, create: bool) -> str:
        """Find the directory-side id for a sanitized name.

        Uses the cached id when present, then looks the name up in the
        directory, and finally creates the service when ``create`` is set.

        Raises:
            ServiceNotFoundError: If the service does not exist and
                ``create`` is False
        """
        service_id = await self.cache.service_id(name)
        if service_id:
            return service_id

        summaries = await self._call(
            "list_services",
            self._directory.list_services(),  # type: ignore[union-attr]
        )
        for summary in summaries:
            if summary.name == name:
                return summary.id

        if not create:
            raise ServiceNotFoundError(name)

        service_id = await self._call(
            "create_service",
            self._directory.create_service(name),  # type: ignore[union-attr]
        )
        self._logger.info("Created directory service", service=name, service_id=service_id)
        return service_id


def new_registry(
    config: RegistryConfig | None = None,
    directory: ServiceDirectoryPort | None = None,
    logger: LoggerPort | None = None,
) -> CloudMapRegistry:
    """Create a Cloud Map registry.

    Raises:
        ConfigurationMissingError: If namespace id or domain is missing
    """
    return CloudMapRegistry(config=config, directory=directory, logger=logger)
