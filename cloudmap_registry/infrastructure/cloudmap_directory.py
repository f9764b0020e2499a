"""AWS Cloud Map implementation of the Service Directory port."""

from __future__ import annotations

import asyncio
import uuid
from collections.abc import Callable
from typing import Any, TypeVar

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from ..domain.enums import HealthStatus
from ..domain.exceptions import DirectoryUnavailableError
from ..domain.models import DirectoryInstance, DirectoryService
from ..ports.logger import LoggerPort
from ..ports.service_directory import ServiceDirectoryPort

T = TypeVar("T")


class CloudMapServiceDirectory(ServiceDirectoryPort):
    """Service directory backed by the boto3 ``servicediscovery`` client.

    boto3 clients are blocking, so every call runs in a worker thread. boto3
    clients are thread-safe, which makes this adapter safe for concurrent
    callers.
    """

    def __init__(
        self,
        namespace_id: str,
        client: Any | None = None,
        dns_ttl: int = 60,
        logger: LoggerPort | None = None,
    ):
        """Initialize the Cloud Map directory.

        Args:
            namespace_id: Namespace in which new services are created
            client: Optional pre-built ``servicediscovery`` client
            dns_ttl: TTL of the SRV record created with each service
            logger: Optional logger for debugging
        """
        self._namespace_id = namespace_id
        self._client = client or boto3.client("servicediscovery")
        self._dns_ttl = dns_ttl
        self._logger = logger

    async def _call(self, operation: str, func: Callable[..., T], **kwargs: Any) -> T:
        try:
            return await asyncio.to_thread(func, **kwargs)
        except (BotoCoreError, ClientError) as e:
            if self._logger:
                self._logger.error(
                    "Cloud Map call failed",
                    operation=operation,
                    error=str(e),
                )
            raise DirectoryUnavailableError(
                f"Cloud Map {operation} failed: {e}",
                operation=operation,
            ) from e

    def _list_services_pages(self) -> list[DirectoryService]:
        services: list[DirectoryService] = []
        paginator = self._client.get_paginator("list_services")
        for page in paginator.paginate():
            for summary in page.get("Services", []):
                services.append(DirectoryService(id=summary["Id"], name=summary["Name"]))
        return services

    async def list_services(self) -> list[DirectoryService]:
        return await self._call("list_services", self._list_services_pages)

    async def create_service(self, name: str) -> str:
        response = await self._call(
            "create_service",
            self._client.create_service,
            Name=name,
            NamespaceId=self._namespace_id,
            CreatorRequestId=str(uuid.uuid4()),
            DnsConfig={"DnsRecords": [{"Type": "SRV", "TTL": self._dns_ttl}]},
        )
        service_id = response["Service"]["Id"]

        if self._logger:
            self._logger.info("Created Cloud Map service", service=name, service_id=service_id)

        return service_id

    async def register_instance(
        self, service_id: str, instance_id: str, attributes: dict[str, str]
    ) -> None:
        await self._call(
            "register_instance",
            self._client.register_instance,
            ServiceId=service_id,
            InstanceId=instance_id,
            CreatorRequestId=str(uuid.uuid4()),
            Attributes=attributes,
        )

    async def deregister_instance(self, service_id: str, instance_id: str) -> None:
        await self._call(
            "deregister_instance",
            self._client.deregister_instance,
            ServiceId=service_id,
            InstanceId=instance_id,
        )

    async def discover_instances(
        self, namespace_name: str, service_name: str
    ) -> list[DirectoryInstance]:
        response = await self._call(
            "discover_instances",
            self._client.discover_instances,
            NamespaceName=namespace_name,
            ServiceName=service_name,
        )

        instances = []
        for item in response.get("Instances", []):
            health = item.get("HealthStatus", HealthStatus.UNKNOWN.value)
            if health == HealthStatus.UNHEALTHY.value:
                continue
            instances.append(
                DirectoryInstance(
                    instance_id=item["InstanceId"],
                    service_name=item.get("ServiceName", ""),
                    health_status=health,
                    attributes=dict(item.get("Attributes", {})),
                )
            )
        return instances
