"""Domain models using Pydantic for validation."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class Value(BaseModel):
    """Shape of an endpoint request or response, possibly nested."""

    model_config = ConfigDict(extra="forbid", validate_assignment=True)

    name: str = Field(default="", description="Field name")
    type: str = Field(default="", description="Type name")
    values: list[Value] = Field(default_factory=list, description="Nested fields")


class Endpoint(BaseModel):
    """A named endpoint exposed by a service."""

    model_config = ConfigDict(
        extra="forbid",
        validate_assignment=True,
        json_schema_extra={
            "example": {
                "name": "Orders.Create",
                "request": {"name": "CreateRequest", "type": "CreateRequest", "values": []},
                "response": None,
                "metadata": {"stream": "false"},
            }
        },
    )

    name: str = Field(..., min_length=1, description="Endpoint name")
    request: Value | None = Field(default=None, description="Request shape")
    response: Value | None = Field(default=None, description="Response shape")
    metadata: dict[str, str] = Field(default_factory=dict, description="Endpoint metadata")


class Node(BaseModel):
    """A single running endpoint of a service."""

    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True, validate_assignment=True)

    id: str = Field(..., min_length=1, description="Instance identifier, unique within a service")
    address: str = Field(default="", description="IPv4 address")
    port: int = Field(default=0, ge=0, le=65535, description="Port number")
    metadata: dict[str, str] = Field(default_factory=dict, description="Instance metadata")


class Service(BaseModel):
    """A registerable service value.

    A service carrying exactly one node is an *instance*: the node id is its
    identity and every other field is content.
    """

    model_config = ConfigDict(
        extra="forbid",
        str_strip_whitespace=True,
        validate_assignment=True,
        json_schema_extra={
            "example": {
                "name": "orders",
                "version": "1.2.0",
                "metadata": {},
                "endpoints": [],
                "nodes": [{"id": "orders-1", "address": "10.0.0.4", "port": 8080, "metadata": {}}],
            }
        },
    )

    name: str = Field(..., min_length=1, description="Logical service name")
    version: str = Field(default="", description="Service version")
    metadata: dict[str, str] = Field(default_factory=dict, description="Service metadata")
    endpoints: list[Endpoint] = Field(default_factory=list, description="Exposed endpoints")
    nodes: list[Node] = Field(default_factory=list, description="Running nodes")

    @property
    def instance_id(self) -> str | None:
        """Identity of a single-node service, None when it has no nodes."""
        if not self.nodes:
            return None
        return self.nodes[0].id


class DirectoryService(BaseModel):
    """Summary of a service record held by the directory."""

    model_config = ConfigDict(extra="forbid", strict=True)

    id: str = Field(..., min_length=1, description="Directory-side service id")
    name: str = Field(..., min_length=1, description="Sanitized service name")


class DirectoryInstance(BaseModel):
    """An instance record as returned by the directory."""

    model_config = ConfigDict(extra="forbid", strict=True)

    instance_id: str = Field(..., min_length=1, description="Instance identifier")
    service_name: str = Field(..., description="Name of the owning service")
    health_status: str = Field(default="UNKNOWN", description="Reported health status")
    attributes: dict[str, str] = Field(default_factory=dict, description="Opaque attributes")


# Keyed by instance id; rebuilt on every poll.
ServiceSnapshot = dict[str, Service]
