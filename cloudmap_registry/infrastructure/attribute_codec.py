"""Encoding of instance attributes stored in the directory.

Cloud Map attributes are flat text values. Endpoints, metadata and version
are each packed into a single attribute through json, zlib and hex. Decoding
never raises: a corrupt attribute yields an empty value.
"""

from __future__ import annotations

import json
import zlib
from typing import Any

from pydantic import TypeAdapter

from ..domain.models import DirectoryInstance, Endpoint, Node, Service

ATTR_IP = "AWS_INSTANCE_IPV4"
ATTR_PORT = "AWS_INSTANCE_PORT"
ATTR_ENDPOINTS = "MICRO-ENDPOINTS"
ATTR_METADATA = "MICRO-METADATA"
ATTR_VERSION = "MICRO-VERSION"

_endpoints_adapter = TypeAdapter(list[Endpoint])
_metadata_adapter = TypeAdapter(dict[str, str])


def encode(data: bytes) -> str:
    """Compress and hex-encode raw bytes."""
    return zlib.compress(data).hex()


def decode(encoded: str) -> bytes | None:
    """Reverse ``encode``; None when any stage fails."""
    try:
        return zlib.decompress(bytes.fromhex(encoded))
    except (ValueError, zlib.error):
        return None


def _decode_json(encoded: str) -> Any:
    raw = decode(encoded)
    if raw is None:
        return None
    try:
        return json.loads(raw)
    except ValueError:
        return None


def encode_endpoints(endpoints: list[Endpoint]) -> str:
    return encode(_endpoints_adapter.dump_json(endpoints))


def decode_endpoints(encoded: str) -> list[Endpoint]:
    data = _decode_json(encoded)
    if data is None:
        return []
    try:
        return _endpoints_adapter.validate_python(data)
    except ValueError:
        return []


def encode_metadata(metadata: dict[str, str]) -> str:
    return encode(_metadata_adapter.dump_json(metadata))


def decode_metadata(encoded: str) -> dict[str, str]:
    data = _decode_json(encoded)
    if data is None:
        return {}
    try:
        return _metadata_adapter.validate_python(data)
    except ValueError:
        return {}


def encode_version(version: str) -> str:
    return encode(version.encode("utf-8"))


def decode_version(encoded: str) -> str:
    raw = decode(encoded)
    if raw is None:
        return ""
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError:
        return ""


def encode_attributes(service: Service, node: Node) -> dict[str, str]:
    """Build the attribute map written for one node of a service."""
    return {
        ATTR_IP: node.address,
        ATTR_PORT: str(node.port),
        ATTR_ENDPOINTS: encode_endpoints(service.endpoints),
        ATTR_METADATA: encode_metadata(node.metadata),
        ATTR_VERSION: encode_version(service.version),
    }


def decode_instance(instance: DirectoryInstance) -> Service | None:
    """Turn a directory instance into a single-node Service.

    Returns:
        The decoded service, or None when the port attribute is unusable
    """
    attributes = instance.attributes
    try:
        port = int(attributes.get(ATTR_PORT, ""))
    except ValueError:
        return None
    if not 0 <= port <= 65535:
        return None

    node = Node(
        id=instance.instance_id,
        address=attributes.get(ATTR_IP, ""),
        port=port,
        metadata=decode_metadata(attributes.get(ATTR_METADATA, "")),
    )
    return Service(
        name=instance.service_name,
        version=decode_version(attributes.get(ATTR_VERSION, "")),
        endpoints=decode_endpoints(attributes.get(ATTR_ENDPOINTS, "")),
        nodes=[node],
    )
