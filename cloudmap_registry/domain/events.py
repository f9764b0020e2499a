"""Change events produced by a watcher.

Each event is one member of a closed set, discriminated by ``action``, so
consumers can match on the concrete class and cover every case.
"""

from __future__ import annotations

from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field

from .enums import WatchAction
from .models import Service


class _InstanceEvent(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    service: Service = Field(..., description="Single-node service the change applies to")

    @property
    def instance_id(self) -> str | None:
        return self.service.instance_id


class InstanceCreated(_InstanceEvent):
    """An instance appeared; carries the new value."""

    action: Literal[WatchAction.CREATE] = WatchAction.CREATE


class InstanceUpdated(_InstanceEvent):
    """An instance's content changed; carries the new value."""

    action: Literal[WatchAction.UPDATE] = WatchAction.UPDATE


class InstanceRemoved(_InstanceEvent):
    """An instance disappeared; carries the last known value."""

    action: Literal[WatchAction.DELETE] = WatchAction.DELETE


WatchEvent = Annotated[
    InstanceCreated | InstanceUpdated | InstanceRemoved,
    Field(discriminator="action"),
]
