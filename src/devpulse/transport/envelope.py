"""
Wire encoding: Event (or coordinator-merged mapping) to JSON bytes.
"""

import json
from collections.abc import Mapping
from typing import Any, Union

from pydantic import BaseModel

from devpulse.models.event import Event

Payload = Union[Event, Mapping[str, Any]]


def to_wire(event: Payload) -> dict[str, Any]:
    """Plain-JSON form of an event, camelCase keys where the wire uses them."""
    if isinstance(event, BaseModel):
        return event.model_dump(mode="json", by_alias=True)
    return dict(event)


def encode_event(event: Payload) -> bytes:
    return json.dumps(to_wire(event), separators=(",", ":"), default=str).encode("utf-8")
