"""
Event envelope: the document POSTed to the ingestion endpoint.

Three variants share EventBase: an error carries `exception`, a message
carries `message`, a performance event carries `message` plus
`context.performance`.
"""

from typing import Literal, Optional, Union
from pydantic import BaseModel, ConfigDict

from devpulse.models.context import Context, PerformanceContext, RequestInfo, UserIdentity
from devpulse.models.frame import Frame

Level = Literal["error", "warning", "info"]
LEVELS = ("error", "warning", "info")
PLATFORM = "browser"


class ExceptionInfo(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: str
    message: str
    stacktrace: list[Frame] = []


class EventBase(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    level: Level
    platform: Literal["browser"] = PLATFORM
    timestamp: str  # ISO-8601 UTC, build time
    context: Context
    request: RequestInfo
    user: Optional[UserIdentity] = None


class ErrorEvent(EventBase):
    level: Literal["error"] = "error"
    exception: ExceptionInfo


class MessageEvent(EventBase):
    message: str


class PerformanceEvent(EventBase):
    level: Literal["info"] = "info"
    message: str
    context: PerformanceContext


Event = Union[ErrorEvent, MessageEvent, PerformanceEvent]
