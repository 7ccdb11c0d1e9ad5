from devpulse.models.context import Context, Dimensions, PerformanceBlock, PerformanceContext, RequestInfo, UserIdentity
from devpulse.models.event import Event, ErrorEvent, ExceptionInfo, MessageEvent, PerformanceEvent
from devpulse.models.frame import Frame, RawFrame, StackFrame

__all__ = [
    "Context",
    "Dimensions",
    "PerformanceBlock",
    "PerformanceContext",
    "RequestInfo",
    "UserIdentity",
    "Event",
    "ErrorEvent",
    "ExceptionInfo",
    "MessageEvent",
    "PerformanceEvent",
    "Frame",
    "RawFrame",
    "StackFrame",
]
