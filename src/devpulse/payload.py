"""
Payload builders: exception, message or measurement in, Event out.

Builders never raise: malformed input degrades to defaults ("Error" type,
str() message, empty stacktrace, "info" level, nan value).
"""

import logging
import math
from collections.abc import Mapping
from datetime import datetime, timezone
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Optional, Union

from devpulse.context import ContextProvider, SystemContextProvider
from devpulse.models.context import Context, PerformanceBlock, PerformanceContext, RequestInfo, UserIdentity
from devpulse.models.event import LEVELS, ErrorEvent, ExceptionInfo, MessageEvent, PerformanceEvent
from devpulse.stack import format_traceback, parse_stack

logger = logging.getLogger(__name__)

UNIT_MS = "ms"
UNITLESS = ""

_default_provider = SystemContextProvider()

UserLike = Union[UserIdentity, Mapping[str, Any], None]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _timestamp() -> str:
    return _utcnow().isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _snapshot(provider: Optional[ContextProvider]) -> Context:
    try:
        return (provider or _default_provider).get_context()
    except Exception as e:
        logger.debug("Context provider failed, sending empty context: %s", e)
        return Context()


def _user(user: UserLike) -> Optional[UserIdentity]:
    if user is None or isinstance(user, UserIdentity):
        return user
    try:
        return UserIdentity.model_validate(dict(user))
    except Exception as e:
        logger.debug("Ignoring malformed user %r: %s", user, e)
        return None


def _field(value: Any, name: str) -> Any:
    if isinstance(value, Mapping):
        return value.get(name)
    return getattr(value, name, None)


def _safe_str(value: Any) -> str:
    try:
        return str(value)
    except Exception:
        return object.__repr__(value)


def _error_type(error: Any) -> str:
    if isinstance(error, BaseException):
        return type(error).__name__
    name = _field(error, "name")
    return _safe_str(name) if name is not None else "Error"


def _error_message(error: Any) -> str:
    message = _field(error, "message")
    return _safe_str(message if message is not None else error)


def _error_stack(error: Any) -> Any:
    stack = _field(error, "stack")
    if stack is None and isinstance(error, BaseException):
        try:
            stack = format_traceback(error)
        except Exception as e:
            logger.debug("Could not render traceback: %s", e)
    return stack


def _request(context: Context) -> RequestInfo:
    return RequestInfo(url=context.url)


def build_from_error(
    error: Any,
    *,
    user: UserLike = None,
    context_provider: Optional[ContextProvider] = None,
) -> ErrorEvent:
    context = _snapshot(context_provider)
    return ErrorEvent(
        exception=ExceptionInfo(
            type=_error_type(error),
            message=_error_message(error),
            stacktrace=parse_stack(_error_stack(error)),
        ),
        context=context,
        request=_request(context),
        user=_user(user),
        timestamp=_timestamp(),
    )


def build_from_message(
    message: Any,
    level: str = "info",
    *,
    user: UserLike = None,
    context_provider: Optional[ContextProvider] = None,
) -> MessageEvent:
    normalized = level.lower() if isinstance(level, str) else level
    if normalized not in LEVELS:
        logger.debug("Unknown level %r, sending as info", level)
        normalized = "info"
    context = _snapshot(context_provider)
    return MessageEvent(
        level=normalized,
        message=_safe_str(message),
        context=context,
        request=_request(context),
        user=_user(user),
        timestamp=_timestamp(),
    )


def _as_float(value: Any) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return math.nan


def display_value(value: Any, unit: str = UNIT_MS) -> Union[int, float]:
    """Round a measurement for display.

    Timings ("ms") round half away from zero to whole numbers; anything
    else keeps four decimals. Integral results come back as int.
    """
    number = _as_float(value)
    if not math.isfinite(number):
        return number
    quantum = Decimal("1") if unit == UNIT_MS else Decimal("0.0001")
    try:
        rounded = Decimal(repr(number)).quantize(quantum, rounding=ROUND_HALF_UP)
    except ArithmeticError:
        return number
    if rounded == rounded.to_integral_value():
        return int(rounded)
    return float(rounded)


def build_from_performance(
    name: str,
    value: Any,
    *,
    unit: str = UNIT_MS,
    user: UserLike = None,
    context_provider: Optional[ContextProvider] = None,
) -> PerformanceEvent:
    name = _safe_str(name)
    unit = UNIT_MS if unit is None else _safe_str(unit)
    shown = display_value(value, unit)
    context = _snapshot(context_provider)
    return PerformanceEvent(
        message=f"Performance: {name} = {shown}{unit}",
        context=PerformanceContext(
            **context.model_dump(),
            performance=PerformanceBlock(name=name, value=shown, unit=unit),
        ),
        request=_request(context),
        user=_user(user),
        timestamp=_timestamp(),
    )
