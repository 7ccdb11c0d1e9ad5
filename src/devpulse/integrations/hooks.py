"""
Uncaught-error hooks: the Python host's equivalent of window "error" and
"unhandledrejection" listeners.

Each installer returns a function that restores the previous hook. Previous
hooks keep running; the client only observes.
"""

import asyncio
import logging
import sys
import threading
from types import TracebackType
from typing import TYPE_CHECKING, Any, Callable, Optional

if TYPE_CHECKING:
    from devpulse.client import DevPulse

logger = logging.getLogger(__name__)

UNHANDLED_REJECTION = "unhandledrejection"


def _location(tb: Optional[TracebackType]) -> dict[str, Any]:
    """filename/line/column of the innermost frame."""
    if tb is None:
        return {"filename": None, "line": None, "column": None}
    while tb.tb_next is not None:
        tb = tb.tb_next
    return {"filename": tb.tb_frame.f_code.co_filename, "line": tb.tb_lineno, "column": None}


def _capture(client: "DevPulse", error: BaseException, extra: dict[str, Any]) -> None:
    try:
        client.capture(error, extra)
    except Exception as e:
        logger.debug("DevPulse failed to capture %r: %s", error, e)


def install_excepthooks(client: "DevPulse") -> Callable[[], None]:
    """Chain sys.excepthook and threading.excepthook."""
    previous_sys = sys.excepthook
    previous_threading = threading.excepthook

    def sys_hook(exc_type: type[BaseException], exc: BaseException, tb: Optional[TracebackType]) -> None:
        if not issubclass(exc_type, KeyboardInterrupt):
            _capture(client, exc, {"context": _location(tb)})
        previous_sys(exc_type, exc, tb)

    def threading_hook(args: Any) -> None:
        if args.exc_value is not None and not issubclass(args.exc_type, SystemExit):
            _capture(client, args.exc_value, {"context": _location(args.exc_traceback)})
        previous_threading(args)

    sys.excepthook = sys_hook
    threading.excepthook = threading_hook

    def uninstall() -> None:
        if sys.excepthook is sys_hook:
            sys.excepthook = previous_sys
        if threading.excepthook is threading_hook:
            threading.excepthook = previous_threading

    return uninstall


def install_asyncio_handler(
    client: "DevPulse", loop: Optional[asyncio.AbstractEventLoop] = None,
) -> Callable[[], None]:
    """Capture exceptions the loop reports as unhandled (e.g. never-retrieved task errors)."""
    loop = loop or asyncio.get_running_loop()
    previous = loop.get_exception_handler()

    def handler(event_loop: asyncio.AbstractEventLoop, context: dict[str, Any]) -> None:
        error = context.get("exception")
        if not isinstance(error, BaseException):
            error = RuntimeError(str(context.get("message", "Unhandled error in event loop")))
        _capture(client, error, {"context": {"type": UNHANDLED_REJECTION}})
        if previous is not None:
            previous(event_loop, context)
        else:
            event_loop.default_exception_handler(context)

    loop.set_exception_handler(handler)

    def uninstall() -> None:
        if loop.get_exception_handler() is handler:
            loop.set_exception_handler(previous)

    return uninstall
