"""
Transport: best-effort, fire-and-forget event delivery.

send() serializes the event, starts a detached delivery task on the
background loop thread and returns True at once. The host's own event loop
never owns the task, so shutting that loop down does not cancel delivery.
A deadline timer cancels the task after `timeout` seconds and is released as
soon as the task settles. Failures are logged at DEBUG and dropped; nothing
propagates back to the caller.
"""

import asyncio
import functools
import logging
from typing import Any, Callable, Coroutine, Optional

from devpulse.transport.background import BackgroundLoop
from devpulse.transport.envelope import Payload, encode_event
from devpulse.transport.http import HttpxFetch

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_S = 5.0
JSON_HEADERS = {"Content-Type": "application/json"}

Fetch = Callable[..., Coroutine[Any, Any, Any]]
# (delay_s, callback) -> handle with cancel(); loop.call_later fits
Timer = Callable[[float, Callable[[], Any]], Any]


class Transport:
    def __init__(
        self,
        dsn: str,
        timeout: float = DEFAULT_TIMEOUT_S,
        fetch: Optional[Fetch] = None,
        timer: Optional[Timer] = None,
    ):
        self.dsn = dsn
        self.timeout = timeout
        self._fetch = fetch or HttpxFetch()
        self._timer = timer
        self._pending: set[asyncio.Task[None]] = set()
        self._background = BackgroundLoop()

    @property
    def pending(self) -> int:
        return len(self._pending)

    def send(self, event: Payload) -> bool:
        """Start delivery of one event. Always returns True.

        The return value means "initiated", never "delivered".
        """
        try:
            body = encode_event(event)
        except Exception as e:
            logger.debug("Dropping event that could not be serialized: %s", e)
            return True

        self._background.call_soon(self._dispatch, body)
        return True

    def _dispatch(self, body: bytes) -> None:
        """Runs on the background loop: start the task, arm the deadline."""
        loop = asyncio.get_running_loop()
        task = loop.create_task(self._deliver(body))
        self._pending.add(task)
        schedule = self._timer or loop.call_later
        # An injected timer may fire from another thread.
        deadline = schedule(self.timeout, functools.partial(loop.call_soon_threadsafe, task.cancel))
        task.add_done_callback(functools.partial(self._settle, deadline))

    async def _deliver(self, body: bytes) -> None:
        try:
            await self._fetch(self.dsn, content=body, headers=dict(JSON_HEADERS))
        except Exception as e:
            logger.debug("Event delivery failed: %s", e)

    def _settle(self, deadline: Any, task: "asyncio.Task[None]") -> None:
        deadline.cancel()
        self._pending.discard(task)
        if task.cancelled():
            logger.debug("Event delivery abandoned after %ss", self.timeout)

    async def _drain(self, timeout: Optional[float]) -> bool:
        tasks = list(self._pending)
        if not tasks:
            return True
        _, still_running = await asyncio.wait(tasks, timeout=timeout)
        return not still_running

    async def flush(self, timeout: Optional[float] = None) -> bool:
        """Wait for sends in flight. False if some are still running after `timeout`."""
        if not self._background.running:
            return True
        return await asyncio.wrap_future(self._background.submit(self._drain(timeout)))

    def close(self, timeout: Optional[float] = 2.0) -> bool:
        """Drain and stop the background loop. Blocks for at most about `timeout`."""
        return self._background.stop(drain=self._drain, timeout=timeout)
