"""
Background event loop that every send is delivered on.

A daemon thread runs its own asyncio loop, started lazily on first use.
Fork-aware: after os.fork() the child starts a fresh thread and loop instead
of reusing the parent's (which does not exist in the child).
"""

import asyncio
import concurrent.futures
import os
import threading
from typing import Any, Callable, Coroutine, Optional


class BackgroundLoop:
    def __init__(self, name: str = "devpulse-transport"):
        self._name = name
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._thread: Optional[threading.Thread] = None
        self._pid = os.getpid()
        self._lock = threading.Lock()

    @property
    def running(self) -> bool:
        return self._pid == os.getpid() and self._thread is not None and self._thread.is_alive()

    def start(self) -> asyncio.AbstractEventLoop:
        """Return the loop, starting its thread if needed. Safe to call repeatedly."""
        current_pid = os.getpid()
        with self._lock:
            if self._pid != current_pid:
                self._pid = current_pid
                self._loop = None
                self._thread = None

            if self._loop is not None and self._thread is not None and self._thread.is_alive():
                return self._loop

            loop = asyncio.new_event_loop()
            self._loop = loop
            self._thread = threading.Thread(target=self._run, args=(loop,), name=self._name, daemon=True)
            self._thread.start()
            return loop

    def call_soon(self, callback: Callable[..., Any], *args: Any) -> None:
        self.start().call_soon_threadsafe(callback, *args)

    def submit(self, coro: Coroutine[Any, Any, Any]) -> "concurrent.futures.Future[Any]":
        return asyncio.run_coroutine_threadsafe(coro, self.start())

    def stop(
        self,
        drain: Optional[Callable[[Optional[float]], Coroutine[Any, Any, bool]]] = None,
        timeout: Optional[float] = None,
    ) -> bool:
        """Optionally drain in-flight work, then stop the loop and join the thread.

        Returns False if the drain did not finish within `timeout`.
        """
        with self._lock:
            loop, thread = self._loop, self._thread
            if loop is None or thread is None or not thread.is_alive() or self._pid != os.getpid():
                return True
            self._loop = None
            self._thread = None

        drained = True
        if drain is not None:
            future = asyncio.run_coroutine_threadsafe(drain(timeout), loop)
            try:
                drained = future.result(timeout=None if timeout is None else timeout + 1.0)
            except concurrent.futures.TimeoutError:
                drained = False

        loop.call_soon_threadsafe(loop.stop)
        thread.join(timeout=1.0)
        return drained

    @staticmethod
    def _run(loop: asyncio.AbstractEventLoop) -> None:
        asyncio.set_event_loop(loop)
        try:
            loop.run_forever()
        finally:
            # Anything still in flight is abandoned.
            leftover = asyncio.all_tasks(loop)
            for task in leftover:
                task.cancel()
            if leftover:
                loop.run_until_complete(asyncio.gather(*leftover, return_exceptions=True))
            loop.close()
