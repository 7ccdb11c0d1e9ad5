import asyncio
from typing import Any, Callable, Optional

import pytest

from devpulse.context import StaticContextProvider


class RecordingFetch:
    """Fetch capability that records calls and resolves immediately, resolves
    after a short delay ("slow"), fails, or hangs."""

    def __init__(self, mode: str = "ok"):
        self.mode = mode
        self.calls: list[dict[str, Any]] = []
        self.delivered: list[bytes] = []
        self.cancelled = False

    async def __call__(self, url: str, *, content: bytes, headers: dict[str, str]) -> Any:
        self.calls.append({"url": url, "content": content, "headers": headers})
        if self.mode == "fail":
            raise OSError("connection refused")
        if self.mode == "hang":
            try:
                await asyncio.Event().wait()
            except asyncio.CancelledError:
                self.cancelled = True
                raise
        if self.mode == "slow":
            await asyncio.sleep(0.05)
        self.delivered.append(content)
        return {"ok": True}


class FakeHandle:
    def __init__(self, delay: float, callback: Callable[[], Any]):
        self.delay = delay
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True

    def fire(self) -> None:
        if not self.cancelled:
            self.callback()


class FakeTimer:
    """Timer capability whose deadlines only fire when the test says so."""

    def __init__(self):
        self.handles: list[FakeHandle] = []

    def __call__(self, delay: float, callback: Callable[[], Any]) -> FakeHandle:
        handle = FakeHandle(delay, callback)
        self.handles.append(handle)
        return handle

    @property
    def last(self) -> Optional[FakeHandle]:
        return self.handles[-1] if self.handles else None


@pytest.fixture
def provider() -> StaticContextProvider:
    return StaticContextProvider(
        url="http://localhost/app",
        user_agent="pytest-agent",
        language="en-US",
        viewport=(1280, 720),
        screen=(1920, 1080),
    )


@pytest.fixture
def fetch() -> RecordingFetch:
    return RecordingFetch()


@pytest.fixture
def timer() -> FakeTimer:
    return FakeTimer()
