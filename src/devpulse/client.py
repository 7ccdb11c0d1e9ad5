"""
DevPulse: the coordinator a host application talks to.

Holds the session state (config, transport, current user) and routes each
occurrence through a builder into the transport. Nothing here raises into the
host once init() has succeeded; missing configuration only disables it.
"""

import asyncio
import atexit
import logging
import random
import time
from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from typing import Any, Callable, Optional, Union

from devpulse.config import DevPulseConfig
from devpulse.context import ContextProvider
from devpulse.integrations.hooks import install_asyncio_handler, install_excepthooks
from devpulse.models.context import UserIdentity
from devpulse.models.event import Event
from devpulse.payload import UNIT_MS, build_from_error, build_from_message, build_from_performance
from devpulse.transport import Transport, to_wire
from devpulse.transport.sender import Fetch, Timer
from devpulse.vitals import VitalsTracker

logger = logging.getLogger(__name__)


def merge_extra(payload: dict[str, Any], extra: Optional[Mapping[str, Any]]) -> dict[str, Any]:
    """Overlay caller-supplied fields. Mapping values merge one level deep,
    so extra["context"] adds to the ambient context instead of replacing it."""
    merged = dict(payload)
    for key, value in (extra or {}).items():
        base = merged.get(key)
        if isinstance(base, dict) and isinstance(value, Mapping):
            merged[key] = {**base, **value}
        else:
            merged[key] = value
    return merged


class DevPulse:
    def __init__(
        self,
        context_provider: Optional[ContextProvider] = None,
        fetch: Optional[Fetch] = None,
        timer: Optional[Timer] = None,
    ):
        self._context_provider = context_provider
        self._fetch = fetch
        self._timer = timer

        self.config = DevPulseConfig()
        self.transport: Optional[Transport] = None
        self.vitals: Optional[VitalsTracker] = None
        self._user: Optional[UserIdentity] = None
        self._uninstallers: list[Callable[[], None]] = []

    def init(self, config: Optional[DevPulseConfig] = None, **options: Any) -> None:
        if config is None:
            config = DevPulseConfig.build(**options)
        elif options:
            config = DevPulseConfig.build(**{**config.model_dump(), **options})

        if not config.dsn:
            logger.warning("[DevPulse] DSN is required")
            return

        self.config = config
        if self.transport is not None:
            self.transport.close()
        self.transport = Transport(config.dsn, timeout=config.timeout, fetch=self._fetch, timer=self._timer)
        atexit.unregister(self.close)
        atexit.register(self.close)

        if not config.enabled:
            return
        if config.install_handlers:
            self.install_handlers()
        if config.track_vitals and self.vitals is None:
            self.vitals = VitalsTracker(self.capture_performance)

    @property
    def enabled(self) -> bool:
        return self.transport is not None and self.config.enabled

    # -- Public API ---------------------------------------------------------

    def capture(self, error: Any, extra: Optional[Mapping[str, Any]] = None) -> None:
        if not self.enabled or not self._sampled():
            return
        self._send(build_from_error(error, user=self._user, context_provider=self._context_provider), extra)

    def capture_message(self, message: str, level: str = "info", extra: Optional[Mapping[str, Any]] = None) -> None:
        if not self.enabled or not self._sampled():
            return
        self._send(build_from_message(message, level, user=self._user, context_provider=self._context_provider), extra)

    def capture_performance(self, name: str, value: float, unit: str = UNIT_MS) -> None:
        """Send a measurement. Not subject to traces_sample_rate."""
        if not self.enabled:
            return
        self._send(build_from_performance(name, value, unit=unit, user=self._user,
                                          context_provider=self._context_provider), None)

    @contextmanager
    def timed(self, name: str) -> Iterator[None]:
        """Report the wall time of the wrapped block in ms."""
        start = time.perf_counter()
        try:
            yield
        finally:
            self.capture_performance(name, (time.perf_counter() - start) * 1000.0)

    @property
    def user(self) -> Optional[UserIdentity]:
        return self._user

    def set_user(self, user: Union[UserIdentity, Mapping[str, Any], None]) -> None:
        if user is None or isinstance(user, UserIdentity):
            self._user = user
        else:
            self._user = UserIdentity.model_validate(dict(user))

    def clear_user(self) -> None:
        self._user = None

    async def flush(self, timeout: Optional[float] = None) -> bool:
        if self.transport is None:
            return True
        return await self.transport.flush(timeout)

    def close(self, timeout: Optional[float] = 2.0) -> bool:
        if self.transport is None:
            return True
        return self.transport.close(timeout)

    # -- Handlers -----------------------------------------------------------

    def install_handlers(self) -> None:
        """Hook uncaught exceptions; also the asyncio loop if called inside one."""
        if self._uninstallers:
            return
        self._uninstallers.append(install_excepthooks(self))
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            return
        self._uninstallers.append(install_asyncio_handler(self, loop))

    def remove_handlers(self) -> None:
        while self._uninstallers:
            self._uninstallers.pop()()

    # -- Internals ----------------------------------------------------------

    def _sampled(self) -> bool:
        return random.random() <= self.config.traces_sample_rate

    def _send(self, event: Event, extra: Optional[Mapping[str, Any]]) -> None:
        if extra is not None and not isinstance(extra, Mapping):
            logger.debug("Ignoring non-mapping extra %r", extra)
            extra = None
        payload = merge_extra(to_wire(event), extra)
        # Session fields always win over caller-supplied keys.
        payload["user"] = self._user.model_dump(mode="json") if self._user else None
        payload["environment"] = self.config.environment
        payload["release"] = self.config.release
        self.transport.send(payload)  # type: ignore[union-attr]
