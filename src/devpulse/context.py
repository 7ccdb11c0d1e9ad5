"""
Context providers: where the builders get URL, user agent, locale and sizes.

A provider is read-only and synchronous. Hosts that serve requests can pass a
StaticContextProvider per request, or subclass and override get_context().
"""

import locale
import platform
import shutil
from typing import Optional, Protocol

from devpulse import __version__
from devpulse.models.context import Context, Dimensions


class ContextProvider(Protocol):
    def get_context(self) -> Context: ...


def _dimensions(size: Optional[tuple[int, int]]) -> Dimensions:
    if size is None:
        return Dimensions()
    return Dimensions(width=size[0], height=size[1])


def default_user_agent() -> str:
    return f"devpulse-python/{__version__} Python/{platform.python_version()} ({platform.system()})"


class StaticContextProvider:
    """Returns the same snapshot on every call."""

    def __init__(
        self,
        url: Optional[str] = None,
        user_agent: Optional[str] = None,
        language: Optional[str] = None,
        viewport: Optional[tuple[int, int]] = None,
        screen: Optional[tuple[int, int]] = None,
    ):
        self._context = Context(
            url=url,
            user_agent=user_agent,
            language=language,
            viewport=_dimensions(viewport),
            screen=_dimensions(screen),
        )

    def get_context(self) -> Context:
        return self._context


class SystemContextProvider:
    """Derives the snapshot from the running interpreter.

    Viewport and screen both report the controlling terminal's size in
    columns x lines; there is no separate notion of a window here.
    """

    def __init__(self, url: Optional[str] = None):
        self.url = url

    def get_context(self) -> Context:
        size = shutil.get_terminal_size()
        dims = Dimensions(width=size.columns, height=size.lines)
        return Context(
            url=self.url,
            user_agent=default_user_agent(),
            language=locale.getlocale()[0],
            viewport=dims,
            screen=dims,
        )
