"""
Stack trace parsing: trace text in, ordered frame list out.

Each line after the banner is tried against the frame patterns in order:
- Tier 1: named frame      "at fn (file:line:col)"
- Tier 2: anonymous frame  "at file:line:col"
- Tier 3: raw fallback     the trimmed line, verbatim
"""

import re
import traceback
from typing import Any, Callable, Optional

from devpulse.models.frame import Frame, RawFrame, StackFrame

NAMED_FRAME = re.compile(r"at\s+(.*?)\s+\((.*?):(\d+):(\d+)\)")
ANONYMOUS_FRAME = re.compile(r"at\s+(.*?):(\d+):(\d+)")

FrameMatcher = Callable[[str], Optional[Frame]]


def _position(digits: str) -> Optional[int]:
    # 0 is not a valid 1-based position; treat it as unknown
    return int(digits) or None


def _match_named(line: str) -> Optional[Frame]:
    m = NAMED_FRAME.search(line)
    if not m:
        return None
    return StackFrame(
        function=m.group(1) or None,
        file=m.group(2),
        line=_position(m.group(3)),
        column=_position(m.group(4)),
    )


def _match_anonymous(line: str) -> Optional[Frame]:
    m = ANONYMOUS_FRAME.search(line)
    if not m:
        return None
    return StackFrame(
        function=None,
        file=m.group(1),
        line=_position(m.group(2)),
        column=_position(m.group(3)),
    )


def _match_raw(line: str) -> Optional[Frame]:
    return RawFrame(raw=line)


MATCHERS: tuple[FrameMatcher, ...] = (_match_named, _match_anonymous, _match_raw)


def _has_content(frame: Frame) -> bool:
    if isinstance(frame, StackFrame):
        return bool(frame.file)
    return bool(frame.raw)


def parse_line(line: str) -> Optional[Frame]:
    trimmed = line.strip()
    for matcher in MATCHERS:
        frame = matcher(trimmed)
        if frame is not None:
            return frame
    return None


def parse_stack(stack: Any) -> list[Frame]:
    """Parse a trace string into frames, innermost call first.

    The first line is the error's own banner and is skipped. Lines that match
    no frame pattern become RawFrame; blank lines are dropped. Never raises.
    """
    if not stack:
        return []
    if not isinstance(stack, str):
        stack = str(stack)

    frames: list[Frame] = []
    for line in stack.split("\n")[1:]:
        frame = parse_line(line)
        if frame is not None and _has_content(frame):
            frames.append(frame)
    return frames


def format_traceback(exc: BaseException) -> Optional[str]:
    """Render a Python exception as trace text that parse_stack understands.

    Frames are emitted innermost first with 1-based columns (0 when the
    interpreter does not report one).
    """
    tb = exc.__traceback__
    if tb is None:
        return None
    # The banner is skipped by parse_stack, so it must stay on one line.
    message = str(exc).splitlines()
    lines = [f"{type(exc).__name__}: {message[0] if message else ''}"]
    for fs in reversed(traceback.extract_tb(tb)):
        colno = getattr(fs, "colno", None)
        column = colno + 1 if colno is not None else 0
        lines.append(f"    at {fs.name} ({fs.filename}:{fs.lineno or 0}:{column})")
    return "\n".join(lines)
