"""
Stack frame models: one parsed line of a trace.
"""

from typing import Optional, Union
from pydantic import BaseModel, ConfigDict


class StackFrame(BaseModel):
    """A line that matched a frame pattern. `function` is None for anonymous frames."""
    model_config = ConfigDict(frozen=True)

    function: Optional[str] = None
    file: str
    line: Optional[int] = None
    column: Optional[int] = None


class RawFrame(BaseModel):
    """A line no pattern understood, kept verbatim (trimmed)."""
    model_config = ConfigDict(frozen=True)

    raw: str


Frame = Union[StackFrame, RawFrame]
