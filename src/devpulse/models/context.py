"""
Ambient context models: page/process snapshot, request, user.
"""

from typing import Optional, Union
from pydantic import BaseModel, ConfigDict, Field


class Dimensions(BaseModel):
    model_config = ConfigDict(frozen=True)

    width: Optional[int] = None
    height: Optional[int] = None


class Context(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    url: Optional[str] = None
    user_agent: Optional[str] = Field(default=None, alias="userAgent")
    language: Optional[str] = None
    viewport: Dimensions = Dimensions()
    screen: Dimensions = Dimensions()


class PerformanceBlock(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    value: Union[int, float]
    unit: str = "ms"  # "ms" | "" (unitless score)


class PerformanceContext(Context):
    performance: PerformanceBlock


class RequestInfo(BaseModel):
    model_config = ConfigDict(frozen=True)

    url: Optional[str] = None


class UserIdentity(BaseModel):
    model_config = ConfigDict(frozen=True, extra="allow")

    id: Optional[Union[str, int]] = None
    email: Optional[str] = None
    name: Optional[str] = None
