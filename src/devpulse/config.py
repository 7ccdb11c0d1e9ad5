"""
Client configuration: DSN, environment tag, sampling.

Explicit arguments win over DEVPULSE_* environment variables, which win over
the defaults below.
"""

import os
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from devpulse.errors import ConfigError

DEFAULT_ENVIRONMENT = "production"
DEFAULT_TIMEOUT_S = 5.0

_TRUTHY = ("1", "true", "yes", "on")
_FALSY = ("0", "false", "no", "off")


class DevPulseConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    dsn: Optional[str] = None
    environment: str = DEFAULT_ENVIRONMENT
    release: Optional[str] = None
    enabled: bool = True
    track_vitals: bool = True
    traces_sample_rate: float = Field(default=1.0, ge=0.0, le=1.0)
    timeout: float = Field(default=DEFAULT_TIMEOUT_S, gt=0.0)
    install_handlers: bool = True

    @classmethod
    def build(cls, **options: Any) -> "DevPulseConfig":
        """Validate options, dropping the ones given as None so defaults apply."""
        try:
            return cls(**{k: v for k, v in options.items() if v is not None})
        except ValidationError as e:
            raise ConfigError(f"Invalid DevPulse configuration: {e}", details={"errors": e.errors()})

    @classmethod
    def from_env(cls, **overrides: Any) -> "DevPulseConfig":
        """Load configuration from DEVPULSE_* variables.

        Recognized: DEVPULSE_DSN, DEVPULSE_ENVIRONMENT, DEVPULSE_RELEASE,
        DEVPULSE_ENABLED, DEVPULSE_TRACK_VITALS, DEVPULSE_TRACES_SAMPLE_RATE.
        """
        options: dict[str, Any] = {
            "dsn": os.getenv("DEVPULSE_DSN"),
            "environment": os.getenv("DEVPULSE_ENVIRONMENT"),
            "release": os.getenv("DEVPULSE_RELEASE"),
            "enabled": _env_flag("DEVPULSE_ENABLED"),
            "track_vitals": _env_flag("DEVPULSE_TRACK_VITALS"),
            "traces_sample_rate": os.getenv("DEVPULSE_TRACES_SAMPLE_RATE"),
        }
        options.update({k: v for k, v in overrides.items() if v is not None})
        return cls.build(**options)


def _env_flag(name: str) -> Optional[bool]:
    raw = os.getenv(name)
    if raw is None:
        return None
    value = raw.strip().lower()
    if value in _TRUTHY:
        return True
    if value in _FALSY:
        return False
    raise ConfigError(f"Invalid {name} '{raw}'. Expected one of {_TRUTHY + _FALSY}.")
