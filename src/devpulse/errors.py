"""
DevPulse error types.

Only ConfigError ever reaches a caller. DeliveryError is raised inside the
transport and absorbed there.
"""

from typing import Any, Optional


class DevPulseError(Exception):
    def __init__(self, code: str, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__(message)
        self.code = code
        self.details = details


class ConfigError(DevPulseError):
    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__("config_error", message, details)


class DeliveryError(DevPulseError):
    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__("delivery_error", message, {"status_code": status_code} if status_code else None)
        self.status_code = status_code
