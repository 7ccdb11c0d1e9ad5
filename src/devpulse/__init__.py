"""
devpulse: client-side telemetry for Python applications.

Normalizes uncaught exceptions, messages and performance measurements into
events and ships them, best effort, to an ingestion endpoint.
"""

import logging

__version__ = "0.1.0"

from devpulse.client import DevPulse
from devpulse.config import DevPulseConfig
from devpulse.context import ContextProvider, StaticContextProvider, SystemContextProvider
from devpulse.errors import DevPulseError, ConfigError, DeliveryError
from devpulse.payload import build_from_error, build_from_message, build_from_performance
from devpulse.stack import parse_stack
from devpulse.transport import Transport
from devpulse.vitals import PerformanceEntry, VitalsTracker

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "DevPulse",
    "DevPulseConfig",
    "ContextProvider",
    "StaticContextProvider",
    "SystemContextProvider",
    "DevPulseError",
    "ConfigError",
    "DeliveryError",
    "build_from_error",
    "build_from_message",
    "build_from_performance",
    "parse_stack",
    "Transport",
    "PerformanceEntry",
    "VitalsTracker",
]
