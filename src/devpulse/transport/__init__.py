from devpulse.transport.envelope import encode_event, to_wire
from devpulse.transport.http import HttpxFetch
from devpulse.transport.sender import DEFAULT_TIMEOUT_S, Transport

__all__ = ["DEFAULT_TIMEOUT_S", "HttpxFetch", "Transport", "encode_event", "to_wire"]
