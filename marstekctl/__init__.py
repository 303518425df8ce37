from .client import (
    MarstekClient,
    BROADCAST_ADDRESS,
    COMMAND_TIMEOUT_S,
    DISCOVERY_TIMEOUT_S,
    RECV_BUFFER_SIZE,
)
from .models import DEFAULT_PORT, TargetAddress, RequestEnvelope, ReplyEnvelope, parse_reply
from .exceptions import (
    MarstekError,
    MarstekTransportError,
    MarstekTimeoutError,
    MarstekProtocolError,
    MarstekConfigurationError,
    MarstekValidationError,
    MarstekDecodeError,
)

__all__ = [
    "MarstekClient",
    "BROADCAST_ADDRESS",
    "COMMAND_TIMEOUT_S",
    "DISCOVERY_TIMEOUT_S",
    "RECV_BUFFER_SIZE",
    "DEFAULT_PORT",
    "TargetAddress",
    "RequestEnvelope",
    "ReplyEnvelope",
    "parse_reply",
    "MarstekError",
    "MarstekTransportError",
    "MarstekTimeoutError",
    "MarstekProtocolError",
    "MarstekConfigurationError",
    "MarstekValidationError",
    "MarstekDecodeError",
]
