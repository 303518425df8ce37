# =============================================================================
# MarstekClient Library – Exceptions Module
# -----------------------------------------------------------------------------
# Copyright (c) Alejandro Feránandez Rodríguez. All rights reserved.
#
# This source code is released under the GEL 3.0 License.
#
# DISCLAIMER:
# This software is provided "AS IS", without warranty of any kind, express or
# implied, including but not limited to the warranties of merchantability,
# fitness for a particular purpose, and non-infringement. In no event shall the
# authors or copyright holders be liable for any claim, damages, or other
# liability, whether in an action of contract, tort, or otherwise, arising from,
# out of, or in connection with the software or the use or other dealings in
# the software.
#
# LICENSE – GEL 3.0:
# You may use, copy, modify, and distribute this code according to the terms of
# the GEL 3.0 License. A full copy of the license text should accompany any
# redistribution. If the license text is missing, see: https://gel-license.org
#  @author
#    Alejandro Fernández Rodríguez — github.com/afernandezLuc
#  @version 1.0.0
#  @date 2026-01-07
# =============================================================================

from __future__ import annotations

from typing import Any, Optional


class MarstekError(Exception):
    """
    Base exception for the library.

    All custom exceptions of the MarstekClient library inherit from this class
    so that callers can catch `MarstekError` to handle any library-specific
    failure in a generic way.
    """
    pass


class MarstekTransportError(MarstekError):
    """
    Errors related to the UDP transport layer.

    This includes problems such as:
      - Unable to bind the ephemeral local socket
      - Network unreachable / send failures
      - Receive failures

    Attributes:
        method: Protocol method of the exchange that failed, if known.
        target: "host:port" string of the remote endpoint, if known.
    """

    def __init__(
        self,
        message: str,
        method: Optional[str] = None,
        target: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.method = method
        self.target = target


class MarstekTimeoutError(MarstekTransportError):
    """
    No reply datagram arrived before the receive timeout expired.

    Kept distinct from other transport faults because a discovery scan uses the
    timeout as its normal termination signal.
    """
    pass


class MarstekProtocolError(MarstekError):
    """
    A datagram could not be encoded or decoded.

    Raised when:
      - The request parameters cannot be serialized to JSON
      - The reply is not valid UTF-8 JSON
      - A reply `result` does not have the shape of the expected status record
    """

    def __init__(self, message: str, method: Optional[str] = None) -> None:
        super().__init__(message)
        self.method = method


class MarstekConfigurationError(MarstekError):
    """
    The operation needs a selected device but none has been configured yet.
    """
    pass


class MarstekValidationError(MarstekError):
    """
    Caller-supplied input was rejected before any network I/O took place.

    Typical causes: unknown operating mode, missing mode sub-configuration,
    or an out-of-range sub-configuration field.

    Attributes:
        mode: The mode name being validated, if relevant.
        field: The offending field name, if relevant.
        value: The offending value, if relevant.
    """

    def __init__(
        self,
        message: str,
        mode: Optional[str] = None,
        field: Optional[str] = None,
        value: Any = None,
    ) -> None:
        super().__init__(message)
        self.mode = mode
        self.field = field
        self.value = value


class MarstekDecodeError(MarstekProtocolError):
    """
    A well-formed reply carried a `result` that does not match the shape of
    the expected status record (not an object, or a member of the wrong type).

    The dashboard downgrades this error to an all-unknown section instead of
    failing the whole aggregation.

    Attributes:
        record: Name of the status record being decoded.
        field: The offending member, or None when the whole result is wrong.
    """

    def __init__(
        self,
        message: str,
        record: Optional[str] = None,
        field: Optional[str] = None,
        method: Optional[str] = None,
    ) -> None:
        super().__init__(message, method=method)
        self.record = record
        self.field = field
