# =============================================================================
# MarstekClient Library – Wire Models
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

import json
from dataclasses import dataclass
from typing import Any, Optional

from .exceptions import MarstekProtocolError

DEFAULT_PORT = 30000


@dataclass(frozen=True)
class TargetAddress:
    """
    Immutable (host, port) pair identifying the selected remote device.

    Attributes:
        host:
            IPv4 address or host name of the device. `None` means that no
            device has been selected yet.
        port:
            UDP port of the device API (30000 unless configured otherwise).
    """

    host: Optional[str] = None
    port: int = DEFAULT_PORT

    @property
    def is_configured(self) -> bool:
        return self.host is not None

    def __str__(self) -> str:
        return f"{self.host}:{self.port}"


@dataclass(frozen=True)
class RequestEnvelope:
    """
    JSON-RPC-like request sent to the device in a single datagram.

    Attributes:
        id:
            Request identifier. The device echoes it back but replies are
            never matched against it.
        method:
            Namespaced method name, e.g. "ES.GetStatus".
        params:
            Method-specific parameters (any JSON-serializable value).
    """

    id: int
    method: str
    params: Any

    def encode(self) -> bytes:
        """
        Serialize the envelope as compact UTF-8 JSON.

        Raises:
            MarstekProtocolError: If `params` is not JSON-serializable.
        """
        try:
            text = json.dumps(
                {"id": self.id, "method": self.method, "params": self.params},
                separators=(",", ":"),
            )
        except (TypeError, ValueError) as exc:
            raise MarstekProtocolError(
                f"Cannot encode request for {self.method}: {exc}",
                method=self.method,
            ) from exc
        return text.encode("utf-8")


@dataclass(frozen=True)
class ReplyEnvelope:
    """
    Decoded reply datagram.

    Attributes:
        has_result:
            True when the reply is a JSON object carrying a `result` member
            (even if that member is null).
        result:
            The `result` payload, or None when absent.
        raw:
            Original datagram text, kept for debugging.
    """

    has_result: bool
    result: Any
    raw: str


def parse_reply(data: bytes) -> ReplyEnvelope:
    """
    Decode a reply datagram.

    A reply that is valid JSON but not an object (or an object without
    `result`) is not an error: it simply carries no result.

    Raises:
        MarstekProtocolError: If the datagram is not UTF-8 encoded JSON.
    """
    try:
        raw = data.decode("utf-8")
        payload = json.loads(raw)
    except (UnicodeDecodeError, ValueError) as exc:
        raise MarstekProtocolError(f"Invalid reply datagram: {exc}") from exc

    if isinstance(payload, dict) and "result" in payload:
        return ReplyEnvelope(has_result=True, result=payload["result"], raw=raw)
    return ReplyEnvelope(has_result=False, result=None, raw=raw)
