# =============================================================================
# MarstekClient - JSON-over-UDP client for Marstek energy storage devices
# -----------------------------------------------------------------------------
# Copyright (c) Alejandro Feránandez Rodríguez. All rights reserved.
#
# This source code is released under the GEL 3.0 License.
#
# DISCLAIMER:
# This software is provided "AS IS", without warranty of any kind, express or
# implied, including but not limited to the warranties of merchantability,
# fitness for a particular purpose and noninfringement. In no event shall the
# authors or copyright holders be liable for any claim, damages or other
# liability, whether in an action of contract, tort or otherwise, arising from,
# out of or in connection with the software or the use or other dealings in the
# software.
#
# LICENSE – GEL 3.0:
# You may use, copy, modify, and distribute this code according to the terms of
# the GEL 3.0 License. A full copy of the license should accompany any
# redistribution. If the license text is missing, see: https://gel-license.org
#  @author
#    Alejandro Fernández Rodríguez — github.com/afernandezLuc
#  @version 1.0.0
#  @date 2026-01-07
# =============================================================================

from __future__ import annotations

import logging
import socket
from typing import Any

from .exceptions import (
    MarstekConfigurationError,
    MarstekProtocolError,
    MarstekTimeoutError,
    MarstekTransportError,
)
from .models import DEFAULT_PORT, RequestEnvelope, TargetAddress, parse_reply

logger = logging.getLogger(__name__)

COMMAND_TIMEOUT_S = 5.0
DISCOVERY_TIMEOUT_S = 3.0
RECV_BUFFER_SIZE = 4096
BROADCAST_ADDRESS = "255.255.255.255"


class MarstekClient:
    """
    Minimal UDP client for the Marstek local JSON API.

    Every exchange is one request datagram followed by exactly one reply
    datagram:

        -> {"id": 1, "method": "ES.GetStatus", "params": {"id": 0}}
        <- {"id": 1, "src": "...", "result": {...}}

    This client focuses on:
      - One fresh ephemeral socket per exchange, always closed on return
      - A bounded blocking receive (no retries, no reconnection)
      - Uniform error reporting through the `marstekctl.exceptions` hierarchy

    The first datagram received on the ephemeral socket is taken as the reply;
    its `id` is not compared with the request id.
    """

    # ---- Method names ----
    GET_DEVICE_METHOD = "Marstek.GetDevice"
    GET_ES_STATUS_METHOD = "ES.GetStatus"
    GET_BATTERY_STATUS_METHOD = "Bat.GetStatus"
    GET_WIFI_STATUS_METHOD = "Wifi.GetStatus"
    GET_ES_MODE_METHOD = "ES.GetMode"
    GET_METER_STATUS_METHOD = "EM.GetStatus"
    SET_ES_MODE_METHOD = "ES.SetMode"

    def __init__(
        self,
        timeout_s: float = COMMAND_TIMEOUT_S,
        buffer_size: int = RECV_BUFFER_SIZE,
        request_id: int = 1,
    ) -> None:
        """
        Create a MarstekClient.

        Args:
            timeout_s:
                Receive timeout in seconds for a single exchange.
            buffer_size:
                Maximum size in bytes of an accepted reply datagram.
            request_id:
                Fixed id placed in every request envelope.
        """
        self.timeout_s = float(timeout_s)
        self.buffer_size = int(buffer_size)
        self.request_id = int(request_id)

    def send_command(self, target: TargetAddress, method: str, params: Any) -> Any:
        """
        Perform one request/reply exchange with the device at `target`.

        Args:
            target: Device address. Its host must be set.
            method: Namespaced method name, e.g. "Bat.GetStatus".
            params: JSON-serializable request parameters.

        Returns:
            The reply's `result` member, or None when the reply carries none.

        Raises:
            MarstekConfigurationError:
                If `target` has no host.
            MarstekTimeoutError:
                If no reply arrives within `timeout_s`.
            MarstekTransportError:
                On bind/send/receive socket failures.
            MarstekProtocolError:
                If the request cannot be encoded or the reply is not JSON.
        """
        if not target.is_configured:
            raise MarstekConfigurationError(
                "Device not configured. Call select_device first."
            )

        message = RequestEnvelope(
            id=self.request_id, method=method, params=params
        ).encode()
        where = str(target)

        try:
            with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as sock:
                sock.bind(("0.0.0.0", 0))
                sock.settimeout(self.timeout_s)

                logger.debug("-> %s %s", where, message)
                sock.sendto(message, (target.host, target.port))
                data, _ = sock.recvfrom(self.buffer_size)

        except socket.timeout as exc:
            raise MarstekTimeoutError(
                f"Timeout after {int(self.timeout_s * 1000)}ms waiting for "
                f"{method} reply from {where}",
                method=method,
                target=where,
            ) from exc

        except OSError as exc:
            raise MarstekTransportError(
                f"UDP error sending {method} to {where}: {exc}",
                method=method,
                target=where,
            ) from exc

        logger.debug("<- %s %s", where, data)
        try:
            reply = parse_reply(data)
        except MarstekProtocolError as exc:
            raise MarstekProtocolError(
                f"Protocol error in {method} reply from {where}: {exc}",
                method=method,
            ) from exc

        return reply.result

