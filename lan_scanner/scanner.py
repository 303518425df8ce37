# =============================================================================
# Network LAN Scanner Library
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
from dataclasses import dataclass, asdict
from typing import Any, Dict, List, Optional

from marstekctl.client import (
    BROADCAST_ADDRESS,
    DISCOVERY_TIMEOUT_S,
    RECV_BUFFER_SIZE,
    MarstekClient,
)
from marstekctl.exceptions import MarstekProtocolError, MarstekTransportError
from marstekctl.models import DEFAULT_PORT, RequestEnvelope, parse_reply

logger = logging.getLogger(__name__)

# {"id":0,"method":"Marstek.GetDevice","params":{"ble_mac":"0"}}
DISCOVERY_REQUEST = RequestEnvelope(
    id=0,
    method=MarstekClient.GET_DEVICE_METHOD,
    params={"ble_mac": "0"},
).encode()


@dataclass
class DiscoveredDevice:
    """
    Representation of a Marstek device that answered a discovery broadcast.

    Attributes:
        ip: IPv4 address the reply came from.
        port: API port of the device (always the well-known default port).
        device: Optional model name reported by the device (e.g. "VenusE").
        ver: Optional firmware version reported by the device.
    """
    ip: str
    port: int = DEFAULT_PORT
    device: Optional[str] = None
    ver: Optional[int] = None

    def as_dict(self) -> Dict[str, Any]:
        return asdict(self)


class LanScanError(MarstekTransportError):
    """
    Custom error type used to signal failures while starting a discovery scan.
    """
    pass


def _device_from_result(ip: str, result: Any) -> DiscoveredDevice:
    """
    Build a DiscoveredDevice from the `result` member of a discovery reply.

    Fields with an unexpected type are left unknown instead of rejecting the
    whole reply.
    """
    name = None
    ver = None
    if isinstance(result, dict):
        if isinstance(result.get("device"), str):
            name = result["device"]
        v = result.get("ver")
        if isinstance(v, int) and not isinstance(v, bool) and v >= 0:
            ver = v
    return DiscoveredDevice(ip=ip, port=DEFAULT_PORT, device=name, ver=ver)


def discover_devices(
    timeout_s: float = DISCOVERY_TIMEOUT_S,
    *,
    broadcast_address: str = BROADCAST_ADDRESS,
    port: int = DEFAULT_PORT,
) -> List[DiscoveredDevice]:
    """
    Broadcast a `Marstek.GetDevice` request and collect the replies.

    The scan keeps receiving until no datagram arrives for `timeout_s`
    seconds. Each source IP is reported once (first reply wins); datagrams
    that are not JSON, or JSON replies without a `result` member, are
    ignored.

    Args:
        timeout_s: Receive timeout that ends the scan window.
        broadcast_address: Destination of the discovery request.
        port: Destination UDP port.

    Returns:
        Discovered devices in arrival order (possibly empty).

    Raises:
        LanScanError if the broadcast socket cannot be opened or the request
        cannot be sent.
    """
    devices: Dict[str, DiscoveredDevice] = {}

    try:
        sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
    except OSError as e:
        raise LanScanError(f"Unable to open discovery socket. Error: {e}") from e

    with sock:
        try:
            sock.setsockopt(socket.SOL_SOCKET, socket.SO_BROADCAST, 1)
            sock.bind(("0.0.0.0", 0))
            sock.settimeout(timeout_s)
            sock.sendto(DISCOVERY_REQUEST, (broadcast_address, port))
        except OSError as e:
            raise LanScanError(
                f"Unable to send discovery broadcast to {broadcast_address}:{port}. Error: {e}",
                method=MarstekClient.GET_DEVICE_METHOD,
                target=f"{broadcast_address}:{port}",
            ) from e

        logger.info("Discovery broadcast sent to %s:%d", broadcast_address, port)

        while True:
            try:
                data, addr = sock.recvfrom(RECV_BUFFER_SIZE)
            except socket.timeout:
                break
            except OSError as e:
                # Any other receive fault also ends the scan.
                logger.debug("Discovery receive failed, ending scan: %s", e)
                break

            try:
                reply = parse_reply(data)
            except MarstekProtocolError as e:
                logger.debug("Ignoring malformed datagram from %s: %s", addr[0], e)
                continue

            if not reply.has_result:
                continue

            ip = addr[0]
            if ip in devices:
                continue

            devices[ip] = _device_from_result(ip, reply.result)
            logger.info(
                "Found device: IP=%s model=%s ver=%s",
                ip, devices[ip].device or "-", devices[ip].ver,
            )

    return list(devices.values())
