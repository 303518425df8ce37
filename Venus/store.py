# =============================================================================
# MarstekClient / Venus – Selected device store
# -----------------------------------------------------------------------------
# Copyright (c) Alejandro Fernández Rodríguez
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
# @author
#    Alejandro Fernández Rodríguez — github.com/afernandezLuc
#  @version 1.0.0
#  @date 2026-01-07
# =============================================================================

from __future__ import annotations

import threading
from typing import Optional

from marstekctl.exceptions import MarstekConfigurationError, MarstekValidationError
from marstekctl.models import DEFAULT_PORT, TargetAddress


class DeviceStore:
    """
    Thread-safe slot holding the currently selected device.

    The lock only guards the read/write of the stored `TargetAddress`.
    Callers copy the address out with `current()` / `require()` and perform
    network I/O after the lock has been released.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._target = TargetAddress()

    def select(self, host: str, port: Optional[int] = None) -> TargetAddress:
        """
        Replace the selected device.

        Args:
            host: Device IP address or host name.
            port: Device API port; defaults to 30000 when omitted.

        Returns:
            The newly stored address (host kept exactly as given).

        Raises:
            MarstekValidationError: If `host` is empty or blank, or `port` is out of range.
        """
        if not isinstance(host, str) or not host.strip():
            raise MarstekValidationError(
                f"Invalid device host: {host!r}", field="host", value=host
            )
        if port is None:
            port = DEFAULT_PORT
        if isinstance(port, bool) or not isinstance(port, int) or not 0 < port < 65536:
            raise MarstekValidationError(
                f"Invalid device port: {port!r}", field="port", value=port
            )

        target = TargetAddress(host=host, port=port)
        with self._lock:
            self._target = target
        return target

    def current(self) -> TargetAddress:
        """Return a snapshot of the selected device (host may be None)."""
        with self._lock:
            return self._target

    def require(self) -> TargetAddress:
        """
        Return the selected device, failing when none has been selected.

        Raises:
            MarstekConfigurationError: If no device has been selected yet.
        """
        target = self.current()
        if not target.is_configured:
            raise MarstekConfigurationError(
                "Device not configured. Call select_device first."
            )
        return target

    def clear(self) -> None:
        with self._lock:
            self._target = TargetAddress()
