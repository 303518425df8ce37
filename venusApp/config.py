# =============================================================================
# venusApp – Runtime configuration
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

import os
from dataclasses import dataclass
from typing import Optional

from marstekctl.models import DEFAULT_PORT


@dataclass
class Config:
    """Runtime configuration of the monitor application."""
    DEVICE_HOST: Optional[str] = None   # None: discover on startup
    DEVICE_PORT: int = DEFAULT_PORT
    POLL_INTERVAL_S: float = 10.0
    LOG_LEVEL: str = "INFO"

    @classmethod
    def from_env(cls) -> "Config":
        host = os.getenv("VENUS_DEVICE_HOST") or None
        port = int(os.getenv("VENUS_DEVICE_PORT", str(DEFAULT_PORT)))
        poll = float(os.getenv("VENUS_POLL_INTERVAL_S", "10"))
        level = os.getenv("VENUS_LOG_LEVEL", "INFO").upper()
        return cls(
            DEVICE_HOST=host,
            DEVICE_PORT=port,
            POLL_INTERVAL_S=poll,
            LOG_LEVEL=level,
        )
