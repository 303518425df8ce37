# =============================================================================
# Venus - High-level Marstek Venus API built on top of MarstekClient
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

import logging
from datetime import datetime
from typing import Any, List, Mapping, Optional

from lan_scanner import DiscoveredDevice, discover_devices
from marstekctl.client import COMMAND_TIMEOUT_S, DISCOVERY_TIMEOUT_S, MarstekClient
from marstekctl.exceptions import MarstekDecodeError
from marstekctl.models import TargetAddress

from .models import (
    BatteryStatus,
    DashboardSnapshot,
    DeviceInfo,
    EnergyStatus,
    MeterStatus,
    ModeStatus,
    WifiStatus,
)
from .modes import ModeConfig, build_mode_config
from .store import DeviceStore

logger = logging.getLogger(__name__)


class Venus(MarstekClient):
    """
    High-level client for Marstek Venus energy storage systems.

    `Venus` extends :class:`marstekctl.client.MarstekClient` with:
      - a `DeviceStore` holding the selected device
      - LAN discovery of devices
      - typed status queries and the dashboard aggregate
      - operating mode changes

    Every operation is synchronous and blocking. Operations that talk to a
    device copy the selected address out of the store before any I/O, so a
    concurrent `select_device()` never waits on a network exchange.
    """

    GET_DEVICE_PARAMS = {"ble_mac": "0"}
    STATUS_PARAMS = {"id": 0}

    def __init__(
        self,
        timeout_s: float = COMMAND_TIMEOUT_S,
        discovery_timeout_s: float = DISCOVERY_TIMEOUT_S,
        store: Optional[DeviceStore] = None,
    ) -> None:
        super().__init__(timeout_s=timeout_s)
        self.discovery_timeout_s = float(discovery_timeout_s)
        self._store = store or DeviceStore()

    # ---- Selected device ----

    def select_device(self, host: str, port: Optional[int] = None) -> None:
        """
        Select the device every later operation talks to.

        Args:
            host: Device IP address or host name.
            port: Device API port (defaults to 30000).
        """
        target = self._store.select(host, port)
        logger.info("Selected device %s", target)

    def current_device(self) -> TargetAddress:
        """Return the selected device; `host` is None when none is selected."""
        return self._store.current()

    def discover_devices(self, timeout_s: Optional[float] = None) -> List[DiscoveredDevice]:
        """
        Broadcast a discovery request on the LAN and collect the answers.

        This does not read or change the selected device.

        Args:
            timeout_s: Scan window; defaults to `discovery_timeout_s` (3 s).
        """
        window = self.discovery_timeout_s if timeout_s is None else timeout_s
        return discover_devices(window)

    # ---- Status queries ----

    def _status_query(self, method: str, params: Mapping[str, Any]) -> Any:
        target = self._store.require()
        return self.send_command(target, method, dict(params))

    def get_device_info(self) -> DeviceInfo:
        """
        Query the device identity (`Marstek.GetDevice`).

        Raises:
            MarstekConfigurationError: If no device is selected.
            MarstekTransportError / MarstekProtocolError:
                Raised by the parent client when the exchange fails.
            MarstekDecodeError: If the reply has an unexpected shape.
        """
        result = self._status_query(self.GET_DEVICE_METHOD, self.GET_DEVICE_PARAMS)
        return DeviceInfo.from_result(result)

    def get_energy_status(self) -> EnergyStatus:
        """Query the energy system status (`ES.GetStatus`)."""
        result = self._status_query(self.GET_ES_STATUS_METHOD, self.STATUS_PARAMS)
        return EnergyStatus.from_result(result)

    def get_battery_status(self) -> BatteryStatus:
        """Query the battery status (`Bat.GetStatus`)."""
        result = self._status_query(self.GET_BATTERY_STATUS_METHOD, self.STATUS_PARAMS)
        return BatteryStatus.from_result(result)

    def get_wifi_status(self) -> WifiStatus:
        """Query the WiFi link status (`Wifi.GetStatus`)."""
        result = self._status_query(self.GET_WIFI_STATUS_METHOD, self.STATUS_PARAMS)
        return WifiStatus.from_result(result)

    def get_mode_status(self) -> ModeStatus:
        """Query the current operating mode (`ES.GetMode`)."""
        result = self._status_query(self.GET_ES_MODE_METHOD, self.STATUS_PARAMS)
        return ModeStatus.from_result(result)

    def get_meter_status(self) -> MeterStatus:
        """Query the energy meter (`EM.GetStatus`)."""
        result = self._status_query(self.GET_METER_STATUS_METHOD, self.STATUS_PARAMS)
        return MeterStatus.from_result(result)

    def _now(self) -> datetime:
        return datetime.now()

    def get_dashboard(self) -> DashboardSnapshot:
        """
        Query every status facet of the selected device, in sequence.

        The device only handles one UDP request at a time, so the six queries
        run one after the other:
          Marstek.GetDevice, ES.GetStatus, Bat.GetStatus, Wifi.GetStatus,
          ES.GetMode, EM.GetStatus

        A failed exchange aborts the whole dashboard. A reply that arrives
        but cannot be decoded only downgrades its own section to an
        all-unknown record (listed in `degraded`).

        Returns:
            A freshly built DashboardSnapshot stamped with local "HH:MM:SS".

        Raises:
            MarstekConfigurationError: If no device is selected.
            MarstekTransportError / MarstekProtocolError:
                If any of the six exchanges fails.
        """
        target = self._store.require()

        queries = (
            ("device", self.GET_DEVICE_METHOD, self.GET_DEVICE_PARAMS, DeviceInfo),
            ("energy", self.GET_ES_STATUS_METHOD, self.STATUS_PARAMS, EnergyStatus),
            ("battery", self.GET_BATTERY_STATUS_METHOD, self.STATUS_PARAMS, BatteryStatus),
            ("wifi", self.GET_WIFI_STATUS_METHOD, self.STATUS_PARAMS, WifiStatus),
            ("mode", self.GET_ES_MODE_METHOD, self.STATUS_PARAMS, ModeStatus),
            ("meter", self.GET_METER_STATUS_METHOD, self.STATUS_PARAMS, MeterStatus),
        )

        sections = {}
        degraded = []
        for name, method, params, record in queries:
            result = self.send_command(target, method, dict(params))
            try:
                sections[name] = record.from_result(result)
            except MarstekDecodeError as e:
                logger.warning("Dashboard section %r left unknown: %s", name, e)
                sections[name] = record.unknown()
                degraded.append(name)

        return DashboardSnapshot(
            timestamp=self._now().strftime("%H:%M:%S"),
            degraded=tuple(degraded),
            **sections,
        )

    # ---- Mode changes ----

    def set_mode(self, mode: str, config: Optional[Mapping[str, Any]] = None) -> bool:
        """
        Switch the device operating mode (`ES.SetMode`).

        Args:
            mode: "Auto", "AI", "Manual" or "Passive".
            config: Mapping with `manual_cfg` (Manual) or `passive_cfg`
                (Passive). Ignored for Auto and AI.

        Returns:
            The device's `set_result`. When the reply carries no `set_result`
            the change is reported as successful and a warning is logged.

        Raises:
            MarstekConfigurationError: If no device is selected.
            MarstekValidationError: On an unknown mode or invalid config
                (raised before any network I/O).
            MarstekTransportError / MarstekProtocolError:
                Raised by the parent client when the exchange fails.
        """
        target = self._store.require()
        return self._send_mode(target, build_mode_config(mode, config))

    def apply_mode(self, mode_config: ModeConfig) -> bool:
        """
        Same as `set_mode()` for an already validated mode configuration.
        """
        target = self._store.require()
        return self._send_mode(target, mode_config)

    def _send_mode(self, target: TargetAddress, mode_config: ModeConfig) -> bool:
        params = {"id": 0, "config": mode_config.to_params()}
        logger.info("Setting mode %s on %s", mode_config.mode.value, target)

        result = self.send_command(target, self.SET_ES_MODE_METHOD, params)

        set_result = result.get("set_result") if isinstance(result, dict) else None
        if isinstance(set_result, bool):
            return set_result

        logger.warning(
            "ES.SetMode reply from %s has no set_result; assuming success", target
        )
        return True
