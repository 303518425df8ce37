# =============================================================================
# MarstekClient / Venus – Models
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

from dataclasses import dataclass, asdict, fields
from typing import Any, Dict, Optional, Tuple

from marstekctl.exceptions import MarstekDecodeError

_UINT32_MAX = 2 ** 32 - 1
_INT32_MIN = -(2 ** 31)
_INT32_MAX = 2 ** 31 - 1


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


# Accepted JSON value kinds per status field.
_CHECKS = {
    "str": lambda v: isinstance(v, str),
    "bool": lambda v: isinstance(v, bool),
    "uint": lambda v: _is_int(v) and 0 <= v <= _UINT32_MAX,
    "int": lambda v: _is_int(v) and _INT32_MIN <= v <= _INT32_MAX,
    "float": lambda v: _is_int(v) or isinstance(v, float),
}


class StatusRecord:
    """
    Mixin shared by every status record.

    Subclasses are frozen dataclasses whose fields are all optional and
    default to None ("unknown"), plus a `_KINDS` mapping of field name to
    expected JSON kind ("str", "bool", "uint", "int", "float").
    """

    _KINDS: Dict[str, str] = {}

    @classmethod
    def from_result(cls, result: Any):
        """
        Decode a reply `result` into this record.

        Members that are absent or null stay unknown; members not declared by
        the record are ignored.

        Raises:
            MarstekDecodeError: If `result` is not an object or a member has
            the wrong type.
        """
        name = cls.__name__
        if not isinstance(result, dict):
            raise MarstekDecodeError(
                f"{name}: expected an object, got {type(result).__name__}",
                record=name,
            )

        values: Dict[str, Any] = {}
        for f in fields(cls):
            value = result.get(f.name)
            if value is None:
                continue
            kind = cls._KINDS[f.name]
            if not _CHECKS[kind](value):
                raise MarstekDecodeError(
                    f"{name}.{f.name}: expected {kind}, got {value!r}",
                    record=name,
                    field=f.name,
                )
            values[f.name] = float(value) if kind == "float" else value
        return cls(**values)

    @classmethod
    def unknown(cls):
        """Record with every field unknown."""
        return cls()

    def as_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class DeviceInfo(StatusRecord):
    """
    Device identity, from `Marstek.GetDevice`.

    Attributes:
        device: Model name (e.g. "VenusC", "VenusE").
        ver: Firmware version.
        ble_mac: Bluetooth MAC address.
        wifi_mac: WiFi MAC address.
        wifi_name: SSID the device is connected to.
        ip: IP address reported by the device.
    """

    device: Optional[str] = None
    ver: Optional[int] = None
    ble_mac: Optional[str] = None
    wifi_mac: Optional[str] = None
    wifi_name: Optional[str] = None
    ip: Optional[str] = None

    _KINDS = {
        "device": "str",
        "ver": "uint",
        "ble_mac": "str",
        "wifi_mac": "str",
        "wifi_name": "str",
        "ip": "str",
    }


@dataclass(frozen=True)
class BatteryStatus(StatusRecord):
    """
    Battery pack status, from `Bat.GetStatus`.

    Attributes:
        soc: State of charge (%).
        charg_flag: Charging permitted.
        dischrg_flag: Discharging permitted.
        bat_temp: Battery temperature (°C).
        bat_capacity: Remaining capacity (Wh).
        rated_capacity: Rated capacity (Wh).
    """

    soc: Optional[int] = None
    charg_flag: Optional[bool] = None
    dischrg_flag: Optional[bool] = None
    bat_temp: Optional[float] = None
    bat_capacity: Optional[float] = None
    rated_capacity: Optional[float] = None

    _KINDS = {
        "soc": "uint",
        "charg_flag": "bool",
        "dischrg_flag": "bool",
        "bat_temp": "float",
        "bat_capacity": "float",
        "rated_capacity": "float",
    }


@dataclass(frozen=True)
class EnergyStatus(StatusRecord):
    """
    Energy system status, from `ES.GetStatus`. Powers in W, energies in Wh.
    """

    bat_soc: Optional[int] = None
    bat_cap: Optional[float] = None
    pv_power: Optional[float] = None
    ongrid_power: Optional[float] = None
    offgrid_power: Optional[float] = None
    bat_power: Optional[float] = None
    total_pv_energy: Optional[float] = None
    total_grid_output_energy: Optional[float] = None
    total_grid_input_energy: Optional[float] = None
    total_load_energy: Optional[float] = None

    _KINDS = {
        "bat_soc": "uint",
        "bat_cap": "float",
        "pv_power": "float",
        "ongrid_power": "float",
        "offgrid_power": "float",
        "bat_power": "float",
        "total_pv_energy": "float",
        "total_grid_output_energy": "float",
        "total_grid_input_energy": "float",
        "total_load_energy": "float",
    }


@dataclass(frozen=True)
class ModeStatus(StatusRecord):
    """Current operating mode, from `ES.GetMode`."""

    mode: Optional[str] = None
    ongrid_power: Optional[float] = None
    offgrid_power: Optional[float] = None
    bat_soc: Optional[int] = None

    _KINDS = {
        "mode": "str",
        "ongrid_power": "float",
        "offgrid_power": "float",
        "bat_soc": "uint",
    }


@dataclass(frozen=True)
class MeterStatus(StatusRecord):
    """Energy meter (CT) readings per phase, from `EM.GetStatus`."""

    ct_state: Optional[int] = None
    a_power: Optional[float] = None
    b_power: Optional[float] = None
    c_power: Optional[float] = None
    total_power: Optional[float] = None

    _KINDS = {
        "ct_state": "uint",
        "a_power": "float",
        "b_power": "float",
        "c_power": "float",
        "total_power": "float",
    }


@dataclass(frozen=True)
class WifiStatus(StatusRecord):
    """WiFi link status, from `Wifi.GetStatus`."""

    ssid: Optional[str] = None
    rssi: Optional[int] = None
    sta_ip: Optional[str] = None

    _KINDS = {
        "ssid": "str",
        "rssi": "int",
        "sta_ip": "str",
    }


@dataclass(frozen=True)
class DashboardSnapshot:
    """
    Snapshot of every status facet of the selected device.

    Built fresh on each `Venus.get_dashboard()` call; never cached.

    Attributes:
        device: Device identity.
        battery: Battery pack status.
        energy: Energy system status.
        mode: Current operating mode.
        meter: Energy meter readings.
        wifi: WiFi link status.
        timestamp: Local wall-clock time of assembly, formatted "HH:MM:SS".
        degraded: Names of the sections whose reply could not be decoded and
            were replaced by all-unknown records.
    """

    device: DeviceInfo
    battery: BatteryStatus
    energy: EnergyStatus
    mode: ModeStatus
    meter: MeterStatus
    wifi: WifiStatus
    timestamp: str
    degraded: Tuple[str, ...] = ()

    def as_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["degraded"] = list(self.degraded)
        return data
