# =============================================================================
# MarstekClient / Venus – Operating mode configuration
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

import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Union

from marstekctl.exceptions import MarstekValidationError

_HHMM = re.compile(r"^([0-1][0-9]|2[0-3]):[0-5][0-9]$")


class Mode(str, Enum):
    """
    Operating modes accepted by `ES.SetMode`.

    The value is the exact mode name used on the wire.
    """

    AUTO = "Auto"
    AI = "AI"
    MANUAL = "Manual"
    PASSIVE = "Passive"


@dataclass(frozen=True)
class ManualConfig:
    """
    One time slot of the Manual mode schedule.

    Attributes:
        time_num: Time slot index (0-9).
        start_time: Slot start, "HH:MM".
        end_time: Slot end, "HH:MM".
        week_set: Weekday bitmask, low 7 bits used (1=Monday, 127=every day).
        power: Power setpoint (W). Negative values charge the battery.
        enable: 1 to enable the slot, 0 to disable it.
    """

    time_num: int
    start_time: str
    end_time: str
    week_set: int
    power: int
    enable: int

    def to_params(self) -> Dict[str, Any]:
        return {
            "time_num": self.time_num,
            "start_time": self.start_time,
            "end_time": self.end_time,
            "week_set": self.week_set,
            "power": self.power,
            "enable": self.enable,
        }


@dataclass(frozen=True)
class PassiveConfig:
    """
    Passive mode setpoint.

    Attributes:
        power: Power setpoint (W). Negative values charge the battery.
        cd_time: Countdown in seconds after which the setpoint expires.
    """

    power: int
    cd_time: int

    def to_params(self) -> Dict[str, Any]:
        return {"power": self.power, "cd_time": self.cd_time}


@dataclass(frozen=True)
class AutoMode:
    mode = Mode.AUTO

    def to_params(self) -> Dict[str, Any]:
        return {"mode": self.mode.value, "auto_cfg": {"enable": 1}}


@dataclass(frozen=True)
class AIMode:
    mode = Mode.AI

    def to_params(self) -> Dict[str, Any]:
        return {"mode": self.mode.value, "ai_cfg": {"enable": 1}}


@dataclass(frozen=True)
class ManualMode:
    manual_cfg: ManualConfig
    mode = Mode.MANUAL

    def to_params(self) -> Dict[str, Any]:
        return {"mode": self.mode.value, "manual_cfg": self.manual_cfg.to_params()}


@dataclass(frozen=True)
class PassiveMode:
    passive_cfg: PassiveConfig
    mode = Mode.PASSIVE

    def to_params(self) -> Dict[str, Any]:
        return {"mode": self.mode.value, "passive_cfg": self.passive_cfg.to_params()}


ModeConfig = Union[AutoMode, AIMode, ManualMode, PassiveMode]


def _require_sub_config(mode: Mode, config: Optional[Mapping[str, Any]], key: str) -> Any:
    if config is None:
        raise MarstekValidationError(
            f"{mode.value} mode requires config with {key}", mode=mode.value, field=key
        )
    sub = config.get(key) if isinstance(config, Mapping) else None
    if sub is None:
        raise MarstekValidationError(
            f"Missing {key} in config", mode=mode.value, field=key
        )
    return sub


def _check_keys(mode: Mode, key: str, sub: Any, allowed: tuple) -> None:
    if not isinstance(sub, Mapping):
        raise MarstekValidationError(
            f"{key} must be an object, got {type(sub).__name__}",
            mode=mode.value, field=key, value=sub,
        )
    for name in allowed:
        if name not in sub:
            raise MarstekValidationError(
                f"Missing {key}.{name}", mode=mode.value, field=name
            )
    unexpected = sorted(set(sub) - set(allowed))
    if unexpected:
        raise MarstekValidationError(
            f"Unexpected field(s) in {key}: {', '.join(map(str, unexpected))}",
            mode=mode.value, field=unexpected[0],
        )


def _int_field(
    mode: Mode,
    sub: Mapping[str, Any],
    name: str,
    lo: Optional[int] = None,
    hi: Optional[int] = None,
) -> int:
    value = sub[name]
    if not isinstance(value, int) or isinstance(value, bool):
        raise MarstekValidationError(
            f"{name} must be an integer, got {value!r}",
            mode=mode.value, field=name, value=value,
        )
    if (lo is not None and value < lo) or (hi is not None and value > hi):
        raise MarstekValidationError(
            f"{name} out of range: {value}", mode=mode.value, field=name, value=value
        )
    return value


def _time_field(mode: Mode, sub: Mapping[str, Any], name: str) -> str:
    value = sub[name]
    if not isinstance(value, str) or not _HHMM.match(value):
        raise MarstekValidationError(
            f"{name} must be formatted HH:MM, got {value!r}",
            mode=mode.value, field=name, value=value,
        )
    return value


def _manual_config(sub: Any) -> ManualConfig:
    if isinstance(sub, ManualConfig):
        return sub

    mode = Mode.MANUAL
    _check_keys(
        mode, "manual_cfg", sub,
        ("time_num", "start_time", "end_time", "week_set", "power", "enable"),
    )

    enable = sub["enable"]
    if isinstance(enable, bool):
        enable = int(enable)
    elif enable not in (0, 1) or not isinstance(enable, int):
        raise MarstekValidationError(
            f"enable must be 0 or 1, got {enable!r}",
            mode=mode.value, field="enable", value=enable,
        )

    return ManualConfig(
        time_num=_int_field(mode, sub, "time_num", 0, 9),
        start_time=_time_field(mode, sub, "start_time"),
        end_time=_time_field(mode, sub, "end_time"),
        week_set=_int_field(mode, sub, "week_set", 0, 127),
        power=_int_field(mode, sub, "power"),
        enable=enable,
    )


def _passive_config(sub: Any) -> PassiveConfig:
    if isinstance(sub, PassiveConfig):
        return sub

    mode = Mode.PASSIVE
    _check_keys(mode, "passive_cfg", sub, ("power", "cd_time"))
    return PassiveConfig(
        power=_int_field(mode, sub, "power"),
        cd_time=_int_field(mode, sub, "cd_time", 0),
    )


def build_mode_config(mode: str, config: Optional[Mapping[str, Any]] = None) -> ModeConfig:
    """
    Validate a mode name and its caller-supplied configuration.

    Rules, checked in order:
      1. `mode` must be one of Auto, AI, Manual, Passive.
      2. Auto and AI ignore `config`; `{"enable": 1}` is synthesized.
      3. Manual requires `config["manual_cfg"]`.
      4. Passive requires `config["passive_cfg"]`.

    Args:
        mode: Mode name, exactly as used on the wire.
        config: Optional mapping holding `manual_cfg` / `passive_cfg`.

    Returns:
        The typed mode configuration.

    Raises:
        MarstekValidationError: On an unknown mode, a missing sub-configuration,
        or an invalid sub-configuration field.
    """
    try:
        selected = Mode(mode)
    except ValueError:
        raise MarstekValidationError(
            f"Unknown mode: {mode}", mode=str(mode), value=mode
        ) from None

    if selected is Mode.AUTO:
        return AutoMode()
    if selected is Mode.AI:
        return AIMode()
    if selected is Mode.MANUAL:
        return ManualMode(_manual_config(_require_sub_config(selected, config, "manual_cfg")))
    return PassiveMode(_passive_config(_require_sub_config(selected, config, "passive_cfg")))
