from .Venus import Venus
from .models import (
    StatusRecord,
    DeviceInfo,
    BatteryStatus,
    EnergyStatus,
    ModeStatus,
    MeterStatus,
    WifiStatus,
    DashboardSnapshot,
)
from .modes import (
    Mode,
    ModeConfig,
    AutoMode,
    AIMode,
    ManualMode,
    PassiveMode,
    ManualConfig,
    PassiveConfig,
    build_mode_config,
)
from .store import DeviceStore

__all__ = [
    "Venus",
    "DeviceStore",
    "StatusRecord",
    "DeviceInfo",
    "BatteryStatus",
    "EnergyStatus",
    "ModeStatus",
    "MeterStatus",
    "WifiStatus",
    "DashboardSnapshot",
    "Mode",
    "ModeConfig",
    "AutoMode",
    "AIMode",
    "ManualMode",
    "PassiveMode",
    "ManualConfig",
    "PassiveConfig",
    "build_mode_config",
]
