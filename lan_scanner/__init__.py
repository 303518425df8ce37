from .scanner import DiscoveredDevice, LanScanError, discover_devices, DISCOVERY_REQUEST

__all__ = ["DiscoveredDevice", "LanScanError", "discover_devices", "DISCOVERY_REQUEST"]
