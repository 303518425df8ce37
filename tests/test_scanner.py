"""Tests for the UDP broadcast discovery scan, using a mocked socket."""

import json
import socket
from unittest.mock import MagicMock, patch

import pytest

from lan_scanner import DISCOVERY_REQUEST, DiscoveredDevice, LanScanError, discover_devices
from marstekctl import MarstekTransportError


def _reply(device="VenusE", ver=144, **extra):
    result = {"device": device, "ver": ver, "ble_mac": "aabbccddeeff"}
    result.update(extra)
    return json.dumps({"id": 0, "src": f"{device}-x", "result": result}).encode()


@pytest.fixture
def mock_sock():
    sock = MagicMock()
    with patch("lan_scanner.scanner.socket.socket", return_value=sock):
        yield sock


def test_discovery_request_is_fixed():
    assert DISCOVERY_REQUEST == b'{"id":0,"method":"Marstek.GetDevice","params":{"ble_mac":"0"}}'


def test_broadcast_socket_setup(mock_sock):
    mock_sock.recvfrom.side_effect = socket.timeout()

    devices = discover_devices()

    assert devices == []
    mock_sock.setsockopt.assert_called_once_with(socket.SOL_SOCKET, socket.SO_BROADCAST, 1)
    mock_sock.settimeout.assert_called_once_with(3.0)
    mock_sock.sendto.assert_called_once_with(DISCOVERY_REQUEST, ("255.255.255.255", 30000))
    mock_sock.__exit__.assert_called_once()


def test_collects_one_entry_per_ip(mock_sock):
    mock_sock.recvfrom.side_effect = [
        (_reply("VenusE", 144), ("192.168.1.10", 30000)),
        (_reply("VenusC", 150), ("192.168.1.11", 30000)),
        (_reply("VenusE", 144), ("192.168.1.10", 30000)),  # duplicate
        (_reply("VenusD", 160), ("192.168.1.12", 51234)),
        socket.timeout(),
    ]

    devices = discover_devices()

    assert [d.ip for d in devices] == ["192.168.1.10", "192.168.1.11", "192.168.1.12"]
    assert devices[1] == DiscoveredDevice(ip="192.168.1.11", port=30000, device="VenusC", ver=150)
    # Source port of the reply is not used
    assert devices[2].port == 30000


def test_first_reply_wins_for_an_ip(mock_sock):
    mock_sock.recvfrom.side_effect = [
        (_reply("VenusE", 144), ("192.168.1.10", 30000)),
        (_reply("VenusC", 999), ("192.168.1.10", 30000)),
        socket.timeout(),
    ]

    devices = discover_devices()

    assert len(devices) == 1
    assert devices[0].device == "VenusE"
    assert devices[0].ver == 144


def test_malformed_datagrams_are_ignored(mock_sock):
    mock_sock.recvfrom.side_effect = [
        (_reply("VenusE", 144), ("192.168.1.10", 30000)),
        (b"\x00\x01garbage", ("192.168.1.99", 30000)),
        (b'{"id":0,"error":"busy"}', ("192.168.1.98", 30000)),
        (_reply("VenusC", 150), ("192.168.1.11", 30000)),
        socket.timeout(),
    ]

    devices = discover_devices()

    assert [d.ip for d in devices] == ["192.168.1.10", "192.168.1.11"]


def test_unexpected_field_types_left_unknown(mock_sock):
    mock_sock.recvfrom.side_effect = [
        (json.dumps({"id": 0, "result": {"device": 42, "ver": "v1"}}).encode(), ("10.0.0.2", 30000)),
        (json.dumps({"id": 0, "result": None}).encode(), ("10.0.0.3", 30000)),
        socket.timeout(),
    ]

    devices = discover_devices()

    assert devices == [
        DiscoveredDevice(ip="10.0.0.2"),
        DiscoveredDevice(ip="10.0.0.3"),
    ]


def test_receive_fault_ends_scan_quietly(mock_sock):
    mock_sock.recvfrom.side_effect = [
        (_reply("VenusE", 144), ("192.168.1.10", 30000)),
        OSError(101, "Network is unreachable"),
    ]

    devices = discover_devices()

    assert [d.ip for d in devices] == ["192.168.1.10"]


def test_send_failure_raises(mock_sock):
    mock_sock.sendto.side_effect = PermissionError(13, "Permission denied")

    with pytest.raises(LanScanError) as exc_info:
        discover_devices()

    assert isinstance(exc_info.value, MarstekTransportError)
    mock_sock.recvfrom.assert_not_called()


def test_custom_window_and_address(mock_sock):
    mock_sock.recvfrom.side_effect = socket.timeout()

    discover_devices(0.5, broadcast_address="192.168.1.255", port=30001)

    mock_sock.settimeout.assert_called_once_with(0.5)
    mock_sock.sendto.assert_called_once_with(DISCOVERY_REQUEST, ("192.168.1.255", 30001))


def test_as_dict():
    d = DiscoveredDevice(ip="10.0.0.2", device="VenusE", ver=144)
    assert d.as_dict() == {"ip": "10.0.0.2", "port": 30000, "device": "VenusE", "ver": 144}
