"""Tests for the Qt worker, using a mocked Venus client."""

import time
from unittest.mock import MagicMock

import pytest
from PySide6.QtCore import QThread

from lan_scanner import DiscoveredDevice, LanScanError
from marstekctl import MarstekTimeoutError, MarstekValidationError, TargetAddress
from Venus import DashboardSnapshot, Venus
from venusApp.net import VenusWorker


@pytest.fixture
def client():
    mock = MagicMock(spec=Venus)
    mock.current_device.return_value = TargetAddress()
    mock.get_dashboard.return_value = MagicMock(spec=DashboardSnapshot, degraded=())
    return mock


@pytest.fixture
def worker(qapp, client):
    w = VenusWorker(client, poll_interval_s=60)
    w.events = []
    w.connected.connect(lambda ip: w.events.append(("connected", ip)))
    w.disconnected.connect(lambda reason: w.events.append(("disconnected", reason)))
    w.snapshot.connect(lambda snap: w.events.append(("snapshot", snap)))
    w.devices.connect(lambda found: w.events.append(("devices", found)))
    w.modeApplied.connect(lambda mode, ok: w.events.append(("mode", mode, ok)))
    yield w
    w.stop()


def test_start_without_device_waits(worker, client):
    worker.start()

    assert not worker.polling
    client.get_dashboard.assert_not_called()
    assert worker.events == []


def test_start_with_selected_device_polls(worker, client):
    client.current_device.return_value = TargetAddress("10.0.0.7")

    worker.start()

    assert worker.polling
    assert worker.events[0] == ("connected", "10.0.0.7")
    assert worker.events[1] == ("snapshot", client.get_dashboard.return_value)


def test_select_device_starts_polling(worker, client):
    worker.select_device("10.0.0.8", 0)

    client.select_device.assert_called_once_with("10.0.0.8", None)
    assert worker.polling
    assert ("connected", "10.0.0.8") in worker.events


def test_invalid_selection_reported(worker, client):
    client.select_device.side_effect = MarstekValidationError("Invalid device host: ''")
    logs = []
    worker.log.connect(logs.append)

    worker.select_device("", 0)

    assert not worker.polling
    assert any("Invalid device" in m for m in logs)


def test_poll_failure_stops_without_reconnecting(worker, client):
    worker.select_device("10.0.0.8", 30000)
    client.get_dashboard.side_effect = MarstekTimeoutError("Timeout after 5000ms")

    worker._tick_poll()

    assert not worker.polling
    assert worker.events[-1] == ("disconnected", "Timeout after 5000ms")
    client.discover_devices.assert_not_called()


def test_mode_requests_applied_on_next_tick(worker, client):
    client.set_mode.side_effect = [True, MarstekValidationError("Missing manual_cfg in config")]
    worker.request_mode("Auto", None)
    worker.request_mode("Manual", {})
    client.set_mode.assert_not_called()

    worker._tick_poll()

    assert client.set_mode.call_args_list[0].args == ("Auto", None)
    assert client.set_mode.call_args_list[1].args == ("Manual", {})
    assert ("mode", "Auto", True) in worker.events
    assert ("mode", "Manual", False) in worker.events
    # Queue drained; the dashboard still polled after the commands
    worker._tick_poll()
    assert client.set_mode.call_count == 2
    assert client.get_dashboard.call_count == 2


def test_discover_emits_devices(worker, client):
    found = [DiscoveredDevice(ip="10.0.0.2", device="VenusE", ver=144)]
    client.discover_devices.return_value = found

    worker.discover()

    assert worker.events == [("devices", found)]


def test_discover_failure_emits_empty_list(worker, client):
    client.discover_devices.side_effect = LanScanError("Permission denied")

    worker.discover()

    assert worker.events == [("devices", [])]


def test_stop_clears_queue(worker, client):
    worker.request_mode("AI", None)
    worker.stop()

    worker._tick_poll()

    client.set_mode.assert_not_called()
    client.get_dashboard.assert_not_called()


def test_shutdown_stops_timer_on_worker_thread(qapp, client):
    client.current_device.return_value = TargetAddress("10.0.0.7")
    w = VenusWorker(client, poll_interval_s=60)
    th = QThread()
    w.moveToThread(th)
    th.started.connect(w.start)
    th.start()
    try:
        deadline = time.monotonic() + 2.0
        while not w.polling and time.monotonic() < deadline:
            time.sleep(0.01)
        assert w.polling

        w.shutdown()

        assert not w.polling
    finally:
        th.quit()
        assert th.wait(2000)
