"""Test fixtures: loopback UDP fake device and a shared Qt core application."""

import json
import socket
import threading
import time

import pytest

from Venus import Venus


class FakeDevice:
    """
    Minimal Marstek device answering on 127.0.0.1.

    `replies` maps a method name to what the device answers:
      - a JSON value: sent back as `{"id": ..., "src": ..., "result": value}`
      - bytes: sent back verbatim
      - FakeDevice.SILENT: no answer at all (the client times out)
      - FakeDevice.NO_RESULT: a reply envelope without `result`
    Methods missing from `replies` are answered with an empty result object.
    """

    SILENT = object()
    NO_RESULT = object()

    def __init__(self, delay_s: float = 0.0):
        self.replies = {}
        self.requests = []
        self.delay_s = delay_s
        self._sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
        self._sock.bind(("127.0.0.1", 0))
        self._sock.settimeout(0.05)
        self._stop = threading.Event()
        self._thread = threading.Thread(target=self._run, name="fake-venus", daemon=True)

    @property
    def host(self) -> str:
        return "127.0.0.1"

    @property
    def port(self) -> int:
        return self._sock.getsockname()[1]

    @property
    def methods(self):
        return [r["method"] for r in self.requests]

    def start(self):
        self._thread.start()
        return self

    def close(self):
        self._stop.set()
        self._thread.join(timeout=2.0)
        self._sock.close()

    def _run(self):
        while not self._stop.is_set():
            try:
                data, addr = self._sock.recvfrom(4096)
            except socket.timeout:
                continue
            except OSError:
                break

            request = json.loads(data.decode("utf-8"))
            self.requests.append(request)
            reply = self.replies.get(request["method"], {})
            if reply is self.SILENT:
                continue
            if self.delay_s:
                time.sleep(self.delay_s)

            if isinstance(reply, bytes):
                payload = reply
            elif reply is self.NO_RESULT:
                payload = json.dumps({"id": request["id"], "src": "VenusE-test"}).encode()
            else:
                payload = json.dumps(
                    {"id": request["id"], "src": "VenusE-test", "result": reply}
                ).encode()
            self._sock.sendto(payload, addr)


@pytest.fixture
def fake_device():
    """Running fake device, stopped after the test."""
    device = FakeDevice().start()
    yield device
    device.close()


@pytest.fixture
def venus(fake_device):
    """Venus client with a short timeout, already pointed at the fake device."""
    client = Venus(timeout_s=0.5, discovery_timeout_s=0.2)
    client.select_device(fake_device.host, fake_device.port)
    return client


@pytest.fixture(scope="session")
def qapp():
    """Shared QCoreApplication; Qt timers need one to exist."""
    from PySide6.QtCore import QCoreApplication

    app = QCoreApplication.instance() or QCoreApplication([])
    yield app


@pytest.fixture
def slow_device():
    """Fake device that waits half a second before every reply."""
    device = FakeDevice(delay_s=0.5).start()
    yield device
    device.close()
