# =============================================================================
# venusApp – Network/Device worker (Qt thread + discovery + polling)
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
from collections import deque
from typing import Optional

from PySide6.QtCore import QMetaObject, QObject, Qt, QThread, Signal, Slot, QTimer

from marstekctl.exceptions import MarstekError
from Venus import Venus


class VenusWorker(QObject):
    """
    Background worker that owns all device I/O.

    Design:
      - Runs in a dedicated QThread (moved using QObject.moveToThread).
      - Every call into `Venus` blocks (up to 5 s per exchange, 30 s for a
        dashboard), so the worker must never live on the UI thread.
      - A QTimer polls the dashboard once a device has been selected.
      - Mode changes are queued under a lock and applied at the start of the
        next poll tick, so only one exchange is ever in flight.
      - A failed poll stops polling; nothing reconnects automatically. A new
        `select_device()` starts polling again.

    Signals:
      - connected(ip): emitted when a device is selected and polling starts.
      - disconnected(reason): emitted when a poll fails.
      - snapshot(obj): emitted with each DashboardSnapshot.
      - devices(list): emitted with the result of a discovery scan.
      - modeApplied(mode, ok): emitted after each mode change attempt.
      - log(msg): emitted for logging/debug.
    """

    connected = Signal(str)            # ip
    disconnected = Signal(str)         # reason
    snapshot = Signal(object)          # DashboardSnapshot
    devices = Signal(object)           # List[DiscoveredDevice]
    modeApplied = Signal(str, bool)    # mode, set_result
    log = Signal(str)

    def __init__(self, client: Optional[Venus] = None, poll_interval_s: float = 10.0):
        super().__init__()
        self._stop = False
        self._client = client or Venus()

        # UI signals may enqueue mode changes while a poll tick is running.
        # The lock only covers queue access, never a device exchange.
        self._cmd_lock = threading.Lock()
        self._cmd_queue = deque()  # items: (mode, config)

        self._poll_timer = QTimer(self)
        self._poll_timer.setInterval(int(poll_interval_s * 1000))
        self._poll_timer.timeout.connect(self._tick_poll)

    @property
    def client(self) -> Venus:
        return self._client

    @property
    def polling(self) -> bool:
        return self._poll_timer.isActive()

    @Slot()
    def start(self):
        """
        Start the worker lifecycle.

        Intended to be connected to QThread.started. Polls immediately if a
        device was already selected on the client, otherwise waits for
        `select_device()` or `discover()`.
        """
        self._stop = False
        target = self._client.current_device()
        if target.is_configured:
            self._start_polling(target.host)
        else:
            self.log.emit("Worker started. No device selected.")

    @Slot()
    def stop(self):
        """
        Stop the worker.

        Must run on the worker's own thread (the poll timer lives there).
        Other threads use `shutdown()`.
        """
        self._stop = True
        self._poll_timer.stop()
        with self._cmd_lock:
            self._cmd_queue.clear()

    def shutdown(self):
        """
        Stop the worker from any thread, returning once `stop()` has run.

        Call this from the main thread before quitting the worker's QThread.
        """
        if self.thread() == QThread.currentThread() or not self.thread().isRunning():
            self.stop()
            return
        QMetaObject.invokeMethod(self, "stop", Qt.ConnectionType.BlockingQueuedConnection)

    @Slot(str, int)
    def select_device(self, ip: str, port: int = 0):
        """
        Select a device and (re)start polling it.

        Args:
            ip: Device IP address.
            port: Device API port; 0 selects the default port.
        """
        try:
            self._client.select_device(ip, port or None)
        except MarstekError as e:
            self.log.emit(f"Invalid device {ip}:{port}: {e}")
            return
        self._start_polling(ip)

    @Slot()
    def discover(self):
        """
        Run one discovery scan (blocks for the scan window) and emit the
        result through `devices`.
        """
        if self._stop:
            return
        self.log.emit("Searching devices on the LAN...")
        try:
            found = self._client.discover_devices()
        except MarstekError as e:
            self.log.emit(f"Discovery error: {e}")
            found = []
        for d in found:
            self.log.emit(f"Found device: IP={d.ip} model={d.device or '-'}")
        self.devices.emit(found)

    @Slot(str, object)
    def request_mode(self, mode: str, config: object = None):
        """
        Enqueue a mode change; it is applied on the next poll tick.

        Args:
            mode: "Auto", "AI", "Manual" or "Passive".
            config: Mapping with `manual_cfg` / `passive_cfg` when required.
        """
        self.log.emit(f"QUEUE MODE {mode}")
        with self._cmd_lock:
            self._cmd_queue.append((mode, config))

    def _start_polling(self, ip: str):
        self.connected.emit(ip)
        self.log.emit(f"Polling device at {ip}")
        self._poll_timer.start()
        self._tick_poll()

    @Slot()
    def _tick_poll(self):
        """
        Poll tick handler.

          - applies queued mode changes
          - reads the dashboard and emits a snapshot

        On a device error: emits disconnected(reason) and stops polling.
        """
        if self._stop:
            return

        self._process_commands()

        try:
            snap = self._client.get_dashboard()
        except MarstekError as e:
            self.disconnected.emit(str(e))
            self.log.emit(f"Disconnected: {e}")
            self._poll_timer.stop()
            return

        if snap.degraded:
            self.log.emit(f"Undecodable sections: {', '.join(snap.degraded)}")
        self.snapshot.emit(snap)

    def _process_commands(self):
        """
        Drain the command queue and apply each mode change in order.

        Errors are reported per command and do not stop the remaining ones.
        """
        with self._cmd_lock:
            cmds = list(self._cmd_queue)
            self._cmd_queue.clear()

        for mode, config in cmds:
            try:
                self.log.emit(f"Switching to {mode} mode...")
                ok = self._client.set_mode(mode, config)
            except MarstekError as e:
                self.log.emit(f"Command error mode({mode}): {e}")
                ok = False
            self.modeApplied.emit(mode, ok)
