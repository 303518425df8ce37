# =============================================================================
# venusApp – Headless monitor entry point
# -----------------------------------------------------------------------------
# Copyright (c) Alejandro Fernández Rodríguez
#
# This source code is released under the GEL 3.0 License.
#
# DISCLAIMER:
# This program is provided "AS IS", without warranty of any kind, express or
# implied, including but not limited to the warranties of merchantability,
# fitness for a particular purpose, and non-infringement. In no event shall the
# authors be liable for any claim, damages, or other liability arising from,
# out of, or in connection with the use of this software.
#
# LICENSE – GEL 3.0:
# You may use, copy, modify, and distribute this code according to the terms of
# the GEL 3.0 License. A full copy of the license text must accompany any
# redistribution. If the license text is missing, see: https://gel-license.org
# @author
#    Alejandro Fernández Rodríguez — github.com/afernandezLuc
#  @version 1.0.0
#  @date 2026-01-07
# =============================================================================

from __future__ import annotations

import logging
import signal
import sys

from PySide6.QtCore import QCoreApplication, QThread, QTimer

from Venus import DashboardSnapshot, Venus
from venusApp.config import Config
from venusApp.logging_config import configure_logging
from venusApp.net import VenusWorker

logger = logging.getLogger("venusApp")


def _log_snapshot(snap: DashboardSnapshot) -> None:
    logger.info(
        "[%s] SOC=%s%% mode=%s PV=%sW grid=%sW battery=%sW meter=%sW",
        snap.timestamp,
        snap.energy.bat_soc if snap.energy.bat_soc is not None else snap.battery.soc,
        snap.mode.mode,
        snap.energy.pv_power,
        snap.energy.ongrid_power,
        snap.energy.bat_power,
        snap.meter.total_power,
    )


def main():
    """
    Application bootstrap function.

    Responsibilities:
        - Configure logging from the runtime configuration.
        - Create the Qt core application (no window).
        - Launch the VenusWorker in a separate QThread.
        - Select the configured device, or discover and pick the first one.
        - Log every dashboard snapshot until interrupted.

    The worker thread model follows the standard Qt pattern:
        QObject (VenusWorker)  --moved-->  QThread
    """
    config = Config.from_env()
    configure_logging(config.LOG_LEVEL)

    app = QCoreApplication(sys.argv)

    client = Venus()
    if config.DEVICE_HOST:
        client.select_device(config.DEVICE_HOST, config.DEVICE_PORT)

    worker = VenusWorker(client, poll_interval_s=config.POLL_INTERVAL_S)
    worker.log.connect(logger.info)
    worker.snapshot.connect(_log_snapshot)
    worker.disconnected.connect(lambda reason: app.exit(1))

    def _on_devices(found):
        if not found:
            logger.error("No Marstek device answered the discovery broadcast")
            app.exit(2)
            return
        worker.select_device(found[0].ip, found[0].port)

    worker.devices.connect(_on_devices)

    th = QThread()
    worker.moveToThread(th)
    th.started.connect(worker.start)
    if not config.DEVICE_HOST:
        th.started.connect(worker.discover)

    # Let Ctrl+C reach Python: the event loop otherwise never returns to it.
    signal.signal(signal.SIGINT, lambda *_: app.quit())
    heartbeat = QTimer()
    heartbeat.start(500)
    heartbeat.timeout.connect(lambda: None)

    th.start()
    code = app.exec()

    worker.shutdown()
    th.quit()
    th.wait(2000)

    sys.exit(code)


if __name__ == "__main__":
    main()
