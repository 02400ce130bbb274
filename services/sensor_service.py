from __future__ import annotations

import logging
from typing import Optional

from PyQt5.QtCore import QObject, QThread, QTimer, pyqtSignal, pyqtSlot

from workers import FetchWorker
import config

logger = logging.getLogger(__name__)


class SensorService(QObject):
    """
    Periodic acquisition of sensor samples.

    The HTTP call runs on a worker thread; results come back to the thread that
    owns the service through queued signals, so every consumer of
    ``sample_received`` / ``fetch_failed`` runs on the GUI thread.

    At most one request is outstanding. A tick (timer, manual refresh or
    restart) that arrives while a request is in flight is dropped and counted
    in ``dropped_ticks``.
    """
    sample_received = pyqtSignal(object)  # data_model.Sample
    fetch_failed = pyqtSignal(str)
    _fetch_requested = pyqtSignal()

    def __init__(self, adapter, parent: Optional[QObject] = None) -> None:
        super().__init__(parent)
        self.interval_s = config.DEFAULT_REFRESH_INTERVAL_S
        self.dropped_ticks = 0
        self._in_flight = False

        self._thread = QThread()
        self._thread.setObjectName("SensorFetchThread")
        self.worker = FetchWorker(adapter)
        self.worker.moveToThread(self._thread)
        self._fetch_requested.connect(self.worker.fetch)
        self.worker.sample_ready.connect(self._on_sample)
        self.worker.failed.connect(self._on_failed)

        self._timer = QTimer(self)
        self._timer.timeout.connect(self.request_fetch)

    @property
    def in_flight(self) -> bool:
        return self._in_flight

    @property
    def active(self) -> bool:
        return self._timer.isActive()

    @property
    def running(self) -> bool:
        return self._thread.isRunning()

    def start(self, interval_s: Optional[int] = None) -> None:
        self.restart(interval_s if interval_s is not None else self.interval_s)

    def restart(self, interval_s: int) -> None:
        """Cancel the pending tick, fetch once now, then tick every ``interval_s`` seconds."""
        lo, hi = config.REFRESH_INTERVAL_RANGE
        if not lo <= interval_s <= hi:
            raise ValueError(f"Refresh interval must be between {lo} and {hi} seconds")
        # The fetch below is queued to the worker; it is only answered once the thread runs
        if not self._thread.isRunning():
            self._thread.start()
        self._timer.stop()
        self.interval_s = interval_s
        self.request_fetch()
        self._timer.start(interval_s * 1000)
        logger.info("Acquisition every %d s", interval_s)

    @pyqtSlot()
    def refresh_now(self) -> bool:
        return self.request_fetch()

    @pyqtSlot()
    def request_fetch(self) -> bool:
        if self._in_flight:
            self.dropped_ticks += 1
            logger.debug("Fetch still outstanding, dropping tick (%d dropped)", self.dropped_ticks)
            return False
        self._in_flight = True
        self._fetch_requested.emit()
        return True

    def stop(self) -> None:
        """Stop ticking and wait for a running fetch to finish before closing the adapter."""
        self._timer.stop()
        if self._thread.isRunning():
            self._thread.quit()
            self._thread.wait()
        self._in_flight = False
        self.worker.close()

    @pyqtSlot(object)
    def _on_sample(self, sample) -> None:
        self._in_flight = False
        self.sample_received.emit(sample)

    @pyqtSlot(str)
    def _on_failed(self, message: str) -> None:
        self._in_flight = False
        self.fetch_failed.emit(message)
