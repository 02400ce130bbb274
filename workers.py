import logging

from PyQt5.QtCore import QObject, pyqtSignal, pyqtSlot

from controllers.sensor_adapter import FetchError

logger = logging.getLogger(__name__)


class FetchWorker(QObject):
    """A worker to read the sensor endpoint in a non-blocking way."""
    sample_ready = pyqtSignal(object)  # data_model.Sample
    failed = pyqtSignal(str)

    def __init__(self, adapter, parent=None):
        super().__init__(parent)
        self._adapter = adapter

    @pyqtSlot()
    def fetch(self):
        """Performs one fetch and reports the typed result."""
        try:
            sample = self._adapter.fetch()
        except FetchError as e:
            logger.warning("Sensor fetch failed: %s", e)
            self.failed.emit(str(e))
            return
        except Exception as e:
            # SensorService waits for exactly one answer per request
            logger.exception("Unexpected error while fetching sensor data")
            self.failed.emit(f"Unexpected error: {e}")
            return
        self.sample_ready.emit(sample)

    @pyqtSlot()
    def close(self):
        self._adapter.close()
