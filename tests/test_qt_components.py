import threading
import time
from datetime import datetime, timedelta
from unittest import mock

import pytest

from controllers.sensor_adapter import FetchError
from data_model import Channel, Sample, SensorDataModel
from services.recommendations import SoilType
from services.sensor_service import SensorService
from services.settings_store import Settings
from ui.channel_chart import ChannelChart
from ui.render_sync import RenderSync
from ui.settings_widget import SettingsWidget
from workers import FetchWorker

T0 = datetime(2024, 5, 1, 12, 0, 0)


@pytest.fixture
def service(qtbot):
    adapter = mock.Mock()
    svc = SensorService(adapter)
    yield svc
    svc.stop()


def test_worker_emits_sample(qtbot):
    sample = Sample(T0, temperature=20.0)
    adapter = mock.Mock()
    adapter.fetch.return_value = sample
    worker = FetchWorker(adapter)
    received, failures = [], []
    worker.sample_ready.connect(received.append)
    worker.failed.connect(failures.append)
    worker.fetch()
    assert received == [sample]
    assert failures == []


def test_worker_reports_fetch_error(qtbot):
    adapter = mock.Mock()
    adapter.fetch.side_effect = FetchError("Endpoint returned HTTP 500")
    worker = FetchWorker(adapter)
    failures = []
    worker.failed.connect(failures.append)
    worker.fetch()
    assert failures == ["Endpoint returned HTTP 500"]


def test_service_drops_ticks_while_a_fetch_is_outstanding(service):
    assert service.request_fetch() is True
    assert service.in_flight
    assert service.refresh_now() is False
    assert service.request_fetch() is False
    assert service.dropped_ticks == 2


def test_service_accepts_next_tick_after_result(service):
    received, failures = [], []
    service.sample_received.connect(received.append)
    service.fetch_failed.connect(failures.append)
    sample = Sample(T0, moisture=50.0)

    service.request_fetch()
    service.worker.sample_ready.emit(sample)
    assert received == [sample]
    assert not service.in_flight

    assert service.request_fetch() is True
    service.worker.failed.emit("boom")
    assert failures == ["boom"]
    assert not service.in_flight


def test_restart_fetches_now_and_reschedules(service):
    service.restart(5)
    assert service.in_flight
    assert service.active
    assert service.interval_s == 5
    assert service._timer.interval() == 5000


def test_restart_rejects_bad_interval(service):
    with pytest.raises(ValueError):
        service.restart(0)
    assert not service.active


def test_stop_cancels_timer_and_closes_adapter(qtbot):
    adapter = mock.Mock()
    svc = SensorService(adapter)
    svc.restart(10)
    svc.stop()
    assert not svc.active
    adapter.close.assert_called_once_with()


def test_channel_chart_tracks_series(qtbot):
    chart = ChannelChart(Channel.TEMPERATURE)
    qtbot.addWidget(chart)
    chart.set_series(["00:01", "00:02", "00:03"], [None, 20.0, 21.0])
    assert chart.labels == ["00:01", "00:02", "00:03"]
    assert chart.values == [None, 20.0, 21.0]


def test_channel_chart_accepts_all_gaps(qtbot):
    chart = ChannelChart(Channel.MOISTURE)
    qtbot.addWidget(chart)
    chart.set_series(["00:01", "00:02"], [None, None])
    assert len(chart.labels) == len(chart.values) == 2


def test_channel_chart_rejects_mismatched_series(qtbot):
    chart = ChannelChart(Channel.PRESSURE)
    qtbot.addWidget(chart)
    with pytest.raises(ValueError):
        chart.set_series(["00:01"], [])


def test_real_chart_matches_buffer_through_resizes(qtbot):
    model = SensorDataModel()
    model.resize(5, now=T0)
    sync = RenderSync(model)
    chart = ChannelChart(Channel.TEMPERATURE)
    qtbot.addWidget(chart)
    sync.attach(Channel.TEMPERATURE, chart)

    for i in range(1, 9):
        model.add_sample(Sample(T0 + timedelta(seconds=i), temperature=20.0 + i))
        sync.sync(Channel.TEMPERATURE)
    model.resize(30, now=T0 + timedelta(seconds=20))
    sync.sync(Channel.TEMPERATURE)

    assert len(chart.labels) == len(chart.values) == len(model.buffer(Channel.TEMPERATURE)) == 30


def test_settings_widget_emits_on_save_only(qtbot):
    widget = SettingsWidget(Settings(30, SoilType.UNSET, True))
    qtbot.addWidget(widget)
    saved = []
    widget.settings_saved.connect(saved.append)

    widget.interval_spin.setValue(10)
    widget.soil_combo.setCurrentIndex(widget.soil_combo.findData("loamy"))
    assert saved == []

    widget.save_btn.click()
    assert saved == [Settings(10, SoilType.LOAMY, True)]


def test_worker_reports_unexpected_errors(qtbot):
    adapter = mock.Mock()
    adapter.fetch.side_effect = RuntimeError("driver crashed")
    worker = FetchWorker(adapter)
    failures = []
    worker.failed.connect(failures.append)
    worker.fetch()
    assert failures == ["Unexpected error: driver crashed"]


def test_restart_before_start_runs_the_worker(qtbot):
    adapter = mock.Mock()
    adapter.fetch.return_value = Sample(T0, temperature=20.0)
    svc = SensorService(adapter)
    received = []
    svc.sample_received.connect(received.append)
    try:
        svc.restart(30)
        assert svc.running
        qtbot.waitUntil(lambda: not svc.in_flight, timeout=5000)
        assert received == [Sample(T0, temperature=20.0)]
        assert svc.request_fetch() is True
    finally:
        svc.stop()


def test_stop_waits_for_a_slow_fetch_before_closing_adapter(qtbot):
    started = threading.Event()
    events = []

    def slow_fetch():
        started.set()
        time.sleep(0.5)
        events.append("fetch done")
        return Sample(T0)

    adapter = mock.Mock()
    adapter.fetch.side_effect = slow_fetch
    adapter.close.side_effect = lambda: events.append("closed")
    svc = SensorService(adapter)
    svc.start(30)
    assert started.wait(5)

    svc.stop()

    assert not svc.running
    assert not svc.active
    assert events == ["fetch done", "closed"]
