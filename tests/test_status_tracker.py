from datetime import timedelta

from services.status_tracker import StatusTracker, format_uptime


def test_starts_online_with_empty_log(clock):
    tracker = StatusTracker(clock=clock)
    assert tracker.record.online is True
    assert tracker.record.error_log == []
    assert tracker.record.last_success is None
    assert tracker.record.uptime_start == clock.now


def test_fetch_failure_does_not_change_online(clock):
    tracker = StatusTracker(clock=clock)
    entry = tracker.record_fetch_failure("HTTP 500")
    assert tracker.record.online is True
    assert tracker.record.error_log == [entry]
    assert entry.endswith("Failed to fetch sensor data: HTTP 500")


def test_connectivity_loss_flips_online_without_logging(clock):
    tracker = StatusTracker(clock=clock)
    assert tracker.connectivity_lost() is True
    assert tracker.record.online is False
    assert tracker.record.error_log == []


def test_repeated_event_reports_no_change(clock):
    tracker = StatusTracker(clock=clock)
    tracker.connectivity_lost()
    assert tracker.connectivity_lost() is False
    assert tracker.connectivity_restored() is True
    assert tracker.record.online is True


def test_failure_while_offline_keeps_offline(clock):
    tracker = StatusTracker(clock=clock)
    tracker.connectivity_lost()
    tracker.record_fetch_failure("timeout")
    assert tracker.record.online is False


def test_error_log_is_never_trimmed(clock):
    tracker = StatusTracker(clock=clock)
    for i in range(500):
        tracker.record_fetch_failure(str(i))
    assert len(tracker.record.error_log) == 500
    assert tracker.record.error_log[0].endswith(": 0")


def test_success_updates_timestamp_and_count(clock):
    tracker = StatusTracker(clock=clock)
    stamp = clock.advance(3)
    tracker.record_success(stamp)
    tracker.record_success()
    assert tracker.record.last_success == stamp
    assert tracker.record.samples == 2


def test_uptime_text(clock):
    tracker = StatusTracker(clock=clock)
    clock.advance(3723)
    assert tracker.uptime() == timedelta(seconds=3723)
    assert tracker.uptime_text() == "Uptime: 01:02:03"


def test_format_uptime_never_negative():
    assert format_uptime(timedelta(seconds=-5)) == "Uptime: 00:00:00"
