"""Background escalation scheduler."""

import threading
import time

import pytest

from campus_complaints.services.background.escalation_scheduler import (
    EscalationScheduler,
    SchedulerConfig,
    next_deadline,
)

WAIT = 5.0


@pytest.mark.parametrize(
    "previous, now, interval, expected",
    [
        (0.0, 0.5, 10.0, (10.0, 0)),
        (0.0, 10.0, 10.0, (10.0, 0)),
        (0.0, 12.0, 10.0, (20.0, 1)),
        (0.0, 35.0, 10.0, (40.0, 3)),
        (100.0, 99.0, 10.0, (110.0, 0)),
    ],
)
def test_next_deadline(previous, now, interval, expected):
    assert next_deadline(previous, now, interval) == expected


def test_next_deadline_rejects_non_positive_interval():
    with pytest.raises(ValueError):
        next_deadline(0.0, 1.0, 0)


def test_config_from_settings(settings):
    config = SchedulerConfig.from_settings(settings)

    assert config.interval_seconds == 24 * 3600
    assert config.run_on_start is True


def test_run_once_returns_sweep_result():
    scheduler = EscalationScheduler(lambda: "report")

    assert scheduler.run_once() == "report"
    assert scheduler.runs == 1
    assert scheduler.last_result == "report"


def test_run_once_propagates_sweep_errors():
    def boom():
        raise RuntimeError("db down")

    scheduler = EscalationScheduler(boom)

    with pytest.raises(RuntimeError):
        scheduler.run_once()
    assert scheduler.runs == 0
    assert not scheduler.is_sweeping


def test_overlapping_run_is_skipped():
    entered = threading.Event()
    release = threading.Event()

    def slow_sweep():
        entered.set()
        release.wait(WAIT)
        return "done"

    scheduler = EscalationScheduler(slow_sweep)
    worker = threading.Thread(target=scheduler.run_once)
    worker.start()
    try:
        assert entered.wait(WAIT)
        assert scheduler.is_sweeping
        assert scheduler.run_once() is None
    finally:
        release.set()
        worker.join(WAIT)

    assert scheduler.runs == 1
    assert scheduler.last_result == "done"


def test_loop_survives_a_failing_sweep():
    calls = []
    recovered = threading.Event()

    def sweep():
        calls.append(1)
        if len(calls) == 1:
            raise RuntimeError("transient failure")
        recovered.set()
        return len(calls)

    scheduler = EscalationScheduler(sweep, SchedulerConfig(interval_seconds=0.01))
    scheduler.start()
    try:
        assert recovered.wait(WAIT)
    finally:
        assert scheduler.stop(timeout=WAIT)

    assert scheduler.failures == 1
    assert scheduler.runs >= 1


def test_stop_interrupts_the_wait_promptly():
    ran = threading.Event()

    def sweep():
        ran.set()

    scheduler = EscalationScheduler(sweep, SchedulerConfig(interval_seconds=3600))
    scheduler.start()
    assert ran.wait(WAIT)

    started = time.monotonic()
    assert scheduler.stop(timeout=WAIT)
    assert time.monotonic() - started < WAIT
    assert not scheduler.is_running
    assert scheduler.runs == 1


def test_run_on_start_disabled_waits_a_full_interval():
    calls = []
    scheduler = EscalationScheduler(lambda: calls.append(1), SchedulerConfig(interval_seconds=3600, run_on_start=False))

    scheduler.start()
    assert scheduler.is_running
    assert scheduler.stop(timeout=WAIT)
    assert calls == []


def test_start_twice_raises():
    scheduler = EscalationScheduler(lambda: None, SchedulerConfig(interval_seconds=3600))
    scheduler.start()
    try:
        with pytest.raises(RuntimeError):
            scheduler.start()
    finally:
        scheduler.stop(timeout=WAIT)


def test_stop_without_start_is_a_no_op():
    assert EscalationScheduler(lambda: None).stop() is True


def test_overrun_skips_missed_ticks():
    fake_now = [0.0]
    stop_event = threading.Event()
    swept = threading.Event()

    def long_sweep():
        fake_now[0] += 35.0
        stop_event.set()
        swept.set()

    scheduler = EscalationScheduler(
        long_sweep,
        SchedulerConfig(interval_seconds=10.0),
        stop_event=stop_event,
        monotonic=lambda: fake_now[0],
    )
    scheduler.start()
    assert swept.wait(WAIT)
    assert scheduler.stop(timeout=WAIT)

    assert scheduler.runs == 1
    assert scheduler.skipped_ticks == 3
