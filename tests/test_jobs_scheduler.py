"""Tests for jobs.scheduler."""

from __future__ import annotations

from types import SimpleNamespace


class _FakeScheduler:
    def __init__(self, *args, **kwargs):
        self.jobs: dict[str, dict] = {}
        self.started = False
        self.running = False
        self.stopped = False

    def add_job(self, func, **kwargs):
        self.jobs[kwargs["id"]] = {"func": func, **kwargs}

    def start(self):
        self.started = True
        self.running = True

    def shutdown(self, wait: bool = False):
        self.stopped = True
        self.running = False


def _fake_settings(**overrides):
    values = {"schedule_interval_minutes": 15, "timezone": "UTC"}
    values.update(overrides)
    return SimpleNamespace(**values)


def test_setup_scheduler_registers_non_overlapping_sync_job(monkeypatch):
    import calmirror.jobs.scheduler as scheduler

    monkeypatch.setattr(scheduler, "BlockingScheduler", _FakeScheduler)
    monkeypatch.setattr(scheduler, "get_settings", lambda: _fake_settings())

    sched = scheduler.setup_scheduler()

    job = sched.jobs["periodic_sync"]
    assert job["func"] == "calmirror.jobs.sync_job:run_scheduled_sync"
    assert job["max_instances"] == 1
    assert job["coalesce"] is True
    assert job["trigger"].interval.total_seconds() == 15 * 60
    assert sched.started is False

    scheduler.shutdown_scheduler()
    assert scheduler.get_scheduler() is None


def test_run_scheduler_starts_and_cleans_up(monkeypatch):
    import calmirror.jobs.scheduler as scheduler

    created: list[_FakeScheduler] = []

    class _Recording(_FakeScheduler):
        def __init__(self, *args, **kwargs):
            super().__init__(*args, **kwargs)
            created.append(self)

    monkeypatch.setattr(scheduler, "BlockingScheduler", _Recording)
    monkeypatch.setattr(scheduler, "get_settings", lambda: _fake_settings())

    scheduler.run_scheduler()

    assert created[0].started is True
    assert created[0].stopped is True
    assert scheduler.get_scheduler() is None


def test_run_scheduler_handles_keyboard_interrupt(monkeypatch):
    import calmirror.jobs.scheduler as scheduler

    class _Interrupted(_FakeScheduler):
        def start(self):
            self.running = True
            raise KeyboardInterrupt

    monkeypatch.setattr(scheduler, "BlockingScheduler", _Interrupted)
    monkeypatch.setattr(scheduler, "get_settings", lambda: _fake_settings())

    scheduler.run_scheduler()

    assert scheduler.get_scheduler() is None


def test_get_scheduler_returns_current_instance(monkeypatch):
    import calmirror.jobs.scheduler as scheduler

    sentinel = object()
    monkeypatch.setattr(scheduler, "_scheduler", sentinel)
    assert scheduler.get_scheduler() is sentinel
