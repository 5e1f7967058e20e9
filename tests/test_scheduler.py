import asyncio

import pytest

from portfolio_tracker.scheduler import RefreshScheduler


class FakeTime:
    """Clock and sleep that advance together without real waiting"""

    def __init__(self):
        self.now = 0.0
        self.sleeps = []

    def clock(self):
        return self.now

    async def sleep(self, seconds):
        self.sleeps.append(seconds)
        self.now += seconds


def _job(fake, duration, runs):
    async def job():
        runs.append(fake.now)
        fake.now += duration
    return job


def test_runs_immediately_then_every_interval():
    fake = FakeTime()
    runs = []
    scheduler = RefreshScheduler(60, _job(fake, 10, runs), clock=fake.clock, sleep=fake.sleep)

    asyncio.run(scheduler.run_forever(max_cycles=3))

    assert runs == [0.0, 60.0, 120.0]
    assert fake.sleeps == [50.0, 50.0]
    assert scheduler.cycles == 3


def test_overrunning_cycle_is_followed_immediately():
    fake = FakeTime()
    runs = []
    scheduler = RefreshScheduler(60, _job(fake, 70, runs), clock=fake.clock, sleep=fake.sleep)

    asyncio.run(scheduler.run_forever(max_cycles=2))

    assert runs == [0.0, 70.0]
    assert fake.sleeps == [0.0]


def test_job_errors_do_not_stop_the_loop():
    fake = FakeTime()
    calls = []

    async def flaky():
        calls.append(fake.now)
        if len(calls) == 1:
            raise RuntimeError("quote API down")

    scheduler = RefreshScheduler(60, flaky, clock=fake.clock, sleep=fake.sleep)
    asyncio.run(scheduler.run_forever(max_cycles=2))

    assert len(calls) == 2


def test_run_once_returns_job_result():
    async def job():
        return "report"

    scheduler = RefreshScheduler(60, job, clock=lambda: 42.0)

    assert asyncio.run(scheduler.run_once()) == "report"
    assert scheduler.last_run == 42.0


def test_interval_must_be_positive():
    async def job():
        pass

    with pytest.raises(ValueError):
        RefreshScheduler(0, job)


def test_start_and_stop_background_task():
    async def scenario():
        release = asyncio.Event()
        runs = []

        async def job():
            runs.append(1)

        async def blocked_sleep(seconds):
            await release.wait()

        scheduler = RefreshScheduler(60, job, sleep=blocked_sleep)
        task = scheduler.start()
        assert scheduler.start() is task
        await asyncio.sleep(0)
        assert runs == [1]
        assert scheduler.running

        scheduler.stop()
        assert not scheduler.running
        with pytest.raises(asyncio.CancelledError):
            await task

    asyncio.run(scenario())
