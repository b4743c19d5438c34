from __future__ import annotations

import asyncio

import pytest

from kurswatch.services.scheduler import RefreshScheduler


def test_runs_immediately_then_repeats():
    runs = []

    async def job():
        runs.append(asyncio.get_running_loop().time())

    async def scenario():
        scheduler = RefreshScheduler(job, interval=0.01)
        scheduler.start()
        await asyncio.sleep(0)
        first = len(runs)
        await asyncio.sleep(0.1)
        await scheduler.stop()
        return first, scheduler.running

    first, running = asyncio.run(scenario())

    assert first == 1
    assert len(runs) >= 3
    assert running is False


def test_failing_job_does_not_stop_the_loop():
    calls = []

    async def job():
        calls.append(1)
        if len(calls) == 1:
            raise RuntimeError("boom")

    async def scenario():
        scheduler = RefreshScheduler(job, interval=0.01)
        scheduler.start()
        await asyncio.sleep(0.08)
        await scheduler.stop()

    asyncio.run(scenario())

    assert len(calls) >= 2


def test_start_twice_keeps_single_task():
    async def job():
        return None

    async def scenario():
        scheduler = RefreshScheduler(job, interval=10)
        first = scheduler.start()
        second = scheduler.start()
        await scheduler.stop()
        await scheduler.stop()
        return first is second

    assert asyncio.run(scenario()) is True


def test_interval_must_be_positive():
    async def job():
        return None

    with pytest.raises(ValueError):
        RefreshScheduler(job, interval=0)


def test_cadence_does_not_drift_with_job_duration():
    starts = []

    async def slow_job():
        starts.append(asyncio.get_running_loop().time())
        await asyncio.sleep(0.06)

    async def scenario():
        scheduler = RefreshScheduler(slow_job, interval=0.1)
        scheduler.start()
        await asyncio.sleep(0.35)
        await scheduler.stop()

    asyncio.run(scenario())

    assert len(starts) >= 3
    gaps = [b - a for a, b in zip(starts, starts[1:])]
    # sleeping a full interval after each run would give gaps of ~0.16
    assert all(0.08 < gap < 0.14 for gap in gaps)


def test_overrunning_job_skips_missed_ticks():
    starts = []

    async def overrunning_job():
        starts.append(asyncio.get_running_loop().time())
        if len(starts) == 1:
            await asyncio.sleep(0.25)

    async def scenario():
        scheduler = RefreshScheduler(overrunning_job, interval=0.1)
        scheduler.start()
        await asyncio.sleep(0.37)
        await scheduler.stop()

    asyncio.run(scenario())

    # first run ends at ~0.25, next tick on the original phase is ~0.3
    assert len(starts) >= 2
    assert 0.27 < starts[1] - starts[0] < 0.34
