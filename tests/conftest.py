from __future__ import annotations

from datetime import date
from pathlib import Path
from typing import Any, List

import pytest

from kurswatch.core.config import Settings
from kurswatch.core.errors import FetchError
from kurswatch.models import RateSnapshot


def make_snapshot(day: str, **rates: float) -> RateSnapshot:
    d = date.fromisoformat(day)
    return RateSnapshot(date=d, display_date=f"label {day}", rates=rates)


def week(start_day: int = 1, count: int = 7, month: str = "2024-01"):
    return tuple(
        make_snapshot(f"{month}-{d:02d}", USD=15600.0 + d)
        for d in range(start_day, start_day + count)
    )


class FakeProvider:
    """Returns queued snapshots (or raises queued exceptions) in order."""

    def __init__(self, *results: Any):
        self.results: List[Any] = list(results)
        self.calls = 0

    def fetch(self) -> RateSnapshot:
        self.calls += 1
        if not self.results:
            raise FetchError("nothing queued")
        item = self.results.pop(0) if len(self.results) > 1 else self.results[0]
        if isinstance(item, Exception):
            raise item
        return item


class FakeSubscriber:
    def __init__(self, fail: bool = False):
        self.fail = fail
        self.messages: List[Any] = []

    async def send_json(self, data: Any) -> None:
        if self.fail:
            raise RuntimeError("socket gone")
        self.messages.append(data)


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    s = Settings(
        data_dir=tmp_path / "data",
        rate_provider="static",
        scheduler_enabled=False,
        poll_interval_seconds=60,
    )
    s.init_post_load()
    return s
