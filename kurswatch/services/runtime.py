from __future__ import annotations

"""Wiring of the long-lived components shared by routers and the lifespan."""
from dataclasses import dataclass
from typing import Optional

from kurswatch.core.config import Settings
from kurswatch.db.store import RateStore
from kurswatch.services.history import HistoryState, RefreshPipeline
from kurswatch.services.notifier import Notifier
from kurswatch.services.rates.base import SupportsFetch
from kurswatch.services.rates.providers import make_rate_provider
from kurswatch.services.scheduler import RefreshScheduler


@dataclass
class Runtime:
    settings: Settings
    store: RateStore
    state: HistoryState
    notifier: Notifier
    pipeline: RefreshPipeline
    scheduler: RefreshScheduler


def build_runtime(
    settings: Settings, provider: Optional[SupportsFetch] = None
) -> Runtime:
    provider = provider or make_rate_provider(settings.rate_provider, settings)
    store = RateStore(settings.history_path)  # type: ignore[arg-type]
    state = HistoryState()
    notifier = Notifier()
    pipeline = RefreshPipeline(
        provider, store, state, notifier, limit=settings.history_limit
    )
    scheduler = RefreshScheduler(pipeline.run_once, settings.poll_interval_seconds)
    return Runtime(settings, store, state, notifier, pipeline, scheduler)
