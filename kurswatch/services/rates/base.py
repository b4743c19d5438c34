from __future__ import annotations

"""Rate provider abstraction.

A provider produces one normalized RateSnapshot per call: rates are expressed
as home-currency units per 1 unit of each foreign currency.
"""
from abc import ABC, abstractmethod
from typing import Protocol

from kurswatch.models import RateSnapshot


class RateProvider(ABC):
    home_currency: str = "IDR"

    @abstractmethod
    def fetch(self) -> RateSnapshot:
        """Return today's snapshot; raise FetchError when nothing usable arrives."""
        raise NotImplementedError


class SupportsFetch(Protocol):
    def fetch(self) -> RateSnapshot: ...
