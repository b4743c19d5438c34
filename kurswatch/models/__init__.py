"""Pydantic domain models for the exchange-rate dashboard."""

from .constants import (
    DEFAULT_CURRENCIES,
    HISTORY_LIMIT,
    HOME_CURRENCY,
    UPDATE_VIEW_EVENT,
)  # re-export
from .snapshot import History, RateSnapshot, history_from_json, history_to_json

__all__ = [
    "DEFAULT_CURRENCIES",
    "HISTORY_LIMIT",
    "HOME_CURRENCY",
    "UPDATE_VIEW_EVENT",
    "History",
    "RateSnapshot",
    "history_from_json",
    "history_to_json",
]
