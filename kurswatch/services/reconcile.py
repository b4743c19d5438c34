"""Merge a freshly fetched snapshot into the bounded history.

Outcomes:
    - new date       -> append; drop the single oldest entry if over the limit
    - same date, rates differ -> replace that entry in place
    - same date, rates equal  -> history returned untouched (same tuple)

Only one entry is evicted per call. With a polling interval far shorter than a
day at most one new date arrives between calls, so the bound holds; after a
misconfiguration that lets several dates through, the history can briefly stay
above the limit until later inserts trim it.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from kurswatch.models import HISTORY_LIMIT, History, RateSnapshot

INSERTED = "inserted"
REPLACED = "replaced"
UNCHANGED = "unchanged"


@dataclass(frozen=True)
class ReconcileResult:
    history: History
    changed: bool
    action: str
    evicted: Optional[RateSnapshot] = None


def _index_of(history: History, snapshot: RateSnapshot) -> Optional[int]:
    for idx, entry in enumerate(history):
        if entry.date == snapshot.date:
            return idx
    return None


def reconcile(
    history: History, incoming: RateSnapshot, limit: int = HISTORY_LIMIT
) -> ReconcileResult:
    history = tuple(history)
    idx = _index_of(history, incoming)

    if idx is None:
        updated = history + (incoming,)
        evicted: Optional[RateSnapshot] = None
        if len(updated) > limit:
            evicted = updated[0]
            updated = updated[1:]
        return ReconcileResult(updated, True, INSERTED, evicted)

    if history[idx].same_rates(incoming):
        return ReconcileResult(history, False, UNCHANGED)

    updated = history[:idx] + (incoming,) + history[idx + 1 :]
    return ReconcileResult(updated, True, REPLACED)
