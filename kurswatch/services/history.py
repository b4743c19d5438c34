"""History handle and the fetch -> reconcile -> persist -> notify cycle.

Purpose:
    Own the single in-memory History and keep the JSON file in step with it.

Design:
    - HistoryState holds a tuple reference that is swapped wholesale, so a new
      subscriber reading ``current`` sees either the old or the new history.
    - Mutation runs under an asyncio.Lock; the blocking HTTP fetch happens in a
      worker thread before the lock is taken.
    - A failed save leaves the new history in memory, logs a durability error
      and marks the state dirty; the next cycle saves again even if nothing
      changed.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Optional

from kurswatch.core.errors import CorruptDataError, FetchError, PersistError
from kurswatch.core.logging import correlation_id_ctx, new_cycle_id
from kurswatch.db.store import RateStore
from kurswatch.models import HISTORY_LIMIT, History
from kurswatch.services.notifier import Notifier
from kurswatch.services.rates.base import SupportsFetch
from kurswatch.services.reconcile import ReconcileResult, reconcile

logger = logging.getLogger("kurswatch.refresh")


def load_initial_history(store: RateStore, policy: str = "empty") -> History:
    """Load the store at startup applying the corrupt-file policy ('empty' or 'fail')."""
    try:
        return store.load()
    except CorruptDataError:
        if policy == "fail":
            logger.exception("history store is corrupt; refusing to start")
            raise
        logger.exception("history store is corrupt; starting with empty history")
        try:
            store.quarantine()
        except OSError as e:
            logger.error(
                "could not move unreadable history file %s aside: %s", store.path, e
            )
        return ()


class HistoryState:
    def __init__(self, history: History = ()):
        self._history: History = tuple(history)
        self.dirty = False
        self.lock = asyncio.Lock()

    @property
    def current(self) -> History:
        return self._history

    def replace(self, history: History) -> None:
        self._history = tuple(history)


class RefreshPipeline:
    def __init__(
        self,
        provider: SupportsFetch,
        store: RateStore,
        state: HistoryState,
        notifier: Notifier,
        limit: int = HISTORY_LIMIT,
    ):
        self.provider = provider
        self.store = store
        self.state = state
        self.notifier = notifier
        self.limit = limit

    async def run_once(self) -> Optional[ReconcileResult]:
        """Run one cycle; returns None when the fetch failed."""
        token = correlation_id_ctx.set(new_cycle_id())
        try:
            return await self._run()
        finally:
            correlation_id_ctx.reset(token)

    async def _run(self) -> Optional[ReconcileResult]:
        logger.info("refresh start")
        try:
            snapshot = await asyncio.to_thread(self.provider.fetch)
        except FetchError as e:
            logger.error("refresh.fetch_failed: %s", e)
            return None

        async with self.state.lock:
            result = reconcile(self.state.current, snapshot, self.limit)
            if not result.changed:
                logger.info("refresh unchanged date=%s", snapshot.date.isoformat())
                if self.state.dirty:
                    self._persist(result.history)
                return result

            self.state.replace(result.history)
            self._persist(result.history)

            if result.evicted is not None:
                logger.info("evicted snapshot date=%s", result.evicted.date.isoformat())
            logger.info(
                "refresh %s date=%s entries=%d",
                result.action,
                snapshot.date.isoformat(),
                len(result.history),
            )
            # Still under the lock so overlapping runs broadcast in commit order.
            await self.notifier.broadcast(result.history)
        return result

    def _persist(self, history: History) -> None:
        try:
            self.store.save(history)
        except PersistError as e:
            self.state.dirty = True
            logger.error(
                "refresh.persist_failed: durability violation, in-memory history "
                "differs from %s: %s",
                self.store.path,
                e,
            )
            return
        if self.state.dirty:
            logger.info("pending history written to %s", self.store.path)
        self.state.dirty = False
