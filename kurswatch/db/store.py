"""JSON file store for the rate history.

Responsibilities
----------------
- Load the persisted history, surfacing unreadable files as CorruptDataError
  instead of pretending the store is empty.
- Overwrite the file on save via a temp file + ``os.replace`` so a crash never
  leaves a half-written document in place of the real one.
- Move a corrupt file aside when the caller decides to start fresh.
"""

from __future__ import annotations

import json
import logging
import os
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from pydantic import ValidationError

from kurswatch.core.errors import CorruptDataError, PersistError
from kurswatch.models import History, history_from_json, history_to_json

logger = logging.getLogger("kurswatch.store")


class RateStore:
    def __init__(self, path: Path):
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    @property
    def _tmp_path(self) -> Path:
        return self._path.with_name(self._path.name + ".tmp")

    # ------------------------------------------------------------------
    def load(self) -> History:
        if not self._path.exists():
            return ()
        try:
            raw = self._path.read_text(encoding="utf-8")
            data = json.loads(raw)
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            raise CorruptDataError(f"cannot read {self._path}: {e}") from e

        if not isinstance(data, list):
            raise CorruptDataError(
                f"{self._path} must hold a JSON array, got {type(data).__name__}"
            )
        try:
            history = history_from_json(data)
        except (ValidationError, TypeError) as e:
            raise CorruptDataError(f"invalid snapshot in {self._path}: {e}") from e
        self._check_order(history)
        logger.debug("loaded %d snapshots from %s", len(history), self._path)
        return history

    def _check_order(self, history: History) -> None:
        # dates strictly ascending: sorted and one snapshot per day
        for prev, cur in zip(history, history[1:]):
            if cur.date == prev.date:
                raise CorruptDataError(
                    f"duplicate snapshot for {cur.date.isoformat()} in {self._path}"
                )
            if cur.date < prev.date:
                raise CorruptDataError(
                    f"snapshot {cur.date.isoformat()} after {prev.date.isoformat()} "
                    f"in {self._path} is out of order"
                )

    def save(self, history: History) -> None:
        tmp = self._tmp_path
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            with tmp.open("w", encoding="utf-8") as f:
                json.dump(history_to_json(history), f, ensure_ascii=False, indent=2)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp, self._path)
        except OSError as e:
            try:
                tmp.unlink(missing_ok=True)
            except OSError:
                logger.warning("could not remove temp file %s", tmp)
            raise PersistError(f"cannot write {self._path}: {e}") from e
        logger.debug("saved %d snapshots to %s", len(history), self._path)

    def quarantine(self) -> Optional[Path]:
        """Rename the current file aside; returns the new path or None if absent."""
        if not self._path.exists():
            return None
        stamp = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%SZ")
        target = self._path.with_name(f"{self._path.name}.corrupt-{stamp}")
        os.replace(self._path, target)
        logger.warning("moved unreadable history file to %s", target)
        return target
