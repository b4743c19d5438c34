from __future__ import annotations

import datetime as dt
from typing import Any, Dict, Iterable, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator


class RateSnapshot(BaseModel):
    """One day's set of rates, in home-currency units per 1 foreign unit.

    Serialized with camelCase keys (``date``, ``displayDate``, ``rates``,
    ``providerUpdatedAt``). Unknown keys are ignored on read so files written by
    newer versions stay loadable.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    date: dt.date
    display_date: str = Field("", alias="displayDate")
    rates: Dict[str, float]
    provider_updated_at: Optional[str] = Field(None, alias="providerUpdatedAt")

    @field_validator("rates")
    @classmethod
    def upper_codes(cls, v: Dict[str, float]) -> Dict[str, float]:
        return {code.upper(): float(value) for code, value in v.items()}

    def same_rates(self, other: "RateSnapshot") -> bool:
        return self.rates == other.rates

    def to_json(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


History = Tuple[RateSnapshot, ...]


def history_to_json(history: Iterable[RateSnapshot]) -> List[Dict[str, Any]]:
    return [snap.to_json() for snap in history]


def history_from_json(data: Iterable[Dict[str, Any]]) -> History:
    """Build a History from decoded JSON; raises pydantic.ValidationError."""
    return tuple(RateSnapshot.model_validate(item) for item in data)
