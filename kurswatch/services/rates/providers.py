from __future__ import annotations

"""Concrete rate providers and factory.

'external-http' asks exchangerate-api.com for rates keyed by the home currency
and inverts them. 'static' returns fixed placeholder values so the dashboard
can run offline.
"""
import logging
from datetime import date, datetime, timezone
from typing import Any, Callable, Dict, Iterable, Mapping, Optional

from kurswatch.core.config import Settings
from kurswatch.core.errors import FetchError
from kurswatch.models import DEFAULT_CURRENCIES, HOME_CURRENCY, RateSnapshot
from kurswatch.services.display import format_display_date
from kurswatch.services.http_client import get_json
from .base import RateProvider

logger = logging.getLogger("kurswatch.rates")

# IDR per 1 unit, rough placeholders
_STATIC_RATES: Dict[str, float] = {
    "USD": 15600.0,
    "CNY": 2150.0,
    "JPY": 104.0,
    "SGD": 11600.0,
    "MYR": 3300.0,
    "SAR": 4160.0,
}


def utc_today() -> date:
    return datetime.now(timezone.utc).date()


def invert_rates(
    provider_rates: Mapping[str, Any], codes: Iterable[str]
) -> Dict[str, float]:
    """Turn provider 'foreign per 1 home unit' into 'home per 1 foreign unit'.

    Codes missing from the payload, or with a non-positive / non-numeric value,
    are left out of the result.
    """
    result: Dict[str, float] = {}
    for code in codes:
        value = provider_rates.get(code)
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            continue
        if value <= 0:
            continue
        result[code] = 1 / float(value)
    return result


def _provider_timestamp(payload: Mapping[str, Any]) -> Optional[str]:
    for key in ("time_last_updated", "time_last_update_unix"):
        raw = payload.get(key)
        if isinstance(raw, (int, float)) and not isinstance(raw, bool):
            ts = datetime.fromtimestamp(raw, tz=timezone.utc).replace(microsecond=0)
            return ts.isoformat().replace("+00:00", "Z")
    raw_date = payload.get("date")
    if isinstance(raw_date, str) and raw_date:
        return raw_date
    return None


class StaticRateProvider(RateProvider):
    def __init__(
        self,
        currencies: Iterable[str] = DEFAULT_CURRENCIES,
        *,
        locale: str = "id",
        today: Callable[[], date] = utc_today,
    ):
        self._currencies = tuple(currencies)
        self._locale = locale
        self._today = today

    def fetch(self) -> RateSnapshot:  # type: ignore[override]
        day = self._today()
        rates = {c: _STATIC_RATES[c] for c in self._currencies if c in _STATIC_RATES}
        return RateSnapshot(
            date=day,
            display_date=format_display_date(day, self._locale),
            rates=rates,
        )


class ExternalHTTPRateProvider(RateProvider):
    """exchangerate-api.com v4 `latest/<HOME>` endpoint.

    The API returns foreign units per 1 home unit; since the dashboard shows
    how much home currency one foreign unit costs, every rate is inverted.
    """

    def __init__(
        self,
        base_url: str = "https://api.exchangerate-api.com/v4/latest",
        home_currency: str = HOME_CURRENCY,
        currencies: Iterable[str] = DEFAULT_CURRENCIES,
        *,
        timeout: float = 5.0,
        retries: int = 0,
        locale: str = "id",
        today: Callable[[], date] = utc_today,
        http_get: Callable[..., Dict[str, Any]] = get_json,
    ):
        self.home_currency = home_currency.upper()
        self._url = f"{str(base_url).rstrip('/')}/{self.home_currency}"
        self._currencies = tuple(c.upper() for c in currencies)
        self._timeout = timeout
        self._retries = retries
        self._locale = locale
        self._today = today
        self._http_get = http_get

    @property
    def url(self) -> str:
        return self._url

    def fetch(self) -> RateSnapshot:  # type: ignore[override]
        payload = self._http_get(self._url, timeout=self._timeout, retries=self._retries)
        provider_rates = payload.get("rates")
        if not isinstance(provider_rates, dict):
            raise FetchError(f"Response from {self._url} has no 'rates' object")

        rates = invert_rates(provider_rates, self._currencies)
        if not rates:
            raise FetchError(
                f"None of {', '.join(self._currencies)} present in response from {self._url}"
            )
        missing = [c for c in self._currencies if c not in rates]
        if missing:
            logger.warning("provider omitted currencies: %s", ", ".join(missing))

        day = self._today()
        return RateSnapshot(
            date=day,
            display_date=format_display_date(day, self._locale),
            rates=rates,
            provider_updated_at=_provider_timestamp(payload),
        )


_PROVIDER_REGISTRY = {
    "static": StaticRateProvider,
    "external-http": ExternalHTTPRateProvider,
}


def make_rate_provider(kind: str, settings: Settings) -> RateProvider:
    cls = _PROVIDER_REGISTRY.get(kind)
    if not cls:
        raise ValueError(f"Unknown rate provider kind '{kind}'")
    if cls is StaticRateProvider:
        return StaticRateProvider(settings.currencies, locale=settings.display_locale)
    return ExternalHTTPRateProvider(
        base_url=str(settings.exchange_api_base_url),
        home_currency=settings.home_currency,
        currencies=settings.currencies,
        timeout=settings.http_timeout_seconds,
        retries=settings.http_retries,
        locale=settings.display_locale,
    )
