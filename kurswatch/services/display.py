"""Human-readable date labels for the dashboard.

Produces "weekday, day month" labels (e.g. ``Senin, 1 Jan``) without relying
on the host's installed system locales.
"""

from __future__ import annotations

from datetime import date
from typing import Dict, Tuple

_WEEKDAYS: Dict[str, Tuple[str, ...]] = {
    "id": ("Senin", "Selasa", "Rabu", "Kamis", "Jumat", "Sabtu", "Minggu"),
    "en": (
        "Monday",
        "Tuesday",
        "Wednesday",
        "Thursday",
        "Friday",
        "Saturday",
        "Sunday",
    ),
}

_MONTHS_SHORT: Dict[str, Tuple[str, ...]] = {
    "id": (
        "Jan",
        "Feb",
        "Mar",
        "Apr",
        "Mei",
        "Jun",
        "Jul",
        "Agu",
        "Sep",
        "Okt",
        "Nov",
        "Des",
    ),
    "en": (
        "Jan",
        "Feb",
        "Mar",
        "Apr",
        "May",
        "Jun",
        "Jul",
        "Aug",
        "Sep",
        "Oct",
        "Nov",
        "Dec",
    ),
}

SUPPORTED_LOCALES = frozenset(_WEEKDAYS)


def format_display_date(day: date, locale: str = "id") -> str:
    locale = locale.lower().split("-")[0].split("_")[0]
    if locale not in SUPPORTED_LOCALES:
        locale = "en"
    weekday = _WEEKDAYS[locale][day.weekday()]
    month = _MONTHS_SHORT[locale][day.month - 1]
    return f"{weekday}, {day.day} {month}"
