"""Domain constants for rates and history.

Defaults only; the running values come from Settings.
"""

from typing import Tuple

HOME_CURRENCY: str = "IDR"
DEFAULT_CURRENCIES: Tuple[str, ...] = ("USD", "CNY", "JPY", "SGD", "MYR", "SAR")
HISTORY_LIMIT: int = 7

# Real-time channel event name
UPDATE_VIEW_EVENT: str = "update_view"
