from functools import lru_cache
from pathlib import Path
from typing import Optional, Tuple

from pydantic import AnyHttpUrl
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment with defaults.

    Environment variable mapping follows pydantic's rules (e.g., APP_NAME, DEBUG, DATA_DIR, HISTORY_FILENAME, POLL_INTERVAL_SECONDS).
    """

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Basic app metadata
    app_name: str = "KursWatch"
    debug: bool = False
    version: str = "0.1.0"
    host: str = "0.0.0.0"
    port: int = 3000

    # Data & persistence
    data_dir: Path = Path("data")
    history_filename: str = "data_kurs.json"
    history_path: Optional[Path] = None  # derived if not provided
    # Allowed: 'empty' (quarantine corrupt file and start empty), 'fail' (abort startup)
    corrupt_store_policy: str = "empty"

    # Rates
    home_currency: str = "IDR"
    currencies: Tuple[str, ...] = ("USD", "CNY", "JPY", "SGD", "MYR", "SAR")
    history_limit: int = 7
    display_locale: str = "id"

    # Upstream provider
    # Allowed: 'external-http' (exchangerate-api.com), 'static' (fixed placeholders)
    rate_provider: str = "external-http"
    exchange_api_base_url: AnyHttpUrl = "https://api.exchangerate-api.com/v4/latest"  # home currency appended
    http_timeout_seconds: float = 5.0
    http_retries: int = 0

    # Scheduler
    poll_interval_seconds: float = 300.0
    scheduler_enabled: bool = True

    def init_post_load(self) -> None:
        """Finalize derived fields and ensure directories exist."""
        if self.history_path is None:
            self.history_path = self.data_dir / self.history_filename
        self.history_path.parent.mkdir(parents=True, exist_ok=True)
        self.home_currency = self.home_currency.upper()
        self.currencies = tuple(c.upper() for c in self.currencies)

        allowed_providers = {"external-http", "static"}
        if self.rate_provider not in allowed_providers:
            raise ValueError(
                f"Unsupported rate_provider '{self.rate_provider}'. Allowed: {allowed_providers}"
            )
        allowed_policies = {"empty", "fail"}
        if self.corrupt_store_policy not in allowed_policies:
            raise ValueError(
                f"Unsupported corrupt_store_policy '{self.corrupt_store_policy}'. Allowed: {allowed_policies}"
            )
        if self.history_limit < 1:
            raise ValueError("history_limit must be at least 1")
        if self.poll_interval_seconds <= 0:
            raise ValueError("poll_interval_seconds must be positive")


@lru_cache
def get_settings() -> Settings:
    settings = Settings()
    settings.init_post_load()
    return settings
