from functools import lru_cache
from pathlib import Path
from typing import Set, Tuple

from pydantic import AnyHttpUrl, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from app.models.constants import RATE_PROVIDERS

DEFAULT_DATA_DIR = Path(__file__).resolve().parent.parent / "data"


class Settings(BaseSettings):
    """Application settings loaded from environment with defaults.

    Environment variable mapping follows pydantic's rules (e.g., PORT, DEBUG,
    EXCHANGE_RATE_PROVIDER, HTTP_TIMEOUT_SECONDS, RATES_CACHE_TTL_SECONDS).
    """

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Basic app metadata
    app_name: str = "Currency Service"
    debug: bool = False
    version: str = "0.1.0"

    # Listening address; PORT is the usual deployment override
    host: str = "0.0.0.0"
    port: int = 7000

    # Exchange rates
    # Allowed: 'static' (bundled ECB reference table), 'external-http' (live API)
    exchange_rate_provider: str = "static"
    exchange_api_base_url: AnyHttpUrl = "https://api.exchangeratesapi.io"  # type: ignore[assignment]
    http_timeout_seconds: float = Field(5.0, gt=0)

    # 0 disables caching; every conversion then asks the provider
    rates_cache_ttl_seconds: int = Field(0, ge=0)
    rates_cache_max_entries: int = Field(256, gt=0)

    # Test harness only: slow down lookups for these target currencies
    artificial_latency_currencies: Set[str] = set()
    artificial_latency_ms: Tuple[int, int] = (1000, 2000)

    # Bundled reference data (supported codes, EUR based rates)
    currency_data_dir: Path = DEFAULT_DATA_DIR

    def init_post_load(self) -> None:
        """Normalize and validate derived fields."""
        if self.exchange_rate_provider not in RATE_PROVIDERS:
            raise ValueError(
                f"Unsupported exchange_rate_provider '{self.exchange_rate_provider}'. Allowed: {sorted(RATE_PROVIDERS)}"
            )
        low, high = self.artificial_latency_ms
        if low < 0 or high < low:
            raise ValueError(
                f"artificial_latency_ms must satisfy 0 <= min <= max, got {self.artificial_latency_ms}"
            )
        self.artificial_latency_currencies = {
            c.upper() for c in self.artificial_latency_currencies
        }
        if not self.currency_data_dir.is_dir():
            raise ValueError(f"currency_data_dir {self.currency_data_dir} does not exist")


@lru_cache
def get_settings() -> Settings:
    settings = Settings()
    settings.init_post_load()
    return settings
