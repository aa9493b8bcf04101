"""Currency reference data (supported codes + EUR based reference rates).

Loaded once at startup and injected wherever needed, so routers and the
static rate provider share one read-only view of the bundled JSON files.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Protocol

from app.models.constants import (
    REFERENCE_BASE_CURRENCY,
    REFERENCE_RATES_FILE,
    SUPPORTED_CURRENCIES_FILE,
)

logger = logging.getLogger("app.currency_data")


@dataclass(frozen=True)
class CurrencyInfo:
    code: str
    eur_rate: float  # units of this currency per 1 EUR


class CurrencyDataProvider(Protocol):
    def supported_codes(self) -> List[str]: ...

    def is_supported(self, code: str) -> bool: ...

    def get(self, code: str) -> CurrencyInfo: ...


class JsonCurrencyDataProvider:
    def __init__(self, data_dir: Path):
        supported = json.loads((data_dir / SUPPORTED_CURRENCIES_FILE).read_text("utf-8"))
        raw_rates = json.loads((data_dir / REFERENCE_RATES_FILE).read_text("utf-8"))
        self._codes: List[str] = [c.upper() for c in supported]
        # Values are strings in the ECB feed
        self._rates: Dict[str, float] = {k.upper(): float(v) for k, v in raw_rates.items()}
        self._rates.setdefault(REFERENCE_BASE_CURRENCY, 1.0)
        logger.debug(
            "loaded %d supported currencies, %d reference rates",
            len(self._codes),
            len(self._rates),
        )

    def supported_codes(self) -> List[str]:
        return list(self._codes)

    def is_supported(self, code: str) -> bool:
        return code.upper() in self._codes

    def get(self, code: str) -> CurrencyInfo:
        code = code.upper()
        return CurrencyInfo(code=code, eur_rate=self._rates[code])
