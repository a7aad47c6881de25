"""Pydantic and dataclass models for the currency converter API."""

from .constants import (
    BASE_CURRENCY,
    CURRENCY_NAMES,
    STATIC_RATES_TO_BASE,
    SUPPORTED_CURRENCIES,
)  # re-export
from .conversion import (
    ConversionIn,
    ConversionOut,
    ConversionRequest,
    ConversionResult,
    CurrencyListOut,
    CurrencyOut,
    ErrorOut,
    HistoryRecord,
    RateHistoryOut,
    RateHistoryPoint,
    RateSnapshot,
)

__all__ = [
    "BASE_CURRENCY",
    "CURRENCY_NAMES",
    "STATIC_RATES_TO_BASE",
    "SUPPORTED_CURRENCIES",
    "ConversionIn",
    "ConversionOut",
    "ConversionRequest",
    "ConversionResult",
    "CurrencyListOut",
    "CurrencyOut",
    "ErrorOut",
    "HistoryRecord",
    "RateHistoryOut",
    "RateHistoryPoint",
    "RateSnapshot",
]
