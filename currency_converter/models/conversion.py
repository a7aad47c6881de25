from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ConversionIn(BaseModel):
    """Raw POST /convert body.

    Fields are deliberately untyped: presence and numeric checks belong to the
    conversion pipeline so they surface as 400s with stable messages.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    amount: Any = None
    from_currency: Any = Field(None, alias="from")
    to_currency: Any = Field(None, alias="to")


@dataclass(frozen=True)
class ConversionRequest:
    amount: float
    from_currency: str
    to_currency: str


@dataclass(frozen=True)
class ConversionResult:
    result: float
    rate: float


class ConversionOut(BaseModel):
    success: bool = True
    result: float
    rate: float
    message: str = "Conversion successful"


@dataclass(frozen=True)
class HistoryRecord:
    amount: float
    from_currency: str
    to_currency: str
    converted_amount: float
    exchange_rate: float
    rate_source: str = ""
    estimated: bool = False
    recorded_at: datetime = field(default_factory=_utcnow)


@dataclass(frozen=True)
class RateSnapshot:
    currency_code: str
    rate_to_usd: float
    recorded_at: datetime = field(default_factory=_utcnow)


class CurrencyOut(BaseModel):
    code: str
    name: str


class CurrencyListOut(BaseModel):
    success: bool = True
    currencies: List[CurrencyOut]


class RateHistoryPoint(BaseModel):
    rate_to_usd: float
    recorded_at: datetime


class RateHistoryOut(BaseModel):
    success: bool = True
    history: List[RateHistoryPoint]


class ErrorOut(BaseModel):
    success: bool = False
    message: str
    error: Optional[str] = None
