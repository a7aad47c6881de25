"""Conversion pipeline: validate -> resolve rate -> compute -> record -> respond.

Validation messages are part of the public API; clients match on them.
"""

from __future__ import annotations

import logging
import math
from typing import Any, Optional

from currency_converter.core.errors import ConversionValidationError
from currency_converter.models import (
    ConversionIn,
    ConversionRequest,
    ConversionResult,
    HistoryRecord,
)
from currency_converter.services.history import HistoryRecorder
from currency_converter.services.money import round2
from currency_converter.services.rates.base import RateQuote, SupportsQuote

logger = logging.getLogger("currency_converter.conversion")

MISSING_FIELDS = "Missing required fields: amount, from, or to"
AMOUNT_NOT_POSITIVE = "Amount must be a positive number"
CODE_NOT_STRING = "Currency codes must be strings"
SAME_CURRENCY = "Cannot convert currency to itself"
RESULT_TOO_LARGE = "Converted amount is too large"


def _is_missing(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _parse_amount(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    try:
        if isinstance(value, (int, float)):
            amount = float(value)
        elif isinstance(value, str):
            amount = float(value.strip())
        else:
            return None
    except (ValueError, OverflowError):
        # OverflowError: JSON integers beyond float range
        return None
    if not math.isfinite(amount) or amount <= 0:
        return None
    return amount


def validate_request(payload: ConversionIn) -> ConversionRequest:
    """Apply the 400-level checks in order; first failure wins."""
    if any(
        _is_missing(v)
        for v in (payload.amount, payload.from_currency, payload.to_currency)
    ):
        raise ConversionValidationError(MISSING_FIELDS)
    amount = _parse_amount(payload.amount)
    if amount is None:
        raise ConversionValidationError(AMOUNT_NOT_POSITIVE)
    if not isinstance(payload.from_currency, str) or not isinstance(
        payload.to_currency, str
    ):
        raise ConversionValidationError(CODE_NOT_STRING)
    from_currency = payload.from_currency.strip().upper()
    to_currency = payload.to_currency.strip().upper()
    if from_currency == to_currency:
        raise ConversionValidationError(SAME_CURRENCY)
    return ConversionRequest(
        amount=amount, from_currency=from_currency, to_currency=to_currency
    )


class ConversionHandler:
    def __init__(self, resolver: SupportsQuote, recorder: HistoryRecorder | None = None):
        self._resolver = resolver
        self._recorder = recorder

    async def handle(self, request: ConversionRequest) -> ConversionResult:
        logger.info(
            "converting %s %s to %s",
            request.amount,
            request.from_currency,
            request.to_currency,
        )
        quote = await self._resolver.quote(request.from_currency, request.to_currency)
        raw = request.amount * quote.rate
        if not math.isfinite(raw):
            raise ConversionValidationError(RESULT_TOO_LARGE)
        result = round2(raw)
        if self._recorder is not None:
            self._record_history(request, result, quote)
        return ConversionResult(result=result, rate=quote.rate)

    def _record_history(
        self, request: ConversionRequest, result: float, quote: RateQuote
    ) -> None:
        record = HistoryRecord(
            amount=request.amount,
            from_currency=request.from_currency,
            to_currency=request.to_currency,
            converted_amount=result,
            exchange_rate=quote.rate,
            rate_source=quote.source,
            estimated=quote.estimated,
        )
        try:
            self._recorder.record(record)  # type: ignore[union-attr]
        except Exception:
            # Scheduling itself failed (e.g. no running loop); the conversion stands.
            logger.exception("could not schedule history write")

    async def convert(self, payload: ConversionIn) -> ConversionResult:
        return await self.handle(validate_request(payload))
