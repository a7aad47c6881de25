"""Concrete rate sources, one per fallback tier.

Order of use is owned by RateResolver; every source here swallows its own
failure modes and reports them as ``None`` plus a warning log line.
"""

from __future__ import annotations

import asyncio
import logging
import math
from typing import Any, Dict, Iterable, Mapping, Optional, Protocol
from urllib.parse import quote

import httpx

from currency_converter.models.constants import STATIC_RATES_TO_BASE
from currency_converter.services.http_client import HttpError, get_json
from .base import RateQuote, RateSource

logger = logging.getLogger("currency_converter.rates")


class SupportsRateLookup(Protocol):
    def get_rates_to_base(self, codes: Iterable[str]) -> Dict[str, float]: ...


def _positive_number(value: Any) -> Optional[float]:
    """Coerce an untrusted value into a positive finite float, else None."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    value = float(value)
    if not math.isfinite(value) or value <= 0:
        return None
    return value


class LiveApiRateSource(RateSource):
    """exchangerate-api.com style provider: one table per base currency.

    Response shape: ``{"result": "success", "conversion_rates": {"EUR": 0.92, ...}}``
    where each value is units of that currency per 1 base.
    """

    name = "live"

    def __init__(
        self,
        api_key: str,
        base_url: str,
        timeout_ms: int = 5000,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._api_key = api_key
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout_ms / 1000.0
        self._transport = transport

    def _url(self, from_currency: str) -> str:
        return (
            f"{self._base_url}/{quote(self._api_key, safe='')}"
            f"/latest/{quote(from_currency, safe='')}"
        )

    async def try_rate(self, from_currency: str, to_currency: str) -> Optional[float]:
        if not self._api_key:
            logger.debug("live provider skipped: no API key configured")
            return None
        try:
            data = await get_json(
                self._url(from_currency),
                timeout=self._timeout,
                transport=self._transport,
            )
        except HttpError as e:
            logger.warning(
                "live provider failed: %s",
                e,
                extra={"tier": self.name, "from_currency": from_currency},
            )
            return None
        if data.get("result") != "success":
            logger.warning(
                "live provider returned result=%r", data.get("result"),
                extra={"tier": self.name, "from_currency": from_currency},
            )
            return None
        rates = data.get("conversion_rates")
        if not isinstance(rates, Mapping):
            logger.warning("live provider response missing conversion_rates")
            return None
        rate = _positive_number(rates.get(to_currency))
        if rate is None:
            logger.warning(
                "live provider has no usable rate for %s",
                to_currency,
                extra={"tier": self.name, "to_currency": to_currency},
            )
        return rate


class StaticTableRateSource(RateSource):
    """Built-in table of rates to USD; cross rate is to / from."""

    name = "static"

    def __init__(self, rates_to_base: Mapping[str, float] | None = None):
        self._rates = dict(STATIC_RATES_TO_BASE if rates_to_base is None else rates_to_base)

    async def try_rate(self, from_currency: str, to_currency: str) -> Optional[float]:
        from_rate = self._rates.get(from_currency)
        to_rate = self._rates.get(to_currency)
        if from_rate is None or to_rate is None:
            logger.info(
                "static table has no entry for %s/%s",
                from_currency,
                to_currency,
                extra={"tier": self.name},
            )
            return None
        return to_rate / from_rate


class StoredTableRateSource(RateSource):
    """Last resort: the currencies table.

    A missing or non-positive row counts as parity (1.0) for that side, so this
    tier always yields a number.
    """

    name = "stored"
    missing_default = 1.0

    def __init__(self, store: SupportsRateLookup):
        self._store = store

    async def try_rate(self, from_currency: str, to_currency: str) -> Optional[float]:
        found = await self.try_quote(from_currency, to_currency)
        return found.rate if found else None

    async def try_quote(self, from_currency: str, to_currency: str) -> Optional[RateQuote]:
        try:
            rows = await asyncio.to_thread(
                self._store.get_rates_to_base, [from_currency, to_currency]
            )
        except Exception:
            logger.exception(
                "currency store lookup failed", extra={"tier": self.name}
            )
            rows = {}
        from_rate = _positive_number(rows.get(from_currency))
        to_rate = _positive_number(rows.get(to_currency))
        estimated = False
        for code, value in ((from_currency, from_rate), (to_currency, to_rate)):
            if value is None:
                estimated = True
                logger.warning(
                    "no stored rate for %s; assuming parity",
                    code,
                    extra={"tier": self.name},
                )
        from_rate = from_rate or self.missing_default
        to_rate = to_rate or self.missing_default
        return RateQuote(rate=to_rate / from_rate, source=self.name, estimated=estimated)
