"""Exchange-rate resolution with tiered fallback.

Tiers, first usable rate wins:
    1. identity (from == to -> 1.0, no I/O)
    2. live provider (bounded by provider_timeout_ms)
    3. built-in static table
    4. currencies table in the store (missing rows count as parity)

Tier failures are logged and absorbed; ``resolve`` only raises if a source
violates its own contract, which callers treat as an internal error.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Sequence, TYPE_CHECKING
import logging

import httpx

from currency_converter.db.dal import Database
from .base import RateQuote, RateSource
from .providers import (
    LiveApiRateSource,
    StaticTableRateSource,
    StoredTableRateSource,
    SupportsRateLookup,
)

if TYPE_CHECKING:  # pragma: no cover
    from currency_converter.core.config import Settings

logger = logging.getLogger("currency_converter.rates")

DEFAULT_PROVIDER_BASE_URL = "https://v6.exchangerate-api.com/v6"


@dataclass(frozen=True)
class RateResolverConfig:
    provider_api_key: str = ""
    provider_timeout_ms: int = 5000
    store_connection: Optional[Path] = None
    provider_base_url: str = DEFAULT_PROVIDER_BASE_URL

    def __post_init__(self):
        if self.provider_timeout_ms <= 0:
            raise ValueError("provider_timeout_ms must be positive")

    @classmethod
    def from_settings(cls, settings: "Settings") -> "RateResolverConfig":
        return cls(
            provider_api_key=settings.exchange_rate_api_key,
            provider_timeout_ms=settings.provider_timeout_ms,
            store_connection=settings.db_path,
            provider_base_url=str(settings.exchange_rate_api_base_url),
        )


class RateResolver:
    def __init__(
        self,
        config: RateResolverConfig,
        *,
        store: SupportsRateLookup | None = None,
        sources: Sequence[RateSource] | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.config = config
        if sources is None:
            sources = default_sources(config, store=store, transport=transport)
        self._sources = list(sources)

    @property
    def sources(self) -> list[RateSource]:
        return list(self._sources)

    async def resolve(self, from_currency: str, to_currency: str) -> float:
        return (await self.quote(from_currency, to_currency)).rate

    async def quote(self, from_currency: str, to_currency: str) -> RateQuote:
        """Like resolve, but also reports which tier answered."""
        if from_currency == to_currency:
            return RateQuote(rate=1.0, source="identity")
        for source in self._sources:
            found = await source.try_quote(from_currency, to_currency)
            if found is not None:
                rate = found.rate
                logger.info(
                    "rate %s/%s = %s via %s",
                    from_currency,
                    to_currency,
                    rate,
                    source.name,
                    extra={
                        "tier": source.name,
                        "from_currency": from_currency,
                        "to_currency": to_currency,
                        "rate": rate,
                    },
                )
                return found
        # Only reachable with a custom chain lacking the stored tier
        logger.error("all rate tiers exhausted for %s/%s", from_currency, to_currency)
        raise LookupError(f"no rate available for {from_currency}/{to_currency}")


def default_sources(
    config: RateResolverConfig,
    *,
    store: SupportsRateLookup | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> list[RateSource]:
    """Build the standard live -> static -> stored chain from config."""
    sources: list[RateSource] = [
        LiveApiRateSource(
            api_key=config.provider_api_key,
            base_url=config.provider_base_url,
            timeout_ms=config.provider_timeout_ms,
            transport=transport,
        ),
        StaticTableRateSource(),
    ]
    if store is None and config.store_connection is not None:
        store = Database(config.store_connection)
    if store is not None:
        sources.append(StoredTableRateSource(store))
    return sources
