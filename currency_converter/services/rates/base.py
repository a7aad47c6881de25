"""Rate source abstraction.

Each fallback tier implements ``try_rate``; a tier that cannot produce a
usable rate returns None and the resolver moves on to the next one.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional, Protocol


@dataclass(frozen=True)
class RateQuote:
    rate: float
    source: str
    # True when the rate rests on an assumed parity rather than observed data
    estimated: bool = False


class RateSource(ABC):
    name: str = "source"

    @abstractmethod
    async def try_rate(self, from_currency: str, to_currency: str) -> Optional[float]:
        """Return units of to_currency per 1 from_currency, or None."""
        raise NotImplementedError

    async def try_quote(self, from_currency: str, to_currency: str) -> Optional[RateQuote]:
        rate = await self.try_rate(from_currency, to_currency)
        if rate is None:
            return None
        return RateQuote(rate=rate, source=self.name)


class SupportsQuote(Protocol):
    async def quote(self, from_currency: str, to_currency: str) -> RateQuote: ...
