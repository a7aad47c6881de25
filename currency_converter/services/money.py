"""Money / rounding helpers.

Centralized so the conversion pipeline and any future endpoints use identical
rounding semantics: half-up on the decimal representation, so 85.865 -> 85.87
rather than banker's rounding.
"""

from __future__ import annotations
from decimal import Context, Decimal, ROUND_HALF_UP

# Wide enough for every finite float (max ~1.8e308) plus two decimal places
_MONEY_CONTEXT = Context(prec=400)


def round2(value: float) -> float:
    return float(
        Decimal(str(value)).quantize(
            Decimal("0.01"), rounding=ROUND_HALF_UP, context=_MONEY_CONTEXT
        )
    )
