from fastapi import APIRouter

from currency_converter.models import (
    CURRENCY_NAMES,
    SUPPORTED_CURRENCIES,
    CurrencyListOut,
    CurrencyOut,
)

router = APIRouter(tags=["currencies"])


@router.get(
    "/currencies", response_model=CurrencyListOut, summary="List supported currencies"
)
async def list_currencies():
    return CurrencyListOut(
        currencies=[
            CurrencyOut(code=code, name=CURRENCY_NAMES[code])
            for code in SUPPORTED_CURRENCIES
        ]
    )
