import asyncio
import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from starlette import status

from currency_converter.core.config import Settings
from currency_converter.db.dal import Database
from currency_converter.models import ErrorOut, RateHistoryOut, RateHistoryPoint
from .deps import get_app_settings, get_db

router = APIRouter(prefix="/history", tags=["history"])
logger = logging.getLogger("currency_converter.routers.history")


@router.get(
    "/{code}",
    response_model=RateHistoryOut,
    responses={500: {"model": ErrorOut}},
    summary="Recorded rates to USD for a currency, oldest first",
)
async def rate_history(
    code: str,
    db: Database = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
):
    try:
        rows = await asyncio.to_thread(
            db.list_rate_history, code.strip().upper(), settings.history_limit
        )
    except Exception as e:
        logger.exception("history fetch error")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"success": False, "message": str(e)},
        )
    return RateHistoryOut(history=[RateHistoryPoint(**r) for r in rows])
