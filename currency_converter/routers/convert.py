from typing import Any
import logging

from fastapi import APIRouter, Body, Depends
from fastapi.responses import JSONResponse
from starlette import status

from currency_converter.core.errors import ConversionValidationError
from currency_converter.models import ConversionIn, ConversionOut, ErrorOut
from currency_converter.services.conversion import ConversionHandler, validate_request
from .deps import get_conversion_handler

router = APIRouter(tags=["convert"])
logger = logging.getLogger("currency_converter.routers.convert")


def _parse_body(body: Any) -> ConversionIn:
    # Non-object bodies carry none of the required fields
    if not isinstance(body, dict):
        return ConversionIn()
    return ConversionIn.model_validate(body)


@router.post(
    "/convert",
    response_model=ConversionOut,
    responses={400: {"model": ErrorOut}, 500: {"model": ErrorOut}},
    summary="Convert an amount between two currencies",
)
async def convert(
    body: Any = Body(None),
    handler: ConversionHandler = Depends(get_conversion_handler),
):
    request = validate_request(_parse_body(body))
    try:
        outcome = await handler.handle(request)
    except ConversionValidationError:
        raise
    except Exception as e:
        logger.exception("error in /convert")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "success": False,
                "message": "Internal server error",
                "error": str(e),
            },
        )
    return ConversionOut(result=outcome.result, rate=outcome.rate)
