from fastapi import APIRouter

router = APIRouter(tags=["health"])


@router.get("/", summary="Health check")
async def root():
    return {
        "success": True,
        "message": "Currency Converter API is running!",
        "endpoints": {
            "POST /convert": "Convert currencies",
            "GET /currencies": "Get list of currencies",
            "GET /history/{code}": "Get recorded rates for a currency",
            "GET /": "Health check",
        },
    }
