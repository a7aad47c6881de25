from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException
from .core.config import get_settings, Settings
from .core.logging import init_logging, request_context_middleware
from .core import errors
from .db.dal import Database
from .db.seed import seed_currencies
from .routers import health, convert, currencies, history
from .services.conversion import ConversionHandler
from .services.history import HistoryRecorder
from .services.rates.resolver import RateResolver, RateResolverConfig


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    # Let in-flight history writes land before the process goes away
    await app.state.history_recorder.drain()


def create_app(settings_override: Settings | None = None) -> FastAPI:
    """Application factory.

    settings_override: pass an already constructed Settings instance for tests
    to isolate environment (e.g., temp DB). Falls back to cached get_settings().
    """
    settings = settings_override or get_settings()
    if settings.db_path is None:
        settings.init_post_load()
    # Initialize logging early
    init_logging(debug=settings.debug)

    # Ensure database schema + seed rows (idempotent) so fresh test DBs work
    try:
        seed_currencies(settings.db_path)  # type: ignore[arg-type]
    except Exception:
        # Failing to init DB is fatal; re-raise after logging
        logging.getLogger("currency_converter").exception(
            "failed to initialise database on startup"
        )
        raise

    app = FastAPI(
        title=settings.app_name,
        debug=settings.debug,
        version=settings.version,
        lifespan=lifespan,
    )

    db = Database(settings.db_path)  # type: ignore[arg-type]
    recorder = HistoryRecorder(db)
    resolver = RateResolver(RateResolverConfig.from_settings(settings), store=db)
    app.state.settings = settings
    app.state.db = db
    app.state.history_recorder = recorder
    app.state.conversion_handler = ConversionHandler(resolver, recorder)

    # Middleware (request id / structured logging, CORS)
    app.middleware("http")(request_context_middleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Error handlers
    app.add_exception_handler(
        errors.ConversionValidationError, errors.validation_error_handler
    )
    app.add_exception_handler(RequestValidationError, errors.request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, errors.http_error_handler)
    app.add_exception_handler(Exception, errors.server_error_handler)

    # Routers
    app.include_router(health.router)
    app.include_router(convert.router)
    app.include_router(currencies.router)
    app.include_router(history.router)

    return app


app = create_app()
