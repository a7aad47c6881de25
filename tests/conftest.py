import os
import tempfile

# Importing currency_converter.main builds a module-level app from env settings;
# point it at a throwaway directory before anything imports it.
os.environ.setdefault("DATA_DIR", tempfile.mkdtemp(prefix="currency-converter-"))
os.environ.setdefault("EXCHANGE_RATE_API_KEY", "")

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from currency_converter.core.config import Settings  # noqa: E402
from currency_converter.db.dal import Database  # noqa: E402
from currency_converter.db.seed import seed_currencies  # noqa: E402
from currency_converter.main import create_app  # noqa: E402
from currency_converter.services.rates.base import RateQuote  # noqa: E402


class FakeResolver:
    """Resolver double that returns a fixed rate and counts calls."""

    def __init__(self, rate: float = 0.92, source: str = "static", estimated: bool = False):
        self.rate = rate
        self.source = source
        self.estimated = estimated
        self.calls: list[tuple[str, str]] = []

    async def quote(self, from_currency: str, to_currency: str) -> RateQuote:
        self.calls.append((from_currency, to_currency))
        return RateQuote(self.rate, self.source, self.estimated)


@pytest.fixture
def settings(tmp_path) -> Settings:
    s = Settings(
        _env_file=None,
        data_dir=tmp_path,
        db_path=tmp_path / "test.sqlite3",
        exchange_rate_api_key="",
    )
    s.init_post_load()
    return s


@pytest.fixture
def db(settings) -> Database:
    seed_currencies(settings.db_path)
    return Database(settings.db_path)


@pytest.fixture
def app(settings):
    return create_app(settings_override=settings)


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c
