from functools import lru_cache
from pathlib import Path
from typing import List, Optional
from pydantic import AnyHttpUrl, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment with defaults.

    Environment variable mapping follows pydantic's rules (e.g., APP_NAME, DEBUG, DATA_DIR,
    DB_FILENAME, EXCHANGE_RATE_API_KEY, PROVIDER_TIMEOUT_MS).
    """

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Basic app metadata
    app_name: str = "Currency Converter API"
    debug: bool = False
    version: str = "1.0.0"

    # Data & persistence
    data_dir: Path = Path("data")
    db_filename: str = "currency.sqlite3"
    db_path: Optional[Path] = None  # derived if not provided

    # Live rate provider (exchangerate-api.com v6 layout: {base}/{key}/latest/{code})
    exchange_rate_api_key: str = ""
    exchange_rate_api_base_url: AnyHttpUrl = "https://v6.exchangerate-api.com/v6"
    provider_timeout_ms: int = Field(5000, gt=0)

    # GET /history/{code} page size
    history_limit: int = Field(30, gt=0, le=1000)

    cors_origins: List[str] = ["*"]

    def init_post_load(self) -> None:
        """Finalize derived fields and ensure directories exist."""
        if self.db_path is None:
            self.db_path = self.data_dir / self.db_filename
        # Ensure persistence directory exists
        Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)


@lru_cache
def get_settings() -> Settings:
    settings = Settings()
    settings.init_post_load()
    return settings
