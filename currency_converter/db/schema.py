"""Database schema DDL definitions and initialization utilities.

Tables:
  - currencies: known currencies with their rate to USD (last-resort rate tier)
  - conversion_history: one append-only row per successful conversion
  - currency_rates_history: per-currency rate observations for charting
"""

from __future__ import annotations
import sqlite3
from typing import Sequence
from pathlib import Path

BASIC_UTC_NOW = "strftime('%Y-%m-%dT%H:%M:%fZ','now')"

CURRENCIES_DDL = f"""
CREATE TABLE IF NOT EXISTS currencies (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    code TEXT UNIQUE NOT NULL, -- 'USD', 'EUR', ...
    name TEXT NOT NULL,
    rate_to_usd REAL NOT NULL,
    created_at TEXT NOT NULL DEFAULT ({BASIC_UTC_NOW}),
    updated_at TEXT NOT NULL DEFAULT ({BASIC_UTC_NOW})
);
"""

CONVERSION_HISTORY_DDL = f"""
CREATE TABLE IF NOT EXISTS conversion_history (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    amount REAL NOT NULL,
    from_currency TEXT NOT NULL,
    to_currency TEXT NOT NULL,
    converted_amount REAL NOT NULL,
    exchange_rate REAL NOT NULL,
    created_at TEXT NOT NULL DEFAULT ({BASIC_UTC_NOW})
);
"""

CURRENCY_RATES_HISTORY_DDL = """
CREATE TABLE IF NOT EXISTS currency_rates_history (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    currency_code TEXT NOT NULL,
    rate_to_usd REAL NOT NULL,
    recorded_at TEXT NOT NULL -- ISO timestamp
);
"""

CURRENCIES_CODE_INDEX_DDL = (
    "CREATE INDEX IF NOT EXISTS idx_currencies_code ON currencies(code);"
)
HISTORY_CREATED_INDEX_DDL = (
    "CREATE INDEX IF NOT EXISTS idx_history_created_at ON conversion_history(created_at);"
)
RATES_HISTORY_CODE_INDEX_DDL = """
CREATE INDEX IF NOT EXISTS idx_rates_history_code_time
ON currency_rates_history(currency_code, recorded_at);
"""

DDL_ORDER: Sequence[str] = (
    CURRENCIES_DDL,
    CONVERSION_HISTORY_DDL,
    CURRENCY_RATES_HISTORY_DDL,
    CURRENCIES_CODE_INDEX_DDL,
    HISTORY_CREATED_INDEX_DDL,
    RATES_HISTORY_CODE_INDEX_DDL,
)


def init_db(path: Path) -> None:
    """Create all tables and indexes idempotently.

    Parameters
    ----------
    path: Path to SQLite database file.
    """
    conn = sqlite3.connect(path)
    try:
        cur = conn.cursor()
        for ddl in DDL_ORDER:
            cur.execute(ddl)
        conn.commit()
    finally:
        conn.close()
