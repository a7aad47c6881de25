"""Seeding helpers for the currencies table.

`seed_currencies` ensures the baseline currency rows exist. Existing rows are
left untouched (operators may have edited the rates) so this can be safely re-run.
"""

from __future__ import annotations
from pathlib import Path
import sqlite3
from typing import Mapping, Tuple

from .schema import init_db

# code -> (name, rate_to_usd)
DEFAULT_CURRENCY_ROWS: Mapping[str, Tuple[str, float]] = {
    "USD": ("US Dollar", 1.0),
    "EUR": ("Euro", 0.92),
    "GBP": ("British Pound", 0.79),
    "JPY": ("Japanese Yen", 150.0),
    "CAD": ("Canadian Dollar", 1.35),
    "AUD": ("Australian Dollar", 1.52),
    "INR": ("Indian Rupee", 83.0),
}


def seed_currencies(
    db_path: Path, rows: Mapping[str, Tuple[str, float]] | None = None
) -> None:
    init_db(db_path)  # ensure tables exist
    seed_rows = DEFAULT_CURRENCY_ROWS if rows is None else rows
    with sqlite3.connect(db_path) as conn:
        cur = conn.cursor()
        for code, (name, rate) in seed_rows.items():
            cur.execute(
                "INSERT OR IGNORE INTO currencies (code, name, rate_to_usd) VALUES (?, ?, ?)",
                (code, name, float(rate)),
            )
        conn.commit()
