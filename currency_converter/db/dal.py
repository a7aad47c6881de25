"""Data Access Layer for the currency store.

Responsibilities
----------------
- Point lookups of per-currency rates to USD (last-resort rate tier).
- Append-only inserts of conversion history and per-currency rate snapshots.
- Chronological reads of rate snapshots for charting.

All methods are blocking; async callers go through ``asyncio.to_thread``.
"""

from __future__ import annotations

from pathlib import Path
import sqlite3
from typing import Any, Dict, Iterable, List

from currency_converter.models import HistoryRecord, RateSnapshot


class Database:
    def __init__(self, db_path: Path):
        self.db_path = db_path

    # ------------------------------------------------------------------
    # Connection helpers
    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        return conn

    # ------------------------------------------------------------------
    # Currencies
    def get_rates_to_base(self, codes: Iterable[str]) -> Dict[str, float]:
        """Return {code: rate_to_usd} for the codes that have a row."""
        wanted = list(dict.fromkeys(codes))
        if not wanted:
            return {}
        placeholders = ",".join("?" for _ in wanted)
        with self._connect() as conn:
            cur = conn.cursor()
            cur.execute(
                f"SELECT code, rate_to_usd FROM currencies WHERE code IN ({placeholders})",
                wanted,
            )
            return {r["code"]: float(r["rate_to_usd"]) for r in cur.fetchall()}

    def upsert_currency(self, code: str, name: str, rate_to_usd: float) -> None:
        if rate_to_usd <= 0:
            raise ValueError("rate_to_usd must be positive")
        with self._connect() as conn:
            conn.execute(
                """
                INSERT INTO currencies (code, name, rate_to_usd)
                VALUES (?, ?, ?)
                ON CONFLICT(code) DO UPDATE SET
                    name = excluded.name,
                    rate_to_usd = excluded.rate_to_usd,
                    updated_at = (strftime('%Y-%m-%dT%H:%M:%fZ','now'))
                """,
                (code, name, float(rate_to_usd)),
            )
            conn.commit()

    # ------------------------------------------------------------------
    # History (append-only)
    def insert_conversion(self, record: HistoryRecord) -> int:
        with self._connect() as conn:
            cur = conn.cursor()
            cur.execute(
                """
                INSERT INTO conversion_history (
                    amount, from_currency, to_currency,
                    converted_amount, exchange_rate, created_at
                )
                VALUES (?, ?, ?, ?, ?, ?)
                """,
                (
                    record.amount,
                    record.from_currency,
                    record.to_currency,
                    record.converted_amount,
                    record.exchange_rate,
                    record.recorded_at.isoformat(),
                ),
            )
            conn.commit()
            return int(cur.lastrowid)

    def list_conversions(self, limit: int = 50) -> List[Dict[str, Any]]:
        with self._connect() as conn:
            cur = conn.cursor()
            cur.execute(
                "SELECT * FROM conversion_history ORDER BY created_at DESC, id DESC LIMIT ?",
                (limit,),
            )
            return [dict(r) for r in cur.fetchall()]

    def insert_rate_snapshot(self, snapshot: RateSnapshot) -> int:
        with self._connect() as conn:
            cur = conn.cursor()
            cur.execute(
                """
                INSERT INTO currency_rates_history (currency_code, rate_to_usd, recorded_at)
                VALUES (?, ?, ?)
                """,
                (
                    snapshot.currency_code,
                    snapshot.rate_to_usd,
                    snapshot.recorded_at.isoformat(),
                ),
            )
            conn.commit()
            return int(cur.lastrowid)

    def list_rate_history(self, code: str, limit: int = 30) -> List[Dict[str, Any]]:
        """Return the most recent ``limit`` snapshots for ``code``, oldest first."""
        with self._connect() as conn:
            cur = conn.cursor()
            cur.execute(
                """
                SELECT rate_to_usd, recorded_at FROM (
                    SELECT id, rate_to_usd, recorded_at
                    FROM currency_rates_history
                    WHERE currency_code = ?
                    ORDER BY recorded_at DESC, id DESC
                    LIMIT ?
                )
                ORDER BY recorded_at ASC, id ASC
                """,
                (code, limit),
            )
            return [dict(r) for r in cur.fetchall()]
