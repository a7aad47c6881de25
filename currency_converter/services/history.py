"""Fire-and-forget history writes.

The conversion response never waits on these: ``record`` schedules a detached
task and returns immediately. Task failures end up in the log via the done
callback and nowhere else. Live tasks are kept in a set so they are not
garbage collected mid-write; ``drain`` lets shutdown (and tests) wait for them.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Optional, Protocol, Set

from currency_converter.models import BASE_CURRENCY, HistoryRecord, RateSnapshot

logger = logging.getLogger("currency_converter.history")


class SupportsHistoryWrite(Protocol):
    def insert_conversion(self, record: HistoryRecord) -> int: ...

    def insert_rate_snapshot(self, snapshot: RateSnapshot) -> int: ...


def snapshot_for(record: HistoryRecord) -> Optional[RateSnapshot]:
    """Derive a rate-to-USD observation when one side of the pair is USD.

    Rates resting on an assumed parity are not observations and yield None.
    """
    if record.estimated or record.exchange_rate <= 0:
        return None
    if record.from_currency == BASE_CURRENCY:
        return RateSnapshot(
            currency_code=record.to_currency,
            rate_to_usd=record.exchange_rate,
            recorded_at=record.recorded_at,
        )
    if record.to_currency == BASE_CURRENCY:
        return RateSnapshot(
            currency_code=record.from_currency,
            rate_to_usd=1 / record.exchange_rate,
            recorded_at=record.recorded_at,
        )
    return None


class HistoryRecorder:
    def __init__(self, store: SupportsHistoryWrite):
        self._store = store
        self._pending: Set[asyncio.Task] = set()

    @property
    def pending(self) -> int:
        return len(self._pending)

    def _write(self, record: HistoryRecord) -> None:
        self._store.insert_conversion(record)
        snapshot = snapshot_for(record)
        if snapshot is not None:
            self._store.insert_rate_snapshot(snapshot)

    def record(self, record: HistoryRecord) -> asyncio.Task:
        """Schedule the write on the running loop and return without awaiting it."""
        task = asyncio.create_task(asyncio.to_thread(self._write, record))
        self._pending.add(task)
        task.add_done_callback(self._on_done)
        return task

    def _on_done(self, task: asyncio.Task) -> None:
        self._pending.discard(task)
        if task.cancelled():
            logger.warning("history write cancelled before completion")
            return
        exc = task.exception()
        if exc is not None:
            logger.error(
                "could not save conversion history: %s",
                exc,
                exc_info=(type(exc), exc, exc.__traceback__),
            )
        else:
            logger.debug("saved conversion history")

    async def drain(self) -> None:
        if self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)
