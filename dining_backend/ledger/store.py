from __future__ import annotations

import logging
import os
import tempfile
import threading
from datetime import date, datetime
from pathlib import Path
from typing import Callable, TypeVar

from pydantic import BaseModel, ValidationError

from .config import DEFAULT_LEDGER_CONFIG, LedgerConfig
from .errors import LedgerStorageError
from .models import DailyLedger, HistoricalArchive

logger = logging.getLogger(__name__)

T = TypeVar("T")
M = TypeVar("M", bound=BaseModel)


class LedgerStore:
    """
    File-backed ledger made of two JSON documents: the daily buffer and the
    historical archive.

    Every read-modify-write runs under a single re-entrant lock and starts
    with a lazy rollover, so the daily buffer never holds hearts from a
    previous day.
    """

    def __init__(
        self,
        config: LedgerConfig = DEFAULT_LEDGER_CONFIG,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self._config = config
        self._clock = clock
        self._lock = threading.RLock()
        self._is_open = False

    # ── Lifecycle ────────────────────────────────────────────────────────

    def open(self) -> LedgerStore:
        try:
            self._config.data_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise LedgerStorageError(
                f"Cannot create ledger directory {self._config.data_dir}"
            ) from exc
        self._is_open = True
        logger.info("Ledger opened at %s", self._config.data_dir)
        self.rollover()
        return self

    def close(self) -> None:
        with self._lock:
            self._is_open = False
        logger.info("Ledger closed")

    @property
    def is_open(self) -> bool:
        return self._is_open

    def __enter__(self) -> LedgerStore:
        return self.open()

    def __exit__(self, *exc_info) -> None:
        self.close()

    # ── Clock ────────────────────────────────────────────────────────────

    def now(self) -> datetime:
        return self._clock()

    def today(self) -> date:
        return self._clock().date()

    # ── Atomic operations ────────────────────────────────────────────────

    def rollover(self) -> bool:
        """Move the daily buffer into the archive if the calendar day changed.

        Returns ``True`` when a transfer happened. Calling it again on the
        same day is a no-op.
        """
        with self._lock:
            return self._rollover_locked()

    def update_daily(self, mutation: Callable[[DailyLedger], T]) -> T:
        """Apply *mutation* to the daily buffer and persist the result."""
        with self._lock:
            self._rollover_locked()
            daily = self._load_daily()
            result = mutation(daily)
            self._write(self._config.daily_path, daily)
            return result

    def update_archive(self, mutation: Callable[[HistoricalArchive], T]) -> T:
        """Apply *mutation* to the historical archive and persist the result."""
        with self._lock:
            self._rollover_locked()
            archive = self._load_archive()
            result = mutation(archive)
            self._write(self._config.history_path, archive)
            return result

    def snapshot(self) -> tuple[DailyLedger, HistoricalArchive]:
        """Return a consistent copy of both documents."""
        with self._lock:
            self._rollover_locked()
            return self._load_daily(), self._load_archive()

    # ── Internals ────────────────────────────────────────────────────────

    def _rollover_locked(self) -> bool:
        if not self._is_open:
            raise LedgerStorageError("Ledger store is closed")
        today = self.today()
        daily = self._load_daily()
        if daily.last_transfer_date >= today:
            return False

        archive = self._load_archive()
        # A previous attempt may have archived this buffer and then failed
        # to reset it, possibly on an earlier day. Don't archive it twice.
        if archive.last_merged_date != daily.last_transfer_date:
            archive.venue_hearts.extend(daily.venue_hearts)
            archive.menu_item_hearts.extend(daily.menu_item_hearts)
            archive.last_merged_date = daily.last_transfer_date
            self._write(self._config.history_path, archive)

        moved = len(daily.venue_hearts) + len(daily.menu_item_hearts)
        self._write(self._config.daily_path, DailyLedger(last_transfer_date=today))
        logger.info(
            "Rolled over %d hearts from %s into history",
            moved,
            daily.last_transfer_date.isoformat(),
        )
        return True

    def _load_daily(self) -> DailyLedger:
        daily = self._read(self._config.daily_path, DailyLedger)
        if daily is None:
            return DailyLedger(last_transfer_date=self.today())
        return daily

    def _load_archive(self) -> HistoricalArchive:
        archive = self._read(self._config.history_path, HistoricalArchive)
        return archive if archive is not None else HistoricalArchive()

    def _read(self, path: Path, model: type[M]) -> M | None:
        if not path.exists():
            return None
        try:
            return model.model_validate_json(path.read_text(encoding="utf-8"))
        except OSError as exc:
            logger.warning("Failed to read ledger document %s", path, exc_info=True)
            raise LedgerStorageError(f"Cannot read {path.name}") from exc
        except ValidationError as exc:
            logger.warning("Corrupt ledger document %s", path, exc_info=True)
            raise LedgerStorageError(f"Corrupt ledger document {path.name}") from exc

    def _write(self, path: Path, document: BaseModel) -> None:
        payload = document.model_dump_json(indent=2)
        tmp_name: str | None = None
        try:
            with tempfile.NamedTemporaryFile(
                "w",
                encoding="utf-8",
                dir=path.parent,
                prefix=f".{path.name}.",
                suffix=".tmp",
                delete=False,
            ) as tmp:
                tmp_name = tmp.name
                tmp.write(payload)
                tmp.flush()
                os.fsync(tmp.fileno())
            os.replace(tmp_name, path)
        except OSError as exc:
            if tmp_name is not None and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            logger.warning("Failed to write ledger document %s", path, exc_info=True)
            raise LedgerStorageError(f"Cannot write {path.name}") from exc
