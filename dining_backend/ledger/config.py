from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
load_dotenv(Path(__file__).resolve().parent.parent.parent / ".env")


@dataclass(frozen=True)
class LedgerConfig:
    """
    Where the two ledger documents live on disk.
    """

    data_dir: Path = Path(os.getenv("DINING_DATA_DIR", "dining_backend/data/ledger"))
    daily_filename: str = "daily.json"
    history_filename: str = "history.json"

    @property
    def daily_path(self) -> Path:
        return self.data_dir / self.daily_filename

    @property
    def history_path(self) -> Path:
        return self.data_dir / self.history_filename


DEFAULT_LEDGER_CONFIG = LedgerConfig()
