"""Runtime settings, read from environment variables.

    STOREFRONT_DATA_DIR            directory holding the JSON collections
    STOREFRONT_STOCK_MAX_ATTEMPTS  retries for a conflicting stock batch
    STOREFRONT_LOG_LEVEL           logging level name (default INFO)
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

# When installed in editable mode the project root is the repo root.
_DEFAULT_DATA_DIR = Path(__file__).resolve().parents[2] / "data"

LOG_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"


@dataclass(frozen=True)
class Settings:

    data_dir: Path
    stock_max_attempts: int = 3
    log_level: str = "INFO"

    @staticmethod
    def from_env() -> Settings:
        raw_attempts = os.environ.get("STOREFRONT_STOCK_MAX_ATTEMPTS", "3")
        try:
            attempts = int(raw_attempts)
        except ValueError as exc:
            raise ValueError(
                f"STOREFRONT_STOCK_MAX_ATTEMPTS must be an integer, got {raw_attempts!r}"
            ) from exc
        if attempts < 1:
            raise ValueError("STOREFRONT_STOCK_MAX_ATTEMPTS must be at least 1")

        return Settings(
            data_dir=Path(os.environ.get("STOREFRONT_DATA_DIR", str(_DEFAULT_DATA_DIR))),
            stock_max_attempts=attempts,
            log_level=os.environ.get("STOREFRONT_LOG_LEVEL", "INFO").upper(),
        )


def configure_logging(level: str) -> None:
    logging.basicConfig(level=level, format=LOG_FORMAT)
