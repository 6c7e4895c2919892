"""Configuration helpers and Settings container.

This module provides a small `Settings` dataclass and `get_settings` which
reads the output and logging locations from the environment (including a
check that the export file name is a usable CSV name).
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
import os

from dotenv import load_dotenv

from company_rollup.logging_config import resolve_level

# Explicitly load .env from project root
PROJECT_ROOT = Path(__file__).resolve().parents[2]
load_dotenv(PROJECT_ROOT / ".env")

DEFAULT_OUTPUT_NAME = "rolled-up-company-scores.csv"


@dataclass(frozen=True)
class Settings:
    """Container for rollup configuration read from the environment.

    Attributes:
        output_dir: Directory the rolled-up CSV is written to.
        output_name: Fixed file name of the exported artifact.
        log_path: Optional log file; ``None`` logs to stdout only.
        log_level: Numeric root logging level.
    """
    output_dir: Path
    output_name: str
    log_path: Path | None
    log_level: int

    @property
    def output_path(self) -> Path:
        return self.output_dir / self.output_name


def get_settings() -> Settings:
    """Read environment variables and return a frozen `Settings` object.

    Raises:
        RuntimeError: if `ROLLUP_OUTPUT_NAME` is empty or not a `.csv` name,
            or `ROLLUP_LOG_LEVEL` is not a logging level name.
    """
    output_dir = Path(os.getenv("ROLLUP_OUTPUT_DIR", "output"))
    output_name = os.getenv("ROLLUP_OUTPUT_NAME", DEFAULT_OUTPUT_NAME).strip()
    log_path_raw = os.getenv("ROLLUP_LOG_PATH", "logs/rollup.log").strip()
    log_level_raw = os.getenv("ROLLUP_LOG_LEVEL", "INFO")

    if not output_name or not output_name.lower().endswith(".csv"):
        raise RuntimeError(
            "ROLLUP_OUTPUT_NAME must be a CSV file name "
            f"(example: '{DEFAULT_OUTPUT_NAME}'), got {output_name!r}."
        )

    try:
        log_level = resolve_level(log_level_raw)
    except ValueError as exc:
        raise RuntimeError(f"ROLLUP_LOG_LEVEL is invalid: {exc}") from exc

    return Settings(
        output_dir=output_dir,
        output_name=output_name,
        log_path=Path(log_path_raw) if log_path_raw else None,
        log_level=log_level,
    )
