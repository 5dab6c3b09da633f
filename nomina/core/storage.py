# nomina/core/storage.py
"""
Data loading for configuration files.
"""

import json
import logging
import os
from functools import lru_cache
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from nomina.core.models import PayrollSettings

logger = logging.getLogger(__name__)

#: Default directory of bundled data files; NOMINA_DATA_DIR overrides it.
DEFAULT_DATA_DIR = Path(__file__).resolve().parent.parent / "data"

SETTINGS_FILE_NAME = "payroll_settings.json"


class StorageError(Exception):
    """General error type for problems loading data files."""

    pass


def get_data_dir() -> Path:
    """Directory holding the payroll data files."""
    override = os.getenv("NOMINA_DATA_DIR", "").strip()
    return Path(override) if override else DEFAULT_DATA_DIR


def _load_json(file_path: Path) -> list[Any] | dict[str, Any]:
    """
    Read and parse JSON with robust error handling.
    Args:
        file_path: Path to the JSON file
    Returns:
        Parsed JSON data as list or dict
    Raises:
        StorageError: If file cannot be read or JSON is invalid
    """
    try:
        raw = file_path.read_text(encoding="utf-8")
    except OSError as e:
        logger.exception("Failed to read JSON file %s", file_path)
        raise StorageError(f"Could not read JSON file {file_path}: {e}") from e

    try:
        return json.loads(raw)
    except json.JSONDecodeError as e:
        logger.exception("Invalid JSON in file %s", file_path)
        raise StorageError(f"Invalid JSON in file {file_path}: {e}") from e


def load_payroll_settings(file_path: Path | None = None) -> PayrollSettings:
    """
    Load payroll settings (window, thresholds, rates, deductions) from data file.
    Args:
        file_path: Settings file; payroll_settings.json in the data dir when None
    Returns:
        Validated payroll settings
    Raises:
        StorageError: If file cannot be loaded or parsed
    """
    if file_path is None:
        file_path = get_data_dir() / SETTINGS_FILE_NAME

    data = _load_json(file_path)
    try:
        if not isinstance(data, dict):
            raise TypeError("Expected payroll settings dict")
        settings = PayrollSettings(**data)
    except (TypeError, ValidationError) as e:
        logger.exception("Failed to parse payroll settings from %s", file_path)
        raise StorageError(f"Could not parse payroll settings from {file_path}: {e}") from e

    logger.info(
        "Loaded payroll settings from %s (window %s-%s, %.2fh ordinary)",
        file_path,
        settings.day_window_start,
        settings.day_window_end,
        settings.ordinary_daily_hours,
    )
    return settings


@lru_cache(maxsize=1)
def get_payroll_settings() -> PayrollSettings:
    """Cached payroll settings, loaded on first use."""
    return load_payroll_settings()


def clear_settings_cache() -> None:
    get_payroll_settings.cache_clear()
