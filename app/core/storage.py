# app\core\storage.py
"""
Data loading layer for configuration files.
"""

import json
import logging
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from app.core.config import WAGE_SUPPLEMENTS_FILE
from app.core.models import WageSupplementRule
from app.core.validators import validate_rule

logger = logging.getLogger(__name__)


class StorageError(Exception):
    """General error type for problems loading data files."""

    pass


def _load_json(file_path: Path) -> list[Any] | dict[str, Any]:
    """
    Read and parse a JSON configuration file.

    A leading UTF-8 byte order mark is accepted (files saved by Notepad).
    Raises:
        StorageError: If file cannot be read or JSON is invalid
    """
    try:
        raw = file_path.read_text(encoding="utf-8-sig")
    except OSError as e:
        logger.exception("Failed to read JSON file %s", file_path)
        raise StorageError(f"Could not read JSON file {file_path}: {e}") from e

    try:
        return json.loads(raw)
    except json.JSONDecodeError as e:
        logger.exception("Invalid JSON in file %s", file_path)
        raise StorageError(f"Invalid JSON in file {file_path}: {e}") from e


def load_wage_supplements(file_path: Path | None = None) -> list[WageSupplementRule]:
    """
    Load wage supplement rules from data file.

    Every rule is checked with validate_rule, so a bad category or clock
    window is reported when the file is loaded rather than on first use.
    Args:
        file_path: JSON file to read (defaults to WAGE_SUPPLEMENTS_FILE)
    Returns:
        List of wage supplement rules, in file order
    Raises:
        StorageError: If file cannot be loaded or parsed
        InvalidRuleConfigurationError: If a rule is misconfigured
    """
    file_path = Path(file_path) if file_path is not None else WAGE_SUPPLEMENTS_FILE
    data = _load_json(file_path)
    try:
        if not isinstance(data, list):
            raise TypeError("Expected list of wage supplements")
        rules = [WageSupplementRule(**item) for item in data]
    except (TypeError, ValidationError) as e:
        logger.exception("Failed to parse wage supplements from %s", file_path)
        raise StorageError(f"Could not parse wage supplements from {file_path}: {e}") from e

    for rule in rules:
        validate_rule(rule)

    logger.info("Loaded %d wage supplement rules from %s", len(rules), file_path)
    return rules
