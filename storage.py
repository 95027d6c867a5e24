"""
Persistence of the last-used form values.

A single flat record of raw field strings is stored as JSON under a
fixed key, mirroring what the browser keeps in localStorage. Missing or
corrupted data means "no prior state" and is discarded silently.
"""

from __future__ import annotations

import json
import logging
import os
from typing import Dict, Mapping

import config as cfg
from forms import FORM_FIELDS

logger = logging.getLogger(__name__)


def save_form_values(values: Mapping[str, str], path: str = cfg.STORAGE_PATH) -> None:
    """Store the raw field strings under ``STORAGE_KEY``.

    Unknown fields are ignored. A failed write is logged and otherwise
    ignored; losing the saved form is never fatal.
    """
    record = {name: str(values[name]) for name in FORM_FIELDS if name in values}
    try:
        with open(path, "w", encoding="utf-8") as fh:
            json.dump({cfg.STORAGE_KEY: record}, fh, indent=2)
    except OSError as exc:
        logger.error("Error saving form values to %s: %s", path, exc)


def clear_form_values(path: str = cfg.STORAGE_PATH) -> None:
    try:
        os.remove(path)
    except FileNotFoundError:
        pass
    except OSError as exc:
        logger.error("Error clearing stored form values at %s: %s", path, exc)


def load_form_values(path: str = cfg.STORAGE_PATH) -> Dict[str, str]:
    """Return the stored field strings, or ``{}`` when there are none.

    Corrupted files are deleted. Empty values are skipped so the form
    falls back to its defaults for them.
    """
    if not os.path.exists(path):
        return {}

    try:
        with open(path, encoding="utf-8") as fh:
            data = json.load(fh)
        record = data[cfg.STORAGE_KEY]
        if not isinstance(record, dict):
            raise TypeError(f"expected an object, got {type(record).__name__}")
    except (OSError, ValueError, KeyError, TypeError) as exc:
        logger.debug("Discarding corrupted form state at %s: %s", path, exc)
        clear_form_values(path)
        return {}

    return {
        name: record[name]
        for name in FORM_FIELDS
        if isinstance(record.get(name), str) and record[name]
    }
