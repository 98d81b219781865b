"""
Atomic file write utilities.

Settings dumps are written with the temp-file-and-rename pattern so a reader
never sees a half-written file.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any

import yaml

logger = logging.getLogger(__name__)


class AtomicWriteError(Exception):
    """Raised when an atomic write operation fails."""


def atomic_write_text(
    filepath: Path | str,
    content: str,
    *,
    encoding: str = "utf-8",
    mode: int = 0o644,
) -> None:
    """
    Write text content atomically.

    Either the complete new content is written, or the original file remains
    unchanged.

    Raises:
        AtomicWriteError: If the write or rename fails.
    """
    filepath = Path(filepath)
    parent_dir = filepath.parent

    try:
        parent_dir.mkdir(parents=True, exist_ok=True)

        # Temp file must live on the same filesystem for the rename to be atomic
        fd, temp_path = tempfile.mkstemp(
            dir=parent_dir,
            prefix=f".{filepath.name}.",
            suffix=".tmp",
        )
        temp_path_obj = Path(temp_path)

        try:
            with os.fdopen(fd, "w", encoding=encoding) as f:
                f.write(content)
            temp_path_obj.chmod(mode)
            temp_path_obj.replace(filepath)
            logger.debug("Atomic write completed: %s", filepath)
        except Exception:
            temp_path_obj.unlink(missing_ok=True)
            raise

    except OSError as e:
        error_msg = f"Atomic write failed for {filepath}: {e}"
        logger.exception(error_msg)
        raise AtomicWriteError(error_msg) from e


def dump_yaml(data: Any) -> str:
    return yaml.safe_dump(
        data,
        default_flow_style=False,
        allow_unicode=True,
        sort_keys=False,
    )


def dump_json(data: Any, *, indent: int = 2) -> str:
    return json.dumps(data, indent=indent, ensure_ascii=False) + "\n"


def atomic_write_yaml(filepath: Path | str, data: dict[str, Any]) -> None:
    """
    Write YAML data atomically.

    Raises:
        AtomicWriteError: If serialization or write fails.
    """
    try:
        content = dump_yaml(data)
    except yaml.YAMLError as e:
        error_msg = f"YAML serialization failed for {filepath}: {e}"
        logger.exception(error_msg)
        raise AtomicWriteError(error_msg) from e
    atomic_write_text(filepath, content)


def atomic_write_json(filepath: Path | str, data: dict[str, Any], *, indent: int = 2) -> None:
    """
    Write JSON data atomically.

    Raises:
        AtomicWriteError: If serialization or write fails.
    """
    try:
        content = dump_json(data, indent=indent)
    except (TypeError, ValueError) as e:
        error_msg = f"JSON serialization failed for {filepath}: {e}"
        logger.exception(error_msg)
        raise AtomicWriteError(error_msg) from e
    atomic_write_text(filepath, content)
