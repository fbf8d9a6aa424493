"""
Atomic file writing for CLI output.

Output is written to a temporary file in the target directory and then moved
into place, so a reader never sees a half-written article.
"""

import json
import os
import shutil
import tempfile
from pathlib import Path
from typing import Any, Dict

import structlog

logger = structlog.get_logger(__name__)


def atomic_write_text(target_path: Path, content: str, encoding: str = "utf-8") -> None:
    """
    Atomically write text content to a file.

    Args:
        target_path: Target file path to write to
        content: Text content to write
        encoding: Text encoding to use (default: utf-8)

    Raises:
        OSError: If the content could not be written or moved into place
    """
    target_path = Path(target_path)
    target_path.parent.mkdir(parents=True, exist_ok=True)

    temp_file_path = None

    try:
        with tempfile.NamedTemporaryFile(
            mode="w",
            dir=target_path.parent,
            prefix=f".{target_path.name}.",
            suffix=".tmp",
            delete=False,
            encoding=encoding,
        ) as temp_file:
            temp_file_path = Path(temp_file.name)
            temp_file.write(content)
            temp_file.flush()
            os.fsync(temp_file.fileno())

        try:
            # os.replace is atomic on both POSIX and Windows when on same filesystem
            os.replace(str(temp_file_path), str(target_path))
            logger.debug("Atomic write completed", target=str(target_path), method="os.replace")
        except OSError as rename_error:
            logger.warning(
                "Atomic rename failed, falling back to shutil.move", error=str(rename_error), target=str(target_path)
            )
            shutil.move(str(temp_file_path), str(target_path))

    except (OSError, shutil.Error) as e:
        if temp_file_path and temp_file_path.exists():
            try:
                temp_file_path.unlink()
            except OSError as cleanup_error:
                logger.warning(
                    "Failed to clean up temporary file", temp_file=str(temp_file_path), error=str(cleanup_error)
                )
        raise OSError(f"Failed to atomically write {target_path}: {e}") from e


def atomic_write_json(target_path: Path, data: Dict[str, Any]) -> None:
    """
    Atomically write JSON data to a file.

    Raises:
        ValueError: If data cannot be serialized to JSON
        OSError: If the file could not be written
    """
    try:
        json_content = json.dumps(data, indent=2, ensure_ascii=False)
    except (TypeError, ValueError) as e:
        logger.error("Failed to serialize data to JSON", error=str(e))
        raise ValueError(f"Cannot serialize data to JSON: {e}") from e

    atomic_write_text(target_path, json_content + "\n")
