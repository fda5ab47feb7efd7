"""File operation utilities"""

import json
import os
import tempfile
from pathlib import Path
from typing import Any


def ensure_parent_dir(file_path: Path) -> Path:
    """
    Ensure parent directory exists

    Args:
        file_path: File path

    Returns:
        Parent directory path
    """
    parent = file_path.parent
    parent.mkdir(parents=True, exist_ok=True)
    return parent


def atomic_write(file_path: Path, content: str) -> None:
    """
    Write text file atomically

    Args:
        file_path: Target file path
        content: Content to write
    """
    ensure_parent_dir(file_path)

    # Write to temporary file first
    temp_fd, temp_path = tempfile.mkstemp(dir=file_path.parent)

    try:
        with os.fdopen(temp_fd, 'w', encoding='utf-8') as f:
            f.write(content)

        # Atomic rename
        os.replace(temp_path, file_path)

    except Exception:
        # Clean up temp file on error
        if os.path.exists(temp_path):
            os.unlink(temp_path)
        raise


def dump_json(data: Any) -> str:
    """
    Serialize to pretty-printed JSON with a trailing newline

    Args:
        data: JSON-serializable data

    Returns:
        JSON text
    """
    return json.dumps(data, indent=2, ensure_ascii=False) + "\n"


def write_json(file_path: Path, data: Any) -> Path:
    """
    Write pretty-printed JSON, creating parent directories

    Args:
        file_path: Target file path
        data: JSON-serializable data

    Returns:
        Path written
    """
    atomic_write(file_path, dump_json(data))
    return file_path


def read_json(file_path: Path) -> Any:
    """
    Read and parse a JSON file

    Raises:
        FileNotFoundError: If the file is missing
        json.JSONDecodeError: If the content is not valid JSON
    """
    with open(file_path, 'r', encoding='utf-8') as f:
        return json.load(f)


def format_size(size: int) -> str:
    """
    Format byte count in human-readable format

    Args:
        size: Size in bytes

    Returns:
        Formatted size string
    """
    for unit in ['B', 'KB', 'MB', 'GB']:
        if size < 1024.0:
            if unit == 'B':
                return f"{int(size)} {unit}"
            return f"{size:.1f} {unit}"
        size /= 1024.0
    return f"{size:.1f} TB"
