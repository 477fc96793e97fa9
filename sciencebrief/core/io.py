"""JSON I/O utilities with consistent error handling."""

import json
import logging
from pathlib import Path
from typing import Any, Union

logger = logging.getLogger(__name__)


def save_json(
    data: Any,
    path: Union[str, Path],
    *,
    encoding: str = "utf-8",
    indent: int = 2,
    ensure_ascii: bool = False,
    mkdir: bool = True,
    default: Any = str,
) -> bool:
    """
    Save data to JSON file with consistent formatting.

    Args:
        data: Data to serialize
        path: Output file path
        encoding: File encoding (default: utf-8)
        indent: JSON indentation (default: 2)
        ensure_ascii: Whether to escape non-ASCII (default: False)
        mkdir: Create parent directories if needed (default: True)
        default: Default serializer for non-JSON types (default: str)

    Returns:
        True if successful, False otherwise
    """
    path = Path(path)

    try:
        if mkdir:
            path.parent.mkdir(parents=True, exist_ok=True)

        content = json.dumps(data, ensure_ascii=ensure_ascii, indent=indent, default=default)
        path.write_text(content, encoding=encoding)
        return True
    except (OSError, TypeError, ValueError) as e:
        logger.error(f"Failed to save {path}: {e}")
        return False
