"""Shared TOML reader for runtime config files."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from receiptlens.runtime.logging import get_logger

logger = get_logger(__name__)


def load_toml(path: Path, description: str = "TOML file") -> dict[str, Any]:
    """Load TOML file and return parsed dict; missing or broken files map to empty dict.

    Args:
        path: File to read.
        description: What the file holds, used in the warning for unreadable files.
    """
    try:
        import tomllib
    except ImportError:
        import tomli as tomllib  # type: ignore[no-redef]

    if not path.exists():
        return {}

    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        logger.warning("Could not read %s %s: %s", description, path, e)
        return {}
    return data if isinstance(data, dict) else {}
