"""Runtime loader for extraction and remote-feed settings.

Settings live in config/receiptlens.toml:

    [extraction]
    merchant_match_threshold = 3
    header_scan_lines = 5
    merchant_scan_lines = 5
    max_item_amount = "10000"
    prioritize_date_lines = true

    [remote]
    base_url = "https://example.invalid/api"
    user_id = "user-123"
    timeout = 10.0
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from functools import lru_cache
from pathlib import Path
from typing import Any

from receiptlens.receipt.config import ExtractionConfig
from receiptlens.runtime.logging import get_logger
from receiptlens.runtime.paths import get_paths
from receiptlens.runtime.toml_loader import load_toml

logger = get_logger(__name__)

DEFAULT_REMOTE_TIMEOUT = 10.0


@dataclass(frozen=True)
class RemoteSettings:
    """Where to fetch shared dictionary and template data from."""

    base_url: str | None = None
    user_id: str | None = None
    timeout: float = DEFAULT_REMOTE_TIMEOUT

    @property
    def enabled(self) -> bool:
        return bool(self.base_url)


def _coerce(name: str, value: Any, default: Any) -> Any:
    """Coerce a TOML value to the type of the dataclass default."""
    if isinstance(default, bool):
        if isinstance(value, bool):
            return value
        raise ValueError(f"{name} must be a boolean")
    if isinstance(default, int):
        if isinstance(value, int) and not isinstance(value, bool):
            return value
        raise ValueError(f"{name} must be an integer")
    if isinstance(default, Decimal):
        try:
            return Decimal(str(value))
        except InvalidOperation as e:
            raise ValueError(f"{name} must be a number") from e
    if isinstance(default, str):
        if isinstance(value, str):
            return value
        raise ValueError(f"{name} must be a string")
    return value


@lru_cache(maxsize=4)
def load_extraction_config(config_path: str | None = None) -> ExtractionConfig:
    """
    Load the [extraction] table from the settings file.

    Args:
        config_path: Optional TOML path override. If None, uses default project path.

    Returns:
        ExtractionConfig with file values applied over defaults.
    """
    path = Path(config_path) if config_path is not None else get_paths().settings
    table = load_toml(path, "settings file").get("extraction", {})
    if not isinstance(table, dict):
        logger.warning("Ignoring malformed [extraction] table in %s", path)
        return ExtractionConfig()

    defaults = ExtractionConfig()
    known = {f.name for f in dataclasses.fields(ExtractionConfig)}
    changes: dict[str, Any] = {}
    for key, value in table.items():
        if key not in known:
            logger.warning("Unknown extraction setting %r in %s", key, path)
            continue
        try:
            changes[key] = _coerce(key, value, getattr(defaults, key))
        except ValueError as e:
            logger.warning("Ignoring extraction setting in %s: %s", path, e)

    return dataclasses.replace(defaults, **changes)


@lru_cache(maxsize=4)
def load_remote_settings(config_path: str | None = None) -> RemoteSettings:
    """Load the [remote] table from the settings file."""
    path = Path(config_path) if config_path is not None else get_paths().settings
    table = load_toml(path, "settings file").get("remote", {})
    if not isinstance(table, dict):
        logger.warning("Ignoring malformed [remote] table in %s", path)
        return RemoteSettings()

    base_url = table.get("base_url")
    user_id = table.get("user_id")
    timeout = table.get("timeout", DEFAULT_REMOTE_TIMEOUT)
    if not isinstance(timeout, (int, float)) or isinstance(timeout, bool) or timeout <= 0:
        logger.warning("Ignoring invalid remote timeout %r in %s", timeout, path)
        timeout = DEFAULT_REMOTE_TIMEOUT

    return RemoteSettings(
        base_url=base_url if isinstance(base_url, str) and base_url.strip() else None,
        user_id=user_id if isinstance(user_id, str) and user_id.strip() else None,
        timeout=float(timeout),
    )
