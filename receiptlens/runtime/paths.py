"""Centralized path management for receiptlens.

This module provides a single source of truth for the files the runtime
reads: settings, template overrides, category rules and the local
correction dictionary cache.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path


def _get_project_root() -> Path:
    """Determine the project root directory.

    RECEIPTLENS_HOME wins; otherwise the current working directory.
    """
    env_root = os.environ.get("RECEIPTLENS_HOME")
    if env_root:
        return Path(env_root).expanduser()
    return Path.cwd()


@dataclass
class ProjectPaths:
    """Container for all project-related paths.

    All paths are computed relative to the project root, ensuring consistency
    across all modules regardless of where they are imported from.
    """

    root: Path = field(default_factory=_get_project_root)

    def __post_init__(self) -> None:
        # Ensure root is resolved to absolute path
        self.root = Path(self.root).resolve()

    # --- Source code paths ---
    @property
    def src(self) -> Path:
        """receiptlens package directory."""
        return Path(__file__).resolve().parents[1]

    @property
    def default_templates(self) -> Path:
        """Bundled default receipt templates TOML file."""
        return self.src / "receipt" / "rules" / "default_templates.toml"

    # --- Configuration paths ---
    @property
    def config(self) -> Path:
        """Configuration directory (config/)."""
        return self.root / "config"

    @property
    def settings(self) -> Path:
        """Extraction and remote-feed settings TOML file."""
        return self.config / "receiptlens.toml"

    @property
    def template_overrides(self) -> Path:
        """Project-level receipt templates TOML file, merged over the bundled set."""
        return self.config / "receipt_templates.toml"

    @property
    def category_rules(self) -> Path:
        """Project-level extra category keywords TOML file."""
        return self.config / "category_rules.toml"

    # --- Cache paths ---
    @property
    def cache(self) -> Path:
        """Local cache directory (cache/)."""
        return self.root / "cache"

    @property
    def dictionary_cache(self) -> Path:
        """Local correction dictionary cache (JSON)."""
        return self.cache / "ocr_dictionary.json"


# Module-level singleton
_paths: ProjectPaths | None = None


def get_paths() -> ProjectPaths:
    """Get the singleton ProjectPaths instance.

    Returns:
        The global ProjectPaths instance.
    """
    global _paths
    if _paths is None:
        _paths = ProjectPaths()
    return _paths


def set_project_root(root: Path | str) -> ProjectPaths:
    """Point path resolution at a different project root.

    Args:
        root: New project root directory.
    """
    global _paths
    _paths = ProjectPaths(root=Path(root))
    return _paths
