"""Runtime loader for extra category classification keywords."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from receiptlens.receipt.categories import CategoryRuleLayers, build_category_rule_layers
from receiptlens.runtime.paths import get_paths
from receiptlens.runtime.toml_loader import load_toml


@lru_cache(maxsize=8)
def load_category_rule_layers(rule_paths: tuple[str, ...] | None = None) -> CategoryRuleLayers:
    """Load category keyword rules from runtime-configured files into in-memory layers."""
    if rule_paths is None:
        files = [get_paths().category_rules]
    else:
        files = [Path(path) for path in rule_paths]

    configs = tuple(load_toml(path, "category rules file") for path in files)
    return build_category_rule_layers(configs=configs)
