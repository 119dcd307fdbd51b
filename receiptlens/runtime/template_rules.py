"""Runtime loader for receipt template bundles."""

from __future__ import annotations

from pathlib import Path

from receiptlens.receipt.templates import TemplateRecord, parse_template_records
from receiptlens.runtime.logging import get_logger
from receiptlens.runtime.paths import get_paths
from receiptlens.runtime.toml_loader import load_toml

logger = get_logger(__name__)


def load_template_records(template_paths: tuple[str, ...] | None = None) -> list[TemplateRecord]:
    """Load template records from the bundled set, then project overrides.

    Args:
        template_paths: Optional explicit TOML files, in merge order.
            If None, uses the bundled defaults then config/receipt_templates.toml.

    Returns:
        Validated records in file order; later files override earlier ones on key collision
        once loaded into a TemplateStore.
    """
    if template_paths is None:
        p = get_paths()
        files = [p.default_templates, p.template_overrides]
    else:
        files = [Path(path) for path in template_paths]

    records: list[TemplateRecord] = []
    for path in files:
        raw = load_toml(path, "template file").get("templates", [])
        if not isinstance(raw, list):
            logger.warning("Ignoring malformed templates list in %s", path)
            continue
        loaded = parse_template_records(raw, source=str(path))
        logger.debug("Loaded %d templates from %s", len(loaded), path)
        records.extend(loaded)
    return records
