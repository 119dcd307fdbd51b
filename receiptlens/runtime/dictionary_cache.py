"""Local JSON cache for the correction dictionary.

The cache is a flat document with two string->string maps:

    {"merchant_corrections": {...}, "common_terms": {...}}
"""

from __future__ import annotations

import json
from pathlib import Path

from receiptlens.receipt.corrections import CorrectionDictionary, CorrectionDocument
from receiptlens.runtime.logging import get_logger
from receiptlens.runtime.paths import get_paths

logger = get_logger(__name__)


def load_dictionary_cache(cache_path: Path | None = None) -> CorrectionDocument | None:
    """Read the local dictionary cache; None when missing or unreadable."""
    path = cache_path if cache_path is not None else get_paths().dictionary_cache
    if not path.exists():
        logger.debug("No local dictionary cache at %s", path)
        return None

    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        logger.warning("Error reading dictionary cache %s: %s", path, e)
        return None
    return CorrectionDocument.from_local_cache(raw)


def save_dictionary_cache(dictionary: CorrectionDictionary, cache_path: Path | None = None) -> Path:
    """Write the dictionary's current state to the local cache file."""
    path = cache_path if cache_path is not None else get_paths().dictionary_cache
    path.parent.mkdir(parents=True, exist_ok=True)

    # Atomic replace.
    tmp_path = path.with_suffix(path.suffix + ".tmp")
    tmp_path.write_text(json.dumps(dictionary.to_local_cache(), indent=2, ensure_ascii=False), encoding="utf-8")
    tmp_path.replace(path)
    logger.debug("Dictionary cache saved to %s", path)
    return path
