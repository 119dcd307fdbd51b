"""Runtime infrastructure for receiptlens.

This package provides process/runtime services including:
- Logging setup via get_logger()
- Path resolution via get_paths(), ProjectPaths
- Settings, template, category rule and dictionary cache loaders
- The remote dictionary/template feed client
- Pipeline construction via create_extraction_pipeline()

Usage:
    from receiptlens.runtime import create_extraction_pipeline, get_logger

    logger = get_logger(__name__)
    pipeline = create_extraction_pipeline()
    receipt = pipeline.extract(ocr_text)
"""

from receiptlens.runtime.category_rules import load_category_rule_layers
from receiptlens.runtime.dictionary_cache import load_dictionary_cache, save_dictionary_cache
from receiptlens.runtime.logging import (
    DEFAULT_LOG_LEVEL,
    LOG_FORMAT,
    LOG_FORMAT_DEBUG,
    configure_logging,
    get_logger,
    set_log_level,
)
from receiptlens.runtime.paths import (
    ProjectPaths,
    get_paths,
    set_project_root,
)
from receiptlens.runtime.receipt_pipeline import create_extraction_pipeline, refresh_extraction_sources
from receiptlens.runtime.remote_feed import (
    RemoteFeedUnavailable,
    fetch_correction_documents,
    fetch_template_records,
)
from receiptlens.runtime.settings import RemoteSettings, load_extraction_config, load_remote_settings
from receiptlens.runtime.template_rules import load_template_records

__all__ = [
    # Logging
    "get_logger",
    "configure_logging",
    "set_log_level",
    "DEFAULT_LOG_LEVEL",
    "LOG_FORMAT",
    "LOG_FORMAT_DEBUG",
    # Paths
    "get_paths",
    "set_project_root",
    "ProjectPaths",
    # Loaders
    "RemoteSettings",
    "load_extraction_config",
    "load_remote_settings",
    "load_template_records",
    "load_category_rule_layers",
    "load_dictionary_cache",
    "save_dictionary_cache",
    # Remote feed
    "RemoteFeedUnavailable",
    "fetch_correction_documents",
    "fetch_template_records",
    # Pipeline
    "create_extraction_pipeline",
    "refresh_extraction_sources",
]
