"""Runtime helpers that assemble and refresh the extraction pipeline.

All file and network I/O for the pipeline's data happens here, during an
explicit initialization or refresh step. `ReceiptExtractionPipeline.extract`
itself never blocks on I/O; refreshes swap new snapshots into the stores.
"""

from __future__ import annotations

from pathlib import Path

import httpx

from receiptlens.receipt.config import ExtractionConfig
from receiptlens.receipt.corrections import CorrectionDictionary
from receiptlens.receipt.extraction import ReceiptExtractionPipeline
from receiptlens.receipt.templates import TemplateStore
from receiptlens.runtime.category_rules import load_category_rule_layers
from receiptlens.runtime.dictionary_cache import load_dictionary_cache
from receiptlens.runtime.logging import get_logger
from receiptlens.runtime.remote_feed import fetch_correction_documents, fetch_template_records
from receiptlens.runtime.settings import RemoteSettings, load_extraction_config, load_remote_settings
from receiptlens.runtime.template_rules import load_template_records

logger = get_logger(__name__)


def refresh_extraction_sources(
    pipeline: ReceiptExtractionPipeline,
    remote: RemoteSettings | None = None,
    *,
    dictionary_cache_path: Path | None = None,
    template_paths: tuple[str, ...] | None = None,
    client: httpx.Client | None = None,
) -> None:
    """
    Reload the pipeline's dictionary and templates from local and remote sources.

    Local data is loaded first; remote data (when configured) is layered on top.
    Any source that fails to load is skipped.

    Args:
        pipeline: Pipeline whose stores should be refreshed
        remote: Remote feed settings; None or disabled means local data only
        dictionary_cache_path: Override for the local dictionary cache file
        template_paths: Override for the local template TOML files
        client: Optional httpx client (e.g. with custom transport)
    """
    local_cache = load_dictionary_cache(dictionary_cache_path)
    bundled = load_template_records(template_paths)

    remote_global = remote_user = None
    remote_templates = None
    if remote is not None and remote.enabled:
        assert remote.base_url is not None
        logger.info("Refreshing dictionary and templates from %s", remote.base_url)
        remote_global, remote_user = fetch_correction_documents(
            remote.base_url,
            user_id=remote.user_id,
            timeout=remote.timeout,
            client=client,
        )
        remote_templates = fetch_template_records(remote.base_url, timeout=remote.timeout, client=client)

    pipeline.dictionary.load(local_cache, remote_global, remote_user)
    pipeline.templates.load(bundled, remote_templates or ())


def create_extraction_pipeline(
    config: ExtractionConfig | None = None,
    remote: RemoteSettings | None = None,
    *,
    settings_path: str | None = None,
    dictionary_cache_path: Path | None = None,
    template_paths: tuple[str, ...] | None = None,
    category_rule_paths: tuple[str, ...] | None = None,
    client: httpx.Client | None = None,
) -> ReceiptExtractionPipeline:
    """Create a pipeline loaded from project configuration (and the remote feed if configured).

    Args:
        config: Extraction config; read from the settings file when None
        remote: Remote feed settings; read from the settings file when None
        settings_path: Override for config/receiptlens.toml

    Returns:
        A ready-to-use ReceiptExtractionPipeline.
    """
    if config is None:
        config = load_extraction_config(settings_path)
    if remote is None:
        remote = load_remote_settings(settings_path)

    pipeline = ReceiptExtractionPipeline(
        dictionary=CorrectionDictionary(merchant_match_threshold=config.merchant_match_threshold),
        templates=TemplateStore(),
        config=config,
        category_rule_layers=load_category_rule_layers(category_rule_paths),
    )
    refresh_extraction_sources(
        pipeline,
        remote,
        dictionary_cache_path=dictionary_cache_path,
        template_paths=template_paths,
        client=client,
    )
    return pipeline
