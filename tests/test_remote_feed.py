"""Tests for the remote dictionary/template feed and pipeline factory."""

from __future__ import annotations

import json
from decimal import Decimal
from pathlib import Path
from typing import Any

import httpx
import pytest
from receiptlens.receipt.config import ExtractionConfig
from receiptlens.runtime.receipt_pipeline import create_extraction_pipeline, refresh_extraction_sources
from receiptlens.runtime.remote_feed import (
    RemoteFeedUnavailable,
    _get_json,
    fetch_correction_documents,
    fetch_template_records,
)
from receiptlens.runtime.settings import RemoteSettings

BASE_URL = "https://feed.test/api"

FEED: dict[str, Any] = {
    "/api/ocrDictionary/global": {
        "merchants": {"STARBUCKS COFFEE": "Starbucks", "GUARDLAN": "GUARDIAN"},
        "terms": {"T0TAL": "TOTAL"},
    },
    "/api/ocrDictionary/u-1": {"merchants": {"GUARDLAN": "Guardian Health"}},
    "/api/receiptTemplates": [
        {
            "merchantName": "Kedai Maju",
            "headerPattern": "KEDAI MAJU",
            "totalPattern": r"JUMLAH\s+(\d+\.\d{2})",
            "category": "Donations",
        },
        {"merchantName": "Broken", "headerPattern": "(oops"},
    ],
}


def _feed_client(routes: dict[str, Any] | None = None, status: int = 200) -> httpx.Client:
    routes = FEED if routes is None else routes

    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path not in routes:
            return httpx.Response(404)
        if status != 200:
            return httpx.Response(status)
        return httpx.Response(200, json=routes[request.url.path])

    return httpx.Client(transport=httpx.MockTransport(handler))


def _failing_client() -> httpx.Client:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    return httpx.Client(transport=httpx.MockTransport(handler))


def test_fetch_correction_documents() -> None:
    global_doc, user_doc = fetch_correction_documents(BASE_URL + "/", user_id="u-1", client=_feed_client())

    assert global_doc is not None
    assert dict(global_doc.terms) == {"T0TAL": "TOTAL"}
    assert user_doc is not None
    assert dict(user_doc.merchants) == {"GUARDLAN": "Guardian Health"}


def test_fetch_correction_documents_without_user() -> None:
    global_doc, user_doc = fetch_correction_documents(BASE_URL, client=_feed_client())

    assert global_doc is not None
    assert user_doc is None


def test_fetch_correction_documents_missing_user_document() -> None:
    _, user_doc = fetch_correction_documents(BASE_URL, user_id="nobody", client=_feed_client())

    assert user_doc is None


def test_fetch_correction_documents_unreachable() -> None:
    assert fetch_correction_documents(BASE_URL, user_id="u-1", client=_failing_client()) == (None, None)


def test_get_json_raises_on_server_error() -> None:
    with pytest.raises(RemoteFeedUnavailable, match="500"):
        _get_json(f"{BASE_URL}/ocrDictionary/global", client=_feed_client(status=500))


def test_get_json_raises_on_invalid_json() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, content=b"<html>")

    client = httpx.Client(transport=httpx.MockTransport(handler))

    with pytest.raises(RemoteFeedUnavailable):
        _get_json(f"{BASE_URL}/ocrDictionary/global", client=client)


def test_fetch_template_records_skips_bad_records() -> None:
    records = fetch_template_records(BASE_URL, client=_feed_client())

    assert records is not None
    assert [record.merchant_name for record in records] == ["Kedai Maju", "Broken"]


def test_fetch_template_records_accepts_wrapped_document() -> None:
    routes = {"/api/receiptTemplates": {"templates": FEED["/api/receiptTemplates"][:1]}}

    records = fetch_template_records(BASE_URL, client=_feed_client(routes))

    assert records is not None
    assert [record.merchant_key for record in records] == ["kedai maju"]


def test_fetch_template_records_unavailable() -> None:
    assert fetch_template_records(BASE_URL, client=_failing_client()) is None
    assert fetch_template_records(BASE_URL, client=_feed_client({"/api/receiptTemplates": "nope"})) is None


def test_create_pipeline_local_only(project_root: Path) -> None:
    cache_dir = project_root / "cache"
    cache_dir.mkdir()
    (cache_dir / "ocr_dictionary.json").write_text(
        json.dumps({"merchant_corrections": {"STARBUCKS COFFEE": "Starbucks"}, "common_terms": {}}),
        encoding="utf-8",
    )

    pipeline = create_extraction_pipeline(config=ExtractionConfig(), remote=RemoteSettings())

    assert "tesco" in {template.merchant_key for template in pipeline.templates.templates}
    assert pipeline.extract("STARBUCKS COFEE\nLatte 14.50").merchant_name == "Starbucks"
    assert pipeline.extract("TESCO EXTRA\nTOTAL RM7.70").merchant_name == "Tesco"


def test_create_pipeline_reads_settings_file(project_root: Path) -> None:
    config_dir = project_root / "config"
    config_dir.mkdir()
    settings = config_dir / "receiptlens.toml"
    settings.write_text('[extraction]\nmax_item_amount = "5"\n', encoding="utf-8")

    pipeline = create_extraction_pipeline(settings_path=str(settings))

    assert pipeline.config.max_item_amount == Decimal("5")
    assert pipeline.extract("KEDAI\nTea 2.50\nCake 12.00").line_items[0].description == "Tea"
    assert len(pipeline.extract("KEDAI\nTea 2.50\nCake 12.00").line_items) == 1


def test_create_pipeline_with_remote_feed(project_root: Path) -> None:
    remote = RemoteSettings(base_url=BASE_URL, user_id="u-1")

    pipeline = create_extraction_pipeline(config=ExtractionConfig(), remote=remote, client=_feed_client())

    assert pipeline.dictionary.merchant_corrections["GUARDLAN"] == "Guardian Health"
    receipt = pipeline.extract("KEDAI MAJU\nJUMLAH 15.00")
    assert receipt.merchant_name == "Kedai Maju"
    assert receipt.category == "Donations"
    assert receipt.total_amount == Decimal("15.00")

    corrected = pipeline.extract("GUARDLAN PHARMACY\nT0TAL RM 9.90")
    assert corrected.merchant_name == "Guardian Health PHARMACY"
    assert corrected.total_amount == Decimal("9.90")


def test_refresh_keeps_local_data_when_feed_is_down(project_root: Path) -> None:
    pipeline = create_extraction_pipeline(config=ExtractionConfig(), remote=RemoteSettings())
    before = len(pipeline.templates)

    refresh_extraction_sources(pipeline, RemoteSettings(base_url=BASE_URL), client=_failing_client())

    assert len(pipeline.templates) == before
    assert dict(pipeline.dictionary.merchant_corrections) == {}
