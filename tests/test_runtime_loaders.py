"""Tests for runtime settings, template and dictionary cache loaders."""

from __future__ import annotations

import json
from decimal import Decimal
from pathlib import Path

from receiptlens.receipt.config import ExtractionConfig
from receiptlens.receipt.corrections import CorrectionDictionary
from receiptlens.runtime.dictionary_cache import load_dictionary_cache, save_dictionary_cache
from receiptlens.runtime.paths import get_paths
from receiptlens.runtime.settings import DEFAULT_REMOTE_TIMEOUT, load_extraction_config, load_remote_settings
from receiptlens.runtime.template_rules import load_template_records
from receiptlens.runtime.toml_loader import load_toml


def test_project_paths_follow_project_root(project_root: Path) -> None:
    paths = get_paths()

    assert paths.root == project_root.resolve()
    assert paths.settings == project_root.resolve() / "config" / "receiptlens.toml"
    assert paths.dictionary_cache == project_root.resolve() / "cache" / "ocr_dictionary.json"
    assert paths.default_templates.exists()


def test_extraction_config_from_toml(tmp_path: Path) -> None:
    settings = tmp_path / "receiptlens.toml"
    settings.write_text(
        "[extraction]\n"
        "merchant_match_threshold = 4\n"
        'max_item_amount = "500"\n'
        "prioritize_date_lines = false\n"
        'header_scan_lines = "many"\n'
        "unknown_key = 1\n",
        encoding="utf-8",
    )

    config = load_extraction_config(str(settings))

    assert config.merchant_match_threshold == 4
    assert config.max_item_amount == Decimal("500")
    assert config.prioritize_date_lines is False
    # invalid values are ignored, defaults kept
    assert config.header_scan_lines == ExtractionConfig().header_scan_lines


def test_missing_settings_file_uses_defaults(tmp_path: Path) -> None:
    missing = str(tmp_path / "nope.toml")

    assert load_extraction_config(missing) == ExtractionConfig()
    remote = load_remote_settings(missing)
    assert remote.enabled is False
    assert remote.timeout == DEFAULT_REMOTE_TIMEOUT


def test_broken_settings_file_uses_defaults(tmp_path: Path) -> None:
    settings = tmp_path / "broken.toml"
    settings.write_text("[extraction\nthis is not toml", encoding="utf-8")

    assert load_extraction_config(str(settings)) == ExtractionConfig()


def test_load_toml_missing_broken_and_valid(tmp_path: Path) -> None:
    broken = tmp_path / "broken.toml"
    broken.write_text("[section\n", encoding="utf-8")
    valid = tmp_path / "valid.toml"
    valid.write_text("[section]\nkey = \"value\"\n", encoding="utf-8")

    assert load_toml(tmp_path / "missing.toml") == {}
    assert load_toml(broken, "settings file") == {}
    assert load_toml(valid) == {"section": {"key": "value"}}


def test_remote_settings_from_toml(tmp_path: Path) -> None:
    settings = tmp_path / "receiptlens.toml"
    settings.write_text(
        '[remote]\nbase_url = "https://feed.test/api"\nuser_id = "u-1"\ntimeout = 3\n',
        encoding="utf-8",
    )

    remote = load_remote_settings(str(settings))

    assert remote.enabled is True
    assert remote.base_url == "https://feed.test/api"
    assert remote.user_id == "u-1"
    assert remote.timeout == 3.0


def test_template_files_merge_in_order(tmp_path: Path) -> None:
    first = tmp_path / "first.toml"
    first.write_text(
        "[[templates]]\n"
        'merchantName = "Shop"\n'
        "headerPattern = 'SHOP'\n"
        'category = "Medical"\n'
        "\n"
        "[[templates]]\n"
        'merchantName = "Broken"\n',
        encoding="utf-8",
    )
    second = tmp_path / "second.toml"
    second.write_text(
        "[[templates]]\nmerchantName = \"shop\"\nheaderPattern = 'SHOP'\ncategory = \"Education\"\n",
        encoding="utf-8",
    )

    records = load_template_records((str(first), str(second), str(tmp_path / "missing.toml")))

    assert [(r.merchant_key, r.category) for r in records] == [("shop", "Medical"), ("shop", "Education")]


def test_template_overrides_are_read_from_project_config(project_root: Path) -> None:
    config_dir = project_root / "config"
    config_dir.mkdir()
    (config_dir / "receipt_templates.toml").write_text(
        "[[templates]]\nmerchantName = \"Kedai Maju\"\nheaderPattern = 'KEDAI MAJU'\n",
        encoding="utf-8",
    )

    keys = [record.merchant_key for record in load_template_records()]

    assert keys[-1] == "kedai maju"
    assert "tesco" in keys


def test_dictionary_cache_round_trip(tmp_path: Path) -> None:
    cache_path = tmp_path / "cache" / "ocr_dictionary.json"
    dictionary = CorrectionDictionary(merchants={"TESC0": "TESCO"}, terms={"T0TAL": "TOTAL"})

    assert save_dictionary_cache(dictionary, cache_path) == cache_path
    assert json.loads(cache_path.read_text(encoding="utf-8")) == {
        "merchant_corrections": {"TESC0": "TESCO"},
        "common_terms": {"T0TAL": "TOTAL"},
    }

    document = load_dictionary_cache(cache_path)
    assert document is not None
    assert dict(document.merchants) == {"TESC0": "TESCO"}
    assert dict(document.terms) == {"T0TAL": "TOTAL"}


def test_dictionary_cache_missing_or_corrupt(tmp_path: Path) -> None:
    assert load_dictionary_cache(tmp_path / "missing.json") is None

    corrupt = tmp_path / "corrupt.json"
    corrupt.write_text("{not json", encoding="utf-8")
    assert load_dictionary_cache(corrupt) is None


def test_dictionary_cache_defaults_to_project_path(project_root: Path) -> None:
    save_dictionary_cache(CorrectionDictionary(terms={"8READ": "BREAD"}))

    document = load_dictionary_cache()

    assert (project_root / "cache" / "ocr_dictionary.json").exists()
    assert document is not None
    assert dict(document.terms) == {"8READ": "BREAD"}
