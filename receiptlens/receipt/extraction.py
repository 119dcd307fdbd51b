"""Receipt extraction pipeline.

One call runs a single deterministic pass:

    IDLE -> TEMPLATE_ATTEMPTED -+-> (template hit) ---------------------------+-> MERCHANT_NORMALIZED -> DONE
                                +-> DICTIONARY_CORRECTED -> GENERIC_EXTRACTED -+

There are no retries and no backtracking between the template and generic
paths. Unexpected exceptions propagate to the caller; nothing is partially
recovered.
"""

from __future__ import annotations

import dataclasses
import logging
from datetime import date
from enum import Enum

from receiptlens.domain.receipt import ReceiptData

from .categories import CategoryRuleLayers, build_category_rule_layers
from .config import ExtractionConfig
from .corrections import CorrectionDictionary
from .ocr_result_parser import parse_receipt_text
from .templates import TemplateMatcher, TemplateStore

logger = logging.getLogger(__name__)


class ExtractionStage(Enum):
    IDLE = "idle"
    TEMPLATE_ATTEMPTED = "template_attempted"
    DICTIONARY_CORRECTED = "dictionary_corrected"
    GENERIC_EXTRACTED = "generic_extracted"
    MERCHANT_NORMALIZED = "merchant_normalized"
    DONE = "done"


class ReceiptExtractionPipeline:
    """Template match first, else dictionary correction plus generic extraction."""

    def __init__(
        self,
        dictionary: CorrectionDictionary | None = None,
        templates: TemplateStore | None = None,
        config: ExtractionConfig | None = None,
        category_rule_layers: CategoryRuleLayers | None = None,
    ) -> None:
        self.config = config or ExtractionConfig()
        if dictionary is None:
            dictionary = CorrectionDictionary(merchant_match_threshold=self.config.merchant_match_threshold)
        self.dictionary = dictionary
        self.templates = templates if templates is not None else TemplateStore()
        self.template_matcher = TemplateMatcher(
            self.templates,
            header_scan_lines=self.config.header_scan_lines,
            unknown_date=self.config.unknown_date,
        )
        layers = category_rule_layers or build_category_rule_layers()
        self.category_rule_layers = dataclasses.replace(layers, default_category=self.config.default_category)

    def extract(self, raw_text: str, today: date | None = None) -> ReceiptData:
        """Extract a structured receipt from raw OCR text.

        Args:
            raw_text: OCR output, possibly multi-line or empty
            today: Date used for the missing-date fallback; defaults to the current date

        Raises:
            TypeError: if `raw_text` is not a string
        """
        if not isinstance(raw_text, str):
            raise TypeError(f"OCR text must be a string, got {type(raw_text).__name__}")

        stage = ExtractionStage.IDLE
        result = self.template_matcher.match_receipt(raw_text)
        stage = self._advance(stage, ExtractionStage.TEMPLATE_ATTEMPTED)

        if result is None:
            corrected_text = self.dictionary.apply_corrections(raw_text)
            stage = self._advance(stage, ExtractionStage.DICTIONARY_CORRECTED)

            result = parse_receipt_text(
                corrected_text,
                raw_text=raw_text,
                config=self.config,
                category_rule_layers=self.category_rule_layers,
                today=today,
            )
            stage = self._advance(stage, ExtractionStage.GENERIC_EXTRACTED)
        else:
            logger.debug("Template path used for %s", result.merchant_name)

        merchant = self.dictionary.correct_merchant_name(result.merchant_name)
        if merchant != result.merchant_name:
            result = dataclasses.replace(result, merchant_name=merchant)
        stage = self._advance(stage, ExtractionStage.MERCHANT_NORMALIZED)

        self._advance(stage, ExtractionStage.DONE)
        return result

    @staticmethod
    def _advance(current: ExtractionStage, new: ExtractionStage) -> ExtractionStage:
        logger.debug("Extraction stage %s -> %s", current.value, new.value)
        return new
