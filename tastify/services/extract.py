from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from enum import Enum
from typing import Protocol

from tastify.services.errors import InvalidURLError, MalformedResponseError, TransportError
from tastify.services.fallback import synthesize_fallback
from tastify.services.fetcher import MetadataScraper
from tastify.services.gemini_client import GenerateText
from tastify.services.ids import classify, is_supported_video_url
from tastify.services.prompt import build_prompt
from tastify.services.recipe_models import ParsedRecipe
from tastify.services.recipe_parser import parse_model_output
from tastify.services.types import VideoMetadata, VideoReference

logger = logging.getLogger(__name__)


class ExtractionStage(str, Enum):
    RECEIVED = "received"
    CLASSIFIED = "classified"
    SCRAPED = "scraped"
    PROMPT_BUILT = "prompt_built"
    MODEL_INVOKED = "model_invoked"
    PARSED = "parsed"
    FALLBACK_USED = "fallback_used"
    DONE = "done"


class Scraper(Protocol):
    def scrape(self, ref: VideoReference) -> VideoMetadata:
        ...


@dataclass(frozen=True)
class ExtractionOutcome:
    recipe: ParsedRecipe
    reference: VideoReference
    metadata: VideoMetadata
    resolved_by: ExtractionStage
    error: str | None = None

    @property
    def used_fallback(self) -> bool:
        return self.resolved_by == ExtractionStage.FALLBACK_USED


class RecipeExtractor:
    """Runs classify -> scrape -> prompt -> model -> parse, falling back on failure.

    Only an unsupported URL is reported to the caller. Model transport errors
    and malformed responses degrade to the generic fallback recipe.
    """

    def __init__(self, generate: GenerateText, scraper: Scraper | None = None) -> None:
        self._generate = generate
        self._scraper = scraper or MetadataScraper()

    def _classify(self, raw_url: str) -> VideoReference:
        ref = classify(raw_url)
        if not is_supported_video_url(ref.url):
            logger.info("extract.rejected url=%s platform=%s", ref.url, ref.platform.value)
            raise InvalidURLError(ref.url)
        return ref

    def _invoke_model(self, ref: VideoReference, metadata: VideoMetadata) -> ParsedRecipe:
        prompt = build_prompt(ref, metadata)
        logger.debug("extract.stage=%s chars=%d", ExtractionStage.PROMPT_BUILT.value, len(prompt.text))
        text = self._generate(prompt.text)
        logger.debug("extract.stage=%s chars=%d", ExtractionStage.MODEL_INVOKED.value, len(text or ""))
        return parse_model_output(text)

    def run(self, raw_url: str) -> ExtractionOutcome:
        t0 = time.time()
        ref = self._classify(raw_url)

        metadata = self._scraper.scrape(ref)
        logger.info(
            "extract.stage=%s url=%s title_len=%d description_len=%d",
            ExtractionStage.SCRAPED.value,
            ref.url,
            len(metadata.title),
            len(metadata.description),
        )

        try:
            recipe = self._invoke_model(ref, metadata)
            outcome = ExtractionOutcome(recipe, ref, metadata, ExtractionStage.PARSED)
        except (TransportError, MalformedResponseError) as exc:
            logger.warning(
                "extract.fallback url=%s reason=%s error=%s",
                ref.url,
                type(exc).__name__,
                exc,
            )
            outcome = ExtractionOutcome(
                synthesize_fallback(metadata),
                ref,
                metadata,
                ExtractionStage.FALLBACK_USED,
                error=str(exc),
            )

        logger.info(
            "extract.stage=%s url=%s resolved_by=%s dt=%.2fs",
            ExtractionStage.DONE.value,
            ref.url,
            outcome.resolved_by.value,
            time.time() - t0,
        )
        return outcome

    def extract_recipe(self, raw_url: str) -> ParsedRecipe:
        return self.run(raw_url).recipe
