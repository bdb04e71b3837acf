"""Structured extraction from free-text captures.

Turns arbitrary user text into the six record categories via the extraction
service, memoizing results in a PatternCache.
"""

import logging
from typing import Any

from .cache import PatternCache
from .errors import MalformedResponseError
from .models import ExtractionResult
from .normalizer import KeyStrategy, cache_key
from .parsing import find_json_object
from .service import ExtractionService

logger = logging.getLogger(__name__)


# Instruction template for single captures
CAPTURE_PROMPT = """You parse user input into structured life management data.
Return a JSON object with these arrays:
- tasks: [{title, due_date (ISO date or null), goal_id (null)}]
- habits: [{name, frequency ("daily"|"weekly"|"monthly")}]
- nutrition: [{food_name, macros: {calories, protein, carbs, fat, fiber}}]
- fitness: [{exercise_name, sets, reps, weight, cardio_minutes}]
- notes: [{content}]
- goals: [{title, weight (1-100)}]

Rules:
- Extract ALL relevant items from the input
- For nutrition, estimate macros if not provided
- For fitness, parse exercise details (e.g. "bench press 3x10 135lbs")
- Goals are outcomes, tasks are actions
- Return ONLY valid JSON, no markdown or explanation"""


class CaptureExtractor:
    """Extracts typed items from capture text.

    Never raises on malformed model output; service, timeout and
    configuration errors propagate to the caller.
    """

    def __init__(
        self,
        service: ExtractionService,
        cache: PatternCache | None = None,
        key_strategy: KeyStrategy = KeyStrategy.FUZZY,
        max_tokens: int = 1024,
        temperature: float = 0.1,
    ) -> None:
        """Initialize extractor.

        Args:
            service: Text-understanding service to call on cache misses
            cache: Shared result cache; a private one is created if omitted
            key_strategy: How capture text is keyed in the cache
            max_tokens: Output token budget per extraction
            temperature: Sampling temperature, kept low for determinism
        """
        self._service = service
        self._cache = cache if cache is not None else PatternCache()
        self._key_strategy = key_strategy
        self._max_tokens = max_tokens
        self._temperature = temperature

    @property
    def service(self) -> ExtractionService:
        """Service used on cache misses."""
        return self._service

    @property
    def cache(self) -> PatternCache:
        """Result cache shared with collaborators."""
        return self._cache

    @property
    def temperature(self) -> float:
        """Sampling temperature for extraction calls."""
        return self._temperature

    def key_for(self, text: str) -> str:
        """Cache key of a capture under this extractor's strategy."""
        return cache_key(text, self._key_strategy)

    def extract(self, text: str) -> ExtractionResult:
        """Extract structured items from text.

        Args:
            text: Raw capture text

        Returns:
            ExtractionResult with all six categories present
        """
        if not text.strip():
            return ExtractionResult.empty()

        key = self.key_for(text)
        cached = self._cache.get(key)
        if cached is not None:
            return cached

        response_text = self._service.complete(
            CAPTURE_PROMPT,
            text,
            max_tokens=self._max_tokens,
            temperature=self._temperature,
        )

        try:
            payload = find_json_object(response_text)
            if not ExtractionResult.describes_categories(payload):
                raise MalformedResponseError("JSON object names none of the capture categories")
        except MalformedResponseError as e:
            logger.warning(f"Discarding malformed extraction output: {e}")
            return ExtractionResult.empty()

        result = ExtractionResult.from_dict(payload)
        self._cache.set(key, result)
        logger.info(f"Extracted {result.total_items} items from capture")
        return result

    def remember(self, text: str, payload: dict[str, Any]) -> ExtractionResult:
        """Normalize a payload parsed elsewhere and cache it under text."""
        result = ExtractionResult.from_dict(payload)
        self._cache.set(self.key_for(text), result)
        return result


__all__ = ["CAPTURE_PROMPT", "CaptureExtractor"]
