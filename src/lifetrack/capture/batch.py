"""Batched extraction of several captures in one service call."""

import logging

from .errors import MalformedResponseError
from .extractor import CaptureExtractor
from .models import ExtractionResult
from .parsing import find_json_array

logger = logging.getLogger(__name__)

ENTRY_DELIMITER = "\n---\n"

BATCH_PROMPT = """You parse several numbered user inputs into structured life management data.
Inputs are separated by a line containing only "---".
Return a JSON ARRAY with exactly one object per input, in the same order.
Each object has these arrays:
- tasks: [{title, due_date (ISO date or null), goal_id (null)}]
- habits: [{name, frequency ("daily"|"weekly"|"monthly")}]
- nutrition: [{food_name, macros: {calories, protein, carbs, fat, fiber}}]
- fitness: [{exercise_name, sets, reps, weight, cardio_minutes}]
- notes: [{content}]
- goals: [{title, weight (1-100)}]

Return ONLY valid JSON, no markdown or explanation."""


def format_batch(texts: list[str]) -> str:
    """Join captures into one numbered, delimited message."""
    return ENTRY_DELIMITER.join(f"[{number}] {text}" for number, text in enumerate(texts, start=1))


class BatchCoordinator:
    """Merges several captures into one extraction call.

    result[i] always belongs to texts[i]. When the batch answer cannot be
    split back into one object per capture, each capture is extracted on
    its own, in order.
    """

    def __init__(self, extractor: CaptureExtractor, max_tokens: int = 4096) -> None:
        """Initialize coordinator.

        Args:
            extractor: Single-capture extractor, also used for fallback
            max_tokens: Output token budget for a batch call
        """
        self._extractor = extractor
        self._max_tokens = max_tokens

    def batch_extract(self, texts: list[str]) -> list[ExtractionResult]:
        """Extract every capture in texts.

        Args:
            texts: Raw capture texts

        Returns:
            One ExtractionResult per input, in input order
        """
        if not texts:
            return []
        if len(texts) == 1:
            return [self._extractor.extract(texts[0])]

        results: list[ExtractionResult | None] = []
        pending: list[int] = []
        for index, text in enumerate(texts):
            if not text.strip():
                results.append(ExtractionResult.empty())
                continue
            cached = self._extractor.cache.get(self._extractor.key_for(text))
            results.append(cached)
            if cached is None:
                pending.append(index)

        if len(pending) == 1:
            results[pending[0]] = self._extractor.extract(texts[pending[0]])
        elif pending:
            for index, result in zip(pending, self._extract_pending([texts[i] for i in pending])):
                results[index] = result

        return [result if result is not None else ExtractionResult.empty() for result in results]

    def _extract_pending(self, texts: list[str]) -> list[ExtractionResult]:
        response_text = self._extractor.service.complete(
            BATCH_PROMPT,
            format_batch(texts),
            max_tokens=self._max_tokens,
            temperature=self._extractor.temperature,
        )

        try:
            payloads = find_json_array(response_text, objects_only=True)
            if not all(ExtractionResult.describes_categories(payload) for payload in payloads):
                raise MalformedResponseError("Batch entry names none of the capture categories")
        except MalformedResponseError as e:
            logger.warning(f"Batch output unusable, extracting {len(texts)} one by one: {e}")
            return [self._extractor.extract(text) for text in texts]

        if len(payloads) != len(texts):
            logger.warning(
                f"Batch returned {len(payloads)} results for {len(texts)} captures, "
                "extracting one by one"
            )
            return [self._extractor.extract(text) for text in texts]

        logger.info(f"Batch extracted {len(texts)} captures in one call")
        return [self._extractor.remember(text, payload) for text, payload in zip(texts, payloads)]


__all__ = ["BATCH_PROMPT", "ENTRY_DELIMITER", "BatchCoordinator", "format_batch"]
