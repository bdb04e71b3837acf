"""Mock extraction service for testing.

Provides a scripted implementation for unit and integration testing.
"""

from collections import deque

EMPTY_RESPONSE = (
    '{"tasks": [], "habits": [], "nutrition": [], "fitness": [], "notes": [], "goals": []}'
)


class MockExtractionService:
    """Mock extraction service for testing.

    Queued responses are returned in order; once the queue is empty the
    default response is returned. Queued exceptions are raised in place.
    """

    def __init__(self, default_response: str = EMPTY_RESPONSE) -> None:
        """Initialize mock service.

        Args:
            default_response: Text returned when nothing is queued
        """
        self._default_response = default_response
        self._queue: deque[str | Exception] = deque()
        self._calls: list[dict[str, object]] = []

    def set_response(self, text: str) -> None:
        """Set the response returned when nothing is queued."""
        self._default_response = text

    def queue_response(self, *texts: str) -> None:
        """Queue responses for the next calls, in order."""
        self._queue.extend(texts)

    def queue_error(self, error: Exception) -> None:
        """Queue an exception to raise on a future call."""
        self._queue.append(error)

    def complete(
        self,
        system: str,
        text: str,
        *,
        max_tokens: int,
        temperature: float,
    ) -> str:
        """Return the next scripted response."""
        self._calls.append(
            {
                "system": system,
                "text": text,
                "max_tokens": max_tokens,
                "temperature": temperature,
            }
        )

        if self._queue:
            item = self._queue.popleft()
            if isinstance(item, Exception):
                raise item
            return item
        return self._default_response

    @property
    def call_count(self) -> int:
        """Get number of complete calls."""
        return len(self._calls)

    @property
    def calls(self) -> list[dict[str, object]]:
        """Get recorded call arguments."""
        return list(self._calls)

    @property
    def last_text(self) -> str | None:
        """Get the user text of the most recent call."""
        if not self._calls:
            return None
        return str(self._calls[-1]["text"])

    def clear(self) -> None:
        """Reset mock state."""
        self._default_response = EMPTY_RESPONSE
        self._queue.clear()
        self._calls.clear()


__all__ = ["EMPTY_RESPONSE", "MockExtractionService"]
