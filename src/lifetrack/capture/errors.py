"""Error types for the capture pipeline.

Custom exceptions for extraction service interactions.
"""


class CaptureError(Exception):
    """Base exception for capture-related errors."""

    pass


class ConfigurationError(CaptureError):
    """Raised when the extraction service credential is missing or rejected."""

    pass


class ServiceError(CaptureError):
    """Raised when the extraction service returns an error."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        """Initialize service error.

        Args:
            message: Error message.
            status_code: HTTP status code if available.
        """
        super().__init__(message)
        self.status_code = status_code


class ExtractionTimeoutError(CaptureError, TimeoutError):
    """Raised when the extraction service does not answer in time."""

    pass


class PartialSaveError(CaptureError):
    """Raised when storage fails after some captured records were saved."""

    def __init__(self, message: str, saved_ids: dict[str, list[str]]) -> None:
        """Initialize partial save error.

        Args:
            message: Error message.
            saved_ids: Ids already written, keyed by category.
        """
        super().__init__(message)
        self.saved_ids = saved_ids


class MalformedResponseError(CaptureError):
    """Raised when a service response holds no usable JSON.

    Never escapes the extractor; it degrades to an empty result.
    """

    pass


__all__ = [
    "CaptureError",
    "ConfigurationError",
    "ExtractionTimeoutError",
    "MalformedResponseError",
    "PartialSaveError",
    "ServiceError",
]
