"""Skip re-extraction of edits that do not change a capture's meaning."""

import logging
from dataclasses import dataclass

from .extractor import CaptureExtractor
from .models import ExtractionResult
from .normalizer import normalize

logger = logging.getLogger(__name__)


@dataclass
class ReparseResult:
    """Outcome of re-parsing an edited capture."""

    changed: bool
    parsed: ExtractionResult


def reparse_if_changed(
    original: str,
    edited: str,
    prior: ExtractionResult,
    extractor: CaptureExtractor,
) -> ReparseResult:
    """Re-extract edited text only when it differs after normalization.

    Args:
        original: Text the prior result was extracted from
        edited: Text after the user's edit
        prior: Result previously extracted from original
        extractor: Extractor used when the text changed

    Returns:
        ReparseResult carrying prior unchanged, or the fresh extraction
    """
    if normalize(original) == normalize(edited):
        logger.debug("Edit is whitespace/case only, keeping prior extraction")
        return ReparseResult(changed=False, parsed=prior)

    return ReparseResult(changed=True, parsed=extractor.extract(edited))


__all__ = ["ReparseResult", "reparse_if_changed"]
