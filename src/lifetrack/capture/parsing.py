"""Locate JSON payloads inside free-form model output.

Models wrap their JSON in prose or code fences, so the payload is found by
scanning the top-level bracket spans for the first one that decodes
cleanly. Spans nested inside another are never considered on their own.
"""

import json
from collections.abc import Callable
from typing import Any

from .errors import MalformedResponseError

_CLOSERS = {"{": "}", "[": "]"}


def _balanced_span(text: str, start: int) -> int | None:
    """Return the index just past the bracket span opening at start.

    String literals and escapes are honoured so braces inside values do not
    unbalance the scan. Returns None when the span never closes.
    """
    stack: list[str] = []
    in_string = False
    escaped = False

    for index in range(start, len(text)):
        char = text[index]
        if in_string:
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == '"':
                in_string = False
            continue

        if char == '"':
            in_string = True
        elif char in _CLOSERS:
            stack.append(_CLOSERS[char])
        elif char in ("}", "]"):
            if not stack or stack.pop() != char:
                return None
            if not stack:
                return index + 1

    return None


def _find_first(
    text: str,
    opener: str,
    expected: type,
    accept: Callable[[Any], bool] | None = None,
) -> Any:
    position = _next_opener(text, 0)
    while position >= 0:
        end = _balanced_span(text, position)
        if end is None:
            # Truncated or unbalanced; anything further on sits inside this span
            raise MalformedResponseError(f"Unbalanced JSON span at offset {position}")
        if text[position] == opener:
            try:
                value = json.loads(text[position:end])
            except json.JSONDecodeError:
                value = None
            if isinstance(value, expected) and (accept is None or accept(value)):
                return value
        position = _next_opener(text, end)

    raise MalformedResponseError(f"No JSON {expected.__name__} found in response")


def _next_opener(text: str, start: int) -> int:
    positions = [found for found in (text.find("{", start), text.find("[", start)) if found >= 0]
    return min(positions, default=-1)



def find_json_object(text: str) -> dict[str, Any]:
    """Decode the first balanced {...} object in text.

    Raises:
        MalformedResponseError: If no span decodes to an object.
    """
    result: dict[str, Any] = _find_first(text, "{", dict)
    return result


def find_json_array(text: str, objects_only: bool = False) -> list[Any]:
    """Decode the first balanced [...] array in text.

    Args:
        text: Raw model output
        objects_only: Skip arrays holding anything but JSON objects, such
            as the "[1]" entry prefixes a model may echo back

    Raises:
        MalformedResponseError: If no span decodes to an acceptable array.
    """
    result: list[Any] = _find_first(text, "[", list, _all_objects if objects_only else None)
    return result


def _all_objects(value: list[Any]) -> bool:
    return bool(value) and all(isinstance(item, dict) for item in value)


__all__ = ["find_json_array", "find_json_object"]
