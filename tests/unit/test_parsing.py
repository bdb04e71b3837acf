"""Unit tests for locating JSON inside model output."""

import pytest

from lifetrack.capture.errors import MalformedResponseError
from lifetrack.capture.parsing import find_json_array, find_json_object


class TestFindJsonObject:
    """Tests for find_json_object()."""

    def test_plain_object(self) -> None:
        assert find_json_object('{"tasks": []}') == {"tasks": []}

    def test_object_in_code_fence(self) -> None:
        text = '```json\n{"tasks": [{"title": "call mom"}]}\n```'
        assert find_json_object(text) == {"tasks": [{"title": "call mom"}]}

    def test_object_wrapped_in_prose(self) -> None:
        """Test that braces inside string values do not end the span early."""
        text = 'Sure! {"notes": [{"content": "use {braces} here"}]} Hope this helps {'
        assert find_json_object(text) == {"notes": [{"content": "use {braces} here"}]}

    def test_escaped_quotes_in_strings(self) -> None:
        text = '{"notes": [{"content": "she said \\"hi}\\""}]}'
        assert find_json_object(text)["notes"][0]["content"] == 'she said "hi}"'

    def test_skips_span_that_is_not_json(self) -> None:
        assert find_json_object('{not json} then {"goals": []}') == {"goals": []}

    def test_no_object_raises(self) -> None:
        with pytest.raises(MalformedResponseError):
            find_json_object("I could not find anything to extract.")

    def test_unbalanced_object_raises(self) -> None:
        with pytest.raises(MalformedResponseError):
            find_json_object('{"a": [1, 2}')

    def test_truncated_object_raises(self) -> None:
        """Test that a nested item is not returned from an answer cut off mid-way."""
        with pytest.raises(MalformedResponseError):
            find_json_object('{"tasks": [{"title": "call mom"}], "notes": [{"content": "long')

    def test_nested_object_is_not_the_answer(self) -> None:
        assert find_json_object('[{"tasks": []}] {"notes": []}') == {"notes": []}

    def test_array_is_not_an_object(self) -> None:
        with pytest.raises(MalformedResponseError):
            find_json_object("[1, 2, 3]")


class TestFindJsonArray:
    """Tests for find_json_array()."""

    def test_array_of_objects(self) -> None:
        text = 'Here you go:\n[{"tasks": []}, {"notes": []}]'
        assert find_json_array(text) == [{"tasks": []}, {"notes": []}]

    def test_objects_only_skips_echoed_prefixes(self) -> None:
        """Test that "[1]" style entry prefixes are not taken as the answer."""
        text = 'Results for [1] and [2]: [{"tasks": []}, {"notes": []}]'
        assert find_json_array(text, objects_only=True) == [{"tasks": []}, {"notes": []}]

    def test_without_objects_only_first_array_wins(self) -> None:
        assert find_json_array("[1] walked the dog") == [1]

    def test_objects_only_rejects_empty_array(self) -> None:
        with pytest.raises(MalformedResponseError):
            find_json_array("[]", objects_only=True)

    def test_truncated_array_raises(self) -> None:
        text = '[{"tasks": [{"title": "a1"}, {"title": "a2"}]}, {"tasks": ['
        with pytest.raises(MalformedResponseError):
            find_json_array(text, objects_only=True)

    def test_no_array_raises(self) -> None:
        with pytest.raises(MalformedResponseError):
            find_json_array('{"tasks": []}')
