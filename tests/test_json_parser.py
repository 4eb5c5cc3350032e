"""Tests for JSON extraction utility."""

import pytest

from statement_fitter.utils.json_parser import extract_json, extract_string_list


class TestExtractJson:
    def test_direct_json(self):
        result = extract_json('["Led", "Directed"]')
        assert result == ["Led", "Directed"]

    def test_fenced_code_block(self):
        text = 'Here are the revisions:\n```json\n["Led 12 Airmen"]\n```'
        result = extract_json(text)
        assert result == ["Led 12 Airmen"]

    def test_fenced_without_json_tag(self):
        text = '```\n{"synonyms": ["drove"]}\n```'
        result = extract_json(text)
        assert result == {"synonyms": ["drove"]}

    def test_embedded_array(self):
        text = 'Sure! ["Directed 12 Amn", "Guided 12 Amn"] Let me know.'
        result = extract_json(text)
        assert result == ["Directed 12 Amn", "Guided 12 Amn"]

    def test_object_wrapping_array_is_kept(self):
        """An object that opens first is returned whole, not its inner array."""
        text = 'Result: {"revisions": ["Led", "Drove"]} done'
        result = extract_json(text)
        assert result == {"revisions": ["Led", "Drove"]}

    def test_invalid_json_raises(self):
        with pytest.raises(ValueError, match="Could not extract JSON"):
            extract_json("no json here at all")

    def test_empty_string_raises(self):
        with pytest.raises(ValueError):
            extract_json("")

    def test_multiline_fenced(self):
        text = """Here's the output:
```json
[
  "Managed 15-mbr flight",
  "Ran daily ops for 15 Amn"
]
```"""
        result = extract_json(text)
        assert len(result) == 2


class TestExtractStringList:
    def test_plain_list(self):
        assert extract_string_list([" led ", "", 3, "drove"]) == ["led", "drove"]

    def test_unwraps_known_key(self):
        data = {"alternatives": ["drove", "guided"]}
        assert extract_string_list(data, keys=("synonyms", "alternatives")) == ["drove", "guided"]

    def test_unknown_key(self):
        assert extract_string_list({"other": ["x"]}, keys=("synonyms",)) == []
