"""Helpers for pulling JSON out of LLM responses."""

from __future__ import annotations

import json


def extract_json(text: str) -> dict | list:
    """Extract JSON from an LLM response, handling ```json fences and chatter.

    Tries in order:
    1. Direct json.loads on the full text
    2. Strip fenced code block markers and parse
    3. Outermost '[...]' or '{...}', whichever opens first
    4. The other bracket pair
    """
    text = text.strip()

    try:
        return json.loads(text)
    except (json.JSONDecodeError, TypeError):
        pass

    stripped = _strip_code_fences(text)
    if stripped != text:
        try:
            return json.loads(stripped)
        except json.JSONDecodeError:
            pass

    pairs = sorted(
        (("[", "]"), ("{", "}")),
        key=lambda pair: stripped.find(pair[0]) % (len(stripped) + 1),
    )
    for opener, closer in pairs:
        result = _extract_between(stripped, opener, closer)
        if result is not None:
            return result

    raise ValueError(f"Could not extract JSON from text: {text[:200]}...")


def extract_string_list(data: dict | list, keys: tuple[str, ...] = ()) -> list[str]:
    """Return the non-empty strings of a JSON array, unwrapping {"<key>": [...]}."""
    if isinstance(data, dict):
        for key in keys:
            if isinstance(data.get(key), list):
                data = data[key]
                break
        else:
            return []
    if not isinstance(data, list):
        return []
    return [item.strip() for item in data if isinstance(item, str) and item.strip()]


def _strip_code_fences(text: str) -> str:
    """Remove markdown code fence markers from text."""
    lines = text.split("\n")

    if lines and lines[0].strip().startswith("```"):
        lines = lines[1:]

    while lines and lines[-1].strip() in ("```", ""):
        lines = lines[:-1]

    return "\n".join(lines).strip()


def _extract_between(text: str, opener: str, closer: str) -> dict | list | None:
    start = text.find(opener)
    end = text.rfind(closer)
    if start != -1 and end > start:
        try:
            return json.loads(text[start : end + 1])
        except json.JSONDecodeError:
            pass
    return None
