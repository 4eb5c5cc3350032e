"""Context-aware synonym suggestions for a word inside a statement."""

from __future__ import annotations

import logging

from statement_fitter.clients.llm_client import DEFAULT_MODEL, LLMClient
from statement_fitter.utils.json_parser import extract_string_list

logger = logging.getLogger(__name__)

MAX_SYNONYMS = 15

SYNONYM_SYSTEM = """\
You are a military writing assistant for Air Force performance statements (EPB / AF Form 1206).
Suggest context-appropriate replacements for one word of a statement.

Guidelines:
1. Fit the full context of the statement
2. Prefer strong, active verbs common in performance writing
3. Mix direct synonyms, stronger alternatives and military terminology
4. Every suggestion must be grammatical when substituted
5. Prefer single words; short phrases are acceptable

Return ONLY a JSON array of 10-15 strings, most relevant first."""


class SynonymFinder:
    """Suggest replacements for a single word, ordered by relevance."""

    def __init__(self, llm: LLMClient, model: str = DEFAULT_MODEL):
        self.llm = llm
        self.model = model

    async def find(self, word: str, full_statement: str) -> list[str]:
        """Returns an empty list on error or if either argument is blank."""
        if not word.strip() or not full_statement.strip():
            return []

        prompt = f"""Find synonyms for the word "{word}" in this statement:

"{full_statement}"

Return ONLY a JSON array of strings."""

        try:
            data = await self.llm.generate_json(
                prompt=prompt,
                system=SYNONYM_SYSTEM,
                model=self.model,
                temperature=0.7,
                max_tokens=500,
            )
        except Exception:
            logger.exception("Synonym LLM call failed")
            return []

        lowered = word.strip().lower()
        seen: list[str] = []
        for item in extract_string_list(data, keys=("synonyms", "alternatives")):
            candidate = item.lower()
            if candidate != lowered and candidate not in seen:
                seen.append(candidate)
        return seen[:MAX_SYNONYMS]
