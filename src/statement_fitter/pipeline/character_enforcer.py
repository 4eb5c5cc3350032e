"""Character-count enforcement for generated statements.

Generated statements that miss their character window are sent back to the
LLM with a correction prompt. The retry loop stops early when it is no longer
paying off:

- hard cap of MAX_ABSOLUTE_RETRIES attempts regardless of configuration
- "close enough" when within CLOSE_ENOUGH_THRESHOLD characters of the window
- no progress when an attempt improves by fewer than MIN_IMPROVEMENT_THRESHOLD
- oscillation when the length flips between under and over MAX_OSCILLATIONS times
- duplicate output the loop has already seen
"""

from __future__ import annotations

import asyncio
import logging
import re

from statement_fitter.clients.llm_client import LLMClient
from statement_fitter.models.validation import (
    CharacterValidation,
    EnforcementResult,
    StopReason,
)

logger = logging.getLogger(__name__)

MAX_ABSOLUTE_RETRIES = 3
MIN_IMPROVEMENT_THRESHOLD = 5
CLOSE_ENOUGH_THRESHOLD = 15
MAX_OSCILLATIONS = 2
MAX_CONCURRENT_ENFORCEMENTS = 3

BANNED_WORD_MAP: dict[str, str] = {
    "spearheaded": "led",
    "orchestrated": "coordinated",
    "synergized": "integrated",
    "leveraged": "used",
    "facilitated": "enabled",
    "utilized": "used",
    "impacted": "improved",
}

CORRECTION_SYSTEM = """\
You are a precise text editor. Your ONLY job is to adjust the character count of a \
statement to meet exact requirements. Every letter, number, space, and punctuation \
mark counts."""


def _default_min(target_max: int, target_min: int | None) -> int:
    return target_min if target_min is not None else max(0, target_max - 10)


def validate_character_count(
    statement: str,
    target_max: int,
    target_min: int | None = None,
) -> CharacterValidation:
    """Check a statement's length against [target_min, target_max]."""
    actual = len(statement)
    effective_min = _default_min(target_max, target_min)
    mid = (effective_min + target_max) / 2
    variance = abs((actual - mid) / mid * 100) if mid else 0.0

    if actual < effective_min:
        direction, adjust = "under", effective_min - actual
    elif actual > target_max:
        direction, adjust = "over", target_max - actual
    else:
        direction, adjust = "within", 0

    return CharacterValidation(
        is_compliant=direction == "within",
        actual_length=actual,
        target_min=effective_min,
        target_max=target_max,
        variance=variance,
        direction=direction,
        chars_to_adjust=adjust,
    )


def should_attempt_enforcement(
    statement: str,
    target_max: int,
    target_min: int | None = None,
) -> tuple[bool, str]:
    """Decide whether an LLM correction round is worth making."""
    validation = validate_character_count(statement, target_max, target_min)
    if validation.is_compliant:
        return False, "already_compliant"
    deficit = abs(validation.chars_to_adjust)
    if deficit <= CLOSE_ENOUGH_THRESHOLD:
        return False, "close_enough"
    if deficit > target_max * 0.5:
        return False, "too_far_off"
    return True, "needs_adjustment"


def sanitize_statement_text(statement: str) -> str:
    """Clean up LLM artifacts: banned verbs, ".." runs, truncated trailing sentences."""
    cleaned = statement
    for banned, replacement in BANNED_WORD_MAP.items():
        cleaned = re.sub(
            rf"\b{banned}\b",
            lambda m, r=replacement: r.capitalize() if m.group(0)[0].isupper() else r,
            cleaned,
            flags=re.IGNORECASE,
        )

    cleaned = re.sub(r"\.{2,}\s*", ". ", cleaned)

    sentences: list[str] = []
    for sentence in re.split(r"(?<=\.)\s+", cleaned):
        trimmed = sentence.strip()
        if not trimmed:
            continue
        if trimmed.endswith("."):
            sentences.append(trimmed)
        elif re.search(r"[a-z]{2,}$", trimmed) or trimmed.endswith(","):
            # Truncated mid-thought: keep up to the last period if most of it survives.
            last_period = trimmed.rfind(".")
            if last_period > len(trimmed) * 0.5:
                sentences.append(trimmed[: last_period + 1])
            break
        else:
            sentences.append(trimmed + ".")

    cleaned = re.sub(r"\s{2,}", " ", " ".join(sentences)).strip()
    if cleaned and cleaned[-1] not in ".!":
        cleaned += "."
    return cleaned


def count_oscillations(history: list[str]) -> int:
    """Count under<->over flips, ignoring "within"."""
    return sum(
        1
        for prev, curr in zip(history, history[1:])
        if {prev, curr} == {"under", "over"}
    )


def build_correction_prompt(
    statement: str,
    validation: CharacterValidation,
    context: str | None = None,
) -> str:
    amount = abs(validation.chars_to_adjust)
    context_line = f"CONTEXT: {context}\n" if context else ""
    header = f"""CHARACTER COUNT ADJUSTMENT REQUIRED

Current statement ({validation.actual_length} characters):
"{statement}"
"""
    if validation.direction == "under":
        return header + f"""
PROBLEM: {amount} characters SHORT of the minimum.
TARGET: {validation.target_min}-{validation.target_max} characters (at least {validation.target_min})
{context_line}
Techniques to add characters:
1. Expand abbreviations ("ops" -> "operations", "mbr" -> "member")
2. Add scope ("team" -> "12-member team")
3. Quantify vague results ("saved time" -> "saved 40 man-hours monthly")
4. Expand "&" to " and "

Rules: one single complete sentence, never add a second sentence, do not invent
metrics, no em-dashes or semicolons.

Output ONLY the revised statement, no quotes, no explanation:"""
    return header + f"""
PROBLEM: {amount} characters OVER the maximum.
TARGET: {validation.target_min}-{validation.target_max} characters (at most {validation.target_max})
{context_line}
Techniques to remove characters:
1. Abbreviate ("directed" -> "led", "operations" -> "ops")
2. Drop weak adjectives ("highly successful" -> "successful")
3. Condense phrases ("in order to" -> "to")
4. Use "&" instead of " and "

Rules: keep every metric and the core impact, no em-dashes or semicolons.

Output ONLY the revised statement, no quotes, no explanation:"""


class CharacterEnforcer:
    """Retry generated statements through the LLM until they fit a character window."""

    def __init__(
        self,
        llm: LLMClient,
        model: str = "claude-sonnet-4-5-20250929",
        max_retries: int = 2,
    ):
        self.llm = llm
        self.model = model
        self.max_retries = min(max_retries, MAX_ABSOLUTE_RETRIES)

    async def enforce(
        self,
        statement: str,
        target_max: int,
        target_min: int | None = None,
        context: str | None = None,
    ) -> EnforcementResult:
        validation = validate_character_count(statement, target_max, target_min)
        if validation.is_compliant:
            return EnforcementResult(
                statement=statement, attempts=0, was_adjusted=False,
                final_validation=validation, stop_reason="compliant",
            )
        if abs(validation.chars_to_adjust) <= CLOSE_ENOUGH_THRESHOLD:
            return EnforcementResult(
                statement=statement, attempts=0, was_adjusted=False,
                final_validation=validation, stop_reason="close_enough",
            )

        current = statement
        attempts = 0
        stop_reason: StopReason | None = None
        seen = {current}
        directions = [validation.direction]
        previous_deficit = abs(validation.chars_to_adjust)

        while not validation.is_compliant and attempts < self.max_retries:
            attempts += 1
            try:
                response = await self.llm.generate(
                    prompt=build_correction_prompt(current, validation, context),
                    system=CORRECTION_SYSTEM,
                    model=self.model,
                    temperature=0.3,
                    max_tokens=500,
                )
            except Exception:
                logger.exception("Character correction attempt %d failed", attempts)
                stop_reason = "error"
                break

            revised = response.text.strip().strip("\"'")
            if revised in seen:
                logger.warning("Duplicate statement at attempt %d, stopping", attempts)
                stop_reason = "duplicate"
                break
            seen.add(revised)
            current = revised

            validation = validate_character_count(current, target_max, target_min)
            if validation.is_compliant:
                stop_reason = "compliant"
                break

            deficit = abs(validation.chars_to_adjust)
            if deficit <= CLOSE_ENOUGH_THRESHOLD:
                logger.info("Within close-enough threshold (%d chars off), stopping", deficit)
                stop_reason = "close_enough"
                break

            if attempts > 1 and previous_deficit - deficit < MIN_IMPROVEMENT_THRESHOLD:
                logger.warning("Insufficient progress (%d chars), stopping", previous_deficit - deficit)
                stop_reason = "no_progress"
                break

            directions.append(validation.direction)
            if count_oscillations(directions) >= MAX_OSCILLATIONS:
                logger.warning("Length oscillating between under and over, stopping")
                stop_reason = "oscillating"
                break

            previous_deficit = deficit

        if stop_reason is None:
            stop_reason = "compliant" if validation.is_compliant else "max_retries"

        was_adjusted = attempts > 0
        if was_adjusted:
            sanitized = sanitize_statement_text(current)
            if sanitized != current:
                logger.info("Sanitized malformed statement content")
                current = sanitized
                validation = validate_character_count(current, target_max, target_min)

        return EnforcementResult(
            statement=current,
            attempts=attempts,
            was_adjusted=was_adjusted,
            final_validation=validation,
            stop_reason=stop_reason,
        )

    async def enforce_many(
        self,
        statements: list[str],
        target_max: int,
        target_min: int | None = None,
        context: str | None = None,
    ) -> list[EnforcementResult]:
        """Enforce several statements, MAX_CONCURRENT_ENFORCEMENTS at a time."""
        results: list[EnforcementResult] = []
        for i in range(0, len(statements), MAX_CONCURRENT_ENFORCEMENTS):
            batch = statements[i : i + MAX_CONCURRENT_ENFORCEMENTS]
            results.extend(
                await asyncio.gather(
                    *(self.enforce(s, target_max, target_min, context) for s in batch)
                )
            )
        return results
