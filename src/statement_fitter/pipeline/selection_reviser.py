"""Selection reviser: rewrites a selected range of a statement via the LLM."""

from __future__ import annotations

import logging

from statement_fitter.clients.llm_client import LLMClient
from statement_fitter.errors import RevisionTransportError
from statement_fitter.models.revision import RevisionRequest
from statement_fitter.utils.json_parser import extract_json, extract_string_list

logger = logging.getLogger(__name__)

# Overused verbs that read as cliches on performance reports.
BANNED_VERBS = [
    "spearheaded",
    "orchestrated",
    "synergized",
    "leveraged",
    "impacted",
    "utilized",
    "facilitated",
]

RECOMMENDED_VERBS = [
    "led", "directed", "managed", "executed", "drove", "commanded", "guided",
    "pioneered", "championed", "transformed", "revolutionized", "modernized",
    "accelerated", "streamlined", "optimized", "enhanced", "elevated", "strengthened",
    "secured", "safeguarded", "protected", "defended", "fortified", "hardened",
    "trained", "mentored", "developed", "coached", "cultivated", "empowered",
    "resolved", "eliminated", "eradicated", "mitigated", "prevented", "reduced",
    "delivered", "produced", "generated", "created", "built", "established",
    "coordinated", "synchronized", "integrated", "unified", "consolidated",
    "analyzed", "assessed", "evaluated", "identified", "diagnosed", "investigated",
    "negotiated", "acquired", "procured", "saved", "recovered",
]

SYSTEM_TEMPLATE = """\
You are an expert Air Force writer revising a portion of a performance statement \
(AF Form 1206 / EPB).
Revise only the selected portion and keep it coherent with the surrounding text.

{mode_instructions}

{aggressiveness_instructions}
{fill_instructions}
BANNED VERBS - never use these:
{banned_verbs}

RECOMMENDED VERBS:
{recommended_verbs}

FORBIDDEN PUNCTUATION: em-dashes (--), semicolons (;), slashes (/). Connect clauses with commas.

PRESERVE EXACTLY: numbers and metrics, percentages, dollar amounts, unit abbreviations, \
acronyms, proper nouns and organization names.

Rules:
1. Each of the {version_count} alternatives opens with a different verb
2. Output only the revised selection, no quotes or explanation
3. Keep verb tense consistent with the rest of the statement
4. If the selection starts with "- ", keep the "- " prefix
5. Avoid run-on lists of five or more actions

Respond with a JSON array of strings only."""


def _mode_instructions(mode: str, length: int) -> str:
    if mode == "expand":
        return (
            "MODE: EXPAND - make the selection LONGER with more descriptive words, "
            "expanded abbreviations and natural adjectives.\n"
            f"Target length: {round(length * 1.2)}-{round(length * 1.4)} characters."
        )
    if mode == "compress":
        return (
            "MODE: COMPRESS - make the selection SHORTER with punchier words, "
            "standard abbreviations and less filler.\n"
            f"Target length: {round(length * 0.65)}-{round(length * 0.85)} characters."
        )
    return (
        "MODE: IMPROVE - reframe the selection with a different opening verb and "
        "stronger impact.\n"
        f"Target length: about {length} characters (within 20%)."
    )


def _aggressiveness_instructions(level: int) -> str:
    if level <= 20:
        label, rule = "MINIMAL", "change only obviously weak words and keep the author's voice"
    elif level <= 40:
        label, rule = "CONSERVATIVE", "keep most phrasing and strengthen key verbs"
    elif level <= 60:
        label, rule = "MODERATE", "refresh verbs and phrasing while keeping the structure"
    elif level <= 80:
        label, rule = "AGGRESSIVE", "rewrite most words except metrics and data"
    else:
        label, rule = "MAXIMUM", "rewrite completely, preserving only numbers and proper nouns"
    return f"WORD REPLACEMENT LEVEL: {label} ({level}%) - {rule}."


def _fill_instructions(max_characters: int | None, current_length: int) -> str:
    if not max_characters:
        return ""
    target_min = max_characters - 10
    to_add = max(0, max_characters - current_length)
    return (
        f"\nCHARACTER TARGET: {target_min}-{max_characters} characters per revision "
        f"(about {to_add} more than the input). Count every letter, digit, space and "
        "symbol before answering.\n"
    )


class SelectionReviser:
    """Generate replacement candidates for a selected range of a statement."""

    def __init__(
        self,
        llm: LLMClient,
        temperature: float = 0.8,
    ):
        self.llm = llm
        self.temperature = temperature

    def build_prompts(self, request: RevisionRequest) -> tuple[str, str]:
        """Return (system, prompt) for *request*."""
        avoid = list(dict.fromkeys(BANNED_VERBS + [v.lower() for v in request.used_verbs]))
        available = [v for v in RECOMMENDED_VERBS if v not in avoid]
        length = len(request.selected_text)

        system = SYSTEM_TEMPLATE.format(
            mode_instructions=_mode_instructions(request.mode, length),
            aggressiveness_instructions=_aggressiveness_instructions(request.aggressiveness),
            fill_instructions=(
                "" if request.mode == "compress"
                else _fill_instructions(request.max_characters, length)
            ),
            banned_verbs="\n".join(f'- "{v}"' for v in avoid),
            recommended_verbs=", ".join(available[:20]),
            version_count=request.version_count,
        )

        guidance = f"\nADDITIONAL GUIDANCE: {request.instruction}\n" if request.instruction else ""
        prompt = f"""FULL STATEMENT FOR CONTEXT:
"{request.full_text}"

TEXT BEFORE SELECTION:
"{request.text_before}"

SELECTED TEXT TO REVISE ({length} chars):
"{request.selected_text}"

TEXT AFTER SELECTION:
"{request.text_after}"
{guidance}
MODE: {request.mode.upper()}

Generate {request.version_count} revisions of ONLY the selected portion.
Return a JSON array of {request.version_count} strings."""
        return system, prompt

    async def revise(self, request: RevisionRequest) -> list[str]:
        """Return 1..version_count candidates, in the order the model ranked them.

        Raises RevisionTransportError if the LLM call fails or the response
        contains no usable candidate.
        """
        system, prompt = self.build_prompts(request)
        try:
            response = await self.llm.generate(
                prompt=prompt,
                system=system,
                model=request.model,
                temperature=self.temperature,
                max_tokens=500,
            )
        except Exception as exc:
            logger.exception("Selection revision LLM call failed")
            raise RevisionTransportError("revision failed") from exc

        candidates = self._parse_candidates(response.text)
        if not candidates:
            logger.warning("Revision response had no usable candidates: %.200s", response.text)
            raise RevisionTransportError("revision response was malformed")
        return candidates[: request.version_count]

    @staticmethod
    def _parse_candidates(text: str) -> list[str]:
        """Parse a JSON array of strings, falling back to one candidate per line."""
        try:
            data = extract_json(text)
        except ValueError:
            data = None
        if data is not None:
            return extract_string_list(data, keys=("revisions", "alternatives", "candidates"))
        return [
            line.strip().strip('"').strip()
            for line in text.splitlines()
            if len(line.strip()) > 10
        ]
