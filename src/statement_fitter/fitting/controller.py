"""Fit controller for one statement slot.

Tracks a draft against its character and visual-line budgets, toggles
compression per wrapped line, and brokers selection revisions through the
LLM adapter.

States::

    EMPTY -> DRAFTING -> FITTING -> READY
                 ^          |         |
                 +----------+---------+   (any edit)

Every edit passes through DRAFTING and is re-measured synchronously, so after
a mutation the slot is EMPTY, FITTING (over budget) or READY.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum

from statement_fitter.clients.llm_client import DEFAULT_MODEL
from statement_fitter.errors import RevisionTransportError
from statement_fitter.fitting.density import toggle_segment
from statement_fitter.fitting.measure import AF1206_LINE_WIDTH_PX
from statement_fitter.fitting.segmenter import (
    LineSlot,
    VisualLineSegment,
    pad_lines,
    segment_into_lines,
)
from statement_fitter.models.revision import RevisionMode, RevisionOutcome, RevisionRequest
from statement_fitter.models.statement import StatementDraft
from statement_fitter.pipeline.selection_reviser import SelectionReviser

logger = logging.getLogger(__name__)


class SlotState(str, Enum):
    EMPTY = "empty"
    DRAFTING = "drafting"
    FITTING = "fitting"
    READY = "ready"


@dataclass
class FitReport:
    """Budget usage of a draft at one point in time."""

    used_chars: int
    used_lines: int
    character_limit: int
    target_lines: int
    segments: list[VisualLineSegment] = field(default_factory=list)

    @property
    def over_chars(self) -> int:
        return max(0, self.used_chars - self.character_limit)

    @property
    def over_lines(self) -> int:
        return max(0, self.used_lines - self.target_lines)

    @property
    def fits(self) -> bool:
        return self.used_lines <= self.target_lines and self.used_chars <= self.character_limit

    @property
    def compressed_lines(self) -> list[bool]:
        return [s.is_compressed for s in self.segments]


class FitController:
    """Owns one slot's draft, its derived line segments and its revision flag."""

    def __init__(
        self,
        draft: StatementDraft | None = None,
        *,
        reviser: SelectionReviser | None = None,
        line_width: float = AF1206_LINE_WIDTH_PX,
        model: str = DEFAULT_MODEL,
        version_count: int = 3,
        aggressiveness: int = 50,
        fill_to_max: bool = False,
        on_notice: Callable[[str, str], None] | None = None,
    ):
        self.draft = draft or StatementDraft()
        self.reviser = reviser
        self.line_width = line_width
        self.model = model
        self.version_count = version_count
        self.aggressiveness = aggressiveness
        # Ask expand and general revisions to use the room left under the character limit.
        self.fill_to_max = fill_to_max
        # Opening verbs of other statements in the same package, avoided in revisions.
        self.used_verbs: list[str] = []
        self.on_notice = on_notice

        self.generation = 0
        self.is_dirty = False
        self.is_revising = False
        self.closed = False
        self._selection: tuple[int, int] | None = None
        self._segments: list[VisualLineSegment] = []
        self._state = SlotState.EMPTY
        self._refit()

    # -- measurement -------------------------------------------------------

    @property
    def state(self) -> SlotState:
        return self._state

    @property
    def text(self) -> str:
        return self.draft.text

    @property
    def segments(self) -> list[VisualLineSegment]:
        return list(self._segments)

    def report(self) -> FitReport:
        return FitReport(
            used_chars=len(self.draft.text),
            used_lines=len(self._segments),
            character_limit=self.draft.character_limit,
            target_lines=self.draft.target_lines,
            segments=list(self._segments),
        )

    def line_slots(self) -> list[LineSlot]:
        """Editor rows: always at least target_lines, padded rows are not toggleable."""
        return pad_lines(self._segments, self.draft.target_lines)

    def _refit(self) -> None:
        if not self.draft.text:
            self._segments = []
            self._state = SlotState.EMPTY
            return
        self._state = SlotState.DRAFTING
        self._segments = segment_into_lines(self.draft.text, self.line_width)
        self._state = SlotState.FITTING
        report = self.report()
        if report.fits:
            self._state = SlotState.READY
        else:
            logger.debug(
                "Draft over budget: %d/%d chars, %d/%d lines",
                report.used_chars, report.character_limit,
                report.used_lines, report.target_lines,
            )

    # -- edits -------------------------------------------------------------

    def _replace_text(self, text: str) -> None:
        self.draft.text = text
        self.generation += 1
        self.is_dirty = True
        self._refit()

    def set_text(self, text: str) -> SlotState:
        """Apply a keystroke or generated text and re-measure."""
        if text == self.draft.text:
            return self._state
        self._selection = None
        self._replace_text(text)
        return self._state

    def toggle_line(self, line_index: int) -> bool:
        """Compress the visual line if uncompressed, otherwise restore it.

        Returns False without touching the draft for a line that does not
        exist (including padded editor rows).
        """
        if not 0 <= line_index < len(self._segments):
            return False
        segment = self._segments[line_index]
        new_text = toggle_segment(self.draft.text, segment)
        if new_text == self.draft.text:
            return False
        self._selection = None
        self._replace_text(new_text)
        return True

    def mark_saved(self) -> None:
        self.is_dirty = False

    def close(self) -> None:
        """Abandon the slot; a revision still in flight will be discarded."""
        self.closed = True

    # -- revisions ---------------------------------------------------------

    def _notify(self, level: str, message: str) -> None:
        if self.on_notice:
            self.on_notice(level, message)

    def build_revision_request(
        self,
        selection_start: int,
        selection_end: int,
        mode: RevisionMode = "general",
        instruction: str | None = None,
        model: str | None = None,
    ) -> RevisionRequest:
        text = self.draft.text
        max_characters = None
        if self.fill_to_max and mode != "compress":
            room = self.draft.character_limit - (len(text) - (selection_end - selection_start))
            max_characters = room if room > 0 else None
        return RevisionRequest(
            full_text=text,
            selected_text=text[selection_start:selection_end],
            selection_start=selection_start,
            selection_end=selection_end,
            mode=mode,
            instruction=instruction,
            model=model or self.model,
            generation=self.generation,
            max_characters=max_characters,
            version_count=self.version_count,
            aggressiveness=self.aggressiveness,
            used_verbs=list(self.used_verbs),
        )

    async def request_revision(
        self,
        selection_start: int,
        selection_end: int,
        mode: RevisionMode = "general",
        instruction: str | None = None,
        model: str | None = None,
    ) -> RevisionOutcome:
        """Ask the adapter for replacement candidates; the draft is never modified here.

        Failures come back as an outcome with ``error`` set. A response that
        arrives after the draft was edited or the slot was closed comes back
        with ``stale`` set and no candidates.
        """
        if self.is_revising:
            return RevisionOutcome(error="revision already in progress")
        if self.reviser is None:
            return RevisionOutcome(error="no revision adapter configured")

        try:
            request = self.build_revision_request(
                selection_start, selection_end, mode, instruction, model
            )
        except ValueError as exc:
            return RevisionOutcome(error=f"invalid selection: {exc}")
        if not request.selected_text.strip():
            return RevisionOutcome(error="selection is empty")

        self.is_revising = True
        try:
            candidates = await self.reviser.revise(request)
        except RevisionTransportError as exc:
            logger.warning("Revision failed: %s", exc)
            self._notify("error", "Failed to revise selection")
            return RevisionOutcome(error=str(exc))
        except Exception as exc:
            logger.exception("Revision adapter raised unexpectedly")
            self._notify("error", "Failed to revise selection")
            return RevisionOutcome(error=f"revision failed: {exc}")
        finally:
            self.is_revising = False

        if self.closed or request.generation != self.generation:
            logger.info("Discarding revision for generation %d", request.generation)
            return RevisionOutcome(stale=True)

        self._selection = (request.selection_start, request.selection_end)
        return RevisionOutcome(candidates=candidates)

    def apply_candidate(
        self,
        text: str,
        selection: tuple[int, int] | None = None,
    ) -> SlotState:
        """Replace the revised selection range with *text* and re-measure."""
        selection = selection or self._selection
        if selection is None:
            raise ValueError("no selection to apply a candidate to")
        start, end = selection
        if not 0 <= start <= end <= len(self.draft.text):
            raise ValueError(f"selection {selection} is outside the draft")
        current = self.draft.text
        self._selection = None
        self._replace_text(current[:start] + text + current[end:])
        self._notify("success", "Applied revision")
        return self._state
