"""Pydantic models for selection revision requests and their outcomes."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field, model_validator

RevisionMode = Literal["expand", "compress", "general"]


class RevisionRequest(BaseModel):
    """What the LLM adapter needs to rewrite one selected range of a statement."""

    full_text: str
    selected_text: str
    selection_start: int = Field(ge=0)
    selection_end: int = Field(ge=0)
    mode: RevisionMode = "general"
    instruction: str | None = None  # free-text steering from the user
    model: str
    generation: int = 0
    max_characters: int | None = None  # room for the rewritten selection, asks the LLM to fill it
    version_count: int = Field(default=3, ge=1, le=5)
    aggressiveness: int = Field(default=50, ge=0, le=100)
    used_verbs: list[str] = Field(default_factory=list)

    @model_validator(mode="after")
    def _check_selection(self) -> RevisionRequest:
        if self.selection_end < self.selection_start:
            raise ValueError("selection_end must not precede selection_start")
        if self.selection_end > len(self.full_text):
            raise ValueError("selection_end is past the end of full_text")
        if self.full_text[self.selection_start:self.selection_end] != self.selected_text:
            raise ValueError("selected_text does not match the selection range")
        return self

    @property
    def text_before(self) -> str:
        return self.full_text[: self.selection_start]

    @property
    def text_after(self) -> str:
        return self.full_text[self.selection_end :]


class RevisionOutcome(BaseModel):
    """Result of a controller revision call. Failures are reported, never raised."""

    candidates: list[str] = Field(default_factory=list)
    error: str | None = None
    stale: bool = False  # response arrived after the draft changed or the slot closed

    @property
    def ok(self) -> bool:
        return self.error is None and not self.stale
