"""Pydantic models for statement drafts and saved drafting sessions."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

MAX_STATEMENT_CHARACTERS = 350


class StatementDraft(BaseModel):
    """User-editable text for one statement slot."""

    text: str = ""  # may contain spacing markers; each counts as one character
    character_limit: int = Field(default=MAX_STATEMENT_CHARACTERS, gt=0)
    target_lines: int = Field(default=2, ge=1, le=3)  # 2 or 3 on AF Form 1206

    model_config = {"validate_assignment": True}

    @property
    def used_chars(self) -> int:
        return len(self.text)


class DraftSession(BaseModel):
    """In-progress drafts keyed by slot (e.g. "leadership:0")."""

    slots: dict[str, StatementDraft] = Field(default_factory=dict)
    updated_at: datetime = Field(default_factory=datetime.now)
