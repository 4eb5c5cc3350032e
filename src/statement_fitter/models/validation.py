"""Pydantic models for character-count validation and enforcement."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel

StopReason = Literal[
    "compliant",
    "max_retries",
    "no_progress",
    "oscillating",
    "close_enough",
    "duplicate",
    "error",
]


class CharacterValidation(BaseModel):
    is_compliant: bool
    actual_length: int
    target_min: int
    target_max: int
    variance: float  # percent away from the middle of the target range
    direction: Literal["under", "over", "within"]
    chars_to_adjust: int  # positive = add, negative = remove


class EnforcementResult(BaseModel):
    statement: str
    attempts: int
    was_adjusted: bool
    final_validation: CharacterValidation
    stop_reason: StopReason = "compliant"
