"""Data models for statement fitting."""

from statement_fitter.models.revision import RevisionMode, RevisionOutcome, RevisionRequest
from statement_fitter.models.statement import (
    MAX_STATEMENT_CHARACTERS,
    DraftSession,
    StatementDraft,
)
from statement_fitter.models.validation import CharacterValidation, EnforcementResult

__all__ = [
    "CharacterValidation",
    "DraftSession",
    "EnforcementResult",
    "MAX_STATEMENT_CHARACTERS",
    "RevisionMode",
    "RevisionOutcome",
    "RevisionRequest",
    "StatementDraft",
]
