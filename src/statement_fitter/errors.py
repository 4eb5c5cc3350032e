"""Exception types raised by statement-fitter."""

from __future__ import annotations


class StatementFitterError(Exception):
    """Base class for statement-fitter errors."""


class RevisionTransportError(StatementFitterError):
    """The LLM revision call failed (network, non-success, or malformed response)."""
