"""Shared test fixtures."""

from __future__ import annotations

from unittest.mock import AsyncMock

import pytest

from statement_fitter.clients.llm_client import LLMClient, LLMResponse
from statement_fitter.models.statement import StatementDraft


@pytest.fixture
def two_line_statement() -> str:
    return (
        "Led 12 Airmen through UCI prep, resulting in 98% pass rate "
        "and zero discrepancies across three squadrons."
    )


@pytest.fixture
def short_statement() -> str:
    return "Managed the daily operations of a 15 person flight."


@pytest.fixture
def sample_draft(two_line_statement) -> StatementDraft:
    return StatementDraft(text=two_line_statement, character_limit=350, target_lines=2)


@pytest.fixture
def mock_llm_client() -> LLMClient:
    """Create a mock LLM client."""
    client = AsyncMock(spec=LLMClient)
    client.generate = AsyncMock(
        return_value=LLMResponse(text="[]", input_tokens=100, output_tokens=50)
    )
    client.generate_json = AsyncMock(return_value=[])
    return client
