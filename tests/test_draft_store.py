"""Tests for the SQLite draft store."""

import time

import pytest

from statement_fitter.models.statement import DraftSession, StatementDraft
from statement_fitter.storage.draft_store import DraftStore


@pytest.fixture
def store(tmp_path):
    return DraftStore(db_path=tmp_path / "test_drafts.db", ttl_days=1)


@pytest.fixture
def session():
    return DraftSession(
        slots={
            "leadership:0": StatementDraft(text="Led 12 Airmen through UCI prep."),
            "leadership:1": StatementDraft(text="Managed a 15 person flight.", target_lines=3),
        }
    )


class TestDraftStore:
    def test_save_and_load(self, store, session):
        store.save("award-2026", session)
        result = store.load("award-2026")
        assert result is not None
        assert result.slots["leadership:0"].text == "Led 12 Airmen through UCI prep."
        assert result.slots["leadership:1"].target_lines == 3

    def test_markers_survive_round_trip(self, store):
        text = "Led\u2006the\u2006team."
        store.save("s", DraftSession(slots={"a": StatementDraft(text=text)}))
        assert store.load("s").slots["a"].text == text

    def test_load_nonexistent(self, store):
        assert store.load("missing") is None

    def test_strip_whitespace(self, store, session):
        store.save("  award-2026  ", session)
        assert store.load("award-2026") is not None

    def test_clear(self, store, session):
        store.save("award-2026", session)
        store.clear("award-2026")
        assert store.load("award-2026") is None

    def test_clear_all(self, store, session):
        store.save("one", session)
        store.save("two", session)
        count = store.clear_all()
        assert count == 2
        assert store.keys() == []

    def test_keys(self, store, session):
        store.save("one", session)
        store.save("two", session)
        assert sorted(store.keys()) == ["one", "two"]

    def test_stats(self, store, session):
        store.save("one", session)
        store.save("two", session)
        stats = store.stats()
        assert stats["total"] == 2
        assert stats["active"] == 2
        assert stats["expired"] == 0

    def test_ttl_expiration(self, tmp_path, session):
        """Sessions expire after the TTL."""
        store = DraftStore(db_path=tmp_path / "ttl_test.db", ttl_days=0)
        store.save("award-2026", session)
        time.sleep(0.1)
        assert store.load("award-2026") is None

    def test_upsert(self, store, session):
        store.save("award-2026", session)
        session.slots["leadership:0"] = StatementDraft(text="Directed 12 Airmen.")
        store.save("award-2026", session)
        assert store.load("award-2026").slots["leadership:0"].text == "Directed 12 Airmen."
