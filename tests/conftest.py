import pytest

from tests.utils.dummies import FakeSupabase


@pytest.fixture
def fake_supabase(monkeypatch):
    """Route every Supabase call through an in-memory fake, without retry delays."""
    db = FakeSupabase()
    monkeypatch.setattr("services.assessment_service.get_supabase", lambda: db)
    monkeypatch.setattr("services.analytics.get_supabase", lambda: db)
    monkeypatch.setattr("utils.supabase_utils.time.sleep", lambda *_: None)
    return db
