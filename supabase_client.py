# 📦 supabase_client.py
# ─────────────────────────────
# Lazily created Supabase client shared by services and utils

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings
from supabase import Client, create_client


class SupabaseSettings(BaseSettings):
    url: str = Field("", validation_alias="SUPABASE_URL")
    key: str = Field("", validation_alias="SUPABASE_KEY")
    assessments_table: str = "mental_health_assessments"
    therapists_table: str = "therapist_interest"
    events_table: str = "assessment_events"


supabase_settings = SupabaseSettings()


@lru_cache(maxsize=1)
def get_supabase() -> Client:
    if not supabase_settings.url or not supabase_settings.key:
        raise RuntimeError("SUPABASE_URL and SUPABASE_KEY must be set")
    return create_client(supabase_settings.url, supabase_settings.key)
