"""Supabase client, created once per app."""

from fastapi import Request
from supabase import Client, create_client

from src.config.settings import Settings


def create_supabase(settings: Settings) -> Client:
    return create_client(settings.SUPABASE_URL, settings.SUPABASE_KEY)


def get_db(request: Request) -> Client:
    """FastAPI dependency: the app's Supabase client, created on first use."""
    state = request.app.state
    if getattr(state, "db", None) is None:
        state.db = create_supabase(state.settings)
    return state.db
