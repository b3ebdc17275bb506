from fastapi import Request

from prompt_admin.core.config import settings
from prompt_admin.db import get_engine
from prompt_admin.services.auth import SupabaseAuthProvider
from prompt_admin.services.prompt_repository import PromptRepository


def get_auth_provider(request: Request) -> SupabaseAuthProvider:
    """Auth provider bound to the caller's session cookie."""
    return SupabaseAuthProvider(
        settings.supabase_url,
        settings.supabase_anon_key,
        access_token=request.cookies.get(settings.session_cookie_name),
    )


def get_prompt_repository() -> PromptRepository:
    return PromptRepository(get_engine(), settings.prompt_table)
