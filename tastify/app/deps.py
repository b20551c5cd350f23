# tastify/app/deps.py (singletons exposed as FastAPI dependencies)

from __future__ import annotations

import logging
from functools import lru_cache
from typing import Any

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic import BaseModel
from starlette.concurrency import run_in_threadpool
from supabase import Client, create_client

from tastify.app.config import settings
from tastify.app.domain.errors import StorageNotConfiguredError
from tastify.app.infra.db.base import RecipeRepository
from tastify.app.infra.db.supabase_recipe_repo import SupabaseRecipeRepository
from tastify.services.extract import RecipeExtractor
from tastify.services.fetcher import MetadataScraper, ScraperConfig
from tastify.services.gemini_client import GeminiClient
from tastify.services.share_inbox import SharedUrlMailbox

log = logging.getLogger("auth")

_client: Client | None = None


def get_supabase() -> Client:
    global _client
    if _client is None:
        missing = settings.missing_storage_settings()
        if missing:
            raise StorageNotConfiguredError(missing)
        _client = create_client(str(settings.SUPABASE_URL),
                                settings.SUPABASE_SERVICE_ROLE_KEY)
    return _client


def get_recipe_repository(supa: Client = Depends(get_supabase)) -> RecipeRepository:
    return SupabaseRecipeRepository(supa)


@lru_cache(maxsize=1)
def get_extractor() -> RecipeExtractor:
    gemini = GeminiClient(api_key=settings.GEMINI_API_KEY, model_name=settings.GEMINI_MODEL)
    scraper = MetadataScraper(
        ScraperConfig(
            timeout_seconds=settings.SCRAPER_TIMEOUT_SECONDS,
            max_redirects=settings.SCRAPER_MAX_REDIRECTS,
        )
    )
    return RecipeExtractor(generate=gemini.generate_content, scraper=scraper)


@lru_cache(maxsize=1)
def get_share_mailbox() -> SharedUrlMailbox:
    return SharedUrlMailbox(max_age_seconds=settings.SHARE_MAX_AGE_SECONDS)


auth_scheme = HTTPBearer(auto_error=False)
BEARER_CHALLENGE = {"WWW-Authenticate": "Bearer"}


class CurrentUser(BaseModel):
    id: str
    email: str | None = None
    name: str | None = None


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers=BEARER_CHALLENGE,
    )


def _profile_from_auth_user(user: Any) -> CurrentUser:
    metadata = getattr(user, "user_metadata", None)
    display_name = None
    if isinstance(metadata, dict):
        display_name = metadata.get("name") or metadata.get("full_name")
    return CurrentUser(id=str(user.id), email=getattr(user, "email", None), name=display_name)


def resolve_access_token(supa: Client, token: str) -> CurrentUser:
    """Looks the token up in Supabase GoTrue; any lookup failure is a 401."""
    try:
        reply = supa.auth.get_user(token)
    except Exception as exc:
        log.info("auth.rejected error=%s", type(exc).__name__)
        raise _unauthorized("Invalid or expired token") from exc

    auth_user = getattr(reply, "user", None)
    if auth_user is None:
        raise _unauthorized("Invalid token")
    return _profile_from_auth_user(auth_user)


async def get_current_user(
    cred: HTTPAuthorizationCredentials | None = Depends(auth_scheme),
    supa: Client = Depends(get_supabase),
) -> CurrentUser:
    if cred is None or not cred.credentials:
        raise _unauthorized("Missing token")
    return await run_in_threadpool(resolve_access_token, supa, cred.credentials)
