# tastify/app/routers/parse_recipe.py
from __future__ import annotations

import asyncio
import logging
import time
from typing import Any, Optional

from fastapi import APIRouter, Depends, Request, Response
from fastapi.responses import JSONResponse

from tastify.app.config import settings
from tastify.app.deps import get_extractor
from tastify.app.schemas.recipes import ErrorResponse, ParseRecipeRequest
from tastify.services.errors import InvalidURLError
from tastify.services.extract import RecipeExtractor
from tastify.services.recipe_models import ParsedRecipe

log = logging.getLogger("parse_recipe")
router = APIRouter(prefix="/api", tags=["parse"])

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type, Authorization",
}


def error_response(
    status_code: int,
    error: str,
    message: str,
    details: Optional[str] = None,
) -> JSONResponse:
    body = ErrorResponse(error=error, message=message, details=details)
    return JSONResponse(
        status_code=status_code,
        content=body.model_dump(exclude_none=True),
        headers=CORS_HEADERS,
    )


async def _read_video_url(request: Request) -> Any:
    """Malformed or non-object JSON reads as a missing videoUrl."""
    try:
        payload = await request.json()
    except ValueError:
        return None
    return payload.get("videoUrl") if isinstance(payload, dict) else None


@router.options("/parseRecipe", include_in_schema=False)
async def parse_recipe_preflight() -> Response:
    return Response(status_code=200, headers=CORS_HEADERS)


@router.api_route(
    "/parseRecipe",
    methods=["GET", "PUT", "PATCH", "DELETE"],
    include_in_schema=False,
)
async def parse_recipe_method_not_allowed() -> JSONResponse:
    return error_response(405, "Method not allowed", "Only POST requests are supported")


@router.post(
    "/parseRecipe",
    response_model=ParsedRecipe,
    response_model_exclude_none=True,
    openapi_extra={
        "requestBody": {
            "content": {"application/json": {"schema": ParseRecipeRequest.model_json_schema()}},
        },
    },
    responses={
        400: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
        504: {"model": ErrorResponse},
    },
)
async def parse_recipe(
    request: Request,
    extractor: RecipeExtractor = Depends(get_extractor),
) -> JSONResponse:
    raw_url = await _read_video_url(request)
    if not raw_url or (isinstance(raw_url, str) and not raw_url.strip()):
        return error_response(400, "Bad request", "videoUrl is required")
    if not isinstance(raw_url, str):
        log.info("parse.invalid_url type=%s", type(raw_url).__name__)
        return error_response(400, "Invalid URL", InvalidURLError(repr(raw_url)).message)
    video_url = raw_url.strip()

    t0 = time.time()
    log.info("parse.start url=%s", video_url)
    try:
        # the request returns on timeout; the worker thread is left to finish on its own
        outcome = await asyncio.wait_for(
            asyncio.to_thread(extractor.run, video_url),
            timeout=settings.EXTRACTION_TIMEOUT_SECONDS,
        )
    except InvalidURLError as exc:
        log.info("parse.invalid_url url=%s", video_url)
        return error_response(400, "Invalid URL", exc.message)
    except asyncio.TimeoutError:
        log.warning("parse.timeout url=%s dt=%.2fs", video_url, time.time() - t0)
        return error_response(504, "Gateway timeout", "Recipe extraction took too long")
    except Exception as exc:
        log.exception("parse.fail url=%s dt=%.2fs", video_url, time.time() - t0)
        return error_response(
            500,
            "Internal server error",
            "Failed to parse recipe from video",
            details=str(exc),
        )

    log.info(
        "parse.ok url=%s fallback=%s dt=%.2fs",
        video_url,
        outcome.used_fallback,
        time.time() - t0,
    )
    return JSONResponse(status_code=200, content=outcome.recipe.to_payload(), headers=CORS_HEADERS)
