# tastify/app/routers/recipes.py
from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import asdict

from fastapi import APIRouter, Depends, HTTPException, Response, status
from starlette.concurrency import run_in_threadpool

from tastify.app.config import settings
from tastify.app.deps import CurrentUser, get_current_user, get_extractor, get_recipe_repository
from tastify.app.domain.models import Recipe
from tastify.app.infra.db.base import RecipeRepository
from tastify.app.schemas.recipes import ImportRecipeRequest, RecipeCreate, RecipeOut, RecipeUpdate
from tastify.services.errors import InvalidURLError
from tastify.services.extract import RecipeExtractor
from tastify.services.recipe_models import ParsedRecipe

log = logging.getLogger("recipes")
router = APIRouter(prefix="/recipes", tags=["recipes"])


def to_recipe_out(recipe: Recipe) -> RecipeOut:
    return RecipeOut(**asdict(recipe))


@router.get("/", response_model=list[RecipeOut])
async def list_recipes(
    user: CurrentUser = Depends(get_current_user),
    repo: RecipeRepository = Depends(get_recipe_repository),
) -> list[RecipeOut]:
    recipes = await run_in_threadpool(repo.list_recipes, user.id)
    return [to_recipe_out(recipe) for recipe in recipes]


@router.post("/", response_model=RecipeOut, status_code=status.HTTP_201_CREATED)
async def create_recipe(
    body: RecipeCreate,
    user: CurrentUser = Depends(get_current_user),
    repo: RecipeRepository = Depends(get_recipe_repository),
) -> RecipeOut:
    parsed = ParsedRecipe(
        title=body.title,
        ingredients=body.ingredients,
        steps=body.steps,
        macros=body.macros,
    )
    created = await run_in_threadpool(repo.create_recipe, user.id, parsed, body.video_url)
    return to_recipe_out(created)


@router.post("/import", response_model=RecipeOut, status_code=status.HTTP_201_CREATED)
async def import_recipe(
    body: ImportRecipeRequest,
    user: CurrentUser = Depends(get_current_user),
    repo: RecipeRepository = Depends(get_recipe_repository),
    extractor: RecipeExtractor = Depends(get_extractor),
) -> RecipeOut:
    t0 = time.time()
    log.info("import.start url=%s owner=%s", body.videoUrl, user.id)
    try:
        outcome = await asyncio.wait_for(
            asyncio.to_thread(extractor.run, body.videoUrl),
            timeout=settings.EXTRACTION_TIMEOUT_SECONDS,
        )
    except InvalidURLError as exc:
        raise HTTPException(status_code=400, detail=exc.message) from exc
    except asyncio.TimeoutError as exc:
        log.warning("import.timeout url=%s dt=%.2fs", body.videoUrl, time.time() - t0)
        raise HTTPException(status_code=504, detail="Recipe extraction took too long") from exc

    # storage failures propagate: losing the save is never masked by a fallback
    created = await run_in_threadpool(
        repo.create_recipe,
        user.id,
        outcome.recipe,
        outcome.reference.url,
    )
    log.info(
        "import.ok url=%s recipe=%s fallback=%s dt=%.2fs",
        body.videoUrl,
        created.id,
        outcome.used_fallback,
        time.time() - t0,
    )
    return to_recipe_out(created)


@router.get("/{recipe_id}", response_model=RecipeOut)
async def get_recipe(
    recipe_id: str,
    user: CurrentUser = Depends(get_current_user),
    repo: RecipeRepository = Depends(get_recipe_repository),
) -> RecipeOut:
    recipe = await run_in_threadpool(repo.get_recipe, user.id, recipe_id)
    return to_recipe_out(recipe)


@router.patch("/{recipe_id}", response_model=RecipeOut)
async def update_recipe(
    recipe_id: str,
    body: RecipeUpdate,
    user: CurrentUser = Depends(get_current_user),
    repo: RecipeRepository = Depends(get_recipe_repository),
) -> RecipeOut:
    updates = body.model_dump(mode="json", exclude_unset=True)
    recipe = await run_in_threadpool(repo.update_recipe, user.id, recipe_id, updates)
    return to_recipe_out(recipe)


@router.delete("/{recipe_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_recipe(
    recipe_id: str,
    user: CurrentUser = Depends(get_current_user),
    repo: RecipeRepository = Depends(get_recipe_repository),
) -> Response:
    await run_in_threadpool(repo.delete_recipe, user.id, recipe_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
