# tastify/app/routers/boards.py
from __future__ import annotations

from dataclasses import asdict

from fastapi import APIRouter, Depends, Response, status
from starlette.concurrency import run_in_threadpool

from tastify.app.deps import CurrentUser, get_current_user, get_recipe_repository
from tastify.app.infra.db.base import RecipeRepository
from tastify.app.routers.recipes import to_recipe_out
from tastify.app.schemas.recipes import BoardCreate, BoardOut, RecipeOut

router = APIRouter(prefix="/boards", tags=["boards"])


@router.get("/", response_model=list[BoardOut])
async def list_boards(
    user: CurrentUser = Depends(get_current_user),
    repo: RecipeRepository = Depends(get_recipe_repository),
) -> list[BoardOut]:
    boards = await run_in_threadpool(repo.list_boards, user.id)
    return [BoardOut(**asdict(board)) for board in boards]


@router.post("/", response_model=BoardOut, status_code=status.HTTP_201_CREATED)
async def create_board(
    body: BoardCreate,
    user: CurrentUser = Depends(get_current_user),
    repo: RecipeRepository = Depends(get_recipe_repository),
) -> BoardOut:
    board = await run_in_threadpool(repo.create_board, user.id, body.name.strip())
    return BoardOut(**asdict(board))


@router.get("/{board_id}/recipes", response_model=list[RecipeOut])
async def list_board_recipes(
    board_id: str,
    user: CurrentUser = Depends(get_current_user),
    repo: RecipeRepository = Depends(get_recipe_repository),
) -> list[RecipeOut]:
    recipes = await run_in_threadpool(repo.list_board_recipes, user.id, board_id)
    return [to_recipe_out(recipe) for recipe in recipes]


@router.post("/{board_id}/recipes/{recipe_id}", status_code=status.HTTP_204_NO_CONTENT)
async def add_recipe_to_board(
    board_id: str,
    recipe_id: str,
    user: CurrentUser = Depends(get_current_user),
    repo: RecipeRepository = Depends(get_recipe_repository),
) -> Response:
    await run_in_threadpool(repo.add_recipe_to_board, user.id, board_id, recipe_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("/{board_id}/recipes/{recipe_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_recipe_from_board(
    board_id: str,
    recipe_id: str,
    user: CurrentUser = Depends(get_current_user),
    repo: RecipeRepository = Depends(get_recipe_repository),
) -> Response:
    await run_in_threadpool(repo.remove_recipe_from_board, user.id, board_id, recipe_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
