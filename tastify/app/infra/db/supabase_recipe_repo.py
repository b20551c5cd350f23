from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Optional

from supabase import Client

from tastify.app.domain.errors import RecordNotFoundError, StorageError
from tastify.app.domain.models import Board, Recipe
from tastify.app.infra.db.base import RecipeRepository
from tastify.services.recipe_models import ParsedRecipe

logger = logging.getLogger(__name__)

RECIPES_TABLE = "recipes"
BOARDS_TABLE = "boards"
BOARD_RECIPES_TABLE = "board_recipes"

UPDATABLE_RECIPE_FIELDS = ("title", "ingredients", "steps", "macros", "video_url")


def _parse_datetime(value: str | datetime | None) -> datetime | None:
    if value is None:
        return None
    if isinstance(value, datetime):
        return value
    if not isinstance(value, str):
        return None

    try:
        normalized = value.replace("Z", "+00:00") if value.endswith("Z") else value
        return datetime.fromisoformat(normalized)
    except ValueError:
        return None


def _safe_str(value: object) -> str | None:
    return str(value) if value else None


def _row_to_recipe(row: dict[str, Any]) -> Recipe:
    return Recipe(
        id=str(row["id"]),
        owner_id=str(row.get("owner_id") or ""),
        title=str(row.get("title") or ""),
        ingredients=row.get("ingredients") if isinstance(row.get("ingredients"), list) else [],
        steps=row.get("steps") if isinstance(row.get("steps"), list) else [],
        macros=row.get("macros") if isinstance(row.get("macros"), dict) else {},
        video_url=_safe_str(row.get("video_url")),
        created_at=_parse_datetime(row.get("created_at")),
        updated_at=_parse_datetime(row.get("updated_at")),
    )


def _row_to_board(row: dict[str, Any]) -> Board:
    return Board(
        id=str(row["id"]),
        owner_id=str(row.get("owner_id") or ""),
        name=str(row.get("name") or ""),
        created_at=_parse_datetime(row.get("created_at")),
        updated_at=_parse_datetime(row.get("updated_at")),
    )


def _recipe_payload(owner_id: str, recipe: ParsedRecipe, video_url: Optional[str]) -> dict[str, Any]:
    data = recipe.to_payload()
    return {
        "owner_id": owner_id,
        "title": recipe.title,
        "ingredients": data.get("ingredients", []),
        "steps": data.get("steps", []),
        "macros": data.get("macros", {}),
        "video_url": video_url,
    }


class SupabaseRecipeRepository(RecipeRepository):
    def __init__(self, client: Client) -> None:
        self._client = client

    def _execute(self, query: Any, operation: str) -> list[dict[str, Any]]:
        try:
            response = query.execute()
        except Exception as exc:
            logger.error("storage.fail operation=%s error=%s", operation, exc)
            raise StorageError(operation, str(exc)) from exc
        return response.data or []

    def create_recipe(
        self,
        owner_id: str,
        recipe: ParsedRecipe,
        video_url: Optional[str] = None,
    ) -> Recipe:
        payload = _recipe_payload(owner_id, recipe, video_url)
        rows = self._execute(self._client.table(RECIPES_TABLE).insert(payload), "create_recipe")
        if not rows:
            raise StorageError("create_recipe", "insert returned no rows")
        created = _row_to_recipe(rows[0])
        logger.info("storage.recipe_created recipe=%s owner=%s", created.id, owner_id)
        return created

    def get_recipe(self, owner_id: str, recipe_id: str) -> Recipe:
        rows = self._execute(
            self._client.table(RECIPES_TABLE)
            .select("*")
            .eq("owner_id", owner_id)
            .eq("id", recipe_id)
            .limit(1),
            "get_recipe",
        )
        if not rows:
            raise RecordNotFoundError(RECIPES_TABLE, recipe_id)
        return _row_to_recipe(rows[0])

    def list_recipes(self, owner_id: str) -> list[Recipe]:
        rows = self._execute(
            self._client.table(RECIPES_TABLE)
            .select("*")
            .eq("owner_id", owner_id)
            .order("created_at", desc=True),
            "list_recipes",
        )
        return [_row_to_recipe(row) for row in rows]

    def update_recipe(self, owner_id: str, recipe_id: str, updates: dict[str, Any]) -> Recipe:
        payload = {key: value for key, value in updates.items() if key in UPDATABLE_RECIPE_FIELDS}
        if not payload:
            return self.get_recipe(owner_id, recipe_id)

        rows = self._execute(
            self._client.table(RECIPES_TABLE)
            .update(payload)
            .eq("owner_id", owner_id)
            .eq("id", recipe_id),
            "update_recipe",
        )
        if not rows:
            raise RecordNotFoundError(RECIPES_TABLE, recipe_id)
        return _row_to_recipe(rows[0])

    def delete_recipe(self, owner_id: str, recipe_id: str) -> None:
        rows = self._execute(
            self._client.table(RECIPES_TABLE)
            .delete()
            .eq("owner_id", owner_id)
            .eq("id", recipe_id),
            "delete_recipe",
        )
        if not rows:
            raise RecordNotFoundError(RECIPES_TABLE, recipe_id)
        logger.info("storage.recipe_deleted recipe=%s owner=%s", recipe_id, owner_id)

    def create_board(self, owner_id: str, name: str) -> Board:
        rows = self._execute(
            self._client.table(BOARDS_TABLE).insert({"name": name, "owner_id": owner_id}),
            "create_board",
        )
        if not rows:
            raise StorageError("create_board", "insert returned no rows")
        return _row_to_board(rows[0])

    def list_boards(self, owner_id: str) -> list[Board]:
        rows = self._execute(
            self._client.table(BOARDS_TABLE)
            .select("*")
            .eq("owner_id", owner_id)
            .order("created_at", desc=True),
            "list_boards",
        )
        return [_row_to_board(row) for row in rows]

    def _require_board(self, owner_id: str, board_id: str) -> None:
        rows = self._execute(
            self._client.table(BOARDS_TABLE)
            .select("id")
            .eq("owner_id", owner_id)
            .eq("id", board_id)
            .limit(1),
            "get_board",
        )
        if not rows:
            raise RecordNotFoundError(BOARDS_TABLE, board_id)

    def add_recipe_to_board(self, owner_id: str, board_id: str, recipe_id: str) -> None:
        self._require_board(owner_id, board_id)
        self._execute(
            self._client.table(BOARD_RECIPES_TABLE).insert(
                {"board_id": board_id, "recipe_id": recipe_id}
            ),
            "add_recipe_to_board",
        )

    def remove_recipe_from_board(self, owner_id: str, board_id: str, recipe_id: str) -> None:
        self._require_board(owner_id, board_id)
        self._execute(
            self._client.table(BOARD_RECIPES_TABLE)
            .delete()
            .eq("board_id", board_id)
            .eq("recipe_id", recipe_id),
            "remove_recipe_from_board",
        )

    def list_board_recipes(self, owner_id: str, board_id: str) -> list[Recipe]:
        self._require_board(owner_id, board_id)
        rows = self._execute(
            self._client.table(BOARD_RECIPES_TABLE)
            .select("recipe_id, recipes(*)")
            .eq("board_id", board_id),
            "list_board_recipes",
        )
        return [
            _row_to_recipe(row["recipes"])
            for row in rows
            if isinstance(row.get("recipes"), dict)
        ]
