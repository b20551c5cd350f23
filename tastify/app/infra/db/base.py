# tastify/app/infra/db/base.py
"""
Abstract base class for recipe and board persistence.
Routers depend on this interface so the backing store can be swapped in tests.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Optional

from tastify.app.domain.models import Board, Recipe
from tastify.services.recipe_models import ParsedRecipe


class RecipeRepository(ABC):
    """
    Abstract interface for recipe storage.

    Implementations:
    - SupabaseRecipeRepository: Postgres tables behind Supabase
    """

    @abstractmethod
    def create_recipe(
        self,
        owner_id: str,
        recipe: ParsedRecipe,
        video_url: Optional[str] = None,
    ) -> Recipe:
        """
        Persist a parsed recipe for a user.

        Returns:
            The stored Recipe, including generated id and timestamps
        """
        pass

    @abstractmethod
    def get_recipe(self, owner_id: str, recipe_id: str) -> Recipe:
        """Raises RecordNotFoundError when the recipe does not exist for this owner."""
        pass

    @abstractmethod
    def list_recipes(self, owner_id: str) -> list[Recipe]:
        """Newest first."""
        pass

    @abstractmethod
    def update_recipe(self, owner_id: str, recipe_id: str, updates: dict[str, Any]) -> Recipe:
        pass

    @abstractmethod
    def delete_recipe(self, owner_id: str, recipe_id: str) -> None:
        pass

    @abstractmethod
    def create_board(self, owner_id: str, name: str) -> Board:
        pass

    @abstractmethod
    def list_boards(self, owner_id: str) -> list[Board]:
        pass

    @abstractmethod
    def add_recipe_to_board(self, owner_id: str, board_id: str, recipe_id: str) -> None:
        pass

    @abstractmethod
    def remove_recipe_from_board(self, owner_id: str, board_id: str, recipe_id: str) -> None:
        pass

    @abstractmethod
    def list_board_recipes(self, owner_id: str, board_id: str) -> list[Recipe]:
        pass
