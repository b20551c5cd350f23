# tastify/app/domain/models.py
"""
Domain models for persisted recipes and boards.
These are pure data structures with no infrastructure dependencies.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional


@dataclass
class Recipe:
    """A ParsedRecipe after it has been saved for a user."""
    id: str
    owner_id: str
    title: str
    ingredients: list[dict[str, Any]] = field(default_factory=list)
    steps: list[str] = field(default_factory=list)
    macros: dict[str, Any] = field(default_factory=dict)
    video_url: Optional[str] = None

    # Timestamps (set by the database)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass
class Board:
    """A named collection of recipes owned by one user."""
    id: str
    owner_id: str
    name: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass
class BoardRecipe:
    board_id: str
    recipe_id: str
    added_at: Optional[datetime] = None
