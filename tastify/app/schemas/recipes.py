from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from tastify.services.recipe_models import Ingredient, Macros


class ParseRecipeRequest(BaseModel):
    videoUrl: Optional[str] = None


class ErrorResponse(BaseModel):
    error: str
    message: str
    details: Optional[str] = None


class RecipeCreate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    title: str = Field(min_length=1)
    ingredients: list[Ingredient] = Field(default_factory=list)
    steps: list[str] = Field(default_factory=list)
    macros: Macros = Field(default_factory=Macros)
    video_url: Optional[str] = None


class RecipeUpdate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    title: Optional[str] = Field(default=None, min_length=1)
    ingredients: Optional[list[Ingredient]] = None
    steps: Optional[list[str]] = None
    macros: Optional[Macros] = None
    video_url: Optional[str] = None


class ImportRecipeRequest(BaseModel):
    videoUrl: str


class RecipeOut(BaseModel):
    id: str
    owner_id: str
    title: str
    ingredients: list[dict[str, Any]] = Field(default_factory=list)
    steps: list[str] = Field(default_factory=list)
    macros: dict[str, Any] = Field(default_factory=dict)
    video_url: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class BoardCreate(BaseModel):
    name: str = Field(min_length=1, max_length=120)


class BoardOut(BaseModel):
    id: str
    owner_id: str
    name: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ShareRequest(BaseModel):
    url: str = Field(min_length=1)


class PendingShareResponse(BaseModel):
    url: Optional[str] = None
    sharedAt: Optional[float] = None
