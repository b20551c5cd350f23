# tastify/services/recipe_models.py
from __future__ import annotations

import re
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

Number = Union[int, float]

_NUMBER_RE = re.compile(r"-?\d+(?:\.\d+)?")
_STEP_TEXT_KEYS = ("description", "text", "step", "instruction")


def _clean_str(value: Any) -> Optional[str]:
    if isinstance(value, bool):
        return None
    if isinstance(value, str):
        stripped = value.strip()
        return stripped or None
    if isinstance(value, (int, float)):
        return str(value)
    return None


def _to_number(value: Any) -> Optional[Number]:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number: Number = value
    elif isinstance(value, str):
        match = _NUMBER_RE.search(value.replace(",", ""))
        if not match:
            return None
        text = match.group(0)
        number = float(text) if "." in text else int(text)
    else:
        return None
    # negative grams/calories are never meaningful
    return number if number >= 0 else None


class Ingredient(BaseModel):
    model_config = ConfigDict(extra="allow")

    item: str
    quantity: str = ""
    notes: Optional[str] = None

    @field_validator("item", mode="before")
    @classmethod
    def _item_required(cls, value: Any) -> str:
        text = _clean_str(value)
        if not text:
            raise ValueError("ingredient item is required")
        return text

    @field_validator("quantity", mode="before")
    @classmethod
    def _quantity_as_text(cls, value: Any) -> str:
        return _clean_str(value) or ""

    @field_validator("notes", mode="before")
    @classmethod
    def _notes_as_text(cls, value: Any) -> Optional[str]:
        return _clean_str(value)


class Macros(BaseModel):
    model_config = ConfigDict(extra="allow")

    calories: Optional[Number] = None
    protein: Optional[Number] = None
    fat: Optional[Number] = None
    carbs: Optional[Number] = None
    fiber: Optional[Number] = None
    sugar: Optional[Number] = None

    @field_validator("calories", "protein", "fat", "carbs", "fiber", "sugar", mode="before")
    @classmethod
    def _lenient_number(cls, value: Any) -> Optional[Number]:
        return _to_number(value)


class ParsedRecipe(BaseModel):
    """Structured recipe handed to storage and UI.

    Extra keys emitted by the model are preserved so a valid response is
    returned as-is.
    """

    model_config = ConfigDict(extra="allow")

    title: str
    ingredients: list[Ingredient] = Field(default_factory=list)
    steps: list[str] = Field(default_factory=list)
    macros: Macros = Field(default_factory=Macros)
    prep_time: Optional[str] = None
    cook_time: Optional[str] = None
    servings: Optional[str] = None

    @field_validator("title", mode="before")
    @classmethod
    def _title_required(cls, value: Any) -> str:
        text = _clean_str(value)
        if not text:
            raise ValueError("title must not be empty")
        return text

    @field_validator("ingredients", mode="before")
    @classmethod
    def _normalize_ingredients(cls, value: Any) -> list[Any]:
        if value is None:
            return []
        if not isinstance(value, list):
            raise ValueError("ingredients must be a list")
        items: list[Any] = []
        for entry in value:
            if isinstance(entry, Ingredient):
                items.append(entry)
            elif isinstance(entry, str):
                if entry.strip():
                    items.append({"item": entry})
            elif isinstance(entry, dict):
                if not _clean_str(entry.get("item")) and _clean_str(entry.get("name")):
                    entry = {**entry, "item": entry["name"]}
                if _clean_str(entry.get("item")):
                    items.append(entry)
        return items

    @field_validator("steps", mode="before")
    @classmethod
    def _normalize_steps(cls, value: Any) -> list[str]:
        if value is None:
            return []
        if not isinstance(value, list):
            raise ValueError("steps must be a list")
        steps: list[str] = []
        for entry in value:
            if isinstance(entry, dict):
                text = next(
                    (_clean_str(entry.get(key)) for key in _STEP_TEXT_KEYS if _clean_str(entry.get(key))),
                    None,
                )
            else:
                text = _clean_str(entry)
            if text:
                steps.append(text)
        return steps

    @field_validator("macros", mode="before")
    @classmethod
    def _macros_object(cls, value: Any) -> Any:
        return value if isinstance(value, (dict, Macros)) else {}

    @field_validator("prep_time", "cook_time", "servings", mode="before")
    @classmethod
    def _optional_text(cls, value: Any) -> Optional[str]:
        return _clean_str(value)

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(mode="json", exclude_none=True)
