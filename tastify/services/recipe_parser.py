from __future__ import annotations

import json
import logging
import re
from typing import Any

from pydantic import ValidationError

from tastify.services.errors import MalformedResponseError
from tastify.services.recipe_models import ParsedRecipe

logger = logging.getLogger(__name__)

CODE_FENCE_PATTERN = re.compile(r"```(?:json)?[ \t]*\n?", re.IGNORECASE)
REQUIRED_LIST_FIELDS = ("ingredients", "steps")


def strip_code_fences(text: str) -> str:
    return CODE_FENCE_PATTERN.sub("", text or "").strip()


def extract_json_object(text: str) -> str:
    """Slice the outermost ``{...}`` out of model text that may carry prose around it."""
    cleaned = strip_code_fences(text)
    start = cleaned.find("{")
    end = cleaned.rfind("}")
    if start == -1 or end == -1 or end < start:
        raise MalformedResponseError("No JSON object found in model response", raw_text=text)
    return cleaned[start:end + 1]


def _decode(payload: str, raw_text: str) -> dict[str, Any]:
    try:
        data = json.loads(payload)
    except json.JSONDecodeError as error:
        raise MalformedResponseError(f"Model response is not valid JSON: {error}", raw_text=raw_text) from error
    if not isinstance(data, dict):
        raise MalformedResponseError("Model response JSON is not an object", raw_text=raw_text)
    return data


def _check_required_fields(data: dict[str, Any], raw_text: str) -> None:
    if not data.get("title"):
        raise MalformedResponseError("Invalid recipe structure: missing title", raw_text=raw_text)
    for key in REQUIRED_LIST_FIELDS:
        if data.get(key) is None:
            raise MalformedResponseError(f"Invalid recipe structure: missing {key}", raw_text=raw_text)


def parse_model_output(text: str) -> ParsedRecipe:
    if not text or not text.strip():
        raise MalformedResponseError("Empty model response", raw_text=text)

    data = _decode(extract_json_object(text), text)
    _check_required_fields(data, text)

    try:
        recipe = ParsedRecipe.model_validate(data)
    except ValidationError as error:
        raise MalformedResponseError(f"Invalid recipe structure: {error}", raw_text=text) from error

    logger.debug(
        "parser.ok title=%s ingredients=%d steps=%d",
        recipe.title,
        len(recipe.ingredients),
        len(recipe.steps),
    )
    return recipe
