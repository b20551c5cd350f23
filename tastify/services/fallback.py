from __future__ import annotations

from tastify.services.recipe_models import Ingredient, Macros, ParsedRecipe
from tastify.services.types import VideoMetadata

MAX_TITLE_CHARS = 50
ELLIPSIS = "..."

FALLBACK_INGREDIENTS = (
    ("Main ingredient", "2 cups", "or as needed"),
    ("Seasoning", "1 tsp", "to taste"),
    ("Cooking oil", "2 tbsp", None),
)
FALLBACK_STEPS = (
    "Prepare all ingredients according to the video instructions",
    "Follow the cooking method shown in the video",
    "Season to taste and serve as demonstrated",
)
FALLBACK_MACROS = {"calories": 300, "protein": 10, "fat": 15, "carbs": 35, "fiber": 3}


def fallback_title(metadata: VideoMetadata) -> str:
    base = metadata.title.strip() or f"Delicious {metadata.platform.value} Recipe"
    if len(base) > MAX_TITLE_CHARS:
        return base[:MAX_TITLE_CHARS] + ELLIPSIS
    return base


def synthesize_fallback(metadata: VideoMetadata) -> ParsedRecipe:
    """Generic placeholder recipe used whenever extraction cannot produce one."""
    return ParsedRecipe(
        title=fallback_title(metadata),
        ingredients=[
            Ingredient(item=item, quantity=quantity, notes=notes)
            for item, quantity, notes in FALLBACK_INGREDIENTS
        ],
        steps=list(FALLBACK_STEPS),
        macros=Macros(**FALLBACK_MACROS),
        prep_time="10 minutes",
        cook_time="15 minutes",
        servings="2-4",
    )
