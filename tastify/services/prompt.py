from __future__ import annotations

from dataclasses import dataclass

from tastify.services.types import Platform, VideoMetadata, VideoReference

MISSING_VALUE = "Not available"

RECIPE_JSON_SCHEMA = """{
  "title": "Clear, descriptive recipe name",
  "ingredients": [
    {
      "item": "specific ingredient name",
      "quantity": "precise amount with unit",
      "notes": "preparation notes if needed"
    }
  ],
  "steps": [
    "Detailed step 1 with technique and timing",
    "Detailed step 2 with specific instructions"
  ],
  "macros": {
    "calories": realistic_estimate_per_serving,
    "protein": protein_grams,
    "fat": fat_grams,
    "carbs": carb_grams,
    "fiber": fiber_grams
  },
  "prep_time": "realistic prep time",
  "cook_time": "realistic cook time",
  "servings": "typical serving size"
}"""

PROMPT_TEMPLATE = """You are a professional recipe extraction AI with extensive knowledge of cooking techniques, ingredients, and popular social media recipes.

Video URL: {url}
Platform: {platform}
Video Title: {title}
Video Description: {description}

CONTEXT: This is a {platform} video likely showing a cooking process. Based on the title/description and your knowledge of popular recipes on this platform, extract or intelligently infer a complete, practical recipe.

ANALYSIS INSTRUCTIONS:
1. Look for cooking keywords, ingredient mentions, technique hints in the title/description
2. Use your knowledge of popular {platform} recipes to fill gaps
3. Consider typical ingredient ratios and cooking methods for this type of dish
4. If minimal info is provided, create a reasonable recipe based on the dish name/type mentioned

RECIPE REQUIREMENTS:
- Create a recipe that someone could actually cook successfully
- Include realistic ingredient quantities and cooking times
- Break down steps logically as they would appear in the video
- Estimate nutrition per serving based on typical ingredients for this dish type
- Make it authentic to what would be shared on {platform}

Return in this JSON format:
{schema}

ONLY return valid JSON, no additional text, no markdown:"""


@dataclass(frozen=True)
class ExtractionPrompt:
    text: str
    url: str
    platform: Platform

    def __str__(self) -> str:
        return self.text


def _display(value: str) -> str:
    stripped = (value or "").strip()
    return stripped or MISSING_VALUE


def build_prompt(ref: VideoReference, metadata: VideoMetadata) -> ExtractionPrompt:
    text = PROMPT_TEMPLATE.format(
        url=ref.url,
        platform=ref.platform.value,
        title=_display(metadata.title),
        description=_display(metadata.description),
        schema=RECIPE_JSON_SCHEMA,
    )
    return ExtractionPrompt(text=text, url=ref.url, platform=ref.platform)
