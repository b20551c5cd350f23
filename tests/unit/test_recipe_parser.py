from __future__ import annotations

import json

import pytest

from tastify.services.errors import MalformedResponseError
from tastify.services.recipe_parser import extract_json_object, parse_model_output, strip_code_fences

RECIPE = {
    "title": "Spicy Garlic Noodles",
    "ingredients": [
        {"item": "Wheat noodles", "quantity": "200 g"},
        {"item": "Garlic", "quantity": "4 cloves", "notes": "minced"},
    ],
    "steps": ["Boil the noodles", "Fry garlic in chili oil", "Toss and serve"],
    "macros": {"calories": 520, "protein": 14, "fat": 18, "carbs": 74, "fiber": 4},
    "prep_time": "5 minutes",
    "cook_time": "10 minutes",
    "servings": "2",
}


class TestParseModelOutput:
    def test_plain_json(self) -> None:
        recipe = parse_model_output(json.dumps(RECIPE))
        assert recipe.to_payload() == RECIPE

    @pytest.mark.parametrize(
        "wrapper",
        [
            "```json\n{body}\n```",
            "```\n{body}\n```",
            "Here is your recipe:\n```json\n{body}\n```\nEnjoy!",
            "Sure! {body} Let me know if you need anything else.",
        ],
    )
    def test_fences_and_prose_are_tolerated(self, wrapper: str) -> None:
        text = wrapper.replace("{body}", json.dumps(RECIPE, indent=2))
        assert parse_model_output(text).to_payload() == RECIPE

    def test_prose_only_is_malformed(self) -> None:
        with pytest.raises(MalformedResponseError) as exc_info:
            parse_model_output("I could not find a recipe in this video, sorry.")
        assert exc_info.value.raw_text == "I could not find a recipe in this video, sorry."

    @pytest.mark.parametrize("text", ["", "   ", "{not json}", "[1, 2, 3]", "} backwards {"])
    def test_undecodable_is_malformed(self, text: str) -> None:
        with pytest.raises(MalformedResponseError):
            parse_model_output(text)

    @pytest.mark.parametrize("missing", ["title", "ingredients", "steps"])
    def test_missing_required_field(self, missing: str) -> None:
        data = {key: value for key, value in RECIPE.items() if key != missing}
        with pytest.raises(MalformedResponseError):
            parse_model_output(json.dumps(data))

    def test_empty_title_is_malformed(self) -> None:
        with pytest.raises(MalformedResponseError):
            parse_model_output(json.dumps({**RECIPE, "title": ""}))

    def test_wrong_container_type_is_malformed(self) -> None:
        with pytest.raises(MalformedResponseError):
            parse_model_output(json.dumps({**RECIPE, "steps": "just do it"}))

    def test_empty_lists_are_allowed(self) -> None:
        recipe = parse_model_output(json.dumps({"title": "Mystery dish", "ingredients": [], "steps": []}))
        assert recipe.ingredients == []
        assert recipe.steps == []
        assert recipe.macros.calories is None

    def test_missing_macros_are_optional(self) -> None:
        data = {**RECIPE, "macros": {"calories": 400}}
        recipe = parse_model_output(json.dumps(data))
        assert recipe.macros.calories == 400
        assert recipe.macros.protein is None

    def test_lenient_values(self) -> None:
        data = {
            "title": "Pancakes",
            "ingredients": [{"item": "Flour", "quantity": 2}, "Milk", {"name": "Eggs", "quantity": "2"}, {}],
            "steps": [{"order": 1, "description": "Mix"}, "Cook", ""],
            "macros": {"calories": "350 kcal", "protein": "12g", "fat": -3, "carbs": "lots", "sugar": "1,200"},
            "servings": 4,
        }

        recipe = parse_model_output(json.dumps(data))

        assert [i.item for i in recipe.ingredients] == ["Flour", "Milk", "Eggs"]
        assert recipe.ingredients[0].quantity == "2"
        assert recipe.steps == ["Mix", "Cook"]
        assert recipe.macros.calories == 350
        assert recipe.macros.protein == 12
        assert recipe.macros.fat is None
        assert recipe.macros.carbs is None
        assert recipe.macros.sugar == 1200
        assert recipe.servings == "4"

    def test_extra_keys_are_preserved(self) -> None:
        data = {**RECIPE, "cuisine": "Chinese"}
        assert parse_model_output(json.dumps(data)).to_payload()["cuisine"] == "Chinese"


class TestHelpers:
    def test_strip_code_fences(self) -> None:
        assert strip_code_fences("```json\n{}\n```") == "{}"

    def test_extract_json_object_slices_outer_braces(self) -> None:
        assert extract_json_object('x {"a": {"b": 1}} y') == '{"a": {"b": 1}}'

    def test_extract_json_object_without_braces(self) -> None:
        with pytest.raises(MalformedResponseError):
            extract_json_object("no json here")
