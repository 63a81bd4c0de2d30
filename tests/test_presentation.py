import pytest

from master_chef.schemas.recipe import Nutrition, Recipe
from master_chef.services.presentation import (
    export_filename,
    export_text,
    instructions_text,
    narration_text,
    recipe_from_share_token,
    share_token,
)


def _recipe(nutrition: Nutrition | None = None) -> Recipe:
    return Recipe(
        id="Garlic-Noodles-1",
        name="Garlic  Noodles",
        ingredients=["200 g noodles", "4 cloves garlic"],
        instructions=["Boil noodles", "Fry garlic", "Toss together"],
        prep_time="5 minutes",
        cook_time="10 minutes",
        servings="2 servings",
        nutrition=nutrition,
    )


def test_instructions_text_is_numbered() -> None:
    assert instructions_text(_recipe()) == "1. Boil noodles\n2. Fry garlic\n3. Toss together"


def test_narration_joins_steps() -> None:
    assert narration_text(_recipe()) == "Boil noodles. Fry garlic. Toss together"


def test_share_token_round_trip_preserves_recipe() -> None:
    recipe = _recipe(Nutrition(calories="400", protein="12 g", carbohydrates="60 g", fat="10 g"))

    assert recipe_from_share_token(share_token(recipe)) == recipe


def test_invalid_share_token_raises_value_error() -> None:
    with pytest.raises(ValueError, match="Invalid share token"):
        recipe_from_share_token("not-a-recipe")


def test_export_filename_replaces_whitespace() -> None:
    assert export_filename(_recipe()) == "Garlic_Noodles.txt"


def test_export_text_omits_nutrition_when_absent() -> None:
    body = export_text(_recipe(), lambda key: key.upper())

    assert body.startswith("Garlic  Noodles\n")
    assert "PREPTIME: 5 minutes" in body
    assert "- 4 cloves garlic" in body
    assert "2. Fry garlic" in body
    assert "NUTRITION" not in body


def test_export_text_includes_nutrition_when_present() -> None:
    recipe = _recipe(Nutrition(calories="400", protein="12 g", carbohydrates="60 g", fat="10 g"))

    body = export_text(recipe, lambda key: key)

    assert "nutrition:" in body
    assert "- calories: 400" in body
    assert "- fat: 10 g" in body
