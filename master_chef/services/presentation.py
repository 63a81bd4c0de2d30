import base64
import binascii
import re
from collections.abc import Callable

from pydantic import ValidationError

from master_chef.schemas.recipe import Recipe

_WHITESPACE_RUN = re.compile(r"\s+")


def instructions_text(recipe: Recipe) -> str:
    return "\n".join(f"{idx}. {step}" for idx, step in enumerate(recipe.instructions, start=1))


def narration_text(recipe: Recipe) -> str:
    return ". ".join(recipe.instructions)


def share_token(recipe: Recipe) -> str:
    return base64.urlsafe_b64encode(recipe.model_dump_json().encode("utf-8")).decode("ascii")


def recipe_from_share_token(token: str) -> Recipe:
    try:
        raw = base64.urlsafe_b64decode(token.encode("ascii"))
        return Recipe.model_validate_json(raw)
    except (binascii.Error, UnicodeEncodeError, ValidationError) as exc:
        raise ValueError("Invalid share token") from exc


def export_filename(recipe: Recipe) -> str:
    return f"{_WHITESPACE_RUN.sub('_', recipe.name)}.txt"


def export_text(recipe: Recipe, t: Callable[[str], str]) -> str:
    lines = [
        recipe.name,
        "=" * len(recipe.name),
        "",
        f"{t('prepTime')}: {recipe.prep_time}",
        f"{t('cookTime')}: {recipe.cook_time}",
        f"{t('servings')}: {recipe.servings}",
        "",
        f"{t('ingredients')}:",
        *[f"- {item}" for item in recipe.ingredients],
        "",
        f"{t('instructions')}:",
        instructions_text(recipe),
    ]
    if recipe.nutrition is not None:
        lines += [
            "",
            f"{t('nutrition')}:",
            f"- {t('calories')}: {recipe.nutrition.calories}",
            f"- {t('protein')}: {recipe.nutrition.protein}",
            f"- {t('carbohydrates')}: {recipe.nutrition.carbohydrates}",
            f"- {t('fat')}: {recipe.nutrition.fat}",
        ]
    return "\n".join(lines) + "\n"
