import logging
from typing import Any

from fastapi import APIRouter, HTTPException

from master_chef.core.config import get_settings
from master_chef.i18n.translator import get_translator
from master_chef.schemas.recipe import Recipe, RecipeRequest
from master_chef.services.generator_factory import get_generator
from master_chef.services.library import RecipeLibrary

router = APIRouter()
logger = logging.getLogger(__name__)

generate_api_counters = {
    "success": 0,
    "failure": 0,
    "rejected": 0,
}


def missing_input_error(request: RecipeRequest) -> str | None:
    """Return the message key for an unusable request, or None."""
    if request.mode == "ingredients" and not request.ingredients:
        return "errorNoIngredients"
    if request.mode == "dish" and not request.dish_name.strip():
        return "errorNoDishName"
    return None


def request_shape_fields(request: RecipeRequest) -> dict[str, Any]:
    return {
        "mode": request.mode,
        "ingredients_count": len(request.ingredients),
        "equipment_count": len(request.equipment),
        "language": request.language,
    }


@router.post("/generate", response_model=Recipe)
def generate_recipe(request: RecipeRequest) -> Recipe:
    error_key = missing_input_error(request)
    if error_key is not None:
        generate_api_counters["rejected"] += 1
        raise HTTPException(
            status_code=422,
            detail={"code": error_key, "message": get_translator().t(request.language, error_key)},
        )

    settings = get_settings()
    try:
        recipe = get_generator(settings).generate(request)
    except Exception as exc:
        generate_api_counters["failure"] += 1
        logger.warning(
            "api_recipe_generation",
            extra={
                "outcome": "failure",
                "error_class": getattr(exc, "error_class", exc.__class__.__name__),
                **request_shape_fields(request),
            },
        )
        raise HTTPException(
            status_code=502,
            detail={"code": "generation_failed", "message": str(exc) or exc.__class__.__name__},
        ) from exc

    RecipeLibrary(history_limit=settings.history_limit).record_history(recipe)
    generate_api_counters["success"] += 1
    logger.info(
        "api_recipe_generation",
        extra={"outcome": "success", **request_shape_fields(request)},
    )
    return recipe
