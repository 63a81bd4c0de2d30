import logging
from urllib.parse import quote

from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import PlainTextResponse
from pydantic import BaseModel, ConfigDict, Field

from master_chef.core.config import get_settings
from master_chef.i18n.translator import get_translator
from master_chef.schemas.recipe import Recipe
from master_chef.services.library import MAX_RATING, MIN_RATING, RecipeLibrary
from master_chef.services.presentation import export_filename, export_text

router = APIRouter()
logger = logging.getLogger(__name__)


class RatingUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid")
    rating: int = Field(ge=MIN_RATING, le=MAX_RATING)


class FeedbackCreate(BaseModel):
    model_config = ConfigDict(extra="forbid")
    comment: str = Field(min_length=1)


def get_library() -> RecipeLibrary:
    return RecipeLibrary(history_limit=get_settings().history_limit)


def get_known_recipe(recipe_id: str) -> Recipe:
    recipe = get_library().find(recipe_id)
    if recipe is None:
        raise HTTPException(status_code=404, detail="Recipe not found")
    return recipe


def record_feedback(recipe_id: str, comment: str) -> None:
    # Comment text stays out of the logs.
    logger.info(
        "recipe_feedback",
        extra={"recipe_id": recipe_id, "comment_length": len(comment)},
    )


@router.get("/history", response_model=list[Recipe])
async def list_history() -> list[Recipe]:
    return get_library().load().history


@router.delete("/history")
async def clear_history() -> dict[str, int]:
    get_library().clear_history()
    return {"count": 0}


@router.get("/favorites", response_model=list[Recipe])
async def list_favorites() -> list[Recipe]:
    return get_library().load().favorites


@router.post("/favorites")
async def toggle_favorite(recipe: Recipe) -> dict[str, str | bool]:
    favorite = get_library().toggle_favorite(recipe)
    return {"id": recipe.id, "favorite": favorite}


@router.get("/ratings")
async def list_ratings() -> dict[str, int]:
    return get_library().load().ratings


@router.put("/ratings/{recipe_id:path}")
async def rate_recipe(recipe_id: str, payload: RatingUpdate) -> dict[str, str | int]:
    get_known_recipe(recipe_id)
    get_library().rate(recipe_id, payload.rating)
    return {"id": recipe_id, "rating": payload.rating}


@router.get("/recipes/{recipe_id:path}/export")
async def export_recipe(recipe_id: str, request: Request) -> PlainTextResponse:
    recipe = get_known_recipe(recipe_id)
    language = request.cookies.get("language", get_settings().default_language)
    translator = get_translator()
    body = export_text(recipe, lambda key: translator.t(language, key))
    return PlainTextResponse(
        body,
        headers={
            "Content-Disposition": f"attachment; filename*=UTF-8''{quote(export_filename(recipe))}"
        },
    )


@router.post("/recipes/{recipe_id:path}/feedback")
async def add_feedback(recipe_id: str, payload: FeedbackCreate) -> dict[str, str]:
    get_known_recipe(recipe_id)
    record_feedback(recipe_id, payload.comment.strip())
    return {"id": recipe_id, "status": "received"}


# Ids may contain "/", so the catch-all lookup is registered after the suffixed routes.
@router.get("/recipes/{recipe_id:path}", response_model=Recipe)
async def get_recipe(recipe_id: str) -> Recipe:
    return get_known_recipe(recipe_id)
