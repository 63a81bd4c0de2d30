import logging
from pathlib import Path
from typing import Any
from urllib.parse import quote

from fastapi import APIRouter, Form, HTTPException, Request
from fastapi.responses import RedirectResponse
from fastapi.templating import Jinja2Templates
from pydantic import ValidationError

from master_chef.api.generate import missing_input_error, request_shape_fields
from master_chef.api.recipes import get_library, record_feedback
from master_chef.core.config import SUPPORTED_LANGUAGES, get_settings
from master_chef.i18n.translator import get_translator
from master_chef.schemas.recipe import Recipe, RecipeRequest
from master_chef.services.generator_factory import get_generator
from master_chef.services.presentation import (
    instructions_text,
    narration_text,
    recipe_from_share_token,
    share_token,
)
from master_chef.services.prompt import LANGUAGE_NAMES

router = APIRouter()
templates = Jinja2Templates(directory=Path(__file__).resolve().parent.parent / "templates")
logger = logging.getLogger(__name__)

MEAL_TYPES = [
    ("Any", "any"),
    ("Breakfast", "breakfast"),
    ("Lunch", "lunch"),
    ("Dinner", "dinner"),
    ("Snack", "snack"),
    ("Dessert", "dessert"),
]


def _parse_lines(raw: str) -> list[str]:
    chunks = [item.strip() for line in raw.splitlines() for item in line.split(",")]
    return [item for item in chunks if item]


def _language(request: Request) -> str:
    language = request.cookies.get("language", "")
    if language in SUPPORTED_LANGUAGES:
        return language
    return get_settings().default_language


def _page_context(request: Request, **extra: Any) -> dict[str, Any]:
    language = _language(request)
    translator = get_translator()
    state = get_library().load()
    return {
        "t": lambda key: translator.t(language, key),
        "language": language,
        "languages": [(code, LANGUAGE_NAMES[code]) for code in SUPPORTED_LANGUAGES],
        "meal_types": MEAL_TYPES,
        "history": state.history,
        "favorites": state.favorites,
        **extra,
    }


def _recipe_location(recipe: Recipe) -> str:
    if get_library().find(recipe.id) is not None:
        return f"/ui/recipes/{quote(recipe.id, safe='')}"
    return f"/share/{share_token(recipe)}"


def _parse_recipe_json(recipe_id: str, recipe_json: str) -> Recipe:
    try:
        recipe = Recipe.model_validate_json(recipe_json)
    except ValidationError as exc:
        raise HTTPException(status_code=400, detail="Invalid recipe payload") from exc
    if recipe.id != recipe_id:
        raise HTTPException(status_code=400, detail="Recipe id does not match payload")
    return recipe


def _render_recipe(request: Request, recipe: Recipe) -> Any:
    library = get_library()
    share_url = str(request.base_url).rstrip("/") + f"/share/{share_token(recipe)}"
    return templates.TemplateResponse(
        request,
        "recipe.html",
        _page_context(
            request,
            recipe=recipe,
            recipe_json=recipe.model_dump_json(),
            is_stored=library.find(recipe.id) is not None,
            is_favorite=library.is_favorite(recipe.id),
            user_rating=library.rating_for(recipe.id),
            instructions_text=instructions_text(recipe),
            narration_text=narration_text(recipe),
            share_url=share_url,
            feedback_submitted=request.query_params.get("feedback") == "1",
        ),
    )


def _render_form(
    request: Request, form: dict[str, Any], error_message: str | None, status_code: int
) -> Any:
    return templates.TemplateResponse(
        request,
        "generate.html",
        _page_context(request, form=form, error_message=error_message),
        status_code=status_code,
    )


@router.get("/")
async def generate_page(request: Request) -> Any:
    error_key = request.query_params.get("error")
    context = _page_context(request, form={})
    context["error_message"] = context["t"](error_key) if error_key else None
    return templates.TemplateResponse(request, "generate.html", context)


@router.post("/ui/generate")
def generate_from_form(
    request: Request,
    mode: str = Form(default="ingredients"),
    ingredients: str = Form(default=""),
    dish_name: str = Form(default=""),
    equipment: str = Form(default=""),
    meal_type: str = Form(default="Any"),
    dietary_restrictions: str = Form(default=""),
) -> Any:
    form = {
        "mode": mode,
        "ingredients": ingredients,
        "dish_name": dish_name,
        "equipment": equipment,
        "meal_type": meal_type,
        "dietary_restrictions": dietary_restrictions,
    }
    try:
        recipe_request = RecipeRequest(
            mode=mode,
            ingredients=_parse_lines(ingredients),
            dish_name=dish_name,
            equipment=_parse_lines(equipment),
            meal_type=meal_type or "Any",
            dietary_restrictions=dietary_restrictions.strip(),
            language=_language(request),
        )
    except ValidationError as exc:
        raise HTTPException(status_code=400, detail="Invalid generation request") from exc

    error_key = missing_input_error(recipe_request)
    if error_key is not None:
        message = get_translator().t(recipe_request.language, error_key)
        return _render_form(request, form, message, 400)

    settings = get_settings()
    try:
        recipe = get_generator(settings).generate(recipe_request)
    except Exception as exc:
        logger.warning(
            "ui_recipe_generation",
            extra={
                "outcome": "failure",
                "error_class": getattr(exc, "error_class", exc.__class__.__name__),
                **request_shape_fields(recipe_request),
            },
        )
        return _render_form(request, form, str(exc) or exc.__class__.__name__, 502)

    get_library().record_history(recipe)
    logger.info(
        "ui_recipe_generation",
        extra={"outcome": "success", **request_shape_fields(recipe_request)},
    )
    return _render_recipe(request, recipe)


@router.get("/share/{token}")
async def shared_recipe_ui(request: Request, token: str) -> Any:
    try:
        recipe = recipe_from_share_token(token)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail="Invalid share link") from exc
    return _render_recipe(request, recipe)


@router.post("/ui/recipes/{recipe_id:path}/favorite")
async def toggle_favorite_ui(recipe_id: str, recipe_json: str = Form()) -> RedirectResponse:
    recipe = _parse_recipe_json(recipe_id, recipe_json)
    get_library().toggle_favorite(recipe)
    return RedirectResponse(url=_recipe_location(recipe), status_code=303)


@router.post("/ui/recipes/{recipe_id:path}/rate")
async def rate_recipe_ui(
    recipe_id: str, recipe_json: str = Form(), rating: int = Form()
) -> RedirectResponse:
    recipe = _parse_recipe_json(recipe_id, recipe_json)
    try:
        get_library().rate(recipe.id, rating)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return RedirectResponse(url=_recipe_location(recipe), status_code=303)


@router.post("/ui/recipes/{recipe_id:path}/feedback")
async def feedback_ui(
    recipe_id: str, recipe_json: str = Form(), comment: str = Form(default="")
) -> RedirectResponse:
    recipe = _parse_recipe_json(recipe_id, recipe_json)
    cleaned = comment.strip()
    location = _recipe_location(recipe)
    if cleaned:
        record_feedback(recipe.id, cleaned)
        location += "?feedback=1"
    return RedirectResponse(url=location, status_code=303)


@router.get("/ui/recipes/{recipe_id:path}")
async def recipe_detail_ui(request: Request, recipe_id: str) -> Any:
    recipe = get_library().find(recipe_id)
    if recipe is None:
        raise HTTPException(status_code=404, detail="Recipe not found")
    return _render_recipe(request, recipe)


@router.post("/ui/history/clear")
async def clear_history_ui() -> RedirectResponse:
    get_library().clear_history()
    return RedirectResponse(url="/", status_code=303)


@router.post("/ui/language")
async def set_language_ui(
    language: str = Form(), next_url: str = Form(default="/")
) -> RedirectResponse:
    if language not in SUPPORTED_LANGUAGES:
        raise HTTPException(status_code=400, detail="Unsupported language")
    target = next_url if next_url.startswith("/") and not next_url.startswith("//") else "/"
    response = RedirectResponse(url=target, status_code=303)
    response.set_cookie("language", language, samesite="lax")
    return response
