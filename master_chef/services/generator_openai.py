import json
import logging
from typing import Any

from pydantic import ValidationError

from master_chef.schemas.recipe import GeneratedRecipe, Recipe, RecipeRequest
from master_chef.services.prompt import build_prompt
from master_chef.utils.id_utils import make_recipe_id

logger = logging.getLogger(__name__)

openai_generation_counters = {
    "success": 0,
    "failure": 0,
}

UNKNOWN_ERROR_MESSAGE = "An unknown error occurred while generating the recipe."


class RecipeGenerationError(RuntimeError):
    def __init__(self, error_class: str, message: str) -> None:
        super().__init__(message)
        self.error_class = error_class

    @classmethod
    def from_exception(cls, error_class: str, exc: BaseException) -> "RecipeGenerationError":
        detail = str(exc).strip()
        if not detail:
            return cls(error_class, UNKNOWN_ERROR_MESSAGE)
        return cls(error_class, f"Failed to generate recipe: {detail}")


class OpenAIRecipeGenerator:
    def __init__(self, client: Any, model: str) -> None:
        self._client = client
        self._model = model

    @staticmethod
    def _to_strict_schema(schema: dict[str, Any]) -> dict[str, Any]:
        normalized = json.loads(json.dumps(schema))

        def _walk(node: Any) -> None:
            if isinstance(node, dict):
                properties = node.get("properties")
                if isinstance(properties, dict):
                    node["required"] = list(properties.keys())
                    node.setdefault("additionalProperties", False)
                    for value in properties.values():
                        _walk(value)

                items = node.get("items")
                if items is not None:
                    _walk(items)

                for key in ("anyOf", "allOf", "oneOf"):
                    values = node.get(key)
                    if isinstance(values, list):
                        for value in values:
                            _walk(value)

                defs = node.get("$defs")
                if isinstance(defs, dict):
                    for value in defs.values():
                        _walk(value)

            elif isinstance(node, list):
                for value in node:
                    _walk(value)

        _walk(normalized)
        return normalized

    @classmethod
    def response_schema(cls) -> dict[str, Any]:
        return cls._to_strict_schema(GeneratedRecipe.model_json_schema())

    def generate(self, request: RecipeRequest) -> Recipe:
        try:
            payload = self._generate_recipe_payload(request)
            recipe_id = make_recipe_id(str(payload.get("name", "")))
            recipe = Recipe.model_validate({**payload, "id": recipe_id})
        except RecipeGenerationError as exc:
            self._record_failure(request, exc.error_class)
            raise
        except ValidationError as exc:
            self._record_failure(request, "invalid_model_output")
            raise RecipeGenerationError(
                "invalid_model_output",
                "Failed to generate recipe: response did not match the recipe schema",
            ) from exc

        openai_generation_counters["success"] += 1
        logger.info(
            "recipe_generation",
            extra={
                "outcome": "success",
                "generator_mode": "openai",
                "has_nutrition": recipe.nutrition is not None,
                **self._request_shape_fields(request),
            },
        )
        return recipe

    def _generate_recipe_payload(self, request: RecipeRequest) -> dict[str, Any]:
        request_kwargs = {
            "model": self._model,
            "input": build_prompt(request),
            "text": {
                "format": {
                    "type": "json_schema",
                    "name": "recipe",
                    "strict": True,
                    "schema": self.response_schema(),
                }
            },
        }
        try:
            response = self._client.responses.create(**request_kwargs)
        except Exception as exc:
            raise RecipeGenerationError.from_exception("api_error", exc) from exc

        output_text = self._extract_output_text(response)
        try:
            parsed = json.loads(output_text)
        except json.JSONDecodeError as exc:
            raise RecipeGenerationError.from_exception("invalid_model_output", exc) from exc
        if not isinstance(parsed, dict):
            raise RecipeGenerationError(
                "invalid_model_output",
                "Failed to generate recipe: response was not a JSON object",
            )
        return parsed

    @staticmethod
    def _extract_output_text(response: Any) -> str:
        output_text = getattr(response, "output_text", None)
        if isinstance(output_text, str) and output_text.strip():
            return output_text.strip()

        if isinstance(response, dict):
            dict_output = response.get("output_text")
            if isinstance(dict_output, str) and dict_output.strip():
                return dict_output.strip()

        raise RecipeGenerationError(
            "invalid_model_output",
            "Failed to generate recipe: response did not include output_text",
        )

    def _record_failure(self, request: RecipeRequest, error_class: str) -> None:
        openai_generation_counters["failure"] += 1
        logger.warning(
            "recipe_generation",
            extra={
                "outcome": "failure",
                "generator_mode": "openai",
                "error_class": error_class,
                **self._request_shape_fields(request),
            },
        )

    @staticmethod
    def _request_shape_fields(request: RecipeRequest) -> dict[str, Any]:
        return {
            "mode": request.mode,
            "ingredients_count": len(request.ingredients),
            "equipment_count": len(request.equipment),
            "has_meal_type": request.meal_type != "Any",
            "has_dietary_restrictions": bool(request.dietary_restrictions),
            "language": request.language,
        }
