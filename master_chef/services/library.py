"""History, favorites and ratings kept as JSON blobs under fixed keys."""

import json
import logging
from dataclasses import dataclass, field

from pydantic import TypeAdapter, ValidationError

from master_chef.db.sqlite import delete_values, get_value, set_value
from master_chef.schemas.recipe import Recipe

logger = logging.getLogger(__name__)

HISTORY_KEY = "recipeHistory"
FAVORITES_KEY = "recipeFavorites"
RATINGS_KEY = "recipeRatings"

MIN_RATING = 1
MAX_RATING = 5

_recipes_adapter = TypeAdapter(list[Recipe])
_ratings_adapter = TypeAdapter(dict[str, int])


@dataclass
class LibraryState:
    history: list[Recipe] = field(default_factory=list)
    favorites: list[Recipe] = field(default_factory=list)
    ratings: dict[str, int] = field(default_factory=dict)


class RecipeLibrary:
    def __init__(self, history_limit: int = 10) -> None:
        self._history_limit = history_limit

    def load(self) -> LibraryState:
        """Read all three blobs; a corrupt blob resets the whole library."""
        try:
            return LibraryState(
                history=self._load_recipes(HISTORY_KEY),
                favorites=self._load_recipes(FAVORITES_KEY),
                ratings=self._load_ratings(),
            )
        except (ValueError, ValidationError) as exc:
            logger.warning("library_reset", extra={"error_class": exc.__class__.__name__})
            delete_values(HISTORY_KEY, FAVORITES_KEY, RATINGS_KEY)
            return LibraryState()

    def record_history(self, recipe: Recipe) -> list[Recipe]:
        history = self.load().history
        updated = [recipe, *[item for item in history if item.id != recipe.id]]
        updated = updated[: self._history_limit]
        self._save_recipes(HISTORY_KEY, updated)
        return updated

    def clear_history(self) -> None:
        self._save_recipes(HISTORY_KEY, [])

    def toggle_favorite(self, recipe: Recipe) -> bool:
        favorites = self.load().favorites
        if any(item.id == recipe.id for item in favorites):
            self._save_recipes(FAVORITES_KEY, [item for item in favorites if item.id != recipe.id])
            return False
        self._save_recipes(FAVORITES_KEY, [recipe, *favorites])
        return True

    def is_favorite(self, recipe_id: str) -> bool:
        return any(item.id == recipe_id for item in self.load().favorites)

    def rate(self, recipe_id: str, rating: int) -> dict[str, int]:
        if not MIN_RATING <= rating <= MAX_RATING:
            raise ValueError(f"rating must be between {MIN_RATING} and {MAX_RATING}")
        ratings = {**self.load().ratings, recipe_id: rating}
        set_value(RATINGS_KEY, json.dumps(ratings))
        return ratings

    def rating_for(self, recipe_id: str) -> int:
        return self.load().ratings.get(recipe_id, 0)

    def find(self, recipe_id: str) -> Recipe | None:
        state = self.load()
        for recipe in [*state.history, *state.favorites]:
            if recipe.id == recipe_id:
                return recipe
        return None

    @staticmethod
    def _load_recipes(key: str) -> list[Recipe]:
        raw = get_value(key)
        if raw is None:
            return []
        return _recipes_adapter.validate_json(raw)

    @staticmethod
    def _load_ratings() -> dict[str, int]:
        raw = get_value(RATINGS_KEY)
        if raw is None:
            return {}
        return _ratings_adapter.validate_json(raw)

    @staticmethod
    def _save_recipes(key: str, recipes: list[Recipe]) -> None:
        set_value(key, _recipes_adapter.dump_json(recipes).decode("utf-8"))
