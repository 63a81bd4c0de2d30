from typing import Protocol

from master_chef.schemas.recipe import Recipe, RecipeRequest


class RecipeGenerator(Protocol):
    def generate(self, request: RecipeRequest) -> Recipe: ...
