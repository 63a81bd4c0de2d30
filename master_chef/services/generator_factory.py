from functools import lru_cache
from typing import Any

from master_chef.core.config import Settings, get_settings
from master_chef.services.generator_base import RecipeGenerator
from master_chef.services.generator_openai import OpenAIRecipeGenerator


@lru_cache
def get_openai_client(api_key: str) -> Any:
    from openai import OpenAI

    return OpenAI(api_key=api_key)


def get_generator(settings: Settings | None = None) -> RecipeGenerator:
    config = settings or get_settings()
    return OpenAIRecipeGenerator(
        client=get_openai_client(config.openai_api_key),
        model=config.openai_model,
    )
