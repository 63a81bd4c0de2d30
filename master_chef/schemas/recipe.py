from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

GenerationMode = Literal["ingredients", "dish"]


class RecipeRequest(BaseModel):
    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    mode: GenerationMode = "ingredients"
    ingredients: list[str] = Field(default_factory=list)
    dish_name: str = Field(default="", alias="dishName")
    equipment: list[str] = Field(default_factory=list)
    meal_type: str = Field(default="Any", alias="mealType")
    dietary_restrictions: str = Field(default="", alias="dietaryRestrictions")
    language: str = "en"


class Nutrition(BaseModel):
    model_config = ConfigDict(frozen=True)

    calories: str = Field(description="Estimated calories per serving.")
    protein: str = Field(description="Estimated protein per serving in grams.")
    carbohydrates: str = Field(description="Estimated carbohydrates per serving in grams.")
    fat: str = Field(description="Estimated fat per serving in grams.")


class GeneratedRecipe(BaseModel):
    """Shape the generation service is asked to return."""

    name: str = Field(description="The name of the recipe.")
    ingredients: list[str] = Field(description="List of ingredients with quantities.")
    instructions: list[str] = Field(description="Step-by-step cooking instructions.")
    prep_time: str = Field(description="Preparation time, e.g., '15 minutes'.")
    cook_time: str = Field(description="Cooking time, e.g., '30 minutes'.")
    servings: str = Field(description="Number of servings, e.g., '4 servings'.")
    nutrition: Nutrition


class Recipe(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    id: str = Field(min_length=1)
    name: str = Field(min_length=1)
    ingredients: list[str]
    instructions: list[str]
    prep_time: str
    cook_time: str
    servings: str
    nutrition: Nutrition | None = None
