from master_chef.schemas.recipe import RecipeRequest

LANGUAGE_NAMES = {
    "en": "English",
    "es": "Spanish",
    "hi": "Hindi",
    "ur": "Urdu",
    "mr": "Marathi",
    "bn": "Bengali",
    "ta": "Tamil",
    "te": "Telugu",
    "kn": "Kannada",
    "gu": "Gujarati",
    "pa": "Punjabi",
}

ANY_MEAL_TYPE = "Any"


def language_name(code: str) -> str:
    return LANGUAGE_NAMES.get(code.strip().lower(), code)


def build_prompt(request: RecipeRequest) -> str:
    # Clause order is significant to the model; keep it stable.
    parts = ["You are a creative chef. Generate a detailed recipe."]

    if request.mode == "dish":
        parts.append(f'The requested dish is "{request.dish_name}".')
    else:
        parts.append(
            "The recipe must use the following ingredients: "
            f"{', '.join(request.ingredients)}. "
            "You can add a few common pantry staples if necessary."
        )

    if request.equipment:
        parts.append(
            "The user has the following kitchen equipment available: "
            f"{', '.join(request.equipment)}. "
            "The recipe should only use this equipment."
        )

    if request.meal_type != ANY_MEAL_TYPE:
        parts.append(f"This recipe is for {request.meal_type}.")

    if request.dietary_restrictions:
        parts.append(
            f"Please adhere to the following dietary restrictions: {request.dietary_restrictions}."
        )

    parts.append(
        f"The response must be in the {language_name(request.language)} language. "
        "The recipe name should be appealing. "
        "The instructions should be clear and easy to follow."
    )
    return " ".join(parts)
