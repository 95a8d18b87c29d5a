from typing import Sequence


CREATE_RECIPE_PROMPT = """
You are a world-class, creative, and detail-oriented assistant for creating
delicious and inspiring recipes.
Every recipe you create is another opportunity to delight and amaze your users.
You will be given a list of ingredients available to the user and, sometimes,
their dietary preferences.

It is important to build the recipe around the ingredients provided.
Where you are very sure a common pantry ingredient is missing,
include a common choice where one is clear else be creative.
Always respect the user's dietary preferences.

Your users are competent chefs but are not professionals.
Keep each instruction to a single clear step.

Respond only with a JSON object with exactly these keys:

{
  "title": "A catchy recipe name",
  "description": "One or two enticing sentences about the dish",
  "ingredients": ["200 grams chicken breast", "1 cup rice"],
  "instructions": ["Rinse the rice.", "Season the chicken."],
  "prepTime": "15 minutes",
  "cookTime": "25 minutes",
  "servings": "2"
}
""".strip()


CHEF_TIPS_PROMPT = """
You are a seasoned head chef sharing quick advice with a home cook.
Given a recipe title and its ingredients, give one practical cooking tip that
will elevate the dish and one beverage pairing that suits it.
Keep each to one or two sentences.

Respond only with a JSON object with exactly these keys:

{
  "cookingTip": "The tip",
  "beveragePairing": "The pairing"
}
""".strip()


SUBSTITUTE = (
    "and adjust cooking time and preparation steps for the substitute ingredients."
)

PREFERENCES = {
    "vegetarian": (
        "The user prefers you to include vegetarian substitute ingredients "
        f"where necessary {SUBSTITUTE}"
    ),
    "vegan": (
        "The user prefers you to include vegan substitute ingredients "
        f"where necessary {SUBSTITUTE}"
    ),
    "gluten-free": (
        "The user prefers you to include gluten-free substitute ingredients "
        f"where necessary {SUBSTITUTE}"
    ),
    "dairy-free": (
        "The user prefers you to include dairy-free substitute ingredients "
        f"where necessary {SUBSTITUTE}"
    ),
    "nut-free": "The user has a nut allergy. Do not use nuts of any kind.",
    "low-carb": "The user prefers low-carb dishes. Avoid starchy sides.",
    "keto": (
        "The user follows a ketogenic diet. Keep carbohydrates very low "
        "and favour fats and proteins."
    ),
}


def normalise_tag(tag: str) -> str:
    return "-".join(tag.strip().lower().replace("_", " ").split())


def build_preferences(preferences: Sequence[str]) -> str:
    s = ""
    for tag in preferences:
        if not tag.strip():
            continue
        sentence = PREFERENCES.get(normalise_tag(tag))
        if sentence is None:
            sentence = f"The user prefers {tag.strip()} recipes."
        s += sentence + "\n"
    return s


def recipe_request(ingredients: str, preferences: Sequence[str]) -> str:
    msg = f"Ingredients: {ingredients.strip()}"
    prefs = build_preferences(preferences)
    if prefs:
        msg += f"\n\nDietary preferences:\n{prefs}"
    return msg


def tips_request(title: str, ingredients: Sequence[str]) -> str:
    return f"Recipe: {title}\nIngredients: {', '.join(ingredients)}"
