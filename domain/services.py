"""The steps behind a generation: recipe, then chef tips, then saving.

Only `create_recipe` propagates failure. Tips and saving are best-effort.
"""

import time
from typing import Protocol, Sequence

from domain.models import ChefTips, Recipe, SavedRecipe
from domain.outcomes import BestEffort, best_effort
from domain.repository import HistoryStorage


class RecipeGenerator(Protocol):
    async def generate_recipe(
        self, ingredients: str, preferences: Sequence[str] = ()
    ) -> Recipe:
        ...

    async def generate_chef_tips(
        self, title: str, ingredients: Sequence[str]
    ) -> ChefTips:
        ...


def now_ms() -> int:
    return time.time_ns() // 1_000_000


async def create_recipe(
    ingredients: str,
    preferences: Sequence[str],
    *,
    llm: RecipeGenerator,
) -> Recipe:
    return await llm.generate_recipe(ingredients, list(preferences))


async def chef_tips(recipe: Recipe, *, llm: RecipeGenerator) -> BestEffort[ChefTips]:
    return await best_effort(
        llm.generate_chef_tips(recipe.title, list(recipe.ingredients)),
        step="Chef tips",
    )


async def save_recipe(
    username: str,
    recipe: Recipe,
    tips: ChefTips | None,
    *,
    storage: HistoryStorage,
    timestamp: int | None = None,
) -> tuple[SavedRecipe, BestEffort[list[SavedRecipe]]]:
    timestamp = now_ms() if timestamp is None else timestamp
    record = SavedRecipe.create(recipe, tips, timestamp=timestamp)
    saved = await best_effort(
        storage.save_recipe(username, record),
        step="Saving to history",
    )
    return record, saved
