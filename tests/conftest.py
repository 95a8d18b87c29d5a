import asyncio
from typing import Sequence

import pytest

from domain.controller import RecipeController
from domain.models import ChefTips, Recipe, SavedRecipe
from domain.repository import RecipeNotFound, StorageError


CHICKEN_RICE = Recipe(
    title="Chicken Rice Bowl",
    description="A quick weeknight bowl.",
    ingredients=("2 chicken thighs", "1 cup rice", "1 tbsp soy sauce"),
    instructions=("Cook the rice.", "Pan fry the chicken.", "Serve over rice."),
    prep_time="10 minutes",
    cook_time="25 minutes",
    servings="2",
)

TIPS = ChefTips(
    cooking_tip="Rest the chicken for five minutes before slicing.",
    beverage_pairing="A crisp lager.",
)


class FakeLLM:
    """Stands in for `LLMService`; records calls and can be told to fail."""

    def __init__(
        self,
        recipe: Recipe = CHICKEN_RICE,
        tips: ChefTips | None = TIPS,
    ) -> None:
        self.recipe = recipe
        self.tips = tips
        self.recipe_error: Exception | None = None
        self.tips_error: Exception | None = None
        self.recipe_calls: list[tuple[str, list[str]]] = []
        self.tips_calls: list[tuple[str, list[str]]] = []
        self.release: asyncio.Event | None = None

    async def generate_recipe(
        self, ingredients: str, preferences: Sequence[str] = ()
    ) -> Recipe:
        self.recipe_calls.append((ingredients, list(preferences)))
        if self.release is not None:
            await self.release.wait()
        if self.recipe_error is not None:
            raise self.recipe_error
        return self.recipe

    async def generate_chef_tips(
        self, title: str, ingredients: Sequence[str]
    ) -> ChefTips:
        self.tips_calls.append((title, list(ingredients)))
        if self.tips_error is not None:
            raise self.tips_error
        assert self.tips is not None
        return self.tips


class InMemoryStorage:
    """Simple storage backend used for tests."""

    def __init__(self) -> None:
        self.user: str | None = None
        self.histories: dict[str, list[SavedRecipe]] = {}
        self.fail: set[str] = set()
        self.connected = False

    def _check(self, op: str) -> None:
        if op in self.fail:
            raise StorageError(f"{op} unavailable")

    async def connect(self) -> None:
        self.connected = True

    async def disconnect(self) -> None:
        self.connected = False

    async def get_user(self) -> str | None:
        self._check("get_user")
        return self.user

    async def login(self, username: str) -> None:
        self._check("login")
        self.user = username

    async def logout(self) -> None:
        self._check("logout")
        self.user = None

    async def get_history(self, username: str) -> list[SavedRecipe]:
        self._check("get_history")
        return sorted(
            self.histories.get(username, []),
            key=lambda r: r.timestamp,
            reverse=True,
        )

    async def save_recipe(self, username: str, record: SavedRecipe) -> list[SavedRecipe]:
        self._check("save_recipe")
        self.histories.setdefault(username, []).append(record)
        return await self.get_history(username)

    async def delete_recipe(self, username: str, record_id: str) -> list[SavedRecipe]:
        self._check("delete_recipe")
        records = self.histories.get(username, [])
        for index, record in enumerate(records):
            if record.id == record_id:
                records.pop(index)
                return await self.get_history(username)
        raise RecipeNotFound(record_id)


class Clock:
    def __init__(self, start: int = 1_700_000_000_000) -> None:
        self.now = start

    def __call__(self) -> int:
        self.now += 1
        return self.now


def saved(title: str, timestamp: int, tips: ChefTips | None = None) -> SavedRecipe:
    recipe = Recipe(
        title=title,
        description=f"{title} description",
        ingredients=("flour", "eggs"),
        instructions=("Mix.", "Bake."),
        prep_time="5 minutes",
        cook_time="20 minutes",
        servings="4",
    )
    return SavedRecipe.create(recipe, tips, timestamp=timestamp)


@pytest.fixture
def llm() -> FakeLLM:
    return FakeLLM()


@pytest.fixture
def storage() -> InMemoryStorage:
    return InMemoryStorage()


@pytest.fixture
def ctrl(llm: FakeLLM, storage: InMemoryStorage) -> RecipeController:
    return RecipeController(llm=llm, storage=storage, clock=Clock())
