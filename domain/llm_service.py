import logging
from typing import Sequence

import openai

from domain.aopenai import (
    DEFAULT_MODEL,
    MAX_TOKENS,
    TIMEOUT,
    json_chat,
    openai_client_factory,
)
from domain.models import ChefTips, Recipe
from domain.prompts import (
    CHEF_TIPS_PROMPT,
    CREATE_RECIPE_PROMPT,
    recipe_request,
    tips_request,
)


logger = logging.getLogger(__name__)


class GenerationError(Exception):
    pass


class LLMService:
    def __init__(
        self,
        openai_client: openai.AsyncClient | None = None,
        *,
        model: str = DEFAULT_MODEL,
        tips_model: str | None = None,
        max_tokens: int = MAX_TOKENS,
        timeout: float = TIMEOUT,
    ) -> None:
        self._openai_client = openai_client
        self.model = model
        self.tips_model = model if tips_model is None else tips_model
        self.max_tokens = max_tokens
        self.timeout = timeout

    @property
    def openai_client(self) -> openai.AsyncClient:
        # Created on first use so the service can be built without a key.
        if self._openai_client is None:
            self._openai_client = openai_client_factory(timeout=self.timeout)
        return self._openai_client

    async def generate_recipe(
        self, ingredients: str, preferences: Sequence[str] = ()
    ) -> Recipe:
        if not ingredients.strip():
            raise ValueError("Provide at least one ingredient.")

        logger.info("Generating recipe with %s", self.model)
        try:
            data = await json_chat(
                CREATE_RECIPE_PROMPT,
                recipe_request(ingredients, preferences),
                openai_client=self.openai_client,
                model=self.model,
                max_tokens=self.max_tokens,
            )
            recipe = Recipe.from_dict(data)
        except (openai.OpenAIError, ValueError) as e:
            raise GenerationError(str(e)) from e

        if not recipe.title.strip() or not recipe.ingredients:
            raise GenerationError("The model returned an incomplete recipe.")
        return recipe

    async def generate_chef_tips(
        self, title: str, ingredients: Sequence[str]
    ) -> ChefTips:
        logger.info("Generating chef tips for %r", title)
        try:
            data = await json_chat(
                CHEF_TIPS_PROMPT,
                tips_request(title, ingredients),
                openai_client=self.openai_client,
                model=self.tips_model,
                max_tokens=self.max_tokens,
            )
            return ChefTips.from_dict(data)
        except (openai.OpenAIError, ValueError) as e:
            raise GenerationError(str(e)) from e

    async def close(self) -> None:
        if self._openai_client is not None:
            await self._openai_client.close()
