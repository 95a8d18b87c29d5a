import json
from types import SimpleNamespace
from typing import Any

import httpx
import openai
import pytest

from conftest import CHICKEN_RICE, TIPS
from domain.llm_service import GenerationError, LLMService


class StubCompletions:
    def __init__(self, answers: list[Any]) -> None:
        self.answers = answers
        self.calls: list[dict[str, Any]] = []

    async def create(self, **kwargs: Any) -> SimpleNamespace:
        self.calls.append(kwargs)
        answer = self.answers.pop(0)
        if isinstance(answer, Exception):
            raise answer
        message = SimpleNamespace(content=answer)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


class StubOpenAI:
    def __init__(self, *answers: Any) -> None:
        self.completions = StubCompletions(list(answers))
        self.chat = SimpleNamespace(completions=self.completions)


def service(*answers: Any) -> tuple[LLMService, StubCompletions]:
    client = StubOpenAI(*answers)
    llm = LLMService(client, model="test-model")  # type: ignore[arg-type]
    return llm, client.completions


@pytest.mark.asyncio
async def test_generate_recipe() -> None:
    llm, completions = service(json.dumps(CHICKEN_RICE.to_dict()))
    got = await llm.generate_recipe("chicken, rice", ["Gluten-Free"])
    assert got == CHICKEN_RICE

    call = completions.calls[0]
    assert call["model"] == "test-model"
    assert call["response_format"] == {"type": "json_object"}
    system, user = call["messages"]
    assert system["role"] == "system"
    assert user["content"].startswith("Ingredients: chicken, rice")
    assert "gluten-free" in user["content"]


@pytest.mark.parametrize(
    "answer",
    (
        "",
        "Here is a lovely recipe for you!",
        json.dumps(["not", "an", "object"]),
        json.dumps({"title": "Half a recipe"}),
        json.dumps({**CHICKEN_RICE.to_dict(), "ingredients": []}),
    ),
)
@pytest.mark.asyncio
async def test_generate_recipe_rejects_malformed_output(answer: str) -> None:
    llm, _ = service(answer)
    with pytest.raises(GenerationError):
        await llm.generate_recipe("chicken, rice")


@pytest.mark.asyncio
async def test_generate_recipe_wraps_transport_errors() -> None:
    request = httpx.Request("POST", "https://api.openai.com/v1/chat/completions")
    llm, _ = service(openai.APIConnectionError(request=request))
    with pytest.raises(GenerationError, match="Connection error"):
        await llm.generate_recipe("chicken, rice")


@pytest.mark.asyncio
async def test_generate_chef_tips() -> None:
    llm, completions = service(json.dumps(TIPS.to_dict()))
    got = await llm.generate_chef_tips("Chicken Rice Bowl", ["chicken", "rice"])
    assert got == TIPS
    user = completions.calls[0]["messages"][1]
    assert user["content"] == "Recipe: Chicken Rice Bowl\nIngredients: chicken, rice"


@pytest.mark.asyncio
async def test_generate_chef_tips_rejects_malformed_output() -> None:
    llm, _ = service(json.dumps({"cookingTip": "Salt early."}))
    with pytest.raises(GenerationError):
        await llm.generate_chef_tips("Chicken Rice Bowl", ["chicken"])


def test_tips_model_defaults_to_core_model() -> None:
    assert LLMService(model="a").tips_model == "a"
    assert LLMService(model="a", tips_model="b").tips_model == "b"
