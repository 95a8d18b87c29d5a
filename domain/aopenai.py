import json
import os
from typing import Any

import openai


MAX_TOKENS = 3000
TIMEOUT = 60 * 2
DEFAULT_MODEL = os.environ.get("OPENAI_MODEL", "gpt-4o-mini")


def openai_client_factory(
    token: str | None = None, *, timeout: float = TIMEOUT
) -> openai.AsyncClient:
    return openai.AsyncClient(api_key=token, timeout=timeout)


async def json_chat(
    system: str,
    msg: str,
    *,
    openai_client: openai.AsyncClient,
    model: str | None = None,
    max_tokens: int = MAX_TOKENS,
) -> dict[str, Any]:
    """Single turn chat constrained to a JSON object answer."""
    model = DEFAULT_MODEL if model is None else model
    resp = await openai_client.chat.completions.create(
        model=model,
        messages=[
            {"role": "system", "content": system},
            {"role": "user", "content": msg},
        ],
        response_format={"type": "json_object"},
        max_tokens=max_tokens,
    )
    ans = resp.choices[0].message.content if resp.choices else None
    if not ans or not ans.strip():
        raise ValueError("Empty response from the model.")
    try:
        data = json.loads(ans)
    except json.JSONDecodeError as e:
        raise ValueError(f"Model response is not valid JSON. {ans[:200]}") from e
    if not isinstance(data, dict):
        raise ValueError(f"Model response is not a JSON object. {ans[:200]}")
    return data
