"""Run with: uvicorn main:app --reload"""

import contextlib
import functools
import json
import logging
from typing import Any, Awaitable, Callable

from starlette.applications import Starlette
from starlette.exceptions import HTTPException
from starlette.requests import Request
from starlette.responses import JSONResponse
from starlette.routing import Route

import config
from db import HistoryDatabase
from domain.controller import GenerationInProgress, RecipeController
from domain.llm_service import LLMService
from domain.models import SavedRecipe
from domain.repository import HistoryStorage
from domain.services import RecipeGenerator


logger = logging.getLogger(__name__)


def controller(request: Request) -> RecipeController:
    return request.app.state.controller


def aStateResponse(route: Callable[[Request], Awaitable[None]]):
    """Run the route then respond with the resulting state."""

    @functools.wraps(route)
    async def wrapper(request: Request) -> JSONResponse:
        await route(request)
        return JSONResponse(controller(request).state.to_dict())

    return wrapper


async def json_body(request: Request) -> dict[str, Any]:
    body = await request.body()
    if not body:
        return {}
    try:
        data = json.loads(body)
    except json.JSONDecodeError:
        raise HTTPException(400, detail="Body is not valid JSON.")
    if not isinstance(data, dict):
        raise HTTPException(400, detail="Body must be a JSON object.")
    return data


def field[T](data: dict[str, Any], key: str, kind: type[T]) -> T:
    value = data.get(key)
    if not isinstance(value, kind):
        raise HTTPException(400, detail=f"Expecting '{key}' to be a {kind.__name__}.")
    return value


def tags(data: dict[str, Any]) -> list[str]:
    value = field(data, "preferences", list)
    if not all(isinstance(t, str) for t in value):
        raise HTTPException(400, detail="Expecting 'preferences' to be strings.")
    return value


def history_item(request: Request) -> SavedRecipe:
    id = request.path_params["id"]
    item = controller(request).state.find(id)
    if item is None:
        raise HTTPException(404, detail=f"No saved recipe {id}.")
    return item


@aStateResponse
async def get_state(request: Request) -> None:
    pass


@aStateResponse
async def set_ingredients(request: Request) -> None:
    data = await json_body(request)
    controller(request).set_ingredients(field(data, "ingredients", str))


@aStateResponse
async def set_preferences(request: Request) -> None:
    data = await json_body(request)
    controller(request).set_preferences(tags(data))


@aStateResponse
async def toggle_preference(request: Request) -> None:
    controller(request).toggle_preference(request.path_params["tag"])


@aStateResponse
async def generate(request: Request) -> None:
    data = await json_body(request)
    ctrl = controller(request)
    if "ingredients" in data:
        ctrl.set_ingredients(field(data, "ingredients", str))
    if "preferences" in data:
        ctrl.set_preferences(tags(data))
    try:
        await ctrl.generate()
    except GenerationInProgress as e:
        raise HTTPException(409, detail=str(e))


@aStateResponse
async def select_history_item(request: Request) -> None:
    controller(request).select_history_item(history_item(request))


@aStateResponse
async def delete_history_item(request: Request) -> None:
    await controller(request).delete_recipe(history_item(request))


@aStateResponse
async def login(request: Request) -> None:
    data = await json_body(request)
    await controller(request).login(field(data, "username", str))


@aStateResponse
async def logout(request: Request) -> None:
    await controller(request).logout()


@aStateResponse
async def start_over(request: Request) -> None:
    controller(request).start_over()


@aStateResponse
async def sidebar(request: Request) -> None:
    data = await json_body(request)
    if field(data, "open", bool):
        controller(request).open_sidebar()
    else:
        controller(request).close_sidebar()


@aStateResponse
async def login_modal(request: Request) -> None:
    data = await json_body(request)
    if field(data, "open", bool):
        controller(request).open_login()
    else:
        controller(request).close_login()


async def http_exception(request: Request, exc: Exception) -> JSONResponse:
    assert isinstance(exc, HTTPException)
    return JSONResponse({"detail": exc.detail}, status_code=exc.status_code)


def create_app(
    *,
    llm: RecipeGenerator | None = None,
    storage: HistoryStorage | None = None,
    cfg: config.Config | None = None,
) -> Starlette:
    cfg = config.Config() if cfg is None else cfg
    llm = (
        LLMService(
            model=cfg.core_model,
            tips_model=cfg.tips_model,
            max_tokens=cfg.max_tokens,
            timeout=cfg.timeout,
        )
        if llm is None
        else llm
    )
    storage = HistoryDatabase(cfg.db_url) if storage is None else storage

    @contextlib.asynccontextmanager
    async def lifespan(app: Starlette):
        config.configure_logging(cfg.log_level)
        await storage.connect()
        await app.state.controller.initialise()
        logger.info("Ready (%s).", cfg.env.value)
        yield
        await storage.disconnect()
        if isinstance(llm, LLMService):
            await llm.close()

    app = Starlette(
        debug=cfg.env == config.Env.local,
        routes=[
            Route("/state", get_state, methods=["GET"]),
            Route("/ingredients", set_ingredients, methods=["POST"]),
            Route("/preferences", set_preferences, methods=["POST"]),
            Route("/preferences/{tag:str}/toggle", toggle_preference, methods=["POST"]),
            Route("/generate", generate, methods=["POST"]),
            Route("/history/{id:str}/select", select_history_item, methods=["POST"]),
            Route("/history/{id:str}", delete_history_item, methods=["DELETE"]),
            Route("/login", login, methods=["POST"]),
            Route("/logout", logout, methods=["POST"]),
            Route("/start-over", start_over, methods=["POST"]),
            Route("/sidebar", sidebar, methods=["POST"]),
            Route("/login-modal", login_modal, methods=["POST"]),
        ],
        exception_handlers={HTTPException: http_exception},
        lifespan=lifespan,
    )
    app.state.controller = RecipeController(llm=llm, storage=storage)
    return app


app = create_app()
