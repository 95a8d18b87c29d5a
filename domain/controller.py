"""Turns user actions into state changes.

The controller owns `AppState` and is the only writer. Every multi-step
action awaits one outbound call at a time.

`start_over` and `logout` invalidate a generation that is still in flight:
when it completes it leaves the display alone. After a `start_over` it still
saves its recipe for whoever is logged in at completion. After a `logout` the
recipe is dropped unless the user who asked for it has logged back in.
`select_history_item` invalidates it too.
"""

import logging
from typing import Callable, Iterable

from domain import services
from domain.models import SavedRecipe
from domain.outcomes import best_effort
from domain.repository import HistoryStorage
from domain.services import RecipeGenerator, now_ms
from domain.state import AppState, ErrorKind


logger = logging.getLogger(__name__)


LOADING_RECIPE = "Crafting your unique recipe..."
LOADING_TIPS = "Consulting the chef for pro tips..."
EMPTY_INGREDIENTS = "Please enter at least one ingredient."
GENERATION_FAILED = "Failed to generate recipe."
UNKNOWN_ERROR = "An unknown error occurred."
LOGIN_FAILED = "Failed to log in. Please try again."
DELETE_FAILED = "Could not delete recipe."


class GenerationInProgress(Exception):
    pass


class RecipeController:
    def __init__(
        self,
        *,
        llm: RecipeGenerator,
        storage: HistoryStorage,
        state: AppState | None = None,
        clock: Callable[[], int] = now_ms,
    ) -> None:
        self.llm = llm
        self.storage = storage
        self.state = AppState() if state is None else state
        self.clock = clock
        self._epoch = 0
        self._logouts = 0

    def _invalidate(self) -> None:
        self._epoch += 1

    def _is_current(self, epoch: int) -> bool:
        return epoch == self._epoch

    def _fail(self, msg: str, kind: ErrorKind) -> None:
        self.state.error = msg
        self.state.error_kind = kind

    def _clear_error(self) -> None:
        self.state.error = None
        self.state.error_kind = None

    def _clear_display(self) -> None:
        self.state.recipe = None
        self.state.chef_tips = None
        self.state.current_recipe_id = None

    async def initialise(self) -> None:
        """Restore a stored session and its history."""
        try:
            user = await self.storage.get_user()
            if not user:
                return
            history = await self.storage.get_history(user)
        except Exception:
            logger.exception("Failed to restore the stored session.")
            return
        self.state.user = user
        self.state.history = history

    def set_ingredients(self, ingredients: str) -> None:
        self.state.ingredients = ingredients

    def set_preferences(self, preferences: Iterable[str]) -> None:
        tags: list[str] = []
        for tag in preferences:
            tag = tag.strip()
            if tag and tag not in tags:
                tags.append(tag)
        self.state.preferences = tags

    def toggle_preference(self, tag: str) -> None:
        tag = tag.strip()
        if not tag:
            return
        if tag in self.state.preferences:
            self.state.preferences.remove(tag)
        else:
            self.state.preferences.append(tag)

    async def generate(self) -> None:
        state = self.state
        if state.is_loading:
            raise GenerationInProgress("A recipe is already being generated.")

        ingredients = state.ingredients
        if not ingredients.strip():
            self._fail(EMPTY_INGREDIENTS, ErrorKind.validation)
            return

        preferences = list(state.preferences)
        requested_by = state.user
        logouts = self._logouts
        self._invalidate()
        epoch = self._epoch

        state.is_loading = True
        self._clear_error()
        self._clear_display()

        try:
            state.loading_message = LOADING_RECIPE
            try:
                recipe = await services.create_recipe(
                    ingredients, preferences, llm=self.llm
                )
            except Exception as e:
                logger.exception("Recipe generation failed.")
                if self._is_current(epoch):
                    self._fail(
                        f"{GENERATION_FAILED} {str(e) or UNKNOWN_ERROR}",
                        ErrorKind.generation,
                    )
                return

            if self._is_current(epoch):
                state.recipe = recipe
                state.loading_message = LOADING_TIPS

            tips = (await services.chef_tips(recipe, llm=self.llm)).value
            if self._is_current(epoch):
                state.chef_tips = tips

            owner = state.user
            if owner is None:
                return
            if self._logouts != logouts and owner != requested_by:
                logger.info("Dropping a recipe generated for %s.", requested_by)
                return

            record, saved = await services.save_recipe(
                owner, recipe, tips, storage=self.storage, timestamp=self.clock()
            )
            if saved.value is None:
                return
            if state.user == owner:
                state.history = saved.value
            if self._is_current(epoch):
                state.current_recipe_id = record.id
        finally:
            if self._is_current(epoch):
                state.is_loading = False
                state.loading_message = ""

    def select_history_item(self, item: SavedRecipe) -> None:
        self._invalidate()
        self.state.is_loading = False
        self.state.loading_message = ""
        self.state.recipe = item.recipe
        self.state.chef_tips = item.chef_tips
        self.state.current_recipe_id = item.id
        self._clear_error()
        self.state.ingredients = ", ".join(item.recipe.ingredients)

    async def delete_recipe(self, item: SavedRecipe) -> None:
        user = self.state.user
        if user is None:
            return
        try:
            history = await self.storage.delete_recipe(user, item.id)
        except Exception:
            logger.exception("Failed to delete recipe %s.", item.id)
            self._fail(DELETE_FAILED, ErrorKind.delete)
            return

        self.state.history = history
        if self.state.current_recipe_id == item.id:
            self._clear_display()
            self.state.ingredients = ""

    async def login(self, username: str) -> None:
        username = username.strip()
        logged_in = False
        try:
            if not username:
                raise ValueError("Username must not be blank.")
            await self.storage.login(username)
            logged_in = True
            history = await self.storage.get_history(username)
        except Exception:
            logger.exception("Login failed.")
            if logged_in:
                await best_effort(self.storage.logout(), step="Undoing login")
            self._fail(LOGIN_FAILED, ErrorKind.login)
            return

        self.state.user = username
        self.state.history = history
        self.state.login_modal_open = False
        if self.state.error_kind is ErrorKind.login:
            self._clear_error()

    async def logout(self) -> None:
        await best_effort(self.storage.logout(), step="Logout")
        self._invalidate()
        self._logouts += 1
        state = self.state
        state.user = None
        state.history = []
        self._clear_display()
        self._clear_error()
        state.ingredients = ""
        state.is_loading = False
        state.loading_message = ""
        state.sidebar_open = False

    def start_over(self) -> None:
        self._invalidate()
        state = self.state
        state.ingredients = ""
        state.preferences = []
        self._clear_display()
        self._clear_error()
        state.is_loading = False
        state.loading_message = ""

    def open_sidebar(self) -> None:
        self.state.sidebar_open = True

    def close_sidebar(self) -> None:
        self.state.sidebar_open = False

    def open_login(self) -> None:
        self.state.login_modal_open = True

    def close_login(self) -> None:
        self.state.login_modal_open = False
