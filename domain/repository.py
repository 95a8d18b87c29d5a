from typing import Protocol

from domain.models import SavedRecipe


class StorageError(Exception):
    pass


class RecipeNotFound(StorageError):
    pass


class HistoryStorage(Protocol):
    """Session and per-user recipe history as required by the controller."""

    async def connect(self) -> None:
        ...

    async def disconnect(self) -> None:
        ...

    async def get_user(self) -> str | None:
        """The username of the stored session, if any."""
        ...

    async def login(self, username: str) -> None:
        ...

    async def logout(self) -> None:
        ...

    async def get_history(self, username: str) -> list[SavedRecipe]:
        """Return the user's saved recipes, most recent first."""
        ...

    async def save_recipe(self, username: str, record: SavedRecipe) -> list[SavedRecipe]:
        """Persist a record and return the updated history."""
        ...

    async def delete_recipe(self, username: str, record_id: str) -> list[SavedRecipe]:
        """Remove a record, raising `RecipeNotFound` if missing, and return the updated history."""
        ...
