import json
import logging

from databases import Database
from databases.interfaces import Record

from domain.models import ChefTips, Recipe, SavedRecipe
from domain.repository import RecipeNotFound, StorageError


logger = logging.getLogger(__name__)


CREATE_SESSION_TABLE = """
CREATE TABLE IF NOT EXISTS Session (slot INTEGER PRIMARY KEY, username VARCHAR(256) NOT NULL)
"""


CREATE_SAVED_RECIPES_TABLE = """
CREATE TABLE IF NOT EXISTS SavedRecipes (
    id VARCHAR(64) NOT NULL,
    username VARCHAR(256) NOT NULL,
    recipe TEXT NOT NULL,
    chef_tips TEXT,
    timestamp BIGINT NOT NULL,
    PRIMARY KEY (username, id)
)
"""


GET_USER = "SELECT username FROM Session WHERE slot = 1"


CLEAR_SESSION = "DELETE FROM Session"


CREATE_SESSION = "INSERT INTO Session(slot, username) VALUES (1, :username)"


LIST_SAVED_RECIPES = """
SELECT * FROM SavedRecipes WHERE username = :username ORDER BY timestamp DESC, id DESC
"""


GET_SAVED_RECIPE = "SELECT id FROM SavedRecipes WHERE username = :username AND id = :id"


CREATE_SAVED_RECIPE = """
INSERT INTO SavedRecipes(id, username, recipe, chef_tips, timestamp)
VALUES (:id, :username, :recipe, :chef_tips, :timestamp)
"""


DELETE_SAVED_RECIPE = "DELETE FROM SavedRecipes WHERE username = :username AND id = :id"


def record_to_saved_recipe(record: Record) -> SavedRecipe:
    tips = record["chef_tips"]
    return SavedRecipe(
        id=record["id"],
        recipe=Recipe.from_dict(json.loads(record["recipe"])),
        chef_tips=None if tips is None else ChefTips.from_dict(json.loads(tips)),
        timestamp=record["timestamp"],
    )


class HistoryDatabase:
    """Session and recipe history kept in a SQL database."""

    def __init__(self, db: Database | str) -> None:
        self.db = Database(db) if isinstance(db, str) else db

    async def connect(self) -> None:
        await self.db.connect()
        await self.db.execute(  # pyright: ignore[reportUnknownMemberType]
            query=CREATE_SESSION_TABLE
        )
        await self.db.execute(  # pyright: ignore[reportUnknownMemberType]
            query=CREATE_SAVED_RECIPES_TABLE
        )

    async def disconnect(self) -> None:
        await self.db.disconnect()

    async def get_user(self) -> str | None:
        result = await self.db.fetch_one(  # pyright: ignore[reportUnknownMemberType]
            GET_USER
        )
        return None if result is None else result["username"]

    async def login(self, username: str) -> None:
        username = username.strip()
        if not username:
            raise ValueError("Username must not be blank.")
        async with self.db.transaction():
            await self.db.execute(  # pyright: ignore[reportUnknownMemberType]
                CLEAR_SESSION
            )
            await self.db.execute(  # pyright: ignore[reportUnknownMemberType]
                CREATE_SESSION, values={"username": username}
            )
        logger.info("Logged in %s", username)

    async def logout(self) -> None:
        await self.db.execute(  # pyright: ignore[reportUnknownMemberType]
            CLEAR_SESSION
        )

    async def get_history(self, username: str) -> list[SavedRecipe]:
        result = await self.db.fetch_all(  # pyright: ignore[reportUnknownMemberType]
            LIST_SAVED_RECIPES, values={"username": username}
        )
        try:
            return [record_to_saved_recipe(r) for r in result]
        except ValueError as e:
            raise StorageError(f"Corrupt history for {username}. {e}") from e

    async def save_recipe(self, username: str, record: SavedRecipe) -> list[SavedRecipe]:
        tips = record.chef_tips
        await self.db.execute(  # pyright: ignore[reportUnknownMemberType]
            CREATE_SAVED_RECIPE,
            values={
                "id": record.id,
                "username": username,
                "recipe": json.dumps(record.recipe.to_dict()),
                "chef_tips": None if tips is None else json.dumps(tips.to_dict()),
                "timestamp": record.timestamp,
            },
        )
        return await self.get_history(username)

    async def delete_recipe(self, username: str, record_id: str) -> list[SavedRecipe]:
        values = {"username": username, "id": record_id}
        async with self.db.transaction():
            found = await self.db.fetch_one(  # pyright: ignore[reportUnknownMemberType]
                GET_SAVED_RECIPE, values=values
            )
            if found is None:
                raise RecipeNotFound(f"{username}/{record_id}")
            await self.db.execute(  # pyright: ignore[reportUnknownMemberType]
                DELETE_SAVED_RECIPE, values=values
            )
        return await self.get_history(username)
