import uuid
from dataclasses import dataclass
from typing import Any, Self


def _str(data: dict[str, Any], key: str) -> str:
    value = data.get(key)
    if not isinstance(value, str):
        raise ValueError(f"Expecting a string for '{key}'. {data}")
    return value


def _strs(data: dict[str, Any], key: str) -> tuple[str, ...]:
    value = data.get(key)
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ValueError(f"Expecting a list of strings for '{key}'. {data}")
    return tuple(value)


@dataclass(frozen=True)
class Recipe:
    title: str
    description: str
    ingredients: tuple[str, ...]
    instructions: tuple[str, ...]
    prep_time: str
    cook_time: str
    servings: str

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Self:
        return cls(
            title=_str(data, "title"),
            description=_str(data, "description"),
            ingredients=_strs(data, "ingredients"),
            instructions=_strs(data, "instructions"),
            prep_time=_str(data, "prepTime"),
            cook_time=_str(data, "cookTime"),
            servings=_str(data, "servings"),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "title": self.title,
            "description": self.description,
            "ingredients": list(self.ingredients),
            "instructions": list(self.instructions),
            "prepTime": self.prep_time,
            "cookTime": self.cook_time,
            "servings": self.servings,
        }


@dataclass(frozen=True)
class ChefTips:
    cooking_tip: str
    beverage_pairing: str

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Self:
        return cls(
            cooking_tip=_str(data, "cookingTip"),
            beverage_pairing=_str(data, "beveragePairing"),
        )

    def to_dict(self) -> dict[str, str]:
        return {
            "cookingTip": self.cooking_tip,
            "beveragePairing": self.beverage_pairing,
        }


@dataclass(frozen=True)
class SavedRecipe:
    """A generated recipe as kept in a user's history."""

    id: str
    recipe: Recipe
    chef_tips: ChefTips | None
    timestamp: int

    @classmethod
    def create(
        cls, recipe: Recipe, chef_tips: ChefTips | None, *, timestamp: int
    ) -> Self:
        return cls(
            id=f"{timestamp}-{uuid.uuid4().hex[:8]}",
            recipe=recipe,
            chef_tips=chef_tips,
            timestamp=timestamp,
        )

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Self:
        recipe = data.get("recipe")
        if not isinstance(recipe, dict):
            raise ValueError(f"Expecting an object for 'recipe'. {data}")
        tips = data.get("chefTips")
        if tips is not None and not isinstance(tips, dict):
            raise ValueError(f"Expecting an object or null for 'chefTips'. {data}")
        timestamp = data.get("timestamp")
        if not isinstance(timestamp, int) or isinstance(timestamp, bool):
            raise ValueError(f"Expecting an integer for 'timestamp'. {data}")
        return cls(
            id=_str(data, "id"),
            recipe=Recipe.from_dict(recipe),
            chef_tips=None if tips is None else ChefTips.from_dict(tips),
            timestamp=timestamp,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "recipe": self.recipe.to_dict(),
            "chefTips": None if self.chef_tips is None else self.chef_tips.to_dict(),
            "timestamp": self.timestamp,
        }
