from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from domain.models import ChefTips, Recipe, SavedRecipe


class Display(Enum):
    input = "input"
    loading = "loading"
    error = "error"
    result = "result"


class ErrorKind(Enum):
    validation = "validation"
    generation = "generation"
    login = "login"
    delete = "delete"


@dataclass
class AppState:
    """Everything the page shows. Written only by `RecipeController`."""

    ingredients: str = ""
    preferences: list[str] = field(default_factory=list)
    recipe: Recipe | None = None
    chef_tips: ChefTips | None = None
    current_recipe_id: str | None = None
    is_loading: bool = False
    loading_message: str = ""
    error: str | None = None
    error_kind: ErrorKind | None = None
    user: str | None = None
    history: list[SavedRecipe] = field(default_factory=list)
    sidebar_open: bool = False
    login_modal_open: bool = False

    @property
    def display(self) -> Display:
        if self.is_loading:
            return Display.loading
        if self.recipe is not None:
            return Display.result
        if self.error is not None and self.error_kind is ErrorKind.generation:
            return Display.error
        return Display.input

    def find(self, record_id: str) -> SavedRecipe | None:
        return next((r for r in self.history if r.id == record_id), None)

    def to_dict(self) -> dict[str, Any]:
        return {
            "display": self.display.value,
            "ingredients": self.ingredients,
            "preferences": list(self.preferences),
            "recipe": None if self.recipe is None else self.recipe.to_dict(),
            "chefTips": None if self.chef_tips is None else self.chef_tips.to_dict(),
            "currentRecipeId": self.current_recipe_id,
            "isLoading": self.is_loading,
            "loadingMessage": self.loading_message,
            "error": self.error,
            "errorKind": None if self.error_kind is None else self.error_kind.value,
            "user": self.user,
            "history": [r.to_dict() for r in self.history],
            "sidebarOpen": self.sidebar_open,
            "loginModalOpen": self.login_modal_open,
        }
