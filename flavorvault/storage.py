from __future__ import annotations

from typing import Iterable, List, Optional, Protocol

from .models import Recipe


class RecipeStorageError(Exception):
    """Raised when recipes cannot be read from or written to the backend."""


class RecipeRepository(Protocol):
    """Protocol describing the behaviour required by the shells."""

    load_error: Optional[str]

    def list_recipes(self) -> Iterable[Recipe]:
        """Return the stored recipes in insertion order."""

    def add_recipe(
        self,
        *,
        name: str,
        description: str,
        prep_time: int,
        difficulty: int,
        ingredients: List[str],
        steps: List[str],
    ) -> Recipe:
        """Persist a new recipe and return the stored instance."""


__all__ = ["RecipeRepository", "RecipeStorageError"]
