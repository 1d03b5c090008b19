from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Iterable, List, Optional

from .models import Recipe
from .storage import RecipeRepository, RecipeStorageError

logger = logging.getLogger(__name__)

DEFAULT_RECIPES_FILE = "recipes.json"


class JsonFileRecipeStorage(RecipeRepository):
    """Recipe storage backed by a single JSON file.

    The file is read once when the storage is created and rewritten in full
    after every added recipe. A file that cannot be read leaves the storage
    empty and the reason in :attr:`load_error`.
    """

    def __init__(self, path: str | os.PathLike[str] = DEFAULT_RECIPES_FILE) -> None:
        self._path = Path(path)
        self._recipes: List[Recipe] = []
        self.load_error: Optional[str] = None

        try:
            self._recipes = self._read()
        except RecipeStorageError as exc:
            logger.warning("Could not load recipes from %s: %s", self._path, exc)
            self.load_error = str(exc)
        else:
            logger.info("Loaded %d recipes from %s", len(self._recipes), self._path)

    @classmethod
    def from_env(cls) -> "JsonFileRecipeStorage":
        """Build a storage instance from environment variables."""

        return cls(os.environ.get("RECIPES_FILE", DEFAULT_RECIPES_FILE))

    @property
    def path(self) -> Path:
        return self._path

    def list_recipes(self) -> Iterable[Recipe]:
        return list(self._recipes)

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
        recipe = Recipe(
            name=name,
            description=description,
            prep_time=prep_time,
            difficulty=difficulty,
            ingredients=ingredients,
            steps=steps,
        )
        self._recipes.append(recipe)
        self._write()
        return recipe

    def _read(self) -> List[Recipe]:
        if not self._path.exists():
            return []

        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            raise RecipeStorageError(str(exc)) from exc

        if data is None:
            return []
        if not isinstance(data, list):
            raise RecipeStorageError(f"Expected a list of recipes in {self._path}.")

        try:
            return [Recipe.from_dict(item) for item in data]
        except (AttributeError, TypeError, ValueError) as exc:
            raise RecipeStorageError(f"Malformed recipe in {self._path}: {exc}") from exc

    def _write(self) -> None:
        payload = json.dumps(
            [recipe.to_dict() for recipe in self._recipes],
            indent=2,
            ensure_ascii=False,
        )
        tmp_name = None
        try:
            with tempfile.NamedTemporaryFile(
                "w",
                encoding="utf-8",
                dir=self._path.parent,
                prefix=f".{self._path.name}.",
                suffix=".tmp",
                delete=False,
            ) as handle:
                tmp_name = handle.name
                handle.write(payload)
            os.replace(tmp_name, self._path)
        except OSError as exc:
            if tmp_name is not None and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise RecipeStorageError(f"Failed to write {self._path}: {exc}") from exc
        logger.info("Saved %d recipes to %s", len(self._recipes), self._path)


__all__ = ["DEFAULT_RECIPES_FILE", "JsonFileRecipeStorage"]
