from __future__ import annotations

import logging
import os
from typing import Any, Iterable, List, Optional

from google.api_core import exceptions as gcloud_exceptions
from google.cloud import firestore

from .models import Recipe
from .storage import RecipeRepository, RecipeStorageError

logger = logging.getLogger(__name__)


class FirestoreRecipeStorage(RecipeRepository):
    """GCP backed recipe storage using Firestore."""

    load_error: Optional[str] = None

    def __init__(
        self,
        *,
        project: Optional[str] = None,
        collection_name: str = "recipes",
        client: Any = None,
    ) -> None:
        self._project = project
        self._collection_name = collection_name

        self._firestore_client = client if client is not None else firestore.Client(project=project)
        self._collection = self._firestore_client.collection(collection_name)

    @classmethod
    def from_env(cls) -> "FirestoreRecipeStorage":
        """Build a storage instance from environment variables."""

        project = os.environ.get("GCP_PROJECT")
        collection_name = os.environ.get("RECIPES_COLLECTION", "recipes")
        return cls(project=project, collection_name=collection_name)

    def list_recipes(self) -> Iterable[Recipe]:
        query = self._collection.order_by("created_at", direction=firestore.Query.ASCENDING)
        try:
            docs = list(query.stream())
        except gcloud_exceptions.GoogleAPICallError as exc:
            raise RecipeStorageError(f"Failed to list recipes: {exc}") from exc

        for doc in docs:
            yield Recipe.from_dict(doc.to_dict() or {})

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

        doc = recipe.to_dict()
        doc["created_at"] = firestore.SERVER_TIMESTAMP

        doc_ref = self._collection.document()
        try:
            doc_ref.set(doc)
        except gcloud_exceptions.GoogleAPICallError as exc:
            raise RecipeStorageError(f"Failed to save recipe: {exc}") from exc
        logger.info("Stored recipe %r as %s/%s", name, self._collection_name, doc_ref.id)

        return recipe


__all__ = ["FirestoreRecipeStorage"]
