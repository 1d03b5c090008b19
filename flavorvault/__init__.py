import os
import random
from typing import Optional

from flask import Flask, flash, redirect, render_template, request, url_for

from .inputs import (
    DIFFICULTY_RANGE,
    MAX_INT,
    parse_int_in_range,
    parse_lines,
    parse_required_text,
    parse_text,
)
from .json_storage import JsonFileRecipeStorage
from .matching import (
    filter_by_constraints,
    normalize_ingredients,
    pick_random,
    rank_by_ingredient_overlap,
)
from .models import Recipe
from .shell import menu_command
from .storage import RecipeRepository, RecipeStorageError

try:
    from .gcp_storage import FirestoreRecipeStorage
except ImportError:  # pragma: no cover - allows running without optional deps
    FirestoreRecipeStorage = None  # type: ignore[assignment,misc]

FILTER_ARGS = ("max_prep_time", "max_difficulty", "ingredient")


def create_app(
    storage: Optional[RecipeRepository] = None,
    random_index=random.randrange,
) -> Flask:
    """Create and configure the Flask application.

    Parameters
    ----------
    storage:
        Optional recipe repository. When ``None`` the backend named by the
        ``RECIPE_BACKEND`` environment variable is used (see
        :func:`storage_from_env`).
    random_index:
        Callable returning an index in ``[0, n)`` for random suggestions.
    """

    app = Flask(__name__)
    app.secret_key = os.environ.get("FLASK_SECRET_KEY", "development-secret-change-me")

    if storage is None:
        storage = storage_from_env()
    app.config["RECIPE_STORAGE"] = storage
    app.config["RANDOM_INDEX"] = random_index

    app.cli.add_command(menu_command)

    def _recipes() -> list[Recipe]:
        try:
            return list(app.config["RECIPE_STORAGE"].list_recipes())
        except RecipeStorageError as exc:
            flash(f"Failed to load recipes: {exc}", "error")
            return []

    @app.get("/")
    def index() -> str:
        recipes = _recipes()
        selected_recipe: Recipe | None = None
        selected = request.args.get("selected", type=int)

        if recipes:
            if selected is None or not 1 <= selected <= len(recipes):
                selected = 1
            selected_recipe = recipes[selected - 1]

        return render_template(
            "index.html",
            recipes=recipes,
            selected_recipe=selected_recipe,
            selected=selected,
            load_error=getattr(app.config["RECIPE_STORAGE"], "load_error", None),
            title="Recipe Library",
        )

    @app.get("/recipes/new")
    def new_recipe() -> str:
        return render_template("add_recipe.html", title="Add recipe")

    @app.post("/recipes")
    def create_recipe() -> str:
        storage_backend: RecipeRepository = app.config["RECIPE_STORAGE"]

        results = {
            "name": parse_required_text(request.form.get("name"), "name"),
            "description": parse_text(request.form.get("description")),
            "prep_time": parse_int_in_range(request.form.get("prep_time"), 1, MAX_INT),
            "difficulty": parse_int_in_range(request.form.get("difficulty"), *DIFFICULTY_RANGE),
            "ingredients": parse_lines(request.form.get("ingredients")),
            "steps": parse_lines(request.form.get("steps")),
        }

        errors = [result.error for result in results.values() if not result.ok]
        if errors:
            for error in errors:
                flash(error, "error")
            return redirect(url_for("new_recipe"))

        values = {key: result.value for key, result in results.items()}

        try:
            storage_backend.add_recipe(**values)
        except RecipeStorageError as exc:
            flash(f"Failed to save recipe: {exc}", "error")
            return redirect(url_for("index"))

        flash(f"Recipe '{values['name']}' saved.", "success")
        return redirect(url_for("index", selected=len(_recipes())))

    @app.get("/suggest")
    def suggest() -> str:
        recipes = _recipes()
        has_recipes = bool(recipes)
        filtered = any(arg in request.args for arg in FILTER_ARGS)

        if filtered and has_recipes:
            max_prep_time = parse_int_in_range(
                request.args.get("max_prep_time") or "0", 0, MAX_INT
            )
            max_difficulty = parse_int_in_range(
                request.args.get("max_difficulty") or "0", 0, DIFFICULTY_RANGE[1]
            )
            for result in (max_prep_time, max_difficulty):
                if not result.ok:
                    flash(result.error, "error")
            if not (max_prep_time.ok and max_difficulty.ok):
                return render_template(
                    "suggest.html",
                    recipe=None,
                    has_recipes=has_recipes,
                    filtered=filtered,
                    invalid=True,
                    args=request.args,
                    title="Random suggestion",
                )

            recipes = filter_by_constraints(
                recipes,
                max_prep_time.value,
                max_difficulty.value,
                request.args.get("ingredient", ""),
            )

        recipe = pick_random(recipes, app.config["RANDOM_INDEX"])

        return render_template(
            "suggest.html",
            recipe=recipe,
            has_recipes=has_recipes,
            filtered=filtered,
            invalid=False,
            args=request.args,
            title="Random suggestion",
        )

    @app.get("/leftovers")
    def leftovers() -> str:
        raw = request.args.get("ingredients")
        available = normalize_ingredients(raw or "")
        matches = rank_by_ingredient_overlap(_recipes(), available) if available else []

        return render_template(
            "leftovers.html",
            searched=raw is not None,
            available=available,
            matches=matches,
            title="Use up leftovers",
        )

    return app


def storage_from_env() -> RecipeRepository:
    """Build the storage backend selected through ``RECIPE_BACKEND``."""

    backend = os.environ.get("RECIPE_BACKEND", "json").lower()
    if backend == "json":
        return JsonFileRecipeStorage.from_env()
    if backend == "firestore":
        if FirestoreRecipeStorage is None:
            raise RuntimeError(
                "google-cloud-firestore is not installed. Install the firestore extra "
                "or use the json backend."
            )
        return FirestoreRecipeStorage.from_env()
    raise RuntimeError(f"Unknown recipe backend: {backend!r}")


__all__ = ["create_app", "storage_from_env", "Recipe"]
