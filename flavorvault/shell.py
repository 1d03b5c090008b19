"""Interactive terminal menu, available as ``flask --app main menu``."""

from __future__ import annotations

import logging
import random
from typing import Callable, List, Optional

import click
from flask import current_app
from flask.cli import with_appcontext

from .inputs import (
    DIFFICULTY_RANGE,
    MAX_INT,
    is_back_request,
    parse_int_in_range,
    parse_required_text,
    parse_text,
)
from .matching import (
    RandomIndex,
    filter_by_constraints,
    normalize_ingredients,
    pick_random,
    rank_by_ingredient_overlap,
)
from .models import Recipe
from .storage import RecipeRepository, RecipeStorageError

logger = logging.getLogger(__name__)

MENU_OPTIONS = (
    "Add a new recipe",
    "Show all recipes",
    "Suggest a random recipe",
    "Suggest a random recipe with filters",
    "Find recipes for leftovers",
    "Quit",
)


class BackToMenu(Exception):
    """Raised by prompts when the user enters the back sentinel."""


class TerminalShell:
    def __init__(
        self,
        storage: RecipeRepository,
        random_index: RandomIndex = random.randrange,
    ) -> None:
        self.storage = storage
        self.random_index = random_index

    def run(self) -> None:
        self._announce_load()

        actions: dict[str, Callable[[], None]] = {
            "1": self.add_recipe,
            "2": self.show_all_recipes,
            "3": self.suggest_random,
            "4": self.suggest_filtered,
            "5": self.find_leftover_recipes,
        }

        while True:
            self._show_menu()
            choice = self._ask("Your choice:")

            if choice == "6":
                click.echo("Goodbye.")
                return

            action = actions.get(choice)
            if action is None:
                self._error("Invalid choice. Please try again.")
            else:
                try:
                    action()
                except BackToMenu:
                    pass

            click.pause()
            click.clear()

    def add_recipe(self) -> None:
        click.clear()
        self._heading("Add a new recipe")
        self._offer_back()

        name = self._read_required("Recipe name:", "name")
        description = self._read_text("Short description:")
        prep_time = self._read_int("Preparation time (minutes):", 1, MAX_INT, allow_back=True)
        difficulty = self._read_int(
            "Difficulty (1-5):", DIFFICULTY_RANGE[0], DIFFICULTY_RANGE[1], allow_back=True
        )
        ingredients = self._read_list("Enter the ingredients (empty line to finish):")
        steps = self._read_list("Enter the preparation steps (empty line to finish):")

        try:
            self.storage.add_recipe(
                name=name,
                description=description,
                prep_time=prep_time,
                difficulty=difficulty,
                ingredients=ingredients,
                steps=steps,
            )
        except RecipeStorageError as exc:
            logger.error("Saving recipe %r failed: %s", name, exc)
            self._error(f"Failed to save recipes: {exc}")
            return

        click.echo("Recipes saved.")
        click.echo(f"Recipe '{name}' was added.")

    def show_all_recipes(self) -> None:
        while True:
            click.clear()
            self._heading("All recipes")

            recipes = self._recipes()
            if not recipes:
                click.echo("No recipes yet.")
                return

            for number, recipe in enumerate(recipes, start=1):
                click.echo(format_summary(number, recipe))

            choice = self._read_int(
                "\nEnter a recipe number to see details (or 0 to go back):", 0, len(recipes)
            )
            if choice == 0 or not self.show_details(recipes[choice - 1]):
                return

    def suggest_random(self) -> None:
        recipes = self._recipes()
        recipe = pick_random(recipes, self.random_index)
        if recipe is None:
            click.echo("No recipes available for a suggestion.")
            return

        click.echo("Here is a random suggestion for you:")
        self._details_then_maybe_list(recipe)

    def suggest_filtered(self) -> None:
        recipes = self._recipes()
        if not recipes:
            click.echo("No recipes available for a suggestion.")
            return

        click.clear()
        self._heading("Random recipe with filters")
        self._offer_back()

        click.echo("Choose your filters:")
        max_prep_time = self._read_int(
            "Maximum preparation time in minutes (0 for no limit):", 0, MAX_INT
        )
        max_difficulty = self._read_int(
            "Maximum difficulty (1-5, 0 for no limit):", 0, DIFFICULTY_RANGE[1]
        )
        ingredient = self._ask("Contained ingredient (optional, leave empty for any):")

        matches = filter_by_constraints(recipes, max_prep_time, max_difficulty, ingredient)
        recipe = pick_random(matches, self.random_index)
        if recipe is None:
            click.echo("No recipes match your filters.")
            return

        click.echo("\nHere is a random suggestion based on your filters:")
        self._details_then_maybe_list(recipe)

    def find_leftover_recipes(self) -> None:
        recipes = self._recipes()
        if not recipes:
            click.echo("No recipes available to use up leftovers.")
            return

        click.clear()
        self._heading("Use up leftovers")
        self._offer_back()

        available = normalize_ingredients(
            self._ask("Enter the ingredients you want to use (comma separated):")
        )
        if not available:
            click.echo("No ingredients given.")
            return

        click.echo(f"\nLooking for recipes using: {', '.join(available)}")

        matches = rank_by_ingredient_overlap(recipes, available)
        if not matches:
            click.echo("No matching recipes found.")
            return

        click.echo("\nRecipes found (best match first):")
        for number, (recipe, count) in enumerate(matches, start=1):
            click.echo(f"{number}. {recipe.name} - uses {count} of your ingredients")

        choice = self._read_int(
            "\nEnter a recipe number to see details (or 0 to go back):", 0, len(matches)
        )
        if choice > 0:
            self._details_then_maybe_list(matches[choice - 1].recipe)

    def show_details(self, recipe: Recipe) -> bool:
        """Show one recipe until the user navigates away.

        Returns ``True`` when the user asked to go back to the recipe list.
        """

        while True:
            click.clear()
            click.echo(format_details(recipe))

            click.echo("\nNavigation:")
            click.echo("1. Back to the recipe list")
            click.echo("2. Back to the main menu")
            choice = self._ask("Your choice:")

            if choice == "1":
                return True
            if choice == "2":
                return False

            self._error("Invalid choice. Please try again.")
            click.pause()

    def _details_then_maybe_list(self, recipe: Recipe) -> None:
        if self.show_details(recipe):
            self.show_all_recipes()

    def _recipes(self) -> List[Recipe]:
        try:
            return list(self.storage.list_recipes())
        except RecipeStorageError as exc:
            self._error(f"Failed to load recipes: {exc}")
            return []

    def _announce_load(self) -> None:
        load_error = getattr(self.storage, "load_error", None)
        if load_error:
            self._error(f"Failed to load recipes: {load_error}")
            return
        click.echo(f"{len(self._recipes())} recipes loaded.")

    def _show_menu(self) -> None:
        self._heading("FlavorVault")
        for number, label in enumerate(MENU_OPTIONS, start=1):
            click.echo(f"{number}. {label}")

    def _offer_back(self) -> None:
        click.echo("Enter '0' to return to the main menu")
        click.echo("-" * 46)
        answer = self._ask("Press Enter to continue or '0' for the main menu:")
        if is_back_request(answer):
            raise BackToMenu()

    def _read_required(self, prompt: str, field: str) -> str:
        while True:
            text = self._ask(prompt)
            if is_back_request(text):
                raise BackToMenu()
            result = parse_required_text(text, field)
            if result.ok:
                return result.value
            self._error(result.error)

    def _read_text(self, prompt: str) -> str:
        text = self._ask(prompt)
        if is_back_request(text):
            raise BackToMenu()
        return parse_text(text).value

    def _read_int(self, prompt: str, minimum: int, maximum: int, allow_back: bool = False) -> int:
        while True:
            text = self._ask(prompt)
            if allow_back and is_back_request(text):
                raise BackToMenu()
            result = parse_int_in_range(text, minimum, maximum)
            if result.ok:
                return result.value
            self._error(result.error)

    def _read_list(self, prompt: str) -> List[str]:
        click.echo(prompt)
        click.echo("(Enter '0' to return to the main menu)")
        items: List[str] = []
        while True:
            text = self._ask(f"{len(items) + 1}.")
            if not text:
                return items
            if is_back_request(text):
                raise BackToMenu()
            items.append(text)

    def _ask(self, prompt: str) -> str:
        return click.prompt(prompt, default="", show_default=False, prompt_suffix=" ").strip()

    def _heading(self, title: str) -> None:
        click.echo(f"=== {title} ===")

    def _error(self, message: Optional[str]) -> None:
        click.secho(message, fg="red")


def format_summary(number: int, recipe: Recipe) -> str:
    return (
        f"{number}. {recipe.name} "
        f"(prep time: {recipe.prep_time} min, difficulty: {recipe.difficulty}/5)"
    )


def format_details(recipe: Recipe) -> str:
    lines: List[str] = [
        f"=== {recipe.name} ===",
        f"Description: {recipe.description}",
        f"Preparation time: {recipe.prep_time} minutes",
        f"Difficulty: {recipe.difficulty}/5",
        "",
        "Ingredients:",
    ]
    lines.extend(f"- {ingredient}" for ingredient in recipe.ingredients)
    lines.extend(["", "Steps:"])
    lines.extend(f"{number}. {step}" for number, step in enumerate(recipe.steps, start=1))
    return "\n".join(lines)


@click.command("menu")
@with_appcontext
def menu_command() -> None:
    """Browse and add recipes through an interactive terminal menu."""

    TerminalShell(
        current_app.config["RECIPE_STORAGE"],
        current_app.config["RANDOM_INDEX"],
    ).run()


__all__ = ["TerminalShell", "format_details", "format_summary", "menu_command"]
