"""Filtering, leftover ranking and random picks over a snapshot of recipes.

Nothing in here touches storage. Every function takes the recipes it works on
and returns a fresh list, so callers can hand in whatever the repository
currently holds.
"""

from __future__ import annotations

import random
from typing import Callable, Iterable, List, NamedTuple, Optional, Sequence

from .models import Recipe

RandomIndex = Callable[[int], int]


class RecipeMatch(NamedTuple):
    recipe: Recipe
    match_count: int


def normalize_ingredients(raw: str | Iterable[str]) -> List[str]:
    """Turn comma separated text (or a list of entries) into lookup terms.

    Entries are trimmed and lowercased, and blank ones are dropped.
    """

    items = raw.split(",") if isinstance(raw, str) else raw
    terms = (item.strip().lower() for item in items)
    return [term for term in terms if term]


def filter_by_constraints(
    recipes: Iterable[Recipe],
    max_prep_time: int = 0,
    max_difficulty: int = 0,
    ingredient_query: str = "",
) -> List[Recipe]:
    """Return the recipes satisfying every active constraint, in input order.

    A limit of zero or less disables that limit, and so does a blank
    ingredient query.
    """

    query = (ingredient_query or "").lower()
    has_query = bool(query.strip())

    return [
        recipe
        for recipe in recipes
        if (max_prep_time <= 0 or recipe.prep_time <= max_prep_time)
        and (max_difficulty <= 0 or recipe.difficulty <= max_difficulty)
        and (not has_query or recipe.contains_ingredient(query))
    ]


def rank_by_ingredient_overlap(
    recipes: Iterable[Recipe],
    available_ingredients: Sequence[str],
) -> List[RecipeMatch]:
    """Rank recipes by how many of ``available_ingredients`` they use.

    Recipes without a single match are left out. ``sorted`` is stable, so
    recipes with the same count stay in input order.
    """

    if not available_ingredients:
        return []

    matches = []
    for recipe in recipes:
        count = recipe.count_ingredient_matches(available_ingredients)
        if count > 0:
            matches.append(RecipeMatch(recipe, count))

    return sorted(matches, key=lambda match: match.match_count, reverse=True)


def pick_random(
    recipes: Sequence[Recipe],
    random_index: RandomIndex = random.randrange,
) -> Optional[Recipe]:
    if not recipes:
        return None
    return recipes[random_index(len(recipes))]


__all__ = [
    "RandomIndex",
    "RecipeMatch",
    "filter_by_constraints",
    "normalize_ingredients",
    "pick_random",
    "rank_by_ingredient_overlap",
]
