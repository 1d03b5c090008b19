from __future__ import annotations

from pathlib import Path
import sys

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from flavorvault.matching import (
    RecipeMatch,
    filter_by_constraints,
    normalize_ingredients,
    pick_random,
    rank_by_ingredient_overlap,
)
from flavorvault.models import Recipe


def make_recipe(name: str, ingredients: list[str], prep_time: int = 20, difficulty: int = 2) -> Recipe:
    return Recipe(
        name=name,
        description="",
        prep_time=prep_time,
        difficulty=difficulty,
        ingredients=ingredients,
        steps=[],
    )


@pytest.fixture
def recipes() -> list[Recipe]:
    return [
        make_recipe("Soup", ["carrot", "potato"], prep_time=30, difficulty=2),
        make_recipe("Salad", ["lettuce", "carrot"], prep_time=10, difficulty=1),
        make_recipe("Stew", ["potato", "beef"], prep_time=120, difficulty=4),
    ]


def names(items) -> list[str]:
    return [item.name for item in items]


@pytest.mark.parametrize("max_prep_time", [0, -1, -500])
def test_non_positive_time_limit_is_unconstrained(recipes, max_prep_time):
    assert filter_by_constraints(recipes, max_prep_time, 0, "") == recipes


def test_all_constraints_disabled_is_identity(recipes):
    result = filter_by_constraints(recipes, 0, 0, "   ")

    assert result == recipes
    assert result is not recipes


def test_filter_by_time_limit(recipes):
    assert names(filter_by_constraints(recipes, 30, 0, "")) == ["Soup", "Salad"]


@pytest.mark.parametrize(
    "max_difficulty,expected",
    [
        (1, ["Salad"]),
        (2, ["Soup", "Salad"]),
        (4, ["Soup", "Salad", "Stew"]),
    ],
)
def test_filter_by_difficulty_keeps_order(recipes, max_difficulty, expected):
    assert names(filter_by_constraints(recipes, 0, max_difficulty, "")) == expected


def test_filter_by_ingredient_and_difficulty(recipes):
    result = filter_by_constraints(recipes, max_prep_time=0, max_difficulty=3, ingredient_query="carrot")

    assert names(result) == ["Soup", "Salad"]


def test_filter_ingredient_query_ignores_case(recipes):
    assert names(filter_by_constraints(recipes, 0, 0, "BEEF")) == ["Stew"]


def test_filter_constraints_are_combined(recipes):
    assert names(filter_by_constraints(recipes, 60, 3, "potato")) == ["Soup"]


def test_filter_returns_empty_list_when_nothing_matches(recipes):
    assert filter_by_constraints(recipes, 5, 0, "") == []
    assert filter_by_constraints([], 10, 2, "carrot") == []


def test_filter_uses_out_of_range_values_as_given():
    odd = make_recipe("Odd", ["salt"], prep_time=-5, difficulty=9)

    assert filter_by_constraints([odd], 1, 0, "") == [odd]
    assert filter_by_constraints([odd], 0, 5, "") == []


def test_rank_by_overlap(recipes):
    result = rank_by_ingredient_overlap(recipes, ["carrot", "potato"])

    assert [(match.recipe.name, match.match_count) for match in result] == [
        ("Soup", 2),
        ("Salad", 1),
        ("Stew", 1),
    ]
    assert all(isinstance(match, RecipeMatch) for match in result)


def test_rank_ties_keep_input_order():
    recipes = [
        make_recipe("A", ["egg"]),
        make_recipe("B", ["egg", "milk"]),
        make_recipe("C", ["egg"]),
        make_recipe("D", ["flour", "milk", "egg"]),
        make_recipe("E", ["egg"]),
    ]

    result = rank_by_ingredient_overlap(recipes, ["egg", "milk", "flour"])

    assert [match.recipe.name for match in result] == ["D", "B", "A", "C", "E"]
    counts = [match.match_count for match in result]
    assert counts == sorted(counts, reverse=True)


def test_rank_excludes_recipes_without_matches(recipes):
    result = rank_by_ingredient_overlap(recipes, ["beef"])

    assert [(match.recipe.name, match.match_count) for match in result] == [("Stew", 1)]


def test_rank_with_no_available_ingredients(recipes):
    assert rank_by_ingredient_overlap(recipes, []) == []


def test_rank_with_no_matches(recipes):
    assert rank_by_ingredient_overlap(recipes, ["chocolate"]) == []


def test_rank_counts_each_candidate_separately():
    recipe = make_recipe("Pie", ["sweet potato"])

    [match] = rank_by_ingredient_overlap([recipe], ["potato", "sweet"])

    assert match.match_count == 2


def test_rank_does_not_normalize_candidates(recipes):
    # Padding is not stripped by the engine itself.
    assert rank_by_ingredient_overlap(recipes, [" beef "]) == []


def test_normalize_ingredients_from_text():
    assert normalize_ingredients(" Carrot, POTATO ,, ,beef ") == ["carrot", "potato", "beef"]


def test_normalize_ingredients_from_list():
    assert normalize_ingredients(["  Egg", "", "   "]) == ["egg"]


def test_pick_random_uses_index_source(recipes):
    seen = []

    def fixed(n: int) -> int:
        seen.append(n)
        return 1

    assert pick_random(recipes, fixed) is recipes[1]
    assert seen == [3]


def test_pick_random_from_empty_sequence():
    assert pick_random([], lambda n: 0) is None


def test_pick_random_default_source(recipes):
    assert pick_random(recipes) in recipes
