from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable, Tuple

# Keys written by the original console tool, mapped to the current field names.
LEGACY_KEYS = {
    "Name": "name",
    "Beschreibung": "description",
    "Zubereitungszeit": "prep_time",
    "Schwierigkeitsgrad": "difficulty",
    "Zutaten": "ingredients",
    "Zubereitungsschritte": "steps",
}


def _parse_entries(value: Any, field_name: str) -> Tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        return tuple(line.strip() for line in value.splitlines() if line.strip())
    if not isinstance(value, (list, tuple)):
        raise TypeError(f"{field_name} must be a list of strings, not {type(value).__name__}")

    for item in value:
        if not isinstance(item, str):
            raise TypeError(f"{field_name} must only contain strings, found {item!r}")
    return tuple(value)


@dataclass(frozen=True)
class Recipe:
    """Domain object representing a stored recipe.

    Values are kept exactly as given. Range checks on ``prep_time`` and
    ``difficulty`` belong to whoever collects the input.
    """

    name: str
    description: str
    prep_time: int
    difficulty: int
    ingredients: Tuple[str, ...] = field(default_factory=tuple)
    steps: Tuple[str, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        object.__setattr__(self, "ingredients", tuple(self.ingredients))
        object.__setattr__(self, "steps", tuple(self.steps))

    def contains_ingredient(self, query: str) -> bool:
        """Return ``True`` if any ingredient contains ``query``, ignoring case."""

        needle = query.lower()
        return any(needle in ingredient.lower() for ingredient in self.ingredients)

    def count_ingredient_matches(self, candidates: Iterable[str]) -> int:
        """Count the candidates that match at least one of the ingredients.

        Every candidate is counted on its own, so two candidates hitting the
        same stored ingredient both count.
        """

        return sum(1 for candidate in candidates if self.contains_ingredient(candidate))

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "prep_time": self.prep_time,
            "difficulty": self.difficulty,
            "ingredients": list(self.ingredients),
            "steps": list(self.steps),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Recipe":
        """Build a recipe from stored data.

        Ingredients or steps stored as one block of text are split into lines.
        Raises :class:`TypeError` for entries that are not strings.
        """

        values = {LEGACY_KEYS.get(key, key): value for key, value in data.items()}
        return cls(
            name=values.get("name") or "",
            description=values.get("description") or "",
            prep_time=int(values.get("prep_time") or 0),
            difficulty=int(values.get("difficulty") or 0),
            ingredients=_parse_entries(values.get("ingredients"), "ingredients"),
            steps=_parse_entries(values.get("steps"), "steps"),
        )


__all__ = ["Recipe"]
