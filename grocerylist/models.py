"""Data models for meal plans and grocery lists."""

from dataclasses import dataclass, field
from typing import Any, Optional


def _require(condition: bool, message: str):
    if not condition:
        raise ValueError(message)


@dataclass
class PlanRecipe:
    """A recipe assigned to a meal slot."""
    name: str
    ingredients: list[str] = field(default_factory=list)
    calories: Optional[float] = None
    prep_time: Optional[str] = None
    # Anything else the recipe API returned, kept so it survives a save
    extra: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict:
        data = dict(self.extra)
        data["name"] = self.name
        data["ingredients"] = list(self.ingredients)
        if self.calories is not None:
            data["calories"] = self.calories
        if self.prep_time is not None:
            data["prep_time"] = self.prep_time
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "PlanRecipe":
        _require(isinstance(data, dict), "recipe must be an object")

        ingredients = data.get("ingredients") or []
        _require(isinstance(ingredients, list), "recipe ingredients must be a list")
        for ing in ingredients:
            _require(isinstance(ing, str), f"ingredient must be a string, got {ing!r}")

        calories = data.get("calories")
        extra = {
            k: v for k, v in data.items()
            if k not in ("name", "title", "ingredients", "calories", "prep_time")
        }

        return cls(
            name=str(data.get("name") or data.get("title") or ""),
            ingredients=list(ingredients),
            calories=float(calories) if calories is not None else None,
            prep_time=data.get("prep_time"),
            extra=extra,
        )


@dataclass
class DayPlan:
    """One day of a meal plan, keyed by meal slot."""
    day: int
    meals: dict[str, Optional[PlanRecipe]] = field(default_factory=dict)
    date: Optional[str] = None

    def get_recipes(self) -> list[PlanRecipe]:
        """Get the recipes for the day, skipping empty slots."""
        return [recipe for recipe in self.meals.values() if recipe]

    def to_dict(self) -> dict:
        data = {
            "day": self.day,
            "meals": {
                slot: recipe.to_dict() if recipe else None
                for slot, recipe in self.meals.items()
            },
        }
        if self.date is not None:
            data["date"] = self.date
        return data

    @classmethod
    def from_dict(cls, data: dict, default_day: int = 1) -> "DayPlan":
        _require(isinstance(data, dict), "day must be an object")

        meals = data.get("meals") or {}
        _require(isinstance(meals, dict), "day meals must be an object keyed by meal slot")

        return cls(
            day=int(data.get("day", default_day)),
            meals={
                str(slot): PlanRecipe.from_dict(recipe) if recipe else None
                for slot, recipe in meals.items()
            },
            date=data.get("date"),
        )


@dataclass
class MealPlan:
    """A multi-day meal plan."""
    id: str
    user_id: str = ""
    created_at: str = ""
    date_range: Optional[str] = None
    days: list[DayPlan] = field(default_factory=list)

    def to_dict(self) -> dict:
        data = {
            "id": self.id,
            "user_id": self.user_id,
            "created_at": self.created_at,
            "days": [day.to_dict() for day in self.days],
        }
        if self.date_range is not None:
            data["date_range"] = self.date_range
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "MealPlan":
        _require(isinstance(data, dict), "meal plan must be an object")
        _require(data.get("id") not in (None, ""), "meal plan requires an id")

        # Plans saved by the web app nest the days under plan_json
        body = data.get("plan_json") if isinstance(data.get("plan_json"), dict) else data
        days = body.get("days") or []
        _require(isinstance(days, list), "meal plan days must be a list")

        return cls(
            id=str(data["id"]),
            user_id=str(data.get("user_id", "")),
            created_at=str(data.get("created_at", "")),
            date_range=data.get("date_range"),
            days=[DayPlan.from_dict(day, default_day=i + 1) for i, day in enumerate(days)],
        )


@dataclass
class GroceryItem:
    """A single line on the grocery list."""
    name: str
    original: str = ""
    checked: bool = False

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "original": self.original,
            "checked": self.checked,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "GroceryItem":
        _require(isinstance(data, dict), "grocery item must be an object")
        _require(isinstance(data.get("name"), str), "grocery item requires a string name")
        original = data.get("original", "")
        checked = data.get("checked", False)
        _require(isinstance(original, str), "grocery item original must be a string")
        _require(isinstance(checked, bool), f"grocery item checked must be true or false, got {checked!r}")

        return cls(name=data["name"], original=original, checked=checked)


@dataclass
class GroceryList:
    """A categorized grocery list derived from a meal plan.

    ``total_items`` is the count at derivation time and is not kept in sync
    with later edits; use ``GroceryListEngine.stats`` for live counts.
    """
    categories: dict[str, list[GroceryItem]] = field(default_factory=dict)
    total_items: int = 0
    generated_at: str = ""

    def is_empty(self) -> bool:
        return not any(self.categories.values())

    def to_dict(self) -> dict:
        return {
            "categories": {
                category: [item.to_dict() for item in items]
                for category, items in self.categories.items()
            },
            "totalItems": self.total_items,
            "generatedAt": self.generated_at,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "GroceryList":
        _require(isinstance(data, dict), "grocery list must be an object")

        categories = data.get("categories") or {}
        _require(isinstance(categories, dict), "grocery list categories must be an object")

        parsed: dict[str, list[GroceryItem]] = {}
        for category, items in categories.items():
            _require(isinstance(items, list), f"category {category!r} must be a list")
            if not items:
                continue

            parsed_items = [GroceryItem.from_dict(item) for item in items]
            names = [item.name.lower() for item in parsed_items]
            _require(
                len(set(names)) == len(names),
                f"category {category!r} lists the same item more than once",
            )
            parsed[str(category)] = parsed_items

        return cls(
            categories=parsed,
            total_items=int(data.get("totalItems", data.get("total_items", 0)) or 0),
            generated_at=str(data.get("generatedAt", data.get("generated_at", "")) or ""),
        )
