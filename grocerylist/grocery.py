"""Grocery list derivation from meal plans and list editing."""

import logging
import math
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, Iterator, Optional

import frontmatter

from .ingredients import IngredientClassifier, OTHER
from .models import GroceryItem, GroceryList, MealPlan

logger = logging.getLogger(__name__)


# Cleaned names this short are leftover punctuation or unit fragments
NOISE_MAX_LENGTH = 2

# Display order on the shopping page, which differs from the match order
CATEGORY_PRIORITY = [
    "Proteins", "Vegetables", "Fruits", "Grains & Carbs",
    "Dairy", "Nuts & Seeds", "Herbs & Spices", "Pantry Staples", OTHER,
]

CATEGORY_ICONS = {
    "Proteins": "🥩",
    "Vegetables": "🥬",
    "Fruits": "🍎",
    "Grains & Carbs": "🌾",
    "Dairy": "🥛",
    "Pantry Staples": "🏺",
    "Herbs & Spices": "🌿",
    "Nuts & Seeds": "🥜",
    OTHER: "📦",
}

DEFAULT_MINUTES_PER_ITEM = 1.5


class IndexOutOfRange(IndexError):
    """The (category, index) pair does not identify an item on the list."""

    def __init__(self, category: str, index: int):
        self.category = category
        self.index = index
        super().__init__(f"No item at index {index} in category {category!r}")


@dataclass
class GroceryStats:
    """Live counts over a grocery list."""
    total_items: int = 0
    checked_items: int = 0
    categories_count: int = 0

    def to_dict(self) -> dict:
        return {
            "totalItems": self.total_items,
            "checkedItems": self.checked_items,
            "categoriesCount": self.categories_count,
        }


@dataclass
class ShoppingSummary:
    """Progress figures shown above the list."""
    total_items: int
    checked_items: int
    remaining_items: int
    completion_percent: int
    estimated_minutes: int


def iter_plan_ingredients(plan: MealPlan) -> Iterator[str]:
    """Yield raw ingredient lines in day, meal slot, ingredient order."""
    for day in plan.days:
        for recipe in day.get_recipes():
            yield from recipe.ingredients


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class GroceryListEngine:
    """Derive grocery lists from meal plans and apply user edits to them.

    The engine does no I/O. Mutating operations change the list in place and
    return it for convenience.
    """

    def __init__(
        self,
        classifier: Optional[IngredientClassifier] = None,
        clock: Callable[[], datetime] = _utc_now,
    ):
        self.classifier = classifier or IngredientClassifier()
        self.clock = clock

    def categorize(self, ingredient_text: str) -> str:
        return self.classifier.categorize(ingredient_text)

    def clean(self, ingredient_text: str) -> str:
        return self.classifier.clean(ingredient_text)

    def derive_from_plan(self, plan: MealPlan) -> GroceryList:
        """Build a categorized, deduplicated grocery list from a meal plan."""
        grocery_list = GroceryList()
        seen: dict[str, set[str]] = {}
        skipped = 0

        for raw in iter_plan_ingredients(plan):
            category = self.categorize(raw)
            name = self.clean(raw)

            if len(name) <= NOISE_MAX_LENGTH:
                skipped += 1
                continue

            key = name.lower()
            names = seen.setdefault(category, set())
            if key in names:
                continue

            names.add(key)
            grocery_list.categories.setdefault(category, []).append(
                GroceryItem(name=name, original=raw, checked=False)
            )
            grocery_list.total_items += 1

        grocery_list.generated_at = self.clock().isoformat()

        logger.debug(
            "Derived %d items in %d categories from plan %s (%d noise lines skipped)",
            grocery_list.total_items, len(grocery_list.categories), plan.id, skipped,
        )
        return grocery_list

    def _item_at(self, grocery_list: GroceryList, category: str, index: int) -> GroceryItem:
        items = grocery_list.categories.get(category)
        if items is None or not 0 <= index < len(items):
            raise IndexOutOfRange(category, index)
        return items[index]

    def toggle_item(self, grocery_list: GroceryList, category: str, index: int) -> GroceryList:
        """Flip the checked state of one item."""
        item = self._item_at(grocery_list, category, index)
        item.checked = not item.checked
        return grocery_list

    def toggle_all(self, grocery_list: GroceryList, category: str, checked: bool) -> GroceryList:
        """Set every item in a category; a missing category is left alone."""
        for item in grocery_list.categories.get(category, []):
            item.checked = checked
        return grocery_list

    def remove_item(self, grocery_list: GroceryList, category: str, index: int) -> GroceryList:
        """Remove one item, dropping the category once it is empty."""
        self._item_at(grocery_list, category, index)

        items = grocery_list.categories[category]
        del items[index]
        if not items:
            del grocery_list.categories[category]

        return grocery_list

    def stats(self, grocery_list: GroceryList) -> GroceryStats:
        """Count items from the current state, ignoring the stored snapshot."""
        total = 0
        checked = 0
        for items in grocery_list.categories.values():
            total += len(items)
            checked += sum(1 for item in items if item.checked)

        return GroceryStats(
            total_items=total,
            checked_items=checked,
            categories_count=len(grocery_list.categories),
        )


def category_progress(grocery_list: GroceryList, category: str) -> tuple[int, int]:
    """Return (checked, total) for one category."""
    items = grocery_list.categories.get(category, [])
    return sum(1 for item in items if item.checked), len(items)


def shopping_summary(
    grocery_list: GroceryList,
    minutes_per_item: float = DEFAULT_MINUTES_PER_ITEM,
) -> ShoppingSummary:
    """Summarize shopping progress for display."""
    total = sum(len(items) for items in grocery_list.categories.values())
    checked = sum(
        1 for items in grocery_list.categories.values() for item in items if item.checked
    )
    remaining = total - checked

    return ShoppingSummary(
        total_items=total,
        checked_items=checked,
        remaining_items=remaining,
        completion_percent=math.floor(checked / total * 100 + 0.5) if total else 0,
        estimated_minutes=math.ceil(remaining * minutes_per_item),
    )


def sort_categories(categories) -> list[str]:
    """Order category names for display; unknown names go last, alphabetically."""
    def key(name: str):
        if name in CATEGORY_PRIORITY:
            return (0, CATEGORY_PRIORITY.index(name), "")
        return (1, 0, name)

    return sorted(categories, key=key)


def category_icon(category: str) -> str:
    return CATEGORY_ICONS.get(category, CATEGORY_ICONS[OTHER])


def to_markdown(grocery_list: GroceryList, plan: Optional[MealPlan] = None) -> str:
    """Export the list as an Obsidian-friendly markdown checklist."""
    summary = shopping_summary(grocery_list)

    lines = ["# 🛒 Grocery List", ""]
    if plan and plan.date_range:
        lines.append(f"_{plan.date_range}_")
        lines.append("")
    lines.append(f"**{summary.remaining_items} of {summary.total_items} items** left to buy")
    lines.append("")

    for category in sort_categories(grocery_list.categories):
        lines.append(f"## {category_icon(category)} {category}")
        lines.append("")
        for item in grocery_list.categories[category]:
            mark = "x" if item.checked else " "
            lines.append(f"- [{mark}] {item.name}")
        lines.append("")

    post = frontmatter.Post("\n".join(lines).rstrip() + "\n")
    post["tags"] = ["shopping", "groceries"]
    post["generated"] = grocery_list.generated_at
    post["items"] = summary.total_items
    if plan:
        post["plan"] = plan.id

    return frontmatter.dumps(post) + "\n"
