"""Grocery lists derived from meal plans."""

__version__ = "0.1.0"

# Lazy imports to avoid circular dependencies
def __getattr__(name):
    if name == "Config":
        from .config import Config
        return Config
    elif name in ("MealPlan", "DayPlan", "PlanRecipe",
                  "GroceryList", "GroceryItem"):
        from . import models
        return getattr(models, name)
    elif name in ("IngredientClassifier", "categorize_ingredient", "clean_ingredient",
                  "CATEGORIES"):
        from . import ingredients
        return getattr(ingredients, name)
    elif name in ("GroceryListEngine", "GroceryStats", "IndexOutOfRange"):
        from . import grocery
        return getattr(grocery, name)
    elif name in ("JsonDocumentStore", "JsonPlanSource", "StoreError"):
        from . import store
        return getattr(store, name)
    elif name == "GroceryListService":
        from .service import GroceryListService
        return GroceryListService
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    "Config",
    "MealPlan",
    "DayPlan",
    "PlanRecipe",
    "GroceryList",
    "GroceryItem",
    "IngredientClassifier",
    "categorize_ingredient",
    "clean_ingredient",
    "CATEGORIES",
    "GroceryListEngine",
    "GroceryStats",
    "IndexOutOfRange",
    "JsonDocumentStore",
    "JsonPlanSource",
    "StoreError",
    "GroceryListService",
]
