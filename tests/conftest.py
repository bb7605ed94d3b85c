from datetime import datetime, timezone

import pytest

from grocerylist.grocery import GroceryListEngine
from grocerylist.models import DayPlan, MealPlan, PlanRecipe


FIXED_TIME = datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)


def make_plan(*days, plan_id="plan-1", user_id="user-1", created_at="2024-03-01T12:00:00+00:00"):
    """Build a plan from dicts of meal slot -> ingredient list (or None)."""
    return MealPlan(
        id=plan_id,
        user_id=user_id,
        created_at=created_at,
        days=[
            DayPlan(
                day=i + 1,
                meals={
                    slot: PlanRecipe(name=f"{slot} {i + 1}", ingredients=ingredients)
                    if ingredients is not None else None
                    for slot, ingredients in meals.items()
                },
            )
            for i, meals in enumerate(days)
        ],
    )


@pytest.fixture
def engine():
    return GroceryListEngine(clock=lambda: FIXED_TIME)


@pytest.fixture
def oats_plan():
    return make_plan({
        "breakfast": ["2 cups rolled oats", "1 banana, sliced", "1 banana, sliced"],
    })


@pytest.fixture
def week_plan():
    return make_plan(
        {
            "breakfast": ["2 large eggs", "1 cup milk", "1 apple"],
            "lunch": ["1 lb chicken breast, cubed", "2 cups spinach", "1 tbsp olive oil"],
            "dinner": None,
        },
        {
            "breakfast": ["3 eggs", "1 cup milk", "1/4 cup almonds"],
            "lunch": ["1 can (15 oz) black beans, drained", "1 cup cooked rice"],
            "dinner": ["2 tsp ground cumin", "1 pear", "1 orange"],
        },
    )
