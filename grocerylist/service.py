"""Grocery list lookup, regeneration and persisted edits."""

import logging
from typing import Optional

from .grocery import GroceryListEngine
from .models import GroceryList, MealPlan
from .store import DocumentStore, PlanSource, StoreError

logger = logging.getLogger(__name__)


class GroceryListService:
    """Ties the engine to a plan source and a document store.

    Grocery lists are stored under their meal plan's id, one list per plan.
    """

    def __init__(
        self,
        plans: PlanSource,
        store: DocumentStore,
        engine: Optional[GroceryListEngine] = None,
    ):
        self.plans = plans
        self.store = store
        self.engine = engine or GroceryListEngine()

    def get_or_derive(self, plan_id: str) -> Optional[GroceryList]:
        """Load the stored list for a plan, deriving it from the plan if missing.

        Returns None when neither a list nor the plan exists. A derived list
        that comes out empty is returned but not saved.
        """
        grocery_list = self.store.load(plan_id)
        if grocery_list is not None:
            return grocery_list

        plan = self.plans.get_plan(plan_id)
        if plan is None:
            logger.info("No grocery list or meal plan for %s", plan_id)
            return None

        logger.info("Grocery list for plan %s not found, generating from meal plan", plan_id)
        return self._derive_and_save(plan)

    def load_latest(self, user_id: str) -> Optional[tuple[MealPlan, GroceryList]]:
        """Return the user's latest meal plan with its grocery list."""
        plan = self.plans.get_latest_plan(user_id)
        if plan is None:
            return None

        grocery_list = self.store.load(plan.id)
        if grocery_list is None:
            grocery_list = self._derive_and_save(plan)
        return plan, grocery_list

    def regenerate(self, plan_id: str) -> GroceryList:
        """Derive the list again from its plan, discarding checked state."""
        plan = self._require_plan(plan_id)
        grocery_list = self.engine.derive_from_plan(plan)
        self.store.save(plan.id, grocery_list)
        return grocery_list

    def toggle_item(self, plan_id: str, category: str, index: int) -> GroceryList:
        grocery_list = self._require_list(plan_id)
        self.engine.toggle_item(grocery_list, category, index)
        self.store.save(plan_id, grocery_list)
        return grocery_list

    def toggle_all(self, plan_id: str, category: str, checked: bool) -> GroceryList:
        grocery_list = self._require_list(plan_id)
        self.engine.toggle_all(grocery_list, category, checked)
        self.store.save(plan_id, grocery_list)
        return grocery_list

    def remove_item(self, plan_id: str, category: str, index: int) -> GroceryList:
        grocery_list = self._require_list(plan_id)
        self.engine.remove_item(grocery_list, category, index)
        self.store.save(plan_id, grocery_list)
        return grocery_list

    def _derive_and_save(self, plan: MealPlan) -> GroceryList:
        grocery_list = self.engine.derive_from_plan(plan)
        if grocery_list.is_empty():
            return grocery_list

        try:
            self.store.save(plan.id, grocery_list)
        except StoreError as e:
            # Still usable for this session; the next lookup derives it again
            logger.warning("Could not save generated grocery list for plan %s: %s", plan.id, e)

        return grocery_list

    def _require_plan(self, plan_id: str) -> MealPlan:
        plan = self.plans.get_plan(plan_id)
        if plan is None:
            raise KeyError(f"Meal plan {plan_id!r} not found")
        return plan

    def _require_list(self, plan_id: str) -> GroceryList:
        grocery_list = self.get_or_derive(plan_id)
        if grocery_list is None:
            raise KeyError(f"Meal plan {plan_id!r} not found")
        return grocery_list
