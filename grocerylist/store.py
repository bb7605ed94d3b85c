"""Meal plan sources and grocery list document stores."""

import json
import logging
import os
import re
import tempfile
from pathlib import Path
from typing import Optional, Protocol

from .models import GroceryList, MealPlan

logger = logging.getLogger(__name__)

_KEY_RE = re.compile(r"^[A-Za-z0-9_.-]+$")


class StoreError(Exception):
    """A plan or grocery list document could not be read or written."""


class PlanSource(Protocol):
    def get_plan(self, plan_id: str) -> Optional[MealPlan]: ...

    def get_latest_plan(self, user_id: str) -> Optional[MealPlan]: ...


class DocumentStore(Protocol):
    def load(self, key: str) -> Optional[GroceryList]: ...

    def save(self, key: str, grocery_list: GroceryList) -> None: ...


def _check_key(key: str) -> str:
    if not key or not _KEY_RE.match(key) or key in (".", ".."):
        raise StoreError(f"Invalid document key: {key!r}")
    return key


def _read_json(path: Path) -> dict:
    try:
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise StoreError(f"Could not read {path}: {e}") from e


def _latest(plans: list[MealPlan], user_id: str) -> Optional[MealPlan]:
    owned = [p for p in plans if p.user_id == user_id]
    if not owned:
        return None
    # ISO timestamps sort chronologically as strings
    return max(owned, key=lambda p: p.created_at)


class JsonPlanSource:
    """Meal plans stored as one ``<plan_id>.json`` file each."""

    def __init__(self, directory: Path):
        self.directory = Path(directory)

    def _parse(self, path: Path) -> MealPlan:
        try:
            plan = MealPlan.from_dict(_read_json(path))
        except ValueError as e:
            raise StoreError(f"Invalid meal plan in {path}: {e}") from e

        if plan.id != path.stem:
            raise StoreError(f"{path} holds plan {plan.id!r}, expected {path.stem!r}")
        return plan

    def get_plan(self, plan_id: str) -> Optional[MealPlan]:
        path = self.directory / f"{_check_key(plan_id)}.json"
        if not path.exists():
            return None

        return self._parse(path)

    def list_plans(self) -> list[MealPlan]:
        """Load every readable plan; unreadable files are logged and skipped."""
        if not self.directory.exists():
            return []

        plans = []
        for path in sorted(self.directory.glob("*.json")):
            try:
                plans.append(self._parse(path))
            except StoreError as e:
                logger.warning("Skipping plan file: %s", e)
        return plans

    def get_latest_plan(self, user_id: str) -> Optional[MealPlan]:
        return _latest(self.list_plans(), user_id)


class JsonDocumentStore:
    """Grocery lists stored as one ``<key>.json`` file each."""

    def __init__(self, directory: Path):
        self.directory = Path(directory)

    def path_for(self, key: str) -> Path:
        return self.directory / f"{_check_key(key)}.json"

    def load(self, key: str) -> Optional[GroceryList]:
        path = self.path_for(key)
        if not path.exists():
            return None

        try:
            return GroceryList.from_dict(_read_json(path))
        except ValueError as e:
            raise StoreError(f"Invalid grocery list in {path}: {e}") from e

    def save(self, key: str, grocery_list: GroceryList) -> None:
        path = self.path_for(key)

        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=self.directory, prefix=f".{key}.", suffix=".tmp")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(grocery_list.to_dict(), f, indent=2, ensure_ascii=False)
                os.replace(tmp_name, path)
            except BaseException:
                if os.path.exists(tmp_name):
                    os.unlink(tmp_name)
                raise
        except OSError as e:
            raise StoreError(f"Could not write {path}: {e}") from e

        logger.debug("Saved grocery list %s", path)


class MemoryPlanSource:
    """In-memory plan source."""

    def __init__(self, plans: Optional[list[MealPlan]] = None):
        self.plans: dict[str, MealPlan] = {p.id: p for p in plans or []}

    def get_plan(self, plan_id: str) -> Optional[MealPlan]:
        return self.plans.get(plan_id)

    def get_latest_plan(self, user_id: str) -> Optional[MealPlan]:
        return _latest(list(self.plans.values()), user_id)


class MemoryDocumentStore:
    """In-memory document store holding serialized copies."""

    def __init__(self):
        self.documents: dict[str, dict] = {}

    def load(self, key: str) -> Optional[GroceryList]:
        data = self.documents.get(key)
        if data is None:
            return None
        return GroceryList.from_dict(json.loads(json.dumps(data)))

    def save(self, key: str, grocery_list: GroceryList) -> None:
        self.documents[key] = json.loads(json.dumps(grocery_list.to_dict()))
