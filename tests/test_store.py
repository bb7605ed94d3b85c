import json

import pytest

from grocerylist.models import GroceryItem, GroceryList
from grocerylist.store import (
    JsonDocumentStore, JsonPlanSource, MemoryDocumentStore, MemoryPlanSource,
    StoreError,
)

from conftest import make_plan


def _write_plan(directory, plan):
    directory.mkdir(parents=True, exist_ok=True)
    (directory / f"{plan.id}.json").write_text(json.dumps(plan.to_dict()), encoding="utf-8")


@pytest.fixture
def grocery_list():
    return GroceryList(
        categories={
            "Fruits": [GroceryItem("banana", "1 banana, sliced", checked=True)],
            "Grains & Carbs": [GroceryItem("rolled oats", "2 cups rolled oats")],
        },
        total_items=2,
        generated_at="2024-03-01T12:00:00+00:00",
    )


def test_json_store_round_trip(tmp_path, grocery_list):
    store = JsonDocumentStore(tmp_path / "lists")

    assert store.load("plan-1") is None

    store.save("plan-1", grocery_list)
    loaded = store.load("plan-1")

    assert loaded == grocery_list
    assert list(loaded.categories) == ["Fruits", "Grains & Carbs"]

    data = json.loads((tmp_path / "lists" / "plan-1.json").read_text(encoding="utf-8"))
    assert data["totalItems"] == 2
    assert data["categories"]["Fruits"][0]["checked"] is True


def test_json_store_overwrites_without_leftovers(tmp_path, grocery_list):
    store = JsonDocumentStore(tmp_path)

    store.save("plan-1", grocery_list)
    grocery_list.categories["Fruits"][0].checked = False
    store.save("plan-1", grocery_list)

    assert store.load("plan-1").categories["Fruits"][0].checked is False
    assert sorted(p.name for p in tmp_path.iterdir()) == ["plan-1.json"]


@pytest.mark.parametrize("key", ["", "..", "../escape", "a/b", "plan 1"])
def test_json_store_rejects_bad_keys(tmp_path, grocery_list, key):
    store = JsonDocumentStore(tmp_path)

    with pytest.raises(StoreError):
        store.save(key, grocery_list)
    with pytest.raises(StoreError):
        store.load(key)


def test_json_store_corrupt_file(tmp_path):
    (tmp_path / "plan-1.json").write_text("{not json", encoding="utf-8")

    with pytest.raises(StoreError):
        JsonDocumentStore(tmp_path).load("plan-1")


def test_json_store_invalid_document(tmp_path):
    (tmp_path / "plan-1.json").write_text('{"categories": ["Fruits"]}', encoding="utf-8")

    with pytest.raises(StoreError, match="Invalid grocery list"):
        JsonDocumentStore(tmp_path).load("plan-1")


def test_json_store_unwritable_directory(tmp_path, grocery_list):
    blocker = tmp_path / "lists"
    blocker.write_text("not a directory", encoding="utf-8")

    with pytest.raises(StoreError):
        JsonDocumentStore(blocker).save("plan-1", grocery_list)


def test_json_plan_source(tmp_path):
    plans_dir = tmp_path / "plans"
    _write_plan(plans_dir, make_plan({"breakfast": ["1 apple"]}, plan_id="old", created_at="2024-01-01T00:00:00+00:00"))
    _write_plan(plans_dir, make_plan({"breakfast": ["1 pear"]}, plan_id="new", created_at="2024-02-01T00:00:00+00:00"))
    _write_plan(plans_dir, make_plan({}, plan_id="other", user_id="user-2", created_at="2024-03-01T00:00:00+00:00"))

    source = JsonPlanSource(plans_dir)

    assert source.get_plan("old").days[0].meals["breakfast"].ingredients == ["1 apple"]
    assert source.get_plan("missing") is None
    assert source.get_latest_plan("user-1").id == "new"
    assert source.get_latest_plan("user-2").id == "other"
    assert source.get_latest_plan("nobody") is None


def test_json_plan_source_skips_unreadable_plans(tmp_path):
    _write_plan(tmp_path, make_plan({"breakfast": ["1 apple"]}, plan_id="good"))
    (tmp_path / "bad.json").write_text("[]", encoding="utf-8")

    source = JsonPlanSource(tmp_path)

    assert [p.id for p in source.list_plans()] == ["good"]
    with pytest.raises(StoreError):
        source.get_plan("bad")


def test_json_plan_source_rejects_mismatched_file_name(tmp_path):
    plan = make_plan({"breakfast": ["1 apple"]}, plan_id="plan-42")
    (tmp_path / "week1.json").write_text(json.dumps(plan.to_dict()), encoding="utf-8")

    source = JsonPlanSource(tmp_path)

    with pytest.raises(StoreError, match="plan-42"):
        source.get_plan("week1")
    assert source.list_plans() == []
    assert source.get_latest_plan("user-1") is None


def test_json_plan_source_missing_directory(tmp_path):
    assert JsonPlanSource(tmp_path / "nope").get_latest_plan("user-1") is None


def test_memory_store_returns_copies(grocery_list):
    store = MemoryDocumentStore()
    store.save("plan-1", grocery_list)

    loaded = store.load("plan-1")
    loaded.categories["Fruits"][0].checked = False

    assert store.load("plan-1").categories["Fruits"][0].checked is True
    assert store.load("missing") is None


def test_memory_plan_source():
    first = make_plan({}, plan_id="a", created_at="2024-01-01")
    second = make_plan({}, plan_id="b", created_at="2024-01-02")
    source = MemoryPlanSource([second, first])

    assert source.get_plan("a") is first
    assert source.get_latest_plan("user-1") is second
