#
# For licensing see accompanying LICENSE file.
# Copyright © 2025 Apple Inc. All Rights Reserved.
#
from pathlib import Path

import pytest

from taskplan.exceptions import TaskNotFoundError
from taskplan.storage.task_store import TaskStore
from taskplan.tasks import Task


@pytest.fixture
def tasks() -> list[Task]:
    return [
        Task(date="20240801", title="Pay rent", comment="Transfer to landlord"),
        Task(date="20240701", title="Dentist", comment="Bring the X-rays"),
        Task(date="20240710", title="Gym", comment="", repeat="w 1,3"),
        Task(date="20240701", title="Call mum", comment="about the rent"),
    ]


@pytest.fixture
def filled_store(store: TaskStore, tasks: list[Task]) -> TaskStore:
    for task in tasks:
        store.add(task)
    return store


def test_add_assigns_incremental_ids(store: TaskStore, tasks: list[Task]):
    assert [store.add(task) for task in tasks] == [1, 2, 3, 4]
    assert len(store) == 4


def test_get(filled_store: TaskStore, tasks: list[Task]):
    task = filled_store.get(3)
    assert task == tasks[2].model_copy(update={"id": 3})


def test_get_unknown_task(filled_store: TaskStore):
    with pytest.raises(TaskNotFoundError):
        filled_store.get(42)


def test_update(filled_store: TaskStore):
    task = filled_store.get(1).model_copy(
        update={"title": "Pay the rent", "repeat": "m 1"}
    )
    filled_store.update(task)
    assert filled_store.get(1) == task
    # the other tasks are untouched
    assert filled_store.get(2).title == "Dentist"


def test_update_unknown_task(filled_store: TaskStore):
    with pytest.raises(TaskNotFoundError):
        filled_store.update(Task(id=42, title="x", date="20240801"))
    with pytest.raises(TaskNotFoundError):
        filled_store.update(Task(title="x", date="20240801"))


def test_update_date(filled_store: TaskStore):
    filled_store.update_date(3, "20240715")
    assert filled_store.get(3).date == "20240715"
    with pytest.raises(TaskNotFoundError):
        filled_store.update_date(42, "20240715")


def test_delete(filled_store: TaskStore):
    filled_store.delete(2)
    assert len(filled_store) == 3
    with pytest.raises(TaskNotFoundError):
        filled_store.get(2)
    with pytest.raises(TaskNotFoundError):
        filled_store.delete(2)


def test_ids_are_not_reused(filled_store: TaskStore):
    filled_store.delete(4)
    assert filled_store.add(Task(title="New", date="20240801")) == 5


def test_search_all_sorted_by_date(filled_store: TaskStore):
    found = filled_store.search()
    assert [task.id for task in found] == [2, 4, 3, 1]
    assert [task.id for task in filled_store.search("")] == [2, 4, 3, 1]


def test_search_limit(filled_store: TaskStore):
    assert [task.id for task in filled_store.search(limit=2)] == [2, 4]


@pytest.mark.parametrize(
    "search, expected_ids",
    [
        ("rent", [4, 1]),
        ("RENT", [4, 1]),
        ("x-ray", [2]),
        ("gym", [3]),
        ("holiday", []),
        ("01.07.2024", [2, 4]),
        ("10.07.2024", [3]),
        ("02.07.2024", []),
    ],
)
def test_search(filled_store: TaskStore, search: str, expected_ids: list[int]):
    assert [task.id for task in filled_store.search(search)] == expected_ids


def test_search_text_is_literal(filled_store: TaskStore):
    filled_store.add(Task(title="Buy (more) milk", date="20240802"))
    assert [task.title for task in filled_store.search("(more)")] == [
        "Buy (more) milk"
    ]
    assert filled_store.search(".*") == []


def test_save_and_load(filled_store: TaskStore, db_file: Path):
    filled_store.delete(4)
    filled_store.save()
    loaded = TaskStore.load(db_file)
    assert loaded.search() == filled_store.search()
    assert loaded.add(Task(title="New", date="20240801")) == 5


def test_load_missing_file(tmp_path: Path):
    store = TaskStore.load(tmp_path / "missing" / "tasks.json")
    assert len(store) == 0
    store.add(Task(title="New", date="20240801"))
    store.save()
    assert TaskStore.load(tmp_path / "missing" / "tasks.json").get(1).title == "New"


def test_in_memory_store_is_not_saved(tmp_path: Path):
    store = TaskStore()
    store.add(Task(title="New", date="20240801"))
    store.save()
    assert list(tmp_path.iterdir()) == []


def test_to_dict_round_trip(filled_store: TaskStore):
    restored = TaskStore.from_dict(filled_store.to_dict())
    assert restored.search() == filled_store.search()
    assert restored.to_dict()["last_id"] == 4
