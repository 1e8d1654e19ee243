#
# For licensing see accompanying LICENSE file.
# Copyright © 2025 Apple Inc. All Rights Reserved.
#
import logging
from pathlib import Path
from typing import Any, Self

import polars as pl

from taskplan.aliases import DateStr, TaskId
from taskplan.constants import DEFAULT_SEARCH_LIMIT
from taskplan.exceptions import TaskNotFoundError
from taskplan.readers import load_json
from taskplan.storage.database_schemas import TASKS_SCHEMA, TEXT_SEARCH_COLUMNS
from taskplan.storage.utils import (
    exact_match_filter_dataframe,
    substring_filter_dataframe,
)
from taskplan.tasks import Task
from taskplan.time_utils import format_date, parse_search_date
from taskplan.writers import save_json

logger = logging.getLogger(__name__)


class TaskStore:
    """Table of the user's tasks.

    Tasks are kept in a polars dataframe and written to a JSON file when
    `save` is called. Ids are assigned incrementally and never reused, even
    after a task is deleted.

    Parameters
    ----------
    db_file
        The JSON file the store is saved to. If `None`, the store only lives
        in memory.
    """

    schema: dict[str, Any] = TASKS_SCHEMA

    def __init__(self, db_file: str | Path | None = None):
        self.db_file = Path(db_file) if db_file is not None else None
        self._tasks: pl.DataFrame = pl.DataFrame(schema=self.schema)
        self._last_id: TaskId = 0

    def __len__(self) -> int:
        return self._tasks.height

    def to_dict(self) -> dict[str, Any]:
        return {"last_id": self._last_id, "tasks": self._tasks.to_dicts()}

    @classmethod
    def from_dict(
        cls, serialized_dict: dict[str, Any], db_file: str | Path | None = None
    ) -> Self:
        """Load a serialized dict produced by to_dict."""
        store = cls(db_file=db_file)
        records = serialized_dict.get("tasks", [])
        store._tasks = pl.from_dicts(records, schema=cls.schema)
        last_id = serialized_dict.get("last_id") or 0
        if not store._tasks.is_empty():
            last_id = max(last_id, store._tasks.get_column("id").max())
        store._last_id = last_id
        return store

    @classmethod
    def load(cls, db_file: str | Path) -> Self:
        """Open the store saved in `db_file`. A missing file is an empty store."""
        db_file = Path(db_file)
        if not db_file.exists():
            logger.info(f"No task database at {db_file}, starting an empty one")
            return cls(db_file=db_file)
        store = cls.from_dict(load_json(db_file), db_file=db_file)
        logger.debug(f"Loaded {len(store)} tasks from {db_file}")
        return store

    def save(self) -> None:
        if self.db_file is None:
            return
        save_json(self.to_dict(), self.db_file)
        logger.debug(f"Saved {len(self)} tasks to {self.db_file}")

    def _rows(self, task_id: TaskId) -> pl.DataFrame:
        rows = exact_match_filter_dataframe(self._tasks, "id", task_id)
        if rows.is_empty():
            raise TaskNotFoundError(f"task {task_id} not found")
        return rows

    def _set_columns(self, task_id: TaskId, values: dict[str, Any]) -> None:
        self._rows(task_id)
        selected = pl.col("id") == task_id
        self._tasks = self._tasks.with_columns(
            [
                pl.when(selected)
                .then(pl.lit(value, dtype=self.schema[column]))
                .otherwise(pl.col(column))
                .alias(column)
                for column, value in values.items()
            ]
        )

    def add(self, task: Task) -> TaskId:
        """Insert a task and return the id it was assigned."""
        self._last_id += 1
        record = task.model_dump(mode="python") | {"id": self._last_id}
        self._tasks = self._tasks.vstack(pl.DataFrame([record], schema=self.schema))
        logger.debug(f"Added task {self._last_id}: {task.title!r}")
        return self._last_id

    def get(self, task_id: TaskId) -> Task:
        [record] = self._rows(task_id).to_dicts()
        return Task.from_dict(record)

    def update(self, task: Task) -> None:
        """Replace the stored task with the same id as `task`."""
        if task.id is None:
            raise TaskNotFoundError("cannot update a task without an id")
        values = task.model_dump(mode="python", exclude={"id"})
        self._set_columns(task.id, values)

    def update_date(self, task_id: TaskId, date: DateStr) -> None:
        self._set_columns(task_id, {"date": date})

    def delete(self, task_id: TaskId) -> None:
        self._rows(task_id)
        self._tasks = self._tasks.filter(pl.col("id") != task_id)
        logger.debug(f"Deleted task {task_id}")

    def search(
        self, search: str | None = None, limit: int = DEFAULT_SEARCH_LIMIT
    ) -> list[Task]:
        """Find tasks, earliest first.

        Parameters
        ----------
        search
            A `DD.MM.YYYY` date returns the tasks due on that date; any other
            text returns the tasks whose title or comment contains it, ignoring
            case. All tasks are returned if not set.
        limit
            Maximum number of tasks returned.
        """
        tasks = self._tasks
        if search:
            if (date := parse_search_date(search)) is not None:
                tasks = exact_match_filter_dataframe(tasks, "date", format_date(date))
            else:
                tasks = substring_filter_dataframe(tasks, TEXT_SEARCH_COLUMNS, search)
        tasks = tasks.sort(["date", "id"]).head(limit)
        return [Task.from_dict(record) for record in tasks.to_dicts()]
