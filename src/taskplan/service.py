#
# For licensing see accompanying LICENSE file.
# Copyright © 2025 Apple Inc. All Rights Reserved.
#
"""Operations on the user's tasks. Every write goes through the same
normalisation, so a task is stored with a valid date and rule whether it is
created or updated."""

import datetime
import logging
from collections.abc import Callable

from taskplan.aliases import DateStr, RuleStr, TaskId
from taskplan.config import SchedulerConfig
from taskplan.exceptions import SchedulerError, TaskNotFoundError
from taskplan.recurrence import next_date
from taskplan.storage.task_store import TaskStore
from taskplan.tasks import Task, process_task
from taskplan.time_utils import format_date, parse_date

logger = logging.getLogger(__name__)


class TaskService:
    """Create, find, update and complete tasks.

    Parameters
    ----------
    store
        Where tasks are kept. It is saved after every change.
    config
        The scheduler settings.
    today
        Returns the current date. Replace it to run the service at a fixed date.
    """

    def __init__(
        self,
        store: TaskStore,
        config: SchedulerConfig,
        today: Callable[[], datetime.date] = datetime.date.today,
    ):
        self.store = store
        self.config = config
        self._today = today

    @classmethod
    def from_config(cls, config: SchedulerConfig, **kwargs) -> "TaskService":
        return cls(TaskStore.load(config.db_file), config, **kwargs)

    @property
    def today(self) -> datetime.date:
        return self._today()

    def next_date(
        self, now: datetime.date | DateStr, date: DateStr, repeat: RuleStr
    ) -> DateStr:
        return next_date(now, date, repeat)

    def add_task(self, task: Task) -> TaskId:
        task = process_task(task, self.today)
        task_id = self.store.add(task)
        self.store.save()
        logger.info(f"Task {task_id} scheduled on {task.date}")
        return task_id

    def get_task(self, task_id: TaskId) -> Task:
        return self.store.get(task_id)

    def update_task(self, task: Task) -> Task:
        if task.id is None:
            raise TaskNotFoundError("task id is required")
        # fail on unknown ids before the task is validated
        self.store.get(task.id)
        task = process_task(task, self.today)
        self.store.update(task)
        self.store.save()
        logger.info(f"Task {task.id} updated, scheduled on {task.date}")
        return task

    def delete_task(self, task_id: TaskId) -> None:
        self.store.delete(task_id)
        self.store.save()
        logger.info(f"Task {task_id} deleted")

    def list_tasks(self, search: str | None = None) -> list[Task]:
        return self.store.search(search, limit=self.config.search_limit)

    def complete_task(self, task_id: TaskId) -> Task | None:
        """Mark a task as done.

        One-off tasks are deleted and `None` is returned. Repeating tasks move
        to their next date after the one they were due on, and the updated
        task is returned.
        """
        task = self.store.get(task_id)
        if not task.recurs:
            self.delete_task(task_id)
            return None
        due = parse_date(task.date)
        new_date = next_date(due, task.date, task.repeat)
        self.store.update_date(task_id, new_date)
        self.store.save()
        logger.info(f"Task {task_id} done, next due on {new_date}")
        return task.model_copy(update={"date": new_date})

    def roll_forward(self, save: bool = True) -> list[Task]:
        """Move every task dated before today to the date it would be given if
        it were written today. Returns the tasks that moved, with their new
        dates."""
        today = self.today
        moved = []
        for task in self.store.search(limit=len(self.store)):
            if task.date >= format_date(today):
                # tasks are sorted by date
                break
            try:
                updated = process_task(task, today)
            except SchedulerError as e:
                logger.warning(f"Task {task.id} left on {task.date}: {e}")
                continue
            logger.info(f"Task {task.id} moved from {task.date} to {updated.date}")
            self.store.update_date(task.id, updated.date)
            moved.append(updated)
        if moved and save:
            self.store.save()
        return moved
