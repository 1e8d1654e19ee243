#
# For licensing see accompanying LICENSE file.
# Copyright © 2025 Apple Inc. All Rights Reserved.
#
"""Tasks as stored by the scheduler, and the checks applied to a task before
it is written."""

import datetime
from typing import Any, Self

from pydantic import BaseModel, field_serializer, field_validator

from taskplan.aliases import DateStr, RuleStr, TaskId
from taskplan.exceptions import EmptyTitleError
from taskplan.recurrence import next_date, parse_rule
from taskplan.time_utils import format_date, parse_date


class Task(BaseModel):
    """A task in the user's schedule.

    Parameters
    ----------
    id
        Assigned by the store when the task is first added.
    date
        The date the task is due, as `YYYYMMDD`.
    title
        Short summary of the task, required.
    comment
        Free text notes.
    repeat
        The recurrence rule of a repeating task (eg "d 7", "w 1,5"). Empty for
        one-off tasks.
    """

    id: TaskId | None = None
    date: DateStr = ""
    title: str = ""
    comment: str = ""
    repeat: RuleStr = ""

    @field_validator("id", mode="before")
    @classmethod
    def parse_id(cls, value: Any) -> Any:
        # ids travel as strings in JSON
        if isinstance(value, str):
            return int(value) if value else None
        return value

    @field_serializer("id")
    def serialise_id(self, value: TaskId | None) -> str | None:
        if value is None:
            return None
        return str(value)

    @property
    def recurs(self) -> bool:
        return bool(self.repeat)

    @property
    def repeat_description(self) -> str:
        if not self.repeat:
            return ""
        return str(parse_rule(self.repeat))

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Self:
        return cls(**{k: v if v is not None else "" for k, v in data.items()})


class TaskResponse(BaseModel):
    id: TaskId | None = None
    error: str | None = None

    @field_serializer("id")
    def serialise_id(self, value: TaskId | None) -> str | None:
        if value is None:
            return None
        return str(value)


class TaskListResponse(BaseModel):
    tasks: list[Task]


def normalize_task_on_write(
    title: str, date: DateStr, repeat: RuleStr, today: datetime.date
) -> DateStr:
    """Check a task before it is created or updated and return the date it
    should be stored with.

    Notes
    -----
    1. A task without a date is due today.
    2. A one-off task dated in the past is moved to today, a repeating one to
    its next date after today.
    3. The rule of a repeating task dated today or later is still evaluated,
    so that invalid rules are rejected when the task is written.

    Raises
    ------
    EmptyTitleError
        If `title` is empty.
    InvalidDateError
        If `date` is not a `YYYYMMDD` date.
    InvalidRuleError
        If `repeat` is not a valid rule.
    """
    if not title:
        raise EmptyTitleError("task title is required")
    if not date:
        date = format_date(today)
    if parse_date(date) < today:
        if not repeat:
            return format_date(today)
        return next_date(today, date, repeat)
    if repeat:
        next_date(today, date, repeat)
    return date


def process_task(task: Task, today: datetime.date) -> Task:
    """Return a copy of `task` whose date has been normalised for writing."""
    date = normalize_task_on_write(task.title, task.date, task.repeat, today)
    return task.model_copy(update={"date": date})
