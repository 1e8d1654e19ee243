#
# For licensing see accompanying LICENSE file.
# Copyright © 2025 Apple Inc. All Rights Reserved.
#
import dataclasses
import functools
import logging
from pathlib import Path

import click
from omegaconf import OmegaConf

from taskplan.config import SchedulerConfig, load_config
from taskplan.display import display_task, display_tasks
from taskplan.exceptions import SchedulerError
from taskplan.recurrence import next_date
from taskplan.service import TaskService
from taskplan.tasks import Task, TaskListResponse, TaskResponse

logger = logging.getLogger(__name__)


def _service(ctx: click.Context) -> TaskService:
    config: SchedulerConfig = ctx.obj
    return TaskService.from_config(config)


def reports_scheduler_errors(command):
    """Turn scheduler errors into a message and a non-zero exit code."""

    @functools.wraps(command)
    def wrapper(*args, **kwargs):
        try:
            return command(*args, **kwargs)
        except SchedulerError as e:
            raise click.ClickException(str(e))

    return wrapper


@click.group()
@click.option(
    "--db-file",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Task database, overrides TODO_DBFILE",
)
@click.option("--debug", is_flag=True, help="Log at DEBUG level")
@click.pass_context
def cli(ctx: click.Context, db_file: Path | None, debug: bool) -> None:
    """Schedule tasks, including tasks that repeat."""
    config = load_config()
    if db_file is not None:
        config = dataclasses.replace(config, db_file=str(db_file))
    if debug:
        config = dataclasses.replace(config, debug=True)
    if config.debug:
        logging.basicConfig(level=logging.DEBUG)
        logger.debug(OmegaConf.to_yaml(OmegaConf.structured(config)))
    ctx.obj = config


@cli.command("nextdate")
@click.option("--now", required=True, help="Reference date, YYYYMMDD")
@click.option("--date", required=True, help="Date the task is scheduled on, YYYYMMDD")
@click.option("--repeat", required=True, help='Recurrence rule, eg "d 7"')
@reports_scheduler_errors
def next_date_command(now: str, date: str, repeat: str) -> None:
    """Print the next date a repeating task is due after NOW."""
    click.echo(next_date(now, date, repeat))


@cli.command("add")
@click.option("--title", default="", help="Task title, required")
@click.option("--date", default="", help="Due date, YYYYMMDD. Defaults to today")
@click.option("--comment", default="")
@click.option("--repeat", default="", help='Recurrence rule, eg "w 1,3"')
@click.option("--json", "as_json", is_flag=True, help="Print the response as JSON")
@click.pass_context
@reports_scheduler_errors
def add_command(
    ctx: click.Context, title: str, date: str, comment: str, repeat: str, as_json: bool
) -> None:
    """Add a task."""
    service = _service(ctx)
    task = Task(title=title, date=date, comment=comment, repeat=repeat)
    task_id = service.add_task(task)
    if as_json:
        click.echo(TaskResponse(id=task_id).model_dump_json(exclude_none=True))
        return
    stored = service.get_task(task_id)
    click.echo(f"Task {task_id} scheduled on {stored.date}")


@cli.command("list")
@click.option(
    "--search", default=None, help="Text in the title or comment, or a DD.MM.YYYY date"
)
@click.option("--json", "as_json", is_flag=True, help="Print the tasks as JSON")
@click.pass_context
@reports_scheduler_errors
def list_command(ctx: click.Context, search: str | None, as_json: bool) -> None:
    """List upcoming tasks, earliest first."""
    tasks = _service(ctx).list_tasks(search)
    if as_json:
        click.echo(TaskListResponse(tasks=tasks).model_dump_json())
        return
    display_tasks(tasks)


@cli.command("show")
@click.argument("task_id", type=int)
@click.option("--json", "as_json", is_flag=True, help="Print the task as JSON")
@click.pass_context
@reports_scheduler_errors
def show_command(ctx: click.Context, task_id: int, as_json: bool) -> None:
    """Show a task."""
    task = _service(ctx).get_task(task_id)
    if as_json:
        click.echo(task.model_dump_json())
        return
    display_task(task)


@cli.command("update")
@click.argument("task_id", type=int)
@click.option("--title", default=None)
@click.option("--date", default=None, help="Due date, YYYYMMDD")
@click.option("--comment", default=None)
@click.option("--repeat", default=None, help='Recurrence rule, "" to stop repeating')
@click.pass_context
@reports_scheduler_errors
def update_command(
    ctx: click.Context,
    task_id: int,
    title: str | None,
    date: str | None,
    comment: str | None,
    repeat: str | None,
) -> None:
    """Change a task. Fields which are not given keep their value."""
    service = _service(ctx)
    changes = {
        "title": title,
        "date": date,
        "comment": comment,
        "repeat": repeat,
    }
    task = service.get_task(task_id).model_copy(
        update={k: v for k, v in changes.items() if v is not None}
    )
    task = service.update_task(task)
    click.echo(f"Task {task_id} scheduled on {task.date}")


@cli.command("delete")
@click.argument("task_id", type=int)
@click.pass_context
@reports_scheduler_errors
def delete_command(ctx: click.Context, task_id: int) -> None:
    """Delete a task."""
    _service(ctx).delete_task(task_id)
    click.echo(f"Task {task_id} deleted")


@cli.command("done")
@click.argument("task_id", type=int)
@click.pass_context
@reports_scheduler_errors
def done_command(ctx: click.Context, task_id: int) -> None:
    """Mark a task as done. Repeating tasks move to their next date, other
    tasks are deleted."""
    task = _service(ctx).complete_task(task_id)
    if task is None:
        click.echo(f"Task {task_id} done and deleted")
        return
    click.echo(f"Task {task_id} done, next due on {task.date}")
