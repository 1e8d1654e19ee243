#
# For licensing see accompanying LICENSE file.
# Copyright © 2025 Apple Inc. All Rights Reserved.
#
from rich.console import Console
from rich.table import Table

from taskplan.tasks import Task
from taskplan.time_utils import format_search_date, parse_date

TITLE_COL_WIDTH = 30
COMMENT_COL_WIDTH = 30


def _readable_date(date: str) -> str:
    return format_search_date(parse_date(date)) if date else ""


def display_tasks(tasks: list[Task], console: Console | None = None):
    """Display tasks as a rich table with the following format

    ┏━━━━┳━━━━━━━━━━━━┳━━━━━━━━━━━━━┳━━━━━━━━━━━━━┳━━━━━━━━━━━━━━━━━━━━━━━━━┓
    ┃ ID ┃ Date       ┃ Title       ┃ Comment     ┃ Repeat                  ┃
    ┡━━━━╇━━━━━━━━━━━━╇━━━━━━━━━━━━━╇━━━━━━━━━━━━━╇━━━━━━━━━━━━━━━━━━━━━━━━━┩
    """  # noqa

    console = console or Console()
    if not tasks:
        console.print("[dim]No tasks found.[/dim]")
        return
    table = Table(show_header=True, header_style="bold magenta")

    table.add_column("ID", justify="right", style="cyan", no_wrap=True)
    table.add_column("Date", style="green", no_wrap=True)
    table.add_column("Title", style="white", width=TITLE_COL_WIDTH)
    table.add_column("Comment", style="dim", width=COMMENT_COL_WIDTH)
    table.add_column("Repeat", style="yellow")

    for task in tasks:
        repeat = f"{task.repeat} ({task.repeat_description})" if task.recurs else ""
        table.add_row(
            str(task.id), _readable_date(task.date), task.title, task.comment, repeat
        )

    console.print(table)


def display_task(task: Task, console: Console | None = None):
    """Display the fields of a single task, one per row."""
    console = console or Console()
    table = Table(show_header=False, box=None)
    table.add_column("Field", style="bold cyan", no_wrap=True)
    table.add_column("Value", style="white")
    table.add_row("ID", str(task.id))
    table.add_row("Date", f"{task.date} ({_readable_date(task.date)})")
    table.add_row("Title", task.title)
    table.add_row("Comment", task.comment)
    if task.recurs:
        table.add_row("Repeat", f"{task.repeat} ({task.repeat_description})")
    console.print(table)
