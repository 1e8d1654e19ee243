#
# For licensing see accompanying LICENSE file.
# Copyright © 2025 Apple Inc. All Rights Reserved.
#
import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from taskplan.endpoints.cli import cli


@pytest.fixture
def run(db_file: Path):
    runner = CliRunner()

    def _run(*args: str):
        return runner.invoke(cli, ["--db-file", str(db_file), *args])

    return _run


def test_nextdate(run):
    result = run(
        "nextdate", "--now", "20240110", "--date", "20240101", "--repeat", "d 3"
    )
    assert result.exit_code == 0, result.output
    assert result.output == "20240113\n"


@pytest.mark.parametrize(
    "date, repeat, message",
    [
        ("20240101", "d 500", "invalid number of days"),
        ("20240101", "x 5", "unsupported repeat rule"),
        ("20241301", "d 1", "invalid date"),
    ],
)
def test_nextdate_errors(run, date: str, repeat: str, message: str):
    result = run("nextdate", "--now", "20240110", "--date", date, "--repeat", repeat)
    assert result.exit_code == 1
    assert message in result.output


def test_task_lifecycle(run, db_file: Path):
    result = run(
        "add",
        "--title",
        "Pay rent",
        "--date",
        "29990101",
        "--comment",
        "Transfer to landlord",
        "--repeat",
        "m 1",
    )
    assert result.exit_code == 0, result.output
    assert result.output == "Task 1 scheduled on 29990101\n"
    assert db_file.exists()

    result = run("list", "--json")
    assert result.exit_code == 0, result.output
    assert json.loads(result.output) == {
        "tasks": [
            {
                "id": "1",
                "date": "29990101",
                "title": "Pay rent",
                "comment": "Transfer to landlord",
                "repeat": "m 1",
            }
        ]
    }

    result = run("show", "1")
    assert result.exit_code == 0, result.output
    assert "Pay rent" in result.output
    assert "monthly on 1" in result.output

    result = run("done", "1")
    assert result.exit_code == 0, result.output
    assert result.output == "Task 1 done, next due on 29990201\n"

    result = run("update", "1", "--title", "Pay the rent")
    assert result.exit_code == 0, result.output
    result = run("show", "1", "--json")
    assert json.loads(result.output)["title"] == "Pay the rent"
    assert json.loads(result.output)["date"] == "29990201"

    result = run("delete", "1")
    assert result.exit_code == 0, result.output
    result = run("show", "1")
    assert result.exit_code == 1
    assert "task 1 not found" in result.output


def test_add_json_response(run):
    result = run("add", "--title", "Dentist", "--date", "29990101", "--json")
    assert result.exit_code == 0, result.output
    assert json.loads(result.output) == {"id": "1"}


def test_add_errors(run):
    result = run("add", "--date", "29990101")
    assert result.exit_code == 1
    assert "task title is required" in result.output
    result = run("add", "--title", "Gym", "--date", "29990101", "--repeat", "w 9")
    assert result.exit_code == 1
    assert "invalid weekday" in result.output


def test_list_search(run):
    run("add", "--title", "Dentist", "--date", "29990105")
    run("add", "--title", "Gym", "--date", "29990102", "--comment", "leg day")
    result = run("list", "--search", "LEG", "--json")
    assert [task["title"] for task in json.loads(result.output)["tasks"]] == ["Gym"]
    result = run("list", "--search", "05.01.2999", "--json")
    assert [task["title"] for task in json.loads(result.output)["tasks"]] == [
        "Dentist"
    ]
    result = run("list")
    assert result.exit_code == 0, result.output
    assert "Gym" in result.output
    assert "Dentist" in result.output


def test_list_empty(run):
    result = run("list")
    assert result.exit_code == 0, result.output
    assert "No tasks found." in result.output


def test_done_one_off_task(run):
    run("add", "--title", "Dentist", "--date", "29990105")
    result = run("done", "1")
    assert result.output == "Task 1 done and deleted\n"
    result = run("list", "--json")
    assert json.loads(result.output) == {"tasks": []}


def test_add_without_date_rejects_invalid_rule(run):
    result = run("add", "--title", "a", "--repeat", "x 5")
    assert result.exit_code == 1
    assert "unsupported repeat rule" in result.output
    run("add", "--title", "b", "--date", "29990101")
    result = run("list", "--json")
    assert result.exit_code == 0, result.output
    assert [task["title"] for task in json.loads(result.output)["tasks"]] == ["b"]
