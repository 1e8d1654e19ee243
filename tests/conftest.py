#
# For licensing see accompanying LICENSE file.
# Copyright © 2025 Apple Inc. All Rights Reserved.
#
import datetime
from pathlib import Path

import pytest

from taskplan.config import SchedulerConfig
from taskplan.service import TaskService
from taskplan.storage.task_store import TaskStore

# a Tuesday
TODAY = datetime.date(2024, 6, 25)


@pytest.fixture
def today() -> datetime.date:
    return TODAY


@pytest.fixture
def db_file(tmp_path: Path) -> Path:
    return tmp_path / "scheduler.json"


@pytest.fixture
def config(db_file: Path) -> SchedulerConfig:
    return SchedulerConfig(db_file=str(db_file))


@pytest.fixture
def store(db_file: Path) -> TaskStore:
    return TaskStore(db_file=db_file)


@pytest.fixture
def service(store: TaskStore, config: SchedulerConfig) -> TaskService:
    return TaskService(store, config, today=lambda: TODAY)
