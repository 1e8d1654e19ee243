#
# For licensing see accompanying LICENSE file.
# Copyright © 2025 Apple Inc. All Rights Reserved.
#
"""Scheduler settings, composed by hydra from `taskplan/configs/scheduler.yaml`."""

from dataclasses import dataclass

from hydra import compose, initialize_config_module
from omegaconf import DictConfig, OmegaConf

from taskplan.constants import (
    CONFIG_MODULE,
    CONFIG_NAME,
    DEFAULT_DB_FILE,
    DEFAULT_SEARCH_LIMIT,
)


@dataclass
class SchedulerConfig:
    """Settings shared by the CLI and the roll-forward job. Built once when
    the process starts and handed to the components that need it.

    Parameters
    ----------
    db_file
        The JSON file the tasks are saved to. Set by `TODO_DBFILE` by default.
    search_limit
        Maximum number of tasks returned when listing or searching.
    debug
        Log at DEBUG level.
    dry_run
        Do not save changes made by the roll-forward job.
    """

    db_file: str = DEFAULT_DB_FILE
    search_limit: int = DEFAULT_SEARCH_LIMIT
    debug: bool = False
    dry_run: bool = False


def to_scheduler_config(cfg: DictConfig) -> SchedulerConfig:
    """Validate a composed config against `SchedulerConfig`."""
    schema = OmegaConf.structured(SchedulerConfig)
    merged = OmegaConf.merge(schema, cfg)
    config = OmegaConf.to_object(merged)
    if config.search_limit < 1:
        raise ValueError(f"search_limit must be positive, got {config.search_limit}")
    return config


def load_config(overrides: list[str] | None = None) -> SchedulerConfig:
    """Compose the scheduler config, applying hydra style `key=value`
    overrides."""
    with initialize_config_module(config_module=CONFIG_MODULE, version_base=None):
        cfg = compose(config_name=CONFIG_NAME, overrides=overrides or [])
    return to_scheduler_config(cfg)
