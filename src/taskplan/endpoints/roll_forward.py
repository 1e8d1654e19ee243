#
# For licensing see accompanying LICENSE file.
# Copyright © 2025 Apple Inc. All Rights Reserved.
#
import logging

import hydra
from omegaconf import DictConfig, OmegaConf

from taskplan.config import to_scheduler_config
from taskplan.constants import CONFIG_MODULE, CONFIG_NAME
from taskplan.service import TaskService

logger = logging.getLogger(__name__)


def run_roll_forward(cfg: DictConfig, service: TaskService | None = None) -> int:
    """Move overdue tasks to today, or to their next date if they repeat.
    Returns the number of tasks moved."""
    config = to_scheduler_config(cfg)
    if config.debug:
        logger.info(OmegaConf.to_yaml(cfg, resolve=True))
    if service is None:
        service = TaskService.from_config(config)
    moved = service.roll_forward(save=not config.dry_run)
    if config.dry_run:
        logger.info(f"Dry run: {len(moved)} tasks would move, nothing saved")
    else:
        logger.info(f"{len(moved)} overdue tasks moved in {config.db_file}")
    return len(moved)


@hydra.main(
    config_name=CONFIG_NAME,
    config_path=f"pkg://{CONFIG_MODULE}",
    version_base=None,
)
def roll_forward(cfg: DictConfig):
    run_roll_forward(cfg)
