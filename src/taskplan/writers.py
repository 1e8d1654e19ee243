#
# For licensing see accompanying LICENSE file.
# Copyright © 2025 Apple Inc. All Rights Reserved.
#
import json
from pathlib import Path
from typing import Any

from taskplan.constants import JSON_INDENT


def save_json(data: Any, path: str | Path, indent: int = JSON_INDENT):
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    # write next to the target first so a failed dump leaves the old file intact
    tmp_path = path.with_name(f"{path.name}.tmp")
    with open(tmp_path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=indent)
    tmp_path.replace(path)
