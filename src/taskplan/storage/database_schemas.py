#
# For licensing see accompanying LICENSE file.
# Copyright © 2025 Apple Inc. All Rights Reserved.
#
import polars as pl

TASKS_SCHEMA = {
    "id": pl.Int64,
    "date": pl.String,
    "title": pl.String,
    "comment": pl.String,
    "repeat": pl.String,
}
TEXT_SEARCH_COLUMNS = ("title", "comment")
