#
# For licensing see accompanying LICENSE file.
# Copyright © 2025 Apple Inc. All Rights Reserved.
#
from typing import Any, Sequence

import polars as pl


def exact_match_filter_dataframe(
    dataframe: pl.DataFrame, column_name: str, value: Any
) -> pl.DataFrame:
    """Filter dataframe by exact matching value on 1 column

    Parameters
    ----------
        dataframe:      Dataframe to filter
        column_name:    Name of column
        value:          Value to match against

    Returns
    -------
        Filtered dataframe

    """
    if value is None:
        return dataframe.filter(pl.col(column_name).is_null())
    return dataframe.filter(pl.col(column_name) == value)


def substring_filter_dataframe(
    dataframe: pl.DataFrame, column_names: Sequence[str], value: str
) -> pl.DataFrame:
    """Filter dataframe for rows where any of `column_names` contains `value`,
    ignoring case.

    Parameters
    ----------
        dataframe:      Dataframe to filter
        column_names:   Names of the columns searched
        value:          Text to look for

    Returns
    -------
        Filtered dataframe
    """
    needle = value.lower()
    predicate = pl.lit(False).or_(
        *[
            pl.col(column_name)
            .fill_null("")
            .str.to_lowercase()
            .str.contains(needle, literal=True)
            for column_name in column_names
        ]
    )
    return dataframe.filter(predicate)
