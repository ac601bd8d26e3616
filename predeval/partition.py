"""
partition.py
============
Group partition driver.

Splits a table into independent partitions by grouping key, applies a
single-partition computation to each one and reassembles the results in
partition order with the group-key columns reattached.

    parted = partition_frame(df, by=["fold"])
    result = apply_partitions(parted, compute_one)

Grouping can come from the `by` argument or from a pandas GroupBy object
(`df.groupby("fold")`); either way it is resolved once here and every
engine consumes the same PartitionedFrame.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

import pandas as pd
from pandas.core.groupby import DataFrameGroupBy
from tqdm import tqdm

from predeval.config import GROUP_VARS_ATTR, SHOW_PROGRESS
from predeval.exceptions import MalformedInputError
from predeval.validation import require_columns


# ---------------------------------------------------------------------------
# Data structures
# ---------------------------------------------------------------------------

@dataclass(frozen=True, eq=False)
class Partition:
    """Rows sharing one grouping-key tuple, in their original relative order."""
    key:   tuple
    frame: pd.DataFrame


@dataclass(frozen=True, eq=False)
class PartitionedFrame:
    """A table split by zero or more grouping columns."""
    source:     pd.DataFrame
    group_cols: tuple[str, ...]
    partitions: tuple[Partition, ...]

    @property
    def grouped(self) -> bool:
        return bool(self.group_cols)

    def __len__(self) -> int:
        return len(self.partitions)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def partition_frame(data, by: str | list[str] | None = None) -> PartitionedFrame:
    """
    Split data into partitions by grouping key.

    Parameters
    ----------
    data : pandas DataFrame, a DataFrameGroupBy over column names, or an
           already built PartitionedFrame (returned unchanged).
    by   : Grouping column name(s). Not allowed together with a GroupBy.

    Returns
    -------
    PartitionedFrame whose partitions follow the first-seen order of the
    distinct key tuples. Missing key values form their own partition.
    Without grouping columns there is a single partition with key ().
    """
    if isinstance(data, PartitionedFrame):
        if by:
            raise MalformedInputError(
                "`by` cannot be combined with an already partitioned frame."
            )
        return data

    if isinstance(data, DataFrameGroupBy):
        if by:
            raise MalformedInputError(
                "`by` cannot be combined with a grouped DataFrame; "
                "group the DataFrame or pass `by`, not both."
            )
        frame, group_cols = data.obj, _normalise_by(data.keys)
    elif isinstance(data, pd.DataFrame):
        frame, group_cols = data, _normalise_by(by)
    else:
        raise MalformedInputError(
            f"data must be a pandas DataFrame or DataFrameGroupBy, "
            f"got {type(data).__name__}."
        )

    require_columns(frame, list(group_cols))

    if not group_cols:
        return PartitionedFrame(frame, (), (Partition((), frame),))

    partitions = tuple(
        Partition(key if isinstance(key, tuple) else (key,), part)
        for key, part in frame.groupby(
            list(group_cols), sort=False, dropna=False, observed=True
        )
    )
    return PartitionedFrame(frame, group_cols, partitions)


def apply_partitions(
    parted: PartitionedFrame,
    fn: Callable[[pd.DataFrame], pd.DataFrame],
    progress: bool | None = None,
    desc: str = "Partitions",
) -> pd.DataFrame:
    """
    Apply fn to every partition and concatenate the results.

    Parameters
    ----------
    parted   : Output of partition_frame().
    fn       : Single-partition computation returning a DataFrame. It sees
               one partition at a time; no state is shared between calls.
    progress : Show a tqdm bar. Defaults to SHOW_PROGRESS from config.py.
    desc     : Label of the progress bar.

    Returns
    -------
    Results in partition order, index reset, group-key columns first.
    attrs["group_vars"] lists the grouping columns (empty when ungrouped).
    """
    show = SHOW_PROGRESS if progress is None else progress

    pieces = []
    for part in tqdm(parted.partitions, total=len(parted), desc=desc, disable=not show):
        out = fn(part.frame).reset_index(drop=True)
        for pos, (col, value) in enumerate(zip(parted.group_cols, part.key)):
            out.insert(pos, col, value)
        pieces.append(out)

    if pieces:
        result = pd.concat(pieces, ignore_index=True)
    else:
        # grouped input with zero rows
        result = pd.DataFrame(columns=list(parted.group_cols))

    result.attrs[GROUP_VARS_ATTR] = list(parted.group_cols)
    return result


def group_vars(df: pd.DataFrame) -> list[str]:
    """Grouping columns recorded on a result table."""
    return list(df.attrs.get(GROUP_VARS_ATTR, []))


def is_grouped(df: pd.DataFrame) -> bool:
    """True if the result table was computed per group."""
    return bool(group_vars(df))


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _normalise_by(by) -> tuple[str, ...]:
    if by is None:
        return ()
    if isinstance(by, str):
        return (by,)
    cols = tuple(by)
    bad = [c for c in cols if not isinstance(c, str)]
    if bad:
        raise MalformedInputError(
            f"Grouping must use column names, got {bad}."
        )
    return cols
