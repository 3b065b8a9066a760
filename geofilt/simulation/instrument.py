# geofilt/simulation/instrument.py

"""
Instrument files: sequences of arcs of time-tagged records.

An arc is a DataFrame with a ``time`` column and one column per data
channel. An instrument file stores all arcs of an instrument in one CSV
table with an additional leading ``arc`` column holding the arc number.
"""

import logging
from pathlib import Path
from typing import List, Sequence

import numpy as np
import pandas as pd

from geofilt.core.exceptions import ConfigurationError, DimensionError
from geofilt.core.types import FilePath

logger = logging.getLogger("geofilt.simulation.instrument")

ARC_COLUMN = "arc"
TIME_COLUMN = "time"

POSITION_COLUMNS = ["x", "y", "z"]
VELOCITY_COLUMNS = ["vx", "vy", "vz"]
QUATERNION_COLUMNS = ["q0", "q1", "q2", "q3"]


def data_columns(arc: pd.DataFrame) -> List[str]:
    """Names of the data channels of an arc (all columns except time)."""
    return [column for column in arc.columns if column != TIME_COLUMN]


def read_arcs(path: FilePath) -> List[pd.DataFrame]:
    """Read all arcs of an instrument file.

    Args:
        path: CSV file with ``arc`` and ``time`` columns

    Returns:
        List of arcs ordered by arc number, each with a fresh index

    Raises:
        ConfigurationError: If the file cannot be read or lacks the
            ``arc``/``time`` columns
    """
    path = Path(path)
    try:
        table = pd.read_csv(path)
    except (OSError, ValueError) as e:
        raise ConfigurationError(
            "Failed to read instrument file",
            config_file=path,
            issue=str(e)
        ) from e

    missing = [column for column in (ARC_COLUMN, TIME_COLUMN) if column not in table.columns]
    if missing:
        raise ConfigurationError(
            f"Instrument file lacks column(s) {missing}",
            config_file=path,
            issue=f"Found columns {list(table.columns)}"
        )

    arcs = [
        group.drop(columns=ARC_COLUMN).reset_index(drop=True)
        for _, group in table.groupby(ARC_COLUMN, sort=True)
    ]
    logger.info(f"Read {len(arcs)} arcs with {len(table)} epochs from {path}")
    return arcs


def write_arcs(path: FilePath, arcs: Sequence[pd.DataFrame]) -> Path:
    """Write arcs to an instrument file.

    Args:
        path: Output CSV file, parent directories are created
        arcs: Arcs in order, all with a ``time`` column

    Returns:
        Path: The written file
    """
    path = Path(path)
    frames = []
    for number, arc in enumerate(arcs):
        if TIME_COLUMN not in arc.columns:
            raise DimensionError(
                f"Arc {number} has no '{TIME_COLUMN}' column",
                array_name=f"arc {number}",
                expected_shape=f"columns including '{TIME_COLUMN}'",
                actual_shape=arc.shape
            )
        frame = arc.reset_index(drop=True).copy()
        frame.insert(0, ARC_COLUMN, number)
        frames.append(frame)

    table = pd.concat(frames, ignore_index=True) if frames else pd.DataFrame(columns=[ARC_COLUMN, TIME_COLUMN])
    path.parent.mkdir(parents=True, exist_ok=True)
    table.to_csv(path, index=False)
    logger.info(f"Wrote {len(frames)} arcs with {len(table)} epochs to {path}")
    return path


def arc_statistics(arcs: Sequence[pd.DataFrame]) -> pd.DataFrame:
    """Summary of a list of arcs.

    Returns:
        pd.DataFrame: One row per arc with ``epochs``, ``start``, ``end`` and
        the median ``sampling`` interval (NaN for arcs with fewer than two
        epochs)
    """
    rows = []
    for number, arc in enumerate(arcs):
        times = arc[TIME_COLUMN].to_numpy(dtype=np.float64) if len(arc) else np.empty(0)
        rows.append({
            ARC_COLUMN: number,
            "epochs": len(arc),
            "start": times[0] if times.size else np.nan,
            "end": times[-1] if times.size else np.nan,
            "sampling": float(np.median(np.diff(times))) if times.size > 1 else np.nan,
        })
    statistics = pd.DataFrame(rows, columns=[ARC_COLUMN, "epochs", "start", "end", "sampling"])
    if len(statistics):
        logger.info(
            f"{len(statistics)} arcs, {int(statistics['epochs'].sum())} epochs, "
            f"epochs per arc: min {int(statistics['epochs'].min())}, "
            f"max {int(statistics['epochs'].max())}"
        )
    return statistics
