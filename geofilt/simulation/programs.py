# geofilt/simulation/programs.py

"""
Programs operating on lists of arcs.

Each program processes the arcs independently through
:func:`geofilt.simulation.parallel.for_each` and returns the new arcs in the
same order; failures are reported with the number of the failing arc.

- :func:`filter_arcs`: apply a filter chain to the data columns of each arc
- :func:`noise_orbit`: add noise given in the local orbit frame (along,
  cross, radial) to positions and velocities
- :func:`simulate_star_camera`: attitude quaternions of a satellite flying
  with its x-axis along the velocity
"""

import logging
from functools import partial
from typing import List, Optional, Sequence

import numpy as np
import pandas as pd
from scipy.spatial.transform import Rotation

from geofilt.core.exceptions import DimensionError, InsufficientLengthError, ParameterError
from geofilt.core.types import AttitudeMode
from geofilt.filters.base import DigitalFilterBase
from geofilt.simulation.instrument import (
    POSITION_COLUMNS, QUATERNION_COLUMNS, TIME_COLUMN, VELOCITY_COLUMNS, data_columns
)
from geofilt.simulation.noise import NoiseGenerator
from geofilt.simulation.parallel import for_each

logger = logging.getLogger("geofilt.simulation.programs")

ATTITUDE_MODES = ("earth_pointing", "velocity_leading")


def _normalize(vectors: np.ndarray) -> np.ndarray:
    return vectors / np.linalg.norm(vectors, axis=-1, keepdims=True)


def rotation_from_axes(x: np.ndarray, y: np.ndarray) -> np.ndarray:
    """Rotation matrices from an x-axis and an approximate y-axis.

    The y-axis is orthogonalized against the x-axis and the z-axis completes
    a right-handed system.

    Args:
        x: Direction of the x-axes, shape (n, 3)
        y: Approximate direction of the y-axes, shape (n, 3)

    Returns:
        np.ndarray: Matrices of shape (n, 3, 3) with the axes as columns
    """
    x = _normalize(x)
    y = _normalize(y - np.sum(x * y, axis=-1, keepdims=True) * x)
    z = np.cross(x, y)
    return np.stack([x, y, z], axis=-1)


def _orbit_columns(arc: pd.DataFrame, columns: List[str], name: str) -> np.ndarray:
    missing = [column for column in columns if column not in arc.columns]
    if missing:
        raise DimensionError(
            f"Orbit arc lacks {name} column(s) {missing}",
            array_name="arc",
            expected_shape=f"columns {columns}",
            actual_shape=arc.shape
        )
    return arc[columns].to_numpy(dtype=np.float64)


def local_orbit_frames(positions: np.ndarray) -> np.ndarray:
    """Rotations from the local orbit frame (along, cross, radial) to the
    inertial frame.

    The along-track direction is approximated by the difference of
    neighbouring positions. Arcs with a single epoch get the identity.

    Args:
        positions: Positions, shape (n, 3)

    Returns:
        np.ndarray: Matrices of shape (n, 3, 3)
    """
    epochs = positions.shape[0]
    if epochs < 2:
        return np.tile(np.eye(3), (epochs, 1, 1))

    along = np.empty_like(positions)
    along[1:] = positions[1:] - positions[:-1]
    along[0] = along[1]

    radial = _normalize(positions)
    cross = _normalize(np.cross(radial, along))
    along = np.cross(cross, radial)
    return np.stack([along, cross, radial], axis=-1)


def _filter_arc(arc: pd.DataFrame, digital_filter: DigitalFilterBase,
                columns: Optional[Sequence[str]]) -> pd.DataFrame:
    selected = list(columns) if columns is not None else data_columns(arc)
    result = arc.copy()
    result[selected] = digital_filter.filter(arc[selected].to_numpy(dtype=np.float64))
    return result


def filter_arcs(arcs: Sequence[pd.DataFrame],
                digital_filter: DigitalFilterBase,
                columns: Optional[Sequence[str]] = None,
                max_workers: Optional[int] = None) -> List[pd.DataFrame]:
    """
    Filter the data columns of every arc.

    Args:
        arcs: Arcs with a ``time`` column
        digital_filter: Filter or filter chain
        columns: Columns to filter, defaults to all except ``time``
        max_workers: Number of parallel workers

    Returns:
        List of filtered arcs; unselected columns are copied unchanged

    Raises:
        ProcessingError: If filtering an arc fails
    """
    logger.info(f"Filtering {len(arcs)} arcs with {digital_filter!r}")
    return for_each(
        arcs,
        partial(_filter_arc, digital_filter=digital_filter, columns=columns),
        max_workers=max_workers,
        operation="filter_arcs"
    )


def _noise_orbit_arc(item, has_velocity_noise: bool) -> pd.DataFrame:
    arc, position_noise, velocity_noise = item
    positions = _orbit_columns(arc, POSITION_COLUMNS, "position")
    rotation = local_orbit_frames(positions)

    result = arc.copy()
    result[POSITION_COLUMNS] = positions + np.einsum("nij,nj->ni", rotation, position_noise)
    if has_velocity_noise:
        velocities = _orbit_columns(arc, VELOCITY_COLUMNS, "velocity")
        result[VELOCITY_COLUMNS] = velocities + np.einsum("nij,nj->ni", rotation, velocity_noise)
    return result


def noise_orbit(arcs: Sequence[pd.DataFrame],
                noise_position: Optional[NoiseGenerator] = None,
                noise_velocity: Optional[NoiseGenerator] = None,
                max_workers: Optional[int] = None) -> List[pd.DataFrame]:
    """
    Add noise to orbit positions and velocities.

    Noise is drawn as (along, cross, radial) components and rotated into the
    frame of the orbit. All noise is drawn before the arcs are distributed,
    so results are reproducible for seeded generators regardless of the
    number of workers.

    Args:
        arcs: Orbit arcs with columns ``x y z`` and, if velocity noise is
            added, ``vx vy vz``
        noise_position: Generator of position noise [m], None for no noise
        noise_velocity: Generator of velocity noise [m/s], None for no noise
        max_workers: Number of parallel workers

    Returns:
        List of arcs with noisy positions and velocities

    Raises:
        ProcessingError: If an arc cannot be processed
    """
    logger.info(f"Adding noise to {len(arcs)} orbit arcs")

    items = []
    for arc in arcs:
        epochs = len(arc)
        position_noise = (noise_position.noise(epochs, 3) if noise_position is not None
                          else np.zeros((epochs, 3)))
        velocity_noise = (noise_velocity.noise(epochs, 3) if noise_velocity is not None
                          else np.zeros((epochs, 3)))
        items.append((arc, position_noise, velocity_noise))

    return for_each(
        items,
        partial(_noise_orbit_arc, has_velocity_noise=noise_velocity is not None),
        max_workers=max_workers,
        operation="noise_orbit"
    )


def _star_camera_arc(arc: pd.DataFrame, attitude_mode: str) -> pd.DataFrame:
    positions = _orbit_columns(arc, POSITION_COLUMNS, "position")
    epochs = positions.shape[0]

    if all(column in arc.columns for column in VELOCITY_COLUMNS):
        velocities = arc[VELOCITY_COLUMNS].to_numpy(dtype=np.float64)
    else:
        velocities = np.zeros_like(positions)

    # missing velocities are replaced by position differences
    missing = np.linalg.norm(velocities, axis=1) == 0.0
    if np.any(missing):
        if epochs < 2:
            raise InsufficientLengthError(
                "Arc without velocities needs at least two epochs to derive the flight direction",
                rows=epochs,
                required=2,
                operation="simulate_star_camera"
            )
        differences = np.empty_like(positions)
        differences[:-1] = positions[1:] - positions[:-1]
        differences[-1] = positions[-1] - positions[-2]
        velocities[missing] = differences[missing]

    x = velocities
    if attitude_mode == "earth_pointing":
        y = np.cross(-positions, x)
    else:
        y = np.cross(velocities, positions)

    quaternions = Rotation.from_matrix(rotation_from_axes(x, y)).as_quat()
    # scalar first
    result = pd.DataFrame(quaternions[:, [3, 0, 1, 2]], columns=QUATERNION_COLUMNS)
    result.insert(0, TIME_COLUMN, arc[TIME_COLUMN].to_numpy())
    return result


def simulate_star_camera(arcs: Sequence[pd.DataFrame],
                         attitude_mode: AttitudeMode = "earth_pointing",
                         max_workers: Optional[int] = None) -> List[pd.DataFrame]:
    """
    Simulate star camera attitude from orbit arcs.

    The satellite x-axis points along the velocity. In ``earth_pointing``
    mode the z-axis points towards the Earth centre (as close as possible),
    in ``velocity_leading`` mode the y-axis is the orbit normal.

    Args:
        arcs: Orbit arcs with columns ``time x y z`` and optionally
            ``vx vy vz`` (zero or missing velocities are derived from the
            positions)
        attitude_mode: ``earth_pointing`` or ``velocity_leading``
        max_workers: Number of parallel workers

    Returns:
        List of arcs with ``time`` and quaternion columns ``q0 q1 q2 q3``
        (scalar first) rotating from the satellite to the inertial frame

    Raises:
        ParameterError: If the attitude mode is unknown
        ProcessingError: If an arc cannot be processed
    """
    if attitude_mode not in ATTITUDE_MODES:
        raise ParameterError(
            f"Unknown attitude mode: {attitude_mode!r}",
            param_name="attitudeMode",
            param_value=attitude_mode,
            constraint=f"One of {list(ATTITUDE_MODES)}"
        )

    logger.info(f"Simulating star camera data ({attitude_mode}) for {len(arcs)} arcs")
    return for_each(
        arcs,
        partial(_star_camera_arc, attitude_mode=attitude_mode),
        max_workers=max_workers,
        operation="simulate_star_camera"
    )
