'''
Pytest configuration and fixtures for the geofilt test suite.

This module provides the fixtures shared across the test suite: seeded
random signal matrices, orbit arcs for the simulation programs and an
automatic reset of the runtime configuration after every test.
'''

from typing import List

import numpy as np
import pandas as pd
import pytest

from geofilt.core.config import reset_config
from geofilt.simulation.instrument import POSITION_COLUMNS, TIME_COLUMN, VELOCITY_COLUMNS


@pytest.fixture(autouse=True)
def restore_config():
    """Undo runtime configuration changes made by a test."""
    yield
    reset_config()


# ---- Signal Fixtures ----

@pytest.fixture
def rng() -> np.random.Generator:
    """Provide a seeded random number generator for reproducible tests."""
    return np.random.default_rng(42)


@pytest.fixture
def signal_matrix(rng: np.random.Generator) -> np.ndarray:
    """Three channels of white noise with 256 epochs."""
    return rng.standard_normal((256, 3))


@pytest.fixture
def fir_coefficients() -> np.ndarray:
    """An asymmetric five-tap moving average filter."""
    return np.array([0.1, -0.25, 0.6, 0.3, -0.05])


# ---- Orbit Fixtures ----

def circular_orbit(epochs: int, radius: float = 6.8e6, period: float = 5400.0,
                   sampling: float = 5.0, start_angle: float = 0.0) -> pd.DataFrame:
    """Circular equatorial orbit flown counter-clockwise."""
    time = np.arange(epochs) * sampling
    angle = start_angle + 2 * np.pi * time / period
    speed = 2 * np.pi * radius / period
    arc = pd.DataFrame({TIME_COLUMN: time})
    arc[POSITION_COLUMNS[0]] = radius * np.cos(angle)
    arc[POSITION_COLUMNS[1]] = radius * np.sin(angle)
    arc[POSITION_COLUMNS[2]] = 0.0
    arc[VELOCITY_COLUMNS[0]] = -speed * np.sin(angle)
    arc[VELOCITY_COLUMNS[1]] = speed * np.cos(angle)
    arc[VELOCITY_COLUMNS[2]] = 0.0
    return arc


@pytest.fixture
def orbit_arcs() -> List[pd.DataFrame]:
    """Three orbit arcs of different length."""
    return [
        circular_orbit(40),
        circular_orbit(25, start_angle=1.0),
        circular_orbit(60, start_angle=2.5),
    ]
