# geofilt/simulation/__init__.py
"""
geofilt Simulation Module

Collaborators through which the filter core is used on real data: noise
generators, instrument files holding arcs, parallel processing of arcs and
the simulation programs built on them.
"""

import logging

# Set up module-level logger
logger = logging.getLogger("geofilt.simulation")

from .noise import NoiseGenerator, WhiteNoiseGenerator, FilteredNoiseGenerator
from .instrument import read_arcs, write_arcs, arc_statistics, data_columns
from .parallel import for_each
from .programs import (
    filter_arcs,
    noise_orbit,
    simulate_star_camera,
    local_orbit_frames,
    rotation_from_axes
)

__all__ = [
    'NoiseGenerator',
    'WhiteNoiseGenerator',
    'FilteredNoiseGenerator',
    'read_arcs',
    'write_arcs',
    'arc_statistics',
    'data_columns',
    'for_each',
    'filter_arcs',
    'noise_orbit',
    'simulate_star_camera',
    'local_orbit_frames',
    'rotation_from_axes',
]
