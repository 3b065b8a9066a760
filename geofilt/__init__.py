# geofilt/__init__.py
"""
geofilt - Digital filters for satellite geodesy time series

A Python toolkit for filtering arcs of satellite observations (orbits,
accelerometer, ranging and attitude data) with composable linear filters.

The toolkit provides:
- Time-domain (block-wise ARMA) and frequency-domain filter evaluation
- Boundary padding policies for finite arcs
- Analytic, polynomial, wavelet and file-based filter variants
- Filter chains configurable from JSON descriptions
- Noise generation and simulation programs operating on arcs

This module serves as the main entry point for the geofilt package.
"""

import logging

# Set up package-wide logger
logger = logging.getLogger("geofilt")

# Version information
__version__ = "1.0.0"

# Package metadata
__title__ = "geofilt"
__description__ = "Digital filters for satellite geodesy time series"

try:
    from . import core
    from . import filters
    from . import simulation
except ImportError as e:
    logger.error(f"Error importing geofilt components: {e}")
    raise ImportError(
        "Failed to import geofilt components. Please ensure the package "
        "is correctly installed. You can install it using: "
        "pip install geofilt"
    ) from e

from .core.config import initialize_config
from .filters import DigitalFilter, create_filter, list_filter_kinds

# Load user configuration and set up logging
initialize_config()

__all__ = [
    'core',
    'filters',
    'simulation',
    'DigitalFilter',
    'create_filter',
    'list_filter_kinds',
    '__version__',
]

logger.debug(f"geofilt v{__version__} initialized")
