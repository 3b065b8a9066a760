# geofilt/filters/__init__.py
"""
geofilt Filters Module

Composable linear time-invariant filters for multi-column time series
(rows = epochs, columns = channels), evaluated either in the time domain
(block-wise ARMA recursion) or in the frequency domain (multiplication with
the frequency response), with interchangeable boundary padding policies.

Key components:
- Padding and trimming of arcs before and after filtering
- ARMA filter, the common representation of all linear variants
- Filter variants selectable by configuration name
- Filter chain combining filters and their frequency responses
- Frequency response tables and plots
"""

import logging
from typing import List

# Set up module-level logger
logger = logging.getLogger("geofilt.filters")

try:
    from .base import DigitalFilterBase, FilterOptions
    from .padding import pad, trim
    from .fourier import fft, synthesis, ones_response, apply_response, response_length
    from .arma import ARMAFilter
    from .registry import FILTER_REGISTRY, register_filter, get_filter_class, create_filter
    from .chain import DigitalFilter
    from .moving import MovingAverage, MovingMedian
    from .polynomial import Derivative, Integral
    from .design import Butterworth, Notch, GraceLowpass, Correlation
    from .coefficients import FileFilter, Wavelet, Decorrelation, Lag
    from .reduce import ReduceFilterOutput
    from .response import frequency_response_table, plot_frequency_response
except ImportError as e:
    logger.error(f"Error importing filter components: {e}")
    raise ImportError(
        "Failed to import filter components. Please ensure the package "
        "is correctly installed. You can install it using: "
        "pip install geofilt"
    ) from e


def list_filter_kinds() -> List[str]:
    """
    List the configuration names of all registered filter kinds.

    Returns:
        Sorted list of filter kinds usable in a chain description
    """
    return sorted(FILTER_REGISTRY)


__all__ = [
    # Base classes
    'DigitalFilterBase',
    'FilterOptions',

    # Padding and spectra
    'pad',
    'trim',
    'fft',
    'synthesis',
    'ones_response',
    'apply_response',
    'response_length',

    # Filters
    'ARMAFilter',
    'DigitalFilter',
    'MovingAverage',
    'MovingMedian',
    'Derivative',
    'Integral',
    'Butterworth',
    'Notch',
    'GraceLowpass',
    'Correlation',
    'FileFilter',
    'Wavelet',
    'Decorrelation',
    'Lag',
    'ReduceFilterOutput',

    # Registry
    'FILTER_REGISTRY',
    'register_filter',
    'get_filter_class',
    'create_filter',
    'list_filter_kinds',

    # Reporting
    'frequency_response_table',
    'plot_frequency_response',
]

logger.debug("geofilt filters module initialized")
