# geofilt/filters/response.py
"""
Frequency Response Reporting

Tabulation and plotting of the frequency response of a filter or filter
chain. The response is evaluated with ``frequency_response(length)`` at the
non-negative Fourier frequencies of a signal with ``length`` samples and
sampling interval ``sampling``.

Functions:
    frequency_response_table: Response as a DataFrame (frequency, amplitude,
        phase, real and imaginary part)
    plot_frequency_response: Amplitude and phase plot of the response
"""

import logging
from typing import Optional, Tuple

import numpy as np
import pandas as pd
import matplotlib.pyplot as plt
from matplotlib.figure import Figure
from scipy import fft as sp_fft

from geofilt.core.validation import validate_integer, validate_positive
from geofilt.filters.base import DigitalFilterBase

# Set up module-level logger
logger = logging.getLogger("geofilt.filters.response")


def frequency_response_table(digital_filter: DigitalFilterBase,
                             length: int,
                             sampling: float = 1.0,
                             unwrap: bool = True) -> pd.DataFrame:
    """
    Tabulate the frequency response of a filter.

    Args:
        digital_filter: Filter or filter chain
        length: Number of samples of the signal
        sampling: Sampling interval in seconds
        unwrap: Whether to unwrap the phase across frequencies

    Returns:
        pd.DataFrame: One row per frequency bin with the columns
        ``frequency`` [Hz], ``amplitude``, ``phase`` [rad], ``real`` and ``imag``

    Examples:
        >>> from geofilt.filters import MovingAverage
        >>> from geofilt.filters.response import frequency_response_table
        >>> table = frequency_response_table(MovingAverage(3), 16)
        >>> len(table)
        9
    """
    length = validate_integer(length, "length", minimum=1)
    sampling = validate_positive(float(sampling), "sampling")

    response = np.asarray(digital_filter.frequency_response(length))
    phase = np.angle(response)
    if unwrap:
        phase = np.unwrap(phase)

    return pd.DataFrame({
        "frequency": sp_fft.rfftfreq(length, d=sampling),
        "amplitude": np.abs(response),
        "phase": phase,
        "real": response.real,
        "imag": response.imag,
    })


def plot_frequency_response(digital_filter: DigitalFilterBase,
                            length: int,
                            sampling: float = 1.0,
                            title: Optional[str] = None,
                            figsize: Tuple[float, float] = (10, 8),
                            log_amplitude: bool = True,
                            grid: bool = True) -> Figure:
    """
    Plot amplitude and phase of the frequency response of a filter.

    Args:
        digital_filter: Filter or filter chain
        length: Number of samples of the signal
        sampling: Sampling interval in seconds
        title: Figure title
        figsize: Figure size as (width, height) in inches
        log_amplitude: Whether to use logarithmic axes for the amplitude
        grid: Whether to show grid lines

    Returns:
        Figure: Figure with the amplitude panel on top of the phase panel
    """
    table = frequency_response_table(digital_filter, length, sampling)

    fig, (ax_amplitude, ax_phase) = plt.subplots(2, 1, figsize=figsize, sharex=True)

    # the zero frequency cannot be shown on logarithmic axes
    shown = table.iloc[1:] if log_amplitude and len(table) > 1 else table

    ax_amplitude.plot(shown["frequency"], shown["amplitude"], linewidth=1.5)
    if log_amplitude:
        ax_amplitude.set_xscale("log")
        ax_amplitude.set_yscale("log")
    ax_amplitude.set_ylabel("Amplitude")

    ax_phase.plot(shown["frequency"], np.degrees(shown["phase"]), linewidth=1.5)
    ax_phase.set_xlabel("Frequency [Hz]")
    ax_phase.set_ylabel("Phase [deg]")

    if grid:
        ax_amplitude.grid(True, alpha=0.3)
        ax_phase.grid(True, alpha=0.3)

    ax_amplitude.set_title(title if title is not None else f"Frequency response: {digital_filter!r}")
    fig.tight_layout()

    logger.debug(f"Plotted frequency response of {digital_filter!r} for length {length}")
    return fig
