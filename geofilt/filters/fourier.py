# geofilt/filters/fourier.py

"""
Discrete Fourier transform of real-valued signal columns.

Only the non-negative frequencies are kept: a real signal of ``n`` samples is
represented by ``n // 2 + 1`` complex bins. The inverse transform (synthesis)
therefore needs to know whether the original length was even, which decides
whether the last bin is a Nyquist bin.
"""

import numpy as np
from scipy import fft as sp_fft

from geofilt.core.exceptions import DimensionError
from geofilt.core.types import ComplexVector, Matrix
from geofilt.core.validation import validate_input_matrix, validate_integer


def response_length(length: int) -> int:
    """Number of frequency bins of a real signal with ``length`` samples."""
    return length // 2 + 1


def ones_response(length: int) -> ComplexVector:
    """All-pass frequency response for signals with ``length`` samples."""
    length = validate_integer(length, "length", minimum=0)
    return np.ones(response_length(length), dtype=np.complex128)


def fft(signal: np.ndarray) -> np.ndarray:
    """Transform real signals to the frequency domain.

    Args:
        signal: Vector, or matrix whose columns are transformed independently

    Returns:
        np.ndarray: Complex spectrum with ``n // 2 + 1`` rows
    """
    return sp_fft.rfft(np.asarray(signal, dtype=np.float64), axis=0)


def synthesis(spectrum: np.ndarray, even: bool) -> np.ndarray:
    """Transform a one-sided spectrum back to a real signal.

    Args:
        spectrum: Complex spectrum (vector or one column per signal)
        even: Whether the synthesized signal has an even number of samples;
            ``m`` bins give ``2*(m-1)`` samples if even, else ``2*m - 1``

    Returns:
        np.ndarray: Real signal(s)
    """
    spectrum = np.asarray(spectrum, dtype=np.complex128)
    bins = spectrum.shape[0]
    if bins < 1:
        raise DimensionError(
            "Cannot synthesize a signal from an empty spectrum",
            array_name="spectrum",
            expected_shape="(m, ...) with m >= 1",
            actual_shape=spectrum.shape
        )
    n = 2 * (bins - 1) if even else 2 * bins - 1
    return sp_fft.irfft(spectrum, n=n, axis=0)


def apply_response(data: Matrix, response: ComplexVector) -> Matrix:
    """Filter each column by multiplication with a frequency response.

    Args:
        data: Signal matrix (rows = epochs)
        response: Complex response with ``rows // 2 + 1`` bins

    Returns:
        Matrix: Filtered matrix of the same shape

    Raises:
        DimensionError: If the response does not match the row count
    """
    matrix = validate_input_matrix(data)
    response = np.asarray(response, dtype=np.complex128).ravel()
    rows = matrix.shape[0]

    if response.size != response_length(rows):
        raise DimensionError(
            f"Frequency response with {response.size} bins does not match {rows} rows",
            array_name="response",
            expected_shape=f"({response_length(rows)},)",
            actual_shape=response.shape
        )

    spectrum = fft(matrix) * response[:, np.newaxis]
    return synthesis(spectrum, even=(rows % 2 == 0))
