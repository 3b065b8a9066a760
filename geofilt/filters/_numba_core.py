"""
Numba-accelerated core functions for the filter subsystem.

This module holds the scalar loops that do not map onto vectorized NumPy
operations:

- the direct ARMA recursion, used as the reference formulation that the
  block-wise evaluation in :mod:`geofilt.filters.arma` reproduces
- the moving median, which is nonlinear and therefore has neither an ARMA
  nor a frequency-domain representation
"""

import logging

import numpy as np
from numba import jit

# Set up module-level logger
logger = logging.getLogger("geofilt.filters._numba_core")


@jit(nopython=True, cache=True)
def arma_recursion(data: np.ndarray,
                   bn: np.ndarray,
                   an: np.ndarray,
                   bn_start_index: int) -> np.ndarray:
    """
    Apply an ARMA filter by direct recursion.

    Computes, column by column,

        y[n] = (sum_k bn[k] x[n-k+s] - sum_{k>=1} an[k] y[n-k]) / an[0]

    with ``s = bn_start_index`` and zero samples outside the data, i.e. the
    filter starts from rest. The recursion begins at ``n = -s``, the first
    epoch whose look-ahead taps reach ``x[0]``.

    Args:
        data: Input matrix (rows = epochs, columns = channels)
        bn: Numerator (moving average) coefficients
        an: Denominator (autoregressive) coefficients, an[0] normalizes
        bn_start_index: Position of the current sample within bn

    Returns:
        np.ndarray: Filtered matrix with the shape of data
    """
    rows, columns = data.shape
    # row m holds epoch m - bn_start_index
    output = np.zeros((rows + bn_start_index, columns))

    for c in range(columns):
        for m in range(rows + bn_start_index):
            acc = 0.0
            for k in range(bn.shape[0]):
                idx = m - k
                if 0 <= idx < rows:
                    acc += bn[k] * data[idx, c]
            for k in range(1, an.shape[0]):
                if m - k >= 0:
                    acc -= an[k] * output[m - k, c]
            output[m, c] = acc / an[0]

    return output[bn_start_index:]


@jit(nopython=True, cache=True)
def moving_median(padded: np.ndarray, window: int, ignore_nan: bool) -> np.ndarray:
    """
    Median over a sliding window.

    Args:
        padded: Input matrix, already extended at both ends
        window: Number of samples in the window
        ignore_nan: Skip NaN samples, used to shrink the window at the
            boundaries of an arc that is not padded

    Returns:
        np.ndarray: Matrix with ``rows - window + 1`` rows, row i holding the
        column-wise median of ``padded[i:i+window]``
    """
    rows, columns = padded.shape
    count = rows - window + 1
    output = np.empty((count, columns))

    for c in range(columns):
        column = padded[:, c].copy()
        for i in range(count):
            if ignore_nan:
                output[i, c] = np.nanmedian(column[i:i + window])
            else:
                output[i, c] = np.median(column[i:i + window])

    return output
