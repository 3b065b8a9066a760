# geofilt/filters/coefficients.py

"""
Filters built from literal or derived coefficient sequences.

- ``file``: ARMA coefficients read from a text file
- ``wavelet``: a-trous low-pass or high-pass cascade of a wavelet scaling filter
- ``decorrelation``: whitening filter of a stationary process with known
  covariance function (Levinson-Durbin recursion)
- ``lag``: pure delay or advance by an integer number of samples

Coefficient files are whitespace separated text, ``#`` starts a comment.
An ARMA coefficient file holds the columns ``index bn [an]``: the row with
index ``i`` weights the input sample ``x[n - i]`` (negative indices look into
the future) and the output sample ``y[n - i]`` (only ``i >= 0``).
"""

import logging
from pathlib import Path
from typing import Any, Mapping, Optional, Sequence, Tuple, Union

import numpy as np
import pandas as pd
import statsmodels.tsa.stattools as smt

from geofilt.core.exceptions import ConfigurationError, ParameterError
from geofilt.core.types import FilePath, PadType, Vector
from geofilt.core.validation import validate_coefficients, validate_integer
from geofilt.filters.arma import ARMAFilter
from geofilt.filters.base import FilterOptions
from geofilt.filters.registry import register_filter

logger = logging.getLogger("geofilt.filters.coefficients")


def read_coefficient_table(path: FilePath) -> np.ndarray:
    """Read a whitespace separated numeric table.

    Returns:
        np.ndarray: Table with one row per line

    Raises:
        ConfigurationError: If the file cannot be read or is not numeric
    """
    path = Path(path)
    try:
        table = pd.read_csv(path, sep=r"\s+", comment="#", header=None, dtype=np.float64)
    except (OSError, ValueError) as e:
        raise ConfigurationError(
            "Failed to read coefficient file",
            config_file=path,
            issue=str(e)
        ) from e
    logger.debug(f"Read {table.shape} coefficient table from {path}")
    return table.to_numpy()


def arma_from_table(table: np.ndarray) -> Tuple[Vector, Vector, int]:
    """Convert an ``index bn [an]`` table to ARMA coefficients.

    Returns:
        tuple: ``(bn, an, bn_start_index)``

    Raises:
        ConfigurationError: If the table has the wrong layout
    """
    table = np.atleast_2d(table)
    if table.shape[0] < 1 or table.shape[1] not in (2, 3):
        raise ConfigurationError(
            f"Coefficient table must have 2 or 3 columns (index bn [an]), got shape {table.shape}",
            setting="inputfileMatrix",
            value=table.shape
        )

    index = table[:, 0]
    if not np.all(index == np.round(index)):
        raise ConfigurationError(
            "Coefficient indices must be integers",
            setting="inputfileMatrix",
            value=index.tolist()
        )
    index = index.astype(int)
    if np.unique(index).size != index.size:
        raise ConfigurationError(
            "Coefficient indices must be unique",
            setting="inputfileMatrix",
            value=index.tolist()
        )

    start = max(0, -int(index.min()))
    bn = np.zeros(int(index.max()) + start + 1)
    bn[index + start] = table[:, 1]

    an = np.zeros(max(int(index.max()), 0) + 1)
    if table.shape[1] == 3:
        causal = index >= 0
        an[index[causal]] = table[causal, 2]
    else:
        an[0] = 1.0
    nonzero = np.flatnonzero(an)
    # an all zero: moving average only
    an = an[:nonzero[-1] + 1] if nonzero.size else np.ones(1)

    return bn, an, start


@register_filter("file")
class FileFilter(ARMAFilter):
    """ARMA filter with coefficients read from a file.

    Args:
        path: Coefficient file with columns ``index bn [an]``
        pad_type: Boundary extension policy
        in_frequency_domain: Evaluate in the frequency domain
        backward: Apply against reversed time order
    """

    def __init__(self, path: FilePath,
                 pad_type: Optional[Union[PadType, str]] = None,
                 in_frequency_domain: bool = False,
                 backward: bool = False) -> None:
        self.path = Path(path)
        bn, an, start = arma_from_table(read_coefficient_table(self.path))
        super().__init__(
            bn=bn,
            an=an,
            bn_start_index=start,
            backward=backward,
            in_frequency_domain=in_frequency_domain,
            pad_type=pad_type
        )

    @classmethod
    def from_config(cls, params: Optional[Mapping[str, Any]]) -> "FileFilter":
        options = FilterOptions(cls.kind, params)
        instance = cls(options.get("inputfileMatrix"), **cls.arma_options(options))
        options.finish()
        return instance


def _upsample(coefficients: np.ndarray, factor: int) -> np.ndarray:
    """Insert ``factor - 1`` zeros between coefficients."""
    upsampled = np.zeros((coefficients.size - 1) * factor + 1)
    upsampled[::factor] = coefficients
    return upsampled


def wavelet_coefficients(scaling: Sequence[float], level: int,
                         band_type: str = "lowpass") -> Vector:
    """Equivalent filter of an a-trous wavelet cascade.

    Args:
        scaling: Scaling (low-pass) filter of the wavelet
        level: Decomposition level (>= 1)
        band_type: ``lowpass`` for the approximation, ``highpass`` for the
            detail at ``level``

    Returns:
        Vector: Coefficients of the cascaded filter, the low-pass normalized
        to unit DC gain
    """
    lowpass = validate_coefficients(scaling, "coefficients")
    total = lowpass.sum()
    if total == 0.0:
        raise ParameterError(
            "Wavelet scaling coefficients must not sum to zero",
            param_name="coefficients",
            constraint="sum != 0"
        )
    lowpass = lowpass / total
    # quadrature mirror filter
    highpass = lowpass[::-1] * (-1.0) ** np.arange(lowpass.size)

    cascade = np.ones(1)
    for j in range(level - 1):
        cascade = np.convolve(cascade, _upsample(lowpass, 2 ** j))
    final = lowpass if band_type == "lowpass" else highpass
    return np.convolve(cascade, _upsample(final, 2 ** (level - 1)))


@register_filter("wavelet")
class Wavelet(ARMAFilter):
    """Low-pass or high-pass filter from a wavelet decomposition level.

    Args:
        coefficients: Scaling filter coefficients of the wavelet
        level: Decomposition level
        band_type: ``lowpass`` or ``highpass``
        pad_type: Boundary extension policy
        in_frequency_domain: Evaluate in the frequency domain
    """

    def __init__(self, coefficients: Sequence[float], level: int = 1,
                 band_type: str = "lowpass",
                 pad_type: Optional[Union[PadType, str]] = None,
                 in_frequency_domain: bool = False) -> None:
        level = validate_integer(level, "level", minimum=1)
        if band_type not in ("lowpass", "highpass"):
            raise ParameterError(
                f"Unknown wavelet filter type: {band_type!r}",
                param_name="type",
                param_value=band_type,
                constraint="lowpass or highpass"
            )
        self.level = level
        self.band_type = band_type

        bn = wavelet_coefficients(coefficients, level, band_type)
        super().__init__(
            bn=bn,
            an=[1.0],
            bn_start_index=(bn.size - 1) // 2,
            in_frequency_domain=in_frequency_domain,
            pad_type=pad_type
        )

    @classmethod
    def from_config(cls, params: Optional[Mapping[str, Any]]) -> "Wavelet":
        options = FilterOptions(cls.kind, params)
        path = options.get("inputfileWavelet", None)
        if path is not None:
            coefficients = read_coefficient_table(path).ravel()
        else:
            coefficients = options.get("coefficients")
        instance = cls(
            coefficients,
            level=options.get("level", 1),
            band_type=options.get("type", "lowpass"),
            pad_type=options.pad_type(),
            in_frequency_domain=options.in_frequency_domain()
        )
        options.finish()
        return instance


def decorrelation_coefficients(covariance: Sequence[float], order: int) -> Vector:
    """Whitening filter of an autoregressive approximation.

    Fits an AR(order) model to the covariance function with the
    Levinson-Durbin recursion and returns the prediction error filter scaled
    to unit innovation variance.

    Args:
        covariance: Covariance function at lags ``0, 1, ...``
        order: Order of the autoregressive model

    Returns:
        Vector: ``[1, -phi_1, ..., -phi_p] / sigma``
    """
    covariance = validate_coefficients(covariance, "covariance")
    if covariance[0] <= 0.0:
        raise ParameterError(
            "Variance (covariance at lag 0) must be positive",
            param_name="covariance",
            param_value=covariance[0],
            constraint="covariance[0] > 0"
        )
    if covariance.size < order + 1:
        raise ParameterError(
            f"AR order {order} needs {order + 1} covariances, got {covariance.size}",
            param_name="order",
            param_value=order,
            constraint=f"Must be <= {covariance.size - 1}"
        )

    sigma_v, phi, _, _, _ = smt.levinson_durbin(covariance, nlags=order, isacov=True)
    if not sigma_v > 0.0:
        raise ParameterError(
            "Covariance function is not positive definite",
            param_name="covariance",
            constraint="Positive definite"
        )
    return np.concatenate(([1.0], -np.asarray(phi))) / np.sqrt(sigma_v)


@register_filter("decorrelation")
class Decorrelation(ARMAFilter):
    """Whitening filter for coloured noise with known covariance.

    Args:
        covariance: Covariance function at lags ``0, 1, ...``
        order: Order of the autoregressive approximation
        pad_type: Boundary extension policy
        in_frequency_domain: Evaluate in the frequency domain
        backward: Apply against reversed time order
    """

    def __init__(self, covariance: Sequence[float], order: int,
                 pad_type: Optional[Union[PadType, str]] = None,
                 in_frequency_domain: bool = False,
                 backward: bool = False) -> None:
        order = validate_integer(order, "order", minimum=1)
        self.order = order
        super().__init__(
            bn=decorrelation_coefficients(covariance, order),
            an=[1.0],
            bn_start_index=0,
            backward=backward,
            in_frequency_domain=in_frequency_domain,
            pad_type=pad_type
        )

    @classmethod
    def from_config(cls, params: Optional[Mapping[str, Any]]) -> "Decorrelation":
        options = FilterOptions(cls.kind, params)
        path = options.get("inputfileCovariance", None)
        if path is not None:
            # last column holds the covariance, a leading lag column is optional
            covariance = read_coefficient_table(path)[:, -1]
        else:
            covariance = options.get("covariance")
        instance = cls(covariance, options.get("order"), **cls.arma_options(options))
        options.finish()
        return instance


@register_filter("lag")
class Lag(ARMAFilter):
    """Shift a signal by an integer number of samples.

    ``y[n] = x[n - lag]``: positive lags delay, negative lags advance.

    Args:
        lag: Shift in samples
        pad_type: Boundary extension policy
        in_frequency_domain: Evaluate in the frequency domain
    """

    def __init__(self, lag: int,
                 pad_type: Optional[Union[PadType, str]] = None,
                 in_frequency_domain: bool = False) -> None:
        self.lag = validate_integer(lag, "lag")
        bn = np.zeros(abs(self.lag) + 1)
        if self.lag >= 0:
            bn[self.lag] = 1.0
            start = 0
        else:
            bn[0] = 1.0
            start = -self.lag
        super().__init__(
            bn=bn,
            an=[1.0],
            bn_start_index=start,
            in_frequency_domain=in_frequency_domain,
            pad_type=pad_type
        )

    @classmethod
    def from_config(cls, params: Optional[Mapping[str, Any]]) -> "Lag":
        options = FilterOptions(cls.kind, params)
        instance = cls(
            options.get("lag"),
            pad_type=options.pad_type(),
            in_frequency_domain=options.in_frequency_domain()
        )
        options.finish()
        return instance
