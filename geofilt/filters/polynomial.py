# geofilt/filters/polynomial.py

"""
Derivative and integral filters from interpolating polynomials.

Both filters fit a polynomial of degree ``p`` through ``p + 1`` equidistant
samples around the current epoch and evaluate a linear functional of it:

- derivative: the ``d``-th derivative at the current epoch, using samples
  centred on it
- integral: the integral over the last sampling interval, accumulated over
  the arc by the recursion ``y[n] = y[n-1] + ...``

For sample offsets ``t_i`` the functional ``L`` applied to the interpolating
polynomial is ``sum_i w_i f(t_i)`` where the weights solve
``V^T w = L(1, t, ..., t^p)`` with the Vandermonde matrix ``V[i, j] = t_i^j``.
"""

import logging
from math import factorial
from typing import Any, Mapping, Optional, Union

import numpy as np
from scipy import linalg

from geofilt.core.exceptions import ParameterError
from geofilt.core.types import PadType, Vector
from geofilt.core.validation import validate_integer, validate_positive
from geofilt.filters.arma import ARMAFilter
from geofilt.filters.base import FilterOptions
from geofilt.filters.registry import register_filter

logger = logging.getLogger("geofilt.filters.polynomial")


def _stencil(offsets: np.ndarray, moments: np.ndarray) -> Vector:
    """Weights reproducing ``moments`` for all polynomials through ``offsets``."""
    vandermonde = np.vander(offsets, N=offsets.size, increasing=True)
    return linalg.solve(vandermonde.T, moments)


def derivative_coefficients(polynomial_degree: int, derivative_order: int = 1,
                            sampling: float = 1.0) -> Vector:
    """Weights of the centred derivative stencil.

    Args:
        polynomial_degree: Degree of the interpolating polynomial
        derivative_order: Order of the derivative
        sampling: Sampling interval

    Returns:
        Vector: Weights for the samples at offsets ``i - p // 2`` (times the
        sampling), ``i = 0..p``
    """
    center = polynomial_degree // 2
    offsets = (np.arange(polynomial_degree + 1) - center) * sampling
    moments = np.zeros(polynomial_degree + 1)
    moments[derivative_order] = factorial(derivative_order)
    return _stencil(offsets, moments)


def integral_coefficients(polynomial_degree: int, sampling: float = 1.0) -> Vector:
    """Weights of the integral over the last sampling interval.

    Returns:
        Vector: Weights for the samples at offsets ``i - (p + 1) // 2``
        (times the sampling), ``i = 0..p``
    """
    center = (polynomial_degree + 1) // 2
    offsets = (np.arange(polynomial_degree + 1) - center) * sampling
    powers = np.arange(1, polynomial_degree + 2)
    # integral of t^j over [-sampling, 0]
    moments = -((-sampling) ** powers) / powers
    return _stencil(offsets, moments)


@register_filter("derivative")
class Derivative(ARMAFilter):
    """Derivative from a centred interpolating polynomial.

    Args:
        polynomial_degree: Degree of the interpolating polynomial (>= 1)
        derivative_order: Order of the derivative (1..polynomial_degree)
        sampling: Sampling interval in seconds
        pad_type: Boundary extension policy
        in_frequency_domain: Evaluate in the frequency domain
        backward: Apply against reversed time order

    Raises:
        ParameterError: If the derivative order exceeds the polynomial degree
    """

    def __init__(self, polynomial_degree: int, derivative_order: int = 1,
                 sampling: float = 1.0,
                 pad_type: Optional[Union[PadType, str]] = None,
                 in_frequency_domain: bool = False,
                 backward: bool = False) -> None:
        degree = validate_integer(polynomial_degree, "polynomialDegree", minimum=1)
        order = validate_integer(derivative_order, "derivativeOrder", minimum=1)
        sampling = validate_positive(float(sampling), "sampling")
        if order > degree:
            raise ParameterError(
                f"Derivative order {order} exceeds the polynomial degree {degree}",
                param_name="derivativeOrder",
                param_value=order,
                constraint=f"Must be <= polynomialDegree ({degree})"
            )

        self.polynomial_degree = degree
        self.derivative_order = order
        self.sampling = sampling

        weights = derivative_coefficients(degree, order, sampling)
        super().__init__(
            bn=weights[::-1],
            an=[1.0],
            bn_start_index=degree - degree // 2,
            backward=backward,
            in_frequency_domain=in_frequency_domain,
            pad_type=pad_type
        )

    @classmethod
    def from_config(cls, params: Optional[Mapping[str, Any]]) -> "Derivative":
        options = FilterOptions(cls.kind, params)
        instance = cls(
            options.get("polynomialDegree"),
            derivative_order=options.get("derivativeOrder", 1),
            sampling=options.get("sampling", 1.0),
            **cls.arma_options(options)
        )
        options.finish()
        return instance


@register_filter("integral")
class Integral(ARMAFilter):
    """Cumulative integral from interpolating polynomials.

    Each step adds the integral of the interpolating polynomial over the
    last sampling interval; the recursion ``an = [1, -1]`` accumulates the
    steps. The integration constant follows from the padding (the sum over
    the padded samples before the arc starts).

    Args:
        polynomial_degree: Degree of the interpolating polynomial (>= 0)
        sampling: Sampling interval in seconds
        pad_type: Boundary extension policy
        in_frequency_domain: Evaluate in the frequency domain
        backward: Apply against reversed time order
    """

    def __init__(self, polynomial_degree: int, sampling: float = 1.0,
                 pad_type: Optional[Union[PadType, str]] = None,
                 in_frequency_domain: bool = False,
                 backward: bool = False) -> None:
        degree = validate_integer(polynomial_degree, "polynomialDegree", minimum=0)
        sampling = validate_positive(float(sampling), "sampling")

        self.polynomial_degree = degree
        self.sampling = sampling

        weights = integral_coefficients(degree, sampling)
        super().__init__(
            bn=weights[::-1],
            an=[1.0, -1.0],
            bn_start_index=degree - (degree + 1) // 2,
            backward=backward,
            in_frequency_domain=in_frequency_domain,
            pad_type=pad_type
        )

    @classmethod
    def from_config(cls, params: Optional[Mapping[str, Any]]) -> "Integral":
        options = FilterOptions(cls.kind, params)
        instance = cls(
            options.get("polynomialDegree"),
            sampling=options.get("sampling", 1.0),
            **cls.arma_options(options)
        )
        options.finish()
        return instance
