# geofilt/core/validation.py

"""
Validation utilities for geofilt.

This module provides the input checks shared by all filters: conversion of
array-like input to signal matrices, validation of coefficient sequences and
scalar parameter constraints. Failures raise the toolkit's own exception
classes with informative context.
"""

import numbers
from typing import Any, Optional, Union

import numpy as np
import pandas as pd

from geofilt.core.exceptions import DimensionError, ParameterError
from geofilt.core.types import Matrix, MatrixLike, Vector


def validate_input_matrix(data: MatrixLike, name: str = "input") -> Matrix:
    """Convert input data to a float signal matrix.

    One-dimensional input is treated as a single channel and returned as a
    column matrix. pandas objects are converted through their values.

    Args:
        data: Signal data (rows = epochs, columns = channels)
        name: Name of the data for error messages

    Returns:
        Matrix: Two-dimensional float64 array

    Raises:
        TypeError: If data is None
        DimensionError: If data has more than two dimensions
    """
    if data is None:
        raise TypeError(f"{name} cannot be None")

    if isinstance(data, (pd.Series, pd.DataFrame)):
        data = data.to_numpy()

    matrix = np.asarray(data, dtype=np.float64)

    if matrix.ndim == 0:
        raise DimensionError(
            f"{name} must be a vector or matrix, got a scalar",
            array_name=name,
            expected_shape="(rows, columns)",
            actual_shape=matrix.shape
        )
    if matrix.ndim == 1:
        matrix = matrix.reshape(-1, 1)
    elif matrix.ndim != 2:
        raise DimensionError(
            f"{name} must be 2-dimensional, got {matrix.ndim} dimensions",
            array_name=name,
            expected_shape="(rows, columns)",
            actual_shape=matrix.shape
        )

    return matrix


def validate_coefficients(values: Any, name: str = "coefficients") -> Vector:
    """Validate a filter coefficient sequence.

    Args:
        values: Sequence of coefficients
        name: Name of the sequence for error messages

    Returns:
        Vector: One-dimensional float64 array with at least one element

    Raises:
        DimensionError: If the coefficients are not a non-empty vector
        ParameterError: If the coefficients contain NaN or infinite values
    """
    vector = np.atleast_1d(np.asarray(values, dtype=np.float64))

    if vector.ndim != 1:
        if vector.ndim == 2 and 1 in vector.shape:
            vector = vector.ravel()
        else:
            raise DimensionError(
                f"{name} must be 1-dimensional, got shape {vector.shape}",
                array_name=name,
                expected_shape="(n,)",
                actual_shape=vector.shape
            )

    if vector.size == 0:
        raise DimensionError(
            f"{name} must contain at least one coefficient",
            array_name=name,
            expected_shape="(n,) with n >= 1",
            actual_shape=vector.shape
        )

    if not np.all(np.isfinite(vector)):
        raise ParameterError(
            f"{name} contains NaN or infinite values",
            param_name=name,
            constraint="Must be finite"
        )

    return vector


def validate_positive(value: float, param_name: str) -> float:
    """Validate that a parameter is positive.

    Raises:
        ParameterError: If the parameter is not positive
    """
    if not value > 0:
        raise ParameterError(
            f"Parameter {param_name} must be positive, got {value}",
            param_name=param_name,
            param_value=value,
            constraint="Must be positive"
        )
    return value


def validate_non_negative(value: float, param_name: str) -> float:
    """Validate that a parameter is non-negative.

    Raises:
        ParameterError: If the parameter is negative
    """
    if not value >= 0:
        raise ParameterError(
            f"Parameter {param_name} must be non-negative, got {value}",
            param_name=param_name,
            param_value=value,
            constraint="Must be non-negative"
        )
    return value


def validate_integer(value: Any, param_name: str,
                     minimum: Optional[int] = None) -> int:
    """Validate that a parameter is an integer, optionally bounded below.

    Args:
        value: Parameter value to validate
        param_name: Name of the parameter for error messages
        minimum: Smallest admissible value, or None for no bound

    Returns:
        int: The validated parameter value

    Raises:
        ParameterError: If the parameter is not an integer or below minimum
    """
    if isinstance(value, bool) or not isinstance(value, numbers.Integral):
        if isinstance(value, numbers.Real) and float(value).is_integer():
            value = int(value)
        else:
            raise ParameterError(
                f"Parameter {param_name} must be an integer, got {value!r}",
                param_name=param_name,
                param_value=value,
                constraint="Must be an integer"
            )
    value = int(value)
    if minimum is not None and value < minimum:
        raise ParameterError(
            f"Parameter {param_name} must be at least {minimum}, got {value}",
            param_name=param_name,
            param_value=value,
            constraint=f"Must be >= {minimum}"
        )
    return value


def validate_range(value: float, param_name: str,
                   lower: float, upper: float,
                   inclusive: bool = False) -> float:
    """Validate that a parameter lies inside an interval.

    Args:
        value: Parameter value to validate
        param_name: Name of the parameter for error messages
        lower: Lower bound
        upper: Upper bound
        inclusive: Whether the bounds themselves are admissible

    Returns:
        float: The validated parameter value

    Raises:
        ParameterError: If the parameter is outside the interval
    """
    inside = (lower <= value <= upper) if inclusive else (lower < value < upper)
    if not inside:
        brackets = "[]" if inclusive else "()"
        interval = f"{brackets[0]}{lower}, {upper}{brackets[1]}"
        raise ParameterError(
            f"Parameter {param_name} must be in {interval}, got {value}",
            param_name=param_name,
            param_value=value,
            constraint=f"Must be in {interval}"
        )
    return value


def validate_bool(value: Union[bool, str, int], param_name: str) -> bool:
    """Interpret a configuration flag.

    Strings such as ``"true"``, ``"yes"``, ``"1"`` and their negations are
    accepted alongside booleans and the integers 0 and 1.

    Raises:
        ParameterError: If the value cannot be interpreted as a flag
    """
    if isinstance(value, (bool, np.bool_)):
        return bool(value)
    if isinstance(value, numbers.Integral) and value in (0, 1):
        return bool(value)
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in ("true", "yes", "1", "y"):
            return True
        if lowered in ("false", "no", "0", "n"):
            return False
    raise ParameterError(
        f"Parameter {param_name} must be a boolean flag, got {value!r}",
        param_name=param_name,
        param_value=value,
        constraint="Must be a boolean"
    )
