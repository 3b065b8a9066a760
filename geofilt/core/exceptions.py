'''
Custom exception classes for geofilt.

This module defines the exception hierarchy used throughout the toolkit. Each
exception carries a primary message, optional details and a dictionary of
contextual information (matrix shapes, warmup lengths, padding policies) that
is rendered into the error string so that a failure deep inside a filter chain
can be diagnosed from the log of the segment that triggered it.

Errors are raised at the point of detection and propagate unmodified to the
caller. Filtering is deterministic, so none of these errors is retried.
'''

import warnings
from pathlib import Path
from typing import Any, Dict, Optional, Tuple, Union


class GeoFiltError(Exception):
    """Base exception class for all geofilt errors.

    Attributes:
        message: The error message
        details: Additional details about the error
        context: Dictionary containing contextual information about the error
    """

    def __init__(self,
                 message: str,
                 details: Optional[str] = None,
                 context: Optional[Dict[str, Any]] = None) -> None:
        """Initialize the GeoFiltError.

        Args:
            message: The primary error message
            details: Additional details about the error
            context: Dictionary containing contextual information about the error
        """
        self.message = message
        self.details = details
        self.context = context or {}

        full_message = message
        if details:
            full_message += f"\n\nDetails: {details}"

        if self.context:
            context_str = "\n".join(f"  {k}: {v}" for k, v in self.context.items())
            full_message += f"\n\nContext:\n{context_str}"

        super().__init__(full_message)


class ParameterError(GeoFiltError):
    """Exception raised when a filter parameter violates its constraint.

    Attributes:
        param_name: The name of the parameter that caused the error
        param_value: The invalid parameter value
        constraint: Description of the constraint that was violated
    """

    def __init__(self,
                 message: str,
                 param_name: Optional[str] = None,
                 param_value: Optional[Any] = None,
                 constraint: Optional[str] = None,
                 details: Optional[str] = None,
                 context: Optional[Dict[str, Any]] = None) -> None:
        self.param_name = param_name
        self.param_value = param_value
        self.constraint = constraint

        context_dict = context or {}
        if param_name:
            context_dict["Parameter"] = param_name
        if param_value is not None:
            context_dict["Value"] = param_value
        if constraint:
            context_dict["Constraint"] = constraint

        super().__init__(message, details, context_dict)


class DimensionError(GeoFiltError):
    """Exception raised for matrices of the wrong dimensionality.

    Attributes:
        array_name: The name of the array that caused the error
        expected_shape: The expected shape of the array
        actual_shape: The actual shape of the array
    """

    def __init__(self,
                 message: str,
                 array_name: Optional[str] = None,
                 expected_shape: Optional[Union[Tuple[int, ...], str]] = None,
                 actual_shape: Optional[Tuple[int, ...]] = None,
                 details: Optional[str] = None,
                 context: Optional[Dict[str, Any]] = None) -> None:
        self.array_name = array_name
        self.expected_shape = expected_shape
        self.actual_shape = actual_shape

        context_dict = context or {}
        if array_name:
            context_dict["Array"] = array_name
        if expected_shape is not None:
            context_dict["Expected Shape"] = expected_shape
        if actual_shape is not None:
            context_dict["Actual Shape"] = actual_shape

        super().__init__(message, details, context_dict)


class InsufficientLengthError(GeoFiltError):
    """Exception raised when a time series is too short for an operation.

    Raised when the number of input rows is below a filter's warmup length,
    below the minimum length required by a padding policy, or when a
    frequency response is requested for fewer bins than the filter has taps.

    Attributes:
        rows: The number of rows that were supplied
        required: The minimum number of rows required
        operation: The operation that required the length
    """

    def __init__(self,
                 message: str,
                 rows: Optional[int] = None,
                 required: Optional[int] = None,
                 operation: Optional[str] = None,
                 details: Optional[str] = None,
                 context: Optional[Dict[str, Any]] = None) -> None:
        self.rows = rows
        self.required = required
        self.operation = operation

        context_dict = context or {}
        if rows is not None:
            context_dict["Rows"] = rows
        if required is not None:
            context_dict["Required"] = required
        if operation:
            context_dict["Operation"] = operation

        super().__init__(message, details, context_dict)


class InvalidPaddingError(GeoFiltError):
    """Exception raised for unusable padding requests.

    Raised when a zero-length matrix is padded with a policy other than
    ``none`` or when the padding policy is unknown or unspecified.

    Attributes:
        pad_type: The padding policy that was requested
        shape: Shape of the matrix that was to be padded
    """

    def __init__(self,
                 message: str,
                 pad_type: Optional[Any] = None,
                 shape: Optional[Tuple[int, ...]] = None,
                 details: Optional[str] = None,
                 context: Optional[Dict[str, Any]] = None) -> None:
        self.pad_type = pad_type
        self.shape = shape

        context_dict = context or {}
        if pad_type is not None:
            context_dict["Pad Type"] = pad_type
        if shape is not None:
            context_dict["Shape"] = shape

        super().__init__(message, details, context_dict)


class ConfigurationError(GeoFiltError):
    """Exception raised for errors in configuration.

    This covers unrecognized filter kinds in a chain description, malformed
    descriptions and unknown configuration sections or options.

    Attributes:
        config_file: The configuration file path
        setting: The setting that caused the error
        value: The invalid setting value
        issue: Description of the issue with the configuration
    """

    def __init__(self,
                 message: str,
                 config_file: Optional[Union[str, Path]] = None,
                 setting: Optional[str] = None,
                 value: Optional[Any] = None,
                 issue: Optional[str] = None,
                 details: Optional[str] = None,
                 context: Optional[Dict[str, Any]] = None) -> None:
        self.config_file = config_file
        self.setting = setting
        self.value = value
        self.issue = issue

        context_dict = context or {}
        if config_file:
            context_dict["Config File"] = str(config_file)
        if setting:
            context_dict["Setting"] = setting
        if value is not None:
            context_dict["Value"] = value
        if issue:
            context_dict["Issue"] = issue

        super().__init__(message, details, context_dict)


class ProcessingError(GeoFiltError):
    """Exception raised by program-level entry points.

    Programs wrap errors raised while processing a single arc and re-raise
    them with the originating operation and arc number attached. The
    original exception is chained as ``__cause__``.

    Attributes:
        operation: The program or step that failed
        arc: The number of the arc being processed, if any
    """

    def __init__(self,
                 message: str,
                 operation: Optional[str] = None,
                 arc: Optional[int] = None,
                 details: Optional[str] = None,
                 context: Optional[Dict[str, Any]] = None) -> None:
        self.operation = operation
        self.arc = arc

        context_dict = context or {}
        if operation:
            context_dict["Operation"] = operation
        if arc is not None:
            context_dict["Arc"] = arc

        super().__init__(message, details, context_dict)


class FilterWarning(Warning):
    """Warning for non-fatal conditions in filter evaluation.

    Attributes:
        message: The warning message
        filter_type: The kind of filter that issued the warning
    """

    def __init__(self, message: str, filter_type: Optional[str] = None) -> None:
        self.message = message
        self.filter_type = filter_type

        full_message = message
        if filter_type:
            full_message += f" (filter: {filter_type})"
        super().__init__(full_message)


def warn_filter(message: str, filter_type: Optional[str] = None) -> None:
    """Issue a FilterWarning with consistent formatting.

    Args:
        message: The primary warning message
        filter_type: The kind of filter that issued the warning
    """
    warnings.warn(FilterWarning(message, filter_type), stacklevel=3)
