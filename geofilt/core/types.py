# geofilt/core/types.py

"""
Core type annotations and custom types for geofilt.

This module defines the type aliases shared by the filter core and the
simulation collaborators, together with the enumeration of padding policies.
"""

from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Literal, Mapping, Sequence, Union

import numpy as np
import pandas as pd

from geofilt.core.exceptions import InvalidPaddingError

# NumPy array type aliases
Vector = np.ndarray  # 1D array
Matrix = np.ndarray  # 2D array, rows = epochs, columns = channels
ComplexVector = np.ndarray  # 1D complex array, one value per frequency bin

# Anything that can be turned into a signal matrix
MatrixLike = Union[np.ndarray, pd.Series, pd.DataFrame, Sequence[float], Sequence[Sequence[float]]]

# File path types
FilePath = Union[str, Path]

# Configuration description of a filter chain: a sequence of single-key
# mappings {kind: parameters}
FilterParameters = Mapping[str, Any]
FilterDescription = Sequence[Mapping[str, Any]]

# Configuration types
ConfigDict = Dict[str, Any]
LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

# Attitude modes understood by the star camera simulation
AttitudeMode = Literal["earth_pointing", "velocity_leading"]

# Band types understood by the Butterworth and wavelet filters
BandType = Literal["lowpass", "highpass", "bandpass", "bandstop"]


class PadType(Enum):
    """Enumeration of boundary extension policies applied before filtering."""
    NONE = "none"
    ZERO = "zero"
    CONSTANT = "constant"
    PERIODIC = "periodic"
    SYMMETRIC = "symmetric"

    @classmethod
    def parse(cls, value: Union[str, "PadType", None]) -> "PadType":
        """Convert a configuration value to a PadType.

        Args:
            value: A PadType member or its configuration name

        Returns:
            PadType: The matching member

        Raises:
            InvalidPaddingError: If the value is empty or not a known policy
        """
        if isinstance(value, cls):
            return value
        if value is None or (isinstance(value, str) and not value.strip()):
            raise InvalidPaddingError(
                "Padding policy is not specified",
                pad_type=value,
                details=f"Valid options: {cls.names()}"
            )
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise InvalidPaddingError(
                f"Unknown padding policy: {value!r}",
                pad_type=value,
                details=f"Valid options: {cls.names()}"
            ) from None

    @classmethod
    def names(cls) -> List[str]:
        """Return the configuration names of all policies."""
        return [member.value for member in cls]
