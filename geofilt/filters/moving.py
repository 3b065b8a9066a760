# geofilt/filters/moving.py

"""
Moving window filters: centred moving average and moving median.
"""

import logging
from typing import Any, Mapping, Optional, Union

import numpy as np

from geofilt.core.config import get_config
from geofilt.core.exceptions import InsufficientLengthError, warn_filter
from geofilt.core.types import ComplexVector, Matrix, MatrixLike, PadType
from geofilt.core.validation import validate_input_matrix, validate_integer
from geofilt.filters._numba_core import moving_median
from geofilt.filters.arma import ARMAFilter
from geofilt.filters.base import DigitalFilterBase, FilterOptions
from geofilt.filters.fourier import ones_response
from geofilt.filters.padding import pad
from geofilt.filters.registry import register_filter

logger = logging.getLogger("geofilt.filters.moving")


@register_filter("movingAverage")
class MovingAverage(ARMAFilter):
    """Centred moving average over ``length`` samples.

    All weights are ``1 / length``; the output at epoch ``n`` is the mean of
    the window centred on ``n``. For even lengths the window reaches one
    sample further into the past, as for :class:`MovingMedian`.

    Args:
        length: Number of samples in the window
        pad_type: Boundary extension policy
        in_frequency_domain: Evaluate in the frequency domain
        backward: Apply against reversed time order
    """

    def __init__(self, length: int,
                 pad_type: Optional[Union[PadType, str]] = None,
                 in_frequency_domain: bool = False,
                 backward: bool = False) -> None:
        self.length = validate_integer(length, "length", minimum=1)
        super().__init__(
            bn=np.full(self.length, 1.0 / self.length),
            an=[1.0],
            bn_start_index=(self.length - 1) // 2,
            backward=backward,
            in_frequency_domain=in_frequency_domain,
            pad_type=pad_type
        )

    @classmethod
    def from_config(cls, params: Optional[Mapping[str, Any]]) -> "MovingAverage":
        options = FilterOptions(cls.kind, params)
        instance = cls(options.get("length"), **cls.arma_options(options))
        options.finish()
        return instance


@register_filter("movingMedian")
class MovingMedian(DigitalFilterBase):
    """Centred moving median over ``length`` samples.

    The median is nonlinear, so it has no ARMA representation and is always
    evaluated in the time domain. Without padding the window shrinks at the
    arc boundaries to the samples that exist.

    Args:
        length: Number of samples in the window
        pad_type: Boundary extension policy
    """

    def __init__(self, length: int,
                 pad_type: Optional[Union[PadType, str]] = None) -> None:
        if pad_type is None:
            pad_type = get_config("numerical", "default_pad_type")
        self.length = validate_integer(length, "length", minimum=1)
        self.pad_type = PadType.parse(pad_type)

    def warmup(self) -> int:
        return self.length // 2

    def filter(self, data: MatrixLike) -> Matrix:
        matrix = validate_input_matrix(data)
        rows, columns = matrix.shape
        half = self.warmup()

        if rows < max(half, 1):
            raise InsufficientLengthError(
                f"Time series is too short (<{rows}> elements) for a moving median "
                f"with a window of <{self.length}>",
                rows=rows,
                required=max(half, 1),
                operation="movingMedian filter"
            )

        logger.debug(f"Applying moving median (window {self.length}) to {matrix.shape} matrix")

        if self.pad_type is PadType.NONE:
            padded = np.full((rows + 2 * half, columns), np.nan)
            padded[half:half + rows] = matrix
            return moving_median(padded, self.length, True)[:rows]

        padded = pad(matrix, half, 0, self.pad_type)
        return moving_median(padded, self.length, False)[:rows]

    def frequency_response(self, length: int) -> ComplexVector:
        """All-pass placeholder; the median has no frequency response."""
        warn_filter("Moving median is nonlinear, frequency response is set to one",
                    filter_type=self.kind)
        return ones_response(length)

    @classmethod
    def from_config(cls, params: Optional[Mapping[str, Any]]) -> "MovingMedian":
        options = FilterOptions(cls.kind, params)
        instance = cls(options.get("length"), pad_type=options.pad_type())
        options.finish()
        return instance

    def __repr__(self) -> str:
        return f"MovingMedian(length={self.length}, pad_type='{self.pad_type.value}')"
