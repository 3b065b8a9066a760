# geofilt/filters/arma.py

"""
ARMA filter: the linear time-invariant filter every analytic variant reduces to.

A filter is described by numerator coefficients ``bn`` (moving average part),
denominator coefficients ``an`` (autoregressive part) and the position
``bn_start_index`` of the current sample within ``bn``. The output is

    y[n] = (sum_k bn[k] x[n-k+s] - sum_{k>=1} an[k] y[n-k]) / an[0]

with ``s = bn_start_index``; taps before ``s`` look into the future, so a
non-zero start index gives an acausal (e.g. centred) filter.

Two evaluation strategies are available:

- Time domain: the padded input is convolved with ``bn`` block by block
  using a banded coefficient matrix, then the recursion is solved block by
  block as a lower-triangular system whose right-hand side carries the
  feedback of the previously solved block.
- Frequency domain: the padded input is multiplied by ``B(f) / A(f)``. This
  is a circular convolution, which is exact for moving-average filters whose
  taps fit into the padding and an approximation for recursive filters
  whose impulse response does not decay within the padded arc.

Backward filtering applies the filter against reversed time order, i.e.
reverse the rows, filter forward, reverse again.
"""

import logging
from typing import Optional, Sequence, Union

import numpy as np
from scipy.linalg import solve_triangular

from geofilt.core.config import get_config
from geofilt.core.exceptions import InsufficientLengthError, ParameterError
from geofilt.core.types import ComplexVector, Matrix, MatrixLike, PadType
from geofilt.core.validation import validate_coefficients, validate_input_matrix, validate_integer
from geofilt.filters.base import DigitalFilterBase, FilterOptions
from geofilt.filters.fourier import apply_response, fft, response_length
from geofilt.filters.padding import pad, trim

logger = logging.getLogger("geofilt.filters.arma")


def _banded(coefficients: np.ndarray, height: int) -> np.ndarray:
    """Banded Toeplitz block with ``coefficients`` reversed along each row.

    Row ``i`` holds ``coefficients[k]`` at column ``i + n - 1 - k`` (``n`` the
    number of coefficients), so that multiplying the block with rows
    ``[j - n + 1, j + height)`` of a signal gives the causal convolution at
    rows ``[j, j + height)``.
    """
    n = coefficients.size
    block = np.zeros((height, height + n - 1))
    reversed_coefficients = coefficients[::-1]
    for i in range(height):
        block[i, i:i + n] = reversed_coefficients
    return block


class ARMAFilter(DigitalFilterBase):
    """Filter defined by moving average and autoregressive coefficients.

    Args:
        bn: Numerator coefficients (at least one)
        an: Denominator coefficients, ``an[0]`` must be non-zero
        bn_start_index: Index of the current sample within ``bn``
        backward: Apply the filter against reversed time order
        in_frequency_domain: Evaluate by multiplication with the frequency
            response instead of the time-domain recursion
        pad_type: Boundary extension policy, defaults to
            ``numerical.default_pad_type``
        block_size: Block height of the time-domain evaluation, defaults to
            ``numerical.block_size``

    Raises:
        ParameterError: If the coefficients or the start index are invalid
    """

    def __init__(self,
                 bn: Sequence[float],
                 an: Sequence[float] = (1.0,),
                 bn_start_index: int = 0,
                 backward: bool = False,
                 in_frequency_domain: bool = False,
                 pad_type: Optional[Union[PadType, str]] = None,
                 block_size: Optional[int] = None) -> None:
        bn = validate_coefficients(bn, "bn").copy()
        an = validate_coefficients(an, "an").copy()
        if an[0] == 0.0:
            raise ParameterError(
                "Leading denominator coefficient an[0] must be non-zero",
                param_name="an",
                param_value=an[0],
                constraint="an[0] != 0"
            )

        bn_start_index = validate_integer(bn_start_index, "bn_start_index", minimum=0)
        if bn_start_index >= bn.size:
            raise ParameterError(
                f"bn_start_index {bn_start_index} is outside of bn with {bn.size} coefficients",
                param_name="bn_start_index",
                param_value=bn_start_index,
                constraint=f"Must be < {bn.size}"
            )

        if pad_type is None:
            pad_type = get_config("numerical", "default_pad_type")
        if block_size is None:
            block_size = get_config("numerical", "block_size")

        bn.setflags(write=False)
        an.setflags(write=False)
        self._bn = bn
        self._an = an
        self._bn_start_index = bn_start_index
        self._backward = bool(backward)
        self._in_frequency_domain = bool(in_frequency_domain)
        self._pad_type = PadType.parse(pad_type)
        self._block_size = validate_integer(block_size, "block_size", minimum=1)

    @property
    def bn(self) -> np.ndarray:
        """Numerator coefficients (read-only)."""
        return self._bn

    @property
    def an(self) -> np.ndarray:
        """Denominator coefficients (read-only)."""
        return self._an

    @property
    def bn_start_index(self) -> int:
        return self._bn_start_index

    @property
    def backward(self) -> bool:
        return self._backward

    @property
    def in_frequency_domain(self) -> bool:
        return self._in_frequency_domain

    @property
    def pad_type(self) -> PadType:
        return self._pad_type

    @property
    def block_size(self) -> int:
        return self._block_size

    @staticmethod
    def arma_options(options: FilterOptions) -> dict:
        """Read the options shared by all ARMA-based variants.

        Returns:
            dict: Keyword arguments ``pad_type``, ``in_frequency_domain`` and
            ``backward`` for the constructor
        """
        return {
            "pad_type": options.pad_type(),
            "in_frequency_domain": options.in_frequency_domain(),
            "backward": options.backward(),
        }

    def warmup(self) -> int:
        """Number of samples needed before the output is well defined.

        Also the number of rows padded at each end of the input.
        """
        return max(self._bn.size - self._bn_start_index - 1,
                   self._bn_start_index,
                   3 * self._an.size)

    def frequency_response(self, length: int) -> ComplexVector:
        """Frequency response ``B(f) / A(f)`` for signals with ``length`` samples.

        ``bn`` is zero-padded to ``length`` and rotated so that the tap at
        ``bn_start_index`` sits at index 0. For backward filtering both
        sequences are reflected circularly around index 0, which conjugates
        the response. Bins where ``A(f)`` vanishes get the value 1.

        Args:
            length: Number of samples of the signal

        Returns:
            ComplexVector: Response at ``length // 2 + 1`` frequency bins

        Raises:
            InsufficientLengthError: If ``length`` is shorter than ``bn`` or ``an``
        """
        length = validate_integer(length, "length", minimum=0)
        required = max(self._bn.size, self._an.size)
        if length < required:
            raise InsufficientLengthError(
                f"Frequency response length <{length}> is shorter than the filter "
                f"coefficients (<{required}>)",
                rows=length,
                required=required,
                operation="frequency response"
            )

        b = np.zeros(length)
        b[:self._bn.size] = self._bn
        b = np.roll(b, -self._bn_start_index)

        a = np.zeros(length)
        a[:self._an.size] = self._an

        if self._backward:
            b = np.roll(b[::-1], 1)
            a = np.roll(a[::-1], 1)

        numerator = fft(b)
        denominator = fft(a)

        response = np.ones(response_length(length), dtype=np.complex128)
        nonzero = np.abs(denominator) > 0
        response[nonzero] = numerator[nonzero] / denominator[nonzero]
        return response

    def filter(self, data: MatrixLike) -> Matrix:
        """Apply the filter to a signal matrix.

        Args:
            data: Signal matrix (rows = epochs, columns = channels)

        Returns:
            Matrix: Filtered matrix of the same shape

        Raises:
            InsufficientLengthError: If the input is shorter than :meth:`warmup`
        """
        matrix = validate_input_matrix(data)
        rows = matrix.shape[0]
        warmup = self.warmup()

        if rows < warmup:
            raise InsufficientLengthError(
                f"Time series is too short (<{rows}> elements) for a filter with "
                f"a warmup length of <{warmup}>",
                rows=rows,
                required=warmup,
                operation=f"{self.kind or type(self).__name__} filter"
            )

        logger.debug(
            f"Applying {type(self).__name__} (bn: {self._bn.size}, an: {self._an.size}) "
            f"to {matrix.shape} matrix in "
            f"{'frequency' if self._in_frequency_domain else 'time'} domain"
        )

        if self._in_frequency_domain:
            padded = pad(matrix, warmup, 0, self._pad_type)
            filtered = apply_response(padded, self.frequency_response(padded.shape[0]))
            return trim(filtered, warmup, 0, self._pad_type)

        if self._backward:
            return self._filter_time_domain(matrix[::-1], warmup)[::-1].copy()
        return self._filter_time_domain(matrix, warmup)

    def _filter_time_domain(self, matrix: Matrix, warmup: int) -> Matrix:
        shift = self._bn_start_index
        padded = pad(matrix, warmup, shift, self._pad_type)
        filtered = self._moving_average(padded)
        if self._an.size > 1:
            filtered = self._autoregressive(filtered)
        return trim(filtered, warmup, shift, self._pad_type)

    def _moving_average(self, padded: Matrix) -> Matrix:
        """Causal convolution with ``bn``, evaluated in row blocks."""
        rows, columns = padded.shape
        taps = self._bn.size
        block_size = min(self._block_size, rows)
        band = _banded(self._bn, block_size)

        # leading zero rows make the first block look like any other
        extended = np.zeros((rows + taps - 1, columns))
        extended[taps - 1:] = padded

        output = np.empty((rows, columns))
        for start in range(0, rows, block_size):
            height = min(block_size, rows - start)
            output[start:start + height] = (
                band[:height, :height + taps - 1] @ extended[start:start + height + taps - 1]
            )
        return output

    def _autoregressive(self, data: Matrix) -> Matrix:
        """Solve the recursion with ``an`` block by block."""
        rows, columns = data.shape
        order = self._an.size - 1
        block_size = min(self._block_size, rows)
        band = _banded(self._an, block_size)
        feedback = band[:, :order]
        triangle = band[:, order:]

        # output[order + n] holds y[n]; the leading rows are the zero state
        output = np.zeros((rows + order, columns))
        for start in range(0, rows, block_size):
            height = min(block_size, rows - start)
            rhs = data[start:start + height] - feedback[:height] @ output[start:start + order]
            output[order + start:order + start + height] = solve_triangular(
                triangle[:height, :height], rhs, lower=True, check_finite=False
            )
        return output[order:]

    def __repr__(self) -> str:
        return (f"{type(self).__name__}(bn={self._bn.size} taps, an={self._an.size} taps, "
                f"bn_start_index={self._bn_start_index}, backward={self._backward}, "
                f"in_frequency_domain={self._in_frequency_domain}, "
                f"pad_type='{self._pad_type.value}')")
