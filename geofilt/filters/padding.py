# geofilt/filters/padding.py

"""
Boundary extension and removal for finite-length filtering.

``pad`` extends a signal matrix by ``length`` rows on both ends (plus
``time_shift`` trailing rows that absorb the delay of a causal filter) and
``trim`` removes the extension again. The pair is used by every filter that
evaluates a convolution on a finite arc: the padded rows determine what the
filter "sees" beyond the first and last epoch.

Policies:
    none:      no extension, only the trailing ``time_shift`` rows are added
    zero:      extension rows are zero
    constant:  first and last row are replicated
    periodic:  the arc is continued periodically (needs rows >= length)
    symmetric: the arc is mirrored around its first and last sample, the
               boundary samples themselves are not repeated
               (needs rows >= length + 1)
"""

import logging
from typing import Union

import numpy as np

from geofilt.core.exceptions import InsufficientLengthError, InvalidPaddingError
from geofilt.core.types import Matrix, MatrixLike, PadType
from geofilt.core.validation import validate_input_matrix, validate_integer

logger = logging.getLogger("geofilt.filters.padding")


def pad(data: MatrixLike, length: int, time_shift: int = 0,
        pad_type: Union[PadType, str] = PadType.ZERO) -> Matrix:
    """Extend a signal matrix with boundary samples.

    Args:
        data: Signal matrix (rows = epochs)
        length: Number of rows added at each end
        time_shift: Number of additional rows appended at the end
        pad_type: Padding policy

    Returns:
        Matrix: Padded matrix with ``rows + 2*length + time_shift`` rows
        (``rows + time_shift`` for policy ``none``); the input occupies rows
        ``[length, length + rows)`` (``[0, rows)`` for ``none``)

    Raises:
        InvalidPaddingError: If the input has no rows and the policy is not
            ``none``, or the policy is unknown
        InsufficientLengthError: If the input is too short for periodic or
            symmetric padding
    """
    matrix = validate_input_matrix(data)
    pad_type = PadType.parse(pad_type)
    length = validate_integer(length, "length", minimum=0)
    time_shift = validate_integer(time_shift, "time_shift", minimum=0)
    rows, columns = matrix.shape

    if pad_type is PadType.NONE:
        if time_shift > 0:
            padded = np.zeros((rows + time_shift, columns))
            padded[:rows] = matrix
            return padded
        return matrix.copy()

    if rows < 1:
        raise InvalidPaddingError(
            f"Trying to pad a zero length array ({rows} x {columns})",
            pad_type=pad_type.value,
            shape=matrix.shape
        )

    padded = np.zeros((rows + 2 * length + time_shift, columns))
    padded[length:length + rows] = matrix
    tail = slice(rows + length, rows + 2 * length)

    if pad_type is PadType.ZERO:
        pass

    elif pad_type is PadType.CONSTANT:
        padded[:length] = matrix[0]
        padded[tail] = matrix[-1]

    elif pad_type is PadType.PERIODIC:
        if rows < length:
            raise InsufficientLengthError(
                f"Time series is too short (<{rows}> elements) to apply periodic padding "
                f"for a filter with a warmup length of <{length}>",
                rows=rows,
                required=length,
                operation="periodic padding"
            )
        padded[:length] = matrix[rows - length:]
        padded[tail] = matrix[:length]

    elif pad_type is PadType.SYMMETRIC:
        if rows < length + 1:
            raise InsufficientLengthError(
                f"Time series is too short (<{rows}> elements) to apply symmetric padding "
                f"for a filter with a warmup length of <{length}>",
                rows=rows,
                required=length + 1,
                operation="symmetric padding"
            )
        padded[:length] = matrix[1:length + 1][::-1]
        padded[tail] = matrix[rows - 1 - length:rows - 1][::-1]

    return padded


def trim(data: MatrixLike, length: int, time_shift: int = 0,
         pad_type: Union[PadType, str] = PadType.ZERO) -> Matrix:
    """Remove the boundary extension added by :func:`pad`.

    The rows ``[length + time_shift, rows - length)`` are returned, i.e. the
    original row count is restored. With ``time_shift > 0`` this also removes
    the delay of a causal filter applied to the padded matrix.

    Args:
        data: Padded (and usually filtered) matrix
        length: Number of rows that were added at each end
        time_shift: Number of trailing rows that were added
        pad_type: Padding policy that was used for padding

    Returns:
        Matrix: Trimmed matrix

    Raises:
        InsufficientLengthError: If the matrix has fewer rows than the padding
    """
    matrix = validate_input_matrix(data)
    pad_type = PadType.parse(pad_type)
    length = validate_integer(length, "length", minimum=0)
    time_shift = validate_integer(time_shift, "time_shift", minimum=0)
    rows = matrix.shape[0]

    if pad_type is PadType.NONE:
        length = 0

    if rows < 2 * length + time_shift:
        raise InsufficientLengthError(
            f"Matrix with <{rows}> rows is shorter than its padding",
            rows=rows,
            required=2 * length + time_shift,
            operation="trim"
        )

    return matrix[length + time_shift:rows - length].copy()
