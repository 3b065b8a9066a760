# geofilt/filters/reduce.py

"""
Complement of a filter: the input minus the output of an inner filter chain.

With a low-pass inner chain this gives the corresponding high-pass, e.g.
removing a smoothed trend from an arc.
"""

import logging
from typing import Any, Iterable, Mapping, Optional, Union

from geofilt.core.types import ComplexVector, Matrix, MatrixLike
from geofilt.core.validation import validate_input_matrix
from geofilt.filters.base import DigitalFilterBase, FilterOptions
from geofilt.filters.chain import DigitalFilter
from geofilt.filters.registry import register_filter

logger = logging.getLogger("geofilt.filters.reduce")


@register_filter("reduceFilterOutput")
class ReduceFilterOutput(DigitalFilterBase):
    """Subtract the output of an inner filter from its input.

    Args:
        inner: Filter (or sequence of filters forming a chain) whose output
            is removed
    """

    def __init__(self, inner: Union[DigitalFilterBase, Iterable[DigitalFilterBase]]) -> None:
        if not isinstance(inner, DigitalFilterBase):
            inner = DigitalFilter(inner)
        self._inner = inner

    @property
    def inner(self) -> DigitalFilterBase:
        return self._inner

    def filter(self, data: MatrixLike) -> Matrix:
        matrix = validate_input_matrix(data)
        logger.debug(f"Reducing output of {self._inner!r} from {matrix.shape} matrix")
        return matrix - self._inner.filter(matrix)

    def frequency_response(self, length: int) -> ComplexVector:
        """Response ``1 - H`` of the inner filter ``H``."""
        return 1.0 - self._inner.frequency_response(length)

    @classmethod
    def from_config(cls, params: Optional[Mapping[str, Any]]) -> "ReduceFilterOutput":
        options = FilterOptions(cls.kind, params)
        instance = cls(DigitalFilter.from_config(options.get("filter")))
        options.finish()
        return instance

    def __repr__(self) -> str:
        return f"ReduceFilterOutput({self._inner!r})"
