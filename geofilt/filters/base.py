# geofilt/filters/base.py

"""
Base class and configuration helpers for digital filters.

Every filter exposes the same two capabilities, which is all a filter chain
relies on:

- ``filter(data)``: apply the filter to a signal matrix (rows = epochs,
  columns = channels) and return a matrix with the same number of rows
- ``frequency_response(length)``: complex response at the ``length // 2 + 1``
  non-negative frequency bins of a signal with ``length`` samples

Filters are constructed once (directly or from a configuration description
through ``from_config``) and are immutable afterwards. ``filter`` allocates
all of its work arrays locally, so a single instance can be applied to many
arcs concurrently.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Mapping, Optional

from geofilt.core.config import get_config
from geofilt.core.exceptions import ConfigurationError
from geofilt.core.types import ComplexVector, Matrix, MatrixLike, PadType
from geofilt.core.validation import validate_bool

logger = logging.getLogger("geofilt.filters.base")

_REQUIRED = object()


class FilterOptions:
    """Read access to the parameters of one filter description.

    Options are looked up by their configuration names (``padType``,
    ``inFrequencyDomain``, ...). Every option that is read is recorded so
    that :meth:`finish` can reject misspelled or unsupported options.

    Args:
        kind: Configuration name of the filter kind
        params: Mapping of option names to values (None for no options)
    """

    def __init__(self, kind: str, params: Optional[Mapping[str, Any]]) -> None:
        if params is None:
            params = {}
        if not isinstance(params, Mapping):
            raise ConfigurationError(
                f"Options of filter '{kind}' must be a mapping, got {type(params).__name__}",
                setting=kind,
                value=params
            )
        self.kind = kind
        self._params = dict(params)
        self._used: set = set()

    def get(self, name: str, default: Any = _REQUIRED) -> Any:
        """Return an option value.

        Raises:
            ConfigurationError: If a required option is missing
        """
        if name in self._params:
            self._used.add(name)
            return self._params[name]
        if default is _REQUIRED:
            raise ConfigurationError(
                f"Missing required option '{name}' for filter '{self.kind}'",
                setting=f"{self.kind}.{name}",
                issue="Option not set"
            )
        return default

    def pad_type(self) -> PadType:
        """Padding policy, defaulting to ``numerical.default_pad_type``."""
        return PadType.parse(self.get("padType", get_config("numerical", "default_pad_type")))

    def in_frequency_domain(self) -> bool:
        """Evaluation domain flag, defaulting to ``numerical.default_in_frequency_domain``."""
        default = get_config("numerical", "default_in_frequency_domain")
        return validate_bool(self.get("inFrequencyDomain", default), "inFrequencyDomain")

    def backward(self) -> bool:
        """Whether the filter runs against reversed time order."""
        return validate_bool(self.get("backward", False), "backward")

    def finish(self) -> None:
        """Reject options that were never read.

        Raises:
            ConfigurationError: If the description contains unknown options
        """
        unknown = sorted(set(self._params) - self._used)
        if unknown:
            raise ConfigurationError(
                f"Unknown option(s) {unknown} for filter '{self.kind}'",
                setting=self.kind,
                value=unknown,
                issue="Option not recognized"
            )


class DigitalFilterBase(ABC):
    """Abstract base class for all digital filters.

    Class Attributes:
        kind: Configuration name under which the filter is registered
    """

    kind: str = ""

    @abstractmethod
    def filter(self, data: MatrixLike) -> Matrix:
        """Apply the filter to a signal matrix.

        Args:
            data: Signal matrix (rows = epochs, columns = channels); vectors
                are treated as a single column

        Returns:
            Matrix: Filtered matrix with the same number of rows
        """

    @abstractmethod
    def frequency_response(self, length: int) -> ComplexVector:
        """Frequency response for signals with ``length`` samples.

        Args:
            length: Number of samples of the signal

        Returns:
            ComplexVector: Complex response at ``length // 2 + 1`` bins
        """

    @classmethod
    def from_config(cls, params: Optional[Mapping[str, Any]]) -> "DigitalFilterBase":
        """Construct the filter from its configuration options.

        Args:
            params: Mapping of configuration option names to values

        Returns:
            DigitalFilterBase: The configured filter
        """
        raise NotImplementedError(f"{cls.__name__} cannot be constructed from a configuration")

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"
