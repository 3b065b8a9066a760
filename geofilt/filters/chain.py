# geofilt/filters/chain.py

"""
Filter chain: an ordered, immutable sequence of filters applied one after
another.

The chain only relies on the two capabilities every filter exposes,
``filter`` and ``frequency_response``. Its frequency response is the
pointwise product of the member responses; an empty chain is the identity.

Chains are described in configuration as a sequence of single-key mappings,
each mapping a registered filter kind to its options::

    [
        {"butterworth": {"order": 4, "frequency": 0.1}},
        {"lag": {"lag": 2}}
    ]

A mapping with a ``type`` key (``{"type": "lag", "lag": 2}``) is accepted as
an equivalent spelling.
"""

import json
import logging
from pathlib import Path
from typing import Any, Iterable, Iterator, Mapping, Optional, Sequence, Tuple, Union

from geofilt.core.exceptions import ConfigurationError
from geofilt.core.types import ComplexVector, FilePath, FilterDescription, Matrix, MatrixLike
from geofilt.core.validation import validate_input_matrix
from geofilt.filters.base import DigitalFilterBase
from geofilt.filters.fourier import ones_response
from geofilt.filters.registry import create_filter

logger = logging.getLogger("geofilt.filters.chain")


def _parse_entry(entry: Any, position: int) -> Tuple[str, Optional[Mapping[str, Any]]]:
    """Split one chain entry into its kind and options."""
    if isinstance(entry, str):
        return entry, None

    if not isinstance(entry, Mapping):
        raise ConfigurationError(
            f"Filter description #{position} must be a mapping, got {type(entry).__name__}",
            setting=f"filter[{position}]",
            value=entry
        )

    if "type" in entry:
        options = {key: value for key, value in entry.items() if key != "type"}
        return entry["type"], options

    if len(entry) != 1:
        raise ConfigurationError(
            f"Filter description #{position} must contain exactly one filter kind, "
            f"got {sorted(entry)}",
            setting=f"filter[{position}]",
            value=dict(entry)
        )

    (kind, options), = entry.items()
    return kind, options


class DigitalFilter(DigitalFilterBase):
    """Ordered chain of filters.

    Args:
        filters: Member filters in order of application

    Examples:
        >>> from geofilt.filters import DigitalFilter, MovingAverage, Lag
        >>> chain = DigitalFilter([MovingAverage(3), Lag(1)])
        >>> len(chain)
        2
    """

    kind = "chain"

    def __init__(self, filters: Iterable[DigitalFilterBase] = ()) -> None:
        members = tuple(filters)
        for member in members:
            if not isinstance(member, DigitalFilterBase):
                raise ConfigurationError(
                    f"Filter chain members must be filters, got {type(member).__name__}",
                    setting="filter",
                    value=member
                )
        self._filters = members

    @property
    def filters(self) -> Tuple[DigitalFilterBase, ...]:
        """Member filters in order of application."""
        return self._filters

    def __len__(self) -> int:
        return len(self._filters)

    def __iter__(self) -> Iterator[DigitalFilterBase]:
        return iter(self._filters)

    def __getitem__(self, index: int) -> DigitalFilterBase:
        return self._filters[index]

    def filter(self, data: MatrixLike) -> Matrix:
        """Apply each member filter to the output of the previous one.

        Args:
            data: Signal matrix (rows = epochs, columns = channels)

        Returns:
            Matrix: Filtered matrix; the input itself (as a float matrix) for
            an empty chain
        """
        output = validate_input_matrix(data)
        for member in self._filters:
            output = member.filter(output)
        return output

    def frequency_response(self, length: int) -> ComplexVector:
        """Product of the member frequency responses.

        Args:
            length: Number of samples of the signal

        Returns:
            ComplexVector: Response at ``length // 2 + 1`` bins, all ones for
            an empty chain
        """
        response = ones_response(length)
        for member in self._filters:
            response = response * member.frequency_response(length)
        return response

    @classmethod
    def from_config(cls, description: Optional[Union[FilterDescription, Mapping[str, Any]]]) -> "DigitalFilter":
        """Build a chain from its configuration description.

        Args:
            description: Sequence of filter entries; a single entry is also
                accepted, None gives an empty chain

        Returns:
            DigitalFilter: The configured chain

        Raises:
            ConfigurationError: If an entry is malformed or names an unknown
                filter kind
        """
        if description is None:
            return cls()
        if isinstance(description, (Mapping, str)):
            description = [description]
        if not isinstance(description, Sequence):
            raise ConfigurationError(
                f"Filter chain description must be a sequence, got {type(description).__name__}",
                setting="filter",
                value=description
            )

        members = []
        for position, entry in enumerate(description):
            kind, options = _parse_entry(entry, position)
            members.append(create_filter(kind, options))

        logger.debug(f"Built filter chain: {[member.kind for member in members]}")
        return cls(members)

    @classmethod
    def from_file(cls, path: FilePath) -> "DigitalFilter":
        """Build a chain from a JSON file holding its description.

        The file holds either the description itself or an object with a
        ``filter`` key.

        Raises:
            ConfigurationError: If the file cannot be read or parsed
        """
        path = Path(path)
        try:
            with open(path, "r") as f:
                description = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise ConfigurationError(
                "Failed to load filter description",
                config_file=path,
                issue=str(e)
            ) from e

        if isinstance(description, Mapping) and "filter" in description:
            description = description["filter"]
        logger.info(f"Loaded filter description from {path}")
        return cls.from_config(description)

    def __repr__(self) -> str:
        return f"DigitalFilter([{', '.join(repr(member) for member in self._filters)}])"
