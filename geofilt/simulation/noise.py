# geofilt/simulation/noise.py

"""
Noise generators.

A noise generator draws a matrix of samples for a given number of epochs
(rows) and channels (columns). Programs only depend on the
:class:`NoiseGenerator` protocol.
"""

import logging
from typing import Optional, Protocol, runtime_checkable

import numpy as np

from geofilt.core.types import Matrix
from geofilt.core.validation import validate_integer, validate_non_negative
from geofilt.filters.base import DigitalFilterBase

logger = logging.getLogger("geofilt.simulation.noise")


@runtime_checkable
class NoiseGenerator(Protocol):
    """Anything that can draw a ``rows x columns`` noise matrix."""

    def noise(self, rows: int, columns: int) -> Matrix:
        ...


class WhiteNoiseGenerator:
    """Independent normally distributed samples.

    Args:
        sigma: Standard deviation of the samples
        seed: Seed of the random number generator, None for a random seed
    """

    def __init__(self, sigma: float = 1.0, seed: Optional[int] = None) -> None:
        self.sigma = validate_non_negative(float(sigma), "sigma")
        self._rng = np.random.default_rng(seed)

    def noise(self, rows: int, columns: int) -> Matrix:
        rows = validate_integer(rows, "rows", minimum=0)
        columns = validate_integer(columns, "columns", minimum=0)
        return self.sigma * self._rng.standard_normal((rows, columns))


class FilteredNoiseGenerator:
    """Coloured noise: white noise passed through a filter.

    ``warmup`` additional leading samples are drawn and filtered along, then
    discarded, so that the returned samples do not carry the transient of
    the filter start.

    Args:
        generator: Source of the noise that is filtered
        digital_filter: Filter or filter chain colouring the noise
        warmup: Number of discarded leading samples
    """

    def __init__(self, generator: NoiseGenerator, digital_filter: DigitalFilterBase,
                 warmup: int = 0) -> None:
        self.generator = generator
        self.digital_filter = digital_filter
        self.warmup = validate_integer(warmup, "warmup", minimum=0)

    def noise(self, rows: int, columns: int) -> Matrix:
        rows = validate_integer(rows, "rows", minimum=0)
        white = self.generator.noise(rows + self.warmup, columns)
        logger.debug(f"Filtering {white.shape} noise matrix with {self.digital_filter!r}")
        return self.digital_filter.filter(white)[self.warmup:]
