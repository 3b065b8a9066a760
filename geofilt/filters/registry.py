# geofilt/filters/registry.py

"""
Mapping from configuration names to filter classes.

Filter classes add themselves with the :func:`register_filter` decorator when
their module is imported; :mod:`geofilt.filters` imports every variant module,
so the registry is complete once the package is imported.
"""

import logging
from typing import Any, Callable, Dict, Mapping, Optional, Type

from geofilt.core.exceptions import ConfigurationError
from geofilt.filters.base import DigitalFilterBase

logger = logging.getLogger("geofilt.filters.registry")

FILTER_REGISTRY: Dict[str, Type[DigitalFilterBase]] = {}


def register_filter(kind: str) -> Callable[[Type[DigitalFilterBase]], Type[DigitalFilterBase]]:
    """Class decorator registering a filter under its configuration name.

    Args:
        kind: Configuration name of the filter kind

    Returns:
        Callable: Decorator that records the class and sets its ``kind``
    """
    def decorator(cls: Type[DigitalFilterBase]) -> Type[DigitalFilterBase]:
        if kind in FILTER_REGISTRY and FILTER_REGISTRY[kind] is not cls:
            raise ConfigurationError(
                f"Filter kind '{kind}' is already registered to {FILTER_REGISTRY[kind].__name__}",
                setting=kind
            )
        cls.kind = kind
        FILTER_REGISTRY[kind] = cls
        return cls
    return decorator


def get_filter_class(kind: str) -> Type[DigitalFilterBase]:
    """Look up the class registered for a filter kind.

    Raises:
        ConfigurationError: If no filter is registered under ``kind``
    """
    try:
        return FILTER_REGISTRY[kind]
    except KeyError:
        raise ConfigurationError(
            f"Unknown filter kind: {kind!r}",
            setting="filter",
            value=kind,
            details=f"Valid options: {sorted(FILTER_REGISTRY)}"
        ) from None


def create_filter(kind: str, params: Optional[Mapping[str, Any]] = None) -> DigitalFilterBase:
    """Construct a registered filter from its configuration options."""
    cls = get_filter_class(kind)
    logger.debug(f"Creating filter '{kind}' with options {dict(params or {})}")
    return cls.from_config(params)
