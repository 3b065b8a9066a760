"""
geofilt Core Module

This module provides the foundation shared by the filter subsystem and the
simulation collaborators: the exception hierarchy, type definitions,
validation utilities and configuration management.
"""

import logging

# Set up module-level logger
logger = logging.getLogger("geofilt.core")

from .exceptions import (
    GeoFiltError,
    ParameterError,
    DimensionError,
    InsufficientLengthError,
    InvalidPaddingError,
    ConfigurationError,
    ProcessingError,
    FilterWarning,
    warn_filter
)

from .types import (
    Vector,
    Matrix,
    ComplexVector,
    MatrixLike,
    FilePath,
    FilterDescription,
    PadType
)

from .validation import (
    validate_input_matrix,
    validate_coefficients,
    validate_positive,
    validate_non_negative,
    validate_integer,
    validate_range,
    validate_bool
)

from .config import (
    get_config,
    set_config,
    reset_config,
    save_config,
    get_config_manager,
    initialize_config,
    ConfigManager
)

__all__ = [
    # Exceptions
    'GeoFiltError',
    'ParameterError',
    'DimensionError',
    'InsufficientLengthError',
    'InvalidPaddingError',
    'ConfigurationError',
    'ProcessingError',
    'FilterWarning',
    'warn_filter',

    # Types
    'Vector',
    'Matrix',
    'ComplexVector',
    'MatrixLike',
    'FilePath',
    'FilterDescription',
    'PadType',

    # Validation
    'validate_input_matrix',
    'validate_coefficients',
    'validate_positive',
    'validate_non_negative',
    'validate_integer',
    'validate_range',
    'validate_bool',

    # Configuration
    'get_config',
    'set_config',
    'reset_config',
    'save_config',
    'get_config_manager',
    'initialize_config',
    'ConfigManager',
]
