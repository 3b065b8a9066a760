# tests/test_validation.py

"""
Tests for input validation and the exception hierarchy.
"""

import numpy as np
import pandas as pd
import pytest

from geofilt.core.exceptions import (
    DimensionError, FilterWarning, GeoFiltError, ParameterError, ProcessingError,
    warn_filter
)
from geofilt.core.validation import (
    validate_bool, validate_coefficients, validate_input_matrix, validate_integer,
    validate_non_negative, validate_positive, validate_range
)


class TestInputMatrix:
    def test_vector_becomes_column(self):
        matrix = validate_input_matrix([1, 2, 3])
        assert matrix.shape == (3, 1)
        assert matrix.dtype == np.float64

    def test_dataframe_values(self):
        frame = pd.DataFrame({"x": [1.0, 2.0], "y": [3.0, 4.0]})
        np.testing.assert_array_equal(validate_input_matrix(frame), [[1.0, 3.0], [2.0, 4.0]])

    def test_series_becomes_column(self):
        assert validate_input_matrix(pd.Series([1.0, 2.0])).shape == (2, 1)

    def test_none_rejected(self):
        with pytest.raises(TypeError):
            validate_input_matrix(None)

    @pytest.mark.parametrize("data", [5.0, np.zeros((2, 2, 2))])
    def test_wrong_dimensions(self, data):
        with pytest.raises(DimensionError):
            validate_input_matrix(data)


class TestCoefficients:
    def test_row_matrix_flattened(self):
        np.testing.assert_array_equal(validate_coefficients([[1, 2, 3]]), [1.0, 2.0, 3.0])

    def test_scalar_promoted(self):
        np.testing.assert_array_equal(validate_coefficients(0.5), [0.5])

    def test_empty_rejected(self):
        with pytest.raises(DimensionError):
            validate_coefficients([])

    def test_matrix_rejected(self):
        with pytest.raises(DimensionError):
            validate_coefficients(np.ones((2, 2)))

    def test_non_finite_rejected(self):
        with pytest.raises(ParameterError):
            validate_coefficients([1.0, np.nan])


class TestScalars:
    def test_positive(self):
        assert validate_positive(2.5, "sampling") == 2.5
        with pytest.raises(ParameterError):
            validate_positive(0.0, "sampling")

    def test_non_negative(self):
        assert validate_non_negative(0, "lag") == 0
        with pytest.raises(ParameterError):
            validate_non_negative(-1, "lag")

    def test_integer(self):
        assert validate_integer(4.0, "length") == 4
        assert validate_integer(np.int64(3), "length", minimum=1) == 3
        with pytest.raises(ParameterError):
            validate_integer(2.5, "length")
        with pytest.raises(ParameterError, match="at least 1"):
            validate_integer(0, "length", minimum=1)

    def test_range_bounds(self):
        assert validate_range(0.5, "rho", -1, 1) == 0.5
        assert validate_range(1.0, "rho", -1, 1, inclusive=True) == 1.0
        with pytest.raises(ParameterError, match=r"\(-1, 1\)"):
            validate_range(1.0, "rho", -1, 1)

    @pytest.mark.parametrize("value, expected", [
        (True, True), ("yes", True), (" TRUE ", True), (1, True),
        ("no", False), ("0", False), (0, False),
    ])
    def test_bool(self, value, expected):
        assert validate_bool(value, "flag") is expected

    @pytest.mark.parametrize("value", ["maybe", 2, 0.5])
    def test_bool_rejected(self, value):
        with pytest.raises(ParameterError):
            validate_bool(value, "flag")


class TestExceptions:
    def test_context_rendered(self):
        error = ParameterError("bad length", param_name="length", param_value=-1,
                               constraint="Must be positive")
        text = str(error)
        assert text.startswith("bad length")
        assert "Parameter: length" in text
        assert "Value: -1" in text
        assert error.context["Constraint"] == "Must be positive"

    def test_details_rendered(self):
        assert "Details: more" in str(GeoFiltError("failure", details="more"))

    def test_processing_error_carries_arc(self):
        error = ProcessingError("arc failed", operation="filterArcs", arc=3)
        assert isinstance(error, GeoFiltError)
        assert error.arc == 3
        assert "Arc: 3" in str(error)

    def test_filter_warning(self):
        with pytest.warns(FilterWarning, match=r"\(filter: notch\)"):
            warn_filter("bin outside spectrum", "notch")
