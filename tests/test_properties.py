# tests/test_properties.py

"""
Property-based tests of the filter engine.
"""

import numpy as np
from hypothesis import given, settings, strategies as st
from hypothesis.extra.numpy import arrays

from geofilt.core.types import PadType
from geofilt.filters import ARMAFilter, DigitalFilter, MovingAverage
from geofilt.filters.padding import pad, trim

finite_floats = st.floats(min_value=-100, max_value=100, allow_nan=False, allow_infinity=False)

signals = arrays(
    np.float64,
    st.tuples(st.integers(min_value=12, max_value=60), st.integers(min_value=1, max_value=3)),
    elements=finite_floats
)

coefficients = arrays(
    np.float64,
    st.integers(min_value=1, max_value=6),
    elements=st.floats(min_value=-2, max_value=2, allow_nan=False, allow_infinity=False)
)

padded_policies = st.sampled_from(["zero", "constant", "periodic", "symmetric"])


@given(signals, st.integers(min_value=0, max_value=10), st.sampled_from(PadType.names()))
@settings(deadline=None, max_examples=50)
def test_trim_inverts_pad(matrix, length, policy):
    np.testing.assert_array_equal(trim(pad(matrix, length, 0, policy), length, 0, policy), matrix)


@given(signals, st.integers(min_value=0, max_value=10), st.integers(min_value=1, max_value=5),
       st.sampled_from(PadType.names()))
@settings(deadline=None, max_examples=50)
def test_trim_removes_shift_delay(matrix, length, shift, policy):
    padded = pad(matrix, length, shift, policy)
    delayed = np.zeros_like(padded)
    delayed[shift:] = padded[:-shift]
    np.testing.assert_array_equal(trim(delayed, length, shift, policy), matrix)


@given(signals)
@settings(deadline=None, max_examples=25)
def test_empty_chain_is_identity(matrix):
    np.testing.assert_array_equal(DigitalFilter().filter(matrix), matrix)


@given(signals, coefficients, st.data(), padded_policies)
@settings(deadline=None, max_examples=50)
def test_moving_average_domains_agree(matrix, bn, data, policy):
    start = data.draw(st.integers(min_value=0, max_value=bn.size - 1))
    backward = data.draw(st.booleans())
    time_domain = ARMAFilter(bn, [1.0], start, backward=backward, pad_type=policy)
    frequency_domain = ARMAFilter(bn, [1.0], start, backward=backward, pad_type=policy,
                                  in_frequency_domain=True)
    np.testing.assert_allclose(frequency_domain.filter(matrix), time_domain.filter(matrix),
                               rtol=1e-8, atol=1e-8)


@given(signals, st.floats(min_value=-0.9, max_value=0.9), padded_policies)
@settings(deadline=None, max_examples=30)
def test_backward_is_time_reversal(matrix, pole, policy):
    bn, an = [1.0, 0.5], [1.0, -pole]
    backward = ARMAFilter(bn, an, backward=True, pad_type=policy).filter(matrix)
    forward = ARMAFilter(bn, an, pad_type=policy).filter(matrix[::-1])[::-1]
    np.testing.assert_allclose(backward, forward, rtol=1e-10, atol=1e-10)


@given(st.integers(min_value=8, max_value=80), st.integers(min_value=1, max_value=7),
       st.integers(min_value=1, max_value=7))
@settings(deadline=None, max_examples=30)
def test_chain_response_is_product(length, first, second):
    members = [MovingAverage(first), MovingAverage(second, backward=True)]
    expected = members[0].frequency_response(length) * members[1].frequency_response(length)
    np.testing.assert_allclose(DigitalFilter(members).frequency_response(length), expected, atol=1e-12)


@given(signals, st.integers(min_value=1, max_value=20), st.floats(min_value=-0.9, max_value=0.9))
@settings(deadline=None, max_examples=30)
def test_block_size_does_not_change_result(matrix, block_size, pole):
    bn, an = [0.4, 0.3, 0.3], [1.0, -pole]
    reference = ARMAFilter(bn, an, 1, pad_type="zero", block_size=1000).filter(matrix)
    blocked = ARMAFilter(bn, an, 1, pad_type="zero", block_size=block_size).filter(matrix)
    np.testing.assert_allclose(blocked, reference, rtol=1e-9, atol=1e-9)
