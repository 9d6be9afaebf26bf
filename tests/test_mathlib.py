import math

import pytest

from astrakit import mathlib


def test_constants():
    namespace = mathlib.build_namespace()
    assert namespace["PI"] == pytest.approx(math.pi)
    assert namespace["E"] == pytest.approx(math.e)
    assert namespace["SQRT2"] == pytest.approx(math.sqrt(2.0))
    assert mathlib.is_infinite(namespace["INFINITY"]) is True
    assert mathlib.is_nan(namespace["NAN"]) is True
    assert mathlib.degrees(mathlib.PI) == pytest.approx(180.0)


def test_source_math_cases():
    assert mathlib.abs(-5) == 5
    assert mathlib.sin(0) == 0.0
    assert mathlib.cos(0) == 1.0
    assert mathlib.sqrt(16) == 4.0
    assert mathlib.pow(2, 3) == 8.0
    assert mathlib.floor(3.7) == 3
    assert mathlib.ceil(3.2) == 4
    assert mathlib.round(3.7) == 4
    assert mathlib.min(3, 5, 7) == 3
    assert mathlib.max(3, 5, 7) == 7


def test_random_in_unit_interval():
    for _ in range(100):
        value = mathlib.random()
        assert 0.0 <= value < 1.0


def test_random_int_in_closed_range():
    for _ in range(100):
        value = mathlib.random_int(1, 10)
        assert 1 <= value <= 10
        assert isinstance(value, int)


def test_random_int_swaps_bounds():
    for _ in range(50):
        assert 1 <= mathlib.random_int(10, 1) <= 10


def test_random_float_range_and_swap():
    for _ in range(50):
        assert 2.0 <= mathlib.random_float(5.0, 2.0) < 5.0


def test_set_seed_reproducible():
    mathlib.set_seed(42)
    first = [mathlib.random() for _ in range(5)]
    mathlib.set_seed(42)
    second = [mathlib.random() for _ in range(5)]
    assert first == second


def test_abs_keeps_type():
    assert mathlib.abs(-7) == 7 and isinstance(mathlib.abs(-7), int)
    assert mathlib.abs(-2.5) == 2.5 and isinstance(mathlib.abs(-2.5), float)


def test_sign():
    assert mathlib.sign(-9) == -1
    assert mathlib.sign(0) == 0
    assert mathlib.sign(4) == 1
    assert mathlib.sign(-0.5) == -1.0
    assert isinstance(mathlib.sign(0.5), float)


def test_min_max_mixed():
    assert mathlib.min(3, 1.5) == 1.5
    result = mathlib.max(3, 1.5)
    assert result == 3 and isinstance(result, int)
    assert mathlib.max(1, 2.5, 2) == 2.5


def test_min_requires_argument():
    with pytest.raises(TypeError):
        mathlib.min()
    with pytest.raises(TypeError):
        mathlib.max()


def test_round_half_away_from_zero():
    assert mathlib.round(2.5) == 3.0
    assert mathlib.round(-2.5) == -3.0
    assert mathlib.round(0.49999999999999994) == 0.0
    assert math.copysign(1.0, mathlib.round(-0.3)) == -1.0


def test_integer_rounding_identity():
    assert mathlib.floor(5) == 5
    assert isinstance(mathlib.trunc(5), int)
    assert mathlib.trunc(-3.7) == -3.0
    assert mathlib.ceil(-3.7) == -3.0


def test_domain_errors_give_nan():
    assert str(mathlib.sqrt(-1)) == "nan"
    assert str(mathlib.log(-1)) == "nan"
    assert str(mathlib.asin(2)) == "nan"
    assert str(mathlib.acosh(0.5)) == "nan"
    assert str(mathlib.pow(-8, 0.5)) == "nan"


def test_poles_and_overflow_give_infinity():
    assert mathlib.log(0) == -math.inf
    assert mathlib.log10(0) == -math.inf
    assert mathlib.atanh(1) == math.inf
    assert mathlib.exp(1000) == math.inf
    assert mathlib.pow(0, -1) == math.inf
    assert mathlib.sinh(-1000) == -math.inf


def test_logs_and_roots():
    assert mathlib.log10(1000) == pytest.approx(3.0)
    assert mathlib.log2(8) == 3.0
    assert mathlib.cbrt(27) == pytest.approx(3.0)
    assert mathlib.cbrt(-8) == pytest.approx(-2.0)


def test_atan2_and_angles():
    assert mathlib.atan2(1, 1) == pytest.approx(math.pi / 4)
    assert mathlib.degrees(math.pi) == pytest.approx(180.0)
    assert mathlib.radians(180) == pytest.approx(math.pi)


def test_clamp():
    assert mathlib.clamp(15, 0, 10) == 10
    assert isinstance(mathlib.clamp(-5, 0, 10), int)
    assert mathlib.clamp(0.5, 1, 2) == 1.0
    assert isinstance(mathlib.clamp(0.5, 1, 2), float)


def test_lerp_and_smooth_step():
    assert mathlib.lerp(0, 10, 0.25) == 2.5
    assert mathlib.smooth_step(0, 1, 0.5) == 0.5
    assert mathlib.smooth_step(0, 1, -3) == 0.0
    assert mathlib.smooth_step(0, 1, 3) == 1.0


def test_classification():
    assert mathlib.is_nan(float("nan")) is True
    assert mathlib.is_nan(5) is False
    assert mathlib.is_infinite(float("-inf")) is True
    assert mathlib.is_infinite(10) is False
    assert mathlib.is_finite(10) is True
    assert mathlib.is_finite(float("inf")) is False
    assert mathlib.is_finite("text") is False


@pytest.mark.parametrize("func", [mathlib.sqrt, mathlib.abs, mathlib.floor, mathlib.sin])
def test_non_numeric_rejected(func):
    with pytest.raises(TypeError):
        func("hello")


def test_bool_is_not_numeric():
    with pytest.raises(TypeError):
        mathlib.abs(True)


def test_namespace():
    namespace = mathlib.build_namespace()
    assert namespace["PI"] == pytest.approx(math.pi)
    assert namespace["abs"](-3) == 3
    assert namespace["randomInt"] is mathlib.random_int
    assert namespace["smoothStep"](0, 1, 1) == 1.0
    assert "isFinite" in namespace