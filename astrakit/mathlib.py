"""Numeric functions and constants of the scripting language's ``Math`` module.

Integers stay integers where the operation allows it (``abs``, ``sign``,
``min``, ``max``, rounding and ``clamp``). Everything else works in floating
point and follows IEEE semantics: a domain error yields NaN and an overflow
yields an infinity rather than an exception. Non-numeric arguments raise
:class:`TypeError`.
"""

from __future__ import annotations

import math as _math
import random as _random
from typing import Any, Callable, Dict

PI = _math.pi
E = _math.e
SQRT2 = _math.sqrt(2.0)
INFINITY = _math.inf
NAN = _math.nan

Number = int | float

_rng = _random.Random()


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _is_float(value: Any) -> bool:
    return isinstance(value, float)


def _check(value: Any, name: str) -> None:
    if not (_is_int(value) or _is_float(value)):
        raise TypeError(f"Math.{name} expects numeric arguments")


def _as_float(value: Any, name: str) -> float:
    _check(value, name)
    return float(value)


def _is_odd_integer(value: float) -> bool:
    return _math.isfinite(value) and value == int(value) and int(value) % 2 == 1


# Basic functions

def abs(value: Number) -> Number:
    """Absolute value; integers stay integers."""
    _check(value, "abs")
    return -value if value < 0 else (0.0 if value == 0 and _is_float(value) else value)


def sign(value: Number) -> Number:
    """-1, 0 or 1, as an integer for integers and a float for floats."""
    _check(value, "sign")
    if _is_int(value):
        return 1 if value > 0 else (-1 if value < 0 else 0)
    return 1.0 if value > 0.0 else (-1.0 if value < 0.0 else 0.0)


def _extreme(args: tuple, name: str, better: Callable[[float, float], bool]) -> Number:
    if not args:
        raise TypeError(f"Math.{name} expects at least 1 argument")
    for arg in args:
        _check(arg, name)
    result = args[0]
    for arg in args[1:]:
        if _is_int(result) and _is_int(arg):
            if better(arg, result):
                result = arg
        else:
            candidate = float(arg)
            if better(candidate, float(result)):
                result = candidate
    return result


def min(*args: Number) -> Number:
    """Smallest argument; a float replacement is returned as a float."""
    return _extreme(args, "min", lambda b, a: b < a)


def max(*args: Number) -> Number:
    """Largest argument; a float replacement is returned as a float."""
    return _extreme(args, "max", lambda b, a: b > a)


def floor(value: Number) -> Number:
    """Round toward negative infinity."""
    _check(value, "floor")
    if _is_int(value) or not _math.isfinite(value):
        return value
    return _math.copysign(float(_math.floor(value)), value)


def ceil(value: Number) -> Number:
    """Round toward positive infinity."""
    _check(value, "ceil")
    if _is_int(value) or not _math.isfinite(value):
        return value
    return _math.copysign(float(_math.ceil(value)), value)


def round(value: Number) -> Number:
    """Round to nearest, halves away from zero."""
    _check(value, "round")
    if _is_int(value) or not _math.isfinite(value):
        return value
    lower = _math.floor(value)
    fraction = value - lower
    if fraction > 0.5 or (fraction == 0.5 and value > 0):
        result = lower + 1
    else:
        result = lower
    return _math.copysign(float(result), value)


def trunc(value: Number) -> Number:
    """Round toward zero."""
    _check(value, "trunc")
    if _is_int(value) or not _math.isfinite(value):
        return value
    return _math.copysign(float(_math.trunc(value)), value)


# Exponential and logarithmic functions

def exp(value: Number) -> float:
    x = _as_float(value, "exp")
    try:
        return _math.exp(x)
    except OverflowError:
        return INFINITY


def _logarithm(value: Number, name: str, func: Callable[[float], float]) -> float:
    x = _as_float(value, name)
    if x == 0.0:
        return -INFINITY
    if x < 0.0:
        return NAN
    return func(x)


def log(value: Number) -> float:
    return _logarithm(value, "log", _math.log)


def log10(value: Number) -> float:
    return _logarithm(value, "log10", _math.log10)


def log2(value: Number) -> float:
    return _logarithm(value, "log2", _math.log2)


def pow(base: Number, exponent: Number) -> float:
    b = _as_float(base, "pow")
    e = _as_float(exponent, "pow")
    try:
        return _math.pow(b, e)
    except OverflowError:
        negative = b < 0 and _is_odd_integer(e)
        return -INFINITY if negative else INFINITY
    except ValueError:
        if b == 0.0 and e < 0:
            return _math.copysign(INFINITY, b) if _is_odd_integer(e) else INFINITY
        return NAN


def sqrt(value: Number) -> float:
    x = _as_float(value, "sqrt")
    if x < 0.0:
        return NAN
    return _math.sqrt(x)


def cbrt(value: Number) -> float:
    x = _as_float(value, "cbrt")
    native = getattr(_math, "cbrt", None)
    if native is not None:
        return native(x)
    if x == 0.0 or not _math.isfinite(x):
        return x
    magnitude = _math.fabs(x)
    root = magnitude ** (1.0 / 3.0)
    root -= (root * root * root - magnitude) / (3.0 * root * root)
    return _math.copysign(root, x)


# Trigonometric functions

def sin(value: Number) -> float:
    x = _as_float(value, "sin")
    return NAN if _math.isinf(x) else _math.sin(x)


def cos(value: Number) -> float:
    x = _as_float(value, "cos")
    return NAN if _math.isinf(x) else _math.cos(x)


def tan(value: Number) -> float:
    x = _as_float(value, "tan")
    return NAN if _math.isinf(x) else _math.tan(x)


def asin(value: Number) -> float:
    x = _as_float(value, "asin")
    return NAN if _math.fabs(x) > 1.0 else _math.asin(x)


def acos(value: Number) -> float:
    x = _as_float(value, "acos")
    return NAN if _math.fabs(x) > 1.0 else _math.acos(x)


def atan(value: Number) -> float:
    return _math.atan(_as_float(value, "atan"))


def atan2(y: Number, x: Number) -> float:
    return _math.atan2(_as_float(y, "atan2"), _as_float(x, "atan2"))


# Hyperbolic functions

def sinh(value: Number) -> float:
    x = _as_float(value, "sinh")
    try:
        return _math.sinh(x)
    except OverflowError:
        return _math.copysign(INFINITY, x)


def cosh(value: Number) -> float:
    x = _as_float(value, "cosh")
    try:
        return _math.cosh(x)
    except OverflowError:
        return INFINITY


def tanh(value: Number) -> float:
    return _math.tanh(_as_float(value, "tanh"))


def asinh(value: Number) -> float:
    return _math.asinh(_as_float(value, "asinh"))


def acosh(value: Number) -> float:
    x = _as_float(value, "acosh")
    return NAN if x < 1.0 else _math.acosh(x)


def atanh(value: Number) -> float:
    x = _as_float(value, "atanh")
    if _math.fabs(x) == 1.0:
        return _math.copysign(INFINITY, x)
    if _math.fabs(x) > 1.0:
        return NAN
    return _math.atanh(x)


# Angle conversion

def degrees(radians: Number) -> float:
    return _as_float(radians, "degrees") * 180.0 / PI


def radians(degrees: Number) -> float:
    return _as_float(degrees, "radians") * PI / 180.0


# Random numbers

def random() -> float:
    """Uniform float in [0, 1)."""
    return _rng.random()


def random_int(low: Number, high: Number) -> int:
    """Uniform integer in the closed range between the bounds, in either order."""
    _check(low, "randomInt")
    _check(high, "randomInt")
    lo, hi = int(low), int(high)
    if lo > hi:
        lo, hi = hi, lo
    return _rng.randint(lo, hi)


def random_float(low: Number, high: Number) -> float:
    """Uniform float in [low, high), the bounds taken in either order."""
    lo = _as_float(low, "randomFloat")
    hi = _as_float(high, "randomFloat")
    if lo > hi:
        lo, hi = hi, lo
    return lo + (hi - lo) * _rng.random()


def set_seed(seed: Number) -> None:
    """Reseed the generator; the seed is truncated to an unsigned 32-bit value."""
    _check(seed, "setSeed")
    _rng.seed(int(seed) & 0xFFFFFFFF)


# Additional functions

def clamp(value: Number, low: Number, high: Number) -> Number:
    """Limit value to [low, high]; integers stay integers when all are integers."""
    for arg in (value, low, high):
        _check(arg, "clamp")
    if not all(_is_int(arg) for arg in (value, low, high)):
        value, low, high = float(value), float(low), float(high)
    if value < low:
        return low
    if high < value:
        return high
    return value


def lerp(a: Number, b: Number, t: Number) -> float:
    start = _as_float(a, "lerp")
    end = _as_float(b, "lerp")
    factor = _as_float(t, "lerp")
    return start + factor * (end - start)


def smooth_step(edge0: Number, edge1: Number, x: Number) -> float:
    lo = _as_float(edge0, "smoothStep")
    hi = _as_float(edge1, "smoothStep")
    position = _as_float(x, "smoothStep")
    try:
        t = (position - lo) / (hi - lo)
    except ZeroDivisionError:
        t = NAN if position == lo else _math.copysign(INFINITY, position - lo)
    if t < 0.0:
        t = 0.0
    elif t > 1.0:
        t = 1.0
    return t * t * (3 - 2 * t)


def is_nan(value: Any) -> bool:
    return _is_float(value) and _math.isnan(value)


def is_infinite(value: Any) -> bool:
    return _is_float(value) and _math.isinf(value)


def is_finite(value: Any) -> bool:
    if _is_int(value):
        return True
    return _is_float(value) and _math.isfinite(value)


def build_namespace() -> Dict[str, Any]:
    """Return the ``Math`` module's members under their script-visible names."""
    return {
        "PI": PI,
        "E": E,
        "SQRT2": SQRT2,
        "INFINITY": INFINITY,
        "NAN": NAN,
        "abs": abs,
        "sign": sign,
        "min": min,
        "max": max,
        "floor": floor,
        "ceil": ceil,
        "round": round,
        "trunc": trunc,
        "exp": exp,
        "log": log,
        "log10": log10,
        "log2": log2,
        "pow": pow,
        "sqrt": sqrt,
        "cbrt": cbrt,
        "sin": sin,
        "cos": cos,
        "tan": tan,
        "asin": asin,
        "acos": acos,
        "atan": atan,
        "atan2": atan2,
        "sinh": sinh,
        "cosh": cosh,
        "tanh": tanh,
        "asinh": asinh,
        "acosh": acosh,
        "atanh": atanh,
        "degrees": degrees,
        "radians": radians,
        "random": random,
        "randomInt": random_int,
        "randomFloat": random_float,
        "setSeed": set_seed,
        "clamp": clamp,
        "lerp": lerp,
        "smoothStep": smooth_step,
        "isNaN": is_nan,
        "isInfinite": is_infinite,
        "isFinite": is_finite,
    }