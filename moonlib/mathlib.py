"""Standard mathematical library: C-style numeric functions and random numbers."""

from __future__ import annotations

import math
import random as _random
from typing import Any, Callable

from .objects import ArithOp, arith, str2number

PI = math.pi
RADIANS_PER_DEGREE = PI / 180.0
HUGE = math.inf


def _typename(value: object) -> str:
    if value is None:
        return "nil"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, str):
        return "string"
    if isinstance(value, dict):
        return "table"
    return type(value).__name__


def _check_number(value: object, arg: int, fname: str) -> float:
    """Accept a number or a numeric string, as the interpreter's API does."""
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return float(value)
    if isinstance(value, str):
        try:
            return str2number(value)
        except ValueError:
            pass
    raise TypeError(
        f"bad argument #{arg} to '{fname}' (number expected, got {_typename(value)})"
    )


def _c_unary(
    fn: Callable[[float], float],
    on_overflow: Callable[[float], float] = lambda x: math.inf,
) -> Callable[[float], float]:
    """Wrap a math function so domain errors give NaN and overflows infinity."""

    def call(x: float) -> float:
        try:
            return float(fn(x))
        except ValueError:
            return math.nan
        except OverflowError:
            return on_overflow(x)

    return call


def _floor(x: float) -> float:
    return float(math.floor(x)) if math.isfinite(x) else x


def _ceil(x: float) -> float:
    return float(math.ceil(x)) if math.isfinite(x) else x


def _c_log(x: float) -> float:
    if math.isnan(x):
        return x
    if x == 0:
        return -math.inf
    if x < 0:
        return math.nan
    return math.log(x)


def _c_log10(x: float) -> float:
    if math.isnan(x):
        return x
    if x == 0:
        return -math.inf
    if x < 0:
        return math.nan
    return math.log10(x)


def log(x: Any, base: Any = None) -> float:
    """Logarithm of ``x``; natural when ``base`` is omitted."""
    value = _check_number(x, 1, "log")
    if base is None:
        return _c_log(value)
    b = _check_number(base, 2, "log")
    if b == 10.0:
        return _c_log10(value)
    return arith(ArithOp.DIV, _c_log(value), _c_log(b))


def deg(x: Any) -> float:
    """Convert radians to degrees."""
    return _check_number(x, 1, "deg") / RADIANS_PER_DEGREE


def rad(x: Any) -> float:
    """Convert degrees to radians."""
    return _check_number(x, 1, "rad") * RADIANS_PER_DEGREE


def modf(x: Any) -> tuple[float, float]:
    """Split ``x`` into its integral and fractional parts, in that order."""
    frac, whole = math.modf(_check_number(x, 1, "modf"))
    return whole, frac


def frexp(x: Any) -> tuple[float, int]:
    """Return mantissa and exponent with ``x == m * 2**e``."""
    return math.frexp(_check_number(x, 1, "frexp"))


def ldexp(m: Any, e: Any) -> float:
    """Return ``m * 2**e``."""
    mantissa = _check_number(m, 1, "ldexp")
    exponent = int(_check_number(e, 2, "ldexp"))
    try:
        return math.ldexp(mantissa, exponent)
    except OverflowError:
        return math.copysign(math.inf, mantissa)


def fmod(a: Any, b: Any) -> float:
    """C ``fmod``: remainder with the sign of the dividend."""
    x = _check_number(a, 1, "fmod")
    y = _check_number(b, 2, "fmod")
    try:
        return math.fmod(x, y)
    except ValueError:
        return math.nan


def _extreme(args: tuple[Any, ...], fname: str, better: Callable[[float, float], bool]) -> float:
    if not args:
        raise TypeError(f"bad argument #1 to '{fname}' (number expected, got no value)")
    best = _check_number(args[0], 1, fname)
    for position, arg in enumerate(args[1:], start=2):
        value = _check_number(arg, position, fname)
        if better(value, best):
            best = value
    return best


def minimum(*args: Any) -> float:
    """Smallest of the arguments."""
    return _extreme(args, "min", lambda d, cur: d < cur)


def maximum(*args: Any) -> float:
    """Largest of the arguments."""
    return _extreme(args, "max", lambda d, cur: d > cur)


class Random:
    """Pseudo-random generator behind ``random`` and ``randomseed``."""

    def __init__(self, seed: int | None = None) -> None:
        self._rng = _random.Random(seed)

    def random(self, *args: Any) -> float:
        """No argument: a float in [0, 1); ``u``: an integer in [1, u];
        ``l, u``: an integer in [l, u]."""
        r = self._rng.random()
        if not args:
            return r
        if len(args) == 1:
            u = _check_number(args[0], 1, "random")
            if not 1.0 <= u:
                raise ValueError("bad argument #1 to 'random' (interval is empty)")
            return _floor(r * u) + 1.0
        if len(args) == 2:
            low = _check_number(args[0], 1, "random")
            up = _check_number(args[1], 2, "random")
            if not low <= up:
                raise ValueError("bad argument #2 to 'random' (interval is empty)")
            return _floor(r * (up - low + 1)) + low
        raise TypeError("wrong number of arguments")

    def seed(self, value: Any) -> None:
        """Reseed the generator and discard its first value."""
        number = _check_number(value, 1, "randomseed")
        self._rng.seed(int(number) % (1 << 32))
        self._rng.random()


def _pow(a: Any, b: Any) -> float:
    return arith(ArithOp.POW, _check_number(a, 1, "pow"), _check_number(b, 2, "pow"))


def _atan2(a: Any, b: Any) -> float:
    return math.atan2(_check_number(a, 1, "atan2"), _check_number(b, 2, "atan2"))


def _unary(name: str, fn: Callable[[float], float]) -> Callable[[Any], float]:
    def wrapper(x: Any) -> float:
        return fn(_check_number(x, 1, name))

    wrapper.__name__ = name
    return wrapper


def open_math() -> dict[str, Any]:
    """Build the ``math`` library table."""
    rng = Random()
    return {
        "abs": _unary("abs", math.fabs),
        "acos": _unary("acos", _c_unary(math.acos)),
        "asin": _unary("asin", _c_unary(math.asin)),
        "atan2": _atan2,
        "atan": _unary("atan", math.atan),
        "ceil": _unary("ceil", _ceil),
        "cosh": _unary("cosh", _c_unary(math.cosh)),
        "cos": _unary("cos", _c_unary(math.cos)),
        "deg": deg,
        "exp": _unary("exp", _c_unary(math.exp)),
        "floor": _unary("floor", _floor),
        "fmod": fmod,
        "frexp": frexp,
        "ldexp": ldexp,
        "log": log,
        "max": maximum,
        "min": minimum,
        "modf": modf,
        "pow": _pow,
        "rad": rad,
        "random": rng.random,
        "randomseed": rng.seed,
        "sinh": _unary("sinh", _c_unary(math.sinh, lambda x: math.copysign(math.inf, x))),
        "sin": _unary("sin", _c_unary(math.sin)),
        "sqrt": _unary("sqrt", _c_unary(math.sqrt)),
        "tanh": _unary("tanh", math.tanh),
        "tan": _unary("tan", _c_unary(math.tan)),
        "pi": PI,
        "huge": HUGE,
    }