"""Generic helpers over values: float bytes, arithmetic, number parsing,
message formatting and chunk identifiers."""

from __future__ import annotations

import math
import re
from enum import IntEnum
from typing import Iterator

LUA_IDSIZE = 60

_SPACES = " \t\n\v\f\r"
_HEXDIGITS = "0123456789abcdefABCDEF"
_DECIMAL = re.compile(
    r"[ \t\n\v\f\r]*([+-]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[eE][+-]?[0-9]+)?)"
)

_RETS = "..."
_PRE = '[string "'
_POS = '"]'


class ArithOp(IntEnum):
    """Arithmetic operators, in the order of the public API."""

    ADD = 0
    SUB = 1
    MUL = 2
    DIV = 3
    MOD = 4
    POW = 5
    UNM = 6


def int2fb(x: int) -> int:
    """Encode ``x`` as a "floating point byte" ``eeeeexxx``.

    The value represented is ``(1xxx) * 2**(eeeee - 1)`` when ``eeeee`` is
    not zero and ``xxx`` otherwise; it is never smaller than ``x``.
    """
    if x < 0:
        raise ValueError("int2fb expects a non-negative integer")
    if x < 8:
        return x
    e = 0
    while x >= 0x10:
        x = (x + 1) >> 1
        e += 1
    return ((e + 1) << 3) | (x - 8)


def fb2int(x: int) -> int:
    """Decode a "floating point byte" produced by :func:`int2fb`."""
    e = (x >> 3) & 0x1F
    if e == 0:
        return x
    return ((x & 7) + 8) << (e - 1)


def ceil_log2(x: int) -> int:
    """Return ``ceil(log2(x))`` for a positive integer ``x``."""
    if x < 1:
        raise ValueError("ceil_log2 expects a positive integer")
    return (x - 1).bit_length()


def _is_odd_integer(y: float) -> bool:
    return math.isfinite(y) and y == math.floor(y) and math.fmod(y, 2.0) != 0.0


def _div(a: float, b: float) -> float:
    try:
        return a / b
    except ZeroDivisionError:
        if a == 0 or math.isnan(a):
            return math.nan
        return math.copysign(math.inf, a) * math.copysign(1.0, b)


def _floor(x: float) -> float:
    return float(math.floor(x)) if math.isfinite(x) else x


def _mod(a: float, b: float) -> float:
    return a - _floor(_div(a, b)) * b


def _pow(a: float, b: float) -> float:
    try:
        return math.pow(a, b)
    except OverflowError:
        if a < 0 and _is_odd_integer(b):
            return -math.inf
        return math.inf
    except ValueError:
        if a == 0:
            if _is_odd_integer(b):
                return math.copysign(math.inf, a)
            return math.inf
        return math.nan


def arith(op: int, v1: float, v2: float = 0.0) -> float:
    """Apply an arithmetic operator to two numbers with IEEE semantics.

    ``MOD`` is floored (the result takes the sign of the divisor) and
    ``UNM`` ignores ``v2``.
    """
    op = ArithOp(op)
    a = float(v1)
    b = float(v2)
    if op is ArithOp.ADD:
        return a + b
    if op is ArithOp.SUB:
        return a - b
    if op is ArithOp.MUL:
        return a * b
    if op is ArithOp.DIV:
        return _div(a, b)
    if op is ArithOp.MOD:
        return _mod(a, b)
    if op is ArithOp.POW:
        return _pow(a, b)
    return -a


def hexa_value(c: str) -> int:
    """Value of a hexadecimal digit character."""
    if len(c) != 1 or c not in _HEXDIGITS:
        raise ValueError(f"not a hexadecimal digit: {c!r}")
    if c.isdigit():
        return ord(c) - ord("0")
    return ord(c.lower()) - ord("a") + 10


def _skip_sign(s: str, pos: int) -> tuple[bool, int]:
    if pos < len(s) and s[pos] == "-":
        return True, pos + 1
    if pos < len(s) and s[pos] == "+":
        return False, pos + 1
    return False, pos


def _read_hexa(s: str, pos: int, r: float) -> tuple[float, int, int]:
    count = 0
    while pos < len(s) and s[pos] in _HEXDIGITS:
        r = r * 16.0 + hexa_value(s[pos])
        pos += 1
        count += 1
    return r, pos, count


def _strx2number(s: str) -> tuple[float, int]:
    """Parse a hexadecimal numeral; return the value and the end position.

    An end position of 0 means nothing was recognised.
    """
    pos = 0
    while pos < len(s) and s[pos] in _SPACES:
        pos += 1
    neg, pos = _skip_sign(s, pos)
    if not (s[pos:pos + 1] == "0" and s[pos + 1:pos + 2] in ("x", "X")):
        return 0.0, 0
    pos += 2
    r, pos, int_digits = _read_hexa(s, pos, 0.0)
    frac_digits = 0
    if s[pos:pos + 1] == ".":
        pos += 1
        r, pos, frac_digits = _read_hexa(s, pos, r)
    if int_digits == 0 and frac_digits == 0:
        return 0.0, 0
    e = -4 * frac_digits
    end = pos
    if s[pos:pos + 1] in ("p", "P"):
        pos += 1
        exp_neg, pos = _skip_sign(s, pos)
        start = pos
        while pos < len(s) and s[pos] in "0123456789":
            pos += 1
        if pos > start:
            exponent = int(s[start:pos])
            e += -exponent if exp_neg else exponent
            end = pos
    if neg:
        r = -r
    try:
        return math.ldexp(r, e), end
    except OverflowError:
        return math.copysign(math.inf, r), end


def str2number(s: str) -> float:
    """Convert a numeral to a number, accepting decimal and hexadecimal forms.

    Surrounding whitespace is allowed; ``inf``, ``nan`` and any trailing
    garbage are rejected with :class:`ValueError`.
    """
    if "n" in s or "N" in s:
        raise ValueError(f"invalid numeral: {s!r}")
    if "x" in s or "X" in s:
        value, end = _strx2number(s)
    else:
        match = _DECIMAL.match(s)
        if match is None:
            value, end = 0.0, 0
        else:
            value, end = float(match.group(1)), match.end()
    if end == 0 or s[end:].lstrip(_SPACES):
        raise ValueError(f"invalid numeral: {s!r}")
    return value


def _number_to_str(n: float) -> str:
    return format(float(n), ".14g")


def format_message(fmt: str, *args: object) -> str:
    """Format a message using the small ``%d %c %f %p %s %%`` vocabulary.

    Numbers from ``%d`` and ``%f`` are written as the interpreter writes
    numbers; ``%s`` of ``None`` gives ``(null)``; ``%p`` gives the object's
    identity in hexadecimal. Any other option raises :class:`ValueError`.
    """
    values: Iterator[object] = iter(args)

    def take() -> object:
        try:
            return next(values)
        except StopIteration:
            raise TypeError("not enough arguments for format string") from None

    parts: list[str] = []
    pos = 0
    while (e := fmt.find("%", pos)) >= 0:
        parts.append(fmt[pos:e])
        spec = fmt[e + 1:e + 2]
        if spec == "s":
            value = take()
            parts.append("(null)" if value is None else str(value))
        elif spec == "c":
            value = take()
            parts.append(value if isinstance(value, str) else chr(int(value)))
        elif spec == "d":
            parts.append(_number_to_str(int(take())))
        elif spec == "f":
            parts.append(_number_to_str(float(take())))
        elif spec == "p":
            parts.append(f"0x{id(take()):x}")
        elif spec == "%":
            parts.append("%")
        else:
            raise ValueError(f"invalid option '%{spec}' to 'lua_pushfstring'")
        pos = e + 2
    parts.append(fmt[pos:])
    return "".join(parts)


def chunkid(source: str, bufflen: int = LUA_IDSIZE) -> str:
    """Build a printable chunk identifier of at most ``bufflen - 1`` characters.

    ``=name`` is used literally, ``@file`` is a file name shortened from the
    left, and anything else is source text shown as ``[string "..."]``.
    """
    minimum = len(_PRE + _RETS + _POS) + 1
    if bufflen < minimum:
        raise ValueError(f"bufflen must be at least {minimum}")
    length = len(source)
    if source.startswith("="):
        if length <= bufflen:
            return source[1:]
        return source[1:bufflen]
    if source.startswith("@"):
        if length <= bufflen:
            return source[1:]
        keep = bufflen - len(_RETS) - 1
        return _RETS + source[length - keep:]
    room = bufflen - minimum
    nl = source.find("\n")
    if length < room and nl < 0:
        return _PRE + source + _POS
    if nl >= 0:
        length = nl
    length = min(length, room)
    return _PRE + source[:length] + _RETS + _POS