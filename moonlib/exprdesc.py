"""Descriptors used by the parser for expressions, labels and gotos."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum

NO_JUMP = -1


class ExpKind(IntEnum):
    """Kinds of expression the code generator can hold."""

    VOID = 0        # no value
    NIL = 1
    TRUE = 2
    FALSE = 3
    K = 4           # info = index of constant
    KNUM = 5        # nval = numerical value
    NONRELOC = 6    # info = result register
    LOCAL = 7       # info = local register
    UPVAL = 8       # info = index of upvalue
    INDEXED = 9     # table = table register/upvalue; index = R/K index
    JMP = 10        # info = instruction pc
    RELOCABLE = 11  # info = instruction pc
    CALL = 12       # info = instruction pc
    VARARG = 13     # info = instruction pc


def is_var(kind: ExpKind) -> bool:
    """True for kinds that can be assigned to."""
    return ExpKind.LOCAL <= kind <= ExpKind.INDEXED


def is_in_reg(kind: ExpKind) -> bool:
    """True for kinds whose value already sits in a register."""
    return kind in (ExpKind.NONRELOC, ExpKind.LOCAL)


@dataclass
class ExpDesc:
    """An expression being compiled.

    ``info`` is the general-purpose payload, ``nval`` the value of a numeric
    constant, and ``index``/``table``/``table_kind`` describe an indexed
    variable. ``t`` and ``f`` are the patch lists for exit-when-true and
    exit-when-false jumps.
    """

    k: ExpKind = ExpKind.VOID
    info: int = 0
    nval: float = 0.0
    index: int = 0
    table: int = 0
    table_kind: ExpKind = ExpKind.LOCAL
    t: int = NO_JUMP
    f: int = NO_JUMP

    def has_jumps(self) -> bool:
        """True if the expression has pending jumps."""
        return self.t != self.f


@dataclass
class LabelDesc:
    """A label or a pending goto statement."""

    name: str
    pc: int
    line: int
    nactvar: int