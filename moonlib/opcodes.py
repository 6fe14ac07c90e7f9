"""Instruction set of the virtual machine: opcodes, operand layout and properties.

Instructions are 32-bit unsigned integers. The opcode lives in the lowest
six bits; the operands follow:

    A  : 8 bits
    B  : 9 bits
    C  : 9 bits
    Ax : 26 bits (A, B and C together)
    Bx : 18 bits (B and C together)
    sBx: signed Bx, stored in excess-K notation
"""

from __future__ import annotations

from enum import IntEnum


class OpMode(IntEnum):
    """Basic instruction formats."""

    ABC = 0
    ABX = 1
    ASBX = 2
    AX = 3


class OpArgMask(IntEnum):
    """How an instruction uses its B or C operand."""

    N = 0  # argument is not used
    U = 1  # argument is used
    R = 2  # argument is a register or a jump offset
    K = 3  # argument is a constant or register/constant


class OpCode(IntEnum):
    """Virtual machine opcodes, in encoding order."""

    MOVE = 0
    LOADK = 1
    LOADKX = 2
    LOADBOOL = 3
    LOADNIL = 4
    GETUPVAL = 5
    GETTABUP = 6
    GETTABLE = 7
    SETTABUP = 8
    SETUPVAL = 9
    SETTABLE = 10
    NEWTABLE = 11
    SELF = 12
    ADD = 13
    SUB = 14
    MUL = 15
    DIV = 16
    MOD = 17
    POW = 18
    UNM = 19
    NOT = 20
    LEN = 21
    CONCAT = 22
    JMP = 23
    EQ = 24
    LT = 25
    LE = 26
    TEST = 27
    TESTSET = 28
    CALL = 29
    TAILCALL = 30
    RETURN = 31
    FORLOOP = 32
    FORPREP = 33
    TFORCALL = 34
    TFORLOOP = 35
    SETLIST = 36
    CLOSURE = 37
    VARARG = 38
    EXTRAARG = 39


NUM_OPCODES = len(OpCode)

SIZE_C = 9
SIZE_B = 9
SIZE_BX = SIZE_C + SIZE_B
SIZE_A = 8
SIZE_AX = SIZE_C + SIZE_B + SIZE_A
SIZE_OP = 6

POS_OP = 0
POS_A = POS_OP + SIZE_OP
POS_C = POS_A + SIZE_A
POS_B = POS_C + SIZE_C
POS_BX = POS_C
POS_AX = POS_A

MAXARG_BX = (1 << SIZE_BX) - 1
MAXARG_SBX = MAXARG_BX >> 1
MAXARG_AX = (1 << SIZE_AX) - 1
MAXARG_A = (1 << SIZE_A) - 1
MAXARG_B = (1 << SIZE_B) - 1
MAXARG_C = (1 << SIZE_C) - 1

INSTRUCTION_MASK = 0xFFFFFFFF

# bit set in an RK operand means "constant" (clear means register)
BITRK = 1 << (SIZE_B - 1)
MAXINDEXRK = BITRK - 1

# invalid register that fits in 8 bits
NO_REG = MAXARG_A

# number of list items to accumulate before a SETLIST instruction
LFIELDS_PER_FLUSH = 50


def _mask1(n: int, p: int) -> int:
    """Mask with ``n`` one bits starting at position ``p``."""
    return ((1 << n) - 1) << p


def _getarg(i: int, pos: int, size: int) -> int:
    return (i >> pos) & _mask1(size, 0)


def _setarg(i: int, v: int, pos: int, size: int) -> int:
    mask = _mask1(size, pos)
    return ((i & ~mask) | ((v << pos) & mask)) & INSTRUCTION_MASK


def _check_range(name: str, value: int, maximum: int) -> int:
    if not 0 <= value <= maximum:
        raise ValueError(f"operand {name}={value} out of range 0..{maximum}")
    return value


# (test, sets A, B mode, C mode, format), in opcode order
_N, _U, _R, _K = OpArgMask
_OPMODES: tuple[tuple[bool, bool, OpArgMask, OpArgMask, OpMode], ...] = (
    (False, True, _R, _N, OpMode.ABC),    # MOVE
    (False, True, _K, _N, OpMode.ABX),    # LOADK
    (False, True, _N, _N, OpMode.ABX),    # LOADKX
    (False, True, _U, _U, OpMode.ABC),    # LOADBOOL
    (False, True, _U, _N, OpMode.ABC),    # LOADNIL
    (False, True, _U, _N, OpMode.ABC),    # GETUPVAL
    (False, True, _U, _K, OpMode.ABC),    # GETTABUP
    (False, True, _R, _K, OpMode.ABC),    # GETTABLE
    (False, False, _K, _K, OpMode.ABC),   # SETTABUP
    (False, False, _U, _N, OpMode.ABC),   # SETUPVAL
    (False, False, _K, _K, OpMode.ABC),   # SETTABLE
    (False, True, _U, _U, OpMode.ABC),    # NEWTABLE
    (False, True, _R, _K, OpMode.ABC),    # SELF
    (False, True, _K, _K, OpMode.ABC),    # ADD
    (False, True, _K, _K, OpMode.ABC),    # SUB
    (False, True, _K, _K, OpMode.ABC),    # MUL
    (False, True, _K, _K, OpMode.ABC),    # DIV
    (False, True, _K, _K, OpMode.ABC),    # MOD
    (False, True, _K, _K, OpMode.ABC),    # POW
    (False, True, _R, _N, OpMode.ABC),    # UNM
    (False, True, _R, _N, OpMode.ABC),    # NOT
    (False, True, _R, _N, OpMode.ABC),    # LEN
    (False, True, _R, _R, OpMode.ABC),    # CONCAT
    (False, False, _R, _N, OpMode.ASBX),  # JMP
    (True, False, _K, _K, OpMode.ABC),    # EQ
    (True, False, _K, _K, OpMode.ABC),    # LT
    (True, False, _K, _K, OpMode.ABC),    # LE
    (True, False, _N, _U, OpMode.ABC),    # TEST
    (True, True, _R, _U, OpMode.ABC),     # TESTSET
    (False, True, _U, _U, OpMode.ABC),    # CALL
    (False, True, _U, _U, OpMode.ABC),    # TAILCALL
    (False, False, _U, _N, OpMode.ABC),   # RETURN
    (False, True, _R, _N, OpMode.ASBX),   # FORLOOP
    (False, True, _R, _N, OpMode.ASBX),   # FORPREP
    (False, False, _N, _U, OpMode.ABC),   # TFORCALL
    (False, True, _R, _N, OpMode.ASBX),   # TFORLOOP
    (False, False, _U, _U, OpMode.ABC),   # SETLIST
    (False, True, _U, _N, OpMode.ABX),    # CLOSURE
    (False, True, _U, _N, OpMode.ABC),    # VARARG
    (False, False, _U, _U, OpMode.AX),    # EXTRAARG
)


def create_abc(op: int, a: int, b: int, c: int) -> int:
    """Encode an instruction in the A B C format."""
    return (
        (OpCode(op) << POS_OP)
        | (_check_range("A", a, MAXARG_A) << POS_A)
        | (_check_range("B", b, MAXARG_B) << POS_B)
        | (_check_range("C", c, MAXARG_C) << POS_C)
    )


def create_abx(op: int, a: int, bx: int) -> int:
    """Encode an instruction in the A Bx format."""
    return (
        (OpCode(op) << POS_OP)
        | (_check_range("A", a, MAXARG_A) << POS_A)
        | (_check_range("Bx", bx, MAXARG_BX) << POS_BX)
    )


def create_asbx(op: int, a: int, sbx: int) -> int:
    """Encode an instruction in the A sBx format."""
    return create_abx(op, a, sbx + MAXARG_SBX)


def create_ax(op: int, ax: int) -> int:
    """Encode an instruction in the Ax format."""
    return (OpCode(op) << POS_OP) | (_check_range("Ax", ax, MAXARG_AX) << POS_AX)


def get_opcode(i: int) -> OpCode:
    return OpCode(_getarg(i, POS_OP, SIZE_OP))


def set_opcode(i: int, op: int) -> int:
    return _setarg(i, int(op), POS_OP, SIZE_OP)


def get_a(i: int) -> int:
    return _getarg(i, POS_A, SIZE_A)


def set_a(i: int, v: int) -> int:
    return _setarg(i, v, POS_A, SIZE_A)


def get_b(i: int) -> int:
    return _getarg(i, POS_B, SIZE_B)


def set_b(i: int, v: int) -> int:
    return _setarg(i, v, POS_B, SIZE_B)


def get_c(i: int) -> int:
    return _getarg(i, POS_C, SIZE_C)


def set_c(i: int, v: int) -> int:
    return _setarg(i, v, POS_C, SIZE_C)


def get_bx(i: int) -> int:
    return _getarg(i, POS_BX, SIZE_BX)


def set_bx(i: int, v: int) -> int:
    return _setarg(i, v, POS_BX, SIZE_BX)


def get_sbx(i: int) -> int:
    return get_bx(i) - MAXARG_SBX


def set_sbx(i: int, v: int) -> int:
    return set_bx(i, v + MAXARG_SBX)


def get_ax(i: int) -> int:
    return _getarg(i, POS_AX, SIZE_AX)


def set_ax(i: int, v: int) -> int:
    return _setarg(i, v, POS_AX, SIZE_AX)


def is_k(x: int) -> bool:
    """True if an RK operand refers to a constant."""
    return bool(x & BITRK)


def index_k(r: int) -> int:
    """Constant index held in an RK operand."""
    return int(r) & ~BITRK


def rk_as_k(x: int) -> int:
    """Encode a constant index as an RK operand."""
    return x | BITRK


def op_mode(op: int) -> OpMode:
    return _OPMODES[OpCode(op)][4]


def b_mode(op: int) -> OpArgMask:
    return _OPMODES[OpCode(op)][2]


def c_mode(op: int) -> OpArgMask:
    return _OPMODES[OpCode(op)][3]


def sets_a(op: int) -> bool:
    """True if the instruction writes register A."""
    return _OPMODES[OpCode(op)][1]


def is_test(op: int) -> bool:
    """True if the instruction is a test (the next one must be a jump)."""
    return _OPMODES[OpCode(op)][0]


def opname(op: int) -> str:
    return OpCode(op).name