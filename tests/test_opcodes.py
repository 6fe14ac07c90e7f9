import pytest

from moonlib import opcodes
from moonlib.opcodes import OpArgMask, OpCode, OpMode


def test_opcode_count_and_names():
    assert opcodes.NUM_OPCODES == len(OpCode)
    assert opcodes.opname(OpCode.MOVE) == "MOVE"
    assert opcodes.opname(OpCode.EXTRAARG) == "EXTRAARG"
    assert opcodes.opname(OpCode.TFORLOOP) == "TFORLOOP"


def test_opcode_order_matches_encoding():
    decoded = [opcodes.get_opcode(n) for n in range(opcodes.NUM_OPCODES)]
    assert decoded == list(OpCode)
    assert [opcodes.opname(op) for op in decoded] == [op.name for op in OpCode]


@pytest.mark.parametrize("op", list(OpCode))
def test_abc_round_trip(op):
    i = opcodes.create_abc(op, 7, 300, 45)
    assert opcodes.get_opcode(i) == op
    assert opcodes.get_a(i) == 7
    assert opcodes.get_b(i) == 300
    assert opcodes.get_c(i) == 45


def test_abc_extremes():
    i = opcodes.create_abc(OpCode.CALL, opcodes.MAXARG_A, opcodes.MAXARG_B, opcodes.MAXARG_C)
    assert opcodes.get_a(i) == opcodes.MAXARG_A
    assert opcodes.get_b(i) == opcodes.MAXARG_B
    assert opcodes.get_c(i) == opcodes.MAXARG_C
    assert i <= opcodes.INSTRUCTION_MASK


def test_abx_round_trip():
    i = opcodes.create_abx(OpCode.LOADK, 3, opcodes.MAXARG_BX)
    assert opcodes.get_opcode(i) == OpCode.LOADK
    assert opcodes.get_a(i) == 3
    assert opcodes.get_bx(i) == opcodes.MAXARG_BX


@pytest.mark.parametrize("sbx", [-opcodes.MAXARG_SBX, -1, 0, 1, opcodes.MAXARG_SBX])
def test_asbx_round_trip(sbx):
    i = opcodes.create_asbx(OpCode.JMP, 0, sbx)
    assert opcodes.get_opcode(i) == OpCode.JMP
    assert opcodes.get_sbx(i) == sbx


def test_ax_round_trip():
    i = opcodes.create_ax(OpCode.EXTRAARG, opcodes.MAXARG_AX)
    assert opcodes.get_opcode(i) == OpCode.EXTRAARG
    assert opcodes.get_ax(i) == opcodes.MAXARG_AX


def test_zero_sbx_is_stored_in_excess_notation():
    i = opcodes.create_asbx(OpCode.FORPREP, 2, 0)
    assert opcodes.get_bx(i) == opcodes.MAXARG_SBX


def test_setters_leave_other_fields_alone():
    i = opcodes.create_abc(OpCode.ADD, 1, 2, 3)
    i = opcodes.set_b(i, 400)
    assert (opcodes.get_a(i), opcodes.get_b(i), opcodes.get_c(i)) == (1, 400, 3)
    i = opcodes.set_c(i, 9)
    assert (opcodes.get_a(i), opcodes.get_b(i), opcodes.get_c(i)) == (1, 400, 9)
    i = opcodes.set_a(i, 200)
    assert (opcodes.get_a(i), opcodes.get_b(i), opcodes.get_c(i)) == (200, 400, 9)
    assert opcodes.get_opcode(i) == OpCode.ADD


def test_set_opcode_changes_only_opcode():
    i = opcodes.create_abc(OpCode.CALL, 5, 2, 1)
    j = opcodes.set_opcode(i, OpCode.TAILCALL)
    assert opcodes.get_opcode(j) == OpCode.TAILCALL
    assert (opcodes.get_a(j), opcodes.get_b(j), opcodes.get_c(j)) == (5, 2, 1)


def test_set_sbx_and_ax():
    i = opcodes.create_asbx(OpCode.FORLOOP, 4, 0)
    i = opcodes.set_sbx(i, -12)
    assert opcodes.get_sbx(i) == -12
    assert opcodes.get_a(i) == 4
    j = opcodes.set_ax(opcodes.create_ax(OpCode.EXTRAARG, 0), 123456)
    assert opcodes.get_ax(j) == 123456
    assert opcodes.get_opcode(j) == OpCode.EXTRAARG


def test_set_bx_masks_overflowing_value():
    i = opcodes.create_abx(OpCode.CLOSURE, 1, 0)
    j = opcodes.set_bx(i, opcodes.MAXARG_BX + 1)
    assert opcodes.get_bx(j) == 0
    assert opcodes.get_a(j) == 1


def test_rk_encoding():
    for idx in (0, 5, opcodes.MAXINDEXRK):
        rk = opcodes.rk_as_k(idx)
        assert opcodes.is_k(rk)
        assert opcodes.index_k(rk) == idx
    assert not opcodes.is_k(opcodes.MAXINDEXRK)
    assert opcodes.BITRK == 1 << (opcodes.SIZE_B - 1)


def test_no_reg_fits_in_a():
    i = opcodes.create_abc(OpCode.MOVE, opcodes.NO_REG, 0, 0)
    assert opcodes.get_a(i) == opcodes.NO_REG


@pytest.mark.parametrize(
    "args",
    [(OpCode.MOVE, 256, 0, 0), (OpCode.MOVE, 0, 512, 0), (OpCode.MOVE, 0, 0, -1)],
)
def test_create_abc_rejects_out_of_range(args):
    with pytest.raises(ValueError):
        opcodes.create_abc(*args)


def test_create_rejects_bad_wide_operands():
    with pytest.raises(ValueError):
        opcodes.create_abx(OpCode.LOADK, 0, opcodes.MAXARG_BX + 1)
    with pytest.raises(ValueError):
        opcodes.create_asbx(OpCode.JMP, 0, -opcodes.MAXARG_SBX - 1)
    with pytest.raises(ValueError):
        opcodes.create_ax(OpCode.EXTRAARG, opcodes.MAXARG_AX + 1)


def test_modes_from_table():
    assert opcodes.op_mode(OpCode.MOVE) == OpMode.ABC
    assert opcodes.op_mode(OpCode.LOADK) == OpMode.ABX
    assert opcodes.op_mode(OpCode.JMP) == OpMode.ASBX
    assert opcodes.op_mode(OpCode.EXTRAARG) == OpMode.AX
    assert opcodes.b_mode(OpCode.MOVE) == OpArgMask.R
    assert opcodes.c_mode(OpCode.MOVE) == OpArgMask.N
    assert opcodes.b_mode(OpCode.GETTABUP) == OpArgMask.U
    assert opcodes.c_mode(OpCode.GETTABUP) == OpArgMask.K
    assert opcodes.b_mode(OpCode.TEST) == OpArgMask.N
    assert opcodes.c_mode(OpCode.TEST) == OpArgMask.U


def test_test_and_set_a_flags():
    tests = {op for op in OpCode if opcodes.is_test(op)}
    assert tests == {OpCode.EQ, OpCode.LT, OpCode.LE, OpCode.TEST, OpCode.TESTSET}
    assert opcodes.sets_a(OpCode.MOVE)
    assert opcodes.sets_a(OpCode.TESTSET)
    assert not opcodes.sets_a(OpCode.SETTABLE)
    assert not opcodes.sets_a(OpCode.RETURN)
    assert not opcodes.sets_a(OpCode.JMP)


def test_invalid_opcode_raises():
    with pytest.raises(ValueError):
        opcodes.opname(opcodes.NUM_OPCODES)
    with pytest.raises(ValueError):
        opcodes.get_opcode(63)