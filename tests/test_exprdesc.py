import pytest

from moonlib.exprdesc import NO_JUMP, ExpDesc, ExpKind, LabelDesc, is_in_reg, is_var


@pytest.mark.parametrize("kind", [ExpKind.LOCAL, ExpKind.UPVAL, ExpKind.INDEXED])
def test_variable_kinds(kind):
    assert is_var(kind)


@pytest.mark.parametrize(
    "kind",
    [k for k in ExpKind if k not in (ExpKind.LOCAL, ExpKind.UPVAL, ExpKind.INDEXED)],
)
def test_non_variable_kinds(kind):
    assert not is_var(kind)


def test_in_register_kinds():
    assert {k for k in ExpKind if is_in_reg(k)} == {ExpKind.NONRELOC, ExpKind.LOCAL}


def test_kind_order_matches_declaration():
    assert ExpDesc().k == list(ExpKind)[0] == ExpKind.VOID
    assert list(ExpKind)[-1] == ExpKind.VARARG
    assert [k for k in ExpKind if is_var(k)] == [
        ExpKind.LOCAL,
        ExpKind.UPVAL,
        ExpKind.INDEXED,
    ]


def test_default_expdesc_has_no_jumps():
    e = ExpDesc()
    assert e.k == ExpKind.VOID
    assert e.t == NO_JUMP
    assert e.f == NO_JUMP
    assert not e.has_jumps()


def test_pending_true_jump_counts():
    e = ExpDesc(ExpKind.JMP, info=3, t=3)
    assert e.has_jumps()


def test_pending_false_jump_counts():
    e = ExpDesc(ExpKind.RELOCABLE, info=2, f=7)
    assert e.has_jumps()


def test_numeric_constant_payload():
    e = ExpDesc(ExpKind.KNUM, nval=2.5)
    assert e.nval == 2.5
    assert not is_var(e.k)


def test_indexed_fields():
    e = ExpDesc(ExpKind.INDEXED, index=257, table=0, table_kind=ExpKind.UPVAL)
    assert is_var(e.k)
    assert (e.index, e.table, e.table_kind) == (257, 0, ExpKind.UPVAL)


def test_label_desc_fields_and_equality():
    a = LabelDesc("break", pc=10, line=4, nactvar=2)
    b = LabelDesc("break", pc=10, line=4, nactvar=2)
    assert a == b
    b.nactvar = 1
    assert a != b
    assert a.name == "break"