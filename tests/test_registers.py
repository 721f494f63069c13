import pytest

from xfskit.registers import XSM_NUM_REG, RegisterFile


@pytest.fixture
def regs():
    return RegisterFile()


def test_names(regs):
    names = regs.names()
    assert len(names) == XSM_NUM_REG
    assert len(regs) == XSM_NUM_REG
    assert names[0] == "R0"
    assert names[-1] == "EMA"


def test_code_ignores_case(regs):
    assert regs.code("sp") == regs.code("SP") == regs.names().index("SP")


def test_unknown_register(regs):
    with pytest.raises(KeyError):
        regs.code("R20")
    with pytest.raises(KeyError):
        regs.get_str("XYZ")


def test_int_round_trip(regs):
    regs.store_int("R5", -88)
    assert regs.get_int("r5") == -88
    assert regs.get_str("R5") == "-88"


def test_string_round_trip(regs):
    regs.store_str("P1", "hello")
    assert regs.get_str("P1") == "hello"
    assert regs.get("p1").as_str() == "hello"


def test_registers_are_independent(regs):
    regs.store_int("R0", 3)
    regs.store_int("R1", 4)
    assert regs.get_int("R0") == 3
    assert regs.get("R0") is not regs.get("R1")


def test_user_accessible(regs):
    assert regs.user_accessible("R0")
    assert regs.user_accessible("SP")
    assert not regs.user_accessible("P0")
    assert not regs.user_accessible("P3")
    assert not regs.user_accessible("PTBR")
    assert not regs.user_accessible("NOPE")