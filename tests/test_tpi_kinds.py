import pytest

from msfpdb.tpi_kinds import (
    CallingConvention,
    MethodProperty,
    TypeIndexKind,
    TypeRecordKind,
)


def test_record_kind_values_from_format():
    assert TypeRecordKind.LF_STRUCTURE == 0x1505
    assert TypeRecordKind.LF_FIELDLIST == 0x1203
    assert TypeRecordKind(0x1002) is TypeRecordKind.LF_POINTER


def test_numeric_and_char_share_a_value():
    assert TypeRecordKind.LF_CHAR is TypeRecordKind.LF_NUMERIC
    assert TypeRecordKind(0x8000).name == "LF_NUMERIC"


def test_unknown_record_kind_raises():
    with pytest.raises(ValueError):
        TypeRecordKind(0x7777)


@pytest.mark.parametrize(
    "name, value",
    [
        ("T_NOTYPE", 0x0000),
        ("T_VOID", 0x0003),
        ("T_64PVOID", 0x0603),
        ("T_32PFUCHAR", 0x0520),
        ("T_INT4", 0x0074),
        ("T_64PHRESULT", 0x0608),
        ("T_64NCVPTR", 0x06F0),
        ("T_PHBOOL64", 0x0333),
        ("T_32PCHAR16", 0x047A),
    ],
)
def test_type_index_values(name, value):
    assert TypeIndexKind[name] == value
    assert TypeIndexKind(value).name == name


def test_type_index_values_are_unique():
    for name, member in TypeIndexKind.__members__.items():
        assert TypeIndexKind(member.value).name == name


def test_pointer_variants_differ_only_in_mode_bits():
    checked = 0
    for member in TypeIndexKind:
        if member.name.startswith("T_64P") and not member.name.endswith("HRESULT"):
            base_name = "T_" + member.name[len("T_64P"):]
            if base_name in TypeIndexKind.__members__:
                assert TypeIndexKind(TypeIndexKind[base_name] + 0x600) is member
                checked += 1
    assert checked > 0


def test_hresult_has_only_some_pointer_forms():
    assert TypeIndexKind(0x0408) is TypeIndexKind.T_32PHRESULT
    with pytest.raises(ValueError):
        TypeIndexKind(0x0108)


def test_calling_conventions_are_contiguous():
    values = sorted(member.value for member in CallingConvention)
    assert values == list(range(CallingConvention.RESERVED + 1))
    assert CallingConvention.THISCALL == 0x0B
    assert CallingConvention(0x16) is CallingConvention.CLRCALL


def test_method_properties():
    assert MethodProperty.INTRO == 0x04
    assert MethodProperty(0x06) is MethodProperty.PURE_INTRO
    assert [member.value for member in MethodProperty] == list(range(7))