"""Enumerations used by CodeView type records in the TPI stream."""

from __future__ import annotations

import enum

__all__ = ["TypeRecordKind", "TypeIndexKind", "CallingConvention", "MethodProperty"]


class TypeRecordKind(enum.IntEnum):
    """Kind of a CodeView type record (leaf)."""

    LF_POINTER = 0x1002
    LF_MODIFIER = 0x1001
    LF_PROCEDURE = 0x1008
    LF_MFUNCTION = 0x1009
    LF_LABEL = 0x000E
    LF_ARGLIST = 0x1201
    LF_FIELDLIST = 0x1203
    LF_VTSHAPE = 0x000A
    LF_BITFIELD = 0x1205
    LF_METHODLIST = 0x1206
    LF_ENDPRECOMP = 0x0014

    LF_BCLASS = 0x1400
    LF_VBCLASS = 0x1401
    LF_IVBCLASS = 0x1402
    LF_FRIENDFCN_ST = 0x1403
    LF_INDEX = 0x1404
    LF_MEMBER_ST = 0x1405
    LF_STMEMBER_ST = 0x1406
    LF_METHOD_ST = 0x1407
    LF_NESTTYPE_ST = 0x1408
    LF_VFUNCTAB = 0x1409
    LF_FRIENDCLS = 0x140A
    LF_ONEMETHOD_ST = 0x140B
    LF_VFUNCOFF = 0x140C
    LF_NESTTYPEEX_ST = 0x140D
    LF_MEMBERMODIFY_ST = 0x140E
    LF_MANAGED_ST = 0x140F

    LF_SMAX = 0x1500
    LF_TYPESERVER = 0x1501
    LF_ENUMERATE = 0x1502
    LF_ARRAY = 0x1503
    LF_CLASS = 0x1504
    LF_STRUCTURE = 0x1505
    LF_UNION = 0x1506
    LF_ENUM = 0x1507
    LF_DIMARRAY = 0x1508
    LF_PRECOMP = 0x1509
    LF_ALIAS = 0x150A
    LF_DEFARG = 0x150B
    LF_FRIENDFCN = 0x150C
    LF_MEMBER = 0x150D
    LF_STMEMBER = 0x150E
    LF_METHOD = 0x150F
    LF_NESTTYPE = 0x1510
    LF_ONEMETHOD = 0x1511
    LF_NESTTYPEEX = 0x1512
    LF_MEMBERMODIFY = 0x1513
    LF_MANAGED = 0x1514
    LF_TYPESERVER2 = 0x1515

    LF_NUMERIC = 0x8000
    LF_CHAR = 0x8000
    LF_SHORT = 0x8001
    LF_USHORT = 0x8002
    LF_LONG = 0x8003
    LF_ULONG = 0x8004
    LF_REAL32 = 0x8005
    LF_REAL64 = 0x8006
    LF_REAL80 = 0x8007
    LF_REAL128 = 0x8008
    LF_QUADWORD = 0x8009
    LF_UQUADWORD = 0x800A
    LF_REAL48 = 0x800B
    LF_COMPLEX32 = 0x800C
    LF_COMPLEX64 = 0x800D
    LF_COMPLEX80 = 0x800E
    LF_COMPLEX128 = 0x800F
    LF_VARSTRING = 0x8010

    LF_OCTWORD = 0x8017
    LF_UOCTWORD = 0x8018

    LF_DECIMAL = 0x8019
    LF_DATE = 0x801A
    LF_UTF8STRING = 0x801B

    LF_REAL16 = 0x801C


# Pointer modes of the built-in types; the mode lives in bits 8..10 of the index.
_POINTER_PREFIXES = (
    ("", 0x000),
    ("P", 0x100),
    ("PF", 0x200),
    ("PH", 0x300),
    ("32P", 0x400),
    ("32PF", 0x500),
    ("64P", 0x600),
)

# Built-in base types that come with every pointer variant.
_POINTER_FAMILIES = (
    ("VOID", 0x03),
    ("CHAR", 0x10),
    ("UCHAR", 0x20),
    ("RCHAR", 0x70),
    ("WCHAR", 0x71),
    ("CHAR16", 0x7A),
    ("CHAR32", 0x7B),
    ("INT1", 0x68),
    ("UINT1", 0x69),
    ("SHORT", 0x11),
    ("USHORT", 0x21),
    ("INT2", 0x72),
    ("UINT2", 0x73),
    ("LONG", 0x12),
    ("ULONG", 0x22),
    ("INT4", 0x74),
    ("UINT4", 0x75),
    ("QUAD", 0x13),
    ("UQUAD", 0x23),
    ("INT8", 0x76),
    ("UINT8", 0x77),
    ("OCT", 0x14),
    ("UOCT", 0x24),
    ("INT16", 0x78),
    ("UINT16", 0x79),
    ("REAL32", 0x40),
    ("REAL48", 0x44),
    ("REAL64", 0x41),
    ("REAL80", 0x42),
    ("REAL128", 0x43),
    ("CPLX32", 0x50),
    ("CPLX64", 0x51),
    ("CPLX80", 0x52),
    ("CPLX128", 0x53),
    ("BOOL08", 0x30),
    ("BOOL16", 0x31),
    ("BOOL32", 0x32),
    ("BOOL64", 0x33),
)

# Built-in types that exist only in some forms.
_SPECIAL_TYPES = (
    ("T_NOTYPE", 0x0000),
    ("T_ABS", 0x0001),
    ("T_SEGMENT", 0x0002),
    ("T_HRESULT", 0x0008),
    ("T_32PHRESULT", 0x0408),
    ("T_64PHRESULT", 0x0608),
    ("T_CURRENCY", 0x0004),
    ("T_NBASICSTR", 0x0005),
    ("T_FBASICSTR", 0x0006),
    ("T_NOTTRANS", 0x0007),
    ("T_BIT", 0x0060),
    ("T_PASCHAR", 0x0061),
    ("T_BOOL32FF", 0x0062),
    ("T_NCVPTR", 0x01F0),
    ("T_FCVPTR", 0x02F0),
    ("T_HCVPTR", 0x03F0),
    ("T_32NCVPTR", 0x04F0),
    ("T_32FCVPTR", 0x05F0),
    ("T_64NCVPTR", 0x06F0),
)


def _type_index_members() -> list[tuple[str, int]]:
    members = list(_SPECIAL_TYPES)
    for base_name, base_value in _POINTER_FAMILIES:
        for prefix, mode in _POINTER_PREFIXES:
            members.append((f"T_{prefix}{base_name}", mode | base_value))
    return members


TypeIndexKind = enum.IntEnum(  # type: ignore[misc]
    "TypeIndexKind", _type_index_members(), module=__name__
)
TypeIndexKind.__doc__ = "Type indices of the built-in (primitive) CodeView types."


class CallingConvention(enum.IntEnum):
    """Calling convention of a procedure type."""

    NEAR_C = 0x00
    FAR_C = 0x01
    NEAR_PASCAL = 0x02
    FAR_PASCAL = 0x03
    NEAR_FAST = 0x04
    FAR_FAST = 0x05
    SKIPPED = 0x06
    NEAR_STD = 0x07
    FAR_STD = 0x08
    NEAR_SYS = 0x09
    FAR_SYS = 0x0A
    THISCALL = 0x0B
    MIPSCALL = 0x0C
    GENERIC = 0x0D
    ALPHACALL = 0x0E
    PPCCALL = 0x0F
    SHCALL = 0x10
    ARMCALL = 0x11
    AM33CALL = 0x12
    TRICALL = 0x13
    SH5CALL = 0x14
    M32RCALL = 0x15
    CLRCALL = 0x16
    INLINE = 0x17
    NEAR_VECTOR = 0x18
    RESERVED = 0x19


class MethodProperty(enum.IntEnum):
    """Method property stored in the ``mprop`` bits of member attributes."""

    VANILLA = 0x00
    VIRTUAL = 0x01
    STATIC = 0x02
    FRIEND = 0x03
    INTRO = 0x04
    PURE_VIRT = 0x05
    PURE_INTRO = 0x06