"""Fixed-layout parts of CodeView type records found in the TPI stream."""

from __future__ import annotations

import enum
import struct
from dataclasses import dataclass
from typing import Any, Callable, ClassVar, TypeVar

from .tpi_kinds import CallingConvention, MethodProperty, TypeRecordKind
from .types import ErrorCode, PdbError
from .util import codeview_record_size

__all__ = [
    "TpiStreamHeader",
    "TypeProperty",
    "MemberAttributes",
    "FunctionAttributes",
    "ModifierAttributes",
    "PointerAttributes",
    "TypeRecord",
]

_E = TypeVar("_E", bound=enum.IntEnum)
_B = TypeVar("_B", bound="_BitFields")

_RECORD_HEADER = struct.Struct("<HH")


def _enum_or_int(enum_type: type[_E], value: int) -> _E | int:
    try:
        return enum_type(value)
    except ValueError:
        return value


@dataclass(frozen=True)
class TpiStreamHeader:
    """Header at the start of the TPI stream."""

    class Version(enum.IntEnum):
        V40 = 19950410
        V41 = 19951122
        V50 = 19961031
        V70 = 19990903
        V80 = 20040203

    version: int
    header_size: int
    type_index_begin: int
    type_index_end: int
    type_record_bytes: int
    hash_stream_index: int
    hash_aux_stream_index: int
    hash_key_size: int
    num_hash_buckets: int
    hash_value_buffer_offset: int
    hash_value_buffer_length: int
    index_offset_buffer_offset: int
    index_offset_buffer_length: int
    hash_adj_buffer_offset: int
    hash_adj_buffer_length: int

    _FORMAT: ClassVar[struct.Struct] = struct.Struct("<IIIIIHHIIiIiIiI")
    SIZE: ClassVar[int] = 56

    @classmethod
    def from_bytes(cls, data: bytes, offset: int = 0) -> TpiStreamHeader:
        if offset < 0 or offset + cls.SIZE > len(data):
            raise PdbError(ErrorCode.INVALID_STREAM, "TPI stream header is truncated")
        version, *rest = cls._FORMAT.unpack_from(data, offset)
        return cls(_enum_or_int(cls.Version, version), *rest)


def _unpack_bits(cls: type[_B], value: int) -> _B:
    """Unpack the fields of a bit-field structure from an integer."""
    width = sum(bits for _, bits in cls._LAYOUT)
    if not 0 <= value < 1 << width:
        raise ValueError(f"{value:#x} does not fit into {width} bits")
    fields: dict[str, Any] = {}
    for name, bits in cls._LAYOUT:
        raw = value & ((1 << bits) - 1)
        value >>= bits
        if name in cls._ENUMS:
            fields[name] = _enum_or_int(cls._ENUMS[name], raw)
        elif bits == 1:
            fields[name] = bool(raw)
        else:
            fields[name] = raw
    return cls(**fields)


class _BitFields:
    """Mixin for structures packed into an integer, least significant field first."""

    _LAYOUT: ClassVar[tuple[tuple[str, int], ...]] = ()
    _ENUMS: ClassVar[dict[str, type[enum.IntEnum]]] = {}

    def to_int(self) -> int:
        """Pack the fields back into an integer."""
        result = 0
        shift = 0
        for name, bits in self._LAYOUT:
            result |= (int(getattr(self, name)) & ((1 << bits) - 1)) << shift
            shift += bits
        return result

    def __int__(self) -> int:
        return self.to_int()


@dataclass(frozen=True)
class TypeProperty(_BitFields):
    """Property flags of class, structure, union and enum types."""

    packed: bool
    ctor: bool
    overloaded_operators: bool
    is_nested: bool
    contains_nested: bool
    overloaded_assignment: bool
    overloaded_cast: bool
    forward_ref: bool
    scoped: bool
    has_unique_name: bool
    sealed: bool
    hfa: int
    intrinsic: bool
    mocom: int

    _LAYOUT = (
        ("packed", 1),
        ("ctor", 1),
        ("overloaded_operators", 1),
        ("is_nested", 1),
        ("contains_nested", 1),
        ("overloaded_assignment", 1),
        ("overloaded_cast", 1),
        ("forward_ref", 1),
        ("scoped", 1),
        ("has_unique_name", 1),
        ("sealed", 1),
        ("hfa", 2),
        ("intrinsic", 1),
        ("mocom", 2),
    )

    @classmethod
    def from_int(cls, value: int) -> TypeProperty:
        """Unpack the flags from a 16-bit value."""
        return _unpack_bits(cls, value)


@dataclass(frozen=True)
class MemberAttributes(_BitFields):
    """Attributes of a class member or method."""

    access: int
    mprop: MethodProperty | int
    pseudo: bool
    no_inherit: bool
    no_construct: bool
    compiler_generated: bool
    sealed: bool
    unused: int

    _LAYOUT = (
        ("access", 2),
        ("mprop", 3),
        ("pseudo", 1),
        ("no_inherit", 1),
        ("no_construct", 1),
        ("compiler_generated", 1),
        ("sealed", 1),
        ("unused", 6),
    )
    _ENUMS = {"mprop": MethodProperty}

    @classmethod
    def from_int(cls, value: int) -> MemberAttributes:
        """Unpack the attributes from a 16-bit value."""
        return _unpack_bits(cls, value)


@dataclass(frozen=True)
class FunctionAttributes(_BitFields):
    """Attributes of a procedure or member function type."""

    cxx_return_udt: bool
    ctor: bool
    ctor_vbase: bool
    unused: int

    _LAYOUT = (("cxx_return_udt", 1), ("ctor", 1), ("ctor_vbase", 1), ("unused", 5))

    @classmethod
    def from_int(cls, value: int) -> FunctionAttributes:
        """Unpack the attributes from an 8-bit value."""
        return _unpack_bits(cls, value)


@dataclass(frozen=True)
class ModifierAttributes(_BitFields):
    """Attributes of an LF_MODIFIER record."""

    is_const: bool
    is_volatile: bool
    is_unaligned: bool
    unused: int

    _LAYOUT = (("is_const", 1), ("is_volatile", 1), ("is_unaligned", 1), ("unused", 13))

    @classmethod
    def from_int(cls, value: int) -> ModifierAttributes:
        """Unpack the attributes from a 16-bit value."""
        return _unpack_bits(cls, value)


@dataclass(frozen=True)
class PointerAttributes(_BitFields):
    """Attributes of an LF_POINTER record."""

    ptr_type: int
    ptr_mode: int
    is_flat32: bool
    is_volatile: bool
    is_const: bool
    is_unaligned: bool
    is_restrict: bool
    size: int
    is_mocom: bool
    is_lref: bool
    is_rref: bool
    unused: int

    _LAYOUT = (
        ("ptr_type", 5),
        ("ptr_mode", 3),
        ("is_flat32", 1),
        ("is_volatile", 1),
        ("is_const", 1),
        ("is_unaligned", 1),
        ("is_restrict", 1),
        ("size", 6),
        ("is_mocom", 1),
        ("is_lref", 1),
        ("is_rref", 1),
        ("unused", 10),
    )

    @classmethod
    def from_int(cls, value: int) -> PointerAttributes:
        """Unpack the attributes from a 32-bit value."""
        return _unpack_bits(cls, value)


def _calling_convention(value: int) -> CallingConvention | int:
    return _enum_or_int(CallingConvention, value)


_Layout = tuple[struct.Struct, tuple[str, ...], dict[str, Callable[[int], Any]]]


def _fixed(fmt: str, *names: str, **converters: Callable[[int], Any]) -> _Layout:
    return struct.Struct(fmt), names, converters


_CLASS_LAYOUT = _fixed(
    "<HHIII", "count", "property", "field_list", "derived", "vshape",
    property=TypeProperty.from_int,
)

_LAYOUTS: dict[int, _Layout] = {
    TypeRecordKind.LF_MODIFIER: _fixed(
        "<IH", "type", "attributes", attributes=ModifierAttributes.from_int
    ),
    TypeRecordKind.LF_POINTER: _fixed(
        "<II", "underlying_type", "attributes", attributes=PointerAttributes.from_int
    ),
    TypeRecordKind.LF_PROCEDURE: _fixed(
        "<IBBHI",
        "return_type", "calling_convention", "function_attributes",
        "parameter_count", "argument_list",
        calling_convention=_calling_convention,
        function_attributes=FunctionAttributes.from_int,
    ),
    TypeRecordKind.LF_MFUNCTION: _fixed(
        "<IIIBBHIi",
        "return_type", "class_type", "this_type", "calling_convention",
        "function_attributes", "parameter_count", "argument_list", "this_adjust",
        calling_convention=_calling_convention,
        function_attributes=FunctionAttributes.from_int,
    ),
    TypeRecordKind.LF_ARGLIST: _fixed("<I", "count"),
    TypeRecordKind.LF_BITFIELD: _fixed("<IBB", "type", "length", "position"),
    TypeRecordKind.LF_ARRAY: _fixed("<II", "element_type", "index_type"),
    TypeRecordKind.LF_CLASS: _CLASS_LAYOUT,
    TypeRecordKind.LF_STRUCTURE: _CLASS_LAYOUT,
    TypeRecordKind.LF_UNION: _fixed(
        "<HHI", "count", "property", "field_list", property=TypeProperty.from_int
    ),
    TypeRecordKind.LF_ENUM: _fixed(
        "<HHII", "count", "property", "underlying_type", "field_list",
        property=TypeProperty.from_int,
    ),
}

_METHOD_ENTRY = struct.Struct("<HHI")
_INTRODUCING = (MethodProperty.INTRO, MethodProperty.PURE_INTRO)


def _truncated(what: str) -> PdbError:
    return PdbError(ErrorCode.INVALID_STREAM, f"{what} is truncated")


@dataclass(frozen=True)
class TypeRecord:
    """A CodeView type record: its header and the variable-length data after it."""

    size: int
    kind: TypeRecordKind | int
    data: bytes

    HEADER_SIZE: ClassVar[int] = 4

    @classmethod
    def from_bytes(cls, data: bytes, offset: int = 0) -> TypeRecord:
        if offset < 0 or offset + cls.HEADER_SIZE > len(data):
            raise _truncated("type record header")
        size, kind = _RECORD_HEADER.unpack_from(data, offset)
        try:
            length = codeview_record_size(size)
        except ValueError as exc:
            raise PdbError(ErrorCode.INVALID_STREAM, str(exc)) from None
        start = offset + cls.HEADER_SIZE
        if start + length > len(data):
            raise _truncated("type record")
        return cls(size, _enum_or_int(TypeRecordKind, kind), bytes(data[start : start + length]))

    @property
    def record_size(self) -> int:
        """Number of bytes the record takes up, header included."""
        return self.HEADER_SIZE + len(self.data)

    def fields(self) -> dict[str, Any]:
        """Decode the fixed part of the record's data.

        Returns an empty dict for kinds without a known fixed layout. The bytes
        after the fixed part are returned under ``"trailing"``.
        """
        if self.kind == TypeRecordKind.LF_METHODLIST:
            return {"methods": self._method_list()}
        layout = _LAYOUTS.get(self.kind)
        if layout is None:
            return {}
        fmt, names, converters = layout
        if len(self.data) < fmt.size:
            raise _truncated(f"{TypeRecordKind(self.kind).name} record")
        values = fmt.unpack_from(self.data, 0)
        result: dict[str, Any] = {
            name: converters[name](value) if name in converters else value
            for name, value in zip(names, values)
        }
        consumed = fmt.size
        if self.kind == TypeRecordKind.LF_ARGLIST:
            count = result["count"]
            end = consumed + 4 * count
            if end > len(self.data):
                raise _truncated("LF_ARGLIST argument list")
            result["arguments"] = struct.unpack_from(f"<{count}I", self.data, consumed)
            consumed = end
        result["trailing"] = self.data[consumed:]
        return result

    def _method_list(self) -> tuple[dict[str, Any], ...]:
        methods = []
        offset = 0
        while offset < len(self.data):
            if offset + _METHOD_ENTRY.size > len(self.data):
                raise _truncated("LF_METHODLIST entry")
            attributes, _pad, index = _METHOD_ENTRY.unpack_from(self.data, offset)
            offset += _METHOD_ENTRY.size
            member = MemberAttributes.from_int(attributes)
            vtable_offset = None
            if member.mprop in _INTRODUCING:
                if offset + 4 > len(self.data):
                    raise _truncated("LF_METHODLIST vtable offset")
                (vtable_offset,) = struct.unpack_from("<I", self.data, offset)
                offset += 4
            methods.append(
                {"attributes": member, "index": index, "vtable_offset": vtable_offset}
            )
        return tuple(methods)