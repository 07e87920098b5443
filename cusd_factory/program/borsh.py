"""
Borsh wire primitives

Little-endian, fields in declaration order:

- bool: 1 byte (0 or 1)
- u8 / u16 / u32 / u64 / u128 / i64: fixed-width integers
- pubkey: 32 raw bytes
- bytes: u32 length + raw bytes
- vec<T>: u32 count + items
"""

import struct
from dataclasses import fields
from typing import Any, ClassVar, Dict, Tuple

from ..errors import EncodingFailure
from ..types import Pubkey, PUBKEY_LENGTH


# (struct format, min, max)
_INT_TYPES: Dict[str, Tuple[str, int, int]] = {
    "u8": ("<B", 0, 2 ** 8 - 1),
    "u16": ("<H", 0, 2 ** 16 - 1),
    "u32": ("<I", 0, 2 ** 32 - 1),
    "u64": ("<Q", 0, 2 ** 64 - 1),
    "i64": ("<q", -(2 ** 63), 2 ** 63 - 1),
}
U128_MAX = 2 ** 128 - 1
U32_MAX = 2 ** 32 - 1


def _vec_item(type_name: str) -> str:
    return type_name[4:-1]


def _is_vec(type_name: str) -> bool:
    return type_name.startswith("vec<") and type_name.endswith(">")


def check_value(type_name: str, value: Any, field: str) -> Any:
    """
    Validate a value against its wire type and return its canonical form

    Vectors become tuples, pubkeys become Pubkey, byte strings become bytes.

    Raises:
        EncodingFailure: Value does not fit the wire type
    """
    if type_name == "bool":
        if not isinstance(value, bool):
            raise EncodingFailure.invalid_value(field, type_name, value)
        return value

    if type_name in _INT_TYPES or type_name == "u128":
        if isinstance(value, bool) or not isinstance(value, int):
            raise EncodingFailure.invalid_value(field, type_name, value)
        if type_name == "u128":
            low, high = 0, U128_MAX
        else:
            _, low, high = _INT_TYPES[type_name]
        if not low <= value <= high:
            raise EncodingFailure.invalid_value(field, type_name, value)
        return value

    if type_name == "pubkey":
        if isinstance(value, Pubkey):
            return value
        if isinstance(value, (bytes, bytearray)) and len(value) == PUBKEY_LENGTH:
            return Pubkey(bytes(value))
        raise EncodingFailure.invalid_value(field, type_name, value)

    if type_name == "bytes":
        if isinstance(value, (list, tuple)):
            for item in value:
                check_value("u8", item, field)
            value = bytes(value)
        if not isinstance(value, (bytes, bytearray)) or len(value) > U32_MAX:
            raise EncodingFailure.invalid_value(field, type_name, value)
        return bytes(value)

    if _is_vec(type_name):
        if isinstance(value, (str, bytes)) or not hasattr(value, "__iter__"):
            raise EncodingFailure.invalid_value(field, type_name, value)
        item_type = _vec_item(type_name)
        return tuple(check_value(item_type, item, field) for item in value)

    raise EncodingFailure.unknown_kind(type_name)


def encode_value(buf: bytearray, type_name: str, value: Any) -> None:
    """Append one already-validated value to buf"""
    if type_name == "bool":
        buf.append(1 if value else 0)
    elif type_name in _INT_TYPES:
        buf += struct.pack(_INT_TYPES[type_name][0], value)
    elif type_name == "u128":
        buf += value.to_bytes(16, "little")
    elif type_name == "pubkey":
        buf += bytes(value)
    elif type_name == "bytes":
        buf += struct.pack("<I", len(value))
        buf += value
    elif _is_vec(type_name):
        item_type = _vec_item(type_name)
        buf += struct.pack("<I", len(value))
        for item in value:
            encode_value(buf, item_type, item)
    else:
        raise EncodingFailure.unknown_kind(type_name)


class Reader:
    """Sequential reader over a byte buffer"""

    def __init__(self, data: bytes, offset: int = 0, kind: str = "data"):
        self.data = data
        self.offset = offset
        self.kind = kind

    @property
    def remaining(self) -> int:
        return len(self.data) - self.offset

    def take(self, size: int) -> bytes:
        if size > self.remaining:
            raise EncodingFailure.decode_failed(
                self.kind,
                f"need {size} bytes at offset {self.offset}, only {self.remaining} left",
            )
        chunk = self.data[self.offset:self.offset + size]
        self.offset += size
        return chunk

    def read(self, type_name: str) -> Any:
        if type_name == "bool":
            flag = self.take(1)[0]
            if flag > 1:
                raise EncodingFailure.decode_failed(self.kind, f"invalid bool byte {flag}")
            return flag == 1
        if type_name in _INT_TYPES:
            fmt = _INT_TYPES[type_name][0]
            return struct.unpack(fmt, self.take(struct.calcsize(fmt)))[0]
        if type_name == "u128":
            return int.from_bytes(self.take(16), "little")
        if type_name == "pubkey":
            return Pubkey(self.take(PUBKEY_LENGTH))
        if type_name == "bytes":
            length = self.read("u32")
            return self.take(length)
        if _is_vec(type_name):
            count = self.read("u32")
            item_type = _vec_item(type_name)
            return tuple(self.read(item_type) for _ in range(count))
        raise EncodingFailure.unknown_kind(type_name)


class WireStruct:
    """
    Mixin for frozen dataclasses with a declared Borsh layout

    Subclasses declare LAYOUT as (field name, wire type) pairs in wire order.
    Field values are validated and normalised at construction.
    """
    NAME: ClassVar[str] = ""
    LAYOUT: ClassVar[Tuple[Tuple[str, str], ...]] = ()

    def __post_init__(self):
        for name, type_name in self.LAYOUT:
            canonical = check_value(type_name, getattr(self, name), name)
            object.__setattr__(self, name, canonical)

    def encode_fields(self) -> bytes:
        buf = bytearray()
        for name, type_name in self.LAYOUT:
            encode_value(buf, type_name, getattr(self, name))
        return bytes(buf)

    @classmethod
    def read_fields(cls, reader: Reader) -> "WireStruct":
        values = {name: reader.read(type_name) for name, type_name in cls.LAYOUT}
        return cls(**values)

    def to_dict(self) -> Dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}
