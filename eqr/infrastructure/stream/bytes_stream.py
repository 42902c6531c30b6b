"""In-memory binary stream over bytes.

Integers are unsigned LEB128 varints, floats are big-endian IEEE-754,
strings are UTF-8 prefixed by their byte length.
"""

import struct

from eqr.domain.shared.error import DecodeError, EncodeError

VINT_MAX = (1 << 31) - 1
VLONG_MAX = (1 << 63) - 1

_FLOAT = struct.Struct(">f")
_DOUBLE = struct.Struct(">d")


class BytesStreamOutput:
    """Append-only writer backed by a bytearray."""

    def __init__(self) -> None:
        self._buffer = bytearray()

    def __len__(self) -> int:
        return len(self._buffer)

    def getvalue(self) -> bytes:
        return bytes(self._buffer)

    def write_byte(self, value: int) -> None:
        if not 0 <= value <= 0xFF:
            raise EncodeError(f"byte value out of range: {value}")
        self._buffer.append(value)

    def write_bool(self, value: bool) -> None:
        self._buffer.append(1 if value else 0)

    def write_vint(self, value: int) -> None:
        self._write_varint(value, VINT_MAX, "vint")

    def write_vlong(self, value: int) -> None:
        self._write_varint(value, VLONG_MAX, "vlong")

    def write_float(self, value: float) -> None:
        try:
            self._buffer += _FLOAT.pack(value)
        except OverflowError as e:
            raise EncodeError(f"float value out of range: {value}") from e

    def write_double(self, value: float) -> None:
        self._buffer += _DOUBLE.pack(value)

    def write_string(self, value: str) -> None:
        self.write_bytes(value.encode("utf-8"))

    def write_bytes(self, value: bytes) -> None:
        self.write_vint(len(value))
        self._buffer += value

    def write_string_list(self, values: list[str] | tuple[str, ...]) -> None:
        self.write_vint(len(values))
        for v in values:
            self.write_string(v)

    def write_optional_string(self, value: str | None) -> None:
        if value is None:
            self.write_bool(False)
        else:
            self.write_bool(True)
            self.write_string(value)

    def _write_varint(self, value: int, limit: int, kind: str) -> None:
        if value < 0 or value > limit:
            raise EncodeError(f"{kind} value out of range: {value}")
        while value > 0x7F:
            self._buffer.append((value & 0x7F) | 0x80)
            value >>= 7
        self._buffer.append(value)


class BytesStreamInput:
    """Forward-only reader over an immutable byte buffer."""

    def __init__(self, data: bytes | bytearray | memoryview) -> None:
        self._data = memoryview(bytes(data))
        self._pos = 0

    @property
    def position(self) -> int:
        return self._pos

    @property
    def remaining(self) -> int:
        return len(self._data) - self._pos

    def read_byte(self) -> int:
        return self._take(1)[0]

    def read_bool(self) -> bool:
        offset = self._pos
        b = self.read_byte()
        if b == 0:
            return False
        if b == 1:
            return True
        raise DecodeError(f"unexpected byte [{b:#04x}] for boolean", offset)

    def read_vint(self) -> int:
        return self._read_varint(5, VINT_MAX, "vint")

    def read_vlong(self) -> int:
        return self._read_varint(10, VLONG_MAX, "vlong")

    def read_float(self) -> float:
        return _FLOAT.unpack(self._take(4))[0]

    def read_double(self) -> float:
        return _DOUBLE.unpack(self._take(8))[0]

    def read_string(self) -> str:
        offset = self._pos
        raw = self.read_bytes()
        try:
            return raw.decode("utf-8")
        except UnicodeDecodeError as e:
            raise DecodeError(f"invalid UTF-8 string: {e.reason}", offset) from e

    def read_bytes(self) -> bytes:
        size = self.read_vint()
        return bytes(self._take(size))

    def read_string_list(self) -> list[str]:
        size = self.read_vint()
        if size > self.remaining:
            raise DecodeError(f"declared {size} strings but only {self.remaining} bytes remain", self._pos)
        return [self.read_string() for _ in range(size)]

    def read_optional_string(self) -> str | None:
        return self.read_string() if self.read_bool() else None

    def _take(self, size: int) -> memoryview:
        if size > self.remaining:
            raise DecodeError(
                f"unexpected end of stream: needed {size} bytes, {self.remaining} available",
                self._pos,
            )
        chunk = self._data[self._pos : self._pos + size]
        self._pos += size
        return chunk

    def _read_varint(self, max_bytes: int, limit: int, kind: str) -> int:
        offset = self._pos
        result = 0
        for i in range(max_bytes):
            b = self.read_byte()
            result |= (b & 0x7F) << (7 * i)
            if not b & 0x80:
                if result > limit:
                    raise DecodeError(f"{kind} value out of range: {result}", offset)
                return result
        raise DecodeError(f"{kind} is longer than {max_bytes} bytes", offset)
