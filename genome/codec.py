"""Cursor-based typed access to fixed-length genome buffers."""

from __future__ import annotations

import struct


_UINT8 = struct.Struct("<B")
_UINT16 = struct.Struct("<H")
_FLOAT64 = struct.Struct("<d")

FIELD_WIDTHS: dict[str, int] = {
    "uint8": _UINT8.size,
    "uint16": _UINT16.size,
    "float64": _FLOAT64.size,
}


class GenomeBoundsError(IndexError):
    """Raised when a read or write runs past the end of a genome buffer."""


class GenomeReader:
    """Sequential reader over an immutable genome.

    Evaluation functions receive a fresh reader per call. Every read advances
    the cursor by the field width; running out of bytes raises
    ``GenomeBoundsError`` because it means the configured genome length does
    not match what the caller expects to decode.
    """

    def __init__(self, genes: bytes | bytearray | memoryview) -> None:
        self._genes = bytes(genes)
        self._position = 0

    @property
    def genes(self) -> bytes:
        return self._genes

    @property
    def position(self) -> int:
        return self._position

    def __len__(self) -> int:
        return len(self._genes)

    def seek(self, index: int) -> None:
        if not 0 <= index <= len(self._genes):
            raise GenomeBoundsError(f"Seek to {index} outside genome of length {len(self._genes)}.")
        self._position = index

    def read_uint8(self) -> int:
        return self._unpack(_UINT8)

    def read_uint16(self) -> int:
        return self._unpack(_UINT16)

    def read_float64(self) -> float:
        return self._unpack(_FLOAT64)

    def read(self, kind: str) -> int | float:
        """Read one field of the given kind (``uint8``, ``uint16`` or ``float64``)."""
        if kind == "uint8":
            return self.read_uint8()
        if kind == "uint16":
            return self.read_uint16()
        if kind == "float64":
            return self.read_float64()
        raise ValueError(f"Unknown field kind '{kind}'.")

    def _unpack(self, codec: struct.Struct) -> int | float:
        end = self._position + codec.size
        if end > len(self._genes):
            raise GenomeBoundsError(
                f"Read of {codec.size} byte(s) at {self._position} exceeds genome length {len(self._genes)}."
            )
        (value,) = codec.unpack_from(self._genes, self._position)
        self._position = end
        return value


class GenomeWriter:
    """Sequential writer into a preallocated genome buffer.

    The buffer is never resized; a write that does not fit raises
    ``GenomeBoundsError``.
    """

    def __init__(self, buffer: bytearray) -> None:
        if not isinstance(buffer, bytearray):
            raise TypeError("GenomeWriter requires a bytearray buffer.")
        self._buffer = buffer
        self._position = 0

    @property
    def buffer(self) -> bytearray:
        return self._buffer

    @property
    def position(self) -> int:
        return self._position

    def __len__(self) -> int:
        return len(self._buffer)

    def seek(self, index: int) -> None:
        if not 0 <= index <= len(self._buffer):
            raise GenomeBoundsError(f"Seek to {index} outside genome of length {len(self._buffer)}.")
        self._position = index

    def write_uint8(self, value: int) -> None:
        self._pack(_UINT8, value)

    def write_uint16(self, value: int) -> None:
        self._pack(_UINT16, value)

    def write_float64(self, value: float) -> None:
        self._pack(_FLOAT64, value)

    def write(self, kind: str, value: int | float) -> None:
        if kind == "uint8":
            self.write_uint8(int(value))
        elif kind == "uint16":
            self.write_uint16(int(value))
        elif kind == "float64":
            self.write_float64(float(value))
        else:
            raise ValueError(f"Unknown field kind '{kind}'.")

    def _pack(self, codec: struct.Struct, value: int | float) -> None:
        end = self._position + codec.size
        if end > len(self._buffer):
            raise GenomeBoundsError(
                f"Write of {codec.size} byte(s) at {self._position} exceeds genome length {len(self._buffer)}."
            )
        try:
            codec.pack_into(self._buffer, self._position, value)
        except struct.error as exc:
            raise ValueError(f"Value {value!r} does not fit field: {exc}") from exc
        self._position = end
