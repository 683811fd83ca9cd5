"""Tests for genome readers, writers and feature layouts."""

from __future__ import annotations

import struct

import pytest

from genome.codec import GenomeBoundsError, GenomeReader, GenomeWriter
from genome.layout import FeatureLayout


def test_reader_decodes_little_endian_fields() -> None:
    genes = bytes([7, 0x34, 0x12]) + struct.pack("<d", -2.5)
    reader = GenomeReader(genes)

    assert reader.read_uint8() == 7
    assert reader.read_uint16() == 0x1234
    assert reader.read_float64() == -2.5
    assert reader.position == len(reader) == 11


def test_reader_raises_when_exhausted() -> None:
    reader = GenomeReader(bytes([1, 2, 3]))
    reader.read_uint16()

    with pytest.raises(GenomeBoundsError, match="exceeds genome length 3"):
        reader.read_uint16()
    assert reader.position == 2


def test_reader_seek_rewinds_and_rejects_out_of_range() -> None:
    reader = GenomeReader(bytes([9, 8]))
    reader.read_uint8()
    reader.seek(0)
    assert reader.read_uint8() == 9

    with pytest.raises(GenomeBoundsError):
        reader.seek(3)


def test_writer_then_reader_reproduces_values() -> None:
    buffer = bytearray(11)
    writer = GenomeWriter(buffer)
    writer.write_uint8(255)
    writer.write_uint16(65535)
    writer.write_float64(3.141592653589793)

    reader = GenomeReader(buffer)
    assert (reader.read_uint8(), reader.read_uint16(), reader.read_float64()) == (255, 65535, 3.141592653589793)


def test_writer_never_grows_buffer() -> None:
    buffer = bytearray(2)
    writer = GenomeWriter(buffer)
    writer.write_uint8(1)

    with pytest.raises(GenomeBoundsError):
        writer.write_uint16(2)
    assert len(buffer) == 2


def test_writer_rejects_out_of_range_values() -> None:
    writer = GenomeWriter(bytearray(2))
    with pytest.raises(ValueError):
        writer.write_uint16(70000)


def test_feature_layout_lengths_and_header() -> None:
    layout = FeatureLayout.repeated(("uint8", "uint16"), 3, header=("float64",))

    assert len(layout.groups) == 4
    assert layout.group_length(0) == 8
    assert layout.group_length(1) == 3
    assert layout.genome_length() == 17


def test_feature_layout_rejects_unknown_kinds() -> None:
    with pytest.raises(ValueError, match="unknown field kind"):
        FeatureLayout(groups=(("uint32",),))


def test_copy_group_copies_only_that_group() -> None:
    layout = FeatureLayout.repeated(("uint8", "uint16"), 2)
    source = GenomeReader(bytes([1, 2, 3, 4, 5, 6]))
    target = bytearray(6)

    layout.copy_group(1, source, GenomeWriter(target))

    assert target == bytearray([0, 0, 0, 4, 5, 6])
