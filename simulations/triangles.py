"""Colored-triangle genome schema used by image reconstruction drivers.

Each triangle is three color bytes followed by six little-endian 16-bit
coordinates (x1, y1, x2, y2, x3, y3). Rendering is left to the driver.
"""

from __future__ import annotations

from dataclasses import dataclass

from genome.codec import GenomeReader
from genome.layout import FeatureLayout


TRIANGLE_FIELDS: tuple[str, ...] = ("uint8",) * 3 + ("uint16",) * 6
BACKGROUND_FIELDS: tuple[str, ...] = ("uint8",) * 3


@dataclass(frozen=True)
class Triangle:
    color: tuple[int, int, int]
    points: tuple[tuple[int, int], tuple[int, int], tuple[int, int]]

    def scaled_points(self, width: int, height: int, margin: float = 0.1) -> list[tuple[float, float]]:
        """Map 16-bit coordinates onto an image, overshooting each edge by ``margin``."""
        span = 1.0 + 2.0 * margin
        return [
            (-margin * width + span * width * x / 65536.0, -margin * height + span * height * y / 65536.0)
            for x, y in self.points
        ]


def triangle_layout(count: int, background: bool = False) -> FeatureLayout:
    """One feature group per triangle, optionally led by a background color group."""
    return FeatureLayout.repeated(TRIANGLE_FIELDS, count, header=BACKGROUND_FIELDS if background else ())


def decode_background(reader: GenomeReader) -> tuple[int, int, int]:
    return (reader.read_uint8(), reader.read_uint8(), reader.read_uint8())


def decode_triangles(reader: GenomeReader, count: int) -> list[Triangle]:
    """Read ``count`` triangles from the reader's current position."""
    triangles = []
    for _ in range(count):
        color = (reader.read_uint8(), reader.read_uint8(), reader.read_uint8())
        coords = [reader.read_uint16() for _ in range(6)]
        points = ((coords[0], coords[1]), (coords[2], coords[3]), (coords[4], coords[5]))
        triangles.append(Triangle(color=color, points=points))
    return triangles
