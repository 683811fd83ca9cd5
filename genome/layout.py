"""Feature layouts describing a genome as ordered groups of typed fields."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from genome.codec import FIELD_WIDTHS, GenomeReader, GenomeWriter


@dataclass(frozen=True)
class FeatureLayout:
    """Ordered field groups that together cover a whole genome.

    A group is the unit feature-based crossover inherits as a whole, for
    example one triangle's color and coordinates. The engine itself never
    assumes a layout; consumers build one and hand it to the operators that
    need it.
    """

    groups: tuple[tuple[str, ...], ...]

    def __post_init__(self) -> None:
        if not self.groups:
            raise ValueError("FeatureLayout requires at least one group.")
        for index, group in enumerate(self.groups):
            if not group:
                raise ValueError(f"Feature group {index} is empty.")
            unknown = [kind for kind in group if kind not in FIELD_WIDTHS]
            if unknown:
                raise ValueError(f"Feature group {index} has unknown field kind(s): {unknown}.")

    @classmethod
    def repeated(
        cls,
        fields: Sequence[str],
        count: int,
        header: Sequence[str] = (),
    ) -> "FeatureLayout":
        """Build ``count`` identical groups, optionally preceded by a header group."""
        if count < 1:
            raise ValueError("count must be >= 1")
        groups: list[tuple[str, ...]] = []
        if header:
            groups.append(tuple(header))
        groups.extend(tuple(fields) for _ in range(count))
        return cls(groups=tuple(groups))

    def group_length(self, index: int) -> int:
        return sum(FIELD_WIDTHS[kind] for kind in self.groups[index])

    def genome_length(self) -> int:
        return sum(self.group_length(index) for index in range(len(self.groups)))

    def copy_group(self, index: int, reader: GenomeReader, writer: GenomeWriter) -> None:
        """Copy every field of group ``index`` from ``reader`` to ``writer``.

        Both cursors are positioned at the start of the group first, so the
        reader may belong to either parent.
        """
        offset = sum(self.group_length(i) for i in range(index))
        reader.seek(offset)
        writer.seek(offset)
        for kind in self.groups[index]:
            writer.write(kind, reader.read(kind))
