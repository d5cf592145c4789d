"""Static partitioning of a search box into per-worker index ranges.

Cells are numbered in ``y`` outer, ``z`` middle, ``x`` inner order. Python
integers are unbounded, so the volume and every index stay exact no matter how
large the box is.
"""

from __future__ import annotations

from collections.abc import Iterator

from .models import Coordinate, Partition, SearchVolume


class SearchPartitioner:
    """Maps between linear indexes and coordinates of one ``SearchVolume``."""

    def __init__(self, volume: SearchVolume) -> None:
        self._volume = volume

    @property
    def size(self) -> int:
        return self._volume.volume

    def partitions(self, workers: int) -> list[Partition]:
        """Split ``[0, size)`` into ``workers`` contiguous ranges.

        The last range absorbs the division remainder; leading ranges may be
        empty when the box holds fewer cells than there are workers.
        """
        if workers < 1:
            raise ValueError(f"workers must be >= 1, got {workers}")

        total = self.size
        chunk = total // workers
        ranges: list[Partition] = []
        for index in range(workers):
            begin = index * chunk
            end = total if index == workers - 1 else begin + chunk
            ranges.append(Partition(index=index, begin=begin, end=end))
        return ranges

    def index_to_coordinate(self, index: int) -> Coordinate:
        if not 0 <= index < self.size:
            raise IndexError(f"Index {index} outside [0, {self.size})")

        box = self._volume
        row, dx = divmod(index, box.width)
        dy, dz = divmod(row, box.depth)
        return Coordinate(box.min_x + dx, box.min_y + dy, box.min_z + dz)

    def coordinate_to_index(self, coordinate: Coordinate) -> int:
        box = self._volume
        if not box.contains(coordinate):
            raise IndexError(f"{coordinate} is outside the search volume")

        dx = coordinate.x - box.min_x
        dy = coordinate.y - box.min_y
        dz = coordinate.z - box.min_z
        return (dy * box.depth + dz) * box.width + dx

    def iter_range(self, begin: int, end: int) -> Iterator[tuple[int, int, int]]:
        """Yield ``(x, y, z)`` for indexes ``[begin, end)``.

        The start is decomposed once; later cells are reached by stepping ``x``
        and carrying into ``z`` and then ``y``.
        """
        if begin >= end:
            return

        box = self._volume
        start = self.index_to_coordinate(begin)
        x, y, z = start.x, start.y, start.z
        for _ in range(end - begin):
            yield x, y, z
            x += 1
            if x > box.max_x:
                x = box.min_x
                z += 1
                if z > box.max_z:
                    z = box.min_z
                    y += 1
