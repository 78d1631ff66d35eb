"""Grid of world sectors and the enter/leave bookkeeping for objects that move between them."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Optional

Point = tuple[int, int]
SectorCallback = Callable[["SectorObject", "SectorObject"], None]

# Neighbour offsets as (dx, dy): LL, LU, UU, RU, RR, RD, DD, LD.
_NEIGHBOUR_OFFSETS: tuple[Point, ...] = (
    (-1, 0),
    (-1, -1),
    (0, -1),
    (1, -1),
    (1, 0),
    (1, 1),
    (0, 1),
    (-1, 1),
)


def _step_changes(x0: int, y0: int, x1: int, y1: int, dx: int, dy: int) -> tuple[list[Point], list[Point]]:
    """Sectors leaving and entering view for a one-sector step, in a fixed order."""
    if (dx, dy) == (-1, -1):
        return (
            [(x0 + 1, y0 + 1), (x0 + 1, y0), (x0 + 1, y0 - 1), (x0, y0 + 1), (x0 - 1, y0 + 1)],
            [(x1 - 1, y1), (x1 - 1, y1 + 1), (x1 - 1, y1 - 1), (x1, y1 - 1), (x1 + 1, y1 - 1)],
        )
    if (dx, dy) == (-1, 1):
        return (
            [(x0 + 1, y0 - 1), (x0 + 1, y0), (x0 + 1, y0 + 1), (x0, y0 - 1), (x0 - 1, y0 - 1)],
            [(x1 - 1, y1), (x1 - 1, y1 - 1), (x1 - 1, y1 + 1), (x1, y1 + 1), (x1 + 1, y1 + 1)],
        )
    if (dx, dy) == (1, -1):
        return (
            [(x0 - 1, y0 + 1), (x0 - 1, y0), (x0 - 1, y0 - 1), (x0, y0 + 1), (x0 + 1, y0 + 1)],
            [(x1 + 1, y1), (x1 + 1, y1 - 1), (x1 + 1, y1 + 1), (x1, y1 - 1), (x1 - 1, y1 - 1)],
        )
    if (dx, dy) == (1, 1):
        return (
            [(x0 - 1, y0 - 1), (x0 - 1, y0), (x0 - 1, y0 + 1), (x0, y0 - 1), (x0 + 1, y0 - 1)],
            [(x1 + 1, y1), (x1 + 1, y1 - 1), (x1 + 1, y1 + 1), (x1, y1 + 1), (x1 - 1, y1 + 1)],
        )
    if (dx, dy) == (-1, 0):
        return (
            [(x0 + 1, y0 - 1), (x0 + 1, y0), (x0 + 1, y0 + 1)],
            [(x1 - 1, y1 - 1), (x1 - 1, y1), (x1 - 1, y1 + 1)],
        )
    if (dx, dy) == (1, 0):
        return (
            [(x0 - 1, y0 - 1), (x0 - 1, y0), (x0 - 1, y0 + 1)],
            [(x1 + 1, y1 - 1), (x1 + 1, y1), (x1 + 1, y1 + 1)],
        )
    if (dx, dy) == (0, -1):
        return (
            [(x0 - 1, y0 + 1), (x0, y0 + 1), (x0 + 1, y0 + 1)],
            [(x1 - 1, y1 - 1), (x1, y1 - 1), (x1 + 1, y1 - 1)],
        )
    if (dx, dy) == (0, 1):
        return (
            [(x0 - 1, y0 - 1), (x0, y0 - 1), (x0 + 1, y0 - 1)],
            [(x1 - 1, y1 + 1), (x1, y1 + 1), (x1 + 1, y1 + 1)],
        )
    # Jumps of more than one sector produce no view changes.
    return [], []


@dataclass(eq=False)
class SectorObject:
    """An object placed in the world; sector positions are (column, row)."""

    object_id: int
    x: int = 0
    y: int = 0
    previous_sector: Point = (0, 0)
    current_sector: Point = (0, 0)


@dataclass(eq=False)
class Sector:
    """One cell of the sector grid and the objects inside it."""

    row: int
    col: int
    around: list["Sector"] = field(default_factory=list, repr=False)
    objects: dict[int, SectorObject] = field(default_factory=dict, repr=False)

    def register(self, obj: SectorObject) -> None:
        """Add ``obj`` to this sector."""
        self.objects[obj.object_id] = obj

    def remove(self, obj: SectorObject) -> None:
        """Remove ``obj`` from this sector; raise KeyError if it is not here."""
        removed = self.objects.pop(obj.object_id, None)
        if removed is None:
            raise KeyError(f"object {obj.object_id} is not in sector ({self.col}, {self.row})")


class SectorManager:
    """Divides the world into a grid and reports which objects enter or leave view."""

    def __init__(
        self,
        columns: int,
        rows: int,
        *,
        left: int,
        top: int,
        right: int,
        bottom: int,
        on_create: Optional[SectorCallback] = None,
        on_delete: Optional[SectorCallback] = None,
    ) -> None:
        if columns <= 0 or rows <= 0:
            raise ValueError("sector grid needs at least one column and one row")
        self.columns = columns
        self.rows = rows
        self.sector_width = (right - left) // columns
        self.sector_height = (bottom - top) // rows
        if self.sector_width <= 0 or self.sector_height <= 0:
            raise ValueError("world range is too small for the sector grid")
        self.on_create = on_create
        self.on_delete = on_delete

        self._sectors = [[Sector(row, col) for col in range(columns)] for row in range(rows)]
        for row, line in enumerate(self._sectors):
            for col, sector in enumerate(line):
                sector.around.extend(
                    self._sectors[row + dy][col + dx]
                    for dx, dy in _NEIGHBOUR_OFFSETS
                    if self._inside((col + dx, row + dy))
                )
                sector.around.append(sector)

    def _inside(self, point: Point) -> bool:
        x, y = point
        return 0 <= x < self.columns and 0 <= y < self.rows

    def sector_at(self, col: int, row: int) -> Sector:
        """Return the sector at column ``col`` and row ``row``."""
        if not self._inside((col, row)):
            raise IndexError(f"sector ({col}, {row}) is outside the grid")
        return self._sectors[row][col]

    def sector_index(self, pos_x: int, pos_y: int) -> Point:
        """Return the (column, row) of the sector holding world position (pos_x, pos_y)."""
        return pos_x // self.sector_width, pos_y // self.sector_height

    def sector_changes(self, previous: Point, current: Point) -> tuple[list[Point], list[Point]]:
        """Return the sectors leaving view and those entering view for a move."""
        if previous == current:
            return [], []
        (x0, y0), (x1, y1) = previous, current
        to_delete, to_add = _step_changes(x0, y0, x1, y1, x1 - x0, y1 - y0)
        return (
            [p for p in to_delete if self._inside(p)],
            [p for p in to_add if self._inside(p)],
        )

    def calculate_sector_changes(self, obj: SectorObject) -> bool:
        """Process a change of sector for ``obj``; return whether its sector changed."""
        if obj.previous_sector == obj.current_sector:
            return False
        to_delete, to_add = self.sector_changes(obj.previous_sector, obj.current_sector)
        self.process_sector_object_packets(obj, to_delete, to_add)
        return True

    def process_sector_object_packets(
        self, obj: SectorObject, to_delete: list[Point], to_add: list[Point]
    ) -> None:
        """Notify objects leaving and entering view, then move ``obj`` between sectors."""
        for col, row in to_delete:
            for other in list(self.sector_at(col, row).objects.values()):
                if self.on_delete is not None:
                    self.on_delete(obj, other)
        self.sector_at(*obj.previous_sector).remove(obj)

        for col, row in to_add:
            for other in list(self.sector_at(col, row).objects.values()):
                if self.on_create is not None:
                    self.on_create(obj, other)
        self.sector_at(*obj.current_sector).register(obj)

    def register_object(self, obj: SectorObject) -> None:
        """Place ``obj`` into the sector matching its world position."""
        index = self.sector_index(obj.x, obj.y)
        sector = self.sector_at(*index)
        obj.current_sector = index
        obj.previous_sector = index
        sector.register(obj)

    def delete_object(self, obj: SectorObject) -> None:
        """Remove ``obj`` from its current sector."""
        self.sector_at(*obj.current_sector).remove(obj)