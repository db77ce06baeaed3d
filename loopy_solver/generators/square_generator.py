from __future__ import annotations

from typing import List, Optional

from loopy_solver.generators.base_generator import BaseGridGenerator
from loopy_solver.grid import LoopyGrid


class SquareGridGenerator(BaseGridGenerator):
    """
    Regular square lattice.

    Faces are created row by row; each face's edges run top, right, bottom,
    left.
    """

    @property
    def face_count(self) -> int:
        return self.width * self.height

    def face_id(self, x: int, y: int) -> int:
        return y * self.width + x

    def set_hint_at(self, x: int, y: int, hint: Optional[int]):
        self.set_hint(self.face_id(x, y), hint)

    def set_hints_at_row(self, y: int, hints: List[Optional[int]]):
        if len(hints) != self.width:
            raise ValueError(f"Expected {self.width} hints, got {len(hints)}")
        for x, hint in enumerate(hints):
            self.set_hint_at(x, y, hint)

    def hint_at(self, x: int, y: int) -> Optional[int]:
        return self.hints.get(self.face_id(x, y))

    def _build(self) -> LoopyGrid:
        grid = LoopyGrid()
        for y in range(self.height):
            for x in range(self.width):
                grid.create_face([
                    grid.add_or_get_vertex(x, y),
                    grid.add_or_get_vertex(x + 1, y),
                    grid.add_or_get_vertex(x + 1, y + 1),
                    grid.add_or_get_vertex(x, y + 1),
                ])
        return grid
