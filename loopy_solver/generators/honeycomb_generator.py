from __future__ import annotations

from typing import Optional

from loopy_solver.generators.base_generator import BaseGridGenerator
from loopy_solver.grid import LoopyGrid

# Half-side vectors of a hexagon; the ratio approximates sqrt(3)
HONEY_A = 15
HONEY_B = 26


class HoneycombGridGenerator(BaseGridGenerator):
    """Hexagonal lattice in columns, odd columns shifted down by half a cell."""

    @property
    def face_count(self) -> int:
        return self.width * self.height

    def face_id(self, x: int, y: int) -> int:
        return y * self.width + x

    def set_hint_at(self, x: int, y: int, hint: Optional[int]):
        self.set_hint(self.face_id(x, y), hint)

    def _build(self) -> LoopyGrid:
        a, b = HONEY_A, HONEY_B
        grid = LoopyGrid()

        for y in range(self.height):
            for x in range(self.width):
                cx = 3 * a * x
                cy = 2 * b * y + (x % 2) * b

                grid.create_face([
                    grid.add_or_get_vertex(cx - a, cy - b),
                    grid.add_or_get_vertex(cx + a, cy - b),
                    grid.add_or_get_vertex(cx + 2 * a, cy),
                    grid.add_or_get_vertex(cx + a, cy + b),
                    grid.add_or_get_vertex(cx - a, cy + b),
                    grid.add_or_get_vertex(cx - 2 * a, cy),
                ])

        return grid
