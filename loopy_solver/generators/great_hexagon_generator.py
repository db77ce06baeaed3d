"""
Great hexagonal lattice: hexagons separated by squares, with triangles
filling the gaps where three squares meet.

Faces of each cell are created in the order the puzzle's game IDs number
them: hexagon, square below, square below right, square below left,
triangle below right, triangle below left.
"""

from __future__ import annotations

from loopy_solver.generators.base_generator import BaseGridGenerator
from loopy_solver.grid import LoopyGrid

# Side vectors of a triangle; the ratio approximates sqrt(3)
GREAT_HEX_A = 15
GREAT_HEX_B = 26


class GreatHexagonGridGenerator(BaseGridGenerator):
    def _build(self) -> LoopyGrid:
        a, b = GREAT_HEX_A, GREAT_HEX_B
        width, height = self.width, self.height
        grid = LoopyGrid()
        v = grid.add_or_get_vertex

        for y in range(height):
            for x in range(width):
                px = (3 * a + b) * x
                py = (2 * a + 2 * b) * y
                if x % 2:
                    py += a + b

                # hexagon
                grid.create_face([
                    v(px - a, py - b),
                    v(px + a, py - b),
                    v(px + 2 * a, py),
                    v(px + a, py + b),
                    v(px - a, py + b),
                    v(px - 2 * a, py),
                ])

                # square below
                if y < height - 1:
                    grid.create_face([
                        v(px - a, py + b),
                        v(px + a, py + b),
                        v(px + a, py + 2 * a + b),
                        v(px - a, py + 2 * a + b),
                    ])

                # square below right
                if x < width - 1 and (x % 2 == 0 or y < height - 1):
                    grid.create_face([
                        v(px + 2 * a, py),
                        v(px + 2 * a + b, py + a),
                        v(px + a + b, py + a + b),
                        v(px + a, py + b),
                    ])

                # square below left
                if x > 0 and (x % 2 == 0 or y < height - 1):
                    grid.create_face([
                        v(px - 2 * a, py),
                        v(px - a, py + b),
                        v(px - a - b, py + a + b),
                        v(px - 2 * a - b, py + a),
                    ])

                # triangle below right
                if x < width - 1 and y < height - 1:
                    grid.create_face([
                        v(px + a, py + b),
                        v(px + a + b, py + a + b),
                        v(px + a, py + 2 * a + b),
                    ])

                # triangle below left
                if x > 0 and y < height - 1:
                    grid.create_face([
                        v(px - a, py + b),
                        v(px - a, py + 2 * a + b),
                        v(px - a - b, py + a + b),
                    ])

        return grid
