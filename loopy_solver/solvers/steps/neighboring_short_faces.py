from __future__ import annotations

from typing import List, Tuple

from loopy_solver.edge import EdgeState
from loopy_solver.graph_utils import single_path_edges
from loopy_solver.grid import LoopyGrid
from loopy_solver.solvers.solver_step import SolverStep, SolverStepDelegate


class NeighboringShortFacesSolverStep(SolverStep):
    """
    Disables the edge between two hinted faces when marking it would force
    either face past its hint.

    ::

        •───•───•───•───•
        │   │ 1 │ 1 │   │
        •───•───•───•───•
        │   │   │   │   │
        •───•───•───•───•

    A line through the edge between the two ``1`` faces has to turn into
    one of them at the top vertex, giving that face a second marked edge.

    Runs once per solver.
    """

    def apply(self, grid: LoopyGrid, delegate: SolverStepDelegate) -> LoopyGrid:
        metadata = delegate.metadata_for_step(type(self))
        if metadata.is_flag_marked():
            return grid
        metadata.mark_flag()

        result = grid.copy()
        for first, second, edge in self._collect(grid):
            if self._is_short_pair(grid, first, second, edge):
                result.set_edge_state(edge, EdgeState.DISABLED)
        return result

    @staticmethod
    def _collect(grid: LoopyGrid) -> List[Tuple[int, int, int]]:
        faces = [
            f for f in grid.face_ids
            if grid.hint_for_face(f) is not None and not grid.is_face_solved(f)
        ]
        pairs = []
        for i, first in enumerate(faces):
            for second in faces[i + 1:]:
                edge = grid.shared_edge(first, second)
                if edge is not None:
                    pairs.append((first, second, edge))
        return pairs

    @staticmethod
    def _is_short_pair(grid: LoopyGrid, first: int, second: int, edge: int) -> bool:
        for vertex in grid.edge_vertices(edge):
            others = [e for e in grid.edges_sharing(vertex) if e != edge]
            if len(others) != 2:
                continue

            first_edges = [e for e in others if grid.face_contains_edge(first, e)]
            second_edges = [e for e in others if grid.face_contains_edge(second, e)]
            if not first_edges or not second_edges:
                return False

            first_count = sum(
                1 for e in single_path_edges(grid, first_edges[0])
                if grid.face_contains_edge(first, e)
            )
            second_count = sum(
                1 for e in single_path_edges(grid, second_edges[0])
                if grid.face_contains_edge(second, e)
            )
            return (
                first_count >= grid.hint_for_face(first)
                and second_count >= grid.hint_for_face(second)
            )

        return False
