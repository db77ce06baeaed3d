"""
Vertex propagation.

When every solution of a hinted face sends the line out through one of its
corners, the face on the other side of that corner must pick the line up
there. The entry restricts that face's own solutions, which may in turn
force the line out through another of its corners, so the deduction
cascades from face to face::

    input:                 result:
        •───•                  •───•
      1 |   |                1 |   |
    •───•───•              •───•───•
    |   | 1 |              |   | 1
    •───•───•              •───•   •
"""

from __future__ import annotations

from collections import deque
from typing import FrozenSet, List, NamedTuple, Optional, Sequence

from loopy_solver.edge import EdgeState
from loopy_solver.graph_utils import common_edges, permute_solutions_as_edges
from loopy_solver.grid import LoopyGrid
from loopy_solver.solvers.solver_step import SolverStep, SolverStepDelegate

Solutions = List[FrozenSet[int]]


class FaceEntry(NamedTuple):
    """A line crossing from ``start`` into ``face`` through ``vertex``."""

    face: int
    start: int
    shared_edges: FrozenSet[int]
    vertex: int


class VertexPropagationSolverStep(SolverStep):
    def apply(self, grid: LoopyGrid, delegate: SolverStepDelegate) -> LoopyGrid:
        propagation = _Propagation(grid.copy())
        propagation.run()
        return propagation.grid


class _Propagation:
    def __init__(self, grid: LoopyGrid):
        self.grid = grid
        self.hinted = {f for f in grid.face_ids if grid.hint_for_face(f) is not None}

    def run(self):
        visited = set()
        queue = deque()
        for face in self.grid.face_ids:
            queue.extend(self.inspect_candidate(face, None))

        while queue:
            entry = queue.popleft()
            for candidate in self.apply(entry):
                if candidate not in visited:
                    visited.add(candidate)
                    queue.append(candidate)

    def apply(self, entry: FaceEntry) -> List[FaceEntry]:
        grid = self.grid
        face_edges = grid.edges_for_face(entry.face)

        on_vertex = [
            e for e in grid.edges_sharing_vertex_in_face(entry.face, entry.vertex)
            if grid.edge_state(e) == EdgeState.NORMAL
        ]
        if len(on_vertex) == 1 and grid.marked_edges_for_vertex(entry.vertex) == 0:
            grid.set_edges(EdgeState.MARKED, on_vertex)

        if entry.face in self.hinted and not grid.faces_share_edge(entry.face, entry.start):
            solutions = self.filter_to_entrance(
                permute_solutions_as_edges(grid, entry.face),
                entry.shared_edges,
                entry.vertex,
            )
            if solutions:
                in_all, in_none = common_edges(solutions, face_edges)
                grid.set_edges(EdgeState.MARKED, in_all)
                grid.set_edges(EdgeState.DISABLED, in_none)

        return self.inspect_candidate(
            entry.face, entry.start, entry.shared_edges, marking_vertex=entry.vertex
        )

    def inspect_candidate(
        self,
        face: int,
        entry: Optional[int],
        shared_edges: FrozenSet[int] = frozenset(),
        marking_vertex: Optional[int] = None,
    ) -> List[FaceEntry]:
        grid = self.grid
        if face not in self.hinted or grid.is_face_solved(face):
            return []

        solutions = permute_solutions_as_edges(grid, face)
        if marking_vertex is not None:
            solutions = self.filter_to_entrance(solutions, shared_edges, marking_vertex)
        if not solutions:
            return []

        face_edges = grid.edges_for_face(face)
        adjacent = grid.faces_vertex_adjacent(face) + grid.faces_edge_adjacent(face)

        result = []
        for other in adjacent:
            if other == entry:
                continue
            if other in self.hinted and grid.is_face_solved(other):
                continue

            for vertex in grid.shared_vertices(face, other):
                start_edges = grid.edges_sharing_vertex_in_face(face, vertex)
                if len(start_edges) != 2:
                    continue
                if not self.is_vertex_spilling(vertex, face, solutions, start_edges, other):
                    continue

                in_solutions = frozenset(
                    e for e in face_edges
                    if grid.face_contains_edge(other, e) and any(e in s for s in solutions)
                )
                result.append(FaceEntry(other, face, in_solutions, vertex))

        return result

    def is_vertex_spilling(
        self,
        vertex: int,
        start: int,
        solutions: Solutions,
        start_edges: Sequence[int],
        end: int,
    ) -> bool:
        for solution in solutions:
            if sum(1 for e in start_edges if e in solution) != 1:
                return False

        grid = self.grid
        return all(
            grid.face_contains_edge(start, e) or grid.face_contains_edge(end, e)
            for e in grid.edges_sharing(vertex)
        )

    def filter_to_entrance(
        self, solutions: Solutions, shared_edges: FrozenSet[int], vertex: int
    ) -> Solutions:
        """Keep solutions picking the line up through ``vertex`` exactly once."""
        grid = self.grid
        return [
            s for s in solutions
            if not s.isdisjoint(shared_edges)
            or sum(1 for e in s if grid.edge_touches_vertex(e, vertex)) == 1
        ]
