"""
Permutation.

Enumerates every viable set of marked edges of each face and compares them:
edges present in every solution are marked, edges absent from all of them
are disabled.

Faces are enumerated concurrently against an unchanging copy of the grid;
results are applied once every face is done, disables before marks.
"""

from __future__ import annotations

import concurrent.futures
import logging
from typing import Dict, List, Optional, Set, Tuple

from loopy_solver.edge import EdgeState
from loopy_solver.graph_utils import common_edges, permute_solutions_as_edges
from loopy_solver.grid import LoopyGrid
from loopy_solver.solvers.solver_errors import resolve_permutation_workers
from loopy_solver.solvers.solver_step import SolverStep, SolverStepDelegate

logger = logging.getLogger(__name__)

FaceResult = Optional[Tuple[Set[int], Set[int]]]


class PermutationSolverStep(SolverStep):
    def __init__(self, max_workers: Optional[int] = None):
        self.max_workers = resolve_permutation_workers(max_workers)

    def apply(self, grid: LoopyGrid, delegate: SolverStepDelegate) -> LoopyGrid:
        metadata = delegate.metadata_for_step(type(self))
        snapshot = grid.copy()

        faces = [
            f for f in snapshot.face_ids
            if snapshot.edge_count(EdgeState.NORMAL, f) > 0
            and not all(
                metadata.matches_stored_vertex_state(v, snapshot)
                for v in snapshot.vertices_for_face(f)
            )
        ]

        results = self._evaluate(snapshot, faces)

        for face in snapshot.face_ids:
            for vertex in snapshot.vertices_for_face(face):
                metadata.store_vertex_state(vertex, snapshot)

        to_mark: Set[int] = set()
        to_disable: Set[int] = set()
        for face in faces:
            result = results[face]
            if result is None:
                logger.debug("Face %d has no viable solutions", face)
                delegate.report_inconsistent_state(self)
                continue
            in_all, in_none = result
            to_mark |= in_all
            to_disable |= in_none

        grid = grid.copy()
        grid.set_edges(EdgeState.DISABLED, to_disable)
        grid.set_edges(EdgeState.MARKED, to_mark)
        return grid

    def _evaluate(self, snapshot: LoopyGrid, faces: List[int]) -> Dict[int, FaceResult]:
        if len(faces) <= 1 or self.max_workers == 1:
            return {face: _solve_face(snapshot, face) for face in faces}

        with concurrent.futures.ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            futures = {face: executor.submit(_solve_face, snapshot, face) for face in faces}
            return {face: future.result() for face, future in futures.items()}


def _solve_face(grid: LoopyGrid, face: int) -> FaceResult:
    solutions = permute_solutions_as_edges(grid, face)
    if not solutions:
        return None
    return common_edges(solutions, grid.edges_for_face(face))
