"""
Graph Utilities
===============
Read-only topology queries over a LoopyGrid that go beyond plain adjacency.

- Unambiguous path tracing (single-path edges, linear runs around a face)
- Segment and loop shape tests
- Per-face solution enumeration used by the permutation-based rules
- Face networks for inside/outside containment analysis
"""

from __future__ import annotations

from collections import deque
from itertools import combinations
from typing import Callable, FrozenSet, Iterable, List, Optional, Sequence, Set

from loopy_solver.edge import EdgeState
from loopy_solver.grid import LoopyGrid

EdgeId = int
FaceId = int
EdgeTest = Callable[[EdgeId], bool]


# ── Paths ──────────────────────────────────────────────────────

def single_path_edges(
    grid: LoopyGrid,
    edge: EdgeId,
    include_test: Optional[EdgeTest] = None,
    exclude_disabled: bool = True,
) -> List[EdgeId]:
    """
    Trace the unambiguous path that runs through ``edge``.

    From each endpoint of an edge on the path, the path continues only when
    exactly one other eligible edge touches that endpoint. The starting edge
    is always part of the result.

    Parameters
    ----------
    grid : LoopyGrid
        Grid to trace on.
    edge : int
        Starting edge id.
    include_test : callable, optional
        Predicate deciding whether an edge is eligible. When omitted, every
        edge is eligible except disabled ones (if *exclude_disabled*).
    exclude_disabled : bool
        Only consulted when *include_test* is omitted.

    Returns
    -------
    list of int
        Edge ids along the path, without duplicates even when the path
        closes into a loop.
    """
    if include_test is None:
        if exclude_disabled:
            def include_test(e):
                return grid.edge_state(e) != EdgeState.DISABLED
        else:
            def include_test(e):
                return True

    result: List[EdgeId] = []
    added: Set[EdgeId] = set()
    stack = [edge]

    while stack:
        current = stack.pop()
        if current in added:
            continue
        result.append(current)
        added.add(current)

        for vertex in grid.edge_vertices(current):
            others = [
                e for e in grid.edges_sharing(vertex)
                if e != current and include_test(e)
            ]
            if len(others) != 1:
                continue
            following = others[0]
            if following not in added and following not in stack:
                stack.append(following)

    return result


def linear_path_graph_edges(grid: LoopyGrid, face: FaceId) -> List[List[EdgeId]]:
    """
    Split the enabled edges around a face into runs of single-path edges.

    Runs follow the unambiguous path through each edge and may leave the
    face; callers interested in the face only filter the runs themselves.
    """
    seen: Set[EdgeId] = set()
    runs: List[List[EdgeId]] = []

    for edge in grid.edges_for_face(face):
        if edge in seen or grid.edge_state(edge) == EdgeState.DISABLED:
            continue
        path = single_path_edges(grid, edge)
        runs.append(path)
        seen.update(path)

    return runs


def is_unique_segment(grid: LoopyGrid, edges: Sequence[EdgeId]) -> bool:
    """True if ``edges`` are all connected to each other through shared vertices."""
    if not edges:
        return False

    remaining = list(edges[1:])
    sequence = [edges[0]]

    while remaining:
        for i, candidate in enumerate(remaining):
            if any(grid.edges_share_vertex(e, candidate) for e in sequence):
                sequence.append(candidate)
                del remaining[i]
                break
        else:
            return False

    return True


def is_loop(grid: LoopyGrid, edges: Iterable[EdgeId]) -> bool:
    """
    True if every vertex touched by ``edges`` has exactly two of them.

    A loop on a planar grid needs at least three edges. Disjoint loops also
    satisfy this test; connectivity is checked separately where required.
    """
    edges = list(edges)
    if len(edges) < 3:
        return False

    degrees = {}
    for edge in edges:
        for vertex in grid.edge_vertices(edge):
            degrees[vertex] = degrees.get(vertex, 0) + 1

    return all(count == 2 for count in degrees.values())


# ── Permutations ───────────────────────────────────────────────

class _VertexConstraint:
    """Loop-degree bookkeeping for one vertex of a face."""

    __slots__ = ("face_edges", "outside_marked", "outside_normal")

    def __init__(self, face_edges, outside_marked, outside_normal):
        self.face_edges = face_edges
        self.outside_marked = outside_marked
        self.outside_normal = outside_normal

    def allows(self, solution: FrozenSet[EdgeId]) -> bool:
        through = self.outside_marked + sum(1 for e in self.face_edges if e in solution)
        if through > 2:
            return False
        if through == 1 and self.outside_normal == 0:
            return False
        return True


def _vertex_constraints(grid: LoopyGrid, face: FaceId) -> List[_VertexConstraint]:
    face_edges = grid.edges_for_face(face)
    constraints = []

    for vertex in grid.vertices_for_face(face):
        on_face = []
        outside_marked = 0
        outside_normal = 0
        for edge in grid.edges_sharing(vertex):
            if edge in face_edges:
                on_face.append(edge)
                continue
            state = grid.edge_state(edge)
            if state == EdgeState.MARKED:
                outside_marked += 1
            elif state == EdgeState.NORMAL:
                outside_normal += 1
        constraints.append(_VertexConstraint(on_face, outside_marked, outside_normal))

    return constraints


def permute_solutions_as_edges(grid: LoopyGrid, face: FaceId) -> List[FrozenSet[EdgeId]]:
    """
    Enumerate every viable set of marked edges for a face.

    A candidate keeps all currently marked edges, never includes disabled
    edges, has exactly ``hint`` edges on hinted faces, and leaves each face
    vertex with a feasible loop degree: at most two marked edges through it,
    and a line reaching it through exactly one edge must have an undecided
    edge outside the face to leave by. A candidate that closes the face's
    whole boundary is rejected while marked edges exist elsewhere.
    """
    edges = grid.edges_for_face(face)
    hint = grid.hint_for_face(face)

    marked = [e for e in edges if grid.edge_state(e) == EdgeState.MARKED]
    normal = [e for e in edges if grid.edge_state(e) == EdgeState.NORMAL]

    if hint is not None:
        needed = hint - len(marked)
        if needed < 0 or needed > len(normal):
            return []
        sizes: Iterable[int] = (needed,)
    else:
        sizes = range(len(normal) + 1)

    constraints = _vertex_constraints(grid, face)
    marked_elsewhere = len(grid.edges_with_state(EdgeState.MARKED)) - len(marked)

    solutions: List[FrozenSet[EdgeId]] = []
    for size in sizes:
        for chosen in combinations(normal, size):
            solution = frozenset(marked).union(chosen)
            if len(solution) == len(edges) and marked_elsewhere > 0:
                continue
            if all(c.allows(solution) for c in constraints):
                solutions.append(solution)

    return solutions


def common_edges(solutions: Sequence[FrozenSet[EdgeId]], candidates: Iterable[EdgeId]):
    """
    Split ``candidates`` into edges present in every solution and edges
    present in none. Returns ``(in_all, in_none)``; both are empty when
    there are no solutions.
    """
    if not solutions:
        return set(), set()

    in_all = set(solutions[0])
    in_any: Set[EdgeId] = set()
    for solution in solutions:
        in_all &= solution
        in_any |= solution

    candidates = set(candidates)
    return in_all & candidates, candidates - in_any


# ── Networks ───────────────────────────────────────────────────

def network_for_face(grid: LoopyGrid, face: FaceId) -> FrozenSet[FaceId]:
    """
    Faces reachable from ``face`` by crossing disabled edges only.

    Crossing a disabled edge never crosses the loop, so every face of a
    network lies on the same side of it.
    """
    visited = {face}
    queue = deque([face])

    while queue:
        current = queue.popleft()
        for edge in grid.edges_for_face(current):
            if grid.edge_state(edge) != EdgeState.DISABLED:
                continue
            for other in grid.faces_sharing_edge(edge):
                if other not in visited:
                    visited.add(other)
                    queue.append(other)

    return frozenset(visited)


def neighboring_networks_for(grid: LoopyGrid, faces: Iterable[FaceId]) -> List[FrozenSet[FaceId]]:
    """Networks lying across a marked edge from any of ``faces``."""
    faces = frozenset(faces)
    result: List[FrozenSet[FaceId]] = []
    covered: Set[FaceId] = set()

    for face in sorted(faces):
        for edge in grid.edges_for_face(face):
            if grid.edge_state(edge) != EdgeState.MARKED:
                continue
            for other in grid.faces_sharing_edge(edge):
                if other in faces or other in covered:
                    continue
                network = network_for_face(grid, other)
                covered.update(network)
                result.append(network)

    return result
