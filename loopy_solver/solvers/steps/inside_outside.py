"""
Inside/outside containment.

Groups faces into networks connected through disabled edges; every face of
a network lies on the same side of the loop. Networks touching the border
of the grid learn their side from their border edges, and networks across
a marked edge from them take the opposite side.

- inside networks have their border edges marked, outside networks have
  them disabled;
- two networks on the same side have the edges between them disabled,
  merging them into one;
- a network enclosed by the loop except for a single undecided edge must
  escape through it to reach the rest of its side, so that edge is
  disabled.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import FrozenSet, List, Set

from loopy_solver.edge import EdgeState
from loopy_solver.graph_utils import neighboring_networks_for, network_for_face
from loopy_solver.grid import LoopyGrid
from loopy_solver.solvers.solver_step import SolverStep, SolverStepDelegate


class Containment(enum.Enum):
    INSIDE = "inside"
    OUTSIDE = "outside"
    UNKNOWN = "unknown"

    @property
    def reversed(self) -> "Containment":
        if self is Containment.INSIDE:
            return Containment.OUTSIDE
        if self is Containment.OUTSIDE:
            return Containment.INSIDE
        return Containment.UNKNOWN


@dataclass(frozen=True)
class FaceNetwork:
    faces: FrozenSet[int]
    state: Containment

    def neighboring_edges(self, other: "FaceNetwork", grid: LoopyGrid) -> Set[int]:
        result = set()
        for face in self.faces:
            for other_face in other.faces:
                shared = grid.shared_edge(face, other_face)
                if shared is not None:
                    result.add(shared)
        return result

    def connect(self, other: "FaceNetwork", grid: LoopyGrid) -> bool:
        """
        Sets the edges between two networks according to their sides.
        Returns True when any of those edges changed.
        """
        if Containment.UNKNOWN in (self.state, other.state):
            return False

        new_state = EdgeState.DISABLED if self.state == other.state else EdgeState.MARKED
        edges = self.neighboring_edges(other, grid)
        if any(grid.edge_state(e) != new_state for e in edges):
            grid.set_edges(new_state, edges)
            return True
        return False

    def merged(self, other: "FaceNetwork") -> "FaceNetwork":
        return FaceNetwork(self.faces | other.faces, self.state)


class InsideOutsideSolverStep(SolverStep):
    def apply(self, grid: LoopyGrid, delegate: SolverStepDelegate) -> LoopyGrid:
        grid = grid.copy()

        outer = self._outer_networks(grid)
        remaining = _unique(outer + self._connected_networks(grid, outer))
        resolved: List[FaceNetwork] = []

        while remaining:
            network = remaining.pop(0)
            self._process_outer_edges(grid, network)

            for other in list(remaining):
                if network.state == Containment.UNKNOWN or other.state != network.state:
                    continue
                if network.connect(other, grid):
                    remaining.remove(other)
                    network = network.merged(other)

            resolved.append(network)

        self._extend_enclosed(grid, resolved)
        return grid

    @staticmethod
    def _outer_networks(grid: LoopyGrid) -> List[FaceNetwork]:
        result = []
        for face in grid.face_ids:
            border = grid.non_shared_edges(face)
            if not border:
                continue

            state = Containment.UNKNOWN
            for edge in border:
                edge_state = grid.edge_state(edge)
                if edge_state == EdgeState.DISABLED:
                    state = Containment.OUTSIDE
                    break
                if edge_state == EdgeState.MARKED:
                    state = Containment.INSIDE
                    break

            result.append(FaceNetwork(network_for_face(grid, face), state))
        return _unique(result)

    @staticmethod
    def _connected_networks(grid: LoopyGrid, networks: List[FaceNetwork]) -> List[FaceNetwork]:
        """Networks across a marked edge from ``networks``, on the opposite side."""
        visited = set(networks)
        result = []
        for network in networks:
            for faces in neighboring_networks_for(grid, network.faces):
                neighbor = FaceNetwork(faces, network.state.reversed)
                if neighbor not in visited:
                    visited.add(neighbor)
                    result.append(neighbor)
        return result

    @staticmethod
    def _process_outer_edges(grid: LoopyGrid, network: FaceNetwork):
        if network.state == Containment.UNKNOWN:
            return
        state = EdgeState.MARKED if network.state == Containment.INSIDE else EdgeState.DISABLED
        for face in sorted(network.faces):
            grid.set_edges(state, grid.non_shared_edges(face))

    @staticmethod
    def _extend_enclosed(grid: LoopyGrid, networks: List[FaceNetwork]):
        known = []
        seen = set()
        for network in networks:
            if network.state == Containment.UNKNOWN or network.faces in seen:
                continue
            seen.add(network.faces)
            known.append(network)

        inside_count = sum(1 for n in known if n.state == Containment.INSIDE)

        for network in known:
            boundary = _boundary_edges(grid, network.faces)
            normal = [e for e in boundary if grid.edge_state(e) == EdgeState.NORMAL]
            if len(normal) != 1:
                continue

            edge = normal[0]
            is_border = len(grid.faces_sharing_edge(edge)) == 1

            if network.state == Containment.OUTSIDE:
                if any(
                    grid.edge_state(e) == EdgeState.DISABLED
                    and len(grid.faces_sharing_edge(e)) == 1
                    for e in boundary
                ):
                    continue
                grid.set_edge_state(edge, EdgeState.DISABLED)
            elif inside_count >= 2 and not is_border:
                grid.set_edge_state(edge, EdgeState.DISABLED)


def _boundary_edges(grid: LoopyGrid, faces: FrozenSet[int]) -> List[int]:
    """Edges of ``faces`` not shared between two faces of the same set."""
    result = []
    for face in sorted(faces):
        for edge in grid.edges_for_face(face):
            if edge in result:
                continue
            sharing = grid.faces_sharing_edge(edge)
            if len(sharing) > 1 and all(f in faces for f in sharing):
                continue
            result.append(edge)
    return result


def _unique(networks: List[FaceNetwork]) -> List[FaceNetwork]:
    seen = set()
    result = []
    for network in networks:
        if network not in seen:
            seen.add(network)
            result.append(network)
    return result
