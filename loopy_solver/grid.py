"""
Loopy Grid
==========
Graph data model for the solver: vertices, edges with a tri-state status
and faces with optional hints.

- Topology (vertices, edge endpoints, faces, adjacency) is shared between
  copies and only cloned when a copy is edited structurally
- Edge states live in a numpy int8 vector, so copies, equality and hashing
  are cheap and exact
"""

from __future__ import annotations

import copy as _copy
from typing import Dict, Iterable, List, NamedTuple, Optional, Tuple

import numpy as np

from loopy_solver.edge import Edge, EdgeState
from loopy_solver.face import Face


class Vertex(NamedTuple):
    x: float
    y: float


class _Topology:
    """Structure of a grid, independent of edge states."""

    def __init__(self):
        self.vertices: List[Vertex] = []
        self.vertex_lookup: Dict[Tuple[float, float], int] = {}
        self.edges: List[Edge] = []
        self.edge_lookup: Dict[Tuple[int, int], int] = {}
        self.faces: List[Face] = []

        self.vertex_edges: List[List[int]] = []
        self.vertex_faces: List[List[int]] = []
        self.edge_faces: List[List[int]] = []

        self.edge_starts = np.zeros(0, dtype=np.int64)
        self.edge_ends = np.zeros(0, dtype=np.int64)

        # Flagged once a grid copy references this object
        self.shared = False

    def clone(self) -> "_Topology":
        other = _copy.deepcopy(self)
        other.shared = False
        return other

    def __eq__(self, other):
        if self is other:
            return True
        if not isinstance(other, _Topology):
            return NotImplemented
        return (
            self.edges == other.edges
            and self.faces == other.faces
            and len(self.vertices) == len(other.vertices)
        )

    def __hash__(self):
        return hash((len(self.vertices), len(self.edges), len(self.faces)))


class LoopyGrid:
    """
    A Loopy puzzle grid.

    Edges and faces are referenced by integer id (their index). Rules treat
    the grid as a value: they call ``copy()`` and edit the copy.
    """

    def __init__(self):
        self._topology = _Topology()
        self._states = np.zeros(0, dtype=np.int8)
        self._ignore_disabled = False

    # ── Construction ──────────────────────────────────────────

    def _own_topology(self) -> _Topology:
        if self._topology.shared:
            self._topology = self._topology.clone()
        return self._topology

    def add_or_get_vertex(self, x: float, y: float) -> int:
        topology = self._own_topology()
        key = (x, y)
        index = topology.vertex_lookup.get(key)
        if index is not None:
            return index

        index = len(topology.vertices)
        topology.vertices.append(Vertex(x, y))
        topology.vertex_lookup[key] = index
        topology.vertex_edges.append([])
        topology.vertex_faces.append([])
        return index

    def add_vertex(self, vertex: Vertex) -> int:
        return self.add_or_get_vertex(vertex.x, vertex.y)

    def create_edge(self, start: int, end: int) -> int:
        """Return the id of the edge between two vertices, creating it if needed."""
        topology = self._own_topology()
        edge = Edge(start, end)
        key = edge.vertices
        edge_id = topology.edge_lookup.get(key)
        if edge_id is not None:
            return edge_id

        edge_id = len(topology.edges)
        topology.edges.append(edge)
        topology.edge_lookup[key] = edge_id
        topology.edge_faces.append([])
        topology.vertex_edges[edge.start].append(edge_id)
        topology.vertex_edges[edge.end].append(edge_id)
        topology.edge_starts = np.append(topology.edge_starts, edge.start)
        topology.edge_ends = np.append(topology.edge_ends, edge.end)

        self._states = np.append(self._states, np.int8(EdgeState.NORMAL))
        return edge_id

    def create_face(self, vertex_indices: List[int], hint: Optional[int] = None) -> int:
        """Create a face over an ordered vertex cycle, sharing existing edges."""
        topology = self._own_topology()
        face_id = len(topology.faces)
        face = Face(indices=list(vertex_indices), hint=hint)

        count = len(vertex_indices)
        for i in range(count):
            start = vertex_indices[i]
            end = vertex_indices[(i + 1) % count]
            edge_id = self.create_edge(start, end)
            face.local_to_global_edges.append(edge_id)
            topology.edge_faces[edge_id].append(face_id)

        for vertex in vertex_indices:
            topology.vertex_faces[vertex].append(face_id)

        topology.faces.append(face)
        return face_id

    def set_hint(self, face: int, hint: Optional[int]):
        topology = self._own_topology()
        topology.faces[face].hint = hint

    # ── Value semantics ───────────────────────────────────────

    def copy(self) -> "LoopyGrid":
        other = LoopyGrid.__new__(LoopyGrid)
        self._topology.shared = True
        other._topology = self._topology
        other._states = self._states.copy()
        other._ignore_disabled = self._ignore_disabled
        return other

    def ignoring_disabled_edges(self) -> "LoopyGrid":
        """A copy whose vertex adjacency queries skip disabled edges."""
        other = self.copy()
        other._ignore_disabled = True
        return other

    def __eq__(self, other):
        if not isinstance(other, LoopyGrid):
            return NotImplemented
        return (
            np.array_equal(self._states, other._states)
            and self._topology == other._topology
        )

    def __ne__(self, other):
        result = self.__eq__(other)
        if result is NotImplemented:
            return result
        return not result

    def __hash__(self):
        return hash(self._states.tobytes())

    def state_snapshot(self) -> bytes:
        """Exact byte image of the edge-state vector."""
        return self._states.tobytes()

    @property
    def states(self) -> np.ndarray:
        view = self._states.view()
        view.flags.writeable = False
        return view

    # ── Basic accessors ───────────────────────────────────────

    @property
    def vertices(self) -> List[Vertex]:
        return self._topology.vertices

    @property
    def edges(self) -> List[Edge]:
        return [self.edge_with_id(e) for e in range(len(self._topology.edges))]

    @property
    def faces(self) -> List[Face]:
        return self._topology.faces

    @property
    def vertex_count(self) -> int:
        return len(self._topology.vertices)

    @property
    def edge_ids(self) -> range:
        return range(len(self._topology.edges))

    @property
    def face_ids(self) -> range:
        return range(len(self._topology.faces))

    def edge_with_id(self, edge: int) -> Edge:
        base = self._topology.edges[edge]
        return Edge(base.start, base.end, EdgeState(int(self._states[edge])))

    def edge_id(self, start: int, end: int) -> Optional[int]:
        """Return the id of the edge between two vertices, if any."""
        return self._topology.edge_lookup.get(Edge(start, end).vertices)

    def edge_vertices(self, edge: int) -> Tuple[int, int]:
        base = self._topology.edges[edge]
        return base.start, base.end

    def edge_state(self, edge: int) -> EdgeState:
        return EdgeState(int(self._states[edge]))

    def set_edge_state(self, edge: int, state: EdgeState):
        self._states[edge] = state

    def set_edges(self, state: EdgeState, edges: Iterable[int]):
        for edge in edges:
            self._states[edge] = state

    def set_edges_for_face(self, state: EdgeState, face: int):
        self.set_edges(state, self._topology.faces[face].local_to_global_edges)

    def face(self, face: int) -> Face:
        return self._topology.faces[face]

    def hint_for_face(self, face: int) -> Optional[int]:
        return self._topology.faces[face].hint

    def edges_for_face(self, face: int) -> List[int]:
        return self._topology.faces[face].local_to_global_edges

    def vertices_for_face(self, face: int) -> List[int]:
        return self._topology.faces[face].indices

    def polygon_for(self, face: int) -> List[Vertex]:
        return [self._topology.vertices[v] for v in self._topology.faces[face].indices]

    # ── Topology queries ──────────────────────────────────────

    def edges_sharing(self, vertex: int) -> List[int]:
        """Edges incident to a vertex."""
        edges = self._topology.vertex_edges[vertex]
        if self._ignore_disabled:
            return [e for e in edges if self._states[e] != EdgeState.DISABLED]
        return list(edges)

    def faces_sharing_vertex(self, vertex: int) -> List[int]:
        return list(self._topology.vertex_faces[vertex])

    def faces_sharing_edge(self, edge: int) -> List[int]:
        return list(self._topology.edge_faces[edge])

    def face_contains_edge(self, face: int, edge: int) -> bool:
        return edge in self._topology.faces[face].local_to_global_edges

    def face_contains_vertex(self, face: int, vertex: int) -> bool:
        return vertex in self._topology.faces[face].indices

    def edge_count(self, state: EdgeState, face: int) -> int:
        """Number of a face's edges in the given state."""
        states = self._states
        return sum(1 for e in self._topology.faces[face].local_to_global_edges if states[e] == state)

    def enabled_edge_count(self, face: int) -> int:
        states = self._states
        return sum(
            1 for e in self._topology.faces[face].local_to_global_edges
            if states[e] != EdgeState.DISABLED
        )

    def marked_edges_for_vertex(self, vertex: int) -> int:
        states = self._states
        return sum(1 for e in self._topology.vertex_edges[vertex] if states[e] == EdgeState.MARKED)

    def edges_with_state(self, state: EdgeState) -> List[int]:
        return np.flatnonzero(self._states == state).tolist()

    def marked_degree_per_vertex(self) -> np.ndarray:
        """Count of marked edges touching each vertex."""
        topology = self._topology
        mask = self._states == EdgeState.MARKED
        count = len(topology.vertices)
        return (
            np.bincount(topology.edge_starts[mask], minlength=count)
            + np.bincount(topology.edge_ends[mask], minlength=count)
        )

    def is_face_solved(self, face: int) -> bool:
        hint = self._topology.faces[face].hint
        if hint is None:
            return True
        return self.edge_count(EdgeState.MARKED, face) == hint

    def is_face_semicomplete(self, face: int) -> bool:
        return self._topology.faces[face].is_semicomplete

    def shared_edge(self, first: int, second: int) -> Optional[int]:
        """The edge two faces have in common, if any."""
        other = self._topology.faces[second].local_to_global_edges
        for edge in self._topology.faces[first].local_to_global_edges:
            if edge in other:
                return edge
        return None

    def shared_vertices(self, first: int, second: int) -> List[int]:
        other = self._topology.faces[second].indices
        return [v for v in self._topology.faces[first].indices if v in other]

    def faces_share_edge(self, first: int, second: int) -> bool:
        return self.shared_edge(first, second) is not None

    def faces_edge_adjacent(self, face: int) -> List[int]:
        """Faces sharing at least one edge with ``face``."""
        result = []
        for edge in self._topology.faces[face].local_to_global_edges:
            for other in self._topology.edge_faces[edge]:
                if other != face and other not in result:
                    result.append(other)
        return result

    def faces_vertex_adjacent(self, face: int) -> List[int]:
        """Faces touching ``face`` only through vertices."""
        edge_adjacent = self.faces_edge_adjacent(face)
        result = []
        for vertex in self._topology.faces[face].indices:
            for other in self._topology.vertex_faces[vertex]:
                if other != face and other not in edge_adjacent and other not in result:
                    result.append(other)
        return result

    def edges_connected(self, edge: int) -> List[int]:
        """Edges touching either endpoint of ``edge``, excluding itself."""
        start, end = self.edge_vertices(edge)
        result = [e for e in self.edges_sharing(start) if e != edge]
        result.extend(e for e in self.edges_sharing(end) if e != edge and e not in result)
        return result

    def edges_share_vertex(self, first: int, second: int) -> bool:
        a_start, a_end = self.edge_vertices(first)
        b_start, b_end = self.edge_vertices(second)
        return a_start in (b_start, b_end) or a_end in (b_start, b_end)

    def shared_vertex_of_edges(self, first: int, second: int) -> Optional[int]:
        return self._topology.edges[first].shared_vertex(self._topology.edges[second])

    def edge_touches_vertex(self, edge: int, vertex: int) -> bool:
        base = self._topology.edges[edge]
        return base.start == vertex or base.end == vertex

    def edges_sharing_vertex_in_face(self, face: int, vertex: int) -> List[int]:
        """The edges of a face touching one of its vertices."""
        return [
            e for e in self._topology.faces[face].local_to_global_edges
            if self.edge_touches_vertex(e, vertex)
        ]

    def non_shared_edges(self, face: int) -> List[int]:
        """Edges of a face that border the outside of the grid."""
        return [
            e for e in self._topology.faces[face].local_to_global_edges
            if self._topology.edge_faces[e] == [face]
        ]

    def __repr__(self):
        marked = int(np.count_nonzero(self._states == EdgeState.MARKED))
        disabled = int(np.count_nonzero(self._states == EdgeState.DISABLED))
        return (
            f"LoopyGrid(vertices={self.vertex_count}, edges={len(self._topology.edges)}, "
            f"faces={len(self._topology.faces)}, marked={marked}, disabled={disabled})"
        )
