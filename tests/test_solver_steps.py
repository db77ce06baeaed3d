import unittest
import sys
import os

# Add project root to path
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from loopy_solver.edge import EdgeState
from loopy_solver.generators.honeycomb_generator import HoneycombGridGenerator
from loopy_solver.generators.square_generator import SquareGridGenerator
from loopy_solver.grid_controller import LoopyGridController
from loopy_solver.solvers.solver_step import SolverStepDelegate
from loopy_solver.solvers.steps.bifurcation import BifurcationSolverStep
from loopy_solver.solvers.steps.corner import CornerSolverStep
from loopy_solver.solvers.steps.corner_entry import CornerEntrySolverStep
from loopy_solver.solvers.steps.dead_end_removal import DeadEndRemovalSolverStep
from loopy_solver.solvers.steps.exact_edge_count import ExactEdgeCountSolverStep
from loopy_solver.solvers.steps.neighboring_semi_complete_faces import (
    NeighboringSemiCompleteFacesSolverStep,
)
from loopy_solver.solvers.steps.neighboring_short_faces import NeighboringShortFacesSolverStep
from loopy_solver.solvers.steps.single_path import SinglePathSolverStep
from loopy_solver.solvers.steps.sole_path_edge_extender import SolePathEdgeExtenderSolverStep
from loopy_solver.solvers.steps.two_edges_per_vertex import TwoEdgesPerVertexSolverStep
from loopy_solver.solvers.steps.zero import ZeroSolverStep

N = EdgeState.NORMAL
M = EdgeState.MARKED
D = EdgeState.DISABLED


def states(grid, face):
    return [grid.edge_state(e) for e in grid.edges_for_face(face)]


class TestZeroSolverStep(unittest.TestCase):
    """Tests for zero-hint handling."""

    def setUp(self):
        self.sut = ZeroSolverStep()
        self.delegate = SolverStepDelegate()

    def test_is_ephemeral(self):
        self.assertTrue(self.sut.is_ephemeral)

    def test_disables_zero_faces(self):
        gen = SquareGridGenerator(2, 2)
        gen.set_hint_at(1, 0, 0)
        result = self.sut.apply(gen.generate(), self.delegate)

        self.assertEqual(states(result, 1), [D, D, D, D])
        self.assertEqual(states(result, 3), [D, N, N, N])

    def test_runs_once_per_delegate(self):
        gen = SquareGridGenerator(2, 2)
        self.sut.apply(gen.generate(), self.delegate)

        gen.set_hint_at(0, 0, 0)
        grid = gen.generate()
        self.assertEqual(self.sut.apply(grid, self.delegate), grid)


class TestExactEdgeCountSolverStep(unittest.TestCase):
    def setUp(self):
        self.sut = ExactEdgeCountSolverStep()
        self.delegate = SolverStepDelegate()

    def test_marks_remaining_enabled_edges(self):
        gen = SquareGridGenerator(2, 1)
        gen.set_hint_at(0, 0, 2)
        gen.set_hint_at(1, 0, 3)
        grid = gen.generate()
        grid.set_edges(D, [0, 3])

        result = self.sut.apply(grid, self.delegate)

        self.assertEqual(states(result, 0), [D, M, M, D])
        self.assertEqual(states(result, 1), [N, N, N, M])

    def test_disables_leftovers_of_satisfied_face(self):
        gen = SquareGridGenerator(2, 1)
        gen.set_hint_at(0, 0, 1)
        grid = gen.generate()
        grid.set_edge_state(0, M)

        result = self.sut.apply(grid, self.delegate)
        self.assertEqual(states(result, 0), [M, D, D, D])


class TestDeadEndRemovalSolverStep(unittest.TestCase):
    def setUp(self):
        self.sut = DeadEndRemovalSolverStep()
        self.delegate = SolverStepDelegate()

    def test_cascades_along_border(self):
        grid = SquareGridGenerator(2, 1).generate()
        grid.set_edge_state(0, D)

        result = self.sut.apply(grid, self.delegate)

        self.assertEqual(states(result, 0), [D, N, D, D])
        self.assertEqual(states(result, 1), [N, N, N, N])

    def test_input_grid_untouched(self):
        grid = SquareGridGenerator(2, 1).generate()
        grid.set_edge_state(0, D)
        self.sut.apply(grid, self.delegate)
        self.assertEqual(grid.edges_with_state(D), [0])

    def test_stranded_marked_edge_is_reported(self):
        controller = LoopyGridController(SquareGridGenerator(1, 1).generate())
        controller.set_edge(M, 0, 0)
        controller.set_edge(D, 0, 3)

        result = self.sut.apply(controller.grid, self.delegate)

        self.assertEqual(states(result, 0), [M, D, D, D])
        self.assertTrue(self.delegate.is_inconsistent)


class TestTwoEdgesPerVertexSolverStep(unittest.TestCase):
    def test_disables_third_edges(self):
        controller = LoopyGridController(SquareGridGenerator(2, 2).generate())
        controller.set_edges(M, 0, [1, 2])

        result = TwoEdgesPerVertexSolverStep().apply(controller.grid, SolverStepDelegate())

        self.assertEqual(states(result, 3), [D, N, N, D])
        self.assertEqual(states(result, 0), [N, M, M, N])


class TestSolePathEdgeExtenderSolverStep(unittest.TestCase):
    def test_extends_line_along_forced_edges(self):
        controller = LoopyGridController(SquareGridGenerator(2, 2).generate())
        controller.set_edge(D, 0, 1)
        controller.set_edge(M, 0, 3)

        result = SolePathEdgeExtenderSolverStep().apply(controller.grid, SolverStepDelegate())

        self.assertEqual(states(result, 0), [M, D, N, M])
        self.assertEqual(states(result, 1), [M, M, N, D])
        self.assertEqual(states(result, 2), [N, N, N, N])
        self.assertEqual(states(result, 3), [N, N, N, N])


class TestCornerSolverStep(unittest.TestCase):
    """Tests for hinted faces with a single run of outer edges."""

    def setUp(self):
        self.sut = CornerSolverStep()
        self.delegate = SolverStepDelegate()

    def test_corner_one_disables_corner(self):
        gen = SquareGridGenerator(3, 3)
        gen.set_hint_at(0, 0, 1)
        result = self.sut.apply(gen.generate(), self.delegate)
        self.assertEqual(states(result, 0), [D, N, N, D])

    def test_corner_three_marks_corner(self):
        gen = SquareGridGenerator(3, 3)
        gen.set_hint_at(0, 0, 3)
        result = self.sut.apply(gen.generate(), self.delegate)
        self.assertEqual(states(result, 0), [M, N, N, M])

    def test_corner_two_marks_exits(self):
        gen = SquareGridGenerator(3, 3)
        gen.set_hint_at(0, 0, 2)
        result = self.sut.apply(gen.generate(), self.delegate)

        self.assertEqual(states(result, 0), [N, N, N, N])
        self.assertEqual(states(result, 1), [M, N, N, N])
        self.assertEqual(states(result, 3), [N, N, N, M])

    def test_corner_two_hijacked_by_semicomplete_face(self):
        gen = SquareGridGenerator(3, 3)
        gen.set_hint_at(0, 0, 2)
        gen.set_hint_at(1, 1, 3)
        result = self.sut.apply(gen.generate(), self.delegate)

        self.assertEqual(states(result, 0), [M, D, D, M])

    def test_disabled_run_is_not_remarked(self):
        gen = SquareGridGenerator(3, 3)
        gen.set_hint_at(0, 0, 2)
        controller = LoopyGridController(gen.generate())
        controller.set_edge(D, 3, 3)

        result = self.sut.apply(controller.grid, self.delegate)
        self.assertEqual(states(result, 0), [D, N, D, D])

    def test_skips_unchanged_faces(self):
        gen = SquareGridGenerator(3, 3)
        gen.set_hint_at(0, 0, 3)
        grid = gen.generate()
        first = self.sut.apply(grid, self.delegate)
        self.assertNotEqual(first, grid)

        metadata = self.delegate.metadata_for_step(CornerSolverStep)
        self.assertTrue(metadata.matches_stored_face_state(0, first))


class TestCornerEntrySolverStep(unittest.TestCase):
    """Tests for loose line ends arriving at face corners."""

    def setUp(self):
        self.sut = CornerEntrySolverStep()
        self.delegate = SolverStepDelegate()

    def test_line_entering_one_face(self):
        gen = SquareGridGenerator(2, 2)
        gen.set_hint_at(1, 1, 1)
        grid = gen.generate()
        grid.set_edge_state(5, M)

        result = self.sut.apply(grid, self.delegate)
        self.assertEqual(states(result, 3), [N, D, D, D])

    def test_line_forced_down_the_border(self):
        gen = SquareGridGenerator(2, 3)
        gen.set_hint_at(1, 1, 1)
        grid = gen.generate()
        grid.set_edge_state(5, M)
        grid.set_edge_state(6, D)

        result = self.sut.apply(grid, self.delegate)
        self.assertEqual(states(result, 3), [D, N, D, D])

    def test_long_run_exceeding_hint(self):
        gen = SquareGridGenerator(2, 3)
        gen.set_hint_at(1, 1, 1)
        grid = gen.generate()
        grid.set_edge_state(5, M)
        grid.set_edges(D, [8, 11, 13])

        result = self.sut.apply(grid, self.delegate)
        self.assertEqual(states(result, 3), [N, D, D, D])


class TestSinglePathSolverStep(unittest.TestCase):
    def test_marks_isolated_run(self):
        gen = SquareGridGenerator(3, 3)
        gen.set_hint_at(1, 1, 3)
        controller = LoopyGridController(gen.generate())
        controller.set_edge(D, 3, 2)
        controller.set_edge(D, 5, 2)
        controller.set_edge(D, 6, 1)
        controller.set_edge(D, 7, 1)

        result = SinglePathSolverStep().apply(controller.grid, SolverStepDelegate())
        self.assertEqual(states(result, 4), [N, M, M, M])

    def test_run_longer_than_hint_is_left_alone(self):
        gen = SquareGridGenerator(3, 3)
        gen.set_hint_at(0, 0, 2)
        controller = LoopyGridController(gen.generate())
        controller.set_edge(D, 3, 3)

        result = SinglePathSolverStep().apply(controller.grid, SolverStepDelegate())
        self.assertEqual(result, controller.grid)

    def test_open_face_unchanged(self):
        gen = SquareGridGenerator(3, 3)
        gen.set_hint_at(1, 1, 3)
        grid = gen.generate()

        result = SinglePathSolverStep().apply(grid, SolverStepDelegate())
        self.assertEqual(result, grid)


class TestBifurcationSolverStep(unittest.TestCase):
    def test_marks_common_exit(self):
        gen = HoneycombGridGenerator(3, 2)
        gen.set_hint(1, 4)
        grid = gen.generate()
        grid.set_edges(M, [1, 6, 7, 8])
        grid.set_edges(D, [2, 15, 14])

        expected = grid.copy()
        expected.set_edge_state(16, M)

        result = BifurcationSolverStep().apply(grid, SolverStepDelegate())
        self.assertEqual(result, expected)


class TestNeighboringSemiCompleteFacesSolverStep(unittest.TestCase):
    def setUp(self):
        self.sut = NeighboringSemiCompleteFacesSolverStep()
        self.delegate = SolverStepDelegate()

    def test_touching_edge_wise(self):
        gen = SquareGridGenerator(4, 2)
        gen.set_hint_at(1, 0, 3)
        gen.set_hint_at(2, 0, 3)

        result = self.sut.apply(gen.generate(), self.delegate)

        self.assertEqual(states(result, 0), [N, M, N, N])
        self.assertEqual(states(result, 1), [N, M, N, M])
        self.assertEqual(states(result, 2), [N, M, N, M])
        self.assertEqual(states(result, 3), [N, N, N, M])
        self.assertEqual(states(result, 4), [N, N, N, N])
        self.assertEqual(states(result, 5), [N, D, N, N])
        self.assertEqual(states(result, 6), [N, N, N, D])
        self.assertEqual(states(result, 7), [N, N, N, N])

    def test_sharing_vertex(self):
        gen = SquareGridGenerator(2, 2)
        gen.set_hint_at(0, 0, 3)
        gen.set_hint_at(1, 1, 3)

        result = self.sut.apply(gen.generate(), self.delegate)

        self.assertEqual(states(result, 0), [M, N, N, M])
        self.assertEqual(states(result, 1), [N, N, N, N])
        self.assertEqual(states(result, 2), [N, N, N, N])
        self.assertEqual(states(result, 3), [N, M, M, N])


class TestNeighboringShortFacesSolverStep(unittest.TestCase):
    """Tests for pairs of hinted faces too short to share a line."""

    def setUp(self):
        self.sut = NeighboringShortFacesSolverStep()
        self.delegate = SolverStepDelegate()

    def test_two_ones_on_border(self):
        gen = SquareGridGenerator(4, 2)
        gen.set_hint_at(1, 0, 1)
        gen.set_hint_at(2, 0, 1)

        result = self.sut.apply(gen.generate(), self.delegate)

        self.assertEqual(states(result, 1), [N, D, N, N])
        self.assertEqual(states(result, 2), [N, N, N, D])
        for face in (0, 3, 4, 5, 6, 7):
            self.assertEqual(states(result, face), [N, N, N, N])

    def test_one_and_two_with_blocked_neighbor(self):
        gen = SquareGridGenerator(4, 2)
        gen.set_hint_at(1, 0, 1)
        gen.set_hint_at(2, 0, 2)
        controller = LoopyGridController(gen.generate())
        controller.set_edges(D, 3, [0, 1])

        result = self.sut.apply(controller.grid, self.delegate)

        self.assertEqual(states(result, 1), [N, D, N, N])
        self.assertEqual(states(result, 2), [N, N, N, D])
        self.assertEqual(states(result, 3), [D, D, N, N])

    def test_two_twos_unchanged(self):
        gen = SquareGridGenerator(4, 2)
        gen.set_hint_at(1, 0, 2)
        gen.set_hint_at(2, 0, 2)
        grid = gen.generate()

        self.assertEqual(self.sut.apply(grid, self.delegate), grid)

    def test_runs_once_per_delegate(self):
        gen = SquareGridGenerator(4, 2)
        gen.set_hint_at(1, 0, 1)
        gen.set_hint_at(2, 0, 1)
        grid = gen.generate()

        self.sut.apply(grid, self.delegate)
        self.assertEqual(self.sut.apply(grid, self.delegate), grid)


if __name__ == '__main__':
    unittest.main()
