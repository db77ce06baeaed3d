import unittest
import sys
import os

# Add project root to path
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from loopy_solver.generators.grid_loader import load_from_game_id, make_generator
from loopy_solver.generators.great_hexagon_generator import GreatHexagonGridGenerator
from loopy_solver.generators.honeycomb_generator import HoneycombGridGenerator
from loopy_solver.generators.square_generator import SquareGridGenerator
from loopy_solver.solvers.solver import SolveResult, Solver
from loopy_solver.solvers.solver_errors import GameIDError, UnsupportedGridTypeError

n = None


class TestSquareGridGenerator(unittest.TestCase):
    """Tests for the square lattice generator."""

    def setUp(self):
        self.gen = SquareGridGenerator(3, 2)

    def test_counts(self):
        grid = self.gen.generate()
        self.assertEqual(len(grid.face_ids), 6)
        self.assertEqual(grid.vertex_count, 12)
        self.assertEqual(len(grid.edge_ids), 17)

    def test_face_edge_order(self):
        grid = self.gen.generate()
        top, right, bottom, left = grid.edges_for_face(self.gen.face_id(1, 1))
        self.assertEqual(grid.polygon_for(4)[0], (1, 1))
        self.assertEqual(sorted(grid.vertices[v] for v in grid.edge_vertices(top)), [(1, 1), (2, 1)])
        self.assertEqual(sorted(grid.vertices[v] for v in grid.edge_vertices(left)), [(1, 1), (1, 2)])

    def test_hints(self):
        self.gen.set_hint_at(2, 0, 3)
        self.gen.set_hints_at_row(1, [0, n, 1])
        grid = self.gen.generate()

        self.assertEqual([grid.hint_for_face(f) for f in grid.face_ids], [n, n, 3, 0, n, 1])
        self.assertEqual(self.gen.hint_at(2, 1), 1)

    def test_clearing_hint(self):
        self.gen.set_hint_at(0, 0, 2)
        self.gen.set_hint_at(0, 0, None)
        self.assertIsNone(self.gen.generate().hint_for_face(0))

    def test_row_of_wrong_width(self):
        with self.assertRaises(ValueError):
            self.gen.set_hints_at_row(0, [1, 2])


class TestHoneycombGridGenerator(unittest.TestCase):
    def test_shared_edges(self):
        grid = HoneycombGridGenerator(3, 2).generate()
        self.assertEqual(len(grid.face_ids), 6)
        # Second hexagon of the first row reuses an edge of the first one
        self.assertEqual(grid.edges_for_face(1), [6, 7, 8, 9, 10, 2])

    def test_load_hints(self):
        gen = HoneycombGridGenerator(5, 5)
        gen.load_hints("55c32b43544b4f22")
        grid = gen.generate()

        self.assertEqual(
            [grid.hint_for_face(f) for f in grid.face_ids],
            [
                5, 5, n, n, n,
                3, 2, n, n, 4,
                3, 5, 4, 4, n,
                n, 4, n, n, n,
                n, n, n, 2, 2,
            ],
        )


class TestGreatHexagonGridGenerator(unittest.TestCase):
    def test_face_count(self):
        cases = {
            (1, 1): 1,
            (2, 1): 3,
            (2, 2): 11,
            (3, 2): 19,
            (3, 3): 33,
            (2, 3): 19,
            (4, 3): 47,
            (4, 5): 87,
            (5, 4): 87,
        }
        for (width, height), expected in cases.items():
            with self.subTest(width=width, height=height):
                self.assertEqual(GreatHexagonGridGenerator(width, height).face_count, expected)

    def test_face_shapes(self):
        grid = GreatHexagonGridGenerator(2, 2).generate()
        sizes = sorted(len(grid.edges_for_face(f)) for f in grid.face_ids)
        self.assertEqual(sizes.count(6), 4)
        self.assertEqual(sizes.count(3), 2)
        self.assertEqual(sizes.count(4), 5)

    def test_faces_follow_game_id_order(self):
        gen = GreatHexagonGridGenerator(3, 3)
        gen.load_hints("51b2a21b5b2a1a13c2b2a2133a3")
        grid = gen.generate()

        # Hexagon, square below, square below right, triangle below right
        self.assertEqual([len(grid.edges_for_face(f)) for f in range(4)], [6, 4, 4, 3])
        self.assertEqual([grid.hint_for_face(f) for f in range(5)], [5, 1, n, n, 2])
        self.assertEqual(len(grid.edges_for_face(4)), 6)

    def test_game_id_is_solvable(self):
        solver = Solver(load_from_game_id("3x3t5:51b2a21b5b2a1a13c2b2a2133a3"))

        self.assertEqual(solver.solve(), SolveResult.SOLVED)
        self.assertTrue(solver.is_solved)


class TestLoadHints(unittest.TestCase):
    """Tests for hint field decoding."""

    def test_letters_encode_large_hints(self):
        gen = SquareGridGenerator(2, 1)
        gen.load_hints("A5")
        self.assertEqual(gen.hints, {0: 10, 1: 5})

    def test_lowercase_letters_skip_faces(self):
        gen = SquareGridGenerator(3, 2)
        gen.load_hints("b1c")
        self.assertEqual(gen.hints, {2: 1})

    def test_invalid_character(self):
        gen = SquareGridGenerator(2, 1)
        with self.assertRaises(GameIDError) as ctx:
            gen.load_hints("1!")
        self.assertEqual(ctx.exception.position, 1)

    def test_short_field(self):
        gen = SquareGridGenerator(3, 1)
        with self.assertRaises(GameIDError) as ctx:
            gen.load_hints("12")
        self.assertEqual(ctx.exception.position, 2)


class TestGridLoader(unittest.TestCase):
    """Tests for game ID loading."""

    def test_square_grid(self):
        grid = load_from_game_id("3x5t0:a2a301b23c2a")
        self.assertEqual(len(grid.face_ids), 15)
        self.assertEqual(grid.hint_for_face(1), 2)
        self.assertEqual(grid.hint_for_face(4), 0)
        self.assertIsNone(grid.hint_for_face(6))

    def test_honeycomb(self):
        grid = load_from_game_id("3x4t2:145d31c")
        self.assertEqual(len(grid.face_ids), 12)
        self.assertEqual(grid.hint_for_face(0), 1)

    def test_great_hexagon(self):
        grid = load_from_game_id("5x4t5:5c413a2b2b2a32d52b321c2a1a2e2133e2421a4a1a2e2d12b23a1a432b5a")
        self.assertEqual(len(grid.face_ids), GreatHexagonGridGenerator(5, 4).face_count)

    def test_make_generator(self):
        gen = make_generator("3x5t0:a2a301b23c2a")
        self.assertIsInstance(gen, SquareGridGenerator)
        self.assertEqual((gen.width, gen.height), (3, 5))

    def test_unsupported_grid_type(self):
        with self.assertRaises(UnsupportedGridTypeError) as ctx:
            load_from_game_id("5x4t99:0")
        self.assertEqual(ctx.exception.grid_type, 99)

    def test_malformed_game_id(self):
        with self.assertRaises(GameIDError):
            load_from_game_id("not-a-game-id")

    def test_error_carries_game_id(self):
        with self.assertRaises(GameIDError) as ctx:
            load_from_game_id("2x1t0:1")
        self.assertEqual(ctx.exception.game_id, "2x1t0:1")
        self.assertEqual(ctx.exception.position, 1)


if __name__ == '__main__':
    unittest.main()
