"""
Tests for the directional transform, tile spawning and game-over detection.
"""

from unittest import TestCase, main

import numpy as np

from puzzle2048.core import (
    TILE_SPAWN_PROBS,
    Direction,
    Tile,
    board_from_values,
    empty_board,
    fill_cells,
    is_done,
    latent_state,
    merge_row,
    settle,
    slide_and_merge,
    values,
)

generator = np.random.default_rng(42)


def row_of(*cells: int) -> np.ndarray:
    """Build a row of fresh tiles, 0 for an empty cell."""
    row = np.empty(len(cells), dtype=object)
    for index, value in enumerate(cells):
        if value:
            row[index] = Tile(value)
    return row


def row_values(row) -> list[int]:
    return [0 if tile is None else tile.value for tile in row]


def generate_random_board(size: int = 4) -> np.ndarray:
    """Generate a random 2048 grid of values."""
    board = np.zeros((size, size), dtype=np.int64)
    num_tiles = generator.integers(1, size * size + 1)
    tile_values = generator.choice([2, 4, 8, 16, 32, 64, 128], size=num_tiles)
    indices = generator.choice(size * size, size=num_tiles, replace=False)
    board.flat[indices] = tile_values
    return board


# ##>: Board worked out by hand in every direction.
SAMPLE = [[2, 2, 0, 0], [0, 4, 0, 4], [8, 0, 8, 8], [2, 4, 8, 16]]


class TestMergeRow(TestCase):
    """Compact, merge and pad on a single row."""

    def test_four_equal_tiles(self):
        """Two pairs merge, never into a single tile."""
        result = merge_row(row_of(2, 2, 2, 2))

        self.assertEqual(row_values(result.row), [4, 4, 0, 0])
        self.assertEqual(result.score, 8)
        self.assertTrue(result.changed)
        self.assertEqual(result.merged, [4, 4])

    def test_no_chained_merge(self):
        """A freshly merged tile is not compared again with the next one."""
        result = merge_row(row_of(2, 2, 4))

        self.assertEqual(row_values(result.row), [4, 4, 0])
        self.assertEqual(result.score, 4)

    def test_compacts_before_merging(self):
        """Gaps are removed before equal tiles are paired."""
        result = merge_row(row_of(0, 2, 0, 2))

        self.assertEqual(row_values(result.row), [4, 0, 0, 0])
        self.assertEqual(result.score, 4)

    def test_distinct_pairs(self):
        """Each pair merges into its own tile."""
        result = merge_row(row_of(4, 4, 8, 8))

        self.assertEqual(row_values(result.row), [8, 16, 0, 0])
        self.assertEqual(result.score, 24)
        self.assertEqual(result.merged, [8, 16])

    def test_unchanged_row(self):
        """A packed row without equal neighbours does not change."""
        row = row_of(2, 4, 8, 16)
        result = merge_row(row)

        self.assertFalse(result.changed)
        self.assertEqual(result.score, 0)
        for before, after in zip(row, result.row):
            self.assertIs(before, after)

    def test_empty_row(self):
        """An empty row stays empty."""
        result = merge_row(row_of(0, 0, 0, 0))

        self.assertEqual(row_values(result.row), [0, 0, 0, 0])
        self.assertFalse(result.changed)

    def test_tile_identity(self):
        """Survivors keep their identity, merged tiles are new and flagged."""
        row = row_of(2, 0, 4, 4)
        result = merge_row(row)

        self.assertEqual(row_values(result.row), [2, 8, 0, 0])
        self.assertIs(result.row[0], row[0])
        self.assertFalse(result.row[0].just_merged)
        self.assertTrue(result.row[1].just_merged)
        self.assertNotEqual(result.row[1].id, row[2].id)
        self.assertNotEqual(result.row[1].id, row[3].id)

    def test_input_not_modified(self):
        """The source row is left untouched."""
        row = row_of(2, 2, 0, 4)
        merge_row(row)

        self.assertEqual(row_values(row), [2, 2, 0, 4])


class TestDirectionalTransform(TestCase):
    """All four directions, checked by hand and against the left primitive."""

    def test_slide_and_merge(self):
        """Every row of the board slides to the left."""
        board = board_from_values([[2, 2, 4, 4], [0, 2, 2, 4], [2, 0, 0, 2], [2, 2, 2, 2]])
        result = slide_and_merge(board)
        expected = np.array([[4, 8, 0, 0], [4, 4, 0, 0], [4, 0, 0, 0], [4, 4, 0, 0]])

        self.assertEqual(result.score, 28)
        np.testing.assert_array_equal(values(result.board), expected)

    def test_left(self):
        result = latent_state(board_from_values(SAMPLE), Direction.LEFT)
        expected = np.array([[4, 0, 0, 0], [8, 0, 0, 0], [16, 8, 0, 0], [2, 4, 8, 16]])

        np.testing.assert_array_equal(values(result.board), expected)
        self.assertEqual(result.score, 28)
        self.assertTrue(result.changed)

    def test_right(self):
        result = latent_state(board_from_values(SAMPLE), Direction.RIGHT)
        expected = np.array([[0, 0, 0, 4], [0, 0, 0, 8], [0, 0, 8, 16], [2, 4, 8, 16]])

        np.testing.assert_array_equal(values(result.board), expected)
        self.assertEqual(result.score, 28)

    def test_up(self):
        result = latent_state(board_from_values(SAMPLE), Direction.UP)
        expected = np.array([[2, 2, 16, 4], [8, 8, 0, 8], [2, 0, 0, 16], [0, 0, 0, 0]])

        np.testing.assert_array_equal(values(result.board), expected)
        self.assertEqual(result.score, 24)

    def test_down(self):
        result = latent_state(board_from_values(SAMPLE), Direction.DOWN)
        expected = np.array([[0, 0, 0, 0], [2, 0, 0, 4], [8, 2, 0, 8], [2, 8, 16, 16]])

        np.testing.assert_array_equal(values(result.board), expected)
        self.assertEqual(result.score, 24)

    def test_down_merges_from_the_bottom(self):
        """The pair nearest the bottom merges first when moving down."""
        board = board_from_values([[2, 0, 0, 0], [2, 0, 0, 0], [2, 0, 0, 0], [0, 0, 0, 0]])
        result = latent_state(board, Direction.DOWN)

        np.testing.assert_array_equal(values(result.board)[:, 0], [0, 0, 2, 4])

    def test_right_is_mirrored_left(self):
        """right(B) == reverse(left(reverse(B))) row-wise."""
        for _ in range(200):
            grid = generate_random_board()
            right = latent_state(board_from_values(grid), Direction.RIGHT)
            left = latent_state(board_from_values(np.fliplr(grid)), Direction.LEFT)

            np.testing.assert_array_equal(values(right.board), np.fliplr(values(left.board)))
            self.assertEqual(right.score, left.score)
            self.assertEqual(right.changed, left.changed)

    def test_up_is_transposed_left(self):
        """up(B) == transpose(left(transpose(B)))."""
        for _ in range(200):
            grid = generate_random_board()
            up = latent_state(board_from_values(grid), Direction.UP)
            left = latent_state(board_from_values(grid.T), Direction.LEFT)

            np.testing.assert_array_equal(values(up.board), values(left.board).T)
            self.assertEqual(up.score, left.score)

    def test_down_is_transposed_right(self):
        """down(B) == transpose(right(transpose(B)))."""
        for _ in range(200):
            grid = generate_random_board()
            down = latent_state(board_from_values(grid), Direction.DOWN)
            right = latent_state(board_from_values(grid.T), Direction.RIGHT)

            np.testing.assert_array_equal(values(down.board), values(right.board).T)
            self.assertEqual(down.score, right.score)

    def test_score_is_sum_of_merges(self):
        """The score of a move is the sum of the merged tile values."""
        for _ in range(100):
            board = board_from_values(generate_random_board())
            for direction in Direction:
                result = latent_state(board, direction)
                self.assertEqual(result.score, sum(result.merged))

    def test_board_not_modified(self):
        """A transform never mutates the board it reads."""
        board = board_from_values(SAMPLE)
        for direction in Direction:
            latent_state(board, direction)

        np.testing.assert_array_equal(values(board), np.array(SAMPLE))

    def test_no_change_reported(self):
        """A move that changes nothing says so."""
        board = board_from_values([[2, 0, 0, 0], [4, 0, 0, 0], [8, 0, 0, 0], [16, 0, 0, 0]])
        result = latent_state(board, Direction.LEFT)

        self.assertFalse(result.changed)
        self.assertEqual(result.score, 0)


class TestSpawning(TestCase):
    """Random tile placement."""

    def test_fills_requested_cells(self):
        board = empty_board()
        fill_cells(board, 2, np.random.default_rng(0))

        grid = values(board)
        self.assertEqual(np.count_nonzero(grid), 2)
        self.assertTrue(np.all(np.isin(grid[grid != 0], [2, 4])))

    def test_full_board_left_alone(self):
        grid = np.array([[2, 4, 2, 4], [4, 2, 4, 2], [2, 4, 2, 4], [4, 2, 4, 2]])
        board = board_from_values(grid)
        fill_cells(board, 1, np.random.default_rng(0))

        np.testing.assert_array_equal(values(board), grid)

    def test_fills_at_most_empty_cells(self):
        board = board_from_values([[2, 4, 2, 4], [4, 2, 4, 2], [2, 4, 2, 4], [4, 2, 0, 0]])
        fill_cells(board, 5, np.random.default_rng(0))

        self.assertEqual(np.count_nonzero(values(board)), 16)

    def test_seed_reproducibility(self):
        first, second = empty_board(), empty_board()
        fill_cells(first, 2, np.random.default_rng(7))
        fill_cells(second, 2, np.random.default_rng(7))

        np.testing.assert_array_equal(values(first), values(second))

    def test_value_distribution(self):
        """Spawned values follow the 90/10 split."""
        rng = np.random.default_rng(123)
        counts = {2: 0, 4: 0}
        for _ in range(2000):
            board = empty_board()
            fill_cells(board, 1, rng)
            counts[int(values(board).max())] += 1

        self.assertAlmostEqual(counts[2] / 2000, TILE_SPAWN_PROBS[2], delta=0.03)
        self.assertAlmostEqual(counts[4] / 2000, TILE_SPAWN_PROBS[4], delta=0.03)

    def test_cell_distribution(self):
        """Every empty cell is equally likely."""
        rng = np.random.default_rng(321)
        grid = [[2, 4, 2, 4], [4, 2, 4, 2], [2, 4, 2, 4], [4, 2, 0, 0]]
        hits = 0
        for _ in range(2000):
            board = board_from_values(grid)
            fill_cells(board, 1, rng)
            hits += board[3, 2] is not None

        self.assertAlmostEqual(hits / 2000, 0.5, delta=0.05)

    def test_custom_probabilities(self):
        board = empty_board()
        fill_cells(board, 16, np.random.default_rng(0), probs={4: 1.0})

        self.assertTrue(np.all(values(board) == 4))


class TestGameTermination(TestCase):
    """Game over detection."""

    def test_checkerboard_is_over(self):
        grid = np.array([[2, 4, 2, 4], [4, 2, 4, 2], [2, 4, 2, 4], [4, 2, 4, 2]])
        self.assertTrue(is_done(grid))

    def test_equal_neighbours_not_over(self):
        grid = np.array([[2, 4, 2, 4], [4, 2, 4, 2], [2, 4, 2, 4], [4, 2, 2, 8]])
        self.assertFalse(is_done(grid))

    def test_vertical_neighbours_not_over(self):
        grid = np.array([[2, 4, 2, 4], [4, 2, 4, 2], [2, 4, 2, 4], [2, 8, 16, 32]])
        self.assertFalse(is_done(grid))

    def test_empty_cell_not_over(self):
        grid = np.array([[2, 4, 2, 4], [4, 2, 4, 2], [2, 4, 2, 4], [4, 2, 4, 0]])
        self.assertFalse(is_done(grid))


class TestBoardHelpers(TestCase):
    def test_values_round_trip(self):
        np.testing.assert_array_equal(values(board_from_values(SAMPLE)), np.array(SAMPLE))

    def test_settle_keeps_identity(self):
        """Clearing the merge flags keeps tile ids."""
        board = empty_board()
        board[0, 0] = Tile.merged_from(8)
        board[1, 1] = Tile(2)
        settled = settle(board)

        self.assertFalse(settled[0, 0].just_merged)
        self.assertEqual(settled[0, 0].id, board[0, 0].id)
        self.assertIs(settled[1, 1], board[1, 1])
        self.assertTrue(board[0, 0].just_merged)


if __name__ == '__main__':
    main()
