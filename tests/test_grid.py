from __future__ import annotations

import random

import numpy as np
import pytest

from falling_blocks.game import DEFAULT_CATALOG, GameGrid, Piece, TetrominoType

O_STATE = DEFAULT_CATALOG[TetrominoType.O][0]


@pytest.fixture
def grid() -> GameGrid:
    return GameGrid(10, 20)


@pytest.mark.parametrize("x, y", [(-1, 0), (9, 0), (0, 19), (4, -1)])
def test_collides_outside_bounds(grid, x, y):
    assert grid.collides(x, y, O_STATE)


def test_collides_with_occupied_cell(grid):
    assert not grid.collides(4, 10, O_STATE)
    grid.grid[11, 5] = int(TetrominoType.T)
    assert grid.collides(4, 10, O_STATE)


def test_non_colliding_positions_are_inside_and_empty():
    rnd = random.Random(7)
    grid = GameGrid(10, 20)
    for y in range(20):
        for x in range(10):
            if rnd.random() < 0.3:
                grid.grid[y, x] = rnd.randint(1, 7)
    for kind in TetrominoType:
        for state in DEFAULT_CATALOG[kind]:
            for ay in range(-2, 22):
                for ax in range(-2, 12):
                    if grid.collides(ax, ay, state):
                        continue
                    for dx, dy in state:
                        x, y = ax + int(dx), ay + int(dy)
                        assert grid.is_inside(x, y)
                        assert not grid.is_occupied(x, y)


def test_is_occupied_and_cell_are_bounds_safe(grid):
    grid.grid[0, 0] = int(TetrominoType.L)
    assert grid.is_occupied(0, 0)
    assert grid.cell(0, 0) is TetrominoType.L
    assert grid.cell(1, 0) is None
    assert not grid.is_occupied(-1, 0)
    assert grid.cell(10, 20) is None


def test_place_writes_piece_tag(grid):
    piece = Piece(TetrominoType.S, DEFAULT_CATALOG[TetrominoType.S], x=2, y=5)
    grid.place(piece)
    for x, y in piece.cells():
        assert grid.cell(x, y) is TetrominoType.S
    assert int(np.count_nonzero(grid.grid)) == 4


def test_clear_non_adjacent_rows_shifts_everything_down(grid):
    for y in range(20):
        if y in (5, 7):
            grid.grid[y, :] = 1
        else:
            # partial rows, each distinguishable by where its block sits
            grid.grid[y, y % 10] = 2
    original = grid.clone_state()

    assert grid.clear_completed_rows() == 2

    kept = np.array([original[y] for y in range(20) if y not in (5, 7)])
    assert np.all(grid.grid[:2] == 0)
    assert np.array_equal(grid.grid[2:], kept)
    assert grid.grid.shape == (20, 10)


def test_clear_four_rows_at_once(grid):
    grid.grid[16:20, :] = 3
    grid.grid[15, 0] = 4
    assert grid.clear_completed_rows() == 4
    assert grid.cell(0, 19) is TetrominoType.O
    assert int(np.count_nonzero(grid.grid)) == 1


def test_clear_handles_full_row_sliding_into_checked_index(grid):
    grid.grid[19, :] = 1
    grid.grid[18, 3] = 2
    grid.grid[17, :] = 1
    assert grid.clear_completed_rows() == 2
    assert grid.cell(3, 19) is TetrominoType.J
    assert int(np.count_nonzero(grid.grid)) == 1


def test_clear_without_full_rows_is_noop(grid):
    grid.grid[19, :9] = 1
    before = grid.clone_state()
    assert grid.clear_completed_rows() == 0
    assert np.array_equal(grid.grid, before)


def test_drop_distance_and_rows(grid):
    piece = Piece(TetrominoType.O, DEFAULT_CATALOG[TetrominoType.O], x=4, y=0)
    assert grid.drop_distance(piece) == 18
    grid.grid[10, 5] = int(TetrominoType.I)
    assert grid.drop_distance(piece) == 8
    rows = grid.rows()
    assert rows[10][5] is TetrominoType.I
    assert rows[0] == [None] * 10


def test_reset_empties_grid(grid):
    grid.grid[3, 3] = 1
    grid.reset()
    assert not grid.grid.any()
