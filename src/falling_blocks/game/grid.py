from __future__ import annotations

from typing import List, Optional

import numpy as np

from .pieces import Piece, TetrominoType


class GameGrid:
    """Fixed-size 2D grid of landed blocks.

    The grid uses 0 for empty cells and the ``TetrominoType`` value of the
    piece that left a block there otherwise. Row 0 is the top.
    """

    def __init__(self, width: int, height: int) -> None:
        self.width = int(width)
        self.height = int(height)
        self.grid = np.zeros((self.height, self.width), dtype=np.int8)

    def reset(self) -> None:
        self.grid.fill(0)

    def is_inside(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def is_occupied(self, x: int, y: int) -> bool:
        if not self.is_inside(x, y):
            return False
        return bool(self.grid[y, x] != 0)

    def cell(self, x: int, y: int) -> Optional[TetrominoType]:
        if not self.is_occupied(x, y):
            return None
        return TetrominoType(int(self.grid[y, x]))

    def collides(self, x: int, y: int, offsets: np.ndarray) -> bool:
        """True if any offset cell, shifted by (x, y), is out of bounds or occupied."""
        xs = offsets[:, 0] + x
        ys = offsets[:, 1] + y
        if np.any((xs < 0) | (xs >= self.width) | (ys < 0) | (ys >= self.height)):
            return True
        return bool(np.any(self.grid[ys, xs] != 0))

    def piece_collides(self, piece: Piece) -> bool:
        return self.collides(piece.x, piece.y, piece.offsets)

    def place(self, piece: Piece) -> None:
        """Write the piece's cells with its tag. Callers have already decided it landed."""
        value = int(piece.kind)
        for x, y in piece.cells():
            if self.is_inside(x, y):
                self.grid[y, x] = value

    def clear_completed_rows(self) -> int:
        cleared = 0
        row = self.height - 1
        while row >= 0:
            if np.all(self.grid[row] != 0):
                # Shift everything above down by one; the same index is checked again.
                self.grid[1 : row + 1] = self.grid[0:row].copy()
                self.grid[0] = 0
                cleared += 1
            else:
                row -= 1
        return cleared

    def drop_distance(self, piece: Piece) -> int:
        """How many rows the piece can fall before resting."""
        distance = 0
        while not self.collides(piece.x, piece.y + distance + 1, piece.offsets):
            distance += 1
        return distance

    def rows(self) -> List[List[Optional[TetrominoType]]]:
        return [
            [TetrominoType(int(v)) if v else None for v in row]
            for row in self.grid
        ]

    def clone_state(self) -> np.ndarray:
        return self.grid.copy()
