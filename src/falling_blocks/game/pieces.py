from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import IntEnum
from typing import Dict, Iterator, List, Mapping, Sequence, Tuple

import numpy as np


class TetrominoType(IntEnum):
    """Piece kinds. The value doubles as the tag written into the grid."""

    I = 1
    J = 2
    L = 3
    O = 4
    S = 5
    T = 6
    Z = 7


Offset = Tuple[int, int]

CELLS_PER_PIECE = 4
MAX_ROTATIONS = 4


class PieceShape:
    """Immutable list of rotation states for one tetromino.

    Each state is a read-only ``(4, 2)`` int array of ``(dx, dy)`` offsets
    relative to the piece anchor.
    """

    def __init__(self, states: Sequence[Sequence[Offset]]) -> None:
        if not 1 <= len(states) <= MAX_ROTATIONS:
            raise ValueError(f"a shape needs 1 to {MAX_ROTATIONS} rotation states, got {len(states)}")
        seen = set()
        arrays: List[np.ndarray] = []
        for index, offsets in enumerate(states):
            cells = [(int(dx), int(dy)) for dx, dy in offsets]
            if len(cells) != CELLS_PER_PIECE or len(set(cells)) != CELLS_PER_PIECE:
                raise ValueError(f"rotation state {index} must hold {CELLS_PER_PIECE} distinct offsets: {cells}")
            key = tuple(sorted(cells))
            if key in seen:
                raise ValueError(f"rotation state {index} duplicates an earlier state")
            seen.add(key)
            arr = np.array(cells, dtype=np.int16)
            arr.setflags(write=False)
            arrays.append(arr)
        self._states: Tuple[np.ndarray, ...] = tuple(arrays)

    @property
    def states(self) -> Tuple[np.ndarray, ...]:
        return self._states

    def __len__(self) -> int:
        return len(self._states)

    def __getitem__(self, rotation: int) -> np.ndarray:
        return self._states[rotation]

    def __iter__(self) -> Iterator[np.ndarray]:
        return iter(self._states)


# Offset tables, (dx, dy) with y growing downwards.
BASE_OFFSETS: Dict[TetrominoType, List[List[Offset]]] = {
    TetrominoType.I: [
        [(0, 0), (0, 1), (0, 2), (0, 3)],
        [(0, 0), (1, 0), (2, 0), (3, 0)],
    ],
    TetrominoType.J: [
        [(0, 0), (0, 1), (0, 2), (-1, 2)],
        [(0, 0), (1, 0), (2, 0), (2, 1)],
        [(0, 0), (0, 1), (0, 2), (1, 0)],
        [(0, 0), (0, 1), (1, 1), (2, 1)],
    ],
    TetrominoType.L: [
        [(0, 0), (0, 1), (0, 2), (1, 2)],
        [(0, 0), (0, 1), (1, 0), (2, 0)],
        [(0, 0), (1, 0), (1, 1), (1, 2)],
        [(0, 1), (1, 1), (2, 1), (2, 0)],
    ],
    TetrominoType.O: [
        [(0, 0), (0, 1), (1, 0), (1, 1)],
    ],
    TetrominoType.S: [
        [(0, 0), (0, 1), (1, 1), (1, 2)],
        [(0, 1), (1, 1), (1, 0), (2, 0)],
    ],
    TetrominoType.T: [
        [(0, 1), (1, 0), (1, 1), (1, 2)],
        [(0, 0), (1, 0), (2, 0), (1, 1)],
        [(0, 0), (0, 1), (0, 2), (1, 1)],
        [(0, 1), (1, 1), (2, 1), (1, 0)],
    ],
    TetrominoType.Z: [
        [(0, 1), (0, 2), (1, 0), (1, 1)],
        [(0, 0), (1, 0), (1, 1), (2, 1)],
    ],
}


class PieceCatalog:
    """Validated lookup from piece kind to its rotation states."""

    def __init__(self, offsets: Mapping[TetrominoType, Sequence[Sequence[Offset]]]) -> None:
        missing = set(TetrominoType) - set(offsets)
        extra = set(offsets) - set(TetrominoType)
        if missing or extra:
            raise ValueError(
                f"catalog must define exactly the {len(TetrominoType)} tetrominoes "
                f"(missing={sorted(missing)}, unexpected={sorted(extra, key=str)})"
            )
        self._shapes: Dict[TetrominoType, PieceShape] = {
            kind: PieceShape(offsets[kind]) for kind in TetrominoType
        }

    @property
    def kinds(self) -> Tuple[TetrominoType, ...]:
        return tuple(TetrominoType)

    def shape(self, kind: TetrominoType) -> PieceShape:
        return self._shapes[TetrominoType(kind)]

    def __getitem__(self, kind: TetrominoType) -> PieceShape:
        return self.shape(kind)

    def __len__(self) -> int:
        return len(self._shapes)


DEFAULT_CATALOG = PieceCatalog(BASE_OFFSETS)


@dataclass(frozen=True)
class Piece:
    kind: TetrominoType
    shape: PieceShape = field(compare=False, repr=False)
    rotation: int = 0  # index into shape.states
    x: int = 0
    y: int = 0

    @property
    def offsets(self) -> np.ndarray:
        return self.shape[self.rotation]

    def moved(self, dx: int, dy: int) -> "Piece":
        return replace(self, x=self.x + dx, y=self.y + dy)

    def rotated(self) -> "Piece":
        return replace(self, rotation=(self.rotation + 1) % len(self.shape))

    def cells(self) -> List[Tuple[int, int]]:
        return [(self.x + int(dx), self.y + int(dy)) for dx, dy in self.offsets]
