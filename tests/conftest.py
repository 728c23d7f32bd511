from __future__ import annotations

import itertools
from typing import Callable, Sequence

import pytest

from falling_blocks.game import GameConfig, GameSession, TetrominoType


def cycle_draw(kinds: Sequence[TetrominoType]) -> Callable[[], TetrominoType]:
    it = itertools.cycle(kinds)
    return lambda: next(it)


@pytest.fixture
def make_session() -> Callable[..., GameSession]:
    def factory(*kinds: TetrominoType, **config) -> GameSession:
        return GameSession(config=GameConfig(**config), draw=cycle_draw(kinds or (TetrominoType.O,)))

    return factory


def fill_row(session: GameSession, y: int, gap: int | None = None, value: int = 1) -> None:
    for x in range(session.grid.width):
        if x != gap:
            session.grid.grid[y, x] = value
