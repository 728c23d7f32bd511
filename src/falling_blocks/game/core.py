from __future__ import annotations

import logging
import math
import random
from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Callable, Iterable, Optional, Sequence

import numpy as np

from .grid import GameGrid
from .pieces import DEFAULT_CATALOG, Piece, PieceCatalog, TetrominoType
from .repeat import HoldRepeater
from .rules import ScoringRules

logger = logging.getLogger(__name__)


class Intent(IntEnum):
    MOVE_LEFT = 0
    MOVE_RIGHT = 1
    SOFT_DROP = 2
    HARD_DROP = 3
    ROTATE = 4
    TOGGLE_PAUSE = 5
    RESTART = 6


class SessionState(Enum):
    FALLING = "falling"
    PAUSED = "paused"
    GAME_OVER = "game_over"


# Intents that repeat while their key is held.
REPEATABLE_INTENTS = (Intent.MOVE_LEFT, Intent.MOVE_RIGHT, Intent.SOFT_DROP)

MIN_BOARD_SIZE = 4

PieceDraw = Callable[[], TetrominoType]


def random_draw(rng: random.Random, kinds: Sequence[TetrominoType] = tuple(TetrominoType)) -> PieceDraw:
    """Uniform draw over ``kinds`` backed by a caller-owned generator."""
    choices = tuple(kinds)

    def draw() -> TetrominoType:
        return rng.choice(choices)

    return draw


@dataclass
class GameConfig:
    width: int = 10
    height: int = 20
    random_seed: Optional[int] = None
    spawn_y: int = 0
    repeat_delay: float = 0.1
    repeat_interval: float = 0.1

    def __post_init__(self) -> None:
        if self.width < MIN_BOARD_SIZE or self.height < MIN_BOARD_SIZE:
            raise ValueError(
                f"board must be at least {MIN_BOARD_SIZE}x{MIN_BOARD_SIZE}, got {self.width}x{self.height}"
            )
        if not 0 <= self.spawn_y < self.height:
            raise ValueError(f"spawn_y must lie inside the board, got {self.spawn_y}")
        if self.repeat_delay < 0:
            raise ValueError(f"repeat_delay must not be negative, got {self.repeat_delay}")
        if self.repeat_interval <= 0:
            raise ValueError(f"repeat_interval must be positive, got {self.repeat_interval}")

    @property
    def spawn_x(self) -> int:
        return self.width // 2 - 1


@dataclass(frozen=True)
class SessionSnapshot:
    """Read-only view of a session for renderers."""

    grid: np.ndarray
    active: Piece
    next_piece: Piece
    ghost_y: int
    score: int
    level: int
    total_lines_cleared: int
    state: SessionState


class GameSession:
    """Time-driven rules engine for a single game.

    Drive it with :meth:`apply_intent` for player input and :meth:`tick` for
    elapsed time, or with :meth:`frame` once per rendered frame. Illegal moves
    are ignored rather than reported.
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        rules: Optional[ScoringRules] = None,
        draw: Optional[PieceDraw] = None,
        catalog: PieceCatalog = DEFAULT_CATALOG,
    ) -> None:
        self.config = config or GameConfig()
        self.rules = rules or ScoringRules()
        self.catalog = catalog
        if draw is None:
            self.rng = random.Random(self.config.random_seed)
            draw = random_draw(self.rng, catalog.kinds)
        self._draw = draw
        self.grid = GameGrid(self.config.width, self.config.height)
        self.repeater: HoldRepeater[Intent] = HoldRepeater(
            REPEATABLE_INTENTS, self.config.repeat_delay, self.config.repeat_interval
        )
        self._handlers = {
            Intent.MOVE_LEFT: lambda: self._move(-1, 0),
            Intent.MOVE_RIGHT: lambda: self._move(1, 0),
            Intent.SOFT_DROP: lambda: self._move(0, 1),
            Intent.ROTATE: self._rotate,
            Intent.HARD_DROP: self._hard_drop,
        }
        self.reset()

    def reset(self) -> None:
        self.grid.reset()
        self.repeater.reset()
        self.score = 0
        self.total_lines_cleared = 0
        self.level = 1
        self.game_over = False
        self.paused = False
        self.drop_accumulator = 0.0
        self.active = self._spawn(self._draw())
        self.next_piece = self._spawn(self._draw())
        if self.grid.piece_collides(self.active):
            self.game_over = True

    # ------------------------------------------------------------------
    # Read accessors
    # ------------------------------------------------------------------
    @property
    def board(self) -> GameGrid:
        return self.grid

    @property
    def is_over(self) -> bool:
        return self.game_over

    @property
    def is_paused(self) -> bool:
        return self.paused

    @property
    def state(self) -> SessionState:
        if self.game_over:
            return SessionState.GAME_OVER
        if self.paused:
            return SessionState.PAUSED
        return SessionState.FALLING

    @property
    def drop_interval(self) -> float:
        return self.rules.drop_interval(self.level)

    @property
    def ghost_y(self) -> int:
        """Row the active piece would rest on after a hard drop."""
        if self.game_over:
            return self.active.y
        return self.active.y + self.grid.drop_distance(self.active)

    def get_state(self) -> np.ndarray:
        # Overlay the falling piece as negative tags on a copy of the grid
        state = self.grid.clone_state()
        if not self.game_over:
            for x, y in self.active.cells():
                if self.grid.is_inside(x, y):
                    state[y, x] = -int(self.active.kind)
        return state

    def snapshot(self) -> SessionSnapshot:
        return SessionSnapshot(
            grid=self.grid.clone_state(),
            active=self.active,
            next_piece=self.next_piece,
            ghost_y=self.ghost_y,
            score=self.score,
            level=self.level,
            total_lines_cleared=self.total_lines_cleared,
            state=self.state,
        )

    # ------------------------------------------------------------------
    # Input
    # ------------------------------------------------------------------
    def apply_intent(self, intent: Intent) -> bool:
        """Apply one player intent. Returns whether it changed anything."""
        if self.game_over:
            if intent == Intent.RESTART:
                logger.info("Restarting after game over (score=%d)", self.score)
                self.reset()
                return True
            return False
        if intent == Intent.TOGGLE_PAUSE:
            self.paused = not self.paused
            return True
        if self.paused:
            return False
        handler = self._handlers.get(intent)
        if handler is None:
            return False
        return handler()

    def _spawn(self, kind: TetrominoType) -> Piece:
        return Piece(
            kind=kind,
            shape=self.catalog[kind],
            rotation=0,
            x=self.config.spawn_x,
            y=self.config.spawn_y,
        )

    def _move(self, dx: int, dy: int) -> bool:
        moved = self.active.moved(dx, dy)
        if self.grid.piece_collides(moved):
            return False
        self.active = moved
        return True

    def _rotate(self) -> bool:
        rotated = self.active.rotated()
        if rotated.rotation == self.active.rotation or self.grid.piece_collides(rotated):
            return False
        self.active = rotated
        return True

    def _hard_drop(self) -> bool:
        distance = self.grid.drop_distance(self.active)
        self.active = self.active.moved(0, distance)
        # The next tick resolves the landing without waiting
        self.drop_accumulator = self.drop_interval
        return True

    # ------------------------------------------------------------------
    # Time
    # ------------------------------------------------------------------
    def tick(self, elapsed: float) -> bool:
        """Advance the drop clock. Returns True if a piece landed."""
        if self.game_over or self.paused:
            return False
        elapsed = float(elapsed)
        if math.isfinite(elapsed) and elapsed > 0:
            self.drop_accumulator += elapsed
        if self.drop_accumulator < self.drop_interval:
            return False
        self.drop_accumulator = 0.0
        if self._move(0, 1):
            return False
        self._land()
        return True

    def frame(
        self,
        elapsed: float,
        pressed: Iterable[Intent] = (),
        held: Iterable[Intent] = (),
    ) -> bool:
        """Run one frame: fresh presses, held-key repeats, then the drop clock."""
        for intent in pressed:
            self.apply_intent(intent)
        if self.state is SessionState.FALLING:
            for intent in self.repeater.update(held, elapsed):
                self.apply_intent(intent)
        else:
            self.repeater.reset()
        return self.tick(elapsed)

    def _land(self) -> None:
        piece = self.active
        self.grid.place(piece)
        lines = self.grid.clear_completed_rows()
        gained = self.rules.score_for_lines(lines, self.level)
        self.total_lines_cleared += lines
        self.score += gained
        self.level = self.rules.level_for_lines(self.total_lines_cleared)
        logger.debug(
            "%s landed at (%d, %d): %d rows cleared, +%d points",
            piece.kind.name, piece.x, piece.y, lines, gained,
        )

        self.active = self._spawn(self.next_piece.kind)
        self.next_piece = self._spawn(self._draw())
        if self.grid.piece_collides(self.active):
            self.game_over = True
            logger.info(
                "Game over: score=%d level=%d lines=%d",
                self.score, self.level, self.total_lines_cleared,
            )


def new_session(
    config: Optional[GameConfig] = None,
    draw: Optional[PieceDraw] = None,
    rules: Optional[ScoringRules] = None,
) -> GameSession:
    return GameSession(config=config, rules=rules, draw=draw)
