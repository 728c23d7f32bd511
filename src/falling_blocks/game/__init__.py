"""Game module for Falling Blocks.

Exports the rules engine and its supporting classes:
- GameGrid: Cell grid, collision checks and line clearing
- Piece, PieceCatalog, TetrominoType: Validated tetromino definitions
- ScoringRules: Line-clear scores, level curve and drop speed
- HoldRepeater: Auto-repeat timers for held keys
- GameSession: Time-driven game state machine
"""

from .grid import GameGrid
from .pieces import DEFAULT_CATALOG, Piece, PieceCatalog, PieceShape, TetrominoType
from .repeat import HoldRepeater
from .rules import ScoringRules
from .core import (
    GameConfig,
    GameSession,
    Intent,
    SessionSnapshot,
    SessionState,
    new_session,
    random_draw,
)

__all__ = [
    "GameGrid",
    "Piece",
    "PieceCatalog",
    "PieceShape",
    "TetrominoType",
    "DEFAULT_CATALOG",
    "HoldRepeater",
    "ScoringRules",
    "GameConfig",
    "GameSession",
    "Intent",
    "SessionSnapshot",
    "SessionState",
    "new_session",
    "random_draw",
]
