from __future__ import annotations

from dataclasses import dataclass


@dataclass
class ScoringRules:
    line_clear_scores: tuple[int, int, int, int] = (100, 300, 500, 800)
    lines_per_level: int = 10
    base_interval: float = 0.5
    speed_factor: float = 0.2

    def score_for_lines(self, lines: int, level: int) -> int:
        if lines <= 0:
            return 0
        # A single landing can clear at most 4 rows.
        lines = min(lines, len(self.line_clear_scores))
        return self.line_clear_scores[lines - 1] * level

    def level_for_lines(self, total_lines: int) -> int:
        return total_lines // self.lines_per_level + 1

    def drop_interval(self, level: int) -> float:
        """Seconds between automatic one-row drops; shrinks as the level rises."""
        return self.base_interval / (1.0 + level * self.speed_factor)

    def __post_init__(self) -> None:
        if len(self.line_clear_scores) != 4:
            raise ValueError("line_clear_scores needs one entry per 1..4 cleared rows")
        if self.lines_per_level <= 0:
            raise ValueError(f"lines_per_level must be positive, got {self.lines_per_level}")
        if self.base_interval <= 0:
            raise ValueError(f"base_interval must be positive, got {self.base_interval}")
        if self.speed_factor < 0:
            raise ValueError(f"speed_factor must not be negative, got {self.speed_factor}")
