from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


@dataclass
class ScoringRules:
    line_clear_scores: tuple[int, int, int, int] = (100, 300, 500, 800)

    def score_for_lines(self, lines: int) -> int:
        if lines <= 0:
            return 0
        if 1 <= lines <= 4:
            return self.line_clear_scores[lines - 1]
        return self.line_clear_scores[-1]


class Difficulty(Enum):
    """Tick cadence (ms) and the stack height the agent tries to stay under."""

    EASY = (800, 20)
    MEDIUM = (500, 18)
    HARD = (250, 16)
    INSANE = (100, 14)

    @property
    def speed_ms(self) -> int:
        return self.value[0]

    @property
    def max_height(self) -> int:
        return self.value[1]

    @classmethod
    def from_name(cls, name: str) -> "Difficulty":
        try:
            return cls[name.strip().upper()]
        except KeyError:
            choices = ", ".join(d.name.lower() for d in cls)
            raise ValueError(f"unknown difficulty {name!r}; expected one of: {choices}") from None
