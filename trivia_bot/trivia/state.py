# trivia_bot/trivia/state.py

from dataclasses import dataclass, field
from typing import List, Optional


@dataclass
class TriviaState:
    running: bool = False
    disabled: bool = False
    round_number: int = 0

    question: str = ""
    answer: str = ""

    hints: List[str] = field(default_factory=list)
    hint_count: int = 0

    round_started_at: float = 0.0
    round_ended_at: float = 0.0

    # Set when the round closes, by a correct answer or by timing out
    winner_declared: bool = False
    winner: Optional[str] = None

    # Identity of whoever issued !trivia
    started_by: Optional[str] = None

    @property
    def round_open(self) -> bool:
        return self.running and self.round_number > 0 and not self.winner_declared

    def clear_round(self) -> None:
        self.question = ""
        self.answer = ""
        self.hints = []
        self.hint_count = 0

    def close_round(self, now: float, winner: Optional[str] = None) -> None:
        self.winner_declared = True
        self.winner = winner
        self.round_ended_at = now
        self.clear_round()

    def reset(self) -> None:
        """Back to idle. The disabled flag survives."""
        self.running = False
        self.round_number = 0
        self.round_started_at = 0.0
        self.round_ended_at = 0.0
        self.winner_declared = False
        self.winner = None
        self.started_by = None
        self.clear_round()
