# trivia_bot/trivia/scoring.py

from typing import Iterable, List

from trivia_bot.common.state import Peer
from trivia_bot.trivia.constants import (
    QUESTION_TIME_LIMIT,
    ROUND_BASE_POINTS,
    TIME_BONUS_MULTIPLIER,
)


def round_points(elapsed: float, hints_used: int, time_limit: int = QUESTION_TIME_LIMIT) -> int:
    """
    Points for a correct answer `elapsed` seconds into the round.

    Faster answers and fewer hints score more; the result is never below
    ROUND_BASE_POINTS.
    """
    remaining = max(0, int(time_limit - elapsed))
    bonus = (remaining * TIME_BONUS_MULTIPLIER) // (max(0, hints_used) + 1)
    return ROUND_BASE_POINTS + bonus


def game_winners(peers: Iterable[Peer]) -> List[Peer]:
    """Everyone tied at the top game score, if that score is above zero."""
    peers = list(peers)
    best = max((p.game_score for p in peers), default=0)
    if best <= 0:
        return []
    return [p for p in peers if p.game_score == best]
