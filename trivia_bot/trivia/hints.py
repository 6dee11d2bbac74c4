# trivia_bot/trivia/hints.py

import math
import random
import re
from typing import List, Optional

from trivia_bot.transport import GroupChannel
from trivia_bot.trivia.constants import (
    HINT_FREE_CHARS,
    HINT_PLACEHOLDER,
    MIN_HINT_ANSWER_LENGTH,
    MSG_NO_MORE_HINTS,
    MSG_NOT_PLAYING,
)
from trivia_bot.trivia.state import TriviaState

_YEAR_RE = re.compile(r"[12][0-9]{3}")


def _mask(answer: str, revealed: set) -> str:
    return "".join(
        ch if i in revealed else HINT_PLACEHOLDER
        for i, ch in enumerate(answer)
    )


def build_hints(answer: str, rng: Optional[random.Random] = None) -> List[str]:
    """
    Build the hints for an answer, fewest characters revealed first.

    Punctuation and whitespace are always shown. About a quarter of the
    answer is revealed per hint, and never more than half of the hideable
    characters overall.
    A year gets a single hint with every other digit shown.
    """
    length = len(answer)
    if length < MIN_HINT_ANSWER_LENGTH:
        return []

    if _YEAR_RE.fullmatch(answer):
        return [_mask(answer, set(range(0, length, 2)))]

    rng = rng or random.Random()

    free = {i for i, ch in enumerate(answer) if ch in HINT_FREE_CHARS}
    # a placeholder in the answer reads the same hidden or shown
    order = [
        i for i, ch in enumerate(answer)
        if i not in free and ch != HINT_PLACEHOLDER
    ]
    rng.shuffle(order)

    chars_per_hint = max(1, length // 4)
    num_hints = math.ceil((length / 2) / chars_per_hint)

    # at most half the letters, and always leave something to guess
    max_reveal = min(math.ceil(len(order) / 2), max(0, len(order) - 1))

    hints: List[str] = []
    for n in range(1, num_hints + 1):
        count = min(n * chars_per_hint, max_reveal)
        hint = _mask(answer, free | set(order[:count]))
        if hints and hints[-1] == hint:
            continue
        hints.append(hint)

    return hints


def next_hint(state: TriviaState) -> Optional[str]:
    """Dispense the next hint of the current round, or None when used up."""
    if state.hint_count >= len(state.hints):
        return None

    hint = state.hints[state.hint_count]
    state.hint_count += 1
    return hint


def give_hint(channel: GroupChannel, state: TriviaState) -> None:
    if not state.running:
        channel.send(MSG_NOT_PLAYING)
        return

    hint = next_hint(state) if state.round_open else None
    if hint is None:
        channel.send(MSG_NO_MORE_HINTS)
        return

    channel.send(f"Hint {state.hint_count}: {hint}")
