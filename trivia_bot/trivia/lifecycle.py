# -----------------------------
# MULTI-ROUND HELPERS
# -----------------------------
import logging
from typing import Optional

from trivia_bot.common.state import GroupChat
from trivia_bot.db import ScoreStore
from trivia_bot.transport import GroupChannel
from trivia_bot.trivia.constants import (
    MAX_ROUNDS,
    MSG_NO_QUESTIONS,
    MSG_STATS_HINT,
    MSG_TRIVIA_DISABLED,
    MSG_TRIVIA_START,
    QUESTION_TIME_LIMIT,
    ROUND_DELAY,
)
from trivia_bot.trivia.hints import build_hints
from trivia_bot.trivia.manager import QuestionPool
from trivia_bot.trivia.scoring import game_winners

logger = logging.getLogger(__name__)


def start_game(
    channel: GroupChannel,
    group: GroupChat,
    questions: QuestionPool,
    store: ScoreStore,
    now: float,
    started_by: Optional[str] = None,
) -> bool:
    """Start a game in this group. Returns True if a game was started."""
    state = group.trivia

    if state.running:
        return False

    if state.disabled:
        channel.send(MSG_TRIVIA_DISABLED)
        return False

    state.reset()
    state.running = True
    state.started_by = started_by
    group.reset_game_scores()

    channel.send(MSG_TRIVIA_START)
    logger.info("Trivia started in group %d", group.group_number)

    ask_next_round(channel, group, questions, store, now)
    return True


def ask_next_round(
    channel: GroupChannel,
    group: GroupChat,
    questions: QuestionPool,
    store: ScoreStore,
    now: float,
) -> bool:
    """Ask the next question. Returns True if a round was started."""
    state = group.trivia

    if not len(questions):
        channel.send(MSG_NO_QUESTIONS)
        end_game(channel, group, store)
        return False

    q = questions.get_random_question()
    if q is None:
        # malformed entry; the next tick picks again
        return False

    state.round_number += 1
    state.question = q.question
    state.answer = q.answer.lower()
    state.hints = build_hints(state.answer, questions.rng)
    state.hint_count = 0
    state.round_started_at = now
    state.winner_declared = False
    state.winner = None

    channel.send(f"ROUND {state.round_number}: {q.question}")
    return True


def time_out_round(channel: GroupChannel, group: GroupChat, now: float) -> None:
    state = group.trivia
    answer = state.answer
    state.close_round(now)
    channel.send(f"Time's up! The answer was: {answer}")


def end_game(channel: GroupChannel, group: GroupChat, store: ScoreStore) -> None:
    """End the game, credit the game win and announce the result."""
    state = group.trivia
    if not state.running:
        return

    state.reset()

    winners = game_winners(group.peers.values())
    if winners:
        for peer in winners:
            store.update_score(peer.nick, peer.identity, 0)
        store.save()

        names = ", ".join(p.nick for p in winners)
        verb = "wins" if len(winners) == 1 else "tie"
        msg = f"Game over! {names} {verb} with {winners[0].game_score} points."
    else:
        msg = "Game over. Nobody scored anything."

    group.reset_game_scores()
    logger.info("Trivia ended in group %d", group.group_number)

    channel.send(f"{msg} {MSG_STATS_HINT}")


def abort_game(channel: GroupChannel, group: GroupChat, store: ScoreStore) -> None:
    end_game(channel, group, store)


def disable_trivia(channel: GroupChannel, group: GroupChat, store: ScoreStore) -> None:
    if group.trivia.running:
        end_game(channel, group, store)
    group.trivia.disabled = True


def enable_trivia(group: GroupChat) -> None:
    group.trivia.disabled = False


def tick(
    channel: GroupChannel,
    group: GroupChat,
    questions: QuestionPool,
    store: ScoreStore,
    now: float,
) -> None:
    """Advance a running game whose round has timed out or whose break is over."""
    state = group.trivia
    if not state.running:
        return

    if state.round_open:
        if now - state.round_started_at < QUESTION_TIME_LIMIT:
            return
        time_out_round(channel, group, now)

    if state.round_number >= MAX_ROUNDS:
        end_game(channel, group, store)
        return

    if state.round_number > 0 and now - state.round_ended_at < ROUND_DELAY:
        return

    ask_next_round(channel, group, questions, store, now)
