# trivia_bot/trivia/resolution.py

import logging

from trivia_bot.common.state import GroupChat
from trivia_bot.db import ScoreStore
from trivia_bot.transport import GroupChannel
from trivia_bot.trivia.scoring import round_points

logger = logging.getLogger(__name__)


def is_correct_answer(user_answer: str, answer: str) -> bool:
    return bool(answer) and user_answer.strip().lower() == answer


def resolve_round_winner(
    channel: GroupChannel,
    group: GroupChat,
    identity: str,
    nick: str,
    message: str,
    store: ScoreStore,
    now: float,
) -> bool:
    """
    Check a chat message against the open round.

    The first correct answer closes the round and scores; anything else,
    including later correct answers, is ignored. Returns True if this
    message won the round.
    """
    state = group.trivia

    if not state.round_open:
        return False

    if not is_correct_answer(message, state.answer):
        return False

    points = round_points(now - state.round_started_at, state.hint_count)
    answer = state.answer

    # Mark resolved
    state.close_round(now, winner=identity)

    peer = group.add_peer(identity, nick)
    peer.add_points(points)

    store.update_score(peer.nick, identity, points)
    store.save()

    logger.info(
        "Group %d round %d won by %s for %d points (%s)",
        group.group_number, state.round_number, identity, points, answer,
    )

    channel.send(
        f"{peer.nick} got the answer for {points} points "
        f"(total score: {peer.game_score})"
    )
    return True
