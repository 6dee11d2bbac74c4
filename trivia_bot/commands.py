# trivia_bot/commands.py
"""
Chat commands.

Every command is a plain function taking the bot, the group it was issued
in and the issuing peer's number. `build_command_table()` maps command
names to those functions; the bot builds it once at startup.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Callable, Dict, Optional

from trivia_bot.common.state import GroupChat
from trivia_bot.trivia.constants import (
    LEADERBOARD_SIZE,
    MSG_LEADERBOARD_EMPTY,
    MSG_TRIVIA_STOPPED,
)
from trivia_bot.trivia.hints import give_hint
from trivia_bot.trivia.lifecycle import (
    abort_game,
    disable_trivia,
    enable_trivia,
    end_game,
    start_game,
)

if TYPE_CHECKING:
    from trivia_bot.bot import Bot

logger = logging.getLogger(__name__)

CommandHandler = Callable[["Bot", GroupChat, int], None]

HELP_TEXT = (
    "Commands: !help !trivia !hint !score !stats !source | "
    "group owner and operators: !stop !disable !enable !quit"
)


def parse_command(text: str) -> Optional[str]:
    """Return the command name of a `!` message, e.g. "!hint"."""
    if not text.startswith("!"):
        return None
    parts = text.split(maxsplit=1)
    if not parts:
        return None
    return parts[0].lower()


def execute(bot: "Bot", group: GroupChat, peer_number: int, text: str) -> bool:
    """Run the command in `text`. Unknown commands are ignored."""
    name = parse_command(text)
    if name is None:
        return False

    handler = bot.commands.get(name)
    if handler is None:
        return False

    logger.debug("Group %d peer %d: %s", group.group_number, peer_number, name)
    handler(bot, group, peer_number)
    return True


def _privileged_identity(bot: "Bot", group: GroupChat, peer_number: int) -> Optional[str]:
    identity = bot.peer_identity(group.group_number, peer_number)
    if identity is None or not bot.check_privilege(group, identity):
        return None
    return identity


def can_abort(group: GroupChat, identity: str) -> bool:
    """Whoever started the game may call it off until someone else scores."""
    state = group.trivia
    return (
        state.running
        and state.started_by == identity
        and not group.others_have_scored(identity)
    )


# -----------------------------
# COMMANDS
# -----------------------------

def cmd_trivia(bot: "Bot", group: GroupChat, peer_number: int) -> None:
    identity = bot.peer_identity(group.group_number, peer_number)
    start_game(
        bot.channel(group),
        group,
        bot.questions,
        bot.store,
        bot.clock(),
        started_by=identity,
    )


def cmd_stop(bot: "Bot", group: GroupChat, peer_number: int) -> None:
    identity = bot.peer_identity(group.group_number, peer_number)
    if identity is None:
        return

    channel = bot.channel(group)

    if bot.check_privilege(group, identity):
        if not group.trivia.running:
            return
        channel.send(MSG_TRIVIA_STOPPED)
        end_game(channel, group, bot.store)
        return

    if can_abort(group, identity):
        channel.send(MSG_TRIVIA_STOPPED)
        abort_game(channel, group, bot.store)


def cmd_quit(bot: "Bot", group: GroupChat, peer_number: int) -> None:
    if _privileged_identity(bot, group, peer_number) is None:
        return

    channel = bot.channel(group)
    end_game(channel, group, bot.store)
    channel.send("Goodbye.")
    bot.del_group(group.group_number)


def cmd_disable(bot: "Bot", group: GroupChat, peer_number: int) -> None:
    if _privileged_identity(bot, group, peer_number) is None:
        return

    channel = bot.channel(group)
    disable_trivia(channel, group, bot.store)
    channel.send("Trivia has been disabled.")


def cmd_enable(bot: "Bot", group: GroupChat, peer_number: int) -> None:
    if _privileged_identity(bot, group, peer_number) is None:
        return

    enable_trivia(group)
    bot.channel(group).send("Trivia has been enabled.")


def cmd_hint(bot: "Bot", group: GroupChat, peer_number: int) -> None:
    give_hint(bot.channel(group), group.trivia)


def cmd_score(bot: "Bot", group: GroupChat, peer_number: int) -> None:
    identity = bot.peer_identity(group.group_number, peer_number)
    if identity is None:
        return

    nick = bot.peer_nick(group, peer_number, identity)
    entry = bot.store.get_entry(identity)

    if entry is None:
        bot.channel(group).send(f"{nick}: no score yet.")
        return

    rank = bot.store.get_user_rank(identity)
    rank_text = f" (rank #{rank[0]})" if rank else ""

    bot.channel(group).send(
        f"{nick}: Rounds won: {entry.rounds_won}, games won: {entry.games_won}, "
        f"total score: {entry.points}{rank_text}"
    )


def cmd_stats(bot: "Bot", group: GroupChat, peer_number: int) -> None:
    rows = bot.store.get_leaderboard(LEADERBOARD_SIZE)

    if not rows:
        bot.channel(group).send(MSG_LEADERBOARD_EMPTY)
        return

    lines = ["Leaderboard:"]
    for idx, row in enumerate(rows, start=1):
        lines.append(
            f"{idx}: {row.nick}: Total score: {row.points}, "
            f"rounds won: {row.rounds_won}, games won: {row.games_won}"
        )

    bot.channel(group).send("\n".join(lines))


def cmd_help(bot: "Bot", group: GroupChat, peer_number: int) -> None:
    bot.channel(group).send(HELP_TEXT)


def cmd_source(bot: "Bot", group: GroupChat, peer_number: int) -> None:
    bot.channel(group).send(f"Source code: {bot.source_url}")


def build_command_table() -> Dict[str, CommandHandler]:
    return {
        "!disable": cmd_disable,
        "!enable": cmd_enable,
        "!help": cmd_help,
        "!hint": cmd_hint,
        "!quit": cmd_quit,
        "!score": cmd_score,
        "!source": cmd_source,
        "!stats": cmd_stats,
        "!stop": cmd_stop,
        "!trivia": cmd_trivia,
    }
