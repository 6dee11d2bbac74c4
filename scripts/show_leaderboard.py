# scripts/show_leaderboard.py

import sys

from trivia_bot.config import SCORES_PATH
from trivia_bot.db import ScoreStore
from trivia_bot.utils.logs import setup_logging


def main():
    setup_logging()

    path = sys.argv[1] if len(sys.argv) > 1 else SCORES_PATH
    limit = int(sys.argv[2]) if len(sys.argv) > 2 else 10

    store = ScoreStore(path)
    store.load()

    rows = store.get_leaderboard(limit)
    if not rows:
        print(f"No scores in {path}")
        return

    for idx, row in enumerate(rows, start=1):
        print(
            f"#{idx:<3} {row.nick:<32} {row.points:>8} pts  "
            f"{row.rounds_won:>5} rounds  {row.games_won:>4} games  {row.identity}"
        )

if __name__ == "__main__":
    main()
