# scripts/check_questions.py

import sys

from trivia_bot.config import QUESTIONS_PATH
from trivia_bot.trivia.manager import QuestionPool
from trivia_bot.utils.logs import setup_logging


def main():
    setup_logging()

    path = sys.argv[1] if len(sys.argv) > 1 else QUESTIONS_PATH
    pool = QuestionPool.from_file(path)
    print(f"{len(pool)} usable questions in {path}")

if __name__ == "__main__":
    main()
