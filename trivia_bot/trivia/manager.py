"""
Trivia question pool.

Questions come from a plain text file, one per line, with the question and
the answer separated by a single backtick:

    Capital of France?`Paris

Lines that don't split into exactly two non-empty halves are skipped.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import List, Optional

from trivia_bot.trivia.constants import QUESTION_DELIMITER

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Question:
    question: str
    answer: str


def parse_question(line: str) -> Optional[Question]:
    parts = line.split(QUESTION_DELIMITER)
    if len(parts) != 2:
        return None

    question, answer = (p.strip() for p in parts)
    if not question or not answer:
        return None

    return Question(question=question, answer=answer)


class QuestionPool:
    def __init__(self, lines: Optional[List[str]] = None, rng: Optional[random.Random] = None):
        self.lines: List[str] = list(lines or [])
        self.rng = rng or random.Random()

    def __len__(self) -> int:
        return len(self.lines)

    @classmethod
    def from_file(cls, path: str, rng: Optional[random.Random] = None) -> "QuestionPool":
        """Load questions from path. A file that can't be read gives an empty pool."""
        logger.info("Loading trivia questions from %s", path)

        try:
            with open(path, encoding="utf-8") as fp:
                raw_lines = fp.read().splitlines()
        except (OSError, UnicodeDecodeError) as e:
            logger.error("Trivia questions failed to load from %s: %s", path, e)
            return cls(rng=rng)

        lines = []
        for lineno, line in enumerate(raw_lines, start=1):
            if not line.strip():
                continue
            if parse_question(line) is None:
                logger.warning("Skipping malformed question at %s:%d: %r", path, lineno, line)
                continue
            lines.append(line)

        logger.info("Loaded %d trivia questions", len(lines))
        return cls(lines, rng=rng)

    def get_random_question(self) -> Optional[Question]:
        """
        Pick a question uniformly at random.
        Returns None when the pool is empty or the picked entry is malformed.
        """
        if not self.lines:
            return None

        index = self.rng.randrange(len(self.lines))
        question = parse_question(self.lines[index])
        if question is None:
            logger.error("Error parsing question index %d: %r", index, self.lines[index])
        return question
