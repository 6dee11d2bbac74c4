# trivia_bot/trivia/constants.py

# Seconds before the answer is given away
QUESTION_TIME_LIMIT = 30

# Seconds to wait between rounds
ROUND_DELAY = 3

MAX_ROUNDS = 30

# Scoring: base + remaining seconds * multiplier, divided by hints used + 1
ROUND_BASE_POINTS = 1
TIME_BONUS_MULTIPLIER = 2

QUESTION_DELIMITER = "`"

HINT_PLACEHOLDER = "-"
# Always shown in hints
HINT_FREE_CHARS = frozenset(" \t,.;:!?'\"_/\\&()[]{}+*#@%$")
MIN_HINT_ANSWER_LENGTH = 4

LEADERBOARD_SIZE = 10

MSG_TRIVIA_START = "Trivia time!"
MSG_TRIVIA_DISABLED = "Trivia is disabled."
MSG_TRIVIA_STOPPED = "Trivia time is over."
MSG_NO_MORE_HINTS = "No more hints."
MSG_NOT_PLAYING = "Not playing."
MSG_NO_QUESTIONS = "I ran out of questions. Blame whoever configured me."
MSG_STATS_HINT = "Type !stats to see the leaderboard."
MSG_LEADERBOARD_EMPTY = "The leaderboard is empty."
