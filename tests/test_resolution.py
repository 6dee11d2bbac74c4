from tests.mocks import ALICE_KEY, BOB_KEY
from trivia_bot.trivia.lifecycle import start_game
from trivia_bot.trivia.resolution import is_correct_answer, resolve_round_winner
from trivia_bot.trivia.scoring import round_points


def _answer(channel, group, store, identity, nick, text, now):
    return resolve_round_winner(channel, group, identity, nick, text, store, now)


class TestIsCorrectAnswer:
    def test_case_and_whitespace_insensitive(self):
        assert is_correct_answer("  PaRiS ", "paris")

    def test_mismatch(self):
        assert not is_correct_answer("lyon", "paris")
        assert not is_correct_answer("pari", "paris")

    def test_empty_answer_never_matches(self):
        assert not is_correct_answer("", "")


class TestResolveRoundWinner:
    def test_correct_answer_scores(self, channel, transport, group, questions, store):
        start_game(channel, group, questions, store, 100.0)

        assert _answer(channel, group, store, ALICE_KEY, "alice", "Paris", 105.0)

        points = round_points(5.0, 0)
        state = group.trivia
        assert state.winner_declared
        assert state.winner == ALICE_KEY
        assert state.round_ended_at == 105.0
        assert state.answer == ""
        assert group.get_peer(ALICE_KEY).game_score == points
        assert store.get_entry(ALICE_KEY).points == points
        assert store.get_entry(ALICE_KEY).rounds_won == 1
        assert transport.messages()[-1] == (
            f"alice got the answer for {points} points (total score: {points})"
        )

    def test_score_is_persisted(self, channel, group, questions, store, tmp_path):
        start_game(channel, group, questions, store, 0.0)
        _answer(channel, group, store, ALICE_KEY, "alice", "paris", 1.0)

        assert (tmp_path / "scores").exists()

    def test_wrong_answer_is_silent(self, channel, transport, group, questions, store):
        start_game(channel, group, questions, store, 0.0)
        sent = len(transport.messages())

        assert not _answer(channel, group, store, ALICE_KEY, "alice", "lyon", 1.0)

        assert len(transport.messages()) == sent
        assert group.trivia.round_open
        assert len(store) == 0

    def test_only_first_correct_answer_scores(self, channel, transport, group, questions, store):
        start_game(channel, group, questions, store, 0.0)

        assert _answer(channel, group, store, ALICE_KEY, "alice", "paris", 2.0)
        assert not _answer(channel, group, store, BOB_KEY, "bob", "paris", 2.5)

        assert store.get_entry(BOB_KEY) is None
        assert group.get_peer(BOB_KEY) is None
        assert store.get_entry(ALICE_KEY).rounds_won == 1

    def test_hints_lower_points(self, channel, group, questions, store):
        start_game(channel, group, questions, store, 0.0)
        group.trivia.hint_count = 2

        _answer(channel, group, store, ALICE_KEY, "alice", "paris", 5.0)

        assert store.get_entry(ALICE_KEY).points == round_points(5.0, 2)

    def test_no_game_running(self, channel, transport, group, store):
        assert not _answer(channel, group, store, ALICE_KEY, "alice", "paris", 0.0)
        assert transport.messages() == []
