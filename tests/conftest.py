import random

import pytest

from tests.mocks import ALICE_KEY, BOB_KEY, OWNER_KEY, FakeClock, FakeTransport
from trivia_bot.bot import Bot
from trivia_bot.common.state import GroupChat
from trivia_bot.db import ScoreStore
from trivia_bot.transport import GroupChannel
from trivia_bot.trivia.manager import QuestionPool


@pytest.fixture
def transport():
    return FakeTransport()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store(tmp_path):
    return ScoreStore(str(tmp_path / "scores"))


@pytest.fixture
def questions():
    return QuestionPool(["Capital of France?` Paris"], rng=random.Random(7))


@pytest.fixture
def group():
    return GroupChat(group_number=0, owner_identity=OWNER_KEY)


@pytest.fixture
def channel(transport):
    return GroupChannel(transport, 0)


@pytest.fixture
def bot(tmp_path, transport, clock, store, questions):
    """A bot sitting in group 0, invited by OWNER, with Alice and Bob present."""
    masterkeys = tmp_path / "masterkeys"
    masterkeys.write_text("")

    bot = Bot(
        transport,
        questions=questions,
        store=store,
        masterkeys_path=str(masterkeys),
        dht_nodes_path=str(tmp_path / "DHTnodes"),
        source_url="https://example.org/triviabot",
        clock=clock,
        rng=random.Random(1),
    )

    bot.groups[0] = GroupChat(group_number=0, owner_identity=OWNER_KEY)
    transport.add_peer(0, 0, OWNER_KEY, "owner")
    transport.add_peer(0, 1, ALICE_KEY, "alice")
    transport.add_peer(0, 2, BOB_KEY, "bob")
    return bot
