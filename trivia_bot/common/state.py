# trivia_bot/common/state.py

from dataclasses import dataclass, field
from typing import Dict, Optional

from trivia_bot.trivia.state import TriviaState

DEFAULT_NICK = "Anonymous"


@dataclass
class Peer:
    identity: str
    nick: str = DEFAULT_NICK

    # Points and rounds won in the current game only
    game_score: int = 0
    rounds_won: int = 0

    def add_points(self, points: int) -> None:
        self.game_score += points
        self.rounds_won += 1

    def reset_game(self) -> None:
        self.game_score = 0
        self.rounds_won = 0


@dataclass
class GroupChat:
    group_number: int
    owner_identity: str
    peers: Dict[str, Peer] = field(default_factory=dict)
    trivia: TriviaState = field(default_factory=TriviaState)

    def add_peer(self, identity: str, nick: Optional[str] = None) -> Peer:
        peer = self.peers.get(identity)
        if peer is None:
            peer = Peer(identity=identity)
            self.peers[identity] = peer
        if nick:
            peer.nick = nick
        return peer

    def del_peer(self, identity: str) -> None:
        self.peers.pop(identity, None)

    def get_peer(self, identity: str) -> Optional[Peer]:
        return self.peers.get(identity)

    def update_nick(self, identity: str, nick: str) -> None:
        peer = self.peers.get(identity)
        if peer is not None:
            peer.nick = nick

    def others_have_scored(self, identity: str) -> bool:
        return any(
            p.game_score > 0 for p in self.peers.values() if p.identity != identity
        )

    def reset_game_scores(self) -> None:
        for peer in self.peers.values():
            peer.reset_game()
