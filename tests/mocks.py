from typing import Dict, List, Optional, Tuple

from trivia_bot.transport import Event, TransportError

OWNER_KEY = "A" * 64
OPERATOR_KEY = "B" * 64
ALICE_KEY = "C" * 64
BOB_KEY = "D" * 64


class FakeClock:
    def __init__(self, now: float = 1000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeTransport:
    """In-memory stand-in for the protocol library."""

    def __init__(self) -> None:
        self.pending: List[Event] = []
        self.sent: List[Tuple[int, str]] = []
        self.connected = True
        self.bootstrapped: List[Tuple[str, int, str]] = []
        self.friends: Dict[int, Tuple[str, str]] = {}
        self.added_friends: List[str] = []
        self.peers: Dict[Tuple[int, int], Tuple[str, str]] = {}
        self.joined: List[int] = []
        self.left: List[int] = []
        self.profile_saves = 0
        self.fail_sends = False
        self.next_group_number = 0
        self.name = ""
        self.status_message = ""

    # test helpers
    def add_peer(self, group_number: int, peer_number: int, public_key: str, name: str) -> None:
        self.peers[(group_number, peer_number)] = (public_key, name)

    def messages(self, group_number: int = 0) -> List[str]:
        return [m for g, m in self.sent if g == group_number]

    # Transport
    def iterate(self) -> List[Event]:
        events, self.pending = self.pending, []
        return events

    def iteration_interval(self) -> float:
        return 0.0

    def is_connected(self) -> bool:
        return self.connected

    def bootstrap(self, host: str, port: int, public_key: str) -> None:
        self.bootstrapped.append((host, port, public_key))

    def address(self) -> str:
        return OWNER_KEY + "00000000"

    def set_name(self, name: str) -> None:
        self.name = name

    def set_status_message(self, message: str) -> None:
        self.status_message = message

    def add_friend_norequest(self, public_key: str) -> int:
        self.added_friends.append(public_key)
        return len(self.added_friends) - 1

    def save_profile(self) -> None:
        self.profile_saves += 1

    def join_group(self, friend_number: int, cookie: bytes) -> int:
        group_number = self.next_group_number
        self.next_group_number += 1
        self.joined.append(group_number)
        return group_number

    def leave_group(self, group_number: int) -> None:
        self.left.append(group_number)

    def friend_public_key(self, friend_number: int) -> Optional[str]:
        friend = self.friends.get(friend_number)
        return friend[0] if friend else None

    def friend_name(self, friend_number: int) -> Optional[str]:
        friend = self.friends.get(friend_number)
        return friend[1] if friend else None

    def group_peer_public_key(self, group_number: int, peer_number: int) -> Optional[str]:
        peer = self.peers.get((group_number, peer_number))
        return peer[0] if peer else None

    def group_peer_name(self, group_number: int, peer_number: int) -> Optional[str]:
        peer = self.peers.get((group_number, peer_number))
        return peer[1] if peer else None

    def group_peer_count(self, group_number: int) -> Optional[int]:
        return sum(1 for g, _ in self.peers if g == group_number)

    def send_group_message(self, group_number: int, message: str) -> None:
        if self.fail_sends:
            raise TransportError("send queue full")
        self.sent.append((group_number, message))
