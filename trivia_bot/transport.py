# trivia_bot/transport.py
"""
Boundary to the messaging network.

The protocol library (identity, encryption, DHT, group sync) lives outside
this package. A binding implements `Transport`; the bot only talks to it
through the methods below and the event types it returns from `iterate()`.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import List, Optional, Protocol, Union

logger = logging.getLogger(__name__)


class TransportError(Exception):
    """A call into the protocol library failed."""


class PeerChange(enum.Enum):
    PEER_ADD = "peer_add"
    PEER_NAME = "peer_name"
    PEER_DEL = "peer_del"


# -----------------------------
# EVENTS
# -----------------------------

@dataclass(frozen=True)
class ConnectionStatus:
    connected: bool


@dataclass(frozen=True)
class FriendRequest:
    public_key: str
    message: str


@dataclass(frozen=True)
class GroupInvite:
    friend_number: int
    cookie: bytes


@dataclass(frozen=True)
class GroupNamelistChange:
    group_number: int
    peer_number: int
    change: PeerChange


@dataclass(frozen=True)
class GroupMessage:
    group_number: int
    peer_number: int
    text: str


Event = Union[ConnectionStatus, FriendRequest, GroupInvite, GroupNamelistChange, GroupMessage]


class Transport(Protocol):
    def iterate(self) -> List[Event]:
        """Run one iteration of the protocol library and drain pending events."""
        ...

    def iteration_interval(self) -> float:
        """Seconds the library wants between iterations."""
        ...

    def is_connected(self) -> bool: ...

    def bootstrap(self, host: str, port: int, public_key: str) -> None: ...

    def address(self) -> str: ...

    def set_name(self, name: str) -> None: ...

    def set_status_message(self, message: str) -> None: ...

    def add_friend_norequest(self, public_key: str) -> int: ...

    def save_profile(self) -> None: ...

    def join_group(self, friend_number: int, cookie: bytes) -> int: ...

    def leave_group(self, group_number: int) -> None: ...

    def friend_public_key(self, friend_number: int) -> Optional[str]: ...

    def friend_name(self, friend_number: int) -> Optional[str]: ...

    def group_peer_public_key(self, group_number: int, peer_number: int) -> Optional[str]: ...

    def group_peer_name(self, group_number: int, peer_number: int) -> Optional[str]: ...

    def group_peer_count(self, group_number: int) -> Optional[int]: ...

    def send_group_message(self, group_number: int, message: str) -> None: ...


class GroupChannel:
    """A group conversation the game can post to."""

    def __init__(self, transport: Transport, group_number: int):
        self.transport = transport
        self.group_number = group_number

    def send(self, message: str) -> None:
        try:
            self.transport.send_group_message(self.group_number, message)
        except TransportError as e:
            logger.warning("Failed to send message to group %d: %s", self.group_number, e)
