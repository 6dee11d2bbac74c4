import asyncio
import importlib
import logging
import random
import time
from typing import Callable, Dict, List, Optional, Tuple

from trivia_bot.commands import build_command_table, execute
from trivia_bot.common.state import DEFAULT_NICK, GroupChat
from trivia_bot.config import (
    BOOTSTRAP_HOST,
    BOOTSTRAP_KEY,
    BOOTSTRAP_PORT,
    BOT_NAME,
    DHT_NODES_PATH,
    LOG_DIR,
    LOG_LEVEL,
    MASTERKEYS_PATH,
    QUESTIONS_PATH,
    SCORES_PATH,
    SOURCE_URL,
    STATUS_MESSAGE,
    TRANSPORT_FACTORY,
)
from trivia_bot.db import ScoreStore
from trivia_bot.transport import (
    ConnectionStatus,
    Event,
    FriendRequest,
    GroupChannel,
    GroupInvite,
    GroupMessage,
    GroupNamelistChange,
    PeerChange,
    Transport,
    TransportError,
)
from trivia_bot.trivia.lifecycle import tick
from trivia_bot.trivia.manager import QuestionPool
from trivia_bot.trivia.resolution import resolve_round_winner
from trivia_bot.utils.logs import setup_logging

VERSION = "0.1.0"

# Seconds between bootstrap attempts while offline
BOOTSTRAP_INTERVAL = 10

# Random nodes tried per bootstrap attempt
MAX_BOOTSTRAP_NODES = 5

logger = logging.getLogger(__name__)


class Bot:
    def __init__(
        self,
        transport: Transport,
        *,
        questions: Optional[QuestionPool] = None,
        store: Optional[ScoreStore] = None,
        masterkeys_path: str = MASTERKEYS_PATH,
        dht_nodes_path: str = DHT_NODES_PATH,
        source_url: str = SOURCE_URL,
        clock: Callable[[], float] = time.monotonic,
        rng: Optional[random.Random] = None,
    ):
        self.transport = transport
        self.questions = questions if questions is not None else QuestionPool()
        self.store = store if store is not None else ScoreStore(SCORES_PATH)
        self.masterkeys_path = masterkeys_path
        self.dht_nodes_path = dht_nodes_path
        self.source_url = source_url
        self.clock = clock
        self.rng = rng or random.Random()

        self.groups: Dict[int, GroupChat] = {}
        self.commands = build_command_table()
        self.last_connect: Optional[float] = None
        self._started = False
        self._running = False

        self._event_handlers = {
            ConnectionStatus: self.on_connection_status,
            FriendRequest: self.on_friend_request,
            GroupInvite: self.on_group_invite,
            GroupNamelistChange: self.on_group_namelist_change,
            GroupMessage: self.on_group_message,
        }

    # -----------------------------
    # STARTUP / SHUTDOWN
    # -----------------------------
    def startup(self) -> None:
        try:
            self.transport.set_name(BOT_NAME)
            self.transport.set_status_message(STATUS_MESSAGE)
        except TransportError as e:
            logger.warning("Failed to set profile name/status: %s", e)

        self.save_profile()
        self.store.load()

        logger.info("%s version %s", BOT_NAME, VERSION)
        logger.info("Address: %s", self.transport.address())
        logger.info("Loaded %d questions, %d score records", len(self.questions), len(self.store))
        self._started = True

    def shutdown(self) -> None:
        if not self._started:
            return
        self.store.save()
        self.save_profile()

    def save_profile(self) -> None:
        try:
            self.transport.save_profile()
        except TransportError as e:
            logger.error("Failed to save profile: %s", e)

    # -----------------------------
    # HELPERS
    # -----------------------------
    def channel(self, group: GroupChat) -> GroupChannel:
        return GroupChannel(self.transport, group.group_number)

    def peer_identity(self, group_number: int, peer_number: int) -> Optional[str]:
        identity = self.transport.group_peer_public_key(group_number, peer_number)
        if identity is None:
            logger.warning("Failed to fetch peer %d's key in group %d", peer_number, group_number)
        return identity

    def peer_nick(self, group: GroupChat, peer_number: int, identity: str) -> str:
        nick = self.transport.group_peer_name(group.group_number, peer_number)
        if nick:
            return nick
        peer = group.get_peer(identity)
        return peer.nick if peer else DEFAULT_NICK

    def is_operator(self, identity: str) -> bool:
        """True if identity appears in the operator keys file."""
        if not identity:
            return False

        try:
            with open(self.masterkeys_path, encoding="utf-8") as fp:
                keys = fp.read().splitlines()
        except (OSError, UnicodeDecodeError) as e:
            logger.error("Failed to read operator keys from %s: %s", self.masterkeys_path, e)
            return False

        return any(identity in line for line in keys if line.strip())

    def check_privilege(self, group: GroupChat, identity: str) -> bool:
        """Operators everywhere, and the owner of their own group."""
        return group.owner_identity == identity or self.is_operator(identity)

    # -----------------------------
    # GROUPS
    # -----------------------------
    def add_group(self, friend_number: int, cookie: bytes) -> Optional[GroupChat]:
        try:
            group_number = self.transport.join_group(friend_number, cookie)
        except TransportError as e:
            logger.error("Failed to join group: %s", e)
            return None

        owner = self.transport.friend_public_key(friend_number) or "BadKey"
        group = GroupChat(group_number=group_number, owner_identity=owner)
        self.groups[group_number] = group

        friend_name = self.transport.friend_name(friend_number) or DEFAULT_NICK
        logger.info("Accepted group invite from %s (%d)", friend_name, group_number)
        return group

    def del_group(self, group_number: int) -> None:
        group = self.groups.pop(group_number, None)
        if group is None:
            logger.warning("No group with number %d", group_number)
            return

        group.trivia.reset()

        try:
            self.transport.leave_group(group_number)
        except TransportError as e:
            logger.error("Core failed to delete group %d: %s", group_number, e)
            return

        logger.info("Leaving group %d", group_number)

    # -----------------------------
    # EVENTS
    # -----------------------------
    def handle_event(self, event: Event) -> None:
        handler = self._event_handlers.get(type(event))
        if handler is None:
            logger.debug("Ignoring event %r", event)
            return
        handler(event)

    def on_connection_status(self, event: ConnectionStatus) -> None:
        if not event.connected:
            self.last_connect = self.clock()
        logger.info("DHT connection status: %s", "online" if event.connected else "offline")

    def on_friend_request(self, event: FriendRequest) -> None:
        logger.info("Friend request from %s: %s", event.public_key, event.message)

        try:
            self.transport.add_friend_norequest(event.public_key)
        except TransportError as e:
            logger.error("Failed to add friend: %s", e)
            return

        logger.info("Friend added.")
        self.save_profile()

    def on_group_invite(self, event: GroupInvite) -> None:
        self.add_group(event.friend_number, event.cookie)

    def on_group_namelist_change(self, event: GroupNamelistChange) -> None:
        group = self.groups.get(event.group_number)
        if group is None:
            return

        identity = self.peer_identity(event.group_number, event.peer_number)
        if identity is None:
            return

        if event.change is PeerChange.PEER_ADD:
            nick = self.transport.group_peer_name(event.group_number, event.peer_number)
            group.add_peer(identity, nick)

        elif event.change is PeerChange.PEER_NAME:
            nick = self.transport.group_peer_name(event.group_number, event.peer_number)
            if not nick:
                return
            group.update_nick(identity, nick)
            self.store.set_nick(nick, identity)

        elif event.change is PeerChange.PEER_DEL:
            group.del_peer(identity)

            # Leave group if empty
            num_peers = self.transport.group_peer_count(event.group_number)
            if num_peers is not None and num_peers <= 1:
                self.del_group(event.group_number)

    def on_group_message(self, event: GroupMessage) -> None:
        if not event.text:
            return

        group = self.groups.get(event.group_number)
        if group is None:
            return

        if event.text.startswith("!"):
            execute(self, group, event.peer_number, event.text)
            return

        if not group.trivia.round_open:
            return

        identity = self.peer_identity(event.group_number, event.peer_number)
        if identity is None:
            return

        resolve_round_winner(
            self.channel(group),
            group,
            identity,
            self.peer_nick(group, event.peer_number, identity),
            event.text,
            self.store,
            self.clock(),
        )

    # -----------------------------
    # POLL LOOP
    # -----------------------------
    def do_trivia(self) -> None:
        now = self.clock()
        for group in list(self.groups.values()):
            tick(self.channel(group), group, self.questions, self.store, now)

    def load_bootstrap_nodes(self) -> List[Tuple[str, int, str]]:
        try:
            with open(self.dht_nodes_path, encoding="utf-8") as fp:
                lines = fp.read().splitlines()
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("Failed to read %s: %s", self.dht_nodes_path, e)
            return []

        nodes = []
        for line in lines:
            parts = line.split()
            if len(parts) != 3:
                continue
            host, port, key = parts
            try:
                nodes.append((host, int(port), key))
            except ValueError:
                continue
        return nodes

    def bootstrap(self) -> None:
        now = self.clock()
        if self.last_connect is not None and now - self.last_connect < BOOTSTRAP_INTERVAL:
            return

        self.last_connect = now
        logger.info("Bootstrapping to DHT network...")

        nodes = self.load_bootstrap_nodes()
        if not nodes:
            logger.info("Trying backup bootstrap server...")
            nodes = [(BOOTSTRAP_HOST, BOOTSTRAP_PORT, BOOTSTRAP_KEY)]
        else:
            nodes = self.rng.sample(nodes, min(MAX_BOOTSTRAP_NODES, len(nodes)))

        for host, port, key in nodes:
            try:
                self.transport.bootstrap(host, port, key)
            except TransportError as e:
                logger.warning("Bootstrap to %s:%d failed: %s", host, port, e)

    def do_connection(self) -> None:
        if not self.transport.is_connected():
            self.bootstrap()

    def poll_once(self) -> None:
        try:
            events = self.transport.iterate()
        except TransportError as e:
            logger.error("Transport iteration failed: %s", e)
            events = []

        for event in events:
            self.handle_event(event)

        self.do_trivia()
        self.do_connection()

    async def run(self) -> None:
        self.startup()
        self._running = True

        while self._running:
            self.poll_once()
            await asyncio.sleep(self.transport.iteration_interval())

    def stop(self) -> None:
        self._running = False


# -----------------------------
# ENTRY POINT
# -----------------------------
def load_transport(factory_path: str) -> Transport:
    module_name, _, attr = factory_path.partition(":")
    if not module_name or not attr:
        raise ValueError(
            f"TRANSPORT_FACTORY must look like 'package.module:callable', got {factory_path!r}"
        )

    factory = getattr(importlib.import_module(module_name), attr)
    return factory()


def main():
    setup_logging(LOG_DIR, LOG_LEVEL)

    if not TRANSPORT_FACTORY:
        raise ValueError("TRANSPORT_FACTORY is missing. Add it to .env or environment variables.")

    bot = Bot(
        load_transport(TRANSPORT_FACTORY),
        questions=QuestionPool.from_file(QUESTIONS_PATH),
        store=ScoreStore(SCORES_PATH),
    )

    try:
        asyncio.run(bot.run())
    except KeyboardInterrupt:
        logger.info("Interrupted, shutting down")
    finally:
        bot.shutdown()


if __name__ == "__main__":
    main()
