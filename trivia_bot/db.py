# trivia_bot/db.py
"""
Player statistics store.

Keeps every player's cumulative trivia record in memory, keyed by the
player's public identity, and persists the whole table to a flat file of
fixed-width binary records.

Record layout (little-endian, no separators):
    identity       64 bytes  UTF-8, zero-padded
    nick length     4 bytes  u32
    nick           32 bytes  UTF-8, zero-padded
    points          8 bytes  u64
    rounds won      4 bytes  u32
    games won       4 bytes  u32
"""

from __future__ import annotations

import logging
import os
import struct
from dataclasses import dataclass, replace
from typing import Dict, Iterable, List, Optional, Tuple

logger = logging.getLogger(__name__)

# Public keys on the network are 32 bytes, stored as hex text
PUBLIC_KEY_SIZE = 32
IDENTITY_FIELD_SIZE = PUBLIC_KEY_SIZE * 2
NICK_FIELD_SIZE = 32

RECORD = struct.Struct(f"<{IDENTITY_FIELD_SIZE}sI{NICK_FIELD_SIZE}sQII")
RECORD_SIZE = RECORD.size


class RecordError(ValueError):
    """A single stored record could not be decoded."""


@dataclass
class PlayerRecord:
    identity: str
    nick: str
    points: int = 0
    rounds_won: int = 0
    games_won: int = 0


# -----------------------------
# Codec
# -----------------------------

def _fit_utf8(text: str, size: int) -> bytes:
    """Encode text, truncated to at most `size` bytes on a character boundary."""
    raw = text.encode("utf-8")
    if len(raw) <= size:
        return raw
    return raw[:size].decode("utf-8", errors="ignore").encode("utf-8")


def fit_nick(nick: str) -> str:
    """The nickname as it will read back from the score file."""
    return _fit_utf8(nick, NICK_FIELD_SIZE).decode("utf-8")


def encode_record(record: PlayerRecord) -> bytes:
    nick = _fit_utf8(record.nick, NICK_FIELD_SIZE)
    return RECORD.pack(
        _fit_utf8(record.identity, IDENTITY_FIELD_SIZE),
        len(nick),
        nick,
        record.points,
        record.rounds_won,
        record.games_won,
    )


def decode_record(data: bytes) -> PlayerRecord:
    if len(data) != RECORD_SIZE:
        raise RecordError(f"record is {len(data)} bytes, expected {RECORD_SIZE}")

    identity_raw, nick_len, nick_raw, points, rounds_won, games_won = RECORD.unpack(data)

    if nick_len > NICK_FIELD_SIZE:
        raise RecordError(f"nick length {nick_len} exceeds {NICK_FIELD_SIZE}")

    try:
        identity = identity_raw.rstrip(b"\0").decode("utf-8")
        nick = nick_raw[:nick_len].decode("utf-8")
    except UnicodeDecodeError as e:
        raise RecordError(f"record is not valid UTF-8: {e}") from e

    if not identity:
        raise RecordError("record has an empty identity")

    return PlayerRecord(
        identity=identity,
        nick=nick,
        points=points,
        rounds_won=rounds_won,
        games_won=games_won,
    )


def encode_records(records: Iterable[PlayerRecord]) -> bytes:
    return b"".join(encode_record(r) for r in records)


def decode_records(data: bytes) -> List[PlayerRecord]:
    """
    Decode a whole score file.

    Raises RecordError when the data is not a whole number of records.
    Individual records that fail to decode are logged and skipped.
    """
    if len(data) % RECORD_SIZE != 0:
        raise RecordError(
            f"data size {len(data)} is not a multiple of record size {RECORD_SIZE}"
        )

    records: List[PlayerRecord] = []
    for offset in range(0, len(data), RECORD_SIZE):
        try:
            records.append(decode_record(data[offset:offset + RECORD_SIZE]))
        except RecordError as e:
            logger.warning("Skipping score record at offset %d: %s", offset, e)

    return records


# -----------------------------
# Store
# -----------------------------

class ScoreStore:
    def __init__(self, path: str):
        self.path = path
        self._entries: Dict[str, PlayerRecord] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def update_score(self, nick: str, identity: str, points: int) -> None:
        """
        Record a result for `identity`.

        Nonzero points are a round win: points are added and rounds_won goes
        up by one. Zero points records a game win instead.
        """
        if points < 0:
            raise ValueError("points must not be negative")

        nick = fit_nick(nick)
        entry = self._entries.get(identity)
        if entry is None:
            entry = PlayerRecord(identity=identity, nick=nick)
            self._entries[identity] = entry

        entry.nick = nick

        if points != 0:
            entry.points += points
            entry.rounds_won += 1
        else:
            entry.games_won += 1

    def set_nick(self, nick: str, identity: str) -> None:
        entry = self._entries.get(identity)
        if entry is not None:
            entry.nick = fit_nick(nick)

    def get_entry(self, identity: str) -> Optional[PlayerRecord]:
        entry = self._entries.get(identity)
        if entry is None:
            return None
        return replace(entry)

    def get_sorted_snapshot(self) -> List[PlayerRecord]:
        return sorted(
            (replace(e) for e in self._entries.values()),
            key=lambda e: e.points,
            reverse=True,
        )

    def get_leaderboard(self, limit: int = 10) -> List[PlayerRecord]:
        return self.get_sorted_snapshot()[:limit]

    def get_user_rank(self, identity: str) -> Optional[Tuple[int, int]]:
        """Return (rank, points) for identity, ranks starting at 1."""
        for rank, entry in enumerate(self.get_sorted_snapshot(), start=1):
            if entry.identity == identity:
                return rank, entry.points
        return None

    def load(self) -> None:
        try:
            with open(self.path, "rb") as fp:
                data = fp.read()
        except FileNotFoundError:
            logger.info("No score file at %s, starting empty", self.path)
            return
        except OSError as e:
            logger.error("Failed to read score file %s: %s", self.path, e)
            return

        try:
            records = decode_records(data)
        except RecordError as e:
            logger.error("Score file %s is corrupt: %s", self.path, e)
            return

        for record in records:
            self._entries[record.identity] = record

        logger.info("Loaded %d score records from %s", len(records), self.path)

    def save(self) -> None:
        data = encode_records(self._entries.values())
        tmp_path = f"{self.path}.tmp"

        try:
            directory = os.path.dirname(self.path)
            if directory:
                os.makedirs(directory, exist_ok=True)
            with open(tmp_path, "wb") as fp:
                fp.write(data)
            os.replace(tmp_path, self.path)
        except OSError as e:
            logger.error("Failed to save score file %s: %s", self.path, e)
            self._remove_tmp(tmp_path)
            return

        logger.debug("Saved %d score records to %s", len(self._entries), self.path)

    @staticmethod
    def _remove_tmp(tmp_path: str) -> None:
        try:
            os.remove(tmp_path)
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.warning("Failed to remove %s: %s", tmp_path, e)
