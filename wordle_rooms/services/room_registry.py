"""
Room Registry

Process-scoped table of live multiplayer rooms.

Lifecycle: one registry is created at service start by ``create_app`` and
handed to whatever needs it (command service, controllers, cleanup worker).
Rooms enter the table only through ``create_room`` and leave it only through
``delete_room``, an explicit leave that empties the room, or ``sweep``.

Locking: ``_lock`` guards the room table and the connection index and is only
ever taken briefly. Room state is guarded by each room's own lock. When both
are needed the room lock is taken first.
"""

import random
import threading
import time
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Callable, Dict, Iterator, List, Optional, Sequence, Tuple

from ..config.game_settings import (
    DEFAULT_MAX_PLAYERS, MAX_ROUNDS, ROOM_ID_ALPHABET, ROOM_ID_LENGTH, ROUNDS_PER_GAME, WORD_LIST
)
from ..errors import IdentityError, NotFoundError, StateError
from ..models.game import AnswerMode
from ..models.room import Player, RoomState
from ..utils.game_logger import game_logger
from .advance_policy import get_advance_policy
from .room import Room


@dataclass
class SweepReport:
    """What one cleanup pass changed."""
    rooms_deleted: List[str] = field(default_factory=list)
    players_removed: int = 0
    # (room_id, [(connection_id, snapshot), ...]) for rooms that lost players but survived
    room_updates: List[Tuple[str, List[Tuple[str, Dict]]]] = field(default_factory=list)
    # Connections still attached to rooms that were deleted
    closed_connections: List[Tuple[str, str]] = field(default_factory=list)

    @property
    def changed(self) -> bool:
        return bool(self.rooms_deleted or self.players_removed)


class RoomRegistry:

    def __init__(self,
                 word_list: Optional[Sequence[str]] = None,
                 max_rounds: int = MAX_ROUNDS,
                 rounds_per_game: int = ROUNDS_PER_GAME,
                 advance_policy: str = 'auto',
                 room_inactive_seconds: float = 30 * 60,
                 finished_room_seconds: float = 60 * 60,
                 player_grace_seconds: float = 5 * 60,
                 rng: Optional[random.Random] = None,
                 clock: Callable[[], float] = time.time):
        self.word_list = list(word_list or WORD_LIST)
        self.max_rounds = max_rounds
        self.rounds_per_game = rounds_per_game
        self.advance_policy = advance_policy
        get_advance_policy(advance_policy)  # fail fast on a bad name
        self.room_inactive_seconds = room_inactive_seconds
        self.finished_room_seconds = finished_room_seconds
        self.player_grace_seconds = player_grace_seconds
        self.rng = rng or random.Random()
        self.clock = clock

        self.rooms: Dict[str, Room] = {}
        self._connection_rooms: Dict[str, str] = {}  # connection_id -> room_id
        self._lock = threading.Lock()

    @classmethod
    def from_config(cls, config_class, **kwargs) -> 'RoomRegistry':
        """Build a registry from a ``Config`` class."""
        settings = dict(
            max_rounds=config_class.MAX_ROUNDS,
            rounds_per_game=config_class.ROUNDS_PER_GAME,
            advance_policy=config_class.ROUND_ADVANCE_POLICY,
            room_inactive_seconds=config_class.ROOM_INACTIVE_MINUTES * 60,
            finished_room_seconds=config_class.FINISHED_ROOM_MINUTES * 60,
            player_grace_seconds=config_class.PLAYER_GRACE_MINUTES * 60,
        )
        settings.update(kwargs)
        return cls(**settings)

    # Room table

    def _generate_room_id(self) -> str:
        return ''.join(self.rng.choice(ROOM_ID_ALPHABET) for _ in range(ROOM_ID_LENGTH))

    def _unique_room_id(self) -> str:
        room_id = self._generate_room_id()
        while room_id in self.rooms:
            room_id = self._generate_room_id()
        return room_id

    def get_room(self, room_id: str) -> Room:
        with self._lock:
            room = self.rooms.get(room_id)
        if room is None:
            raise NotFoundError("Room not found")
        return room

    @contextmanager
    def room_session(self, room_id: str) -> Iterator[Room]:
        """
        Hold the room's lock for the duration of the block.

        Raises:
            NotFoundError: the room does not exist or was deleted while waiting
        """
        room = self.get_room(room_id)
        with room.lock:
            if room.closed:
                raise NotFoundError("Room not found")
            yield room

    def room_for_connection(self, connection_id: str) -> Optional[str]:
        with self._lock:
            return self._connection_rooms.get(connection_id)

    def _ensure_unbound(self, connection_id: str) -> None:
        room_id = self.room_for_connection(connection_id)
        if room_id is not None:
            raise StateError(f"Already in room {room_id}")

    def _bind(self, connection_id: str, room_id: str) -> None:
        with self._lock:
            self._connection_rooms[connection_id] = room_id

    def _unbind(self, connection_id: Optional[str]) -> None:
        if connection_id is None:
            return
        with self._lock:
            self._connection_rooms.pop(connection_id, None)

    def _drop(self, room: Room, reason: str) -> List[Tuple[str, str]]:
        """Remove a room from the table. Caller holds ``room.lock``."""
        room.closed = True
        connections = [
            (player.connection_id, room.room_id) for player in room.players
            if player.connection_id is not None
        ]
        with self._lock:
            self.rooms.pop(room.room_id, None)
            for connection_id, _ in connections:
                self._connection_rooms.pop(connection_id, None)
        game_logger.log_room_event(room.room_id, 'room_deleted', reason=reason, state=room.state.value)
        return connections

    def delete_room(self, room_id: str) -> bool:
        try:
            with self.room_session(room_id) as room:
                self._drop(room, 'deleted')
                return True
        except NotFoundError:
            return False

    # Membership

    def create_room(self,
                    connection_id: str,
                    display_name: str,
                    max_players: int = DEFAULT_MAX_PLAYERS,
                    answer_mode: AnswerMode = AnswerMode.FIXED) -> Tuple[Room, Player]:
        """Create a room with the caller as its first player and host."""
        self._ensure_unbound(connection_id)
        now = self.clock()

        with self._lock:
            room_id = self._unique_room_id()
            room = Room(
                room_id,
                max_players=max_players,
                answer_mode=answer_mode,
                word_list=self.word_list,
                advance_policy=get_advance_policy(self.advance_policy),
                max_rounds=self.max_rounds,
                rounds_per_game=self.rounds_per_game,
                rng=random.Random(self.rng.random()),
                now=now
            )
            # The room is not shared yet, so seating the creator needs no room lock
            player = room.add_player(connection_id, display_name, now)
            self.rooms[room_id] = room
            self._connection_rooms[connection_id] = room_id

        game_logger.log_room_event(room_id, 'room_created', game_mode=answer_mode.value,
                                   max_players=max_players, advance_policy=self.advance_policy)
        return room, player

    def join_room(self, room_id: str, connection_id: str, display_name: str) -> Tuple[Room, Player]:
        """
        Seat a new player in a waiting room.

        Raises:
            NotFoundError: unknown room
            StateError: room full, game in progress, or connection already seated
        """
        self._ensure_unbound(connection_id)
        with self.room_session(room_id) as room:
            player = room.add_player(connection_id, display_name, self.clock())
            self._bind(connection_id, room_id)
            return room, player

    def reconnect(self, room_id: str, connection_id: str, display_name: str) -> Tuple[Room, Player]:
        """Rebind a disconnected player to ``connection_id``."""
        self._ensure_unbound(connection_id)
        with self.room_session(room_id) as room:
            player = room.reconnect(display_name, connection_id, self.clock())
            self._bind(connection_id, room_id)
            return room, player

    def leave_room(self, room_id: str, player_id: str, connection_id: str) -> Tuple[Room, bool]:
        """
        Permanently remove a player; deletes the room once it is empty.

        The caller must be a connected member of the room. Members may remove
        themselves, or a seat whose player is currently disconnected.

        Returns the room and whether it was deleted.

        Raises:
            IdentityError: the caller is not an active member, the player is
                unknown, or the player is still connected elsewhere
        """
        with self.room_session(room_id) as room:
            caller = room.players.require_connection(connection_id)
            player = room.players.require(player_id)
            if caller.player_id != player_id and player.is_connected:
                raise IdentityError("You can only remove yourself from a room")

            self._unbind(player.connection_id)
            room.remove_player(player_id, self.clock())

            if room.is_empty:
                self._drop(room, 'empty')
                return room, True
            return room, False

    def handle_disconnect(self, connection_id: str) -> Optional[Room]:
        """Transport-level disconnect: suspend the player, keep their seat."""
        room_id = self.room_for_connection(connection_id)
        if room_id is None:
            return None

        self._unbind(connection_id)
        try:
            with self.room_session(room_id) as room:
                player = room.disconnect(connection_id, self.clock())
                return room if player is not None else None
        except NotFoundError:
            return None

    # Discovery

    def list_open_rooms(self) -> List[Dict]:
        """Public summaries of WAITING rooms, newest first."""
        with self._lock:
            rooms = list(self.rooms.values())
        open_rooms = [room for room in rooms if room.state == RoomState.WAITING and not room.closed]
        open_rooms.sort(key=lambda room: room.created_at, reverse=True)
        return [room.summary() for room in open_rooms]

    def get_stats(self) -> Dict:
        with self._lock:
            rooms = list(self.rooms.values())
        return {
            'total_rooms': len(rooms),
            'waiting_rooms': sum(1 for room in rooms if room.state == RoomState.WAITING),
            'active_games': sum(1 for room in rooms if room.state == RoomState.PLAYING),
            'finished_games': sum(1 for room in rooms if room.state == RoomState.FINISHED),
            'total_players': sum(len(room.players) for room in rooms)
        }

    # Cleanup

    def sweep(self, now: Optional[float] = None) -> SweepReport:
        """
        Remove idle disconnected players, then delete rooms that are empty,
        inactive past the timeout, or finished past the longer timeout.
        """
        now = now if now is not None else self.clock()
        report = SweepReport()

        with self._lock:
            rooms = list(self.rooms.values())

        for room in rooms:
            with room.lock:
                if room.closed:
                    continue

                removed = room.sweep_players(self.player_grace_seconds, now)
                report.players_removed += len(removed)

                if room.is_empty:
                    reason = 'empty'
                elif room.is_expired(self.room_inactive_seconds, self.finished_room_seconds, now):
                    reason = 'finished_timeout' if room.state == RoomState.FINISHED else 'inactive'
                else:
                    reason = None

                if reason is not None:
                    report.closed_connections.extend(self._drop(room, reason))
                    report.rooms_deleted.append(room.room_id)
                elif removed:
                    report.room_updates.append((room.room_id, room.member_snapshots()))

        if report.changed:
            game_logger.log_room_event(None, 'cleanup_sweep', rooms_deleted=report.rooms_deleted,
                                       players_removed=report.players_removed)
        return report
