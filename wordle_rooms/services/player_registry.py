"""
Player Registry

Maps stable player ids to transient connection ids for one room and keeps the
host assignment consistent across joins, disconnects, reconnects and leaves.
"""

import time
import uuid
from typing import Dict, Iterator, List, Optional

from ..errors import IdentityError
from ..models.room import Player, PlayerStatus


class PlayerRegistry:
    """
    Players of a single room, in join order.

    Host invariant: whenever at least one player is connected, exactly one
    connected player is host.
    """

    def __init__(self):
        self._players: Dict[str, Player] = {}  # player_id -> Player
        self._connections: Dict[str, str] = {}  # connection_id -> player_id

    def __len__(self) -> int:
        return len(self._players)

    def __iter__(self) -> Iterator[Player]:
        return iter(list(self._players.values()))

    def __contains__(self, player_id: str) -> bool:
        return player_id in self._players

    def get(self, player_id: str) -> Optional[Player]:
        return self._players.get(player_id)

    def require(self, player_id: str) -> Player:
        player = self._players.get(player_id)
        if player is None:
            raise IdentityError("Player not found in this room")
        return player

    def by_connection(self, connection_id: str) -> Optional[Player]:
        player_id = self._connections.get(connection_id)
        return self._players.get(player_id) if player_id else None

    def require_connection(self, connection_id: str) -> Player:
        """The connected player behind ``connection_id``."""
        player = self.by_connection(connection_id)
        if player is None or not player.is_connected:
            raise IdentityError("You are not an active player in this room")
        return player

    def connected(self) -> List[Player]:
        return [player for player in self._players.values() if player.is_connected]

    @property
    def host(self) -> Optional[Player]:
        for player in self._players.values():
            if player.is_host:
                return player
        return None

    def add(self, connection_id: str, name: str, now: Optional[float] = None) -> Player:
        """Register a new player; the first player of an empty room becomes host."""
        now = now if now is not None else time.time()
        player = Player(
            player_id=f"player_{uuid.uuid4().hex}",
            name=name,
            connection_id=connection_id,
            joined_at=now,
            last_seen=now
        )
        self._players[player.player_id] = player
        self._connections[connection_id] = player.player_id
        self.ensure_host()
        return player

    def disconnect(self, connection_id: str, now: Optional[float] = None) -> Optional[Player]:
        """Mark the player behind ``connection_id`` as disconnected without removing them."""
        player = self.by_connection(connection_id)
        if player is None:
            return None

        del self._connections[connection_id]
        player.connection_id = None
        player.status = PlayerStatus.DISCONNECTED
        player.last_seen = now if now is not None else time.time()
        return player

    def find_for_reconnect(self, name: str) -> Player:
        """
        The unique player called ``name`` who is free to take a new connection.

        Raises:
            IdentityError: no such player, several players share the name, or
                the player is still bound to a live connection
        """
        matches = [player for player in self._players.values() if player.name == name]
        if not matches:
            available = ', '.join(player.name for player in self._players.values())
            raise IdentityError(f'Player "{name}" not found in room. Available players: {available}')
        if len(matches) > 1:
            raise IdentityError(f'More than one player is named "{name}"; cannot tell which one to reconnect')

        player = matches[0]
        if player.connection_id is not None:
            raise IdentityError(f'Player "{name}" is already connected through another session')
        return player

    def rebind(self, player: Player, connection_id: str, now: Optional[float] = None) -> None:
        """Attach a new connection to an existing player."""
        self._connections[connection_id] = player.player_id
        player.connection_id = connection_id
        player.last_seen = now if now is not None else time.time()

    def remove(self, player_id: str) -> Player:
        """Permanently remove a player and every connection mapped to them."""
        player = self.require(player_id)
        del self._players[player_id]
        for connection_id in [c for c, pid in self._connections.items() if pid == player_id]:
            del self._connections[connection_id]
        player.connection_id = None
        return player

    def idle_disconnected(self, grace_seconds: float, now: Optional[float] = None) -> List[Player]:
        """Disconnected players whose grace period has run out."""
        now = now if now is not None else time.time()
        return [
            player for player in self._players.values()
            if player.status == PlayerStatus.DISCONNECTED and now - player.last_seen > grace_seconds
        ]

    def ensure_host(self) -> Optional[Player]:
        """
        Restore the host invariant.

        Returns the newly promoted player, or None if the host did not change.
        """
        current = self.host
        if current is not None and current.is_connected:
            return None

        connected = self.connected()
        if not connected:
            return None

        if current is not None:
            current.is_host = False
        connected[0].is_host = True
        return connected[0]
