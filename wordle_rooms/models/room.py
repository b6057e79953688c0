"""
Room Data Models

Contains the player and room-level enums and data structures.
"""

import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional

from .game import GuessRecord


class PlayerStatus(Enum):
    READY = "READY"
    PLAYING = "PLAYING"
    FINISHED = "FINISHED"
    DISCONNECTED = "DISCONNECTED"


class RoomState(Enum):
    WAITING = "WAITING"
    PLAYING = "PLAYING"
    FINISHED = "FINISHED"


@dataclass
class Player:
    """
    A room member.

    ``player_id`` is stable for the player's whole stay in the room;
    ``connection_id`` is the transport's session id and is rebound on
    reconnect (``None`` while disconnected).
    """
    player_id: str
    name: str
    connection_id: Optional[str]
    status: PlayerStatus = PlayerStatus.READY
    is_host: bool = False
    score: int = 0
    guesses: List[GuessRecord] = field(default_factory=list)
    ready_for_next_round: bool = False
    joined_at: float = field(default_factory=time.time)
    last_seen: float = field(default_factory=time.time)

    @property
    def is_connected(self) -> bool:
        return self.status != PlayerStatus.DISCONNECTED


@dataclass
class RoundOutcome:
    """How one player's round ended."""
    player_id: str
    name: str
    status: str
    guesses_used: int
    points: int
    answer: Optional[str] = None

    def to_dict(self) -> Dict:
        return {
            'player_id': self.player_id,
            'name': self.name,
            'status': self.status,
            'guesses_used': self.guesses_used,
            'points': self.points,
            'answer': self.answer
        }
