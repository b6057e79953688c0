"""
Services Package

Contains all business logic and service classes.
"""

from .adversary import AdversarialSelector
from .advance_policy import AdvancePolicy, AutoAdvancePolicy, ReadyGatePolicy, get_advance_policy
from .command_service import CommandOutcome, CommandService
from .game_service import GameService
from .player_registry import PlayerRegistry
from .room import Room
from .room_registry import RoomRegistry, SweepReport
from .scoring import normalize_guess, score_guess
from .session import GameSession, RoundSecret, create_session

__all__ = [
    'AdversarialSelector',
    'AdvancePolicy', 'AutoAdvancePolicy', 'ReadyGatePolicy', 'get_advance_policy',
    'CommandOutcome', 'CommandService',
    'GameService',
    'PlayerRegistry',
    'Room',
    'RoomRegistry', 'SweepReport',
    'normalize_guess', 'score_guess',
    'GameSession', 'RoundSecret', 'create_session'
]
