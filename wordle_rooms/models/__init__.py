"""
Data Models Package

Contains all data models and schemas used throughout the application.
"""

from .game import (
    AnswerMode, CandidateScore, Feedback, GameState, GuessRecord, GuessResult,
    LetterStatus, SessionStatus
)
from .room import Player, PlayerStatus, RoomState, RoundOutcome
from .protocol import Command, CommandKind, parse_command

__all__ = [
    'AnswerMode', 'CandidateScore', 'Feedback', 'GameState', 'GuessRecord', 'GuessResult',
    'LetterStatus', 'SessionStatus',
    'Player', 'PlayerStatus', 'RoomState', 'RoundOutcome',
    'Command', 'CommandKind', 'parse_command'
]
