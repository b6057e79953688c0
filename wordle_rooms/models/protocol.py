"""
Command Protocol

Room-scoped commands arrive from the transport as loosely-typed dictionaries.
They are parsed here into a closed set of command kinds with typed payloads
before any room logic runs.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Union

from ..config.game_settings import DEFAULT_MAX_PLAYERS, MAX_PLAYERS_LIMIT, MAX_NAME_LENGTH
from ..errors import ValidationError
from .game import AnswerMode


class CommandKind(Enum):
    JOIN_ROOM = "join_room"
    START_GAME = "start_game"
    SUBMIT_GUESS = "submit_guess"
    LEAVE_ROOM = "leave_room"
    REJOIN_ROOM = "rejoin_room"
    MARK_READY = "mark_ready"
    GET_ROOM_INFO = "get_room_info"

    @property
    def result_event(self) -> str:
        """Name of the event the caller receives the result on."""
        return _RESULT_EVENTS[self]

    @property
    def mutates(self) -> bool:
        return self is not CommandKind.GET_ROOM_INFO


_RESULT_EVENTS = {
    CommandKind.JOIN_ROOM: 'room_join_result',
    CommandKind.START_GAME: 'game_start_result',
    CommandKind.SUBMIT_GUESS: 'guess_result',
    CommandKind.LEAVE_ROOM: 'room_leave_result',
    CommandKind.REJOIN_ROOM: 'rejoin_result',
    CommandKind.MARK_READY: 'ready_result',
    CommandKind.GET_ROOM_INFO: 'room_info',
}


@dataclass(frozen=True)
class JoinRoomPayload:
    display_name: str
    room_id: Optional[str] = None
    create_new: bool = False
    max_players: int = DEFAULT_MAX_PLAYERS
    answer_mode: AnswerMode = AnswerMode.FIXED


@dataclass(frozen=True)
class RoomPayload:
    """Payload of commands that only name a room (start, ready, info)."""
    room_id: str


@dataclass(frozen=True)
class SubmitGuessPayload:
    room_id: str
    guess: str


@dataclass(frozen=True)
class LeaveRoomPayload:
    room_id: str
    player_id: str


@dataclass(frozen=True)
class RejoinRoomPayload:
    room_id: str
    display_name: str


Payload = Union[JoinRoomPayload, RoomPayload, SubmitGuessPayload, LeaveRoomPayload, RejoinRoomPayload]


@dataclass(frozen=True)
class Command:
    kind: CommandKind
    payload: Payload

    @property
    def room_id(self) -> Optional[str]:
        return self.payload.room_id


def _require_str(data: Dict[str, Any], key: str, label: str) -> str:
    value = data.get(key)
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{label} is required")
    return value.strip()


def _room_id(data: Dict[str, Any]) -> str:
    return _require_str(data, 'room_id', 'Room ID').upper()


def _display_name(data: Dict[str, Any], key: str = 'player_name') -> str:
    name = _require_str(data, key, 'Player name')
    if len(name) > MAX_NAME_LENGTH:
        raise ValidationError(f"Player name must be at most {MAX_NAME_LENGTH} characters")
    return name


def _answer_mode(value: Any) -> AnswerMode:
    try:
        return AnswerMode(value)
    except ValueError:
        modes = ', '.join(f'"{mode.value}"' for mode in AnswerMode)
        raise ValidationError(f"Invalid game mode. Must be one of {modes}")


def _max_players(value: Any, limit: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError("max_players must be an integer")
    if value < 2 or value > limit:
        raise ValidationError(f"max_players must be between 2 and {limit}")
    return value


def parse_command(kind: Union[str, CommandKind],
                  data: Optional[Dict[str, Any]],
                  default_max_players: int = DEFAULT_MAX_PLAYERS,
                  max_players_limit: int = MAX_PLAYERS_LIMIT) -> Command:
    """
    Validate a raw command payload and build a typed ``Command``.

    Raises:
        ValidationError: unknown command kind or malformed payload
    """
    try:
        kind = CommandKind(kind)
    except ValueError:
        raise ValidationError(f"Unknown command: {kind}")

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ValidationError("Command payload must be an object")

    if kind is CommandKind.JOIN_ROOM:
        create_new = bool(data.get('create_new', False))
        payload = JoinRoomPayload(
            display_name=_display_name(data),
            room_id=None if create_new else _room_id(data),
            create_new=create_new,
            max_players=_max_players(data.get('max_players', default_max_players), max_players_limit),
            answer_mode=_answer_mode(data.get('game_mode', AnswerMode.FIXED.value))
        )
    elif kind is CommandKind.SUBMIT_GUESS:
        guess = data.get('guess')
        if not isinstance(guess, str):
            raise ValidationError("Guess must be a string")
        payload = SubmitGuessPayload(room_id=_room_id(data), guess=guess)
    elif kind is CommandKind.LEAVE_ROOM:
        payload = LeaveRoomPayload(room_id=_room_id(data), player_id=_require_str(data, 'player_id', 'Player ID'))
    elif kind is CommandKind.REJOIN_ROOM:
        payload = RejoinRoomPayload(room_id=_room_id(data), display_name=_display_name(data))
    else:
        payload = RoomPayload(room_id=_room_id(data))

    return Command(kind=kind, payload=payload)
