"""
Command Service

The boundary between the transport and the rooms. Executes typed commands
against the room registry, turns every ``GameError`` into a structured
failure, and reports which personalised snapshots need broadcasting.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from ..errors import GameError
from ..models.protocol import (
    Command, CommandKind, JoinRoomPayload, LeaveRoomPayload, RejoinRoomPayload, SubmitGuessPayload
)
from ..utils.game_logger import game_logger
from .room import Room
from .room_registry import RoomRegistry


@dataclass
class CommandOutcome:
    """Result of one command: the caller's response plus the fan-out it caused."""
    kind: Optional[CommandKind]
    response: Dict[str, Any]
    room_id: Optional[str] = None
    broadcasts: List[Tuple[str, Dict]] = field(default_factory=list)  # (connection_id, snapshot)
    lobby_changed: bool = False
    left_room: bool = False

    @property
    def success(self) -> bool:
        return bool(self.response.get('success'))


class CommandService:

    def __init__(self, registry: RoomRegistry):
        self.registry = registry

    def execute(self, command: Command, connection_id: str) -> CommandOutcome:
        """
        Run ``command`` on behalf of ``connection_id``.

        Never raises ``GameError``: rejections come back as failed outcomes
        and leave room state unchanged.
        """
        handler = getattr(self, f'_{command.kind.value}')
        game_logger.log_command(connection_id, command.kind.value, command.room_id)
        try:
            outcome = handler(command.payload, connection_id)
        except GameError as e:
            outcome = CommandOutcome(command.kind, e.to_dict(), room_id=command.room_id)

        game_logger.log_command_result(connection_id, command.kind.value, outcome.success,
                                       outcome.response, outcome.room_id)
        return outcome

    def handle_disconnect(self, connection_id: str) -> CommandOutcome:
        """Transport notification that ``connection_id`` went away."""
        room = self.registry.handle_disconnect(connection_id)
        if room is None:
            return CommandOutcome(None, {'success': True, 'room_id': None})

        with room.lock:
            broadcasts = [] if room.closed else room.member_snapshots()
        return CommandOutcome(None, {'success': True, 'room_id': room.room_id},
                              room_id=room.room_id, broadcasts=broadcasts, lobby_changed=True)

    def _respond(self, kind: CommandKind, room: Room, player_id: Optional[str],
                 lobby_changed: bool = False, **extra) -> CommandOutcome:
        """Success outcome; caller holds ``room.lock``."""
        response = {
            'success': True,
            'room_id': room.room_id,
            'player_id': player_id,
            'room': room.snapshot(player_id),
            **extra
        }
        broadcasts = room.member_snapshots() if kind.mutates else []
        return CommandOutcome(kind, response, room_id=room.room_id,
                              broadcasts=broadcasts, lobby_changed=lobby_changed)

    def _join_room(self, payload: JoinRoomPayload, connection_id: str) -> CommandOutcome:
        if payload.create_new:
            room, player = self.registry.create_room(
                connection_id, payload.display_name, payload.max_players, payload.answer_mode
            )
        else:
            room, player = self.registry.join_room(payload.room_id, connection_id, payload.display_name)

        with room.lock:
            return self._respond(CommandKind.JOIN_ROOM, room, player.player_id, lobby_changed=True,
                                 player_name=player.name, created=payload.create_new)

    def _start_game(self, payload, connection_id: str) -> CommandOutcome:
        with self.registry.room_session(payload.room_id) as room:
            player = room.players.require_connection(connection_id)
            room.start_game(player.player_id, self.registry.clock())
            return self._respond(CommandKind.START_GAME, room, player.player_id, lobby_changed=True)

    def _submit_guess(self, payload: SubmitGuessPayload, connection_id: str) -> CommandOutcome:
        with self.registry.room_session(payload.room_id) as room:
            player = room.players.require_connection(connection_id)
            round_number = room.current_round
            result = room.make_guess(player.player_id, payload.guess, self.registry.clock())
            extra = {'guess': result.to_dict(), 'round': round_number}
            if room.rankings is not None:
                extra['rankings'] = room.rankings
            return self._respond(CommandKind.SUBMIT_GUESS, room, player.player_id, **extra)

    def _leave_room(self, payload: LeaveRoomPayload, connection_id: str) -> CommandOutcome:
        with self.registry.room_session(payload.room_id) as room:
            _, deleted = self.registry.leave_room(payload.room_id, payload.player_id, connection_id)
            response = {'success': True, 'room_id': room.room_id, 'player_id': payload.player_id,
                        'room_deleted': deleted}
            broadcasts = [] if deleted else room.member_snapshots()
            return CommandOutcome(CommandKind.LEAVE_ROOM, response, room_id=room.room_id,
                                  broadcasts=broadcasts, lobby_changed=True, left_room=True)

    def _rejoin_room(self, payload: RejoinRoomPayload, connection_id: str) -> CommandOutcome:
        room, player = self.registry.reconnect(payload.room_id, connection_id, payload.display_name)
        with room.lock:
            return self._respond(CommandKind.REJOIN_ROOM, room, player.player_id, lobby_changed=True,
                                 player_name=player.name)

    def _mark_ready(self, payload, connection_id: str) -> CommandOutcome:
        with self.registry.room_session(payload.room_id) as room:
            player = room.players.require_connection(connection_id)
            room.mark_ready(player.player_id, self.registry.clock())
            extra = {'rankings': room.rankings} if room.rankings is not None else {}
            return self._respond(CommandKind.MARK_READY, room, player.player_id, **extra)

    def _get_room_info(self, payload, connection_id: str) -> CommandOutcome:
        with self.registry.room_session(payload.room_id) as room:
            player = room.players.by_connection(connection_id)
            return self._respond(CommandKind.GET_ROOM_INFO, room, player.player_id if player else None,
                                 status=room.status_summary())
