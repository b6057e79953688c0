"""
WebSocket Event Handlers

Handles all WebSocket events for real-time multiplayer rooms. Each command
event is parsed into a typed command, executed by the ``CommandService`` and
answered on its result event; accepted mutations fan out a personalised
``room_state_update`` to every connected room member.
"""

from flask import request
from flask_socketio import emit, join_room, leave_room

from ..models.protocol import CommandKind
from ..utils.decorators import websocket_command
from ..utils.game_logger import game_logger

LOBBY_ROOM = "lobby"


def register_websocket_handlers(socketio, command_service):
    """Register all WebSocket event handlers."""
    registry = command_service.registry

    def deliver(outcome):
        """Answer the caller, then fan out snapshots and lobby changes."""
        if outcome.kind is not None:
            emit(outcome.kind.result_event, outcome.response)
        if not outcome.success:
            return

        if outcome.left_room:
            leave_room(outcome.room_id)
        elif outcome.kind in (CommandKind.JOIN_ROOM, CommandKind.REJOIN_ROOM):
            join_room(outcome.room_id)

        broadcast_room_update(socketio, outcome.broadcasts)
        if outcome.lobby_changed:
            broadcast_lobby_state(socketio, registry)

    @socketio.on('connect')
    def handle_connect(auth=None):
        """Handle WebSocket connection."""
        game_logger.log_command(request.sid, 'connect')

    @socketio.on('disconnect')
    def handle_disconnect(reason=None):
        """Handle WebSocket disconnection: the player keeps their seat until swept."""
        try:
            outcome = command_service.handle_disconnect(request.sid)
            if outcome.room_id is not None:
                game_logger.log_room_event(outcome.room_id, 'connection_lost', connection_id=request.sid,
                                           reason=str(reason) if reason is not None else None)
                broadcast_room_update(socketio, outcome.broadcasts)
                broadcast_lobby_state(socketio, registry)
        except Exception as e:
            game_logger.log_error(request.sid, e, 'disconnect')

    @socketio.on('join_lobby')
    def handle_join_lobby(data=None):
        """Join the lobby for real-time room list updates."""
        join_room(LOBBY_ROOM)
        emit('lobby_state_update', lobby_state(registry))

    @socketio.on('leave_lobby')
    def handle_leave_lobby(data=None):
        """Leave the lobby."""
        leave_room(LOBBY_ROOM)

    @socketio.on(CommandKind.JOIN_ROOM.value)
    @websocket_command(CommandKind.JOIN_ROOM)
    def handle_join_room(command):
        """Create a new room or join an existing one."""
        deliver(command_service.execute(command, request.sid))

    @socketio.on(CommandKind.START_GAME.value)
    @websocket_command(CommandKind.START_GAME)
    def handle_start_game(command):
        """Host starts the first round."""
        deliver(command_service.execute(command, request.sid))

    @socketio.on(CommandKind.SUBMIT_GUESS.value)
    @websocket_command(CommandKind.SUBMIT_GUESS)
    def handle_submit_guess(command):
        """Submit a guess for the current round."""
        deliver(command_service.execute(command, request.sid))

    @socketio.on(CommandKind.LEAVE_ROOM.value)
    @websocket_command(CommandKind.LEAVE_ROOM)
    def handle_leave_room(command):
        """Leave a room for good (unlike a disconnect)."""
        deliver(command_service.execute(command, request.sid))

    @socketio.on(CommandKind.REJOIN_ROOM.value)
    @websocket_command(CommandKind.REJOIN_ROOM)
    def handle_rejoin_room(command):
        """Reclaim a seat after a page refresh or network drop."""
        deliver(command_service.execute(command, request.sid))

    @socketio.on(CommandKind.MARK_READY.value)
    @websocket_command(CommandKind.MARK_READY)
    def handle_mark_ready(command):
        """Flag the caller as ready for the next round."""
        deliver(command_service.execute(command, request.sid))

    @socketio.on(CommandKind.GET_ROOM_INFO.value)
    @websocket_command(CommandKind.GET_ROOM_INFO)
    def handle_get_room_info(command):
        """Fetch the room snapshot without changing anything."""
        deliver(command_service.execute(command, request.sid))


def lobby_state(registry):
    return {'success': True, 'rooms': registry.list_open_rooms()}


def broadcast_room_update(socketio, broadcasts):
    """Send each member their own snapshot of the room."""
    for connection_id, snapshot in broadcasts:
        socketio.emit('room_state_update', {'success': True, 'room': snapshot}, to=connection_id)


def broadcast_lobby_state(socketio, registry):
    """Push the open-room listing to everyone watching the lobby."""
    socketio.emit('lobby_state_update', lobby_state(registry), to=LOBBY_ROOM)


def broadcast_sweep_report(socketio, registry, report):
    """Notify clients about what a cleanup pass removed."""
    for connection_id, room_id in report.closed_connections:
        socketio.emit('room_closed', {'room_id': room_id, 'reason': 'inactive'}, to=connection_id)
    for _, broadcasts in report.room_updates:
        broadcast_room_update(socketio, broadcasts)
    if report.changed:
        broadcast_lobby_state(socketio, registry)
