"""
Endpoint Decorators

Contains decorators that put the error boundary around HTTP endpoints and
WebSocket command handlers.
"""

from functools import wraps
from flask import current_app, jsonify, request
from flask_socketio import emit

from ..errors import GameError
from ..models.protocol import CommandKind, parse_command
from .game_logger import game_logger
from .helpers import get_client_identity


def json_endpoint(action):
    """
    Decorator for HTTP endpoints returning JSON.

    ``GameError`` becomes its structured failure with the matching status
    code; anything else is logged and reported as a 500.
    """
    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            client = get_client_identity(request)
            game_logger.log_command(client, action, kwargs.get('game_id'))
            try:
                response_data = f(*args, **kwargs)
            except GameError as e:
                error_response = e.to_dict()
                game_logger.log_command_result(client, action, False, error_response, kwargs.get('game_id'))
                return jsonify(error_response), e.http_status
            except Exception as e:
                game_logger.log_error(client, e, action, kwargs.get('game_id'))
                return jsonify({'success': False, 'error': str(e)}), 500

            game_logger.log_command_result(client, action, True, response_data, kwargs.get('game_id'))
            return jsonify(response_data)

        return decorated_function
    return decorator


def websocket_command(kind: CommandKind):
    """
    Decorator for WebSocket command handlers.

    Parses the raw event payload into a typed ``Command`` before the handler
    runs. Malformed payloads are answered on the command's result event and
    never reach room logic.
    """
    def decorator(f):
        @wraps(f)
        def decorated_function(data=None):
            try:
                command = parse_command(
                    kind, data,
                    default_max_players=current_app.config.get('DEFAULT_MAX_PLAYERS', 4),
                    max_players_limit=current_app.config.get('MAX_PLAYERS_LIMIT', 8)
                )
            except GameError as e:
                game_logger.log_command_result(request.sid, kind.value, False, e.to_dict())
                emit(kind.result_event, e.to_dict())
                return

            try:
                return f(command)
            except Exception as e:
                game_logger.log_error(request.sid, e, kind.value, command.room_id)
                emit('error', {'error': str(e)})

        return decorated_function
    return decorator
