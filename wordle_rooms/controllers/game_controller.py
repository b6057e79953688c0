"""
Game Controller

Handles all single-player game HTTP endpoints.
"""

from dataclasses import asdict
from flask import Blueprint, current_app, request

from ..errors import ValidationError
from ..models.game import AnswerMode
from ..utils.decorators import json_endpoint
from ..utils.game_logger import game_logger
from ..utils.helpers import get_client_identity

game_bp = Blueprint('game', __name__)


def _game_service():
    return current_app.extensions['game_service']


@game_bp.route('/new_game', methods=['POST'])
@json_endpoint('new_game')
def new_game():
    """Create a new game session."""
    data = request.get_json(silent=True) or {}
    game_mode = data.get('game_mode', AnswerMode.FIXED.value)

    game_service = _game_service()
    game_id = game_service.create_new_game(game_mode, data.get('max_rounds'))
    state = game_service.get_game_state(game_id)

    game_logger.log_room_event(game_id, 'game_created', client=get_client_identity(request),
                               game_mode=game_mode, max_rounds=state.max_rounds)
    return {
        'success': True,
        'game_id': game_id,
        'state': asdict(state)
    }


@game_bp.route('/game/<game_id>/state', methods=['GET'])
@json_endpoint('get_state')
def get_state(game_id):
    """Get current game state."""
    state = _game_service().get_game_state(game_id)
    return {
        'success': True,
        'state': asdict(state)
    }


@game_bp.route('/game/<game_id>/guess', methods=['POST'])
@json_endpoint('submit_guess')
def make_guess(game_id):
    """Submit a guess for validation and evaluation."""
    data = request.get_json(silent=True)
    if not data or 'guess' not in data:
        raise ValidationError('Guess is required')

    result, state = _game_service().make_guess(game_id, data['guess'])

    # Log special game events
    if result.is_over:
        event = 'game_won' if state.status == 'WIN' else 'game_lost'
        game_logger.log_room_event(game_id, event, client=get_client_identity(request),
                                   rounds_used=len(state.guesses), target_word=state.answer)

    return {
        'success': True,
        'result': result.to_dict(),
        'state': asdict(state)
    }


@game_bp.route('/game/<game_id>', methods=['DELETE'])
@json_endpoint('delete_game')
def delete_game(game_id):
    """Delete a game session."""
    success = _game_service().delete_game(game_id)
    if success:
        game_logger.log_room_event(game_id, 'game_deleted', client=get_client_identity(request))
    return {'success': success}


@game_bp.route('/modes', methods=['GET'])
@json_endpoint('get_modes')
def get_modes():
    """List the supported answer modes."""
    return {
        'success': True,
        'modes': [mode.value for mode in AnswerMode],
        'default': AnswerMode.FIXED.value
    }


@game_bp.route('/health', methods=['GET'])
@json_endpoint('health_check')
def health_check():
    """Health check endpoint."""
    registry = current_app.extensions['room_registry']
    return {
        'status': 'healthy',
        'active_games': len(_game_service().games),
        'rooms': registry.get_stats(),
        'log_stats': game_logger.get_log_stats()
    }
