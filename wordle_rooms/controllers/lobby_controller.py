"""
Lobby Controller

Handles multiplayer room discovery over HTTP. Room play itself happens over
WebSocket.
"""

from flask import Blueprint, current_app

from ..utils.decorators import json_endpoint

lobby_bp = Blueprint('lobby', __name__)


@lobby_bp.route('/multiplayer/rooms', methods=['GET'])
@json_endpoint('list_rooms')
def list_rooms():
    """Rooms that are still accepting players."""
    rooms = current_app.extensions['room_registry'].list_open_rooms()
    return {
        'success': True,
        'rooms': rooms,
        'total': len(rooms)
    }


@lobby_bp.route('/multiplayer/stats', methods=['GET'])
@json_endpoint('room_stats')
def room_stats():
    """Aggregate counts across all rooms."""
    return {
        'success': True,
        'stats': current_app.extensions['room_registry'].get_stats()
    }
