"""
Wordle Rooms Server Application Package

Single-player Wordle/Absurdle games over HTTP and multi-player contest rooms
over WebSocket, built on Flask and Flask-SocketIO.
"""

from flask import Flask
from flask_cors import CORS
from flask_socketio import SocketIO
from .config import Config


def create_app(config_class=Config, registry=None, games=None):
    """
    Application factory pattern for creating Flask app instances.

    Args:
        config_class: Configuration class to use
        registry: Optional pre-built ``RoomRegistry`` (tests inject one with a fixed clock)
        games: Optional pre-built ``GameService``

    Returns:
        (app, socketio) with all extensions and services initialized
    """
    app = Flask(__name__)
    app.config.from_object(config_class)

    # Initialize extensions
    CORS(app, origins=config_class.CORS_ORIGINS)
    socketio = SocketIO(app, cors_allowed_origins=config_class.CORS_ORIGINS, async_mode='threading',
                        logger=False, engineio_logger=False)

    # Initialize services
    from .services.command_service import CommandService
    from .services.game_service import GameService
    from .services.room_registry import RoomRegistry

    if registry is None:
        registry = RoomRegistry.from_config(config_class)
    if games is None:
        games = GameService(max_rounds=config_class.MAX_ROUNDS)

    app.extensions['room_registry'] = registry
    app.extensions['game_service'] = games
    app.extensions['command_service'] = CommandService(registry)

    # Register blueprints
    from .controllers.game_controller import game_bp
    from .controllers.lobby_controller import lobby_bp

    app.register_blueprint(game_bp, url_prefix='/api')
    app.register_blueprint(lobby_bp, url_prefix='/api')

    # Register WebSocket handlers
    from .websocket.handlers import register_websocket_handlers
    register_websocket_handlers(socketio, app.extensions['command_service'])

    # Store socketio instance for use in other modules
    app.socketio = socketio

    return app, socketio
