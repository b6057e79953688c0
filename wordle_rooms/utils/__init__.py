"""
Utilities Package

Contains utility functions, decorators, and helper modules.
"""

from .decorators import json_endpoint, websocket_command
from .helpers import get_client_identity, isoformat_timestamp
from .game_logger import game_logger

__all__ = ['json_endpoint', 'websocket_command', 'get_client_identity', 'isoformat_timestamp', 'game_logger']
