"""
Game Logger Module for Wordle Rooms

This module provides structured logging for inbound commands, server
responses, room lifecycle events and errors, for both the HTTP API and the
real-time room transport.
"""

import logging
import json
from datetime import datetime
from typing import Dict, Any, Optional
from pathlib import Path

from ..config.app_config import Config


class GameLogger:
    """
    Centralized logging system for the game server.

    Features:
    - Command tracking keyed by client (socket session id or remote address)
    - Server response logging with secrets stripped
    - Room and game event logging
    - JSON structured logs for easy parsing
    """

    def __init__(self, log_dir: str = "logs", level: str = "INFO"):
        self.log_dir = Path(log_dir)
        self.log_dir.mkdir(parents=True, exist_ok=True)
        self.level = getattr(logging, str(level).upper(), logging.INFO)

        # Setup main game logger
        self.logger = self._setup_logger()

    def _log_file(self) -> Path:
        return self.log_dir / f"game_log_{datetime.now().strftime('%Y-%m-%d')}.log"

    def _setup_logger(self) -> logging.Logger:
        """Setup the main game logger with file handler."""
        logger = logging.getLogger('wordle_rooms')
        logger.setLevel(self.level)
        logger.propagate = False

        # Prevent duplicate handlers
        if logger.handlers:
            for handler in list(logger.handlers):
                handler.close()
            logger.handlers.clear()

        # File handler for detailed logs
        file_handler = logging.FileHandler(self._log_file(), encoding='utf-8')
        file_handler.setLevel(self.level)

        # Console handler for only important messages (WARNING and above)
        console_handler = logging.StreamHandler()
        console_handler.setLevel(logging.WARNING)

        file_handler.setFormatter(logging.Formatter(
            '%(asctime)s | %(levelname)s | %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        ))
        console_handler.setFormatter(logging.Formatter('%(levelname)s: %(message)s'))

        logger.addHandler(file_handler)
        logger.addHandler(console_handler)

        return logger

    def _create_log_entry(self,
                          event_type: str,
                          action: str,
                          client: Optional[str],
                          details: Dict[str, Any]) -> str:
        """Create a structured log entry."""
        log_entry = {
            'timestamp': datetime.now().isoformat(),
            'event_type': event_type,
            'action': action,
            'client': client,
            'details': details
        }
        return json.dumps(log_entry, ensure_ascii=False, default=str)

    def log_command(self,
                    client: Optional[str],
                    action: str,
                    room_id: Optional[str] = None,
                    **kwargs):
        """
        Log an inbound command or HTTP request.

        Args:
            client: Socket session id or remote address of the caller
            action: Command name (e.g. 'join_room', 'submit_guess', 'new_game')
            room_id: Room or game identifier if applicable
            **kwargs: Additional details to log
        """
        details = {'room_id': room_id, **kwargs}
        self.logger.info(self._create_log_entry('USER_ACTION', action, client, details))

    def log_command_result(self,
                           client: Optional[str],
                           action: str,
                           success: bool,
                           response_data: Dict[str, Any],
                           room_id: Optional[str] = None,
                           **kwargs):
        """
        Log the response sent back for a command.

        Failures are logged at WARNING since they are expected user errors,
        not server faults.
        """
        details = {
            'room_id': room_id,
            'success': success,
            'response_size': len(str(response_data)),
            'response_data': self._sanitize_response_data(response_data),
            **kwargs
        }

        event_type = 'SERVER_RESPONSE_SUCCESS' if success else 'SERVER_RESPONSE_ERROR'
        log_message = self._create_log_entry(event_type, action, client, details)

        if success:
            self.logger.info(log_message)
        else:
            self.logger.warning(log_message)

    def log_room_event(self,
                       room_id: Optional[str],
                       event: str,
                       **kwargs):
        """
        Log room and game lifecycle events (round started, player swept, ...).

        Args:
            room_id: Room identifier
            event: Type of event (e.g. 'round_started', 'host_migrated')
            **kwargs: Additional event details
        """
        details = {'room_id': room_id, **kwargs}
        self.logger.info(self._create_log_entry('GAME_EVENT', event, 'system', details))

    def log_error(self,
                  client: Optional[str],
                  error: Exception,
                  action: str,
                  room_id: Optional[str] = None):
        """Log unexpected errors with full context."""
        details = {
            'room_id': room_id,
            'error_type': type(error).__name__,
            'error_message': str(error),
            'action': action
        }
        self.logger.error(self._create_log_entry('ERROR', action, client, details))

    def _sanitize_response_data(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """Reduce snapshots to their essentials so logs stay small and never leak answers."""
        if not isinstance(data, dict):
            return {'data_type': type(data).__name__}

        sanitized = data.copy()

        if isinstance(sanitized.get('room'), dict):
            room = sanitized['room']
            sanitized['room'] = {
                'room_id': room.get('room_id'),
                'state': room.get('state'),
                'current_round': room.get('current_round'),
                'player_count': len(room.get('players', []))
            }

        for key in ('guess', 'state'):
            if isinstance(sanitized.get(key), dict):
                state = sanitized[key]
                sanitized[key] = {
                    'status': state.get('status'),
                    'rounds_left': state.get('rounds_left'),
                    'guesses_count': len(state.get('guesses', [])),
                    'answer_revealed': state.get('answer') is not None
                }

        return sanitized

    def get_log_stats(self) -> Dict[str, Any]:
        """Get statistics about logged events (useful for monitoring)."""
        log_file = self._log_file()
        if not log_file.exists():
            return {'error': 'No log file found for today'}

        stats = {
            'log_file': str(log_file),
            'file_size_mb': round(log_file.stat().st_size / (1024 * 1024), 2),
            'total_entries': 0,
            'user_actions': 0,
            'server_responses': 0,
            'game_events': 0,
            'errors': 0
        }

        try:
            with open(log_file, 'r', encoding='utf-8') as f:
                for line in f:
                    if not line.strip():
                        continue
                    stats['total_entries'] += 1
                    if 'USER_ACTION' in line:
                        stats['user_actions'] += 1
                    elif 'SERVER_RESPONSE' in line:
                        stats['server_responses'] += 1
                    elif 'GAME_EVENT' in line:
                        stats['game_events'] += 1
                    elif 'ERROR' in line:
                        stats['errors'] += 1
        except OSError as e:
            return {'error': f'Failed to get stats: {e}'}

        return stats


# Global logger instance
game_logger = GameLogger(Config.LOG_DIR, Config.LOG_LEVEL)
