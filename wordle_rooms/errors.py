"""
Game Errors

Every rejected command is reported through one of these exceptions. They are
raised inside the domain services and caught at the command boundary, where
they become structured failure responses.
"""

from typing import Dict


class GameError(Exception):
    """Base class for recoverable, user-visible command failures."""

    http_status = 400

    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason

    def to_dict(self) -> Dict:
        return {
            'success': False,
            'error': self.reason,
            'error_type': type(self).__name__
        }


class ValidationError(GameError):
    """Malformed input: a guess of the wrong length or charset, a bad payload."""
    http_status = 400


class StateError(GameError):
    """The command is not allowed in the current room, player or session state."""
    http_status = 409


class IdentityError(GameError):
    """The caller cannot be matched to exactly one active player."""
    http_status = 403


class NotFoundError(GameError):
    """Unknown room or game identifier."""
    http_status = 404
