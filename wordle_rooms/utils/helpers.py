"""
Helper Functions

Contains utility functions used throughout the application.
"""

from datetime import datetime, timezone
from typing import Optional

from flask import request


def get_client_identity(request_obj=None) -> str:
    """Socket session id inside a socket event, else the caller's address."""
    if request_obj is None:
        request_obj = request

    sid = getattr(request_obj, 'sid', None)
    if sid:
        return sid
    return request_obj.remote_addr or 'unknown'


def isoformat_timestamp(timestamp: Optional[float]) -> Optional[str]:
    """Render an epoch timestamp as an ISO-8601 UTC string."""
    if timestamp is None:
        return None
    return datetime.fromtimestamp(timestamp, tz=timezone.utc).isoformat()
