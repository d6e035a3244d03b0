"""Handshake authentication for socket connections.

The credential is taken from the explicit auth field of the handshake (an
``Authorization: Bearer`` header) or, failing that, from the ``token`` query
parameter. Browsers cannot set headers on a WebSocket upgrade, hence the
query fallback.

Authentication happens once, before the socket is accepted: a refused
connection is closed with 1008 and never reaches the event loop or any room.
"""
from __future__ import annotations

import logging
from typing import Mapping, Optional

from starlette.websockets import WebSocket

from tripmate.core.auth import Identity, bearer_token, verify_token
from tripmate.core.config import Settings, get_settings

logger = logging.getLogger(__name__)

__all__ = ["extract_token", "ConnectionAuthenticator"]


def extract_token(headers: Mapping[str, str], query: Mapping[str, str]) -> Optional[str]:
    """Pick the handshake credential; the auth header takes precedence."""
    return bearer_token(headers.get("authorization")) or query.get("token") or None


class ConnectionAuthenticator:
    def __init__(self, settings: Optional[Settings] = None) -> None:
        self.settings = settings or get_settings()

    def authenticate(self, websocket: WebSocket) -> Identity:
        """Return the caller identity or raise ``AuthenticationError``."""
        token = extract_token(websocket.headers, websocket.query_params)
        return verify_token(token, self.settings)
