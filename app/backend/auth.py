import hmac
import logging
import secrets
import threading
from typing import Optional, Set

from errors import AuthenticationError

logger = logging.getLogger(__name__)


class SessionRegistry:
    """In-memory admin sessions. Tokens do not survive a restart."""

    def __init__(self, password: str):
        self.password = password
        self._tokens: Set[str] = set()
        self._lock = threading.Lock()

    def login(self, password: str) -> str:
        # No configured password means nobody can log in.
        if not self.password or not hmac.compare_digest(password.encode(), self.password.encode()):
            logger.warning("Rejected admin login attempt")
            raise AuthenticationError("Invalid password")
        token = secrets.token_urlsafe(32)
        with self._lock:
            self._tokens.add(token)
        return token

    def logout(self, token: str) -> None:
        with self._lock:
            self._tokens.discard(token)

    def is_active(self, token: Optional[str]) -> bool:
        if not token:
            return False
        with self._lock:
            return token in self._tokens


def bearer_token(authorization: Optional[str]) -> Optional[str]:
    """Extracts the token from an 'Authorization: Bearer <token>' header value."""
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()
