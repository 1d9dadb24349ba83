"""
Session context for outgoing backend calls.
Holds bearer tokens per role in a token store and exposes them to resource clients.
"""

import enum
import json
import logging
import threading
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional

from jose import JWTError, jwt

logger = logging.getLogger(__name__)


class TokenRole(str, enum.Enum):
    """Role a stored token belongs to; each role has its own storage key."""
    ADMIN = "admin"
    USER = "user"

    @property
    def storage_key(self) -> str:
        return f"{self.value}Token"


class TokenStore:
    """In-memory key/value token storage."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._values: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._values.get(key)

    def set(self, key: str, value: str) -> None:
        self._values[key] = value

    def remove(self, key: str) -> None:
        self._values.pop(key, None)


class FileTokenStore(TokenStore):
    """
    Token storage persisted to a JSON file, so a login survives restarts.
    Reads are plain synchronous loads of the file.
    """

    def __init__(self, path: str):
        self.path = Path(path)
        self._lock = threading.Lock()
        super().__init__()

    def _load(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.warning(f"Ignoring unreadable token store {self.path}: {e}")
            return {}
        return data if isinstance(data, dict) else {}

    def _save(self, values: Dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(values), encoding="utf-8")

    def get(self, key: str) -> Optional[str]:
        return self._load().get(key)

    def set(self, key: str, value: str) -> None:
        with self._lock:
            values = self._load()
            values[key] = value
            self._save(values)

    def remove(self, key: str) -> None:
        with self._lock:
            values = self._load()
            if values.pop(key, None) is not None:
                self._save(values)


class SessionContext:
    """
    Explicit session passed to every resource client.

    The token is looked up in the store on every call, so a login or logout
    is visible to clients that were built before it.
    """

    def __init__(self, store: TokenStore, role: TokenRole = TokenRole.ADMIN):
        self.store = store
        self.role = role

    @classmethod
    def from_token(cls, token: Optional[str], role: TokenRole = TokenRole.ADMIN) -> "SessionContext":
        """Build a session around a single known token."""
        store = TokenStore({role.storage_key: token} if token else None)
        return cls(store, role)

    @property
    def token(self) -> Optional[str]:
        return self.store.get(self.role.storage_key)

    @property
    def is_authenticated(self) -> bool:
        return bool(self.token)

    def auth_headers(self) -> Dict[str, str]:
        """Authorization header for the current token; empty when logged out."""
        token = self.token
        if not token:
            return {}
        return {"Authorization": f"Bearer {token}"}

    def save_token(self, token: str, role: Optional[TokenRole] = None) -> None:
        self.store.set((role or self.role).storage_key, token)

    def clear(self, role: Optional[TokenRole] = None) -> None:
        self.store.remove((role or self.role).storage_key)

    def claims(self) -> Dict[str, Any]:
        """
        Read the token's claims without verifying the signature.

        The backend issues and verifies tokens; the console only needs the
        subject and expiry for display. Opaque tokens yield no claims.
        """
        token = self.token
        if not token:
            return {}
        try:
            return jwt.get_unverified_claims(token)
        except JWTError:
            return {}

    @property
    def expires_at(self) -> Optional[datetime]:
        exp = self.claims().get("exp")
        if exp is None:
            return None
        try:
            return datetime.fromtimestamp(float(exp), tz=timezone.utc)
        except (TypeError, ValueError, OverflowError):
            return None

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        expires_at = self.expires_at
        if expires_at is None:
            return False
        return expires_at <= (now or datetime.now(timezone.utc))

    @property
    def subject(self) -> Optional[str]:
        claims = self.claims()
        subject = claims.get("sub") or claims.get("id") or claims.get("_id")
        return str(subject) if subject is not None else None
