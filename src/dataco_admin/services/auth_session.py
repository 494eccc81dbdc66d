# Rev 0.1.2

"""Admin authentication session (Rev 0.1.2)
Single owner of the admin token and cached user record.
Persists to session.json under the XDG config dir, keyed the way the web
dashboard keys localStorage (adminToken / adminUser).
"""
from __future__ import annotations
import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

from ..api.errors import AuthRequiredError
from ..utils.paths import config_dir

log = logging.getLogger(__name__)

TOKEN_KEY = "adminToken"
USER_KEY = "adminUser"


@dataclass(frozen=True)
class AdminUser:
    id: str
    username: str
    role: Optional[str] = None


def parse_user(raw: Any) -> Optional[AdminUser]:
    """Parse-and-validate a stored user; anything malformed yields None."""
    if raw is None or raw in ("", "undefined", "null"):
        return None
    if isinstance(raw, str):
        try:
            raw = json.loads(raw)
        except json.JSONDecodeError:
            return None
    if not isinstance(raw, dict):
        return None
    uid, username = raw.get("id"), raw.get("username")
    if not uid or not username:
        return None
    return AdminUser(id=str(uid), username=str(username), role=raw.get("role"))


class AuthSession:
    def __init__(self, path: Optional[Path] = None):
        self._path = path or (config_dir() / "session.json")
        self._data: Dict[str, Any] = self._read()

    def _read(self) -> Dict[str, Any]:
        if not self._path.exists():
            return {}
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            log.warning("Discarding unreadable session file %s: %s", self._path, exc)
            return {}
        return data if isinstance(data, dict) else {}

    def _write(self) -> None:
        self._path.write_text(json.dumps(self._data, indent=2), encoding="utf-8")

    # ---- accessors ----
    @property
    def token(self) -> Optional[str]:
        tok = self._data.get(TOKEN_KEY)
        return tok if isinstance(tok, str) and tok else None

    @property
    def user(self) -> Optional[AdminUser]:
        return parse_user(self._data.get(USER_KEY))

    def is_authenticated(self) -> bool:
        return self.token is not None and self.user is not None

    def require_token(self) -> str:
        if not self.is_authenticated():
            raise AuthRequiredError("Not logged in")
        return self.token  # type: ignore[return-value]

    # ---- commands ----
    def store(self, token: str, user: Dict[str, Any]) -> AdminUser:
        parsed = parse_user(user)
        if not token or parsed is None:
            raise AuthRequiredError("Login response did not include a valid token and user")
        self._data = {TOKEN_KEY: token, USER_KEY: json.dumps(user)}
        self._write()
        log.info("Stored admin session for %s", parsed.username)
        return parsed

    def clear(self) -> None:
        self._data = {}
        if self._path.exists():
            self._path.unlink()
        log.info("Admin session cleared")
