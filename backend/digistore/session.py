"""Admin session gate.

This is a UI convenience flag, not a security boundary. The credential pair
below ships with the code and the "logged in" marker is a plain cookie any
browser can set by hand. Writes to the products table must be authorized by
the store itself (row-level security policies on the table); nothing here
protects it.
"""

import hmac
import logging
from typing import Dict, Optional, Protocol

from fastapi import Request
from starlette.responses import Response

logger = logging.getLogger(__name__)

ADMIN_FLAG_KEY = "adminLoggedIn"
ADMIN_FLAG_VALUE = "true"

ADMIN_USERNAME = "admin"
ADMIN_PASSWORD = "digistore-admin"

ANONYMOUS = "anonymous"
AUTHENTICATED = "authenticated"

# No expiry is enforced; the cookie just needs to outlive browser restarts.
_COOKIE_MAX_AGE = 60 * 60 * 24 * 365


class SessionStorage(Protocol):
    def get(self, key: str) -> Optional[str]: ...

    def set(self, key: str, value: str) -> None: ...

    def remove(self, key: str) -> None: ...


class MemoryStorage:
    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self.data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        self.data[key] = value

    def remove(self, key: str) -> None:
        self.data.pop(key, None)


class CookieStorage:
    """Reads request cookies; buffers writes until :meth:`apply` on a response."""

    def __init__(self, request: Request):
        self._values: Dict[str, Optional[str]] = dict(request.cookies)
        self._changes: Dict[str, Optional[str]] = {}

    def get(self, key: str) -> Optional[str]:
        return self._values.get(key)

    def set(self, key: str, value: str) -> None:
        self._values[key] = value
        self._changes[key] = value

    def remove(self, key: str) -> None:
        self._values.pop(key, None)
        self._changes[key] = None

    def apply(self, response: Response) -> Response:
        for key, value in self._changes.items():
            if value is None:
                response.delete_cookie(key)
            else:
                response.set_cookie(key, value, max_age=_COOKIE_MAX_AGE, httponly=True, samesite="lax")
        return response


def credentials_match(username: str, password: str) -> bool:
    user_ok = hmac.compare_digest(username.encode("utf-8"), ADMIN_USERNAME.encode("utf-8"))
    pass_ok = hmac.compare_digest(password.encode("utf-8"), ADMIN_PASSWORD.encode("utf-8"))
    return user_ok and pass_ok


class SessionGate:
    def __init__(self, storage: SessionStorage):
        self.storage = storage
        # Trust whatever was persisted; credentials are not re-checked.
        if storage.get(ADMIN_FLAG_KEY) == ADMIN_FLAG_VALUE:
            self.state = AUTHENTICATED
        else:
            self.state = ANONYMOUS

    @property
    def is_admin(self) -> bool:
        return self.state == AUTHENTICATED

    def login(self, username: str, password: str) -> bool:
        if not credentials_match(username, password):
            logger.warning("Rejected admin login for username %r", username)
            return False
        self.storage.set(ADMIN_FLAG_KEY, ADMIN_FLAG_VALUE)
        self.state = AUTHENTICATED
        logger.info("Admin logged in")
        return True

    def logout(self) -> None:
        self.storage.remove(ADMIN_FLAG_KEY)
        self.state = ANONYMOUS
        logger.info("Admin logged out")
