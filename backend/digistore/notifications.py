"""Toast-style messages that outlive a POST/redirect/GET round trip.

Messages are queued on a per-request :class:`Notifier`. Anything not shown by
the time the response goes out is parked in the signed session
(``SessionMiddleware``) and picked up by the next request.
"""

from typing import Dict, List, MutableMapping, Optional

from fastapi import Request

FLASH_KEY = "flash"


class Notifier:
    def __init__(self, session: Optional[MutableMapping] = None):
        self._session = session if session is not None else {}
        pending = self._session.pop(FLASH_KEY, None) or []
        self._messages: List[Dict[str, str]] = [
            m for m in pending if isinstance(m, dict) and "text" in m
        ]

    @classmethod
    def from_request(cls, request: Request) -> "Notifier":
        return cls(request.session)

    def success(self, text: str) -> None:
        self._messages.append({"level": "success", "text": text})

    def error(self, text: str) -> None:
        self._messages.append({"level": "error", "text": text})

    @property
    def messages(self) -> List[Dict[str, str]]:
        return list(self._messages)

    def texts(self, level: Optional[str] = None) -> List[str]:
        return [m["text"] for m in self._messages if level is None or m.get("level") == level]

    def drain(self) -> List[Dict[str, str]]:
        messages, self._messages = self._messages, []
        return messages

    def persist(self) -> None:
        """Carry undisplayed messages over to the next request."""
        if self._messages:
            self._session[FLASH_KEY] = list(self._messages)
        else:
            self._session.pop(FLASH_KEY, None)
