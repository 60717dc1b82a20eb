# Per-request holder of the resolved actor and of the request/response metadata

import logging
from typing import Optional, Dict, List, Tuple
from starlette.requests import Request
from starlette.responses import Response

from models import User

logger = logging.getLogger(__name__)


class UserContext:
    """
    Request-scoped state: one instance per inbound request, never shared.

    Reads come from the inbound request. Writes (headers, cookies) are queued
    and flushed onto the outgoing response with `apply_to`.
    """

    def __init__(self, request: Optional[Request] = None):
        self._request = request
        self._actor: Optional[User] = None
        self._headers: Dict[str, str] = {}
        self._cookies: List[Tuple[str, Optional[str]]] = []

    def find_actor(self) -> Optional[User]:
        return self._actor

    def set_login(self, user: User):
        self._actor = user

    def get_header(self, name: str) -> Optional[str]:
        if self._request is None:
            return None
        return self._request.headers.get(name)

    def get_cookie_value(self, name: str) -> Optional[str]:
        if self._request is None:
            return None
        return self._request.cookies.get(name)

    def set_header(self, name: str, value: str):
        self._headers[name] = value

    def set_cookie(self, name: str, value: str):
        self._cookies.append((name, value))

    def delete_cookie(self, name: str):
        self._cookies.append((name, None))

    @property
    def pending_headers(self) -> Dict[str, str]:
        return dict(self._headers)

    def apply_to(self, response: Response):
        """Write queued headers and cookies onto the response."""
        for name, value in self._headers.items():
            response.headers[name] = value
        for name, value in self._cookies:
            if value is None:
                response.delete_cookie(name, path="/")
            else:
                response.set_cookie(name, value, path="/", httponly=True, samesite="lax")
