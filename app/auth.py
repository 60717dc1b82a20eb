# Access tokens and request authentication (API key + access token, with refresh)

import os
import time
import logging
from typing import NamedTuple, Optional
import jwt

from models import User
from user_context import UserContext

logger = logging.getLogger(__name__)

ACCESS_TOKEN_SECRET = os.getenv("ACCESS_TOKEN_SECRET", "change-me-schedulr-access-token-secret")
ACCESS_TOKEN_EXPIRE_SECONDS = int(os.getenv("ACCESS_TOKEN_EXPIRE_SECONDS", "3600"))
ACCESS_TOKEN_ALGORITHM = "HS256"

BEARER_PREFIX = "Bearer "


class AuthTokens(NamedTuple):
    api_key: str
    access_token: str


def generate_access_token(user: User, expire_seconds: Optional[int] = None) -> str:
    """Mint a signed, short-lived access token for the user."""
    now = int(time.time())
    lifetime = ACCESS_TOKEN_EXPIRE_SECONDS if expire_seconds is None else expire_seconds
    payload = {"sub": user.id, "role": user.role, "iat": now, "exp": now + lifetime}
    return jwt.encode(payload, ACCESS_TOKEN_SECRET, algorithm=ACCESS_TOKEN_ALGORITHM)

def get_user_id_from_access_token(access_token: str) -> Optional[str]:
    """
    Validate and decode an access token.

    Returns:
        str: The user id in the token, None if it is expired, forged or malformed
    """
    try:
        payload = jwt.decode(access_token, ACCESS_TOKEN_SECRET, algorithms=[ACCESS_TOKEN_ALGORITHM])
    except jwt.ExpiredSignatureError:
        logger.info("Access token expired")
        return None
    except jwt.PyJWTError as e:
        logger.warning(f"Invalid access token: {e}")
        return None
    return payload.get("sub")

def format_authorization(api_key: str, access_token: str) -> str:
    return f"{BEARER_PREFIX}{api_key} {access_token}"


def get_auth_tokens(user_context: UserContext) -> Optional[AuthTokens]:
    """
    Read the credential pair from the Authorization header, or from cookies when
    no header is sent at all. A malformed header yields no tokens.
    """
    authorization = user_context.get_header("Authorization")

    if authorization is not None:
        if not authorization.startswith(BEARER_PREFIX):
            return None
        token_bits = authorization[len(BEARER_PREFIX):].split(" ", 1)
        if len(token_bits) != 2 or not token_bits[0] or not token_bits[1]:
            return None
        return AuthTokens(token_bits[0], token_bits[1])

    api_key = user_context.get_cookie_value("apiKey")
    access_token = user_context.get_cookie_value("accessToken")

    if api_key is not None and access_token is not None:
        return AuthTokens(api_key, access_token)

    return None


class TokenAuthenticator:
    """
    Resolves the actor of a request.

    The access token is tried first. If it is no longer valid, the API key is
    used to find the user and a fresh access token is written to the response.
    """

    def __init__(self, user_repository):
        self.users = user_repository

    def authenticate(self, user_context: UserContext) -> Optional[User]:
        auth_tokens = get_auth_tokens(user_context)

        if auth_tokens is None:
            return None

        user = self._user_from_access_token(auth_tokens.access_token)

        if user is None:
            user = self._refresh_access_token_by_api_key(auth_tokens.api_key, user_context)

        if user is not None:
            user_context.set_login(user)

        return user

    def _user_from_access_token(self, access_token: str) -> Optional[User]:
        user_id = get_user_id_from_access_token(access_token)
        if user_id is None:
            return None
        user = self.users.find_by_id(user_id)
        if user is None or not user.is_active:
            return None
        return user

    def _refresh_access_token_by_api_key(self, api_key: str, user_context: UserContext) -> Optional[User]:
        user = self.users.find_by_api_key(api_key)
        if user is None or not user.is_active:
            return None

        new_access_token = generate_access_token(user)
        user_context.set_header("Authorization", format_authorization(api_key, new_access_token))
        user_context.set_cookie("accessToken", new_access_token)
        logger.info(f"Refreshed access token for user {user.id}")
        return user
