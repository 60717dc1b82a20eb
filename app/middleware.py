"""Authentication gate run once for every HTTP request."""

import logging
import time
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

import dependencies
from auth import TokenAuthenticator
from user_context import UserContext

logger = logging.getLogger(__name__)

API_PREFIX = "/api"

# Reachable without credentials (exact match)
EXEMPT_PATHS = {"/api/users/login", "/api/users/logout"}


class AuthenticationMiddleware(BaseHTTPMiddleware):
    """
    Resolves the actor for API requests and attaches a UserContext to
    `request.state`. Never rejects a request: operations that need an actor
    report Unauthorized themselves.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        path = request.url.path

        if not path.startswith(API_PREFIX):
            return await call_next(request)

        start_time = time.time()
        user_context = UserContext(request)
        request.state.user_context = user_context

        if path not in EXEMPT_PATHS:
            authenticator = TokenAuthenticator(_provide(request, dependencies.get_user_repository))
            with _provide(request, dependencies.get_transaction)():
                authenticator.authenticate(user_context)

        response = await call_next(request)
        user_context.apply_to(response)

        actor = user_context.find_actor()
        logger.info(
            f"{request.method} {path} user_id={actor.id if actor else 'anonymous'} "
            f"{response.status_code} {time.time() - start_time:.3f}s"
        )
        return response


def _provide(request: Request, dependency: Callable):
    # Honour the app's dependency overrides so the gate uses the same stores as the routes
    provider = request.app.dependency_overrides.get(dependency, dependency)
    return provider()
