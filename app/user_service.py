# User management: login, profile, admin-driven creation and soft deletion

import logging
import datetime
from typing import Optional, NamedTuple

import auth
import database
import utils
from models import User
from results import Result, unauthorized, forbidden, not_found

logger = logging.getLogger(__name__)


class LoginResult(NamedTuple):
    user: User
    api_key: str
    access_token: str


class CreatedUser(NamedTuple):
    user: User
    api_key: str


class UserService:

    def __init__(self, user_repository, transaction=database.transaction):
        self.users = user_repository
        self.transaction = transaction

    def login(self, api_key: str) -> Result:
        """Exchange an API key for a fresh access token."""
        with self.transaction():
            user = self.users.find_by_api_key(api_key)

        if user is None or not user.is_active:
            logger.warning("Login attempt with an unknown API key")
            return unauthorized("Invalid API key.")

        logger.info(f"User {user.id} logged in")
        return Result.success(LoginResult(user, api_key, auth.generate_access_token(user)))

    def me(self, actor: Optional[User]) -> Result:
        if actor is None:
            return unauthorized()
        return Result.success(actor)

    def create_user(self, actor: Optional[User]) -> Result:
        """Create a new user (by admin only). The plain API key is only returned here."""
        if actor is None:
            return unauthorized()
        if not actor.is_admin:
            return forbidden("Admin access required.")

        new_api_key = utils.generate_api_key()
        user = User(
            id=utils.generate_user_id(),
            role="user",
            api_key_hash=utils.hash_api_key(new_api_key),
        )
        with self.transaction():
            user = self.users.save(user)

        logger.info(f"New user created: {user.id}")
        return Result.success(CreatedUser(user, new_api_key))

    def delete_user(self, actor: Optional[User], user_id: str) -> Result:
        """Soft delete a user (admin or self only). Admin users cannot be deleted."""
        if actor is None:
            return unauthorized()
        if not actor.is_admin and actor.id != user_id:
            return forbidden("Access denied.")

        with self.transaction():
            user = self.users.find_by_id(user_id)
            if user is None or not user.is_active:
                return not_found("User not found.")
            if user.is_admin:
                return forbidden("Admin users cannot be deleted.")

            user.deleted_at = datetime.datetime.now(datetime.timezone.utc).replace(tzinfo=None)
            self.users.soft_delete(user.id, user.deleted_at)

        logger.info(f"User deleted: {user_id}")
        return Result.success(user)
