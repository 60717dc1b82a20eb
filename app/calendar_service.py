# Calendar operations for the owning user

import logging
from typing import Optional

import database
from models import User, Calendar
from ownership import OwnershipGuard
from results import Result, unauthorized

logger = logging.getLogger(__name__)


class CalendarService:

    def __init__(self, calendar_repository, transaction=database.transaction):
        self.calendars = calendar_repository
        self.guard = OwnershipGuard(calendar_repository)
        self.transaction = transaction

    def create_calendar(self, actor: Optional[User], name: str, description: Optional[str] = None) -> Result:
        if actor is None:
            return unauthorized()

        with self.transaction():
            calendar = self.calendars.save(Calendar(id=None, user_id=actor.id, name=name, description=description))

        logger.info(f"Created calendar '{name}' for user {actor.id} with ID {calendar.id}")
        return Result.success(calendar)

    def get_calendars(self, actor: Optional[User]) -> Result:
        if actor is None:
            return unauthorized()

        with self.transaction():
            return Result.success(self.calendars.find_by_user(actor.id))

    def get_calendar(self, actor: Optional[User], calendar_id: int) -> Result:
        if actor is None:
            return unauthorized()

        with self.transaction():
            return self.guard.validate_calendar_owner(calendar_id, actor)

    def update_calendar(self, actor: Optional[User], calendar_id: int,
                        name: Optional[str] = None, description: Optional[str] = None) -> Result:
        """Rename or re-describe a calendar; the owner never changes."""
        if actor is None:
            return unauthorized()

        with self.transaction():
            checked = self.guard.validate_calendar_owner(calendar_id, actor)
            if not checked.ok:
                return checked

            calendar = checked.value
            if name is not None:
                calendar.name = name
            if description is not None:
                calendar.description = description
            calendar = self.calendars.save(calendar)

        logger.info(f"Updated calendar with ID {calendar_id}")
        return Result.success(calendar)

    def delete_calendar(self, actor: Optional[User], calendar_id: int) -> Result:
        if actor is None:
            return unauthorized()

        with self.transaction():
            checked = self.guard.validate_calendar_owner(calendar_id, actor)
            if not checked.ok:
                return checked
            self.calendars.delete_by_id(calendar_id)

        logger.info(f"Deleted calendar with ID {calendar_id}")
        return Result.success(None)
