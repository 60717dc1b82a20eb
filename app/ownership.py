# Ownership checks shared by the calendar and schedule services

import logging
from models import User
from results import Result, not_found, forbidden, bad_request

logger = logging.getLogger(__name__)


class OwnershipGuard:
    """
    Verifies that calendars (and the schedules inside them) belong to the actor.

    Checks run in a fixed order: existence, calendar ownership, calendar
    membership of the schedule, then schedule authorship.
    """

    def __init__(self, calendar_repository, schedule_repository=None):
        self.calendars = calendar_repository
        self.schedules = schedule_repository

    def validate_calendar_owner(self, calendar_id: int, actor: User) -> Result:
        calendar = self.calendars.find_by_id(calendar_id)
        if calendar is None:
            return not_found("Calendar not found.")
        if calendar.user_id != actor.id:
            logger.warning(f"User {actor.id} denied access to calendar {calendar_id}")
            return forbidden("Only the calendar owner can access it.")
        return Result.success(calendar)

    def validate_schedule_access(self, calendar_id: int, schedule_id: int, actor: User) -> Result:
        """Read access: the calendar must be the actor's and hold the schedule."""
        checked = self.validate_calendar_owner(calendar_id, actor)
        if not checked.ok:
            return checked

        schedule = self.schedules.find_by_id(schedule_id)
        if schedule is None:
            return not_found("Schedule not found.")
        if schedule.calendar_id != calendar_id:
            return bad_request("The schedule does not belong to the requested calendar.")
        return Result.success(schedule)

    def validate_schedule_owner(self, calendar_id: int, schedule_id: int, actor: User, action: str) -> Result:
        """Write access: read access plus authorship of the schedule."""
        checked = self.validate_schedule_access(calendar_id, schedule_id, actor)
        if not checked.ok:
            return checked

        schedule = checked.value
        if schedule.user_id != actor.id:
            logger.warning(f"User {actor.id} denied {action} of schedule {schedule_id}")
            return forbidden(f"You are not allowed to {action} this schedule.")
        return checked
