# Schedule operations scoped to a calendar and its owner

import logging
import datetime
from typing import Optional

import database
import ranges
import utils
from models import User, Schedule, ScheduleData
from ownership import OwnershipGuard
from results import Result, unauthorized, bad_request

logger = logging.getLogger(__name__)


class ScheduleService:
    """
    Create, update, delete and query schedules.

    Every operation takes the actor explicitly and returns a Result. Each one
    runs inside a single transaction.
    """

    def __init__(self, schedule_repository, calendar_repository, transaction=database.transaction):
        self.schedules = schedule_repository
        self.guard = OwnershipGuard(calendar_repository, schedule_repository)
        self.transaction = transaction

    def create_schedule(self, actor: Optional[User], calendar_id: int, data: ScheduleData) -> Result:
        if actor is None:
            return unauthorized()

        with self.transaction():
            checked = self.guard.validate_calendar_owner(calendar_id, actor)
            if not checked.ok:
                return checked

            start_time, end_time = _normalized_times(data)
            if start_time > end_time:
                return bad_request("The schedule must not end before it starts.")

            schedule = self.schedules.save(Schedule(
                id=None,
                calendar_id=calendar_id,
                user_id=actor.id,
                title=data.title,
                description=data.description,
                start_time=start_time,
                end_time=end_time,
                location=data.location,
            ))

        logger.info(f"Created schedule '{schedule.title}' in calendar {calendar_id} with ID {schedule.id}")
        return Result.success(schedule)

    def update_schedule(self, actor: Optional[User], calendar_id: int, schedule_id: int, data: ScheduleData) -> Result:
        if actor is None:
            return unauthorized()

        with self.transaction():
            checked = self.guard.validate_schedule_owner(calendar_id, schedule_id, actor, "update")
            if not checked.ok:
                return checked

            start_time, end_time = _normalized_times(data)
            if start_time > end_time:
                return bad_request("The schedule must not end before it starts.")

            schedule = checked.value
            schedule.update(data.title, data.description, start_time, end_time, data.location)
            schedule = self.schedules.save(schedule)

        logger.info(f"Updated schedule with ID {schedule_id}")
        return Result.success(schedule)

    def delete_schedule(self, actor: Optional[User], calendar_id: int, schedule_id: int) -> Result:
        if actor is None:
            return unauthorized()

        with self.transaction():
            checked = self.guard.validate_schedule_owner(calendar_id, schedule_id, actor, "delete")
            if not checked.ok:
                return checked
            self.schedules.delete_by_id(schedule_id)

        logger.info(f"Deleted schedule with ID {schedule_id}")
        return Result.success(None)

    def get_schedules(self, actor: Optional[User], calendar_id: int,
                      start_date: datetime.date, end_date: datetime.date) -> Result:
        """Schedules overlapping the start of `start_date` through the end of `end_date`."""
        if actor is None:
            return unauthorized()

        with self.transaction():
            checked = self.guard.validate_calendar_owner(calendar_id, actor)
            if not checked.ok:
                return checked
            if end_date < start_date:
                return bad_request("'start_date' must not be after 'end_date'.")
            return Result.success(self._find_in_range(calendar_id, ranges.explicit_range(start_date, end_date)))

    def get_daily_schedules(self, actor: Optional[User], calendar_id: int, date: datetime.date) -> Result:
        return self._get_schedules_by_granularity(actor, calendar_id, date, ranges.Granularity.DAY)

    def get_weekly_schedules(self, actor: Optional[User], calendar_id: int, date: datetime.date) -> Result:
        return self._get_schedules_by_granularity(actor, calendar_id, date, ranges.Granularity.WEEK)

    def get_monthly_schedules(self, actor: Optional[User], calendar_id: int, date: datetime.date) -> Result:
        return self._get_schedules_by_granularity(actor, calendar_id, date, ranges.Granularity.MONTH)

    def get_schedule(self, actor: Optional[User], calendar_id: int, schedule_id: int) -> Result:
        """A single schedule; only calendar ownership is required, not authorship."""
        if actor is None:
            return unauthorized()

        with self.transaction():
            return self.guard.validate_schedule_access(calendar_id, schedule_id, actor)

    def _get_schedules_by_granularity(self, actor, calendar_id, date, granularity) -> Result:
        if actor is None:
            return unauthorized()

        with self.transaction():
            return self.guard.validate_calendar_owner(calendar_id, actor).map(
                lambda _: self._find_in_range(calendar_id, ranges.resolve(date, granularity))
            )

    def _find_in_range(self, calendar_id, date_range):
        start, end = date_range
        return self.schedules.find_by_calendar_and_date_range(calendar_id, start, end)


def _normalized_times(data: ScheduleData):
    return utils.normalize_datetime(data.start_time), utils.normalize_datetime(data.end_time)
