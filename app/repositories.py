# Persistence layer: MySQL-backed repositories for users, calendars and schedules

import logging
from datetime import datetime
from typing import Optional, List, Dict, Any
import database
import utils
from models import User, Calendar, Schedule

logger = logging.getLogger(__name__)

USER_COLUMNS = "id, role, api_key_hash, deleted_at, created_at, updated_at"
CALENDAR_COLUMNS = "id, user_id, name, description, created_at, updated_at"
SCHEDULE_COLUMNS = (
    "id, calendar_id, user_id, title, description, start_time, end_time, location, created_at, updated_at"
)


def _cursor():
    cursor = database.get_cursor()
    cursor.execute(f"USE {database.MYSQL_DATABASE}")
    return cursor

def _fetch_one(cursor) -> Optional[Dict[str, Any]]:
    row = cursor.fetchone()
    if not row:
        return None
    cols = [d[0] for d in cursor.description]
    return {col: row[i] for i, col in enumerate(cols)}

def _fetch_all(cursor) -> List[Dict[str, Any]]:
    rows = cursor.fetchall()
    cols = [d[0] for d in cursor.description]
    return [{col: row[i] for i, col in enumerate(cols)} for row in rows]


class UserRepository:
    """Users are read by id or API key; writes are creation and soft deletion."""

    def find_by_id(self, user_id: str) -> Optional[User]:
        cursor = _cursor()
        cursor.execute(f"SELECT {USER_COLUMNS} FROM users WHERE id = %s", (user_id,))
        row = _fetch_one(cursor)
        return User(**row) if row else None

    def find_by_api_key(self, api_key: str) -> Optional[User]:
        cursor = _cursor()
        cursor.execute(
            f"SELECT {USER_COLUMNS} FROM users WHERE api_key_hash = %s",
            (utils.hash_api_key(api_key),)
        )
        row = _fetch_one(cursor)
        return User(**row) if row else None

    def save(self, user: User) -> User:
        cursor = _cursor()
        cursor.execute(
            "INSERT INTO users (id, api_key_hash, role) VALUES (%s, %s, %s)",
            (user.id, user.api_key_hash, user.role)
        )
        return user

    def soft_delete(self, user_id: str, deleted_at: datetime) -> None:
        cursor = _cursor()
        cursor.execute("UPDATE users SET deleted_at = %s WHERE id = %s", (deleted_at, user_id))


class CalendarRepository:

    def find_by_id(self, calendar_id: int) -> Optional[Calendar]:
        cursor = _cursor()
        cursor.execute(f"SELECT {CALENDAR_COLUMNS} FROM calendars WHERE id = %s", (calendar_id,))
        row = _fetch_one(cursor)
        return Calendar(**row) if row else None

    def find_by_user(self, user_id: str) -> List[Calendar]:
        cursor = _cursor()
        cursor.execute(
            f"SELECT {CALENDAR_COLUMNS} FROM calendars WHERE user_id = %s ORDER BY id",
            (user_id,)
        )
        return [Calendar(**row) for row in _fetch_all(cursor)]

    def save(self, calendar: Calendar) -> Calendar:
        """Insert a new calendar or update name/description of an existing one."""
        cursor = _cursor()
        if calendar.id is None:
            cursor.execute(
                "INSERT INTO calendars (user_id, name, description) VALUES (%s, %s, %s)",
                (calendar.user_id, calendar.name, calendar.description)
            )
            calendar.id = cursor.lastrowid
        else:
            cursor.execute(
                "UPDATE calendars SET name = %s, description = %s WHERE id = %s",
                (calendar.name, calendar.description, calendar.id)
            )
        return calendar

    def delete_by_id(self, calendar_id: int) -> None:
        cursor = _cursor()
        cursor.execute("DELETE FROM calendars WHERE id = %s", (calendar_id,))


class ScheduleRepository:

    def find_by_id(self, schedule_id: int) -> Optional[Schedule]:
        cursor = _cursor()
        cursor.execute(f"SELECT {SCHEDULE_COLUMNS} FROM schedules WHERE id = %s", (schedule_id,))
        row = _fetch_one(cursor)
        return Schedule(**row) if row else None

    def save(self, schedule: Schedule) -> Schedule:
        """Insert a new schedule or write back the editable fields of an existing one."""
        cursor = _cursor()
        if schedule.id is None:
            cursor.execute(
                """
                INSERT INTO schedules
                (calendar_id, user_id, title, description, start_time, end_time, location)
                VALUES (%s, %s, %s, %s, %s, %s, %s)
                """,
                (
                    schedule.calendar_id,
                    schedule.user_id,
                    schedule.title,
                    schedule.description,
                    schedule.start_time,
                    schedule.end_time,
                    schedule.location,
                )
            )
            schedule.id = cursor.lastrowid
        else:
            cursor.execute(
                """
                UPDATE schedules
                SET title = %s, description = %s, start_time = %s, end_time = %s, location = %s
                WHERE id = %s
                """,
                (
                    schedule.title,
                    schedule.description,
                    schedule.start_time,
                    schedule.end_time,
                    schedule.location,
                    schedule.id,
                )
            )
        return schedule

    def delete_by_id(self, schedule_id: int) -> None:
        cursor = _cursor()
        cursor.execute("DELETE FROM schedules WHERE id = %s", (schedule_id,))

    def find_by_calendar_and_date_range(self, calendar_id: int, start: datetime, end: datetime) -> List[Schedule]:
        """Schedules of a calendar overlapping the inclusive range [start, end]."""
        cursor = _cursor()
        cursor.execute(
            f"""
            SELECT {SCHEDULE_COLUMNS} FROM schedules
            WHERE calendar_id = %s AND start_time <= %s AND end_time >= %s
            ORDER BY start_time, id
            """,
            (calendar_id, end, start)
        )
        return [Schedule(**row) for row in _fetch_all(cursor)]
