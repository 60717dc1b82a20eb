# Test the MySQL repositories against a mocked cursor

import pytest
import sys
import os
import datetime
sys.path.append(os.path.join(os.path.dirname(__file__), '..', '..', 'app'))
import repositories
from models import User, Calendar, Schedule
from repositories import UserRepository, CalendarRepository, ScheduleRepository
from utils import hash_api_key
from unittest.mock import patch, MagicMock

@pytest.fixture
def cursor():
    cursor = MagicMock()
    with patch("database.get_cursor", return_value=cursor):
        yield cursor

def _describe(cursor, columns):
    cursor.description = [(name,) for name in columns.split(", ")]

def _last_query(cursor):
    return cursor.execute.call_args_list[-1].args

def test_find_user_by_api_key_uses_hash(cursor):
    _describe(cursor, repositories.USER_COLUMNS)
    cursor.fetchone.return_value = ("abcd1234", "user", "h", None, None, None)

    user = UserRepository().find_by_api_key("secret")
    assert user == User(id="abcd1234", role="user", api_key_hash="h")
    sql, params = _last_query(cursor)
    assert "api_key_hash = %s" in sql
    assert params == (hash_api_key("secret"),)

def test_find_user_missing(cursor):
    cursor.fetchone.return_value = None
    assert UserRepository().find_by_id("nobody00") is None

def test_every_query_selects_the_database(cursor):
    cursor.fetchone.return_value = None
    UserRepository().find_by_id("abcd1234")
    assert cursor.execute.call_args_list[0].args[0].startswith("USE ")

def test_soft_delete_user(cursor):
    deleted_at = datetime.datetime(2024, 1, 1)
    UserRepository().soft_delete("abcd1234", deleted_at)
    sql, params = _last_query(cursor)
    assert sql.startswith("UPDATE users SET deleted_at")
    assert params == (deleted_at, "abcd1234")

def test_calendar_insert_sets_id(cursor):
    cursor.lastrowid = 17
    calendar = CalendarRepository().save(Calendar(id=None, user_id="abcd1234", name="Work"))
    assert calendar.id == 17
    assert _last_query(cursor)[0].startswith("INSERT INTO calendars")

def test_calendar_update(cursor):
    CalendarRepository().save(Calendar(id=3, user_id="abcd1234", name="Home", description="d"))
    sql, params = _last_query(cursor)
    assert sql.startswith("UPDATE calendars")
    assert params == ("Home", "d", 3)

def test_find_calendars_by_user(cursor):
    _describe(cursor, repositories.CALENDAR_COLUMNS)
    cursor.fetchall.return_value = [
        (1, "abcd1234", "Work", None, None, None),
        (2, "abcd1234", "Home", "Private", None, None),
    ]
    calendars = CalendarRepository().find_by_user("abcd1234")
    assert [c.name for c in calendars] == ["Work", "Home"]
    assert calendars[1].description == "Private"

def test_schedule_insert_and_update(cursor):
    repo = ScheduleRepository()
    cursor.lastrowid = 5
    schedule = repo.save(Schedule(
        id=None, calendar_id=1, user_id="abcd1234", title="Standup",
        start_time=datetime.datetime(2024, 5, 1, 9), end_time=datetime.datetime(2024, 5, 1, 10),
    ))
    assert schedule.id == 5
    assert "INSERT INTO schedules" in _last_query(cursor)[0]

    schedule.title = "Retro"
    repo.save(schedule)
    sql, params = _last_query(cursor)
    assert "UPDATE schedules" in sql
    assert params[0] == "Retro"
    assert params[-1] == 5

def test_schedule_range_query_uses_overlap(cursor):
    _describe(cursor, repositories.SCHEDULE_COLUMNS)
    start = datetime.datetime(2024, 5, 1)
    end = datetime.datetime(2024, 5, 1, 23, 59, 59, 999999)
    cursor.fetchall.return_value = [
        (9, 1, "abcd1234", "Late", None, datetime.datetime(2024, 4, 30, 22), datetime.datetime(2024, 5, 1, 1),
         None, None, None),
    ]

    schedules = ScheduleRepository().find_by_calendar_and_date_range(1, start, end)
    assert schedules[0].id == 9
    assert schedules[0].title == "Late"
    sql, params = _last_query(cursor)
    assert "start_time <= %s AND end_time >= %s" in sql
    assert "ORDER BY start_time" in sql
    assert params == (1, end, start)

def test_delete_schedule(cursor):
    ScheduleRepository().delete_by_id(4)
    assert _last_query(cursor) == ("DELETE FROM schedules WHERE id = %s", (4,))
