# Shared utility functions for unit tests

import sys
import os
import dataclasses
import datetime
from contextlib import nullcontext
sys.path.append(os.path.join(os.path.dirname(__file__), '..', 'app'))
import auth
import dependencies
from models import User, Calendar, Schedule
from utils import generate_user_id, generate_api_key, hash_api_key


class InMemoryUserRepository:
    """Same interface as repositories.UserRepository, kept in a dict"""

    def __init__(self):
        self.rows = {}

    def find_by_id(self, user_id):
        user = self.rows.get(user_id)
        return dataclasses.replace(user) if user else None

    def find_by_api_key(self, api_key):
        api_hash = hash_api_key(api_key)
        for user in self.rows.values():
            if user.api_key_hash == api_hash:
                return dataclasses.replace(user)
        return None

    def save(self, user):
        self.rows[user.id] = dataclasses.replace(user)
        return user

    def soft_delete(self, user_id, deleted_at):
        self.rows[user_id].deleted_at = deleted_at


class InMemoryCalendarRepository:

    def __init__(self):
        self.rows = {}
        self.next_id = 1

    def find_by_id(self, calendar_id):
        calendar = self.rows.get(calendar_id)
        return dataclasses.replace(calendar) if calendar else None

    def find_by_user(self, user_id):
        return [dataclasses.replace(c) for c in sorted(self.rows.values(), key=lambda c: c.id) if c.user_id == user_id]

    def save(self, calendar):
        if calendar.id is None:
            calendar.id = self.next_id
            self.next_id += 1
        self.rows[calendar.id] = dataclasses.replace(calendar)
        return calendar

    def delete_by_id(self, calendar_id):
        self.rows.pop(calendar_id, None)


class InMemoryScheduleRepository:

    def __init__(self):
        self.rows = {}
        self.next_id = 1
        self.range_queries = []

    def find_by_id(self, schedule_id):
        schedule = self.rows.get(schedule_id)
        return dataclasses.replace(schedule) if schedule else None

    def save(self, schedule):
        if schedule.id is None:
            schedule.id = self.next_id
            self.next_id += 1
        self.rows[schedule.id] = dataclasses.replace(schedule)
        return schedule

    def delete_by_id(self, schedule_id):
        self.rows.pop(schedule_id, None)

    def find_by_calendar_and_date_range(self, calendar_id, start, end):
        self.range_queries.append((calendar_id, start, end))
        matches = [
            s for s in self.rows.values()
            if s.calendar_id == calendar_id and s.overlaps(start, end)
        ]
        return [dataclasses.replace(s) for s in sorted(matches, key=lambda s: (s.start_time, s.id))]


class Store:
    """In-memory users, calendars and schedules with helpers to seed them"""

    def __init__(self):
        self.users = InMemoryUserRepository()
        self.calendars = InMemoryCalendarRepository()
        self.schedules = InMemoryScheduleRepository()

    def add_user(self, role="user"):
        api_key = generate_api_key()
        user = User(id=generate_user_id(), role=role, api_key_hash=hash_api_key(api_key))
        self.users.save(user)
        return user, api_key

    def add_calendar(self, owner, name="Work", description=None):
        return self.calendars.save(Calendar(id=None, user_id=owner.id, name=name, description=description))

    def add_schedule(self, calendar, author, start_time, end_time, title="Meeting", location=None):
        return self.schedules.save(Schedule(
            id=None,
            calendar_id=calendar.id,
            user_id=author.id,
            title=title,
            start_time=start_time,
            end_time=end_time,
            location=location,
        ))


def install_store(app, store):
    """Route every repository and the transaction boundary of the app to the store"""
    app.dependency_overrides[dependencies.get_user_repository] = lambda: store.users
    app.dependency_overrides[dependencies.get_calendar_repository] = lambda: store.calendars
    app.dependency_overrides[dependencies.get_schedule_repository] = lambda: store.schedules
    app.dependency_overrides[dependencies.get_transaction] = lambda: nullcontext

def auth_headers(user, api_key, access_token=None):
    """Authorization header carrying the API key and a (fresh by default) access token"""
    if access_token is None:
        access_token = auth.generate_access_token(user)
    return {"Authorization": auth.format_authorization(api_key, access_token)}

def dt(value):
    return datetime.datetime.fromisoformat(value)
