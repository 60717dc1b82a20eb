# Domain entities shared by repositories, services and routers

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass
class User:
    id: str
    role: str = "user"
    api_key_hash: Optional[str] = None
    deleted_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"

    @property
    def is_active(self) -> bool:
        return self.deleted_at is None


@dataclass
class Calendar:
    id: Optional[int]
    user_id: str
    name: str
    description: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass
class Schedule:
    """A time-boxed entry inside a calendar, authored by `user_id`."""
    id: Optional[int]
    calendar_id: int
    user_id: str
    title: str
    start_time: datetime
    end_time: datetime
    description: Optional[str] = None
    location: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def update(self, title, description, start_time, end_time, location):
        """Replace the editable fields; calendar and author stay fixed."""
        self.title = title
        self.description = description
        self.start_time = start_time
        self.end_time = end_time
        self.location = location

    def overlaps(self, range_start: datetime, range_end: datetime) -> bool:
        return self.start_time <= range_end and self.end_time >= range_start


@dataclass
class ScheduleData:
    """Editable schedule fields as received from a client."""
    title: str
    start_time: datetime
    end_time: datetime
    description: Optional[str] = None
    location: Optional[str] = None
