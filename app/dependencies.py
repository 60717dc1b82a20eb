# FastAPI dependency providers for the request context, repositories and services

from typing import Optional
from fastapi import Depends, Request

import database
from models import User
from repositories import UserRepository, CalendarRepository, ScheduleRepository
from user_context import UserContext
from schedule_service import ScheduleService
from calendar_service import CalendarService
from user_service import UserService


def get_user_context(request: Request) -> UserContext:
    """The context attached by the authentication middleware (a blank one outside /api)."""
    user_context = getattr(request.state, "user_context", None)
    if user_context is None:
        user_context = UserContext(request)
        request.state.user_context = user_context
    return user_context

def get_actor(user_context: UserContext = Depends(get_user_context)) -> Optional[User]:
    return user_context.find_actor()

def get_user_repository() -> UserRepository:
    return UserRepository()

def get_calendar_repository() -> CalendarRepository:
    return CalendarRepository()

def get_schedule_repository() -> ScheduleRepository:
    return ScheduleRepository()

def get_transaction():
    """Factory for the unit of work wrapped around each service operation."""
    return database.transaction

def get_user_service(
    users=Depends(get_user_repository),
    transaction=Depends(get_transaction),
) -> UserService:
    return UserService(users, transaction)

def get_calendar_service(
    calendars=Depends(get_calendar_repository),
    transaction=Depends(get_transaction),
) -> CalendarService:
    return CalendarService(calendars, transaction)

def get_schedule_service(
    schedules=Depends(get_schedule_repository),
    calendars=Depends(get_calendar_repository),
    transaction=Depends(get_transaction),
) -> ScheduleService:
    return ScheduleService(schedules, calendars, transaction)
