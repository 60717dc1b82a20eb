# Calendar routes of the API

import logging
from typing import Optional
from fastapi import APIRouter, Depends

import schemas
from calendar_service import CalendarService
from dependencies import get_actor, get_calendar_service
from models import User

logger = logging.getLogger(__name__)
router = APIRouter()

@router.post("/")
async def create_calendar(
    request: schemas.CalendarCreate,
    actor: Optional[User] = Depends(get_actor),
    service: CalendarService = Depends(get_calendar_service),
):
    """Create a calendar owned by the authenticated user"""
    result = service.create_calendar(actor, request.name, request.description)
    return schemas.RsData.from_result(result, "201-1", "Calendar created.", schemas.to_calendar).to_response()

@router.get("/")
async def list_calendars(
    actor: Optional[User] = Depends(get_actor),
    service: CalendarService = Depends(get_calendar_service),
):
    """List the authenticated user's calendars"""
    result = service.get_calendars(actor)
    return schemas.RsData.from_result(result, "200-1", "Calendars loaded.", schemas.to_calendars).to_response()

@router.get("/{calendar_id}")
async def get_calendar(
    calendar_id: int,
    actor: Optional[User] = Depends(get_actor),
    service: CalendarService = Depends(get_calendar_service),
):
    result = service.get_calendar(actor, calendar_id)
    return schemas.RsData.from_result(result, "200-1", "Calendar loaded.", schemas.to_calendar).to_response()

@router.put("/{calendar_id}")
async def update_calendar(
    calendar_id: int,
    request: schemas.CalendarUpdate,
    actor: Optional[User] = Depends(get_actor),
    service: CalendarService = Depends(get_calendar_service),
):
    result = service.update_calendar(actor, calendar_id, request.name, request.description)
    return schemas.RsData.from_result(result, "200-1", "Calendar updated.", schemas.to_calendar).to_response()

@router.delete("/{calendar_id}")
async def delete_calendar(
    calendar_id: int,
    actor: Optional[User] = Depends(get_actor),
    service: CalendarService = Depends(get_calendar_service),
):
    """Delete a calendar together with its schedules"""
    result = service.delete_calendar(actor, calendar_id)
    return schemas.RsData.from_result(result, "200-1", f"Calendar {calendar_id} deleted.").to_response()
