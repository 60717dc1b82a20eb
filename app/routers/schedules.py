# Schedule routes of the API, nested under a calendar

import logging
from typing import Optional
from fastapi import APIRouter, Depends, Query, Response

import schemas
import utils
from dependencies import get_actor, get_schedule_service, get_calendar_service
from calendar_service import CalendarService
from models import User
from schedule_service import ScheduleService

logger = logging.getLogger(__name__)
router = APIRouter()

def _invalid_date(name: str, value: str):
    logger.warning(f"Rejected {name}={value!r}")
    return schemas.RsData(result_code="400-2", msg=f"Invalid {name} format: {value}").to_response()

@router.post("/")
async def create_schedule(
    calendar_id: int,
    request: schemas.ScheduleRequest,
    actor: Optional[User] = Depends(get_actor),
    service: ScheduleService = Depends(get_schedule_service),
):
    """Create a schedule in a calendar owned by the authenticated user"""
    result = service.create_schedule(actor, calendar_id, request.to_data())
    return schemas.RsData.from_result(result, "201-1", "Schedule created.", schemas.to_schedule).to_response()

@router.get("/")
async def get_schedules(
    calendar_id: int,
    start_date: str = Query(...),
    end_date: str = Query(...),
    actor: Optional[User] = Depends(get_actor),
    service: ScheduleService = Depends(get_schedule_service),
):
    """Schedules overlapping the given date range (both days inclusive)"""
    start = utils.validate_date_format(start_date)
    if start is None:
        return _invalid_date("start_date", start_date)
    end = utils.validate_date_format(end_date)
    if end is None:
        return _invalid_date("end_date", end_date)

    result = service.get_schedules(actor, calendar_id, start, end)
    return schemas.RsData.from_result(result, "200-1", "Schedules loaded.", schemas.to_schedules).to_response()

@router.get("/daily")
async def get_daily_schedules(
    calendar_id: int,
    date: str = Query(...),
    actor: Optional[User] = Depends(get_actor),
    service: ScheduleService = Depends(get_schedule_service),
):
    day = utils.validate_date_format(date)
    if day is None:
        return _invalid_date("date", date)
    result = service.get_daily_schedules(actor, calendar_id, day)
    return schemas.RsData.from_result(result, "200-1", "Daily schedules loaded.", schemas.to_schedules).to_response()

@router.get("/weekly")
async def get_weekly_schedules(
    calendar_id: int,
    date: str = Query(...),
    actor: Optional[User] = Depends(get_actor),
    service: ScheduleService = Depends(get_schedule_service),
):
    """Schedules of the Sunday-to-Saturday week containing the date"""
    day = utils.validate_date_format(date)
    if day is None:
        return _invalid_date("date", date)
    result = service.get_weekly_schedules(actor, calendar_id, day)
    return schemas.RsData.from_result(result, "200-1", "Weekly schedules loaded.", schemas.to_schedules).to_response()

@router.get("/monthly")
async def get_monthly_schedules(
    calendar_id: int,
    date: str = Query(...),
    actor: Optional[User] = Depends(get_actor),
    service: ScheduleService = Depends(get_schedule_service),
):
    day = utils.validate_date_format(date)
    if day is None:
        return _invalid_date("date", date)
    result = service.get_monthly_schedules(actor, calendar_id, day)
    return schemas.RsData.from_result(result, "200-1", "Monthly schedules loaded.", schemas.to_schedules).to_response()

@router.get("/export")
async def export_schedules(
    calendar_id: int,
    start_date: str = Query(...),
    end_date: str = Query(...),
    actor: Optional[User] = Depends(get_actor),
    service: ScheduleService = Depends(get_schedule_service),
    calendars: CalendarService = Depends(get_calendar_service),
):
    """Export the schedules of a date range as an iCalendar document"""
    start = utils.validate_date_format(start_date)
    if start is None:
        return _invalid_date("start_date", start_date)
    end = utils.validate_date_format(end_date)
    if end is None:
        return _invalid_date("end_date", end_date)

    result = service.get_schedules(actor, calendar_id, start, end)
    if not result.ok:
        return schemas.RsData.from_result(result, "200-1", "Schedules exported.").to_response()

    calendar = calendars.get_calendar(actor, calendar_id).value
    body = utils.build_ical_from_schedules(result.value, calendar.name if calendar else None)
    logger.info(f"Exported {len(result.value)} schedules of calendar {calendar_id}")
    return Response(
        content=body,
        media_type="text/calendar",
        headers={"Content-Disposition": f'attachment; filename="calendar-{calendar_id}.ics"'},
    )

@router.get("/{schedule_id}")
async def get_schedule(
    calendar_id: int,
    schedule_id: int,
    actor: Optional[User] = Depends(get_actor),
    service: ScheduleService = Depends(get_schedule_service),
):
    """Get a single schedule of the calendar"""
    result = service.get_schedule(actor, calendar_id, schedule_id)
    return schemas.RsData.from_result(result, "200-1", "Schedule loaded.", schemas.to_schedule).to_response()

@router.put("/{schedule_id}")
async def update_schedule(
    calendar_id: int,
    schedule_id: int,
    request: schemas.ScheduleRequest,
    actor: Optional[User] = Depends(get_actor),
    service: ScheduleService = Depends(get_schedule_service),
):
    """Update a schedule authored by the authenticated user"""
    result = service.update_schedule(actor, calendar_id, schedule_id, request.to_data())
    return schemas.RsData.from_result(result, "200-1", "Schedule updated.", schemas.to_schedule).to_response()

@router.delete("/{schedule_id}")
async def delete_schedule(
    calendar_id: int,
    schedule_id: int,
    actor: Optional[User] = Depends(get_actor),
    service: ScheduleService = Depends(get_schedule_service),
):
    """Delete a schedule authored by the authenticated user"""
    result = service.delete_schedule(actor, calendar_id, schedule_id)
    return schemas.RsData.from_result(result, "200-1", f"Schedule {schedule_id} deleted.").to_response()
