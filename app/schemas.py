from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, List, Any, Callable
from datetime import datetime
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from models import ScheduleData
from results import Result


class User(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    role: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class UserCreateResponse(BaseModel):
    user_id: str
    api_key: str


class LoginRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    api_key: str = Field(..., alias="apiKey", min_length=1)


class LoginResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    user_id: str = Field(..., alias="userId")
    api_key: str = Field(..., alias="apiKey")
    access_token: str = Field(..., alias="accessToken")


class CalendarCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None


class CalendarUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None


class Calendar(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: str
    name: str
    description: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ScheduleRequest(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    start_time: datetime
    end_time: datetime
    location: Optional[str] = Field(None, max_length=255)

    def to_data(self) -> ScheduleData:
        return ScheduleData(
            title=self.title,
            description=self.description,
            start_time=self.start_time,
            end_time=self.end_time,
            location=self.location,
        )


class Schedule(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    calendar_id: int
    user_id: str
    title: str
    description: Optional[str] = None
    start_time: datetime
    end_time: datetime
    location: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class RsData(BaseModel):
    """
    Response envelope used by every API endpoint.

    `resultCode` is "<httpStatus>-<subcode>"; the HTTP status of the response is
    its numeric prefix. `data` is an empty object when nothing applies.
    """
    model_config = ConfigDict(populate_by_name=True)

    result_code: str = Field(..., alias="resultCode")
    msg: str
    data: Any = Field(default_factory=dict)

    @property
    def status_code(self) -> int:
        return int(self.result_code.split("-")[0])

    @classmethod
    def from_result(cls, result: Result, result_code: str, msg: str,
                    serializer: Optional[Callable[[Any], Any]] = None) -> "RsData":
        if not result.ok:
            return cls(result_code=result.error.kind.result_code, msg=result.error.message)
        data = result.value
        if serializer is not None and data is not None:
            data = serializer(data)
        return cls(result_code=result_code, msg=msg, data=data if data is not None else {})

    def to_response(self) -> JSONResponse:
        return JSONResponse(
            status_code=self.status_code,
            content=jsonable_encoder(self, by_alias=True),
        )


def to_user(user) -> User:
    return User.model_validate(user)

def to_calendar(calendar) -> Calendar:
    return Calendar.model_validate(calendar)

def to_calendars(calendars) -> List[Calendar]:
    return [to_calendar(calendar) for calendar in calendars]

def to_schedule(schedule) -> Schedule:
    return Schedule.model_validate(schedule)

def to_schedules(schedules) -> List[Schedule]:
    return [to_schedule(schedule) for schedule in schedules]
