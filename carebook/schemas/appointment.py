from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel
from typing import Optional, List
from datetime import datetime, timezone

from ..models.appointment import AppointmentStatus
from .auth import UserResponse

class CamelModel(BaseModel):
    """Accepts and emits camelCase keys, as the dashboard client expects."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )

class AppointmentCreate(CamelModel):
    date: datetime
    description: str = Field("", max_length=2000)
    doctor_id: int

class AppointmentStatusUpdate(CamelModel):
    status: AppointmentStatus

class AppointmentResponse(CamelModel):
    id: int
    date: datetime
    description: str
    status: AppointmentStatus
    patient_id: int
    doctor_id: int
    seen_by_doctor: bool
    patient: Optional[UserResponse] = None
    doctor: Optional[UserResponse] = None

    @field_validator("date")
    @classmethod
    def assume_utc(cls, value: datetime) -> datetime:
        # Dates are stored in UTC; some backends (SQLite) drop the offset
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)

class AppointmentListResponse(CamelModel):
    appointments: List[AppointmentResponse]
    count: int

class UnseenCountResponse(CamelModel):
    count: int

class MarkSeenResponse(CamelModel):
    message: str
    updated: int

class MessageResponse(CamelModel):
    message: str
