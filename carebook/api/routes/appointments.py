from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List

from ...core.database import get_db
from ...core.security import Principal, UserRole
from ...api.deps import (
    get_current_principal, get_admin_principal, get_doctor_principal,
    get_patient_principal, require_role
)
from ...services.appointment_service import AppointmentService
from ...schemas.appointment import (
    AppointmentCreate, AppointmentStatusUpdate, AppointmentResponse,
    AppointmentListResponse, UnseenCountResponse, MarkSeenResponse,
    MessageResponse
)

router = APIRouter(prefix="/appointments", tags=["Appointments"])

@router.get("", response_model=AppointmentListResponse)
def list_my_appointments(
    principal: Principal = Depends(require_role([UserRole.PATIENT, UserRole.DOCTOR])),
    db: Session = Depends(get_db)
):
    """Appointments of the calling patient or doctor."""
    return AppointmentService(db).list_for_principal(principal)

@router.get("/all", response_model=AppointmentListResponse)
def list_all_appointments(
    principal: Principal = Depends(get_admin_principal),
    db: Session = Depends(get_db)
):
    """All appointments (admin only)."""
    return AppointmentService(db).list_all(principal)

@router.post("", response_model=AppointmentResponse, status_code=status.HTTP_201_CREATED)
def create_appointment(
    data: AppointmentCreate,
    principal: Principal = Depends(get_patient_principal),
    db: Session = Depends(get_db)
):
    """Book an appointment with a doctor."""
    return AppointmentService(db).create_appointment(principal, data)

@router.get("/doctor/unseen", response_model=List[AppointmentResponse])
def get_unseen_appointments(
    principal: Principal = Depends(get_doctor_principal),
    db: Session = Depends(get_db)
):
    return AppointmentService(db).get_unseen_for_doctor(principal)

@router.get("/doctor/unseen/count", response_model=UnseenCountResponse)
def count_unseen_appointments(
    principal: Principal = Depends(get_doctor_principal),
    db: Session = Depends(get_db)
):
    return {"count": AppointmentService(db).count_unseen_for_doctor(principal)}

@router.patch("/doctor/mark-all-seen", response_model=MarkSeenResponse)
def mark_all_seen(
    principal: Principal = Depends(get_doctor_principal),
    db: Session = Depends(get_db)
):
    updated = AppointmentService(db).mark_appointments_seen(principal)
    return {"message": "Marked as seen", "updated": updated}

@router.patch("/{appointment_id}/status", response_model=AppointmentResponse)
def update_appointment_status(
    appointment_id: int,
    data: AppointmentStatusUpdate,
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db)
):
    """Change an appointment's status (owning doctor or admin)."""
    return AppointmentService(db).update_status(principal, appointment_id, data.status)

@router.patch("/{appointment_id}/seen", response_model=AppointmentResponse)
def mark_single_seen(
    appointment_id: int,
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db)
):
    return AppointmentService(db).mark_single_appointment_seen(principal, appointment_id)

@router.delete(
    "/{appointment_id}",
    response_model=MessageResponse,
    dependencies=[Depends(get_admin_principal)],
)
def delete_appointment(
    appointment_id: int,
    db: Session = Depends(get_db)
):
    """Delete an appointment (admin only)."""
    AppointmentService(db).delete_appointment(appointment_id)
    return {"message": "Appointment deleted successfully"}
