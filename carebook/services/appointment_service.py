from sqlalchemy.orm import Session
from datetime import timezone
from typing import Dict, List
import logging

from ..core.exceptions import InvalidStatusTransition, NotFound, ValidationError
from ..core.security import Principal, UserRole
from ..models.appointment import Appointment, AppointmentStatus
from ..models.user import User
from ..schemas.appointment import AppointmentCreate
from .appointment_policy import Operation, authorize, scope_filter
from .status_transitions import INITIAL_STATUS, check_transition

logger = logging.getLogger(__name__)

class AppointmentService:
    def __init__(self, db: Session):
        self.db = db

    def create_appointment(self, principal: Principal, data: AppointmentCreate) -> Appointment:
        """Book an appointment for the calling patient with the given doctor."""
        authorize(principal, Operation.CREATE)

        doctor = self.db.query(User).filter(User.id == data.doctor_id).first()
        if not doctor:
            raise NotFound(f"Doctor {data.doctor_id} not found")
        if doctor.role != UserRole.DOCTOR:
            raise ValidationError("doctorId must reference a user with the DOCTOR role")

        date = data.date
        if date.tzinfo is None:
            date = date.replace(tzinfo=timezone.utc)
        else:
            date = date.astimezone(timezone.utc)

        # patient_id always comes from the authenticated principal
        appointment = Appointment(
            date=date,
            description=data.description,
            patient_id=principal.id,
            doctor_id=doctor.id,
            status=INITIAL_STATUS,
            seen_by_doctor=False,
        )

        self.db.add(appointment)
        self.db.commit()
        self.db.refresh(appointment)

        logger.info(
            f"Appointment {appointment.id} created by patient {principal.id} "
            f"with doctor {doctor.id}"
        )
        return appointment

    def list_for_principal(self, principal: Principal) -> Dict:
        """Appointments visible to a patient or doctor, newest first."""
        authorize(principal, Operation.LIST)
        column, value = scope_filter(principal)

        appointments = (
            self.db.query(Appointment)
            .filter(getattr(Appointment, column) == value)
            .order_by(Appointment.date.desc())
            .all()
        )
        return {"appointments": appointments, "count": len(appointments)}

    def list_all(self, principal: Principal) -> Dict:
        """Every appointment in the system, newest first."""
        authorize(principal, Operation.LIST_ALL)

        appointments = (
            self.db.query(Appointment)
            .order_by(Appointment.date.desc())
            .all()
        )
        return {"appointments": appointments, "count": len(appointments)}

    def update_status(
        self,
        principal: Principal,
        appointment_id: int,
        new_status: AppointmentStatus,
    ) -> Appointment:
        """Move an appointment to ``new_status`` along the transition table."""
        authorize(principal, Operation.UPDATE_STATUS)
        appointment = self._get_or_404(appointment_id)
        authorize(principal, Operation.UPDATE_STATUS, appointment)

        current = appointment.status
        check_transition(current, new_status)

        # Conditional update: a concurrent change to the row makes it match nothing
        query = self.db.query(Appointment).filter(
            Appointment.id == appointment_id,
            Appointment.status == current,
        )
        if principal.role == UserRole.DOCTOR:
            query = query.filter(Appointment.doctor_id == principal.id)

        updated = query.update(
            {Appointment.status: new_status},
            synchronize_session=False,
        )
        if not updated:
            self.db.rollback()
            latest = self._get_or_404(appointment_id)
            logger.warning(
                f"Status update on appointment {appointment_id} lost a race: "
                f"expected {current.value}, found {latest.status.value}"
            )
            raise InvalidStatusTransition(latest.status, new_status)

        self.db.commit()
        self.db.refresh(appointment)

        logger.info(
            f"Appointment {appointment_id} status {current.value} -> {new_status.value} "
            f"by {principal.role.value.lower()} {principal.id}"
        )
        return appointment

    def delete_appointment(self, appointment_id: int) -> None:
        """Delete an appointment. Callers are authorized at the API boundary."""
        appointment = self._get_or_404(appointment_id)
        self.db.delete(appointment)
        self.db.commit()
        logger.info(f"Appointment {appointment_id} deleted")

    def get_unseen_for_doctor(self, principal: Principal) -> List[Appointment]:
        authorize(principal, Operation.VIEW_UNSEEN)
        return (
            self._unseen_query(principal)
            .order_by(Appointment.date.desc())
            .all()
        )

    def count_unseen_for_doctor(self, principal: Principal) -> int:
        authorize(principal, Operation.VIEW_UNSEEN)
        return self._unseen_query(principal).count()

    def mark_appointments_seen(self, principal: Principal) -> int:
        """Mark every unseen appointment of the calling doctor as seen.

        Returns the number of rows that changed.
        """
        authorize(principal, Operation.MARK_SEEN)
        updated = self._unseen_query(principal).update(
            {Appointment.seen_by_doctor: True},
            synchronize_session=False,
        )
        self.db.commit()

        logger.info(f"Doctor {principal.id} marked {updated} appointments as seen")
        return updated

    def mark_single_appointment_seen(self, principal: Principal, appointment_id: int) -> Appointment:
        authorize(principal, Operation.MARK_SEEN)
        appointment = self._get_or_404(appointment_id)
        authorize(principal, Operation.MARK_SEEN, appointment)

        updated = self.db.query(Appointment).filter(
            Appointment.id == appointment_id,
            Appointment.doctor_id == principal.id,
        ).update(
            {Appointment.seen_by_doctor: True},
            synchronize_session=False,
        )
        if not updated:
            # Deleted between the load and the update
            self.db.rollback()
            raise NotFound(f"Appointment {appointment_id} not found")
        self.db.commit()
        self.db.refresh(appointment)
        return appointment

    def _unseen_query(self, principal: Principal):
        return self.db.query(Appointment).filter(
            Appointment.doctor_id == principal.id,
            Appointment.seen_by_doctor == False,  # noqa: E712
        )

    def _get_or_404(self, appointment_id: int) -> Appointment:
        appointment = self.db.query(Appointment).filter(
            Appointment.id == appointment_id
        ).first()
        if not appointment:
            raise NotFound(f"Appointment {appointment_id} not found")
        return appointment
