"""
水疗预约服务
同一 (服务, 日期, 时间) 只能有一个 scheduled 预约；
冲突检查与写入在同一工作单元内完成，并锁定服务行以串行化同一服务的并发请求
"""
import logging
from typing import List, Optional

from sqlalchemy import case
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.database import unit_of_work
from app.models.ontology import SpaAppointment, SpaHours, SpaService, AppointmentStatus
from app.models.schemas import SpaAppointmentCreate
from app.services.errors import (
    ServiceError, ValidationFailure, ConflictFailure, NotFoundFailure, PersistenceFailure
)
from app.services.validation import validate_appointment_request

logger = logging.getLogger(__name__)

SERVICE_UNAVAILABLE_MESSAGE = "Spa service not available"
SLOT_TAKEN_MESSAGE = "Time slot not available"

WEEKDAYS = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")


class AppointmentService:
    """水疗预约服务"""

    def __init__(self, db: Session):
        self.db = db

    def create_appointment(self, data: SpaAppointmentCreate) -> SpaAppointment:
        """创建水疗预约"""
        appointment_input, errors = validate_appointment_request(data)
        if errors:
            raise ValidationFailure(errors, message="Missing required fields")

        try:
            with unit_of_work(self.db):
                service = self.db.query(SpaService).filter(
                    SpaService.id == appointment_input.service_id,
                    SpaService.is_available == True
                ).with_for_update().first()
                if service is None:
                    raise NotFoundFailure(SERVICE_UNAVAILABLE_MESSAGE)

                if self.is_slot_taken(service.id, appointment_input.appointment_date,
                                      appointment_input.appointment_time):
                    raise ConflictFailure(SLOT_TAKEN_MESSAGE)

                appointment = SpaAppointment(
                    booking_id=appointment_input.booking_id,
                    customer_name=appointment_input.customer_name,
                    service_id=service.id,
                    appointment_date=appointment_input.appointment_date,
                    appointment_time=appointment_input.appointment_time,
                    notes=appointment_input.notes,
                    status=AppointmentStatus.SCHEDULED,
                )
                self.db.add(appointment)
                self.db.flush()
        except ServiceError:
            raise
        except SQLAlchemyError as e:
            logger.error(f"Spa appointment transaction failed: {e}")
            raise PersistenceFailure(detail=str(e)) from e

        logger.info(
            f"Spa appointment {appointment.id} scheduled: service={appointment.service_id} "
            f"{appointment.appointment_date} {appointment.appointment_time}"
        )
        return appointment

    def is_slot_taken(self, service_id: int, appointment_date, appointment_time) -> bool:
        return self.db.query(SpaAppointment.id).filter(
            SpaAppointment.service_id == service_id,
            SpaAppointment.appointment_date == appointment_date,
            SpaAppointment.appointment_time == appointment_time,
            SpaAppointment.status == AppointmentStatus.SCHEDULED
        ).first() is not None

    def cancel_appointment(self, appointment_id: int) -> SpaAppointment:
        """取消预约，释放时段"""
        try:
            with unit_of_work(self.db):
                appointment = self.db.query(SpaAppointment).filter(
                    SpaAppointment.id == appointment_id
                ).with_for_update().first()
                if not appointment:
                    raise NotFoundFailure("Appointment not found")
                if appointment.status != AppointmentStatus.SCHEDULED:
                    raise ConflictFailure(
                        f"Appointment is {appointment.status.value} and cannot be cancelled"
                    )
                appointment.status = AppointmentStatus.CANCELLED
        except ServiceError:
            raise
        except SQLAlchemyError as e:
            logger.error(f"Cancelling spa appointment {appointment_id} failed: {e}")
            raise PersistenceFailure(detail=str(e)) from e

        self.db.refresh(appointment)
        logger.info(f"Spa appointment {appointment.id} cancelled")
        return appointment

    def get_appointment(self, appointment_id: int) -> Optional[SpaAppointment]:
        return self.db.query(SpaAppointment).filter(SpaAppointment.id == appointment_id).first()

    def list_services(self) -> List[SpaService]:
        """可预约的水疗服务"""
        return self.db.query(SpaService).filter(
            SpaService.is_available == True
        ).order_by(SpaService.category, SpaService.price).all()

    def list_hours(self) -> List[SpaHours]:
        """营业时间，按周一到周日排列"""
        weekday_order = case(
            {day: index for index, day in enumerate(WEEKDAYS)},
            value=SpaHours.day_of_week,
            else_=len(WEEKDAYS),
        )
        return self.db.query(SpaHours).order_by(weekday_order, SpaHours.id).all()
