"""
水疗路由
"""
from typing import List
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from app.database import get_db
from app.models.schemas import (
    SpaServiceResponse, SpaHoursResponse, SpaAppointmentCreate, SpaAppointmentCreatedResponse,
    SpaAppointmentResponse
)
from app.services.spa_service import AppointmentService

router = APIRouter(prefix="/api", tags=["水疗"])


@router.get("/spa/services", response_model=List[SpaServiceResponse])
def list_spa_services(db: Session = Depends(get_db)):
    """获取可预约的水疗服务"""
    return AppointmentService(db).list_services()


@router.get("/spa/hours", response_model=List[SpaHoursResponse])
def list_spa_hours(db: Session = Depends(get_db)):
    """获取水疗营业时间（周一至周日）"""
    return AppointmentService(db).list_hours()


@router.post("/spa-appointments", response_model=SpaAppointmentCreatedResponse,
             status_code=status.HTTP_201_CREATED)
def create_spa_appointment(data: SpaAppointmentCreate, db: Session = Depends(get_db)):
    """创建水疗预约"""
    appointment = AppointmentService(db).create_appointment(data)
    return SpaAppointmentCreatedResponse(appointment_id=appointment.id)


@router.post("/spa-appointments/{appointment_id}/cancel", response_model=SpaAppointmentResponse)
def cancel_spa_appointment(appointment_id: int, db: Session = Depends(get_db)):
    """取消水疗预约"""
    return AppointmentService(db).cancel_appointment(appointment_id)
