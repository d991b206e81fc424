"""
预订路由
"""
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy.orm import Session
from app.database import get_db
from app.models.ontology import BookingStatus
from app.models.schemas import (
    BookingCreate, BookingCreatedResponse, BookingResponse, BookingDetailResponse
)
from app.services.booking_service import BookingService

router = APIRouter(prefix="/api", tags=["预订"])


def get_booking_service(db: Session = Depends(get_db)) -> BookingService:
    """预订服务工厂（测试中可覆盖以注入时钟）"""
    return BookingService(db)


@router.post("/book-room", response_model=BookingCreatedResponse, status_code=status.HTTP_201_CREATED)
def book_room(data: BookingCreate, service: BookingService = Depends(get_booking_service)):
    """创建预订"""
    result = service.create_booking(data)
    return BookingCreatedResponse(
        booking_id=result.booking_id,
        booking_reference=result.booking_reference,
        total_amount=result.total_amount,
        nights=result.nights,
        check_in=result.check_in,
        check_out=result.check_out,
    )


@router.get("/bookings", response_model=List[BookingResponse])
def list_bookings(
    status: Optional[BookingStatus] = None,
    customer_email: Optional[str] = None,
    booking_reference: Optional[str] = None,
    limit: int = Query(100, ge=1, le=100),
    service: BookingService = Depends(get_booking_service)
):
    """获取预订列表"""
    bookings = service.list_bookings(
        status=status,
        customer_email=customer_email,
        booking_reference=booking_reference,
        limit=limit
    )
    return [service.get_booking_detail(b) for b in bookings]


@router.get("/bookings/active", response_model=List[BookingResponse])
def list_active_bookings(service: BookingService = Depends(get_booking_service)):
    """今日在店的预订"""
    return [service.get_booking_detail(b) for b in service.list_active_bookings()]


@router.get("/bookings/{booking_id}", response_model=BookingDetailResponse)
def get_booking(booking_id: int, service: BookingService = Depends(get_booking_service)):
    """获取预订详情"""
    booking = service.get_booking(booking_id)
    if not booking:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Booking not found")
    return BookingDetailResponse(booking=service.get_booking_detail(booking))
