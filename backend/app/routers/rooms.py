"""
房间路由
房间列表与指定日期的可用房查询
"""
from typing import List, Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from app.database import get_db
from app.models.schemas import RoomResponse
from app.services.availability_service import AvailabilityService
from app.services.catalog_service import CatalogService
from app.services.errors import ValidationFailure
from app.services.validation import parse_date

router = APIRouter(prefix="/api/rooms", tags=["房间"])

DATES_REQUIRED_MESSAGE = "Check-in and check-out dates are required"


@router.get("", response_model=List[RoomResponse])
def list_rooms(db: Session = Depends(get_db)):
    """获取所有房间（含今日实时占用）"""
    return CatalogService(db).get_rooms()


@router.get("/availability", response_model=List[RoomResponse])
def room_availability(
    check_in: Optional[str] = Query(None),
    check_out: Optional[str] = Query(None),
    room_type: Optional[str] = Query(None),
    db: Session = Depends(get_db)
):
    """查询日期区间内可预订的房间"""
    if not check_in or not check_out:
        raise ValidationFailure([DATES_REQUIRED_MESSAGE], message=DATES_REQUIRED_MESSAGE)

    check_in_date = parse_date(check_in)
    check_out_date = parse_date(check_out)
    errors = []
    if check_in_date is None:
        errors.append("Valid check-in date is required")
    if check_out_date is None:
        errors.append("Valid check-out date is required")
    if not errors and check_out_date <= check_in_date:
        errors.append("Check-out date must be after check-in date")
    if errors:
        raise ValidationFailure(errors)

    return AvailabilityService(db).list_available_rooms(check_in_date, check_out_date, room_type)
