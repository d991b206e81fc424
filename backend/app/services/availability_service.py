"""
可用性服务 - 本体操作层
判断房间在 [check_in, check_out) 区间是否有有效预订重叠
"""
import logging
from datetime import date
from typing import List, Optional

from sqlalchemy import and_, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.models.ontology import Booking, Room, RoomStatus, ACTIVE_BOOKING_STATUSES
from app.services.errors import PersistenceFailure

logger = logging.getLogger(__name__)


def overlaps(existing_in: date, existing_out: date, new_in: date, new_out: date) -> bool:
    """
    半开区间重叠判断，三分支写法与 SQL 版本 overlap_clause 保持一致：
    已有预订覆盖新入住日 / 已有预订覆盖新离店日 / 已有预订嵌套在新区间内
    """
    return (
        (existing_in <= new_in and existing_out > new_in)
        or (existing_in < new_out and existing_out >= new_out)
        or (existing_in >= new_in and existing_out <= new_out)
    )


def overlap_clause(check_in: date, check_out: date):
    """overlaps() 的 SQL 表达式版本"""
    return or_(
        and_(Booking.check_in <= check_in, Booking.check_out > check_in),
        and_(Booking.check_in < check_out, Booking.check_out >= check_out),
        and_(Booking.check_in >= check_in, Booking.check_out <= check_out),
    )


def active_overlap_filter(check_in: date, check_out: date):
    """有效预订且与区间重叠"""
    return and_(
        Booking.status.in_(ACTIVE_BOOKING_STATUSES),
        overlap_clause(check_in, check_out),
    )


class AvailabilityService:
    """可用性服务"""

    def __init__(self, db: Session):
        self.db = db

    def count_overlapping(self, room_id: int, check_in: date, check_out: date) -> int:
        """统计某房间与区间重叠的有效预订数"""
        try:
            return self.db.query(Booking).filter(
                Booking.room_id == room_id,
                active_overlap_filter(check_in, check_out)
            ).count()
        except SQLAlchemyError as e:
            logger.error(f"Availability query failed for room {room_id}: {e}")
            raise PersistenceFailure(detail=str(e)) from e

    def is_room_available(self, room_id: int, check_in: date, check_out: date) -> bool:
        """没有任何重叠的有效预订即为可用"""
        return self.count_overlapping(room_id, check_in, check_out) == 0

    def list_available_rooms(self, check_in: date, check_out: date,
                             room_type: Optional[str] = None) -> List[Room]:
        """
        列出区间内可预订的房间
        status 必须为 available 且无重叠有效预订，按价格升序
        """
        busy_rooms = select(Booking.room_id).where(
            active_overlap_filter(check_in, check_out)
        ).distinct()

        query = self.db.query(Room).filter(
            Room.status == RoomStatus.AVAILABLE,
            Room.id.notin_(busy_rooms)
        )
        if room_type and room_type != "all":
            query = query.filter(Room.room_type == room_type)

        try:
            return query.order_by(Room.price, Room.room_number).all()
        except SQLAlchemyError as e:
            logger.error(f"Available room listing failed: {e}")
            raise PersistenceFailure(detail=str(e)) from e
