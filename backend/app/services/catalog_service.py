"""
目录查询服务
房间列表与餐饮目录的只读查询，不涉及跨记录一致性
"""
from datetime import date
from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.models.ontology import Booking, Meal, Room, RoomStatus, ACTIVE_BOOKING_STATUSES


class CatalogService:
    """目录查询"""

    def __init__(self, db: Session):
        self.db = db

    def get_rooms(self, today: Optional[date] = None) -> List[dict]:
        """
        房间列表，附带今日实时占用
        今日有在住的有效预订时 current_status 为 occupied，否则沿用房态
        """
        today = today or date.today()
        in_house = self.db.query(
            Booking.room_id, func.count(Booking.id).label("active_bookings")
        ).filter(
            Booking.status.in_(ACTIVE_BOOKING_STATUSES),
            Booking.check_in <= today,
            Booking.check_out > today
        ).group_by(Booking.room_id).subquery()

        rows = self.db.query(Room, in_house.c.active_bookings).outerjoin(
            in_house, Room.id == in_house.c.room_id
        ).order_by(Room.room_number).all()

        result = []
        for room, active_bookings in rows:
            active_bookings = active_bookings or 0
            result.append({
                'id': room.id,
                'room_number': room.room_number,
                'room_type': room.room_type,
                'price': room.price,
                'max_occupancy': room.max_occupancy,
                'status': room.status,
                'features': room.features or [],
                'image_url': room.image_url,
                'active_bookings': active_bookings,
                'current_status': RoomStatus.OCCUPIED if active_bookings else room.status,
            })
        return result

    def get_meals(self, category: Optional[str] = None) -> List[Meal]:
        """可点餐品，按分类、价格排序"""
        query = self.db.query(Meal).filter(Meal.is_available == True)
        if category and category != "all":
            query = query.filter(Meal.category == category)
        return query.order_by(Meal.category, Meal.price).all()
