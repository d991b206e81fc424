"""
报表服务
后台仪表盘计数
"""
from sqlalchemy.orm import Session

from app.models.ontology import (
    Room, RoomStatus, Booking, BookingStatus, MealOrder, OrderStatus,
    SpaAppointment, AppointmentStatus
)


class ReportService:
    """报表服务"""

    def __init__(self, db: Session):
        self.db = db

    def get_dashboard_stats(self) -> dict:
        """获取仪表盘统计"""
        return {
            'available_rooms': self.db.query(Room).filter(
                Room.status == RoomStatus.AVAILABLE).count(),
            'occupied_rooms': self.db.query(Room).filter(
                Room.status == RoomStatus.OCCUPIED).count(),
            'confirmed_bookings': self.db.query(Booking).filter(
                Booking.status == BookingStatus.CONFIRMED).count(),
            'checked_in_guests': self.db.query(Booking).filter(
                Booking.status == BookingStatus.CHECKED_IN).count(),
            'pending_orders': self.db.query(MealOrder).filter(
                MealOrder.status == OrderStatus.PENDING).count(),
            'spa_appointments': self.db.query(SpaAppointment).filter(
                SpaAppointment.status == AppointmentStatus.SCHEDULED).count(),
        }
