"""
Tests for app/services/catalog_service.py and app/services/report_service.py
"""
from datetime import date
from decimal import Decimal

from app.models.ontology import (
    Booking, BookingStatus, MealOrder, OrderStatus, OrderType, PaymentMethod, RoomStatus
)
from app.services.catalog_service import CatalogService
from app.services.report_service import ReportService


def _make_booking(db, room, check_in, check_out, reference, status=BookingStatus.CONFIRMED):
    db.add(Booking(
        booking_reference=reference,
        room_id=room.id,
        customer_name="Guest",
        customer_email=f"{reference.lower()}@example.com",
        customer_phone="0712345678",
        id_number=reference,
        check_in=check_in,
        check_out=check_out,
        guests=1,
        total_amount=Decimal("150.00"),
        payment_method=PaymentMethod.CASH,
        status=status,
    ))
    db.commit()


class TestGetRooms:

    def test_current_status_reflects_todays_guests(self, db_session, sample_room, other_room, standard_room):
        today = date(2024, 7, 11)
        _make_booking(db_session, sample_room, date(2024, 7, 10), date(2024, 7, 12), "BK1")
        _make_booking(db_session, other_room, date(2024, 7, 10), date(2024, 7, 11), "BK2")
        _make_booking(db_session, standard_room, date(2024, 7, 10), date(2024, 7, 13), "BK3",
                      status=BookingStatus.CANCELLED)

        rooms = {r["room_number"]: r for r in CatalogService(db_session).get_rooms(today)}

        assert rooms[sample_room.room_number]["current_status"] == RoomStatus.OCCUPIED
        assert rooms[sample_room.room_number]["active_bookings"] == 1
        assert rooms[other_room.room_number]["current_status"] == RoomStatus.AVAILABLE
        assert rooms[standard_room.room_number]["active_bookings"] == 0

    def test_ordered_by_room_number(self, db_session, sample_room, standard_room, maintenance_room):
        rooms = CatalogService(db_session).get_rooms(date(2024, 7, 1))
        assert [r["room_number"] for r in rooms] == ["101", "105", "999"]
        assert rooms[-1]["current_status"] == RoomStatus.MAINTENANCE


class TestGetMeals:

    def test_available_meals_only(self, db_session, sample_meals):
        names = [m.name for m in CatalogService(db_session).get_meals()]
        assert names == ["Truffle Pasta", "Tomato Soup"]

    def test_category_filter(self, db_session, sample_meals):
        service = CatalogService(db_session)
        assert [m.name for m in service.get_meals("lunch")] == ["Tomato Soup"]
        assert len(service.get_meals("all")) == 2
        assert service.get_meals("brunch") == []


class TestDashboardStats:

    def test_counts(self, db_session, sample_room, other_room, maintenance_room, sample_spa_services):
        other_room.status = RoomStatus.OCCUPIED
        _make_booking(db_session, sample_room, date(2024, 7, 10), date(2024, 7, 12), "BK1")
        _make_booking(db_session, other_room, date(2024, 7, 1), date(2024, 7, 3), "BK2",
                      status=BookingStatus.CHECKED_IN)
        db_session.add(MealOrder(customer_name="Guest", room_number="105",
                                 order_type=OrderType.ROOM_SERVICE,
                                 total_amount=Decimal("20.00"), status=OrderStatus.PENDING))
        db_session.commit()

        stats = ReportService(db_session).get_dashboard_stats()

        assert stats == {
            'available_rooms': 1,
            'occupied_rooms': 1,
            'confirmed_bookings': 1,
            'checked_in_guests': 1,
            'pending_orders': 1,
            'spa_appointments': 0,
        }
