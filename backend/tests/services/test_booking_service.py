"""
Tests for app/services/booking_service.py
Covers: create_booking (validation, duplicate, availability, pricing, reference
        retry, same-day room status, rollback), list/get queries
"""
import re
from datetime import date
from decimal import Decimal

import pytest

from app.models.ontology import Booking, BookingStatus, Room, RoomStatus
from app.models.schemas import BookingCreate
from app.services.booking_service import (
    BookingService, generate_booking_reference,
    DUPLICATE_MESSAGE, UNAVAILABLE_MESSAGE, ROOM_NOT_FOUND_MESSAGE,
)
from app.services.errors import (
    ConflictFailure, NotFoundFailure, PersistenceFailure, ValidationFailure
)

TODAY = date(2024, 7, 1)


# ── helpers ──────────────────────────────────────────────────────────

def _request(room, **overrides):
    data = dict(
        room_id=room.id,
        customer_name="Jane Doe",
        customer_email="jane@example.com",
        customer_phone="+254 712 345 678",
        id_number="P1234567",
        check_in="2024-07-10",
        check_out="2024-07-12",
        guests=2,
        payment_method="card",
    )
    data.update(overrides)
    return BookingCreate(**data)


def _service(db, **kwargs):
    return BookingService(db, today=lambda: TODAY, **kwargs)


def _references(*values):
    it = iter(values)
    return lambda: next(it)


# ── reference generation ─────────────────────────────────────────────

class TestGenerateBookingReference:

    def test_format(self):
        reference = generate_booking_reference()
        assert re.fullmatch(r"BK\d{11}", reference)

    def test_custom_prefix(self):
        assert generate_booking_reference("HX").startswith("HX")


# ── create_booking ───────────────────────────────────────────────────

class TestCreateBooking:

    def test_creates_confirmed_booking(self, db_session, sample_room):
        result = _service(db_session).create_booking(_request(sample_room))

        assert result.total_amount == Decimal("300.00")
        assert result.nights == 2
        assert result.check_in == date(2024, 7, 10)
        assert result.check_out == date(2024, 7, 12)
        assert result.booking_reference.startswith("BK")

        booking = db_session.query(Booking).filter(Booking.id == result.booking_id).one()
        assert booking.status == BookingStatus.CONFIRMED
        assert booking.total_amount == Decimal("300.00")
        assert booking.special_requests == "Payment: card"

    def test_discount_code_is_applied_and_recorded(self, db_session, sample_room):
        result = _service(db_session).create_booking(
            _request(sample_room, discount_code="SUMMER24")
        )

        assert result.total_amount == Decimal("270.00")
        booking = db_session.get(Booking, result.booking_id)
        assert booking.discount_code == "SUMMER24"
        assert booking.special_requests == "Payment: card | Discount: SUMMER24"

    def test_explicit_total_is_discounted(self, db_session, sample_room):
        result = _service(db_session).create_booking(
            _request(sample_room, total_amount=Decimal("280.00"), discount_code="VIP")
        )
        assert result.total_amount == Decimal("252.00")

    def test_email_is_stored_lower_case(self, db_session, sample_room):
        result = _service(db_session).create_booking(
            _request(sample_room, customer_email=" Jane@Example.COM ")
        )
        assert db_session.get(Booking, result.booking_id).customer_email == "jane@example.com"

    def test_validation_failure_lists_every_error(self, db_session, sample_room):
        with pytest.raises(ValidationFailure) as exc_info:
            _service(db_session).create_booking(
                _request(sample_room, customer_email="bad", guests=0, payment_method="cheque")
            )

        assert exc_info.value.status_code == 400
        assert len(exc_info.value.errors) == 3
        assert db_session.query(Booking).count() == 0

    def test_overlapping_dates_are_rejected(self, db_session, sample_room):
        service = _service(db_session)
        service.create_booking(_request(sample_room))

        with pytest.raises(ConflictFailure) as exc_info:
            service.create_booking(_request(
                sample_room, customer_email="bob@example.com", id_number="B7654321",
                check_in="2024-07-11", check_out="2024-07-13",
            ))

        assert exc_info.value.message == UNAVAILABLE_MESSAGE
        assert db_session.query(Booking).count() == 1

    def test_back_to_back_stay_is_accepted(self, db_session, sample_room):
        service = _service(db_session)
        service.create_booking(_request(sample_room))

        result = service.create_booking(_request(
            sample_room, customer_email="bob@example.com", id_number="B7654321",
            check_in="2024-07-12", check_out="2024-07-14",
        ))
        assert result.nights == 2

    def test_duplicate_guest_on_other_room(self, db_session, sample_room, other_room):
        service = _service(db_session)
        service.create_booking(_request(sample_room))

        with pytest.raises(ConflictFailure) as exc_info:
            service.create_booking(_request(other_room))

        assert exc_info.value.message == DUPLICATE_MESSAGE
        assert exc_info.value.status_code == 409

    def test_duplicate_matched_by_id_number(self, db_session, sample_room, other_room):
        service = _service(db_session)
        service.create_booking(_request(sample_room))

        with pytest.raises(ConflictFailure) as exc_info:
            service.create_booking(_request(other_room, customer_email="alias@example.com",
                                            discount_code="NEWCODE"))
        assert exc_info.value.message == DUPLICATE_MESSAGE

    def test_same_guest_different_dates_is_a_new_booking(self, db_session, sample_room, other_room):
        service = _service(db_session)
        service.create_booking(_request(sample_room))

        result = service.create_booking(_request(
            other_room, check_in="2024-07-10", check_out="2024-07-13", discount_code="AGAIN"
        ))
        assert result.total_amount == Decimal("405.00")

    def test_cancelled_booking_frees_the_room(self, db_session, sample_room):
        service = _service(db_session)
        first = service.create_booking(_request(sample_room))
        booking = db_session.get(Booking, first.booking_id)
        booking.status = BookingStatus.CANCELLED
        db_session.commit()

        result = service.create_booking(_request(sample_room))
        assert result.booking_id != first.booking_id

    def test_unknown_room(self, db_session, sample_room):
        with pytest.raises(NotFoundFailure) as exc_info:
            _service(db_session).create_booking(_request(sample_room, room_id=9999))
        assert exc_info.value.message == ROOM_NOT_FOUND_MESSAGE

    def test_room_under_maintenance(self, db_session, maintenance_room):
        with pytest.raises(NotFoundFailure):
            _service(db_session).create_booking(_request(maintenance_room))
        assert db_session.query(Booking).count() == 0

    def test_occupied_status_does_not_block_future_dates(self, db_session, sample_room):
        sample_room.status = RoomStatus.OCCUPIED
        db_session.commit()

        result = _service(db_session).create_booking(_request(sample_room))
        assert result.nights == 2

    def test_same_day_check_in_marks_room_occupied(self, db_session, sample_room):
        _service(db_session).create_booking(
            _request(sample_room, check_in="2024-07-01", check_out="2024-07-03")
        )
        db_session.expire_all()
        assert db_session.get(Room, sample_room.id).status == RoomStatus.OCCUPIED

    def test_future_check_in_leaves_room_status(self, db_session, sample_room):
        _service(db_session).create_booking(_request(sample_room))
        db_session.expire_all()
        assert db_session.get(Room, sample_room.id).status == RoomStatus.AVAILABLE

    def test_reference_collision_is_retried(self, db_session, sample_room, other_room):
        first = _service(db_session, reference_factory=_references("BK00000000001")).create_booking(
            _request(sample_room)
        )
        assert first.booking_reference == "BK00000000001"

        second = _service(
            db_session, reference_factory=_references("BK00000000001", "BK00000000002")
        ).create_booking(_request(
            other_room, customer_email="bob@example.com", id_number="B7654321"
        ))

        assert second.booking_reference == "BK00000000002"
        assert db_session.query(Booking).count() == 2

    def test_reference_attempts_are_bounded(self, db_session, sample_room, other_room):
        _service(db_session, reference_factory=lambda: "BK00000000001").create_booking(
            _request(sample_room)
        )

        with pytest.raises(PersistenceFailure):
            _service(db_session, reference_factory=lambda: "BK00000000001").create_booking(
                _request(other_room, customer_email="bob@example.com", id_number="B7654321")
            )
        assert db_session.query(Booking).count() == 1


class TestBookingScenario:
    """房价 150，07-10 → 07-12；重叠与重复被拒"""

    def test_walkthrough(self, db_session, sample_room, other_room):
        service = _service(db_session)

        result = service.create_booking(_request(sample_room))
        assert (result.total_amount, result.nights) == (Decimal("300.00"), 2)

        with pytest.raises(ConflictFailure, match="not available"):
            service.create_booking(_request(
                sample_room, customer_email="second@example.com", id_number="Z99999",
                check_in="2024-07-11", check_out="2024-07-13",
            ))

        with pytest.raises(ConflictFailure, match="Duplicate booking"):
            service.create_booking(_request(other_room))

        assert db_session.query(Booking).count() == 1


# ── queries ──────────────────────────────────────────────────────────

class TestBookingQueries:

    def test_list_bookings_filters(self, db_session, sample_room, other_room):
        service = _service(db_session)
        first = service.create_booking(_request(sample_room))
        service.create_booking(_request(
            other_room, customer_email="bob@example.com", id_number="B7654321"
        ))

        assert len(service.list_bookings()) == 2
        by_email = service.list_bookings(customer_email="JANE@example.com")
        assert [b.id for b in by_email] == [first.booking_id]
        by_reference = service.list_bookings(booking_reference=first.booking_reference)
        assert [b.id for b in by_reference] == [first.booking_id]
        assert service.list_bookings(status=BookingStatus.CANCELLED) == []

    def test_list_active_bookings(self, db_session, sample_room, other_room):
        service = _service(db_session)
        in_house = service.create_booking(
            _request(sample_room, check_in="2024-07-01", check_out="2024-07-04")
        )
        service.create_booking(_request(
            other_room, customer_email="bob@example.com", id_number="B7654321"
        ))

        assert [b.id for b in service.list_active_bookings()] == [in_house.booking_id]

    def test_booking_detail_includes_room(self, db_session, sample_room):
        service = _service(db_session)
        result = service.create_booking(_request(sample_room))

        detail = service.get_booking_detail(service.get_booking(result.booking_id))
        assert detail["room_number"] == sample_room.room_number
        assert detail["room_type"] == "deluxe"
        assert detail["room_price"] == Decimal("150.00")

    def test_get_missing_booking(self, db_session):
        assert _service(db_session).get_booking(42) is None
