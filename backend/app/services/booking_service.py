"""
预订服务 - 本体操作层
管理 Booking 对象（预订阶段的聚合根）

创建流程：
  校验 → 重复检测 → (工作单元) 锁定客人行程与房间 → 复查重复与可用性 → 计价 → 写入 → 当日入住更新房态 → 提交
任一步失败整体回滚；房态更新是缓存提示，失败只记录日志
"""
import logging
import random
import time
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Callable, List, Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.config import settings
from app.database import unit_of_work
from app.models.ontology import (
    Booking, BookingStatus, Room, RoomStatus, ACTIVE_BOOKING_STATUSES
)
from app.models.schemas import BookingCreate
from app.services.availability_service import AvailabilityService
from app.services.duplicate_guard import DuplicateGuard
from app.services.errors import (
    ServiceError, ValidationFailure, ConflictFailure, NotFoundFailure, PersistenceFailure
)
from app.services.price_service import PriceService
from app.services.validation import BookingInput, validate_booking_request

logger = logging.getLogger(__name__)

DUPLICATE_MESSAGE = (
    "Duplicate booking detected for this guest and stay dates. "
    "Please review existing reservations."
)
UNAVAILABLE_MESSAGE = "Room is not available for the selected dates"
ROOM_NOT_FOUND_MESSAGE = "Room not found or unavailable"


def generate_booking_reference(prefix: Optional[str] = None) -> str:
    """生成预订号：前缀 + 毫秒时间戳后 8 位 + 3 位随机数（唯一性由数据库约束兜底）"""
    prefix = settings.BOOKING_REFERENCE_PREFIX if prefix is None else prefix
    millis = str(int(time.time() * 1000))[-8:]
    return f"{prefix}{millis}{random.randint(0, 999):03d}"


@dataclass
class BookingResult:
    booking_id: int
    booking_reference: str
    total_amount: Decimal
    nights: int
    check_in: date
    check_out: date


class BookingService:
    """预订服务"""

    def __init__(self, db: Session,
                 price_service: Optional[PriceService] = None,
                 today: Callable[[], date] = date.today,
                 reference_factory: Callable[[], str] = generate_booking_reference):
        self.db = db
        self.price_service = price_service or PriceService()
        self.availability = AvailabilityService(db)
        self.duplicate_guard = DuplicateGuard(db)
        # 支持注入时钟和预订号生成器，便于测试
        self._today = today
        self._reference_factory = reference_factory

    # ============== 创建预订 ==============

    def create_booking(self, data: BookingCreate) -> BookingResult:
        """创建预订"""
        today = self._today()
        booking_input, errors = validate_booking_request(data, today)
        if errors:
            raise ValidationFailure(errors)

        if self._is_duplicate(booking_input):
            raise ConflictFailure(DUPLICATE_MESSAGE)

        # 结束预检查开启的只读事务，工作单元内的复查读取最新已提交数据
        self.db.rollback()

        try:
            with unit_of_work(self.db):
                self.duplicate_guard.lock_guest_stay(
                    booking_input.customer_email,
                    booking_input.id_number,
                    booking_input.check_in,
                    booking_input.check_out,
                )
                room = self._lock_bookable_room(booking_input.room_id)
                if room is None:
                    raise NotFoundFailure(ROOM_NOT_FOUND_MESSAGE)

                if self._is_duplicate(booking_input):
                    raise ConflictFailure(DUPLICATE_MESSAGE)
                if not self.availability.is_room_available(
                        room.id, booking_input.check_in, booking_input.check_out):
                    raise ConflictFailure(UNAVAILABLE_MESSAGE)

                total_amount, night_count = self.price_service.quote_stay(
                    room.price,
                    booking_input.check_in,
                    booking_input.check_out,
                    discount_code=booking_input.discount_code,
                    explicit_total=booking_input.total_amount,
                )

                booking = self._insert_booking(booking_input, total_amount)

                if booking_input.check_in == today:
                    self._mark_room_occupied(room)
        except ServiceError:
            raise
        except SQLAlchemyError as e:
            logger.error(f"Booking transaction failed for room {booking_input.room_id}: {e}")
            raise PersistenceFailure("Failed to create booking", detail=str(e)) from e

        logger.info(
            f"Booking {booking.booking_reference} created: room={booking.room_id} "
            f"{booking.check_in}→{booking.check_out} total={total_amount}"
        )
        return BookingResult(
            booking_id=booking.id,
            booking_reference=booking.booking_reference,
            total_amount=total_amount,
            nights=night_count,
            check_in=booking_input.check_in,
            check_out=booking_input.check_out,
        )

    def _is_duplicate(self, booking_input: BookingInput) -> bool:
        return self.duplicate_guard.has_duplicate(
            booking_input.customer_email,
            booking_input.id_number,
            booking_input.check_in,
            booking_input.check_out,
        )

    def _lock_bookable_room(self, room_id: int) -> Optional[Room]:
        """
        获取并锁定房间行（支持 FOR UPDATE 的数据库上按房间串行化并发预订）
        维修中的房间视为不存在
        """
        return self.db.query(Room).filter(
            Room.id == room_id,
            Room.status != RoomStatus.MAINTENANCE
        ).with_for_update().first()

    def _insert_booking(self, booking_input: BookingInput, total_amount: Decimal) -> Booking:
        """写入预订；预订号撞车时在保存点内重试"""
        special_requests = f"Payment: {booking_input.payment_method.value}"
        if booking_input.discount_code:
            special_requests += f" | Discount: {booking_input.discount_code}"

        for attempt in range(1, settings.BOOKING_REFERENCE_MAX_ATTEMPTS + 1):
            reference = self._reference_factory()
            booking = Booking(
                booking_reference=reference,
                room_id=booking_input.room_id,
                customer_name=booking_input.customer_name,
                customer_email=booking_input.customer_email,
                customer_phone=booking_input.customer_phone,
                id_number=booking_input.id_number,
                check_in=booking_input.check_in,
                check_out=booking_input.check_out,
                guests=booking_input.guests,
                total_amount=total_amount,
                payment_method=booking_input.payment_method,
                discount_code=booking_input.discount_code,
                special_requests=special_requests,
                status=BookingStatus.CONFIRMED,
            )
            try:
                with self.db.begin_nested():
                    self.db.add(booking)
            except IntegrityError:
                if not self._reference_taken(reference):
                    raise
                logger.warning(f"Booking reference {reference} collided (attempt {attempt})")
                continue
            return booking

        raise PersistenceFailure("Failed to allocate a unique booking reference")

    def _reference_taken(self, reference: str) -> bool:
        return self.db.query(Booking.id).filter(
            Booking.booking_reference == reference
        ).first() is not None

    def _mark_room_occupied(self, room: Room) -> None:
        """当日入住：把房态标记为 occupied，失败不影响预订"""
        try:
            with self.db.begin_nested():
                room.status = RoomStatus.OCCUPIED
        except SQLAlchemyError as e:
            logger.error(f"Error updating room status for room {room.id}: {e}")

    # ============== 查询 ==============

    def get_booking(self, booking_id: int) -> Optional[Booking]:
        """获取单个预订"""
        return self.db.query(Booking).filter(Booking.id == booking_id).first()

    def list_bookings(self, status: Optional[BookingStatus] = None,
                      customer_email: Optional[str] = None,
                      booking_reference: Optional[str] = None,
                      limit: int = 100) -> List[Booking]:
        """获取预订列表（最新在前）"""
        query = self.db.query(Booking)

        if status:
            query = query.filter(Booking.status == status)
        if customer_email:
            query = query.filter(Booking.customer_email == customer_email.strip().lower())
        if booking_reference:
            query = query.filter(Booking.booking_reference == booking_reference)

        return query.order_by(Booking.created_at.desc(), Booking.id.desc()).limit(limit).all()

    def list_active_bookings(self) -> List[Booking]:
        """今日在店（供客房送餐选择）"""
        today = self._today()
        return self.db.query(Booking).filter(
            Booking.status.in_(ACTIVE_BOOKING_STATUSES),
            Booking.check_in <= today,
            Booking.check_out >= today
        ).order_by(Booking.check_in.desc()).all()

    def get_booking_detail(self, booking: Booking) -> dict:
        """预订详情（包含房间信息）"""
        return {
            'id': booking.id,
            'booking_reference': booking.booking_reference,
            'room_id': booking.room_id,
            'room_number': booking.room.room_number,
            'room_type': booking.room.room_type,
            'room_price': booking.room.price,
            'customer_name': booking.customer_name,
            'customer_email': booking.customer_email,
            'customer_phone': booking.customer_phone,
            'id_number': booking.id_number,
            'check_in': booking.check_in,
            'check_out': booking.check_out,
            'guests': booking.guests,
            'total_amount': booking.total_amount,
            'payment_method': booking.payment_method,
            'discount_code': booking.discount_code,
            'special_requests': booking.special_requests,
            'status': booking.status,
            'created_at': booking.created_at,
        }
