"""
重复客人检测
同一客人（邮箱或证件号）对完全相同的入住/离店日期只能有一个有效预订
这是防重复提交，不限制客人预订不同的行程
"""
import logging
from datetime import date
from typing import List, Optional

from sqlalchemy import and_, or_
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.models.ontology import Booking, GuestStayLock, ACTIVE_BOOKING_STATUSES
from app.services.errors import PersistenceFailure

logger = logging.getLogger(__name__)


def stay_lock_keys(email: str, id_number: str, check_in: date, check_out: date) -> List[str]:
    """客人行程的锁键，排序后按固定顺序加锁"""
    stay = f"{check_in.isoformat()}/{check_out.isoformat()}"
    return sorted({f"email:{email}|{stay}", f"id:{id_number}|{stay}"})


class DuplicateGuard:
    """重复预订检测"""

    def __init__(self, db: Session):
        self.db = db

    def has_duplicate(self, email: str, id_number: str,
                      check_in: date, check_out: date) -> bool:
        same_stay = and_(Booking.check_in == check_in, Booking.check_out == check_out)
        try:
            found = self.db.query(Booking.id).filter(
                Booking.status.in_(ACTIVE_BOOKING_STATUSES),
                same_stay,
                or_(Booking.customer_email == email, Booking.id_number == id_number)
            ).first()
        except SQLAlchemyError as e:
            logger.error(f"Duplicate booking check failed: {e}")
            raise PersistenceFailure(
                "Failed to verify existing bookings. Please try again.", detail=str(e)
            ) from e
        return found is not None

    def lock_guest_stay(self, email: str, id_number: str,
                        check_in: date, check_out: date) -> None:
        """
        锁定客人行程行（须在写事务内调用）
        不同房间上同一客人同一行程的并发预订由此串行化，
        之后的重复复查能看到先提交的一方
        """
        for key in stay_lock_keys(email, id_number, check_in, check_out):
            if self._lock_row(key) is not None:
                continue
            try:
                with self.db.begin_nested():
                    self.db.add(GuestStayLock(lock_key=key))
            except IntegrityError:
                # 并发事务已插入同一行，等待其提交后再加锁
                logger.debug(f"Guest stay lock {key} created concurrently")
            self._lock_row(key)

    def _lock_row(self, key: str) -> Optional[GuestStayLock]:
        return self.db.query(GuestStayLock).filter(
            GuestStayLock.lock_key == key
        ).with_for_update().first()
