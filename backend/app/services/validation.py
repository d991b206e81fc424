"""
输入校验层 - 纯函数，无 I/O
所有规则的错误都会累积返回，调用方可以一次性报告全部问题
"""
import re
from dataclasses import dataclass, field
from datetime import date, datetime, time
from decimal import Decimal
from typing import List, Optional, Tuple, Union

from app.config import settings
from app.models.ontology import PaymentMethod, OrderType
from app.models.schemas import BookingCreate, MealOrderCreate, SpaAppointmentCreate

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
PHONE_CHARS_PATTERN = re.compile(r"^[\d\s\-+()]+$")
MIN_PHONE_DIGITS = 10
MIN_NAME_LENGTH = 2
MIN_ID_NUMBER_LENGTH = 3

PAYMENT_METHODS = tuple(m.value for m in PaymentMethod)
ORDER_TYPES = tuple(t.value for t in OrderType)


# ============== 字段级校验 ==============

def is_valid_email(email: Optional[str]) -> bool:
    return bool(email) and EMAIL_PATTERN.match(email) is not None


def is_valid_phone(phone: Optional[str]) -> bool:
    """只允许数字/空格/-/+/括号，且去掉非数字后至少 10 位"""
    if not phone or not PHONE_CHARS_PATTERN.match(phone):
        return False
    return len(re.sub(r"\D", "", phone)) >= MIN_PHONE_DIGITS


def parse_date(value: Union[str, date, None]) -> Optional[date]:
    """解析 YYYY-MM-DD，非法日历日期返回 None"""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return datetime.strptime(value.strip(), "%Y-%m-%d").date()
    except (ValueError, AttributeError):
        return None


def parse_time(value: Union[str, time, None]) -> Optional[time]:
    """解析 HH:MM 或 HH:MM:SS"""
    if value is None:
        return None
    if isinstance(value, time):
        return value
    for fmt in ("%H:%M", "%H:%M:%S"):
        try:
            return datetime.strptime(value.strip(), fmt).time()
        except (ValueError, AttributeError):
            continue
    return None


def is_valid_name(name: Optional[str]) -> bool:
    return bool(name) and len(name.strip()) >= MIN_NAME_LENGTH


def is_valid_id_number(id_number: Optional[str]) -> bool:
    return bool(id_number) and len(id_number.strip()) >= MIN_ID_NUMBER_LENGTH


def is_valid_guest_count(guests, max_guests: Optional[int] = None) -> bool:
    upper = max_guests or settings.MAX_GUESTS
    if isinstance(guests, bool) or not isinstance(guests, int):
        return False
    return 1 <= guests <= upper


def is_valid_payment_method(method: Optional[str]) -> bool:
    return method in PAYMENT_METHODS


def _clean(value: Optional[str]) -> str:
    return (value or "").strip()


# ============== 预订请求 ==============

@dataclass
class BookingInput:
    """规范化后的预订请求"""
    room_id: int
    customer_name: str
    customer_email: str
    customer_phone: str
    id_number: str
    check_in: date
    check_out: date
    guests: int
    payment_method: PaymentMethod
    discount_code: Optional[str] = None
    total_amount: Optional[Decimal] = None


def validate_booking_request(data: BookingCreate,
                             today: date) -> Tuple[Optional[BookingInput], List[str]]:
    """
    规范化并校验预订请求
    返回 (规范化结果, 错误列表)；有任何错误时规范化结果为 None
    """
    name = _clean(data.customer_name)
    email = _clean(data.customer_email).lower()
    phone = _clean(data.customer_phone)
    id_number = _clean(data.id_number)
    payment_method = _clean(data.payment_method).lower()
    discount_code = _clean(data.discount_code) or None

    errors: List[str] = []

    if not data.room_id:
        errors.append("Room ID is required")
    if not is_valid_name(name):
        errors.append("Valid customer name is required (minimum 2 characters)")
    if not is_valid_email(email):
        errors.append("Valid email address is required")
    if not is_valid_phone(phone):
        errors.append("Valid phone number is required")
    if not is_valid_id_number(id_number):
        errors.append("Valid ID/Passport number is required")

    check_in = parse_date(data.check_in)
    check_out = parse_date(data.check_out)
    if check_in is None:
        errors.append("Valid check-in date is required")
    if check_out is None:
        errors.append("Valid check-out date is required")
    if not is_valid_guest_count(data.guests):
        errors.append(f"Number of guests must be between 1 and {settings.MAX_GUESTS}")
    if not is_valid_payment_method(payment_method):
        errors.append("Valid payment method is required (cash, card, or mpesa)")

    if check_in and check_out:
        if check_in < today:
            errors.append("Check-in date cannot be in the past")
        if check_out <= check_in:
            errors.append("Check-out date must be after check-in date")

    if errors:
        return None, errors

    return BookingInput(
        room_id=data.room_id,
        customer_name=name,
        customer_email=email,
        customer_phone=phone,
        id_number=id_number,
        check_in=check_in,
        check_out=check_out,
        guests=data.guests,
        payment_method=PaymentMethod(payment_method),
        discount_code=discount_code,
        total_amount=data.total_amount,
    ), errors


# ============== 点餐请求 ==============

@dataclass
class OrderLineInput:
    position: int                      # 从 1 开始，用于逐项报错
    meal_id: Optional[Union[int, str]]
    quantity: int
    price: Optional[Decimal]
    name: Optional[str]


@dataclass
class OrderInput:
    customer_name: str
    room_number: str
    order_type: OrderType
    lines: List[OrderLineInput] = field(default_factory=list)
    booking_id: Optional[int] = None
    special_instructions: Optional[str] = None


def validate_order_request(data: MealOrderCreate) -> Tuple[Optional[OrderInput], List[str]]:
    """校验点餐请求的结构性规则；价格解析依赖目录，在订单服务中完成"""
    name = _clean(data.customer_name)
    room_number = _clean(data.room_number)
    order_type = _clean(data.order_type)

    errors: List[str] = []

    if not is_valid_name(name):
        errors.append("Valid customer name is required")
    if not room_number:
        errors.append("Room number is required")
    if order_type not in ORDER_TYPES:
        errors.append("Valid order type is required (restaurant or room_service)")
    if not data.items:
        errors.append("At least one item is required")

    lines: List[OrderLineInput] = []
    for index, item in enumerate(data.items or [], start=1):
        if item.quantity is None or item.quantity < 1:
            errors.append(f"Item {index}: Invalid quantity")
            continue
        lines.append(OrderLineInput(
            position=index,
            meal_id=item.meal_id,
            quantity=item.quantity,
            price=item.price,
            name=_clean(item.name) or None,
        ))

    if errors:
        return None, errors

    return OrderInput(
        customer_name=name,
        room_number=room_number,
        order_type=OrderType(order_type),
        lines=lines,
        booking_id=data.booking_id,
        special_instructions=_clean(data.special_instructions) or None,
    ), errors


# ============== 水疗预约请求 ==============

@dataclass
class AppointmentInput:
    customer_name: str
    service_id: int
    appointment_date: date
    appointment_time: time
    booking_id: Optional[int] = None
    notes: Optional[str] = None


def validate_appointment_request(
        data: SpaAppointmentCreate) -> Tuple[Optional[AppointmentInput], List[str]]:
    name = _clean(data.customer_name)
    appointment_date = parse_date(data.appointment_date)
    appointment_time = parse_time(data.appointment_time)

    errors: List[str] = []
    if not name:
        errors.append("Customer name is required")
    if not data.service_id:
        errors.append("Service ID is required")
    if appointment_date is None:
        errors.append("Valid appointment date is required")
    if appointment_time is None:
        errors.append("Valid appointment time is required")

    if errors:
        return None, errors

    return AppointmentInput(
        customer_name=name,
        service_id=data.service_id,
        appointment_date=appointment_date,
        appointment_time=appointment_time,
        booking_id=data.booking_id,
        notes=_clean(data.notes) or None,
    ), errors
