"""
Pydantic 模式定义
用于 API 请求/响应验证

请求模型刻意保持宽松（日期等以字符串接收），
字段规则由 app.services.validation 统一校验并一次性返回全部错误
"""
from datetime import datetime, date, time
from decimal import Decimal
from typing import Annotated, Optional, List, Union
from pydantic import BaseModel, Field, ConfigDict, PlainSerializer
from app.models.ontology import (
    RoomStatus, BookingStatus, PaymentMethod, OrderType, OrderStatus, AppointmentStatus
)


def _money_to_float(value: Decimal) -> float:
    return float(Decimal(value).quantize(Decimal("0.01")))


# 金额统一以两位小数的数字输出
Money = Annotated[Decimal, PlainSerializer(_money_to_float, return_type=float, when_used="json")]


# ============== 房间 Schemas ==============

class RoomResponse(BaseModel):
    id: int
    room_number: str
    room_type: str
    price: Money
    max_occupancy: int
    status: RoomStatus
    features: List[str] = []
    image_url: Optional[str] = None
    current_status: Optional[RoomStatus] = None
    active_bookings: Optional[int] = None
    model_config = ConfigDict(from_attributes=True)


# ============== 预订 Schemas ==============

class BookingCreate(BaseModel):
    room_id: Optional[int] = None
    customer_name: Optional[str] = None
    customer_email: Optional[str] = None
    customer_phone: Optional[str] = None
    id_number: Optional[str] = None
    check_in: Optional[str] = None
    check_out: Optional[str] = None
    guests: Optional[int] = None
    room_type: Optional[str] = None
    payment_method: Optional[str] = None
    discount_code: Optional[str] = None
    total_amount: Optional[Decimal] = Field(None, ge=0)


class BookingCreatedResponse(BaseModel):
    success: bool = True
    message: str = "Booking created successfully"
    booking_id: int
    booking_reference: str
    total_amount: Money
    nights: int
    check_in: date
    check_out: date


class BookingResponse(BaseModel):
    id: int
    booking_reference: str
    room_id: int
    room_number: Optional[str] = None
    room_type: Optional[str] = None
    room_price: Optional[Money] = None
    customer_name: str
    customer_email: str
    customer_phone: str
    id_number: str
    check_in: date
    check_out: date
    guests: int
    total_amount: Money
    payment_method: PaymentMethod
    discount_code: Optional[str] = None
    special_requests: Optional[str] = None
    status: BookingStatus
    created_at: datetime
    model_config = ConfigDict(from_attributes=True)


class BookingDetailResponse(BaseModel):
    success: bool = True
    booking: BookingResponse


# ============== 餐饮 Schemas ==============

class MealResponse(BaseModel):
    id: int
    name: str
    category: str
    description: Optional[str] = None
    price: Money
    is_available: bool
    model_config = ConfigDict(from_attributes=True)


class OrderItemRequest(BaseModel):
    # 目录外的酒吧/咖啡项目可能携带非数字编号
    meal_id: Optional[Union[int, str]] = None
    quantity: Optional[int] = None
    price: Optional[Decimal] = None
    name: Optional[str] = None


class MealOrderCreate(BaseModel):
    booking_id: Optional[int] = None
    customer_name: Optional[str] = None
    room_number: Optional[str] = None
    order_type: Optional[str] = None
    items: Optional[List[OrderItemRequest]] = None
    special_instructions: Optional[str] = None


class MealOrderCreatedResponse(BaseModel):
    success: bool = True
    message: str = "Meal order created successfully"
    order_id: int
    total_amount: Money
    items_count: int
    order_type: OrderType
    status: OrderStatus = OrderStatus.PENDING


class OrderItemResponse(BaseModel):
    id: int
    meal_id: Optional[int] = None
    item_name: str
    quantity: int
    price: Money
    model_config = ConfigDict(from_attributes=True)


class MealOrderResponse(BaseModel):
    id: int
    booking_id: Optional[int] = None
    customer_name: str
    room_number: str
    order_type: OrderType
    total_amount: Money
    special_instructions: Optional[str] = None
    status: OrderStatus
    created_at: datetime
    items: List[OrderItemResponse] = []
    model_config = ConfigDict(from_attributes=True)


# ============== 水疗 Schemas ==============

class SpaServiceResponse(BaseModel):
    id: int
    name: str
    category: Optional[str] = None
    duration_minutes: Optional[int] = None
    price: Money
    is_available: bool
    model_config = ConfigDict(from_attributes=True)


class SpaHoursResponse(BaseModel):
    day_of_week: str
    is_open: bool
    open_time: Optional[time] = None
    close_time: Optional[time] = None
    model_config = ConfigDict(from_attributes=True)


class SpaAppointmentCreate(BaseModel):
    booking_id: Optional[int] = None
    customer_name: Optional[str] = None
    service_id: Optional[int] = None
    appointment_date: Optional[str] = None
    appointment_time: Optional[str] = None
    notes: Optional[str] = None


class SpaAppointmentCreatedResponse(BaseModel):
    success: bool = True
    message: str = "Spa appointment created successfully"
    appointment_id: int


class SpaAppointmentResponse(BaseModel):
    id: int
    booking_id: Optional[int] = None
    customer_name: str
    service_id: int
    appointment_date: date
    appointment_time: time
    notes: Optional[str] = None
    status: AppointmentStatus
    model_config = ConfigDict(from_attributes=True)


# ============== 认证 / 仪表盘 Schemas ==============

class LoginRequest(BaseModel):
    username: str
    password: str


class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"


class DashboardStats(BaseModel):
    available_rooms: int
    occupied_rooms: int
    confirmed_bookings: int
    checked_in_guests: int
    pending_orders: int
    spa_appointments: int


class DashboardResponse(BaseModel):
    success: bool = True
    data: DashboardStats
