"""
本体对象定义 (Ontology Objects)
前台业务实体：房间、预订、餐饮目录与订单、水疗服务与预约
"""
from datetime import datetime
from enum import Enum
from sqlalchemy import (
    Column, Integer, String, DateTime, Date, Time, JSON,
    ForeignKey, Text, Enum as SQLEnum, Boolean, Numeric, UniqueConstraint
)
from sqlalchemy.orm import relationship
from app.database import Base


# ============== 枚举定义 ==============

class RoomStatus(str, Enum):
    """房间状态枚举（缓存提示，真实占用以预订为准）"""
    AVAILABLE = "available"
    OCCUPIED = "occupied"
    MAINTENANCE = "maintenance"


class BookingStatus(str, Enum):
    """预订状态枚举"""
    CONFIRMED = "confirmed"
    CHECKED_IN = "checked_in"
    CHECKED_OUT = "checked_out"
    CANCELLED = "cancelled"


# 参与冲突检查的预订状态
ACTIVE_BOOKING_STATUSES = (BookingStatus.CONFIRMED, BookingStatus.CHECKED_IN)


class PaymentMethod(str, Enum):
    """支付方式（只记录，不扣款）"""
    CASH = "cash"
    CARD = "card"
    MPESA = "mpesa"


class OrderType(str, Enum):
    """点餐类型"""
    RESTAURANT = "restaurant"
    ROOM_SERVICE = "room_service"


class OrderStatus(str, Enum):
    """订单状态"""
    PENDING = "pending"
    PREPARING = "preparing"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class AppointmentStatus(str, Enum):
    """水疗预约状态"""
    SCHEDULED = "scheduled"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


# ============== 本体对象定义 ==============

class Room(Base):
    """
    房间对象
    status 仅对 maintenance 具有权威性
    """
    __tablename__ = "rooms"

    id = Column(Integer, primary_key=True, index=True)
    room_number = Column(String(10), unique=True, nullable=False)  # 房间号
    room_type = Column(String(50), nullable=False, index=True)     # 房型
    price = Column(Numeric(10, 2), nullable=False)                 # 每晚价格
    max_occupancy = Column(Integer, default=2)                     # 最大入住人数
    status = Column(SQLEnum(RoomStatus), default=RoomStatus.AVAILABLE, nullable=False)
    features = Column(JSON, default=list)                          # 特征列表
    image_url = Column(String(255))                                # 图片
    created_at = Column(DateTime, default=datetime.utcnow)

    # 链接
    bookings = relationship("Booking", back_populates="room")


class Booking(Base):
    """
    预订对象 - 预订阶段的聚合根
    同一房间的有效预订在 [check_in, check_out) 上不得重叠
    """
    __tablename__ = "bookings"

    id = Column(Integer, primary_key=True, index=True)
    booking_reference = Column(String(20), unique=True, nullable=False)  # 预订号
    room_id = Column(Integer, ForeignKey("rooms.id"), nullable=False, index=True)
    customer_name = Column(String(100), nullable=False)
    customer_email = Column(String(100), nullable=False, index=True)     # 小写存储
    customer_phone = Column(String(20), nullable=False)
    id_number = Column(String(50), nullable=False, index=True)           # 证件号码
    check_in = Column(Date, nullable=False)
    check_out = Column(Date, nullable=False)
    guests = Column(Integer, default=1)
    total_amount = Column(Numeric(10, 2), nullable=False)
    payment_method = Column(SQLEnum(PaymentMethod), nullable=False)
    discount_code = Column(String(50))
    special_requests = Column(Text)
    status = Column(SQLEnum(BookingStatus), default=BookingStatus.CONFIRMED, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)

    # 链接
    room = relationship("Room", back_populates="bookings")
    meal_orders = relationship("MealOrder", back_populates="booking")
    spa_appointments = relationship("SpaAppointment", back_populates="booking")


class Meal(Base):
    """餐饮目录项（由目录管理维护，核心只读）"""
    __tablename__ = "meals"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False)
    category = Column(String(50), nullable=False, index=True)
    description = Column(Text)
    price = Column(Numeric(10, 2), nullable=False)
    is_available = Column(Boolean, default=True)


class MealOrder(Base):
    """
    点餐订单 - 与订单行一起原子创建
    total_amount 由服务端计算，不信任客户端
    """
    __tablename__ = "meal_orders"

    id = Column(Integer, primary_key=True, index=True)
    booking_id = Column(Integer, ForeignKey("bookings.id"), nullable=True)
    customer_name = Column(String(100), nullable=False)
    room_number = Column(String(20), nullable=False)     # 房间号或位置标签
    order_type = Column(SQLEnum(OrderType), nullable=False)
    total_amount = Column(Numeric(10, 2), nullable=False)
    special_instructions = Column(Text)
    status = Column(SQLEnum(OrderStatus), default=OrderStatus.PENDING, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)

    # 链接
    booking = relationship("Booking", back_populates="meal_orders")
    items = relationship("OrderItem", back_populates="order", order_by="OrderItem.id")


class OrderItem(Base):
    """订单行：引用目录项，或是目录外的临时项（酒吧/咖啡特供）"""
    __tablename__ = "order_items"

    id = Column(Integer, primary_key=True, index=True)
    order_id = Column(Integer, ForeignKey("meal_orders.id"), nullable=False, index=True)
    meal_id = Column(Integer, ForeignKey("meals.id"), nullable=True)
    item_name = Column(String(100), nullable=False)
    quantity = Column(Integer, nullable=False)
    price = Column(Numeric(10, 2), nullable=False)       # 单价

    # 链接
    order = relationship("MealOrder", back_populates="items")
    meal = relationship("Meal")


class SpaService(Base):
    """水疗服务目录项"""
    __tablename__ = "spa_services"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False)
    category = Column(String(50))
    duration_minutes = Column(Integer, default=60)
    price = Column(Numeric(10, 2), nullable=False)
    is_available = Column(Boolean, default=True)

    # 链接
    appointments = relationship("SpaAppointment", back_populates="service")


class SpaHours(Base):
    """水疗营业时间（每周一行，is_open=False 表示当天休息）"""
    __tablename__ = "spa_hours"

    id = Column(Integer, primary_key=True, index=True)
    day_of_week = Column(String(10), unique=True, nullable=False)  # Monday .. Sunday
    is_open = Column(Boolean, default=True)
    open_time = Column(Time)
    close_time = Column(Time)


class SpaAppointment(Base):
    """
    水疗预约
    同一 (服务, 日期, 时间) 至多一个 scheduled 预约
    """
    __tablename__ = "spa_appointments"

    id = Column(Integer, primary_key=True, index=True)
    booking_id = Column(Integer, ForeignKey("bookings.id"), nullable=True)
    customer_name = Column(String(100), nullable=False)
    service_id = Column(Integer, ForeignKey("spa_services.id"), nullable=False)
    appointment_date = Column(Date, nullable=False)
    appointment_time = Column(Time, nullable=False)
    notes = Column(Text)
    status = Column(SQLEnum(AppointmentStatus), default=AppointmentStatus.SCHEDULED, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)

    # 链接
    booking = relationship("Booking", back_populates="spa_appointments")
    service = relationship("SpaService", back_populates="appointments")


class AdminUser(Base):
    """后台管理员（仅用于仪表盘访问控制）"""
    __tablename__ = "admin_users"
    __table_args__ = (UniqueConstraint("username", name="uq_admin_users_username"),)

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String(50), nullable=False)
    password_hash = Column(String(255), nullable=False)
    is_active = Column(Boolean, default=True)
    created_at = Column(DateTime, default=datetime.utcnow)


class GuestStayLock(Base):
    """
    客人行程锁行
    同一客人（邮箱或证件号）同一行程的并发预订在此行上串行化
    """
    __tablename__ = "guest_stay_locks"

    lock_key = Column(String(255), primary_key=True)
    created_at = Column(DateTime, default=datetime.utcnow)
