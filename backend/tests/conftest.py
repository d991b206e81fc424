"""
Pytest 配置和共享 fixtures
"""
import pytest
from datetime import date
from decimal import Decimal
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from fastapi.testclient import TestClient

from app.database import Base, build_engine, get_db
from app.models import ontology  # noqa: F401
from app.models.ontology import Room, RoomStatus, Meal, SpaService, AdminUser
from app.security.auth import get_password_hash, create_access_token
from app.services.booking_service import BookingService
from app.routers.bookings import get_booking_service
from app.main import app

# 日期相关场景统一使用的“今天”
FIXED_TODAY = date(2024, 7, 1)


@pytest.fixture(scope="function")
def db_engine():
    """创建内存数据库引擎"""
    engine = build_engine("sqlite://", poolclass=StaticPool)
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture(scope="function")
def db_session(db_engine):
    """创建数据库会话"""
    SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)
    session = SessionLocal()
    yield session
    session.close()


@pytest.fixture
def today():
    return FIXED_TODAY


@pytest.fixture(scope="function")
def client(db_session):
    """创建测试客户端"""
    def override_get_db():
        yield db_session

    def override_booking_service():
        return BookingService(db_session, today=lambda: FIXED_TODAY)

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_booking_service] = override_booking_service
    yield TestClient(app)
    app.dependency_overrides.clear()


# ============== 认证相关 Fixtures ==============

@pytest.fixture
def admin_user(db_session):
    """创建后台管理员"""
    admin = AdminUser(
        username="admin",
        password_hash=get_password_hash("secret123"),
        is_active=True
    )
    db_session.add(admin)
    db_session.commit()
    db_session.refresh(admin)
    return admin


@pytest.fixture
def admin_headers(admin_user):
    """返回带认证的请求头"""
    token = create_access_token(admin_user.id, admin_user.username)
    return {"Authorization": f"Bearer {token}"}


# ============== 实体相关 Fixtures ==============

def make_room(db, room_number, room_type="deluxe", price="150.00",
              status=RoomStatus.AVAILABLE, max_occupancy=2):
    room = Room(
        room_number=room_number,
        room_type=room_type,
        price=Decimal(price),
        max_occupancy=max_occupancy,
        status=status,
        features=["King bed"],
    )
    db.add(room)
    db.commit()
    db.refresh(room)
    return room


@pytest.fixture
def sample_room(db_session):
    """每晚 150 的豪华房"""
    return make_room(db_session, "105")


@pytest.fixture
def other_room(db_session):
    """同价位的另一间房"""
    return make_room(db_session, "106")


@pytest.fixture
def standard_room(db_session):
    """每晚 100 的标准房"""
    return make_room(db_session, "101", room_type="standard", price="100.00")


@pytest.fixture
def maintenance_room(db_session):
    """维修中的房间"""
    return make_room(db_session, "999", status=RoomStatus.MAINTENANCE)


@pytest.fixture
def sample_meals(db_session):
    """目录餐品：一个可点，一个下架"""
    pasta = Meal(name="Truffle Pasta", category="dinner", description="Fresh pasta",
                 price=Decimal("24.00"), is_available=True)
    soup = Meal(name="Tomato Soup", category="lunch", description="Seasonal",
                price=Decimal("9.50"), is_available=True)
    retired = Meal(name="Retired Dish", category="dinner", price=Decimal("30.00"),
                   is_available=False)
    db_session.add_all([pasta, soup, retired])
    db_session.commit()
    for meal in (pasta, soup, retired):
        db_session.refresh(meal)
    return {"pasta": pasta, "soup": soup, "retired": retired}


@pytest.fixture
def sample_spa_services(db_session):
    """水疗服务：一个可约，一个停用"""
    massage = SpaService(name="Swedish Massage", category="massage", duration_minutes=60,
                         price=Decimal("90.00"), is_available=True)
    facial = SpaService(name="Signature Facial", category="facial", duration_minutes=45,
                        price=Decimal("85.00"), is_available=True)
    closed = SpaService(name="Mud Bath", category="body", duration_minutes=30,
                        price=Decimal("60.00"), is_available=False)
    db_session.add_all([massage, facial, closed])
    db_session.commit()
    for service in (massage, facial, closed):
        db_session.refresh(service)
    return {"massage": massage, "facial": facial, "closed": closed}
