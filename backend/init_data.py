"""
初始化数据脚本
创建：房间、餐品菜单、水疗服务与营业时间、后台管理员

可重复执行，已存在的记录按唯一键跳过
默认管理员账号取自 ADMIN_USERNAME / ADMIN_PASSWORD
"""
import sys
sys.path.insert(0, '.')

from datetime import time
from decimal import Decimal
from app.config import settings
from app.database import SessionLocal, init_db
from app.models.ontology import Room, RoomStatus, Meal, SpaService, SpaHours, AdminUser
from app.security.auth import get_password_hash


ROOM_DEFS = [
    # (房间号, 房型, 价格, 最大入住, 特征)
    ('101', 'standard', '120.00', 2, ['Queen bed', 'City view', 'Free WiFi']),
    ('102', 'standard', '120.00', 2, ['Queen bed', 'City view', 'Free WiFi']),
    ('103', 'standard', '130.00', 3, ['Two double beds', 'Free WiFi']),
    ('201', 'deluxe', '200.00', 2, ['King bed', 'Garden view', 'Mini bar']),
    ('202', 'deluxe', '200.00', 2, ['King bed', 'Garden view', 'Mini bar']),
    ('203', 'deluxe', '220.00', 3, ['King bed', 'Balcony', 'Mini bar']),
    ('301', 'suite', '350.00', 4, ['Living room', 'Ocean view', 'Jacuzzi']),
    ('302', 'suite', '380.00', 4, ['Living room', 'Ocean view', 'Jacuzzi', 'Butler service']),
    ('401', 'presidential', '800.00', 6, ['Two bedrooms', 'Private terrace', 'Butler service']),
]

MEAL_DEFS = [
    # (名称, 分类, 说明, 价格)
    ('Continental Breakfast', 'breakfast', 'Pastries, fruits, yogurt, coffee', '18.00'),
    ('Eggs Benedict', 'breakfast', 'Poached eggs, hollandaise, English muffin', '16.00'),
    ('Pancake Stack', 'breakfast', 'Buttermilk pancakes, syrup, butter', '13.00'),
    ('Caesar Salad', 'lunch', 'Romaine, parmesan, croutons, dressing', '14.00'),
    ('Club Sandwich', 'lunch', 'Turkey, bacon, lettuce, tomato', '16.00'),
    ('Grilled Salmon', 'dinner', 'Atlantic salmon, seasonal vegetables', '32.00'),
    ('Beef Tenderloin', 'dinner', 'Prime beef, truffle mash, red wine jus', '45.00'),
    ('Tiramisu', 'dessert', 'Classic Italian dessert', '10.00'),
    ('Cappuccino', 'beverage', 'Espresso, steamed milk, foam', '5.00'),
]

SPA_DEFS = [
    # (名称, 分类, 时长分钟, 价格)
    ('Swedish Massage', 'massage', 60, '90.00'),
    ('Deep Tissue Massage', 'massage', 90, '130.00'),
    ('Hot Stone Therapy', 'massage', 75, '120.00'),
    ('Signature Facial', 'facial', 60, '85.00'),
    ('Body Scrub', 'body', 45, '70.00'),
]


SPA_HOURS_DEFS = [
    # (星期, 开门, 关门)；None 表示休息
    ('Monday', time(9, 0), time(20, 0)),
    ('Tuesday', time(9, 0), time(20, 0)),
    ('Wednesday', time(9, 0), time(20, 0)),
    ('Thursday', time(9, 0), time(20, 0)),
    ('Friday', time(9, 0), time(21, 0)),
    ('Saturday', time(10, 0), time(21, 0)),
    ('Sunday', None, None),
]


def init_rooms(db) -> int:
    """初始化房间"""
    created = 0
    for number, room_type, price, max_occupancy, features in ROOM_DEFS:
        if db.query(Room).filter(Room.room_number == number).first():
            continue
        db.add(Room(
            room_number=number, room_type=room_type, price=Decimal(price),
            max_occupancy=max_occupancy, status=RoomStatus.AVAILABLE,
            features=features,
        ))
        created += 1
    db.commit()
    return created


def init_meals(db) -> int:
    """初始化餐品菜单"""
    created = 0
    for name, category, description, price in MEAL_DEFS:
        if db.query(Meal).filter(Meal.name == name).first():
            continue
        db.add(Meal(
            name=name, category=category, description=description,
            price=Decimal(price), is_available=True,
        ))
        created += 1
    db.commit()
    return created


def init_spa_services(db) -> int:
    """初始化水疗服务"""
    created = 0
    for name, category, duration, price in SPA_DEFS:
        if db.query(SpaService).filter(SpaService.name == name).first():
            continue
        db.add(SpaService(
            name=name, category=category, duration_minutes=duration,
            price=Decimal(price), is_available=True,
        ))
        created += 1
    db.commit()
    return created


def init_spa_hours(db) -> int:
    """初始化水疗营业时间"""
    created = 0
    for day, open_time, close_time in SPA_HOURS_DEFS:
        if db.query(SpaHours).filter(SpaHours.day_of_week == day).first():
            continue
        db.add(SpaHours(
            day_of_week=day, is_open=open_time is not None,
            open_time=open_time, close_time=close_time,
        ))
        created += 1
    db.commit()
    return created


def init_admin(db, username: str = None, password: str = None) -> bool:
    """初始化后台管理员，已存在返回 False"""
    username = username or settings.ADMIN_USERNAME
    password = password or settings.ADMIN_PASSWORD
    if db.query(AdminUser).filter(AdminUser.username == username).first():
        return False
    db.add(AdminUser(username=username, password_hash=get_password_hash(password), is_active=True))
    db.commit()
    return True


def main():
    """主函数"""
    print("=" * 50)
    print(f"{settings.APP_NAME} 初始化数据")
    print("=" * 50)

    init_db()
    print("数据库表创建完成")

    db = SessionLocal()
    try:
        print(f"房间: 新增 {init_rooms(db)}")
        print(f"餐品: 新增 {init_meals(db)}")
        print(f"水疗服务: 新增 {init_spa_services(db)}")
        print(f"水疗营业时间: 新增 {init_spa_hours(db)}")
        if init_admin(db):
            print(f"管理员已创建: {settings.ADMIN_USERNAME}")
        print("=" * 50)
        print("初始化完成！")
    finally:
        db.close()


if __name__ == '__main__':
    main()
