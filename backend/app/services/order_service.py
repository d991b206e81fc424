"""
点餐服务 - 本体操作层
管理 MealOrder 及其订单行，订单与全部订单行在同一工作单元内写入

订单行价格来源：
- CatalogLine: 引用可用的目录餐品，以目录价为准（忽略客户端价格）
- AdHocLine:   目录外项目（酒吧/咖啡特供），必须由客户端给出正价
"""
import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import List, Optional, Union

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from app.database import unit_of_work
from app.models.ontology import Meal, MealOrder, OrderItem, OrderStatus, OrderType
from app.models.schemas import MealOrderCreate
from app.services.errors import ServiceError, ValidationFailure, PersistenceFailure
from app.services.price_service import PriceService, to_money
from app.services.validation import OrderInput, OrderLineInput, validate_order_request

logger = logging.getLogger(__name__)

CUSTOM_ITEM_NAME = "Custom Item"


@dataclass(frozen=True)
class CatalogLine:
    meal_id: int
    name: str
    unit_price: Decimal
    quantity: int


@dataclass(frozen=True)
class AdHocLine:
    name: str
    unit_price: Decimal
    quantity: int


ResolvedLine = Union[CatalogLine, AdHocLine]


@dataclass
class OrderResult:
    order_id: int
    total_amount: Decimal
    items_count: int
    order_type: OrderType
    status: OrderStatus


def catalog_id(meal_id) -> Optional[int]:
    """只有数字编号才可能是目录餐品"""
    if isinstance(meal_id, bool):
        return None
    if isinstance(meal_id, int):
        return meal_id
    if isinstance(meal_id, str) and meal_id.strip().isdigit():
        return int(meal_id.strip())
    return None


class OrderService:
    """点餐服务"""

    def __init__(self, db: Session, price_service: Optional[PriceService] = None):
        self.db = db
        self.price_service = price_service or PriceService()

    def create_order(self, data: MealOrderCreate) -> OrderResult:
        """创建点餐订单"""
        order_input, errors = validate_order_request(data)
        if errors:
            raise ValidationFailure(errors)

        try:
            with unit_of_work(self.db):
                lines = self.resolve_lines(order_input.lines)
                total_amount = self.price_service.order_total(
                    (line.unit_price, line.quantity) for line in lines
                )
                order = self._insert_order(order_input, lines, total_amount)
        except ServiceError:
            raise
        except SQLAlchemyError as e:
            logger.error(f"Meal order transaction failed: {e}")
            raise PersistenceFailure("Failed to create meal order", detail=str(e)) from e

        logger.info(f"Meal order {order.id} created: {len(lines)} items, total={total_amount}")
        return OrderResult(
            order_id=order.id,
            total_amount=total_amount,
            items_count=len(lines),
            order_type=order_input.order_type,
            status=OrderStatus.PENDING,
        )

    def resolve_lines(self, lines: List[OrderLineInput]) -> List[ResolvedLine]:
        """逐行确定价格（按分四舍五入后再参与合计）；任何一行失败则整单失败并逐项报错"""
        resolved: List[ResolvedLine] = []
        errors: List[str] = []

        for line in lines:
            meal = self._available_meal(line.meal_id)
            if meal is not None:
                resolved.append(CatalogLine(
                    meal_id=meal.id,
                    name=meal.name,
                    unit_price=to_money(meal.price),
                    quantity=line.quantity,
                ))
                continue

            unit_price = to_money(line.price) if line.price is not None else None
            if unit_price is None or unit_price <= 0:
                label = line.meal_id or line.name or "unknown"
                errors.append(f"Item {line.position}: Invalid price for item {label}")
                continue
            resolved.append(AdHocLine(
                name=line.name or CUSTOM_ITEM_NAME,
                unit_price=unit_price,
                quantity=line.quantity,
            ))

        if errors:
            raise ValidationFailure(errors)
        return resolved

    def _available_meal(self, meal_id) -> Optional[Meal]:
        ref = catalog_id(meal_id)
        if ref is None:
            return None
        return self.db.query(Meal).filter(
            Meal.id == ref,
            Meal.is_available == True
        ).first()

    def _insert_order(self, order_input: OrderInput, lines: List[ResolvedLine],
                      total_amount: Decimal) -> MealOrder:
        order = MealOrder(
            booking_id=order_input.booking_id,
            customer_name=order_input.customer_name,
            room_number=order_input.room_number,
            order_type=order_input.order_type,
            total_amount=total_amount,
            special_instructions=order_input.special_instructions,
            status=OrderStatus.PENDING,
        )
        self.db.add(order)
        self.db.flush()

        for line in lines:
            self.db.add(OrderItem(
                order_id=order.id,
                meal_id=line.meal_id if isinstance(line, CatalogLine) else None,
                item_name=line.name,
                quantity=line.quantity,
                price=line.unit_price,
            ))
        self.db.flush()
        return order

    # ============== 查询 ==============

    def get_order(self, order_id: int) -> Optional[MealOrder]:
        """获取订单及订单行"""
        return self.db.query(MealOrder).options(
            selectinload(MealOrder.items)
        ).filter(MealOrder.id == order_id).first()

    def list_orders(self, status: Optional[OrderStatus] = None,
                    customer_name: Optional[str] = None,
                    order_type: Optional[OrderType] = None,
                    limit: int = 100) -> List[MealOrder]:
        """获取订单列表（最新在前）"""
        query = self.db.query(MealOrder).options(selectinload(MealOrder.items))

        if status:
            query = query.filter(MealOrder.status == status)
        if customer_name:
            query = query.filter(MealOrder.customer_name.contains(customer_name))
        if order_type:
            query = query.filter(MealOrder.order_type == order_type)

        return query.order_by(MealOrder.created_at.desc(), MealOrder.id.desc()).limit(limit).all()
