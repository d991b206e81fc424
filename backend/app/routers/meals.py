"""
餐饮路由
菜单目录与点餐订单
"""
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy.orm import Session
from app.database import get_db
from app.models.ontology import OrderStatus, OrderType
from app.models.schemas import (
    MealResponse, MealOrderCreate, MealOrderCreatedResponse, MealOrderResponse
)
from app.services.catalog_service import CatalogService
from app.services.order_service import OrderService

router = APIRouter(prefix="/api", tags=["餐饮"])


# ============== 菜单 ==============

@router.get("/meals", response_model=List[MealResponse])
def list_meals(category: Optional[str] = None, db: Session = Depends(get_db)):
    """获取可点餐品，可按分类过滤"""
    return CatalogService(db).get_meals(category)


@router.get("/meals/category/{category}", response_model=List[MealResponse])
def list_meals_by_category(category: str, db: Session = Depends(get_db)):
    """按分类获取餐品"""
    return CatalogService(db).get_meals(category)


# ============== 订单 ==============

@router.post("/meal-orders", response_model=MealOrderCreatedResponse, status_code=status.HTTP_201_CREATED)
def create_meal_order(data: MealOrderCreate, db: Session = Depends(get_db)):
    """创建点餐订单"""
    result = OrderService(db).create_order(data)
    return MealOrderCreatedResponse(
        order_id=result.order_id,
        total_amount=result.total_amount,
        items_count=result.items_count,
        order_type=result.order_type,
        status=result.status,
    )


@router.get("/orders", response_model=List[MealOrderResponse])
def list_orders(
    status: Optional[OrderStatus] = None,
    customer_name: Optional[str] = None,
    order_type: Optional[OrderType] = None,
    limit: int = Query(100, ge=1, le=100),
    db: Session = Depends(get_db)
):
    """获取订单列表"""
    return OrderService(db).list_orders(
        status=status, customer_name=customer_name, order_type=order_type, limit=limit
    )


@router.get("/orders/{order_id}", response_model=MealOrderResponse)
def get_order(order_id: int, db: Session = Depends(get_db)):
    """获取订单详情"""
    order = OrderService(db).get_order(order_id)
    if not order:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Order not found")
    return order
