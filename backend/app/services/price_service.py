"""
价格服务
晚数、房费、折扣与订单合计的计算；金额一律 Decimal，两位小数四舍五入
"""
import math
from abc import ABC, abstractmethod
from datetime import date
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, Optional, Tuple, Union

from app.config import settings

CENTS = Decimal("0.01")

Number = Union[Decimal, int, float, str]


def to_money(value: Number) -> Decimal:
    """转为两位小数金额（标准四舍五入）"""
    if not isinstance(value, Decimal):
        value = Decimal(str(value))
    return value.quantize(CENTS, rounding=ROUND_HALF_UP)


def nights(check_in: date, check_out: date) -> int:
    """入住晚数，向上取整；校验层保证 check_out > check_in"""
    return math.ceil((check_out - check_in).days)


class DiscountPolicy(ABC):
    """折扣策略，替换为真实的折扣码查询时无需改动价格计算"""

    @abstractmethod
    def apply(self, amount: Decimal, code: Optional[str]) -> Decimal:
        pass


class FlatRateDiscountPolicy(DiscountPolicy):
    """
    任意非空折扣码一律按固定比例减免
    目前不查询折扣码注册表
    """

    def __init__(self, rate: Optional[float] = None):
        self.rate = Decimal(str(settings.DISCOUNT_RATE if rate is None else rate))

    def apply(self, amount: Decimal, code: Optional[str]) -> Decimal:
        if not code or not code.strip():
            return amount
        return amount * (Decimal("1") - self.rate)


class PriceService:
    """价格计算"""

    def __init__(self, discount_policy: Optional[DiscountPolicy] = None):
        self.discount_policy = discount_policy or FlatRateDiscountPolicy()

    def base_total(self, nightly_price: Number, night_count: int,
                   explicit_total: Optional[Number] = None) -> Decimal:
        """
        调用方给出正数预先报价时以报价为基数，否则为 房价 × 晚数
        报价为 0 或负数视同未提供
        """
        if explicit_total is not None and Decimal(str(explicit_total)) > 0:
            return Decimal(str(explicit_total))
        return Decimal(str(nightly_price)) * night_count

    def final_total(self, base: Number, discount_code: Optional[str] = None) -> Decimal:
        return to_money(self.discount_policy.apply(Decimal(str(base)), discount_code))

    def quote_stay(self, nightly_price: Number, check_in: date, check_out: date,
                   discount_code: Optional[str] = None,
                   explicit_total: Optional[Number] = None) -> Tuple[Decimal, int]:
        """返回 (最终金额, 晚数)"""
        night_count = nights(check_in, check_out)
        base = self.base_total(nightly_price, night_count, explicit_total)
        return self.final_total(base, discount_code), night_count

    @staticmethod
    def line_total(unit_price: Number, quantity: int) -> Decimal:
        return to_money(Decimal(str(unit_price)) * quantity)

    @classmethod
    def order_total(cls, lines: Iterable[Tuple[Number, int]]) -> Decimal:
        """lines 为 (单价, 数量) 序列"""
        total = Decimal("0")
        for unit_price, quantity in lines:
            total += cls.line_total(unit_price, quantity)
        return to_money(total)
