from __future__ import annotations

from datetime import datetime, timezone
from typing import Iterable, List, Optional
from zoneinfo import ZoneInfo

from sqlalchemy.orm import Session

from estoque.core.config import settings
from estoque.core.inventory_rules import is_low_stock
from estoque.models.category import Category
from estoque.models.movement import Movement
from estoque.models.product import Product


def start_of_day(now: Optional[datetime] = None, tz_name: Optional[str] = None) -> datetime:
    """
    Local midnight of the day containing ``now``, in the business timezone,
    returned in UTC to compare against stored timestamps.
    """
    local = (now or datetime.now(timezone.utc)).astimezone(ZoneInfo(tz_name or settings.business_timezone))
    midnight = local.replace(hour=0, minute=0, second=0, microsecond=0)
    return midnight.astimezone(timezone.utc)


def low_stock_products(products: Iterable[Product]) -> List[Product]:
    return [p for p in products if is_low_stock(p.stock, p.min_stock)]


def summarize_stock(
    products: List[Product],
    movements_today: int,
    categories: int,
    low_stock_limit: Optional[int] = None,
) -> dict:
    """
    Build the dashboard figures from already-fetched active products.
    Only the first ``low_stock_limit`` low-stock products are listed but the
    count covers all of them.
    """
    if low_stock_limit is None:
        low_stock_limit = settings.dashboard_low_stock_limit
    low = low_stock_products(products)
    return {
        "total_products": len(products),
        "low_stock_count": len(low),
        "movements_today": movements_today,
        "categories": categories,
        "low_stock_products": low[:low_stock_limit],
    }


def get_dashboard(db: Session, now: Optional[datetime] = None) -> dict:
    products = db.query(Product).filter(Product.active.is_(True)).order_by(Product.name.asc()).all()
    movements_today = db.query(Movement.id).filter(Movement.created_at >= start_of_day(now)).count()
    categories = db.query(Category.id).count()
    return summarize_stock(products, movements_today, categories)
