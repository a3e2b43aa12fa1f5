"""Canned database lookups used by the chat assistant.

Each handler returns reply text. Database failures are logged and mapped to a
fixed apology so the chat channel is never left empty.
"""
from decimal import Decimal
from typing import Any, Callable, Dict, List, Tuple

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from .config import Config
from .postprocess import format_rows
from ..data.models import Product, ProductCategory, PurchaseOrder, Sale, Supplier
from ..schemas.io_models import ProductFilter
from ..utils.logger import get_logger

logger = get_logger("chat_queries")

Predicate = Callable[[Any, Any], Any]

# Recognised filter field -> (column, predicate builder). Values are always bound
# parameters; nothing from the message is spliced into SQL text.
PRODUCT_FILTERS: Dict[str, Tuple[Any, Predicate]] = {
    "product_name": (Product.product_name, lambda col, v: col.ilike(f"%{v}%")),
    "min_price": (Product.unit_price, lambda col, v: col >= Decimal(str(v))),
    "max_price": (Product.unit_price, lambda col, v: col <= Decimal(str(v))),
    "product_category": (ProductCategory.category_name, lambda col, v: col.ilike(f"%{v}%")),
}

PRODUCT_SEARCH_COLUMNS = (
    Product.product_id,
    ProductCategory.category_name,
    Product.product_name,
    Product.description,
    Product.unit_price,
    Product.current_stock,
)


def build_product_predicates(product_filter: ProductFilter) -> List[Any]:
    predicates = []
    for field, value in product_filter.model_dump().items():
        if value is None or field not in PRODUCT_FILTERS:
            continue
        column, build = PRODUCT_FILTERS[field]
        predicates.append(build(column, value))
    return predicates


def product_search_statement(product_filter: ProductFilter, limit: int = None):
    stmt = (
        select(*PRODUCT_SEARCH_COLUMNS)
        .select_from(Product)
        .outerjoin(ProductCategory, Product.category_id == ProductCategory.category_id)
    )
    predicates = build_product_predicates(product_filter)
    if predicates:
        stmt = stmt.where(*predicates)
    return stmt.order_by(Product.product_name).limit(limit or Config.CHAT_RESULT_LIMIT)


def search_products(db: Session, product_filter: ProductFilter, limit: int = None) -> str:
    try:
        rows = db.execute(product_search_statement(product_filter, limit)).mappings().all()
    except SQLAlchemyError:
        logger.exception("Product search failed for filter %s", product_filter.model_dump())
        return "Sorry, I encountered an error while searching for products."
    return format_rows(rows)


def count_products(db: Session) -> str:
    try:
        count = db.execute(select(func.count()).select_from(Product)).scalar_one()
    except SQLAlchemyError:
        logger.exception("Product count query failed")
        return "Sorry, I couldn't retrieve the product count right now."
    return f"Total number of unique products in stock: {count}"


def list_product_names(db: Session) -> str:
    try:
        rows = db.execute(select(Product.product_name).order_by(Product.product_name)).mappings().all()
    except SQLAlchemyError:
        logger.exception("Product name listing failed")
        return "Sorry, I couldn't retrieve the product names right now."
    return format_rows(rows, names_only=True)


def count_suppliers(db: Session) -> str:
    try:
        count = db.execute(select(func.count()).select_from(Supplier)).scalar_one()
    except SQLAlchemyError:
        logger.exception("Supplier count query failed")
        return "Sorry, I couldn't retrieve the supplier count right now."
    return f"We currently work with {count} suppliers."


def purchase_order_status(db: Session, order_id: int = None) -> str:
    if order_id is None:
        return "Please provide the ID of the purchase order you want the status for."
    try:
        row = db.execute(
            select(PurchaseOrder.order_status, Product.product_name)
            .outerjoin(Product, PurchaseOrder.product_id == Product.product_id)
            .where(PurchaseOrder.order_id == order_id)
        ).first()
    except SQLAlchemyError:
        logger.exception("Purchase order status query failed for %s", order_id)
        return "Sorry, I couldn't retrieve that purchase order status."
    if row is None:
        return f"Purchase order with ID {order_id} not found."
    status = getattr(row.order_status, "value", row.order_status)
    return f"The status for PO {order_id} (Product: {row.product_name or 'N/A'}) is: {status}."


def total_sales_amount(db: Session) -> str:
    try:
        total = db.execute(
            select(func.coalesce(func.sum(Sale.total_amount), 0)).where(Sale.payment_status == "completed")
        ).scalar_one()
    except SQLAlchemyError:
        logger.exception("Total sales query failed")
        return "Sorry, I couldn't retrieve the total sales amount."
    return f"The total sales amount is ${Decimal(str(total)):.2f}."
