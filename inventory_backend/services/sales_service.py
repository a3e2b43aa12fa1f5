"""Sale creation and the low-stock alert bookkeeping that follows it.

A sale locks every product it touches (ascending id, so two sales never wait
on each other in opposite order), checks stock, writes the header and line
items, decrements stock and re-evaluates each product's low-stock alert, all
inside one transaction.
"""
from collections import Counter
from decimal import Decimal
from typing import Any, Dict, List, Optional

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from .common import conflict_from_integrity, to_money
from ..app.config import Config
from ..data.database import lock_row, transaction
from ..data.models import LOW_STOCK, InventoryAlert, Product, Return, Sale, SalesItem, utcnow
from ..schemas.order_models import SaleCreate, SaleUpdate
from ..utils.errors import BusinessRuleError, InternalError, InventoryError, NotFoundError
from ..utils.logger import get_logger

logger = get_logger("sales")

SALE_COLUMNS = ("sales_id", "sale_date", "subtotal", "tax_amount", "total_amount",
                "payment_method", "payment_status", "customer_id", "sold_by_user_id")
ITEM_COLUMNS = ("sales_item_id", "product_id", "quantity_sold", "unit_price", "item_total")


def refresh_low_stock_alert(db: Session, product: Product) -> Optional[InventoryAlert]:
    """
    Keep at most one low-stock alert per product in line with its stock.

    Stock at or below the threshold upserts the alert and moves its timestamp
    forward; stock above the threshold removes any existing alert. The caller
    must hold the product row lock.
    """
    alert = lock_row(
        db.query(InventoryAlert).filter(
            InventoryAlert.product_id == product.product_id,
            InventoryAlert.alert_type == LOW_STOCK,
        )
    ).one_or_none()
    threshold = product.low_stock_threshold
    if threshold is None:
        threshold = Config.DEFAULT_LOW_STOCK_THRESHOLD

    if product.current_stock <= threshold:
        if alert is None:
            alert = InventoryAlert(product_id=product.product_id, alert_type=LOW_STOCK,
                                   threshold_quantity=threshold)
            db.add(alert)
            logger.info("Low-stock alert raised for product %s (stock %s <= %s)",
                        product.product_id, product.current_stock, threshold)
        alert.threshold_quantity = threshold
        alert.alert_date = utcnow()
        return alert

    if alert is not None:
        db.delete(alert)
        logger.info("Low-stock alert cleared for product %s (stock %s > %s)",
                    product.product_id, product.current_stock, threshold)
    return None


def _lock_products(db: Session, product_ids) -> Dict[int, Product]:
    products = {}
    for product_id in sorted(set(product_ids)):
        product = lock_row(db.query(Product).filter(Product.product_id == product_id)).one_or_none()
        if product is None:
            raise NotFoundError(f"Product {product_id} not found.")
        products[product_id] = product
    return products


def create_sale(db: Session, payload: SaleCreate, tax_rate: Optional[float] = None) -> Dict[str, Any]:
    rate = Decimal(str(Config.TAX_RATE if tax_rate is None else tax_rate))
    needed = Counter()
    for item in payload.items:
        needed[item.product_id] += item.quantity_sold

    try:
        with transaction(db):
            products = _lock_products(db, needed)

            for product_id, quantity in needed.items():
                product = products[product_id]
                if product.current_stock < quantity:
                    raise BusinessRuleError(
                        f"Insufficient stock for {product.product_name}. Available: {product.current_stock}"
                    )

            lines = []
            for item in payload.items:
                product = products[item.product_id]
                unit_price = to_money(item.unit_price)
                if unit_price != to_money(product.unit_price):
                    logger.warning("Price mismatch for product %s: request %s, catalogue %s",
                                   product.product_id, unit_price, product.unit_price)
                lines.append((item, unit_price, to_money(unit_price * item.quantity_sold)))

            subtotal = to_money(sum((total for _, _, total in lines), Decimal("0")))
            tax_amount = to_money(subtotal * rate)
            sale = Sale(
                customer_id=payload.customer_id,
                sold_by_user_id=payload.sold_by_user_id,
                subtotal=subtotal,
                tax_amount=tax_amount,
                total_amount=subtotal + tax_amount,
                payment_method=payload.payment_method,
                payment_status=payload.payment_status,
            )
            db.add(sale)
            db.flush()

            for item, unit_price, item_total in lines:
                db.add(SalesItem(
                    sales_id=sale.sales_id,
                    product_id=item.product_id,
                    quantity_sold=item.quantity_sold,
                    unit_price=unit_price,
                    item_total=item_total,
                ))

            for product_id, quantity in needed.items():
                product = products[product_id]
                product.current_stock -= quantity
                refresh_low_stock_alert(db, product)
            db.flush()
            sales_id = sale.sales_id
    except InventoryError:
        raise
    except IntegrityError as e:
        logger.warning("Sale rejected by constraint: %s", e.orig)
        raise conflict_from_integrity(e, foreign_key="Invalid customer or user ID provided.",
                                      foreign_key_status=400)
    except SQLAlchemyError as e:
        logger.exception("Error adding sale")
        raise InternalError("Failed to add sale due to an internal server error.") from e

    logger.info("Sale %s recorded: %d item(s)", sales_id, len(payload.items))
    return get_sale(db, sales_id)


def _sale_dict(sale: Sale, include_items: bool = True) -> Dict[str, Any]:
    data = {c: getattr(sale, c) for c in SALE_COLUMNS}
    data["customer_name"] = sale.customer.full_name if sale.customer else None
    data["sold_by_user_name"] = sale.sold_by.full_name if sale.sold_by else None
    if include_items:
        data["items"] = [
            dict({c: getattr(i, c) for c in ITEM_COLUMNS},
                 product_name=i.product.product_name if i.product else None)
            for i in sorted(sale.items, key=lambda i: i.sales_item_id)
        ]
    return data


def get_sale(db: Session, sales_id: int) -> Dict[str, Any]:
    sale = db.get(Sale, sales_id)
    if sale is None:
        raise NotFoundError("Sale not found.")
    return _sale_dict(sale)


def list_sales(db: Session) -> List[Dict[str, Any]]:
    sales = db.query(Sale).order_by(Sale.sale_date.desc(), Sale.sales_id.desc()).all()
    return [_sale_dict(s, include_items=False) for s in sales]


def update_sale(db: Session, sales_id: int, payload: SaleUpdate) -> Dict[str, Any]:
    """Payment fields and customer only; amounts are never recalculated here."""
    try:
        with transaction(db):
            sale = lock_row(db.query(Sale).filter(Sale.sales_id == sales_id)).one_or_none()
            if sale is None:
                raise NotFoundError("Sale not found.")
            sale.customer_id = payload.customer_id
            sale.payment_method = payload.payment_method
            sale.payment_status = payload.payment_status
            db.flush()
    except InventoryError:
        raise
    except IntegrityError as e:
        raise conflict_from_integrity(e, foreign_key="Invalid customer ID provided.", foreign_key_status=400)
    except SQLAlchemyError as e:
        logger.exception("Error updating sale %s", sales_id)
        raise InternalError("Failed to update sale due to an internal server error.") from e
    return get_sale(db, sales_id)


def returned_quantity(db: Session, sales_item_id: int) -> int:
    return db.execute(
        select(func.coalesce(func.sum(Return.quantity_returned), 0))
        .where(Return.sales_item_id == sales_item_id)
    ).scalar_one()


def eligible_items_for_return(db: Session) -> List[Dict[str, Any]]:
    returned = func.coalesce(func.sum(Return.quantity_returned), 0)
    remaining = (SalesItem.quantity_sold - returned).label("quantity_remaining_for_return")
    stmt = (
        select(
            SalesItem.sales_item_id,
            SalesItem.sales_id,
            Sale.sale_date,
            SalesItem.product_id,
            Product.product_name,
            SalesItem.quantity_sold.label("original_quantity_sold"),
            SalesItem.unit_price,
            remaining,
        )
        .select_from(SalesItem)
        .join(Product, SalesItem.product_id == Product.product_id)
        .join(Sale, SalesItem.sales_id == Sale.sales_id)
        .outerjoin(Return, Return.sales_item_id == SalesItem.sales_item_id)
        .group_by(SalesItem.sales_item_id, SalesItem.sales_id, Sale.sale_date, SalesItem.product_id,
                  Product.product_name, SalesItem.quantity_sold, SalesItem.unit_price)
        .having(SalesItem.quantity_sold - returned > 0)
        .order_by(Sale.sale_date.desc(), SalesItem.sales_item_id.desc())
    )
    return [dict(r) for r in db.execute(stmt).mappings().all()]
