"""Customer returns against individual sale line items.

Returns record a refund only; stock is moved by sales and purchase orders.
"""
from typing import Any, Dict, List

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from .common import conflict_from_integrity, to_money
from .sales_service import returned_quantity
from ..data.database import lock_row, transaction
from ..data.models import Customer, Product, Return, Sale, SalesItem
from ..schemas.order_models import ReturnCreate
from ..utils.errors import BusinessRuleError, InternalError, InventoryError, NotFoundError
from ..utils.logger import get_logger

logger = get_logger("returns")


def list_returns(db: Session) -> List[Dict[str, Any]]:
    rows = (
        db.query(Return, SalesItem, Product, Sale, Customer)
        .join(SalesItem, Return.sales_item_id == SalesItem.sales_item_id)
        .join(Product, SalesItem.product_id == Product.product_id)
        .join(Sale, SalesItem.sales_id == Sale.sales_id)
        .outerjoin(Customer, Sale.customer_id == Customer.customer_id)
        .order_by(Return.return_date.desc(), Return.return_id.desc())
        .all()
    )
    return [
        {
            "return_id": r.return_id,
            "sales_item_id": r.sales_item_id,
            "sales_id": item.sales_id,
            "product_id": item.product_id,
            "product_name": product.product_name,
            "sale_date": sale.sale_date,
            "customer_id": sale.customer_id,
            "customer_name": customer.full_name if customer else "N/A",
            "quantity_returned": r.quantity_returned,
            "return_reason": r.return_reason,
            "refund_amount": r.refund_amount,
            "return_status": r.return_status,
            "return_date": r.return_date,
        }
        for r, item, product, sale, customer in rows
    ]


def create_return(db: Session, payload: ReturnCreate) -> Dict[str, Any]:
    try:
        with transaction(db):
            item = lock_row(
                db.query(SalesItem).filter(SalesItem.sales_item_id == payload.sales_item_id)
            ).one_or_none()
            if item is None:
                raise NotFoundError(f"Sales item {payload.sales_item_id} not found.")

            remaining = item.quantity_sold - returned_quantity(db, item.sales_item_id)
            if payload.quantity_returned > remaining:
                raise BusinessRuleError(
                    f"Cannot return {payload.quantity_returned} item(s); only {remaining} remaining for return."
                )

            record = Return(
                sales_item_id=item.sales_item_id,
                quantity_returned=payload.quantity_returned,
                return_reason=payload.return_reason,
                refund_amount=to_money(to_money(item.unit_price) * payload.quantity_returned),
            )
            db.add(record)
            db.flush()
            data = {
                "return_id": record.return_id,
                "sales_item_id": record.sales_item_id,
                "quantity_returned": record.quantity_returned,
                "return_reason": record.return_reason,
                "refund_amount": record.refund_amount,
                "return_status": record.return_status,
                "return_date": record.return_date,
            }
    except InventoryError:
        raise
    except IntegrityError as e:
        raise conflict_from_integrity(e, foreign_key="Invalid sales item ID provided.", foreign_key_status=400)
    except SQLAlchemyError as e:
        logger.exception("Error adding return")
        raise InternalError("Failed to add return due to an internal server error.") from e

    logger.info("Return %s recorded for sales item %s", data["return_id"], data["sales_item_id"])
    return data
