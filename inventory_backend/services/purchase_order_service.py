"""Purchase orders and the stock receipt that happens when one arrives."""
from typing import Any, Dict, List

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from .common import conflict_from_integrity
from .sales_service import refresh_low_stock_alert
from ..data.database import lock_row, transaction
from ..data.models import OrderStatus, Product, PurchaseOrder
from ..schemas.order_models import PurchaseOrderCreate, PurchaseOrderUpdate
from ..utils.errors import BusinessRuleError, InternalError, InventoryError, NotFoundError
from ..utils.logger import get_logger

logger = get_logger("purchase_orders")


def _order_dict(order: PurchaseOrder) -> Dict[str, Any]:
    return {
        "order_id": order.order_id,
        "supplier_id": order.supplier_id,
        "supplier_name": order.supplier.supplier_name if order.supplier else None,
        "product_id": order.product_id,
        "product_name": order.product.product_name if order.product else None,
        "quantity_ordered": order.quantity_ordered,
        "order_status": order.order_status.value,
        "order_date": order.order_date,
    }


def list_purchase_orders(db: Session) -> List[Dict[str, Any]]:
    orders = db.query(PurchaseOrder).order_by(PurchaseOrder.order_date.desc(),
                                              PurchaseOrder.order_id.desc()).all()
    return [_order_dict(o) for o in orders]


def get_purchase_order(db: Session, order_id: int) -> Dict[str, Any]:
    order = db.get(PurchaseOrder, order_id)
    if order is None:
        raise NotFoundError("Purchase order not found.")
    return _order_dict(order)


def _receive(db: Session, order: PurchaseOrder, quantity: int) -> None:
    product = lock_row(db.query(Product).filter(Product.product_id == order.product_id)).one_or_none()
    if product is None:
        raise NotFoundError(f"Product {order.product_id} for purchase order {order.order_id} not found.")
    product.current_stock += quantity
    logger.info("PO %s received: product %s stock +%d -> %d",
                order.order_id, product.product_id, quantity, product.current_stock)
    refresh_low_stock_alert(db, product)


def create_purchase_order(db: Session, payload: PurchaseOrderCreate) -> Dict[str, Any]:
    """Orders created directly as received put their quantity into stock at once."""
    try:
        with transaction(db):
            order = PurchaseOrder(
                supplier_id=payload.supplier_id,
                product_id=payload.product_id,
                quantity_ordered=payload.quantity_ordered,
                order_status=payload.order_status,
            )
            db.add(order)
            db.flush()
            if order.order_status == OrderStatus.received:
                _receive(db, order, order.quantity_ordered)
            order_id = order.order_id
    except InventoryError:
        raise
    except IntegrityError as e:
        logger.warning("Purchase order rejected by constraint: %s", e.orig)
        raise conflict_from_integrity(e, foreign_key="Invalid Supplier ID or Product ID provided.",
                                      foreign_key_status=400)
    except SQLAlchemyError as e:
        logger.exception("Error creating purchase order")
        raise InternalError("Failed to create purchase order due to an internal server error.") from e

    logger.info("Purchase order %s created", order_id)
    return get_purchase_order(db, order_id)


def update_purchase_order(db: Session, order_id: int, payload: PurchaseOrderUpdate) -> Dict[str, Any]:
    """
    Apply a quantity and/or status change to a purchase order.

    Moving an order into ``received`` adds the quantity ordered before this
    update to the product's stock, once. Received and canceled orders are
    final: their status cannot change, and a received order's quantity is
    fixed at what was credited to stock.
    """
    try:
        with transaction(db):
            order = lock_row(db.query(PurchaseOrder).filter(PurchaseOrder.order_id == order_id)).one_or_none()
            if order is None:
                raise NotFoundError("Purchase order not found.")

            previous_status = order.order_status
            previous_quantity = order.quantity_ordered
            receiving = payload.order_status == OrderStatus.received

            if previous_status in OrderStatus.terminal():
                if payload.order_status is not None:
                    raise BusinessRuleError(
                        f"Purchase order {order_id} is already {previous_status.value} "
                        f"and its status cannot change."
                    )
                if previous_status == OrderStatus.received and payload.quantity_ordered is not None \
                        and payload.quantity_ordered != previous_quantity:
                    raise BusinessRuleError(
                        f"Purchase order {order_id} is already received and its quantity cannot change."
                    )

            if payload.quantity_ordered is not None:
                order.quantity_ordered = payload.quantity_ordered
            if payload.order_status is not None:
                order.order_status = payload.order_status

            if receiving:
                _receive(db, order, previous_quantity)
            db.flush()
    except InventoryError:
        raise
    except IntegrityError as e:
        raise conflict_from_integrity(e, foreign_key="Invalid Supplier ID or Product ID provided.",
                                      foreign_key_status=400)
    except SQLAlchemyError as e:
        logger.exception("Error updating purchase order %s", order_id)
        raise InternalError("Failed to update purchase order due to an internal server error.") from e

    return get_purchase_order(db, order_id)


def delete_purchase_order(db: Session, order_id: int) -> None:
    try:
        with transaction(db):
            order = lock_row(db.query(PurchaseOrder).filter(PurchaseOrder.order_id == order_id)).one_or_none()
            if order is None:
                raise NotFoundError("Purchase order not found.")
            db.delete(order)
    except InventoryError:
        raise
    except SQLAlchemyError as e:
        logger.exception("Error deleting purchase order %s", order_id)
        raise InternalError("Failed to delete purchase order due to an internal server error.") from e
    logger.info("Purchase order %s deleted", order_id)
