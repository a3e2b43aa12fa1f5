"""Products, categories and the low-stock alert list."""
from typing import Any, Dict, List

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from .common import conflict_from_integrity, row_dict, to_money
from .sales_service import refresh_low_stock_alert
from ..data.database import lock_row, transaction
from ..data.models import LOW_STOCK, InventoryAlert, Product, ProductCategory
from ..schemas.catalog_models import CategoryCreate, ProductCreate, ThresholdUpdate
from ..utils.errors import InternalError, InventoryError, NotFoundError
from ..utils.logger import get_logger

logger = get_logger("catalog")

PRODUCT_COLUMNS = ("product_id", "category_id", "product_name", "description", "unit_price",
                   "current_stock", "low_stock_threshold", "created_at")
CATEGORY_COLUMNS = ("category_id", "category_name", "description")


def _product_dict(product: Product) -> Dict[str, Any]:
    data = row_dict(product, PRODUCT_COLUMNS)
    data["category_name"] = product.category.category_name if product.category else None
    return data


# Products

def list_products(db: Session) -> List[Dict[str, Any]]:
    return [_product_dict(p) for p in db.query(Product).order_by(Product.product_name).all()]


def get_product(db: Session, product_id: int) -> Dict[str, Any]:
    product = db.get(Product, product_id)
    if product is None:
        raise NotFoundError(f"Product with ID {product_id} not found.")
    return _product_dict(product)


def create_product(db: Session, payload: ProductCreate) -> Dict[str, Any]:
    """New products start with the alert state their opening stock implies."""
    try:
        with transaction(db):
            product = Product(
                category_id=payload.category_id,
                product_name=payload.product_name,
                description=payload.description,
                unit_price=to_money(payload.unit_price),
                current_stock=payload.current_stock,
            )
            if payload.low_stock_threshold is not None:
                product.low_stock_threshold = payload.low_stock_threshold
            db.add(product)
            db.flush()
            refresh_low_stock_alert(db, product)
            product_id = product.product_id
    except IntegrityError as e:
        logger.warning("Product rejected by constraint: %s", e.orig)
        raise conflict_from_integrity(e, foreign_key="Invalid category ID provided.", foreign_key_status=400)
    except SQLAlchemyError as e:
        logger.exception("Error adding product")
        raise InternalError("Failed to add product due to an internal server error.") from e

    logger.info("Product %s created", product_id)
    return get_product(db, product_id)


def delete_product(db: Session, product_id: int) -> None:
    try:
        with transaction(db):
            product = lock_row(db.query(Product).filter(Product.product_id == product_id)).one_or_none()
            if product is None:
                raise NotFoundError(f"Product with ID {product_id} not found.")
            db.query(InventoryAlert).filter(InventoryAlert.product_id == product_id).delete(
                synchronize_session=False)
            db.delete(product)
            db.flush()
    except InventoryError:
        raise
    except IntegrityError as e:
        logger.warning("Product %s delete blocked: %s", product_id, e.orig)
        raise conflict_from_integrity(
            e, foreign_key=f"Cannot delete product ID {product_id}. It is referenced in other records.")
    except SQLAlchemyError as e:
        logger.exception("Error deleting product %s", product_id)
        raise InternalError("Failed to delete product due to an internal server error.") from e
    logger.info("Product %s deleted", product_id)


# Categories

def list_categories(db: Session) -> List[Dict[str, Any]]:
    categories = db.query(ProductCategory).order_by(ProductCategory.category_name).all()
    return [row_dict(c, CATEGORY_COLUMNS) for c in categories]


def create_category(db: Session, payload: CategoryCreate) -> Dict[str, Any]:
    try:
        with transaction(db):
            category = ProductCategory(category_name=payload.category_name, description=payload.description)
            db.add(category)
            db.flush()
            data = row_dict(category, CATEGORY_COLUMNS)
    except IntegrityError as e:
        raise conflict_from_integrity(e, unique="A category with this name already exists.")
    except SQLAlchemyError as e:
        logger.exception("Error adding category")
        raise InternalError("Failed to add category due to an internal server error.") from e
    return data


# Inventory alerts

def list_alerts(db: Session) -> List[Dict[str, Any]]:
    rows = (
        db.query(InventoryAlert, Product)
        .join(Product, InventoryAlert.product_id == Product.product_id)
        .filter(InventoryAlert.alert_type == LOW_STOCK)
        .order_by(InventoryAlert.alert_date.desc())
        .all()
    )
    return [
        {
            "alert_id": alert.alert_id,
            "product_id": alert.product_id,
            "product_name": product.product_name,
            "alert_type": alert.alert_type,
            "threshold_quantity": alert.threshold_quantity,
            "current_stock": product.current_stock,
            "alert_date": alert.alert_date,
        }
        for alert, product in rows
    ]


def delete_alert(db: Session, alert_id: int) -> None:
    try:
        with transaction(db):
            deleted = db.query(InventoryAlert).filter(InventoryAlert.alert_id == alert_id).delete(
                synchronize_session=False)
            if not deleted:
                raise NotFoundError(f"Alert with ID {alert_id} not found.")
    except InventoryError:
        raise
    except SQLAlchemyError as e:
        logger.exception("Error deleting inventory alert %s", alert_id)
        raise InternalError("Failed to delete inventory alert due to an internal error.") from e


def set_threshold(db: Session, product_id: int, payload: ThresholdUpdate) -> Dict[str, Any]:
    """Store a product's threshold and bring its alert in line with current stock."""
    try:
        with transaction(db):
            product = lock_row(db.query(Product).filter(Product.product_id == product_id)).one_or_none()
            if product is None:
                raise NotFoundError(f"Product with ID {product_id} not found.")
            product.low_stock_threshold = payload.threshold_quantity
            alert = refresh_low_stock_alert(db, product)
            db.flush()
            result = {
                "product_id": product.product_id,
                "threshold_quantity": product.low_stock_threshold,
                "current_stock": product.current_stock,
                "alert_active": alert is not None,
            }
    except InventoryError:
        raise
    except SQLAlchemyError as e:
        logger.exception("Error updating threshold for product %s", product_id)
        raise InternalError("Failed to update threshold due to an internal server error.") from e

    logger.info("Threshold for product %s set to %s", product_id, payload.threshold_quantity)
    return result
