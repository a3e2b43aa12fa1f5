"""Saved reports, dashboard counters and sale invoices."""
from decimal import Decimal
from typing import Any, Dict, List

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from .common import conflict_from_integrity, to_money
from ..data.database import lock_row, transaction
from ..data.models import (LOW_STOCK, InventoryAlert, Product, PurchaseOrder, Report, Sale,
                           SalesItem, Supplier, User)
from ..schemas.catalog_models import ReportCreate, ReportUpdate
from ..utils.errors import InternalError, InventoryError, NotFoundError
from ..utils.logger import get_logger

logger = get_logger("reporting")


def _report_dict(report: Report, include_data: bool = True) -> Dict[str, Any]:
    data = {
        "report_id": report.report_id,
        "report_name": report.report_name,
        "generated_by_user_id": report.generated_by_user_id,
        "generated_by_user_name": report.generated_by.full_name if report.generated_by else None,
        "created_at": report.created_at,
    }
    if include_data:
        data["report_data"] = report.report_data
    return data


def list_reports(db: Session) -> List[Dict[str, Any]]:
    reports = db.query(Report).order_by(Report.created_at.desc(), Report.report_id.desc()).all()
    return [_report_dict(r, include_data=False) for r in reports]


def get_report(db: Session, report_id: int) -> Dict[str, Any]:
    report = db.get(Report, report_id)
    if report is None:
        raise NotFoundError("Report not found")
    return _report_dict(report)


def create_report(db: Session, payload: ReportCreate) -> Dict[str, Any]:
    try:
        with transaction(db):
            report = Report(report_name=payload.report_name, report_data=payload.report_data,
                            generated_by_user_id=payload.generated_by_user_id)
            db.add(report)
            db.flush()
            report_id = report.report_id
    except IntegrityError as e:
        raise conflict_from_integrity(
            e, foreign_key="Invalid user ID provided for 'generated_by_user_id'.", foreign_key_status=400)
    except SQLAlchemyError as e:
        logger.exception("Error adding report")
        raise InternalError("Failed to add report") from e
    return get_report(db, report_id)


def update_report(db: Session, report_id: int, payload: ReportUpdate) -> Dict[str, Any]:
    try:
        with transaction(db):
            report = lock_row(db.query(Report).filter(Report.report_id == report_id)).one_or_none()
            if report is None:
                raise NotFoundError("Report not found")
            if payload.report_name is not None:
                report.report_name = payload.report_name
            if payload.report_data is not None:
                report.report_data = payload.report_data
            db.flush()
    except InventoryError:
        raise
    except SQLAlchemyError as e:
        logger.exception("Error updating report %s", report_id)
        raise InternalError("Failed to update report") from e
    return get_report(db, report_id)


def delete_report(db: Session, report_id: int) -> None:
    try:
        with transaction(db):
            deleted = db.query(Report).filter(Report.report_id == report_id).delete(synchronize_session=False)
            if not deleted:
                raise NotFoundError("Report not found")
    except InventoryError:
        raise
    except SQLAlchemyError as e:
        logger.exception("Error deleting report %s", report_id)
        raise InternalError("Failed to delete report") from e


def _count(db: Session, model, *where) -> int:
    stmt = select(func.count()).select_from(model)
    if where:
        stmt = stmt.where(*where)
    return db.execute(stmt).scalar_one()


def dashboard_stats(db: Session) -> Dict[str, Any]:
    try:
        total_sales = db.execute(
            select(func.coalesce(func.sum(Sale.total_amount), 0)).where(Sale.payment_status == "completed")
        ).scalar_one()
        return {
            "totalProducts": _count(db, Product),
            "activeSuppliers": _count(db, Supplier),
            "lowStockAlerts": _count(db, InventoryAlert, InventoryAlert.alert_type == LOW_STOCK),
            "totalSales": f"{to_money(total_sales or Decimal('0')):.2f}",
            "totalOrders": _count(db, PurchaseOrder),
            "totalUsers": _count(db, User),
        }
    except SQLAlchemyError as e:
        logger.exception("Error fetching dashboard stats")
        raise InternalError("Failed to fetch dashboard data") from e


def invoice(db: Session, sales_id: int) -> Dict[str, Any]:
    sale = db.get(Sale, sales_id)
    if sale is None:
        raise NotFoundError(f"Invoice with ID {sales_id} not found.")
    customer = sale.customer
    items = (
        db.query(SalesItem, Product.product_name)
        .join(Product, SalesItem.product_id == Product.product_id)
        .filter(SalesItem.sales_id == sales_id)
        .order_by(Product.product_name)
        .all()
    )
    return {
        "sales_id": sale.sales_id,
        "sale_date": sale.sale_date,
        "subtotal": sale.subtotal,
        "tax_amount": sale.tax_amount,
        "total_amount": sale.total_amount,
        "payment_method": sale.payment_method,
        "payment_status": sale.payment_status,
        "customer_id": sale.customer_id,
        "customer_name": customer.full_name if customer else "N/A",
        "customer_email": customer.email if customer else None,
        "customer_phone": customer.phone_number if customer else None,
        "sold_by_user_id": sale.sold_by_user_id,
        "sold_by_user_name": sale.sold_by.full_name if sale.sold_by else "Unknown",
        "items": [
            {
                "sales_item_id": item.sales_item_id,
                "product_id": item.product_id,
                "product_name": product_name,
                "quantity_sold": item.quantity_sold,
                "unit_price": item.unit_price,
                "item_total": item.item_total,
            }
            for item, product_name in items
        ],
    }
