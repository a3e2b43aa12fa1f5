"""Reports CRUD plus the read-only dashboard and billing views."""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...data.database import get_db
from ...schemas.catalog_models import ReportCreate, ReportUpdate
from ...services import reporting_service

router = APIRouter()
dashboard_router = APIRouter()
billing_router = APIRouter()


@router.get("")
def list_reports(db: Session = Depends(get_db)):
    return reporting_service.list_reports(db)


@router.post("", status_code=201)
def add_report(payload: ReportCreate, db: Session = Depends(get_db)):
    return reporting_service.create_report(db, payload)


@router.get("/{report_id}")
def get_report(report_id: int, db: Session = Depends(get_db)):
    return reporting_service.get_report(db, report_id)


@router.put("/{report_id}")
def update_report(report_id: int, payload: ReportUpdate, db: Session = Depends(get_db)):
    return reporting_service.update_report(db, report_id, payload)


@router.delete("/{report_id}")
def delete_report(report_id: int, db: Session = Depends(get_db)):
    reporting_service.delete_report(db, report_id)
    return {"message": f"Report with ID {report_id} deleted successfully"}


@dashboard_router.get("/stats")
def dashboard_stats(db: Session = Depends(get_db)):
    return reporting_service.dashboard_stats(db)


@billing_router.get("/invoice/{sales_id}")
def invoice(sales_id: int, db: Session = Depends(get_db)):
    return reporting_service.invoice(db, sales_id)
