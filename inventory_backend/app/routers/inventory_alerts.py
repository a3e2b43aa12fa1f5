from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...data.database import get_db
from ...schemas.catalog_models import ThresholdUpdate
from ...services import catalog_service

router = APIRouter()


@router.get("")
def list_alerts(db: Session = Depends(get_db)):
    return catalog_service.list_alerts(db)


@router.put("/threshold/{product_id}")
def update_threshold(product_id: int, payload: ThresholdUpdate, db: Session = Depends(get_db)):
    return catalog_service.set_threshold(db, product_id, payload)


@router.delete("/{alert_id}")
def delete_alert(alert_id: int, db: Session = Depends(get_db)):
    catalog_service.delete_alert(db, alert_id)
    return {"message": f"Alert with ID {alert_id} successfully deleted."}
