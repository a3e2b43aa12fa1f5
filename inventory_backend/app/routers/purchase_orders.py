from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...data.database import get_db
from ...schemas.order_models import PurchaseOrderCreate, PurchaseOrderUpdate
from ...services import purchase_order_service

router = APIRouter()


@router.get("")
def list_purchase_orders(db: Session = Depends(get_db)):
    return purchase_order_service.list_purchase_orders(db)


@router.post("", status_code=201)
def add_purchase_order(payload: PurchaseOrderCreate, db: Session = Depends(get_db)):
    return purchase_order_service.create_purchase_order(db, payload)


@router.get("/{order_id}")
def get_purchase_order(order_id: int, db: Session = Depends(get_db)):
    return purchase_order_service.get_purchase_order(db, order_id)


@router.put("/{order_id}")
def update_purchase_order(order_id: int, payload: PurchaseOrderUpdate, db: Session = Depends(get_db)):
    return purchase_order_service.update_purchase_order(db, order_id, payload)


@router.delete("/{order_id}")
def delete_purchase_order(order_id: int, db: Session = Depends(get_db)):
    purchase_order_service.delete_purchase_order(db, order_id)
    return {"message": f"Purchase order with ID {order_id} deleted successfully."}
