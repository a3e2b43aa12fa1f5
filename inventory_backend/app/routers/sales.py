from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...data.database import get_db
from ...schemas.order_models import SaleCreate, SaleUpdate
from ...services import sales_service

router = APIRouter()


@router.get("")
def list_sales(db: Session = Depends(get_db)):
    return sales_service.list_sales(db)


@router.post("", status_code=201)
def add_sale(payload: SaleCreate, db: Session = Depends(get_db)):
    return sales_service.create_sale(db, payload)


# Registered before /{sales_id} so the literal path wins
@router.get("/items-for-return")
def items_for_return(db: Session = Depends(get_db)):
    return sales_service.eligible_items_for_return(db)


@router.get("/{sales_id}")
def get_sale(sales_id: int, db: Session = Depends(get_db)):
    return sales_service.get_sale(db, sales_id)


@router.put("/{sales_id}")
def update_sale(sales_id: int, payload: SaleUpdate, db: Session = Depends(get_db)):
    return sales_service.update_sale(db, sales_id, payload)
