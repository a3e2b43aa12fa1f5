from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...data.database import get_db
from ...schemas.catalog_models import CategoryCreate, ProductCreate
from ...services import catalog_service

router = APIRouter()
categories_router = APIRouter()


@router.get("")
def list_products(db: Session = Depends(get_db)) -> List[dict]:
    return catalog_service.list_products(db)


@router.post("", status_code=201)
def add_product(payload: ProductCreate, db: Session = Depends(get_db)):
    return catalog_service.create_product(db, payload)


@router.get("/{product_id}")
def get_product(product_id: int, db: Session = Depends(get_db)):
    return catalog_service.get_product(db, product_id)


@router.delete("/{product_id}")
def delete_product(product_id: int, db: Session = Depends(get_db)):
    catalog_service.delete_product(db, product_id)
    return {"message": f"Product with ID {product_id} deleted successfully"}


@categories_router.get("")
def list_categories(db: Session = Depends(get_db)) -> List[dict]:
    return catalog_service.list_categories(db)


@categories_router.post("", status_code=201)
def add_category(payload: CategoryCreate, db: Session = Depends(get_db)):
    return catalog_service.create_category(db, payload)
