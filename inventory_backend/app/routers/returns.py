from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...data.database import get_db
from ...schemas.order_models import ReturnCreate
from ...services import returns_service

router = APIRouter()


@router.get("")
def list_returns(db: Session = Depends(get_db)):
    return returns_service.list_returns(db)


@router.post("", status_code=201)
def add_return(payload: ReturnCreate, db: Session = Depends(get_db)):
    return returns_service.create_return(db, payload)
