from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...data.database import get_db
from ...schemas.catalog_models import LoginRequest, UserCreate
from ...services import account_service

router = APIRouter()


@router.get("")
def list_users(db: Session = Depends(get_db)):
    return account_service.list_users(db)


@router.post("", status_code=201)
def add_user(payload: UserCreate, db: Session = Depends(get_db)):
    return account_service.create_user(db, payload)


@router.post("/login")
def login(payload: LoginRequest, db: Session = Depends(get_db)):
    return account_service.login(db, payload)


@router.delete("/{user_id}")
def delete_user(user_id: int, db: Session = Depends(get_db)):
    account_service.delete_user(db, user_id)
    return {"message": f"User with ID {user_id} deleted successfully."}
