"""User accounts and login."""
from typing import Any, Dict, List

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from .common import conflict_from_integrity, row_dict
from ..data.database import transaction
from ..data.models import User
from ..schemas.catalog_models import LoginRequest, UserCreate
from ..utils.errors import AuthenticationError, InternalError, InventoryError, NotFoundError
from ..utils.logger import get_logger
from ..utils.security import hash_password, verify_password

logger = get_logger("accounts")

USER_COLUMNS = ("user_id", "full_name", "email", "phone_number", "role", "created_at")


def _user_dict(user: User) -> Dict[str, Any]:
    data = row_dict(user, USER_COLUMNS)
    data["role"] = user.role.value
    return data


def list_users(db: Session) -> List[Dict[str, Any]]:
    return [_user_dict(u) for u in db.query(User).order_by(User.full_name).all()]


def create_user(db: Session, payload: UserCreate) -> Dict[str, Any]:
    try:
        with transaction(db):
            user = User(
                full_name=payload.full_name,
                email=payload.email,
                password_hash=hash_password(payload.password),
                phone_number=payload.phone_number,
                role=payload.role,
            )
            db.add(user)
            db.flush()
            data = _user_dict(user)
    except IntegrityError as e:
        raise conflict_from_integrity(e, unique="Email address already in use.")
    except SQLAlchemyError as e:
        logger.exception("Error adding user")
        raise InternalError("Internal Server Error adding user.") from e
    logger.info("User %s created", data["user_id"])
    return data


def login(db: Session, payload: LoginRequest) -> Dict[str, Any]:
    user = db.query(User).filter(User.email == payload.email).one_or_none()
    if user is None or not verify_password(user.password_hash, payload.password):
        logger.info("Failed login for %s", payload.email)
        raise AuthenticationError()
    return {"message": "Login successful", "user": _user_dict(user)}


def delete_user(db: Session, user_id: int) -> None:
    try:
        with transaction(db):
            user = db.get(User, user_id)
            if user is None:
                raise NotFoundError(f"User with ID {user_id} not found.")
            db.delete(user)
            db.flush()
    except InventoryError:
        raise
    except IntegrityError as e:
        raise conflict_from_integrity(
            e, foreign_key=f"Cannot delete user ID {user_id}. They are referenced in other records.")
    except SQLAlchemyError as e:
        logger.exception("Error deleting user %s", user_id)
        raise InternalError("Failed to delete user due to an internal server error.") from e
    logger.info("User %s deleted", user_id)
