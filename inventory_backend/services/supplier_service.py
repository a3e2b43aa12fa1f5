"""Suppliers and their one-to-one contact row."""
from typing import Any, Dict, List, Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from .common import conflict_from_integrity
from ..data.database import lock_row, transaction
from ..data.models import Supplier, SupplierContact
from ..schemas.catalog_models import SupplierCreate, SupplierUpdate
from ..utils.errors import InternalError, InventoryError, NotFoundError
from ..utils.logger import get_logger

logger = get_logger("suppliers")

DUPLICATE_EMAIL = "A supplier with this email already exists."


def _provided(value: Optional[str]) -> bool:
    return value is not None and value.strip() != ""


def _supplier_dict(supplier: Supplier) -> Dict[str, Any]:
    contact = supplier.contact
    return {
        "supplier_id": supplier.supplier_id,
        "supplier_name": supplier.supplier_name,
        "email": supplier.email,
        "address": supplier.address,
        "created_at": supplier.created_at,
        "contact_id": contact.contact_id if contact else None,
        "contact_person": contact.contact_person if contact else None,
        "phone_number": contact.phone_number if contact else None,
    }


def list_suppliers(db: Session) -> List[Dict[str, Any]]:
    return [_supplier_dict(s) for s in db.query(Supplier).order_by(Supplier.supplier_name).all()]


def get_supplier(db: Session, supplier_id: int) -> Dict[str, Any]:
    supplier = db.get(Supplier, supplier_id)
    if supplier is None:
        raise NotFoundError("Supplier not found.")
    return _supplier_dict(supplier)


def create_supplier(db: Session, payload: SupplierCreate) -> Dict[str, Any]:
    try:
        with transaction(db):
            supplier = Supplier(supplier_name=payload.supplier_name, email=payload.email,
                                address=payload.address)
            db.add(supplier)
            db.flush()
            if _provided(payload.contact_person) or _provided(payload.phone_number):
                db.add(SupplierContact(supplier_id=supplier.supplier_id,
                                       contact_person=payload.contact_person,
                                       phone_number=payload.phone_number))
            db.flush()
            supplier_id = supplier.supplier_id
    except IntegrityError as e:
        logger.warning("Supplier rejected by constraint: %s", e.orig)
        raise conflict_from_integrity(e, unique=DUPLICATE_EMAIL)
    except SQLAlchemyError as e:
        logger.exception("Error creating supplier")
        raise InternalError("Failed to create supplier due to an internal server error.") from e

    logger.info("Supplier %s created", supplier_id)
    return get_supplier(db, supplier_id)


def update_supplier(db: Session, supplier_id: int, payload: SupplierUpdate) -> Dict[str, Any]:
    """
    Update supplier fields that were supplied.

    The contact row is inserted when absent and a contact field is given,
    updated when present and a contact field is given, and left alone when
    both contact fields are empty.
    """
    try:
        with transaction(db):
            supplier = lock_row(db.query(Supplier).filter(Supplier.supplier_id == supplier_id)).one_or_none()
            if supplier is None:
                raise NotFoundError("Supplier not found.")

            for field in ("supplier_name", "email", "address"):
                value = getattr(payload, field)
                if value is not None:
                    setattr(supplier, field, value)

            has_person = _provided(payload.contact_person)
            has_phone = _provided(payload.phone_number)
            if has_person or has_phone:
                contact = supplier.contact
                if contact is None:
                    db.add(SupplierContact(supplier_id=supplier.supplier_id,
                                           contact_person=payload.contact_person if has_person else None,
                                           phone_number=payload.phone_number if has_phone else None))
                else:
                    if has_person:
                        contact.contact_person = payload.contact_person
                    if has_phone:
                        contact.phone_number = payload.phone_number
            db.flush()
    except InventoryError:
        raise
    except IntegrityError as e:
        raise conflict_from_integrity(e, unique=DUPLICATE_EMAIL)
    except SQLAlchemyError as e:
        logger.exception("Error updating supplier %s", supplier_id)
        raise InternalError("Failed to update supplier due to an internal server error.") from e

    return get_supplier(db, supplier_id)


def delete_supplier(db: Session, supplier_id: int) -> None:
    """Contact goes first, then the supplier; purchase orders still pointing here block both."""
    try:
        with transaction(db):
            supplier = lock_row(db.query(Supplier).filter(Supplier.supplier_id == supplier_id)).one_or_none()
            if supplier is None:
                raise NotFoundError("Supplier not found.")
            if supplier.contact is not None:
                db.delete(supplier.contact)
            db.delete(supplier)
            db.flush()
    except InventoryError:
        raise
    except IntegrityError as e:
        logger.warning("Supplier %s delete blocked: %s", supplier_id, e.orig)
        raise conflict_from_integrity(
            e, foreign_key="Cannot delete supplier: it is referenced by existing purchase orders.")
    except SQLAlchemyError as e:
        logger.exception("Error deleting supplier %s", supplier_id)
        raise InternalError("Failed to delete supplier due to an internal server error.") from e
    logger.info("Supplier %s deleted", supplier_id)
