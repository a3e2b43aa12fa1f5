"""Helpers shared by the transactional services."""
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Dict, Iterable

from sqlalchemy.exc import IntegrityError

from ..utils.errors import ConflictError

CENT = Decimal("0.01")


def to_money(value: Any) -> Decimal:
    if not isinstance(value, Decimal):
        value = Decimal(str(value))
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def is_foreign_key_violation(error: IntegrityError) -> bool:
    text = str(getattr(error, "orig", error)).lower()
    # sqlite: "FOREIGN KEY constraint failed"; postgres sqlstate 23503; mysql 1451/1452
    return ("foreign key" in text or getattr(getattr(error, "orig", None), "pgcode", None) == "23503"
            or "1451" in text or "1452" in text)


def is_unique_violation(error: IntegrityError) -> bool:
    text = str(getattr(error, "orig", error)).lower()
    return ("unique" in text or "duplicate" in text
            or getattr(getattr(error, "orig", None), "pgcode", None) == "23505")


def conflict_from_integrity(error: IntegrityError, foreign_key: str = None, unique: str = None,
                            foreign_key_status: int = 409) -> ConflictError:
    """Classify an IntegrityError into the message and status the caller should see."""
    if foreign_key and is_foreign_key_violation(error):
        return ConflictError(foreign_key, status_code=foreign_key_status)
    if unique and is_unique_violation(error):
        return ConflictError(unique)
    return ConflictError()


def row_dict(obj, columns: Iterable[str]) -> Dict[str, Any]:
    return {c: getattr(obj, c) for c in columns}
