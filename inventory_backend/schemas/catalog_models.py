"""Request models for products, suppliers, users, reports and alert thresholds."""
from decimal import Decimal
from pydantic import AliasChoices, BaseModel, Field
from typing import Any, Optional

from ..data.models import UserRole

EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"


class CategoryCreate(BaseModel):
    category_name: str = Field(min_length=1)
    description: Optional[str] = None


class ProductCreate(BaseModel):
    category_id: int
    product_name: str = Field(min_length=1)
    description: Optional[str] = None
    unit_price: Decimal = Field(ge=0)
    current_stock: int = Field(ge=0)
    low_stock_threshold: Optional[int] = Field(default=None, ge=0)


class ThresholdUpdate(BaseModel):
    threshold_quantity: int = Field(ge=0)


class SupplierCreate(BaseModel):
    supplier_name: str = Field(min_length=1)
    email: str = Field(pattern=EMAIL_PATTERN)
    address: Optional[str] = None
    contact_person: Optional[str] = None
    phone_number: Optional[str] = None


class SupplierUpdate(BaseModel):
    supplier_name: Optional[str] = Field(default=None, min_length=1)
    email: Optional[str] = Field(default=None, pattern=EMAIL_PATTERN)
    address: Optional[str] = None
    contact_person: Optional[str] = None
    phone_number: Optional[str] = None


class UserCreate(BaseModel):
    full_name: str = Field(min_length=1)
    email: str = Field(pattern=EMAIL_PATTERN)
    password: str = Field(min_length=1, validation_alias=AliasChoices("password", "password_hash"))
    phone_number: Optional[str] = None
    role: UserRole = UserRole.employee


class LoginRequest(BaseModel):
    email: str = Field(pattern=EMAIL_PATTERN)
    password: str = Field(min_length=1, validation_alias=AliasChoices("password", "password_hash"))


class ReportCreate(BaseModel):
    report_name: str = Field(min_length=1)
    report_data: Any
    generated_by_user_id: Optional[int] = None


class ReportUpdate(BaseModel):
    report_name: Optional[str] = Field(default=None, min_length=1)
    report_data: Optional[Any] = None
