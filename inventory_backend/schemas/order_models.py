"""Sale, purchase-order and return request models with stricter types.

- Use Enum for order status to prevent invalid values.
- Quantities must be positive and prices non-negative before any DB call.
"""
from decimal import Decimal
from pydantic import BaseModel, Field, model_validator
from typing import List, Optional

from ..data.models import OrderStatus


class SaleItemIn(BaseModel):
    product_id: int
    quantity_sold: int = Field(gt=0)
    unit_price: Decimal = Field(ge=0)


class SaleCreate(BaseModel):
    sold_by_user_id: int
    payment_method: str = Field(min_length=1)
    payment_status: str = Field(min_length=1)
    customer_id: Optional[int] = None
    items: List[SaleItemIn] = Field(default_factory=list)

    # Flat single-item shape used by the dashboard's sale form
    product_id: Optional[int] = None
    quantity_sold: Optional[int] = None
    unit_price: Optional[Decimal] = None

    @model_validator(mode="after")
    def _collect_items(self):
        if self.product_id is not None:
            if self.quantity_sold is None or self.unit_price is None:
                raise ValueError("quantity_sold and unit_price are required with product_id")
            self.items.append(SaleItemIn(
                product_id=self.product_id,
                quantity_sold=self.quantity_sold,
                unit_price=self.unit_price,
            ))
            self.product_id = self.quantity_sold = self.unit_price = None
        if not self.items:
            raise ValueError("A sale needs at least one item")
        return self


class SaleUpdate(BaseModel):
    payment_method: str = Field(min_length=1)
    payment_status: str = Field(min_length=1)
    customer_id: Optional[int] = None


class PurchaseOrderCreate(BaseModel):
    supplier_id: int
    product_id: int
    quantity_ordered: int = Field(gt=0)
    order_status: OrderStatus = OrderStatus.pending


class PurchaseOrderUpdate(BaseModel):
    quantity_ordered: Optional[int] = Field(default=None, gt=0)
    order_status: Optional[OrderStatus] = None

    @model_validator(mode="after")
    def _something_to_update(self):
        if self.quantity_ordered is None and self.order_status is None:
            raise ValueError("No valid fields provided for update (quantity_ordered or order_status)")
        return self


class ReturnCreate(BaseModel):
    sales_item_id: int
    quantity_returned: int = Field(gt=0)
    return_reason: Optional[str] = None
