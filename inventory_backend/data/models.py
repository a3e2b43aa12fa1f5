from datetime import datetime, timezone

from sqlalchemy import (JSON, CheckConstraint, Column, DateTime, Enum, ForeignKey, Integer,
                        Numeric, String, Text, UniqueConstraint)
from sqlalchemy.orm import relationship
from .database import Base
from ..app.config import Config
import enum


def utcnow():
    return datetime.now(timezone.utc)


class OrderStatus(str, enum.Enum):
    pending = "pending"
    shipped = "shipped"
    received = "received"
    canceled = "canceled"

    @classmethod
    def terminal(cls):
        return {cls.received, cls.canceled}

class UserRole(str, enum.Enum):
    admin = "admin"
    manager = "manager"
    employee = "employee"

LOW_STOCK = "low_stock"

class ProductCategory(Base):
    __tablename__ = "product_categories"

    category_id = Column(Integer, primary_key=True, index=True)
    category_name = Column(String(100), unique=True, nullable=False)
    description = Column(Text)

    products = relationship("Product", back_populates="category")

class Product(Base):
    __tablename__ = "products"
    __table_args__ = (
        CheckConstraint("unit_price >= 0", name="ck_products_unit_price"),
        CheckConstraint("current_stock >= 0", name="ck_products_current_stock"),
    )

    product_id = Column(Integer, primary_key=True, index=True)
    category_id = Column(Integer, ForeignKey("product_categories.category_id"), nullable=True)
    product_name = Column(String(200), index=True, nullable=False)
    description = Column(Text)
    unit_price = Column(Numeric(10, 2), nullable=False)
    current_stock = Column(Integer, nullable=False, default=0)
    low_stock_threshold = Column(Integer, nullable=False, default=Config.DEFAULT_LOW_STOCK_THRESHOLD)
    created_at = Column(DateTime(timezone=True), default=utcnow)

    category = relationship("ProductCategory", back_populates="products")
    alerts = relationship("InventoryAlert", back_populates="product")

class InventoryAlert(Base):
    __tablename__ = "inventory_alerts"
    __table_args__ = (
        UniqueConstraint("product_id", "alert_type", name="uq_inventory_alerts_product_type"),
    )

    alert_id = Column(Integer, primary_key=True, index=True)
    product_id = Column(Integer, ForeignKey("products.product_id"), nullable=False)
    alert_type = Column(String(50), nullable=False, default=LOW_STOCK)
    threshold_quantity = Column(Integer, nullable=False)
    alert_date = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    product = relationship("Product", back_populates="alerts")

class Customer(Base):
    __tablename__ = "customers"

    customer_id = Column(Integer, primary_key=True, index=True)
    full_name = Column(String(150), nullable=False)
    email = Column(String(150))
    phone_number = Column(String(30))
    created_at = Column(DateTime(timezone=True), default=utcnow)

    sales = relationship("Sale", back_populates="customer")

class User(Base):
    __tablename__ = "users"

    user_id = Column(Integer, primary_key=True, index=True)
    full_name = Column(String(150), nullable=False)
    email = Column(String(150), unique=True, index=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    phone_number = Column(String(30))
    role = Column(Enum(UserRole), nullable=False, default=UserRole.employee)
    created_at = Column(DateTime(timezone=True), default=utcnow)

class Sale(Base):
    __tablename__ = "sales"

    sales_id = Column(Integer, primary_key=True, index=True)
    customer_id = Column(Integer, ForeignKey("customers.customer_id"), nullable=True)
    sold_by_user_id = Column(Integer, ForeignKey("users.user_id"), nullable=False)
    sale_date = Column(DateTime(timezone=True), default=utcnow)
    subtotal = Column(Numeric(12, 2), nullable=False)
    tax_amount = Column(Numeric(12, 2), nullable=False)
    total_amount = Column(Numeric(12, 2), nullable=False)
    payment_method = Column(String(30), nullable=False)
    payment_status = Column(String(30), nullable=False)

    customer = relationship("Customer", back_populates="sales")
    sold_by = relationship("User")
    items = relationship("SalesItem", back_populates="sale")

class SalesItem(Base):
    __tablename__ = "sales_items"

    sales_item_id = Column(Integer, primary_key=True, index=True)
    sales_id = Column(Integer, ForeignKey("sales.sales_id"), nullable=False)
    product_id = Column(Integer, ForeignKey("products.product_id"), nullable=False)
    quantity_sold = Column(Integer, nullable=False)
    unit_price = Column(Numeric(10, 2), nullable=False)
    item_total = Column(Numeric(12, 2), nullable=False)

    sale = relationship("Sale", back_populates="items")
    product = relationship("Product")
    returns = relationship("Return", back_populates="sales_item")

class Supplier(Base):
    __tablename__ = "suppliers"

    supplier_id = Column(Integer, primary_key=True, index=True)
    supplier_name = Column(String(150), nullable=False)
    email = Column(String(150), unique=True, nullable=False)
    address = Column(Text)
    created_at = Column(DateTime(timezone=True), default=utcnow)

    contact = relationship("SupplierContact", back_populates="supplier", uselist=False)

class SupplierContact(Base):
    __tablename__ = "supplier_contact"

    contact_id = Column(Integer, primary_key=True, index=True)
    supplier_id = Column(Integer, ForeignKey("suppliers.supplier_id"), unique=True, nullable=False)
    contact_person = Column(String(150))
    phone_number = Column(String(30))

    supplier = relationship("Supplier", back_populates="contact")

class PurchaseOrder(Base):
    __tablename__ = "purchase_orders"
    __table_args__ = (
        CheckConstraint("quantity_ordered > 0", name="ck_purchase_orders_quantity"),
    )

    order_id = Column(Integer, primary_key=True, index=True)
    supplier_id = Column(Integer, ForeignKey("suppliers.supplier_id"), nullable=False)
    product_id = Column(Integer, ForeignKey("products.product_id"), nullable=False)
    quantity_ordered = Column(Integer, nullable=False)
    order_status = Column(Enum(OrderStatus), nullable=False, default=OrderStatus.pending)
    order_date = Column(DateTime(timezone=True), default=utcnow)

    supplier = relationship("Supplier")
    product = relationship("Product")

class Return(Base):
    __tablename__ = "returns_"

    return_id = Column(Integer, primary_key=True, index=True)
    sales_item_id = Column(Integer, ForeignKey("sales_items.sales_item_id"), nullable=False)
    quantity_returned = Column(Integer, nullable=False)
    return_reason = Column(Text)
    refund_amount = Column(Numeric(12, 2), nullable=False)
    return_status = Column(String(30), nullable=False, default="pending")
    return_date = Column(DateTime(timezone=True), default=utcnow)

    sales_item = relationship("SalesItem", back_populates="returns")

class Report(Base):
    __tablename__ = "reports"

    report_id = Column(Integer, primary_key=True, index=True)
    report_name = Column(String(200), nullable=False)
    generated_by_user_id = Column(Integer, ForeignKey("users.user_id"), nullable=True)
    report_data = Column(JSON, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow)

    generated_by = relationship("User")
