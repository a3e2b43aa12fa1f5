"""Shared helpers for the test-suite: an isolated in-memory database and stub clients."""
from decimal import Decimal

from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from inventory_backend.data.database import build_engine, create_tables
from inventory_backend.data.models import Customer, Product, ProductCategory, Supplier, SupplierContact, User
from inventory_backend.utils.errors import UpstreamServiceError
from inventory_backend.utils.security import hash_password


def make_session_factory():
    """One shared in-memory SQLite connection per factory, foreign keys enforced."""
    engine = build_engine("sqlite://", poolclass=StaticPool)
    create_tables(bind=engine)
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


def add_category(db, name="Electronics"):
    category = ProductCategory(category_name=name)
    db.add(category)
    db.commit()
    return category


def add_product(db, name="Wireless Mouse", price="19.99", stock=50, threshold=10, category=None):
    product = Product(
        category_id=category.category_id if category else None,
        product_name=name,
        unit_price=Decimal(price),
        current_stock=stock,
        low_stock_threshold=threshold,
    )
    db.add(product)
    db.commit()
    return product


def add_user(db, email="clerk@example.com", password="secret"):
    user = User(full_name="Shop Clerk", email=email, password_hash=hash_password(password))
    db.add(user)
    db.commit()
    return user


def add_customer(db, name="Jane Buyer"):
    customer = Customer(full_name=name)
    db.add(customer)
    db.commit()
    return customer


def add_supplier(db, name="TechSource", email="orders@techsource.example", contact_person=None, phone=None):
    supplier = Supplier(supplier_name=name, email=email)
    db.add(supplier)
    if contact_person or phone:
        supplier.contact = SupplierContact(contact_person=contact_person, phone_number=phone)
    db.commit()
    return supplier


class StubClient:
    """Stands in for GenerationClient; replays canned replies in order."""

    def __init__(self, replies=None):
        self.replies = list(replies or [])
        self.prompts = []

    @property
    def available(self):
        return True

    def generate_answer(self, prompt, **kwargs):
        self.prompts.append(prompt)
        if not self.replies:
            raise UpstreamServiceError("no stubbed reply left")
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return reply


class StubTranslator:
    """Translator double: fixed detected language, tagged translations."""

    def __init__(self, language="en"):
        self.language = language
        self.calls = []

    def detect_language(self, text):
        return self.language

    def to_working_language(self, text, source_language):
        self.calls.append(("to", text, source_language))
        return text

    def from_working_language(self, text, target_language):
        self.calls.append(("from", text, target_language))
        if target_language == "en":
            return text
        return f"[{target_language}] {text}"


class StubExtractor:
    def __init__(self, product_filter):
        self.product_filter = product_filter
        self.messages = []

    def extract(self, message):
        self.messages.append(message)
        return self.product_filter
