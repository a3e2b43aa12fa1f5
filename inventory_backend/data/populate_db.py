from decimal import Decimal

from .database import SessionLocal, create_tables
from .models import (Customer, Product, ProductCategory, Supplier, SupplierContact, User,
                     UserRole)
from ..services.sales_service import refresh_low_stock_alert
from ..utils.security import hash_password

CATEGORIES = [
    ("Electronics", "Devices and accessories"),
    ("Office Supplies", "Paper, pens and desk items"),
    ("Furniture", "Desks, chairs and storage"),
]

# (category, name, description, unit price, opening stock)
PRODUCTS = [
    ("Electronics", "Wireless Mouse", "2.4GHz ergonomic mouse", "19.99", 120),
    ("Electronics", "USB-C Charger", "65W fast charger", "34.50", 45),
    ("Electronics", "Mechanical Keyboard", "Tenkeyless, brown switches", "89.00", 8),
    ("Office Supplies", "A4 Paper Ream", "500 sheets, 80gsm", "6.25", 300),
    ("Office Supplies", "Gel Pen Pack", "Pack of 10, black ink", "4.99", 9),
    ("Furniture", "Office Chair", "Mesh back, adjustable arms", "149.00", 15),
    ("Furniture", "Standing Desk", "Electric, 140x70cm", "399.00", 4),
]

SUPPLIERS = [
    ("TechSource Ltd", "orders@techsource.example", "12 Circuit Rd", "Dana Reyes", "555-0101"),
    ("PaperWorks", "sales@paperworks.example", "8 Mill Lane", None, None),
    ("Office Interiors", "hello@officeinteriors.example", "40 Oak Ave", "Sam Patel", "555-0199"),
]


def populate_inventory():
    """Seed categories, products, suppliers, an admin user and a walk-in customer."""
    # Ensure tables are created
    create_tables()

    db = SessionLocal()
    try:
        if db.query(Product).count() > 0:
            print("Products table is not empty. Skipping population.")
            return

        categories = {}
        for name, description in CATEGORIES:
            categories[name] = ProductCategory(category_name=name, description=description)
            db.add(categories[name])
        db.flush()

        products = []
        for category, name, description, price, stock in PRODUCTS:
            products.append(Product(
                category_id=categories[category].category_id,
                product_name=name,
                description=description,
                unit_price=Decimal(price),
                current_stock=stock,
            ))
        db.add_all(products)
        db.flush()
        # Opening stock already at or below threshold starts with an alert
        for product in products:
            refresh_low_stock_alert(db, product)

        for name, email, address, person, phone in SUPPLIERS:
            supplier = Supplier(supplier_name=name, email=email, address=address)
            db.add(supplier)
            if person or phone:
                supplier.contact = SupplierContact(contact_person=person, phone_number=phone)

        db.add(User(full_name="Admin", email="admin@inventory.example",
                    password_hash=hash_password("admin123"), role=UserRole.admin))
        db.add(Customer(full_name="Walk-in Customer"))

        db.commit()
        print("Successfully populated the inventory tables.")
    except Exception as e:
        db.rollback()
        print(f"Error populating inventory tables: {e}")
        raise
    finally:
        db.close()

if __name__ == "__main__":
    populate_inventory()
