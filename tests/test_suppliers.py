#!/usr/bin/env python3
import os
import sys
import unittest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))
sys.path.insert(0, os.path.dirname(__file__))
from inventory_backend.data.models import PurchaseOrder, Supplier, SupplierContact
from inventory_backend.schemas.catalog_models import SupplierCreate, SupplierUpdate
from inventory_backend.services import supplier_service
from inventory_backend.utils.errors import ConflictError, NotFoundError
from inventory_fixtures import add_product, make_session_factory


class TestSuppliers(unittest.TestCase):
    def setUp(self):
        self.db = make_session_factory()()

    def tearDown(self):
        self.db.close()

    def create(self, email="orders@techsource.example", **contact):
        return supplier_service.create_supplier(self.db, SupplierCreate(
            supplier_name="TechSource", email=email, address="12 Circuit Rd", **contact))

    def contacts(self):
        return self.db.query(SupplierContact).all()

    def test_create_with_contact(self):
        supplier = self.create(contact_person="Dana", phone_number="555-0101")
        self.assertEqual(supplier["contact_person"], "Dana")
        self.assertEqual(len(self.contacts()), 1)

    def test_create_without_contact(self):
        supplier = self.create(contact_person="", phone_number="  ")
        self.assertIsNone(supplier["contact_id"])
        self.assertEqual(self.contacts(), [])

    def test_duplicate_email(self):
        self.create()
        with self.assertRaises(ConflictError) as ctx:
            self.create()
        self.assertEqual(ctx.exception.status_code, 409)
        self.assertEqual(self.db.query(Supplier).count(), 1)

    def test_update_with_empty_contact_fields_leaves_contact(self):
        supplier = self.create(contact_person="Dana", phone_number="555-0101")
        updated = supplier_service.update_supplier(self.db, supplier["supplier_id"], SupplierUpdate(
            supplier_name="TechSource Ltd", contact_person="", phone_number=""))
        self.assertEqual(updated["supplier_name"], "TechSource Ltd")
        self.assertEqual(updated["contact_person"], "Dana")
        self.assertEqual(updated["phone_number"], "555-0101")

    def test_update_inserts_missing_contact(self):
        supplier = self.create()
        updated = supplier_service.update_supplier(self.db, supplier["supplier_id"],
                                                   SupplierUpdate(phone_number="555-0199"))
        self.assertEqual(updated["phone_number"], "555-0199")
        self.assertIsNone(updated["contact_person"])
        self.assertEqual(len(self.contacts()), 1)

    def test_update_changes_only_given_contact_field(self):
        supplier = self.create(contact_person="Dana", phone_number="555-0101")
        updated = supplier_service.update_supplier(self.db, supplier["supplier_id"],
                                                   SupplierUpdate(contact_person="Sam"))
        self.assertEqual(updated["contact_person"], "Sam")
        self.assertEqual(updated["phone_number"], "555-0101")
        self.assertEqual(len(self.contacts()), 1)

    def test_update_missing(self):
        with self.assertRaises(NotFoundError):
            supplier_service.update_supplier(self.db, 5, SupplierUpdate(address="x"))

    def test_delete_removes_contact_too(self):
        supplier = self.create(contact_person="Dana")
        supplier_service.delete_supplier(self.db, supplier["supplier_id"])
        self.assertEqual(self.db.query(Supplier).count(), 0)
        self.assertEqual(self.contacts(), [])
        with self.assertRaises(NotFoundError):
            supplier_service.delete_supplier(self.db, supplier["supplier_id"])

    def test_delete_blocked_by_purchase_orders(self):
        supplier = self.create(contact_person="Dana")
        product = add_product(self.db)
        self.db.add(PurchaseOrder(supplier_id=supplier["supplier_id"], product_id=product.product_id,
                                  quantity_ordered=5))
        self.db.commit()

        with self.assertRaises(ConflictError) as ctx:
            supplier_service.delete_supplier(self.db, supplier["supplier_id"])
        self.assertEqual(ctx.exception.status_code, 409)
        self.assertEqual(self.db.query(Supplier).count(), 1)
        self.assertEqual(len(self.contacts()), 1)


if __name__ == '__main__':
    unittest.main()
