#!/usr/bin/env python3
import os
import sys
import unittest
from datetime import datetime, timedelta
from decimal import Decimal
from unittest import mock

from pydantic import ValidationError as PydanticValidationError

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))
sys.path.insert(0, os.path.dirname(__file__))
from inventory_backend.data.models import InventoryAlert, Product, Sale, SalesItem
from inventory_backend.schemas.order_models import SaleCreate, SaleUpdate
from inventory_backend.services import sales_service
from inventory_backend.utils.errors import BusinessRuleError, ConflictError, NotFoundError
from inventory_fixtures import add_customer, add_product, add_user, make_session_factory


class SalesTestCase(unittest.TestCase):
    def setUp(self):
        self.db = make_session_factory()()
        self.user = add_user(self.db)
        self.mouse = add_product(self.db, "Wireless Mouse", "19.99", stock=50, threshold=10)
        self.desk = add_product(self.db, "Standing Desk", "399.00", stock=12, threshold=10)

    def tearDown(self):
        self.db.close()

    def sale(self, *items, **extra):
        payload = dict(sold_by_user_id=self.user.user_id, payment_method="card", payment_status="completed",
                       items=[dict(product_id=p.product_id, quantity_sold=q, unit_price=p.unit_price)
                              for p, q in items])
        payload.update(extra)
        return sales_service.create_sale(self.db, SaleCreate(**payload))

    def stock(self, product):
        self.db.expire_all()
        return self.db.get(Product, product.product_id).current_stock

    def alerts(self, product):
        return self.db.query(InventoryAlert).filter(InventoryAlert.product_id == product.product_id).all()


class TestCreateSale(SalesTestCase):
    def test_totals_and_stock_decrement(self):
        result = self.sale((self.mouse, 3))
        self.assertEqual(result["subtotal"], Decimal("59.97"))
        self.assertEqual(result["tax_amount"], Decimal("3.00"))
        self.assertEqual(result["total_amount"], Decimal("62.97"))
        self.assertEqual(len(result["items"]), 1)
        self.assertEqual(result["items"][0]["item_total"], Decimal("59.97"))
        self.assertEqual(self.stock(self.mouse), 47)

    def test_multiple_items_and_repeated_product(self):
        result = self.sale((self.mouse, 2), (self.desk, 1), (self.mouse, 1))
        self.assertEqual(result["subtotal"], Decimal("458.97"))
        self.assertEqual(len(result["items"]), 3)
        self.assertEqual(self.stock(self.mouse), 47)
        self.assertEqual(self.stock(self.desk), 11)

    def test_flat_single_item_shape(self):
        payload = SaleCreate(sold_by_user_id=self.user.user_id, payment_method="cash", payment_status="completed",
                             product_id=self.mouse.product_id, quantity_sold=1, unit_price="19.99")
        result = sales_service.create_sale(self.db, payload)
        self.assertEqual(result["total_amount"], Decimal("20.99"))

    def test_validation_happens_before_the_database(self):
        with self.assertRaises(PydanticValidationError):
            SaleCreate(sold_by_user_id=1, payment_method="cash", payment_status="completed",
                       items=[dict(product_id=1, quantity_sold=0, unit_price=1)])
        with self.assertRaises(PydanticValidationError):
            SaleCreate(sold_by_user_id=1, payment_method="cash", payment_status="completed")

    def test_insufficient_stock_rolls_everything_back(self):
        with self.assertRaises(BusinessRuleError) as ctx:
            self.sale((self.mouse, 5), (self.desk, 13))
        self.assertEqual(ctx.exception.status_code, 400)
        self.assertIn("Standing Desk", ctx.exception.message)
        self.assertIn("Available: 12", ctx.exception.message)
        self.assertEqual(self.stock(self.mouse), 50)
        self.assertEqual(self.stock(self.desk), 12)
        self.assertEqual(self.db.query(Sale).count(), 0)
        self.assertEqual(self.db.query(SalesItem).count(), 0)

    def test_unknown_product(self):
        payload = SaleCreate(sold_by_user_id=self.user.user_id, payment_method="cash", payment_status="completed",
                             items=[dict(product_id=999, quantity_sold=1, unit_price=1)])
        with self.assertRaises(NotFoundError):
            sales_service.create_sale(self.db, payload)

    def test_unknown_customer_is_a_bad_request(self):
        with self.assertRaises(ConflictError) as ctx:
            self.sale((self.mouse, 1), customer_id=999)
        self.assertEqual(ctx.exception.status_code, 400)
        self.assertEqual(self.stock(self.mouse), 50)

    def test_customer_name_in_result(self):
        customer = add_customer(self.db, "Jane Buyer")
        result = self.sale((self.mouse, 1), customer_id=customer.customer_id)
        self.assertEqual(result["customer_name"], "Jane Buyer")
        self.assertEqual(result["sold_by_user_name"], "Shop Clerk")


class TestLowStockAlerts(SalesTestCase):
    def test_alert_raised_once_and_timestamp_advances(self):
        first = datetime(2026, 1, 1, 9, 0, 0)
        second = first + timedelta(hours=2)

        with mock.patch.object(sales_service, "utcnow", return_value=first):
            self.sale((self.desk, 3))
        alerts = self.alerts(self.desk)
        self.assertEqual(len(alerts), 1)
        self.assertEqual(alerts[0].threshold_quantity, 10)
        self.assertEqual(alerts[0].alert_date.replace(tzinfo=None), first)

        with mock.patch.object(sales_service, "utcnow", return_value=second):
            self.sale((self.desk, 1))
        self.db.expire_all()
        alerts = self.alerts(self.desk)
        self.assertEqual(len(alerts), 1)
        self.assertEqual(alerts[0].alert_date.replace(tzinfo=None), second)

    def test_stock_at_threshold_counts_as_low(self):
        self.sale((self.desk, 2))
        self.assertEqual(self.stock(self.desk), 10)
        self.assertEqual(len(self.alerts(self.desk)), 1)

    def test_no_alert_above_threshold(self):
        self.sale((self.mouse, 1))
        self.assertEqual(self.alerts(self.mouse), [])

    def test_alert_cleared_when_restocked(self):
        self.sale((self.desk, 5))
        self.assertEqual(len(self.alerts(self.desk)), 1)
        product = self.db.get(Product, self.desk.product_id)
        product.current_stock += 20
        sales_service.refresh_low_stock_alert(self.db, product)
        self.db.commit()
        self.assertEqual(self.alerts(self.desk), [])


class TestSaleQueries(SalesTestCase):
    def test_update_payment_fields_only(self):
        created = self.sale((self.mouse, 2))
        updated = sales_service.update_sale(self.db, created["sales_id"],
                                            SaleUpdate(payment_method="cash", payment_status="refunded"))
        self.assertEqual(updated["payment_status"], "refunded")
        self.assertEqual(updated["total_amount"], created["total_amount"])

    def test_update_missing_sale(self):
        with self.assertRaises(NotFoundError):
            sales_service.update_sale(self.db, 404, SaleUpdate(payment_method="cash", payment_status="x"))

    def test_list_and_get(self):
        created = self.sale((self.mouse, 1))
        self.assertEqual([s["sales_id"] for s in sales_service.list_sales(self.db)], [created["sales_id"]])
        self.assertEqual(sales_service.get_sale(self.db, created["sales_id"])["items"][0]["product_name"],
                         "Wireless Mouse")
        with self.assertRaises(NotFoundError):
            sales_service.get_sale(self.db, 12345)


if __name__ == '__main__':
    unittest.main()
