#!/usr/bin/env python3
import os
import sys
import unittest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))
from inventory_backend.nlu.intent_classifier import Route, classify


class TestIntentClassifier(unittest.TestCase):
    def assertRoute(self, message, route):
        self.assertEqual(classify(message).route, route, message)

    def test_greetings(self):
        self.assertRoute("hello", Route.greeting)
        self.assertRoute("hey there", Route.greeting)
        self.assertRoute("good morning!", Route.greeting)

    def test_greeting_needs_a_whole_word(self):
        # "this" and "which" contain "hi"
        self.assertRoute("which of this is cheaper", Route.general)

    def test_product_count(self):
        self.assertRoute("how many products do we have?", Route.product_count)
        self.assertRoute("give me the count of total products", Route.product_count)

    def test_count_wins_over_search_tokens(self):
        # "category" alone would route to product search
        self.assertRoute("how many products are in each category", Route.product_count)

    def test_product_names_only(self):
        self.assertRoute("list product names", Route.product_names_only)
        self.assertRoute("just the names please", Route.product_names_only)

    def test_supplier_count(self):
        self.assertRoute("how many suppliers do we work with", Route.supplier_count)

    def test_purchase_order_status_with_id(self):
        match = classify("what is the status of purchase order 42")
        self.assertEqual(match.route, Route.purchase_order_status)
        self.assertEqual(match.order_id, 42)

        match = classify("po #7 status?")
        self.assertEqual(match.route, Route.purchase_order_status)
        self.assertEqual(match.order_id, 7)

    def test_purchase_order_status_without_id(self):
        match = classify("what's the status of the purchase order")
        self.assertEqual(match.route, Route.purchase_order_status)
        self.assertIsNone(match.order_id)

    def test_total_sales(self):
        self.assertRoute("what is the total sales amount", Route.total_sales)

    def test_product_search(self):
        self.assertRoute("show me products under $20", Route.product_search)
        self.assertRoute("products between 10 and 50 dollars", Route.product_search)
        self.assertRoute("what is the price of the office chair", Route.product_search)
        self.assertRoute("anything in the furniture category?", Route.product_search)

    def test_general_fallback(self):
        self.assertRoute("what is inventory turnover?", Route.general)
        self.assertRoute("", Route.general)
        self.assertRoute(None, Route.general)


if __name__ == '__main__':
    unittest.main()
