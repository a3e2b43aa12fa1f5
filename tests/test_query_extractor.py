#!/usr/bin/env python3
import os
import sys
import unittest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))
sys.path.insert(0, os.path.dirname(__file__))
from inventory_backend.nlu.query_extractor import QueryParameterExtractor, parse_json_object
from inventory_backend.schemas.io_models import ProductFilter
from inventory_backend.utils.errors import UpstreamServiceError
from inventory_fixtures import StubClient


class TestParseJsonObject(unittest.TestCase):
    def test_plain_object(self):
        self.assertEqual(parse_json_object('{"max_price": 10}'), {"max_price": 10})

    def test_code_fence_and_chatter(self):
        raw = '```json\n{"product_name": "mouse"}\n```'
        self.assertEqual(parse_json_object(raw), {"product_name": "mouse"})
        self.assertEqual(parse_json_object('Sure! {"min_price": 5} hope that helps'), {"min_price": 5})

    def test_rejects_non_objects(self):
        self.assertIsNone(parse_json_object("[1, 2]"))
        self.assertIsNone(parse_json_object("no json here"))
        self.assertIsNone(parse_json_object('{"broken": '))
        self.assertIsNone(parse_json_object(None))


class TestProductFilter(unittest.TestCase):
    def test_wrong_types_become_null(self):
        f = ProductFilter(product_name=12, min_price=True, max_price="cheap", product_category=["x"])
        self.assertTrue(f.is_empty())

    def test_null_strings(self):
        f = ProductFilter(product_name="null", product_category="None")
        self.assertIsNone(f.product_name)
        self.assertIsNone(f.product_category)

    def test_price_strings_and_bounds(self):
        f = ProductFilter(min_price="$1,000", max_price=float("nan"))
        self.assertEqual(f.min_price, 1000.0)
        self.assertIsNone(f.max_price)
        self.assertIsNone(ProductFilter(max_price=-5).max_price)
        self.assertIsNone(ProductFilter(max_price=float("inf")).max_price)

    def test_inverted_range_is_swapped(self):
        f = ProductFilter(min_price=50, max_price=10)
        self.assertEqual((f.min_price, f.max_price), (10.0, 50.0))


class TestQueryParameterExtractor(unittest.TestCase):
    def test_valid_reply(self):
        client = StubClient(['{"product_name": null, "min_price": null, "max_price": 20, "product_category": "electronics"}'])
        f = QueryParameterExtractor(client).extract("electronics under $20")
        self.assertEqual(f.max_price, 20.0)
        self.assertEqual(f.product_category, "electronics")
        self.assertIsNone(f.product_name)
        self.assertIn("electronics under $20", client.prompts[0])

    def test_malformed_reply_gives_empty_filter(self):
        f = QueryParameterExtractor(StubClient(["I think you want cheap stuff"])).extract("cheap stuff")
        self.assertTrue(f.is_empty())

    def test_upstream_failure_gives_empty_filter(self):
        f = QueryParameterExtractor(StubClient([UpstreamServiceError("timeout")])).extract("mice")
        self.assertTrue(f.is_empty())

    def test_extra_keys_ignored(self):
        f = QueryParameterExtractor(StubClient(['{"product_name": "chair", "sql": "DROP TABLE"}'])).extract("chair")
        self.assertEqual(f.model_dump(), {"product_name": "chair", "min_price": None,
                                          "max_price": None, "product_category": None})


if __name__ == '__main__':
    unittest.main()
