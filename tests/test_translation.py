#!/usr/bin/env python3
import os
import sys
import unittest
from unittest import mock

from langdetect import LangDetectException

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))
sys.path.insert(0, os.path.dirname(__file__))
from inventory_backend.app.controller import GREETING_REPLY, ChatController
from inventory_backend.app.translation import Translator, normalize_text, standardise_lang_code
from inventory_backend.schemas.io_models import ProductFilter
from inventory_backend.utils.errors import UpstreamServiceError
from inventory_fixtures import StubClient, StubExtractor, make_session_factory


class TestLanguageDetection(unittest.TestCase):
    def setUp(self):
        self.translator = Translator(client=StubClient(), working_language="en")

    def test_blank_input_defaults_to_english(self):
        self.assertEqual(self.translator.detect_language(""), "en")
        self.assertEqual(self.translator.detect_language("   "), "en")

    def test_short_messages_are_detected(self):
        with mock.patch("inventory_backend.app.translation.detect", return_value="es") as detect:
            self.assertEqual(self.translator.detect_language("Hola amigos"), "es")
        detect.assert_called_once_with("Hola amigos")

    def test_detects_spanish(self):
        text = "Quiero saber cuántos productos tenemos en el almacén y cuáles son los más baratos"
        self.assertEqual(self.translator.detect_language(text), "es")

    def test_detection_failure_defaults_to_english(self):
        with mock.patch("inventory_backend.app.translation.detect",
                        side_effect=LangDetectException(0, "no features")):
            self.assertEqual(self.translator.detect_language("12345 67890 11121"), "en")

    def test_regional_codes_are_reduced(self):
        self.assertEqual(standardise_lang_code("zh-CN"), "zh")
        self.assertEqual(standardise_lang_code(None), "en")

    def test_normalize_text(self):
        self.assertEqual(normalize_text("  How   MANY\nproducts "), "how many products")


class TestTranslate(unittest.TestCase):
    def test_same_language_skips_the_model(self):
        client = StubClient()
        translator = Translator(client=client, working_language="en")
        self.assertEqual(translator.to_working_language("hello there friend", "en"), "hello there friend")
        self.assertEqual(client.prompts, [])

    def test_translates_both_ways(self):
        client = StubClient(["how many products", "Hay 5 productos"])
        translator = Translator(client=client, working_language="en")
        self.assertEqual(translator.to_working_language("cuántos productos", "es"), "how many products")
        self.assertEqual(translator.from_working_language("There are 5 products", "es"), "Hay 5 productos")
        self.assertIn('"en"', client.prompts[0])
        self.assertIn('"es"', client.prompts[1])

    def test_failure_returns_original_text(self):
        translator = Translator(client=StubClient([UpstreamServiceError("down")]))
        self.assertEqual(translator.translate("bonjour tout le monde", "en"), "bonjour tout le monde")

    def test_empty_translation_returns_original_text(self):
        translator = Translator(client=StubClient(["   "]))
        self.assertEqual(translator.translate("bonjour tout le monde", "en"), "bonjour tout le monde")


class TestShortForeignMessages(unittest.TestCase):
    def setUp(self):
        self.db = make_session_factory()()

    def tearDown(self):
        self.db.close()

    def test_short_greeting_is_translated_both_ways(self):
        client = StubClient(["hello friends", "¡Hola! ¿En qué puedo ayudarte?"])
        controller = ChatController(client=client, translator=Translator(client=client, working_language="en"),
                                    extractor=StubExtractor(ProductFilter()))
        with mock.patch("inventory_backend.app.translation.detect", return_value="es"):
            reply = controller.handle(self.db, "Hola amigos")
        self.assertEqual(reply, "¡Hola! ¿En qué puedo ayudarte?")
        self.assertIn("Hola amigos", client.prompts[0])
        self.assertIn(GREETING_REPLY, client.prompts[1])


if __name__ == '__main__':
    unittest.main()
