import unittest

from services.crm_entities import CUSTOM_LABELS_KEY, LANGUAGE_KEY
from services.crm_errors import GenerationError, PermissionDeniedError
from services.crm_store import MemoryBlobStore
from services.i18n_service import Translator


class TranslatorTests(unittest.TestCase):
    def setUp(self):
        self.store = MemoryBlobStore()
        self.translator = Translator(self.store)

    def test_translate_nested_key(self):
        self.assertEqual(self.translator.translate("customers.title"), "Customers")

    def test_interpolation(self):
        self.assertEqual(
            self.translator.translate("customers.import_failed", message="bad file"),
            "Failed to import customers: bad file",
        )

    def test_missing_key_returns_key(self):
        self.assertEqual(self.translator.translate("nope.missing"), "nope.missing")
        self.assertEqual(self.translator.translate("customers"), "customers")

    def test_portuguese_falls_back_to_english(self):
        self.assertTrue(self.translator.change_language("pt"))
        self.assertEqual(self.translator.translate("customers.title"), "Clientes")
        self.assertEqual(self.translator.translate("products.title"), "Products")

    def test_unknown_language_is_ignored(self):
        self.assertFalse(self.translator.change_language("xx"))
        self.assertEqual(self.translator.language, "en")

    def test_language_persists(self):
        self.translator.change_language("pt")
        self.assertEqual(self.store.load(LANGUAGE_KEY), "pt")
        self.assertEqual(Translator(self.store).language, "pt")

    def test_custom_label_wins_and_blank_removes_it(self):
        self.translator.set_custom_label("sidebar.customers", "Clients")
        self.assertEqual(self.translator.get_label("sidebar.customers"), "Clients")
        self.assertEqual(self.store.load(CUSTOM_LABELS_KEY, {}), {"sidebar.customers": "Clients"})
        self.translator.set_custom_label("sidebar.customers", "   ")
        self.assertEqual(self.translator.get_label("sidebar.customers"), "Customers")

    def test_non_text_custom_labels_are_dropped_on_load(self):
        store = MemoryBlobStore({CUSTOM_LABELS_KEY: '{"sidebar.customers": 5, "sidebar.deals": "Bids"}'})
        translator = Translator(store)
        self.assertEqual(translator.custom_labels, {"sidebar.deals": "Bids"})
        self.assertEqual(translator.get_label("sidebar.customers"), "Customers")

    def test_get_label_fallback_order(self):
        self.assertEqual(self.translator.get_label("sidebar.unknown", "Unknown"), "Unknown")
        self.assertEqual(self.translator.get_label("sidebar.unknown"), "sidebar.unknown")

    def test_reset_custom_labels(self):
        self.translator.set_custom_label("commissions.title", "Bonuses")
        self.translator.reset_custom_labels()
        self.assertEqual(self.translator.custom_labels, {})
        self.assertEqual(Translator(self.store).custom_labels, {})

    def test_errors_render_through_translator(self):
        self.assertEqual(
            PermissionDeniedError("nope").render(self.translator),
            "Permission Denied: You do not have the necessary permissions for this action.",
        )
        self.assertEqual(GenerationError("quota exceeded").render(self.translator), "quota exceeded")


if __name__ == "__main__":
    unittest.main()
