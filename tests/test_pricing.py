"""
Draft pricing against catalogue rows (no database needed).
"""
import unittest

from models import Service, ServiceOption
from services.pricing import (
    calculate_total_amount,
    convert_price,
    format_price,
    option_price,
    service_price,
)


def _catalog():
    services = {
        "copy": Service(service_id="copy", name="Copy", base_price=40.0, price_usd=50.0, price_gbp=None),
        "poa": Service(service_id="poa", name="POA", base_price=100.0, price_usd=None, price_gbp=None),
    }
    options = {
        "translation": ServiceOption(option_id="translation", name="Translation", additional_price=20.0, price_usd=None, price_gbp=15.0),
    }
    return services, options


class TestConversion(unittest.TestCase):
    def test_eur_unchanged(self):
        self.assertEqual(convert_price(29.95, "EUR"), 29.95)

    def test_fallback_rate_rounded_to_cents(self):
        self.assertEqual(convert_price(10, "USD"), 11.0)
        self.assertEqual(convert_price(19.99, "GBP"), 16.99)
        self.assertEqual(convert_price(10, "JPY"), 1650)

    def test_unknown_currency_rate_one(self):
        self.assertEqual(convert_price(12.5, "XYZ"), 12.5)

    def test_format(self):
        self.assertEqual(format_price(12.5, "EUR"), "€12.50")
        self.assertEqual(format_price(1650.4, "JPY"), "¥1650")
        self.assertEqual(format_price(3, "SEK"), "SEK3.00")


class TestUnitPrices(unittest.TestCase):
    def test_currency_column_wins_over_conversion(self):
        services, options = _catalog()
        self.assertEqual(service_price(services["copy"], "USD"), 50.0)
        self.assertEqual(service_price(services["copy"], "GBP"), 34.0)
        self.assertEqual(option_price(options["translation"], "GBP"), 15.0)
        self.assertEqual(option_price(options["translation"], "USD"), 22.0)

    def test_missing_records_cost_nothing(self):
        self.assertEqual(service_price(None, "EUR"), 0)
        self.assertEqual(option_price(None, "EUR"), 0)


class TestTotal(unittest.TestCase):
    def test_documents_options_and_postal(self):
        services, options = _catalog()
        form = {
            "selectedServices": ["copy", "poa"],
            "serviceDocuments": {
                "copy": [{"name": "a.pdf", "selectedOptions": ["translation"]}, {"name": "b.pdf"}],
                "poa": [{"name": "c.pdf", "selectedOptions": ["translation", "unknown"]}],
            },
            "deliveryMethod": "postal",
        }
        # 2 * 40 + 20 + 100 + 20 + 29.95
        self.assertEqual(calculate_total_amount(form, services, options, "EUR"), 249.95)

    def test_email_delivery_has_no_surcharge(self):
        services, options = _catalog()
        form = {
            "selectedServices": ["copy"],
            "serviceDocuments": {"copy": [{"name": "a.pdf"}]},
            "deliveryMethod": "email",
        }
        self.assertEqual(calculate_total_amount(form, services, options, "EUR"), 40.0)
        self.assertEqual(calculate_total_amount(form, services, options, "USD"), 50.0)

    def test_unknown_service_and_empty_draft(self):
        services, options = _catalog()
        self.assertEqual(calculate_total_amount({"selectedServices": ["ghost"]}, services, options, "EUR"), 0)
        self.assertEqual(calculate_total_amount({}, services, options, "EUR"), 0)


if __name__ == "__main__":
    unittest.main()
