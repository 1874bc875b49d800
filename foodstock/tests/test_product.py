import unittest
import uuid
from datetime import datetime, timedelta

from foodstock.domain.Product import (
    ExpirationStatus, Product, ProductCategory, ProductLocation, ProductSortOption, days_between
)

NOW = datetime(2026, 10, 19, 12, 0)


def make_product(name="Lait", expires_in_days=5, **overrides):
    data = dict(
        name=name, quantity=1.0, unit="L", category=ProductCategory.DAIRY,
        location=ProductLocation.REFRIGERATOR, arrival_date=NOW - timedelta(days=1),
        expiration_date=NOW + timedelta(days=expires_in_days), lot_number="LOT0001",
    )
    data.update(overrides)
    return Product(**data)


class TestProductExpiration(unittest.TestCase):

    def test_days_between_truncates_toward_zero(self):
        self.assertEqual(days_between(NOW, NOW + timedelta(days=2, hours=23)), 2)
        self.assertEqual(days_between(NOW, NOW - timedelta(hours=12)), 0)
        self.assertEqual(days_between(NOW, NOW - timedelta(days=1, hours=1)), -1)

    def test_expired(self):
        self.assertTrue(make_product(expires_in_days=-0.01).is_expired(NOW))
        self.assertFalse(make_product(expires_in_days=0).is_expired(NOW))

    def test_soon_expired_window(self):
        for days, expected in ((0, True), (1, True), (3, True), (3.9, True), (4, False), (-1, False)):
            with self.subTest(days=days):
                self.assertEqual(make_product(expires_in_days=days).is_soon_expired(NOW), expected)

    def test_custom_threshold(self):
        self.assertTrue(make_product(expires_in_days=6).is_soon_expired(NOW, threshold_days=7))

    def test_expiration_status(self):
        self.assertEqual(make_product(expires_in_days=-1).expiration_status(NOW), ExpirationStatus.EXPIRED)
        self.assertEqual(make_product(expires_in_days=2).expiration_status(NOW), ExpirationStatus.SOON_EXPIRED)
        self.assertEqual(make_product(expires_in_days=20).expiration_status(NOW), ExpirationStatus.FRESH)
        self.assertLess(ExpirationStatus.EXPIRED.priority, ExpirationStatus.FRESH.priority)


class TestProductValue(unittest.TestCase):

    def test_generated_ids_are_unique(self):
        self.assertNotEqual(make_product().id, make_product().id)

    def test_equality_is_structural(self):
        product = make_product()
        self.assertEqual(product, product.replace())
        self.assertNotEqual(product, product.replace(quantity=2.0))
        self.assertEqual(product.replace(quantity=2.0).id, product.id)

    def test_formatted_quantity(self):
        self.assertEqual(make_product(quantity=2.5, unit="kg").formatted_quantity, "2.5 kg")
        self.assertEqual(make_product(quantity=float("nan")).formatted_quantity, "0.0 L")

    def test_dict_round_trip(self):
        product = make_product(category=ProductCategory.FROZEN, location=ProductLocation.FREEZER)
        data = product.to_dict()
        self.assertEqual(data["category"], "Surgelés")
        self.assertEqual(Product.from_dict(data), product)

    def test_from_dict_rejects_unknown_category(self):
        data = make_product().to_dict()
        data["category"] = "Bonbons"
        with self.assertRaises(ValueError):
            Product.from_dict(data)

    def test_string_enums_are_coerced(self):
        product = make_product(category="Viandes", location="Placard")
        self.assertIs(product.category, ProductCategory.MEAT)
        self.assertIs(product.location, ProductLocation.CUPBOARD)


class TestProductSortOption(unittest.TestCase):

    def test_sorting(self):
        apple = make_product("Pomme", 10, category=ProductCategory.FRUITS, location=ProductLocation.PANTRY)
        beef = make_product("Boeuf", 2, category=ProductCategory.MEAT, location=ProductLocation.FREEZER)
        milk = make_product("Lait", 5, arrival_date=NOW - timedelta(days=5))
        products = [apple, beef, milk]
        self.assertEqual(ProductSortOption.NAME.sort(products), [beef, milk, apple])
        self.assertEqual(ProductSortOption.EXPIRATION_DATE.sort(products), [beef, milk, apple])
        self.assertEqual(ProductSortOption.CATEGORY.sort(products), [apple, milk, beef])
        self.assertEqual(ProductSortOption.LOCATION.sort(products), [beef, apple, milk])
        self.assertEqual(ProductSortOption.ARRIVAL_DATE.sort(products)[0], milk)

    def test_display_names(self):
        self.assertEqual(ProductSortOption.EXPIRATION_DATE.display_name, "Expiration")

    def test_explicit_id_is_kept(self):
        product_id = uuid.uuid4()
        self.assertEqual(make_product(id=product_id).id, product_id)
