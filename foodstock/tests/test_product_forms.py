import unittest
from datetime import datetime, timedelta
from unittest.mock import AsyncMock

from foodstock.controllers.add_product import AddProductController
from foodstock.controllers.edit_product import EditProductController
from foodstock.controllers.product_form import FormField
from foodstock.domain.Errors import DataError, ValidationErrorKind
from foodstock.domain.Product import Product, ProductCategory, ProductLocation
from foodstock.infra.Product_Repository import InMemoryProductRepository
from foodstock.infra.Reminder_Scheduler import InMemoryReminderScheduler
from foodstock.logic.products.use_cases import AddProductUseCase, UpdateProductUseCase

NOW = datetime(2026, 10, 19, 12, 0)


def clock():
    return NOW


class TestAddProductController(unittest.IsolatedAsyncioTestCase):

    def setUp(self):
        self.repository = InMemoryProductRepository(clock=clock)
        self.scheduler = InMemoryReminderScheduler(clock=clock)
        self.sleep = AsyncMock()
        self.controller = AddProductController(
            AddProductUseCase(self.repository, self.scheduler, clock=clock), sleep=self.sleep, clock=clock)

    def fill_form(self):
        self.controller.name = "Lait demi-écrémé"
        self.controller.quantity = "1.5"
        self.controller.selected_unit = "L"
        self.controller.selected_category = ProductCategory.DAIRY
        self.controller.selected_location = ProductLocation.REFRIGERATOR
        self.controller.lot_number = "L-2026"

    def test_defaults(self):
        self.assertEqual(self.controller.selected_unit, "kg")
        self.assertEqual(self.controller.expiration_date, NOW + timedelta(days=7))
        self.assertIn("L", self.controller.available_units)
        self.assertFalse(self.controller.is_form_valid)

    async def test_empty_form_is_rejected(self):
        self.assertFalse(await self.controller.add_product())
        self.assertEqual(self.controller.validation_errors, {
            ValidationErrorKind.EMPTY_NAME, ValidationErrorKind.INVALID_QUANTITY, ValidationErrorKind.EMPTY_LOT_NUMBER
        })
        self.assertEqual(self.controller.get_validation_error(FormField.NAME), ValidationErrorKind.EMPTY_NAME)
        self.assertFalse(self.controller.has_error(FormField.EXPIRATION_DATE))
        self.assertEqual(await self.repository.fetch_products(), [])

    async def test_add_product(self):
        self.fill_form()
        self.controller.validate_form()
        self.assertTrue(self.controller.is_form_valid)
        self.assertTrue(await self.controller.add_product())

        [product] = await self.repository.fetch_products()
        self.assertEqual(product.name, "Lait demi-écrémé")
        self.assertEqual(product.quantity, 1.5)
        self.assertEqual(product.arrival_date, NOW)
        self.assertEqual(await self.scheduler.pending_identifiers(), [f"expiration_{product.id}"])
        # form is back to its defaults
        self.assertEqual(self.controller.name, "")
        self.assertEqual(self.controller.lot_number, "")
        self.assertIsNone(self.controller.error)

    async def test_save_failure_keeps_form(self):
        self.fill_form()
        self.repository.add_product = AsyncMock(side_effect=DataError.save_failed())
        self.assertFalse(await self.controller.add_product())
        self.assertEqual(self.controller.error, DataError.save_failed())
        self.assertEqual(self.repository.add_product.await_count, 4)
        self.assertEqual(self.controller.name, "Lait demi-écrémé")

    def test_scanner(self):
        self.controller.show_scanner()
        self.controller.show_scanner()
        self.assertTrue(self.controller.is_showing_scanner)
        self.controller.update_lot_number_from_scan("3017620422003")
        self.assertEqual(self.controller.lot_number, "3017620422003")
        self.assertFalse(self.controller.is_showing_scanner)

    def test_generate_random_lot_number(self):
        self.controller.generate_random_lot_number()
        self.assertRegex(self.controller.lot_number, r"^LOT\d{4}$")
        self.assertNotIn(ValidationErrorKind.EMPTY_LOT_NUMBER, self.controller.validation_errors)
        self.assertFalse(self.controller.is_generating_lot)

    def test_safe_parsed_quantity(self):
        self.controller.quantity = "deux"
        self.assertEqual(self.controller.safe_parsed_quantity(), 0.0)
        self.controller.quantity = "2"
        self.assertEqual(self.controller.safe_parsed_quantity(), 2.0)


class TestEditProductController(unittest.IsolatedAsyncioTestCase):

    def setUp(self):
        self.product = Product(
            name="Fromage", quantity=0.5, unit="kg", category=ProductCategory.DAIRY,
            location=ProductLocation.REFRIGERATOR, arrival_date=NOW - timedelta(days=4),
            expiration_date=NOW + timedelta(days=10), lot_number="F-1",
        )
        self.repository = InMemoryProductRepository([self.product], clock=clock)
        self.scheduler = InMemoryReminderScheduler(clock=clock)
        add_use_case = AddProductUseCase(self.repository, self.scheduler, clock=clock)
        self.controller = EditProductController(
            self.product,
            UpdateProductUseCase(self.repository, self.scheduler, add_use_case, clock=clock),
            sleep=AsyncMock(), clock=clock,
        )

    def test_prefilled_form_has_no_changes(self):
        self.assertEqual(self.controller.name, "Fromage")
        self.assertEqual(self.controller.quantity, "0.5")
        self.assertFalse(self.controller.has_changes)
        self.assertFalse(self.controller.is_form_valid)

    def test_small_date_shift_is_not_a_change(self):
        self.controller.expiration_date = self.product.expiration_date + timedelta(seconds=30)
        self.controller.validate_form()
        self.assertFalse(self.controller.has_changes)
        self.controller.expiration_date = self.product.expiration_date + timedelta(days=1)
        self.controller.validate_form()
        self.assertTrue(self.controller.has_changes)

    async def test_update_without_changes_is_refused(self):
        self.assertFalse(await self.controller.update_product())

    async def test_update_product(self):
        self.controller.quantity = "0.25"
        self.controller.selected_location = ProductLocation.FREEZER
        self.controller.validate_form()
        self.assertTrue(self.controller.has_unsaved_changes())
        self.assertTrue(await self.controller.update_product())

        [stored] = await self.repository.fetch_products()
        self.assertEqual(stored.id, self.product.id)
        self.assertEqual(stored.arrival_date, self.product.arrival_date)
        self.assertEqual(stored.quantity, 0.25)
        self.assertEqual(stored.location, ProductLocation.FREEZER)
        self.assertEqual(self.controller.original_product, stored)
        self.assertFalse(self.controller.has_changes)

    async def test_invalid_edit_is_rejected(self):
        self.controller.name = "  "
        self.assertFalse(await self.controller.update_product())
        self.assertTrue(self.controller.has_error(FormField.NAME))

    def test_reset_to_original(self):
        self.controller.name = "Comté"
        self.controller.validate_form()
        self.assertTrue(self.controller.has_changes)
        self.controller.reset_to_original()
        self.assertEqual(self.controller.name, "Fromage")
        self.assertFalse(self.controller.has_changes)
        self.assertEqual(self.controller.validation_errors, set())
