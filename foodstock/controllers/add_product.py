"""Add-product screen: form entry, lot number scan/generation, and save."""
from __future__ import annotations
import random

from foodstock.domain.Product import Product
from foodstock.logic.products.use_cases import AddProductUseCase
from foodstock.controllers.product_form import ProductFormController


class AddProductController(ProductFormController):
    def __init__(self, add_product_use_case: AddProductUseCase, **kwargs):
        super().__init__("AddProductController", **kwargs)
        self.add_product_use_case = add_product_use_case
        self.is_showing_scanner = False
        self.is_generating_lot = False

    async def add_product(self) -> bool:
        """Validate, then save through the retry executor. True when the product was added."""
        self.validate_form()
        if self.validation_errors:
            self.logger.warning("Validation failed: %s", sorted(e.name for e in self.validation_errors))
            return False

        success = False

        def on_success(product: Product):
            nonlocal success
            self.logger.info("Product added: %s", product.name)
            self.reset_form()
            success = True

        await self.execute_with_retry(
            lambda: self.add_product_use_case.execute(self._create_product_from_form()),
            on_success,
        )
        return success

    def reset_form(self) -> None:
        self._reset_fields()
        self.validation_errors = set()
        self.clear_error()

    def _create_product_from_form(self) -> Product:
        return self.form_input().to_product(arrival_date=self._clock())

    # --- Scanner ---------------------------------------------------------------
    def show_scanner(self) -> None:
        if self.is_showing_scanner:
            self.logger.debug("Scanner already open")
            return
        self.is_showing_scanner = True

    def hide_scanner(self) -> None:
        self.is_showing_scanner = False

    def update_lot_number_from_scan(self, scanned_code: str) -> None:
        self.lot_number = scanned_code
        self.hide_scanner()

    # --- Lot number generation -------------------------------------------------
    def generate_random_lot_number(self) -> None:
        if self.is_generating_lot:
            return
        self.is_generating_lot = True
        try:
            self.lot_number = f"LOT{random.randint(1000, 9999)}"
            self.logger.debug("Generated lot number %s", self.lot_number)
            self.validate_form()
        finally:
            self.is_generating_lot = False
