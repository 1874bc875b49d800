"""Edit-product screen: prefilled form with change tracking."""
from __future__ import annotations

from foodstock.domain.Product import Product
from foodstock.logic.products.use_cases import UpdateProductUseCase
from foodstock.controllers.product_form import ProductFormController
from foodstock.utilities.constants import EDIT_DATE_TOLERANCE_SECONDS


class EditProductController(ProductFormController):
    def __init__(self, product: Product, update_product_use_case: UpdateProductUseCase, **kwargs):
        super().__init__("EditProductController", **kwargs)
        self.original_product = product
        self.update_product_use_case = update_product_use_case
        self.has_changes = False
        self._populate_from_product(product)
        self._check_for_changes()

    @property
    def is_form_valid(self) -> bool:
        return super().is_form_valid and self.has_changes

    def has_unsaved_changes(self) -> bool:
        return self.has_changes and self.is_form_valid

    def validate_form(self) -> None:
        super().validate_form()
        self._check_for_changes()

    async def update_product(self) -> bool:
        self.validate_form()
        if self.validation_errors:
            self.logger.warning("Validation failed: %s", sorted(e.name for e in self.validation_errors))
            return False
        if not self.has_changes:
            self.logger.warning("No changes detected")
            return False

        success = False

        def on_success(updated: Product):
            nonlocal success
            self.logger.info("Product updated: %s", updated.name)
            self.original_product = updated
            self.has_changes = False
            success = True

        await self.execute_with_retry(
            lambda: self.update_product_use_case.execute(self._create_updated_product()),
            on_success,
        )
        return success

    def reset_to_original(self) -> None:
        self._populate_from_product(self.original_product)
        self.validation_errors = set()
        self.has_changes = False
        self.clear_error()

    def _populate_from_product(self, product: Product) -> None:
        self.name = product.name
        self.quantity = str(product.quantity)
        self.selected_unit = product.unit
        self.selected_category = product.category
        self.selected_location = product.location
        self.expiration_date = product.expiration_date
        self.lot_number = product.lot_number

    def _create_updated_product(self) -> Product:
        # same id, original arrival date
        return self.form_input().to_product(
            arrival_date=self.original_product.arrival_date,
            id=self.original_product.id,
        )

    def _check_for_changes(self) -> None:
        current = self.form_input()
        original = self.original_product
        date_delta = abs((current.expiration_date - original.expiration_date).total_seconds())
        self.has_changes = (
            current.name != original.name
            or current.safe_quantity() != original.quantity
            or current.unit != original.unit
            or current.category != original.category.value
            or current.location != original.location.value
            or date_delta > EDIT_DATE_TOLERANCE_SECONDS
            or current.lot_number != original.lot_number
        )
