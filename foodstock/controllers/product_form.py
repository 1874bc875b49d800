"""Shared form state and validation for the add and edit product screens."""
from __future__ import annotations
from datetime import datetime, timedelta
from enum import Enum
from typing import Optional, Set

from foodstock.domain.Errors import ValidationErrorKind
from foodstock.domain.Product import ProductCategory, ProductLocation
from foodstock.logic.retry.executor import OperationExecutor
from foodstock.utilities.constants import AVAILABLE_UNITS, DEFAULT_EXPIRATION_OFFSET_DAYS, DEFAULT_UNIT
from foodstock.utilities.validators import ProductFormInput


class FormField(Enum):
    NAME = ValidationErrorKind.EMPTY_NAME
    QUANTITY = ValidationErrorKind.INVALID_QUANTITY
    EXPIRATION_DATE = ValidationErrorKind.PAST_EXPIRATION_DATE
    LOT_NUMBER = ValidationErrorKind.EMPTY_LOT_NUMBER


class ProductFormController(OperationExecutor):
    available_units = list(AVAILABLE_UNITS)

    def __init__(self, category: str, **kwargs):
        super().__init__(category, **kwargs)
        self.validation_errors: Set[ValidationErrorKind] = set()
        self._reset_fields()

    def _reset_fields(self) -> None:
        self.name = ""
        self.quantity = ""
        self.selected_unit = DEFAULT_UNIT
        self.selected_category = ProductCategory.FRUITS
        self.selected_location = ProductLocation.REFRIGERATOR
        self.expiration_date = self._clock() + timedelta(days=DEFAULT_EXPIRATION_OFFSET_DAYS)
        self.lot_number = ""

    def form_input(self) -> ProductFormInput:
        return ProductFormInput(
            name=self.name,
            quantity=self.quantity,
            unit=self.selected_unit,
            category=self.selected_category,
            location=self.selected_location,
            expiration_date=self.expiration_date,
            lot_number=self.lot_number,
        )

    def validate_form(self) -> None:
        self.validation_errors = self.form_input().validation_errors(now=self._clock())

    @property
    def has_validation_errors(self) -> bool:
        return bool(self.validation_errors)

    @property
    def is_form_valid(self) -> bool:
        return not self.validation_errors and bool(self.name.strip())

    def get_validation_error(self, field: FormField) -> Optional[ValidationErrorKind]:
        return field.value if field.value in self.validation_errors else None

    def has_error(self, field: FormField) -> bool:
        return self.get_validation_error(field) is not None

    def safe_parsed_quantity(self) -> float:
        return self.form_input().safe_quantity()
