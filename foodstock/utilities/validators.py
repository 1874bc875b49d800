"""
Input validation for the product add/edit forms.

The single-value helpers raise a ValidationError as soon as a rule is broken.
ProductFormInput collects every broken rule at once so a form can show them all.
"""
from __future__ import annotations
import math
import uuid
from datetime import datetime
from typing import Optional, Set

from pydantic import BaseModel, field_validator

from foodstock.domain.Errors import ValidationError, ValidationErrorKind
from foodstock.domain.Product import Product, ProductCategory, ProductLocation
from foodstock.utilities.constants import DEFAULT_UNIT

__all__ = [
    "validate_not_empty", "validate_positive_quantity", "validate_future_date",
    "parse_quantity", "ProductFormInput"
]


def validate_not_empty(value: Optional[str], field_name: str = "name") -> None:
    """Reject None, empty and whitespace-only strings."""
    if value is None or not value.strip():
        raise ValidationError(ValidationErrorKind.EMPTY_NAME)


def validate_positive_quantity(quantity: float) -> None:
    if math.isnan(quantity) or math.isinf(quantity) or quantity <= 0:
        raise ValidationError(ValidationErrorKind.INVALID_QUANTITY)


def validate_future_date(value: datetime, field_name: str = "expiration_date",
                         now: Optional[datetime] = None) -> None:
    if not value > (now or datetime.now()):
        raise ValidationError(ValidationErrorKind.PAST_EXPIRATION_DATE)


def parse_quantity(text: str) -> Optional[float]:
    """Parse a form quantity; None when it is not a finite number."""
    try:
        value = float(text)
    except (TypeError, ValueError):
        return None
    if math.isnan(value) or math.isinf(value):
        return None
    return value


class ProductFormInput(BaseModel):
    """Schema for the raw values typed into the product form."""
    name: str = ""
    quantity: str = ""
    unit: str = DEFAULT_UNIT
    category: str = ProductCategory.FRUITS.value
    location: str = ProductLocation.REFRIGERATOR.value
    expiration_date: datetime
    lot_number: str = ""

    @field_validator('name', 'unit', 'category', 'location', 'lot_number', mode='before')
    @classmethod
    def strip_whitespace(cls, v):
        """Remove leading/trailing whitespace."""
        if isinstance(v, ProductCategory) or isinstance(v, ProductLocation):
            return v.value
        if isinstance(v, str):
            return v.strip()
        return v

    @field_validator('quantity', mode='before')
    @classmethod
    def quantity_as_text(cls, v):
        """Accept numbers as well as text; the form always holds text."""
        if v is None:
            return ""
        return str(v).strip()

    def validation_errors(self, now: Optional[datetime] = None) -> Set[ValidationErrorKind]:
        """Return every rule the form currently breaks (not fail-fast)."""
        now = now or datetime.now()
        errors: Set[ValidationErrorKind] = set()
        if not self.name:
            errors.add(ValidationErrorKind.EMPTY_NAME)
        quantity = parse_quantity(self.quantity) if self.quantity else None
        if quantity is None or quantity <= 0:
            errors.add(ValidationErrorKind.INVALID_QUANTITY)
        if self.expiration_date <= now:
            errors.add(ValidationErrorKind.PAST_EXPIRATION_DATE)
        if not self.lot_number:
            errors.add(ValidationErrorKind.EMPTY_LOT_NUMBER)
        if self.category not in {c.value for c in ProductCategory}:
            errors.add(ValidationErrorKind.INVALID_CATEGORY)
        if self.location not in {loc.value for loc in ProductLocation}:
            errors.add(ValidationErrorKind.INVALID_LOCATION)
        return errors

    def safe_quantity(self) -> float:
        quantity = parse_quantity(self.quantity)
        if quantity is None or quantity < 0:
            return 0.0
        return quantity

    def to_product(self, arrival_date: datetime, id: Optional[uuid.UUID] = None) -> Product:
        """Build a Product from a form that passed validation."""
        return Product(
            id=id,
            name=self.name,
            quantity=self.safe_quantity(),
            unit=self.unit,
            category=ProductCategory(self.category),
            location=ProductLocation(self.location),
            arrival_date=arrival_date,
            expiration_date=self.expiration_date,
            lot_number=self.lot_number,
        )
