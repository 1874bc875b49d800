"""Product domain entity plus the enums used to classify, place and sort products."""
from __future__ import annotations
import math
import uuid
from datetime import datetime, timedelta
from enum import Enum
from typing import List, Optional


class ProductCategory(str, Enum):
    FRUITS = "Fruits"
    VEGETABLES = "Légumes"
    DAIRY = "Produits laitiers"
    MEAT = "Viandes"
    FISH = "Poissons"
    CANNED = "Conserves"
    BEVERAGES = "Boissons"
    FROZEN = "Surgelés"
    OTHER = "Autres"


class ProductLocation(str, Enum):
    PANTRY = "Garde-manger"
    REFRIGERATOR = "Réfrigérateur"
    FREEZER = "Congélateur"
    CUPBOARD = "Placard"
    OTHER = "Autre"


class ExpirationStatus(Enum):
    EXPIRED = 0
    SOON_EXPIRED = 1
    FRESH = 2

    @property
    def priority(self) -> int:
        return self.value


def days_between(start: datetime, end: datetime) -> int:
    '''Whole days from start to end, truncated toward zero (-0.5 day -> 0).'''
    return int((end - start) / timedelta(days=1))


class Product:
    def __init__(self, name: str, quantity: float, unit: str,
                 category: ProductCategory, location: ProductLocation,
                 arrival_date: datetime, expiration_date: datetime, lot_number: str,
                 id: Optional[uuid.UUID] = None):
        self.id = id or uuid.uuid4()
        self.name = name
        self.quantity = quantity
        self.unit = unit
        self.category = ProductCategory(category)
        self.location = ProductLocation(location)
        self.arrival_date = arrival_date
        self.expiration_date = expiration_date
        self.lot_number = lot_number

    def replace(self, **changes) -> "Product":
        '''Returns a copy with the given fields changed; id is kept unless overridden.'''
        fields = self.to_fields()
        fields.update(changes)
        return Product(**fields)

    # --- Expiration helpers -------------------------------------------------
    def days_until_expiration(self, now: Optional[datetime] = None) -> int:
        return days_between(now or datetime.now(), self.expiration_date)

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        return (now or datetime.now()) > self.expiration_date

    def is_soon_expired(self, now: Optional[datetime] = None, threshold_days: int = 3) -> bool:
        now = now or datetime.now()
        if self.is_expired(now):
            return False
        return 0 <= self.days_until_expiration(now) <= threshold_days

    def expiration_status(self, now: Optional[datetime] = None, threshold_days: int = 3) -> ExpirationStatus:
        now = now or datetime.now()
        if self.is_expired(now):
            return ExpirationStatus.EXPIRED
        if self.is_soon_expired(now, threshold_days):
            return ExpirationStatus.SOON_EXPIRED
        return ExpirationStatus.FRESH

    @property
    def formatted_quantity(self) -> str:
        safe = 0.0 if math.isnan(self.quantity) or math.isinf(self.quantity) else self.quantity
        return f"{safe:.1f} {self.unit}"

    # --- Equality / representation -------------------------------------------
    def to_fields(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "quantity": self.quantity,
            "unit": self.unit,
            "category": self.category,
            "location": self.location,
            "arrival_date": self.arrival_date,
            "expiration_date": self.expiration_date,
            "lot_number": self.lot_number,
        }

    def __eq__(self, other):
        if not isinstance(other, Product):
            return NotImplemented
        return self.to_fields() == other.to_fields()

    def __hash__(self):
        return hash(self.id)

    def __str__(self) -> str:
        return (f"{self.name} - {self.formatted_quantity} - {self.category.value} - "
                f"{self.location.value} - Exp: {self.expiration_date:%d-%m-%Y} - Lot: {self.lot_number}")

    def __repr__(self) -> str:
        return f"Product({self.name!r}, id={self.id})"

    # --- Serialization -------------------------------------------------------
    @staticmethod
    def from_dict(data: dict) -> "Product":
        '''Creates a Product from its JSON dictionary. Raises KeyError/ValueError on bad input.'''
        return Product(
            id=uuid.UUID(data["id"]),
            name=data["name"],
            quantity=float(data["quantity"]),
            unit=data.get("unit", ""),
            category=ProductCategory(data["category"]),
            location=ProductLocation(data["location"]),
            arrival_date=datetime.fromisoformat(data["arrival_date"]),
            expiration_date=datetime.fromisoformat(data["expiration_date"]),
            lot_number=data.get("lot_number", ""),
        )

    def to_dict(self) -> dict:
        '''Converts the Product to a dictionary for JSON persistence.'''
        return {
            "id": str(self.id),
            "name": self.name,
            "quantity": self.quantity,
            "unit": self.unit,
            "category": self.category.value,
            "location": self.location.value,
            "arrival_date": self.arrival_date.isoformat(),
            "expiration_date": self.expiration_date.isoformat(),
            "lot_number": self.lot_number,
        }


class ProductSortOption(Enum):
    NAME = "Nom"
    EXPIRATION_DATE = "Expiration"
    CATEGORY = "Catégorie"
    LOCATION = "Emplacement"
    ARRIVAL_DATE = "Date d'arrivée"

    @property
    def display_name(self) -> str:
        return self.value

    def sort(self, products: List[Product]) -> List[Product]:
        keys = {
            ProductSortOption.NAME: lambda p: p.name,
            ProductSortOption.EXPIRATION_DATE: lambda p: p.expiration_date,
            ProductSortOption.CATEGORY: lambda p: p.category.value,
            ProductSortOption.LOCATION: lambda p: p.location.value,
            ProductSortOption.ARRIVAL_DATE: lambda p: p.arrival_date,
        }
        return sorted(products, key=keys[self])
