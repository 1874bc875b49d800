"""Expiration alert aggregates built from the product store."""
from __future__ import annotations
from collections import Counter
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from foodstock.domain.Product import Product, ProductCategory, ProductLocation


class AlertType(Enum):
    EXPIRED = "expired"
    SOON_EXPIRED = "soonExpired"
    UNKNOWN = "unknown"

    @property
    def title(self) -> str:
        return {
            AlertType.EXPIRED: "Produits expirés",
            AlertType.SOON_EXPIRED: "Expiration proche",
            AlertType.UNKNOWN: "Autres alertes",
        }[self]

    @property
    def priority(self) -> int:
        return [AlertType.EXPIRED, AlertType.SOON_EXPIRED, AlertType.UNKNOWN].index(self)


@dataclass
class ExpirationAlertsResult:
    """Expired and soon-to-expire products from one alert load. Never persisted."""
    expired_products: List[Product] = field(default_factory=list)
    soon_expired_products: List[Product] = field(default_factory=list)

    @property
    def total_count(self) -> int:
        return len(self.expired_products) + len(self.soon_expired_products)

    @property
    def has_alerts(self) -> bool:
        return self.total_count > 0


@dataclass
class ExpirationTrendsAnalysis:
    categories_at_risk: Counter = field(default_factory=Counter)
    locations_at_risk: Counter = field(default_factory=Counter)

    @property
    def most_at_risk_category(self) -> Optional[ProductCategory]:
        top = self.categories_at_risk.most_common(1)
        return top[0][0] if top else None

    @property
    def most_at_risk_location(self) -> Optional[ProductLocation]:
        top = self.locations_at_risk.most_common(1)
        return top[0][0] if top else None
