"""Expiration alert management: load, dismiss, reminder fan-out and risk trends."""
from __future__ import annotations
import asyncio
import logging
from collections import Counter
from datetime import datetime
from typing import Callable, Iterable, List, Optional

from foodstock.domain.Alerts import ExpirationAlertsResult, ExpirationTrendsAnalysis
from foodstock.domain.Product import Product
from foodstock.infra.Product_Repository import ProductRepository
from foodstock.infra.Reminder_Scheduler import ReminderScheduler
from foodstock.utilities import config

__all__ = ["ManageExpirationAlertsUseCase"]

logger = logging.getLogger(__name__)

TRENDS_WINDOW_DAYS = 7


class ManageExpirationAlertsUseCase:
    def __init__(self, product_repository: ProductRepository, reminder_scheduler: ReminderScheduler,
                 *, soon_expired_threshold_days: int = config.SOON_EXPIRED_THRESHOLD_DAYS,
                 notification_threshold_days: int = config.NOTIFICATION_THRESHOLD_DAYS,
                 clock: Optional[Callable[[], datetime]] = None):
        self.product_repository = product_repository
        self.reminder_scheduler = reminder_scheduler
        self.soon_expired_threshold_days = soon_expired_threshold_days
        self.notification_threshold_days = notification_threshold_days
        self._clock = clock or datetime.now

    async def load_alerts(self) -> ExpirationAlertsResult:
        """Query expired and soon-expiring products concurrently from the store."""
        logger.debug("Loading expiration alerts")
        expired, soon_expired = await asyncio.gather(
            self.product_repository.get_expired_products(),
            self.product_repository.get_products_expiring_within(self.soon_expired_threshold_days),
        )
        result = ExpirationAlertsResult(expired_products=expired, soon_expired_products=soon_expired)
        logger.info("Alerts loaded - expired: %d, soon: %d",
                    len(result.expired_products), len(result.soon_expired_products))
        return result

    async def schedule_notifications_for_upcoming_products(self, products: Iterable[Product]) -> None:
        """Schedule one reminder per product expiring within the notification window.

        Every scheduling task runs to completion; the first failure is raised
        afterwards and reminders already scheduled for other products are kept.
        """
        products = list(products)
        now = self._clock()
        upcoming = [
            p for p in products
            if 0 <= p.days_until_expiration(now) <= self.notification_threshold_days
            and not p.is_expired(now)
        ]
        logger.debug("Scheduling reminders for %d of %d products", len(upcoming), len(products))

        results = await asyncio.gather(
            *(self.reminder_scheduler.schedule_expiration_notification(p) for p in upcoming),
            return_exceptions=True,
        )
        failures = [r for r in results if isinstance(r, BaseException)]
        if failures:
            logger.error("%d of %d reminders failed to schedule", len(failures), len(upcoming))
            raise failures[0]
        logger.info("%d reminders scheduled", len(upcoming))

    async def dismiss_alert(self, product: Product) -> None:
        logger.debug("Dismissing alert for: %s", product.name)
        await self.reminder_scheduler.remove_notification(product.id)
        logger.info("Alert dismissed for: %s", product.name)

    def analyze_expiration_trends(self, products: Iterable[Product]) -> ExpirationTrendsAnalysis:
        """Count products expiring within a week (or already expired) per category and location."""
        now = self._clock()
        categories: Counter = Counter()
        locations: Counter = Counter()
        for product in products:
            if product.days_until_expiration(now) <= TRENDS_WINDOW_DAYS:
                categories[product.category] += 1
                locations[product.location] += 1
        return ExpirationTrendsAnalysis(categories_at_risk=categories, locations_at_risk=locations)
