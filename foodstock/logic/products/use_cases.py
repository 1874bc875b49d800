"""Product CRUD and search use cases.

Each use case wraps the product store and, where a reminder is involved, the
reminder scheduler. Errors are raised as AppError subclasses and left to the
calling controller's retry executor.
"""
from __future__ import annotations
import logging
import uuid
from datetime import datetime
from typing import Callable, List, Optional

from foodstock.domain.Errors import DataError, ValidationError, ValidationErrorKind
from foodstock.domain.Product import Product, ProductSortOption
from foodstock.infra.Product_Repository import ProductRepository
from foodstock.infra.Reminder_Scheduler import ReminderScheduler
from foodstock.utilities import config
from foodstock.utilities.validators import (
    validate_future_date, validate_not_empty, validate_positive_quantity
)

__all__ = [
    "AddProductUseCase", "UpdateProductUseCase", "DeleteProductUseCase", "ProductDeletion",
    "SearchProductsUseCase"
]

logger = logging.getLogger(__name__)


def _within_notification_window(product: Product, now: datetime, threshold_days: int) -> bool:
    return 0 <= product.days_until_expiration(now) <= threshold_days and not product.is_expired(now)


class AddProductUseCase:
    def __init__(self, product_repository: ProductRepository, reminder_scheduler: ReminderScheduler,
                 *, notification_threshold_days: int = config.NOTIFICATION_THRESHOLD_DAYS,
                 clock: Optional[Callable[[], datetime]] = None):
        self.product_repository = product_repository
        self.reminder_scheduler = reminder_scheduler
        self.notification_threshold_days = notification_threshold_days
        self._clock = clock or datetime.now

    async def execute(self, product: Product) -> Product:
        logger.debug("Adding product: %s", product.name)
        self.validate_product(product)
        await self._check_for_duplicates(product)
        await self.product_repository.add_product(product)
        await self._schedule_notification_if_needed(product)
        logger.info("Product added: %s", product.name)
        return product

    def validate_product(self, product: Product) -> None:
        validate_not_empty(product.name, "name")
        validate_positive_quantity(product.quantity)
        validate_future_date(product.expiration_date, now=self._clock())
        if not product.lot_number.strip():
            raise ValidationError(ValidationErrorKind.EMPTY_LOT_NUMBER)
        # expiration must come after arrival
        if not product.expiration_date > product.arrival_date:
            raise ValidationError(ValidationErrorKind.PAST_EXPIRATION_DATE)

    async def _check_for_duplicates(self, product: Product) -> None:
        for existing in await self.product_repository.fetch_products():
            if existing.name.lower() == product.name.lower() and existing.lot_number == product.lot_number:
                logger.warning("Duplicate product detected: %s - %s", existing.name, existing.lot_number)
                return

    async def _schedule_notification_if_needed(self, product: Product) -> None:
        now = self._clock()
        if _within_notification_window(product, now, self.notification_threshold_days):
            await self.reminder_scheduler.schedule_expiration_notification(product)
            logger.info("Reminder scheduled for %s (expires in %d days)",
                        product.name, product.days_until_expiration(now))


class UpdateProductUseCase:
    def __init__(self, product_repository: ProductRepository, reminder_scheduler: ReminderScheduler,
                 add_product_use_case: AddProductUseCase,
                 *, notification_threshold_days: int = config.NOTIFICATION_THRESHOLD_DAYS,
                 clock: Optional[Callable[[], datetime]] = None):
        self.product_repository = product_repository
        self.reminder_scheduler = reminder_scheduler
        self.add_product_use_case = add_product_use_case
        self.notification_threshold_days = notification_threshold_days
        self._clock = clock or datetime.now

    async def execute(self, product: Product) -> Product:
        logger.debug("Updating product: %s", product.name)
        self.add_product_use_case.validate_product(product)
        await self._find(product.id)
        await self.product_repository.update_product(product)
        await self._update_notifications(product)
        logger.info("Product updated: %s", product.name)
        return product

    async def update_expiration_date(self, product_id: uuid.UUID, new_date: datetime) -> Product:
        validate_future_date(new_date, now=self._clock())
        product = await self._find(product_id)
        return await self.execute(product.replace(expiration_date=new_date))

    async def update_quantity(self, product_id: uuid.UUID, new_quantity: float) -> Product:
        validate_positive_quantity(new_quantity)
        product = await self._find(product_id)
        return await self.execute(product.replace(quantity=new_quantity))

    async def _find(self, product_id: uuid.UUID) -> Product:
        for existing in await self.product_repository.fetch_products():
            if existing.id == product_id:
                return existing
        raise DataError.not_found()

    async def _update_notifications(self, product: Product) -> None:
        await self.reminder_scheduler.remove_notification(product.id)
        now = self._clock()
        if _within_notification_window(product, now, self.notification_threshold_days):
            await self.reminder_scheduler.schedule_expiration_notification(product)
            logger.info("Reminder rescheduled for %s", product.name)
        else:
            logger.debug("No reminder needed for %s", product.name)


class DeleteProductUseCase:
    def __init__(self, product_repository: ProductRepository, reminder_scheduler: ReminderScheduler):
        self.product_repository = product_repository
        self.reminder_scheduler = reminder_scheduler

    async def execute(self, product_id: uuid.UUID) -> None:
        products = await self.product_repository.fetch_products()
        product = next((p for p in products if p.id == product_id), None)
        if product is None:
            raise DataError.not_found()
        await self.execute_with_product(product)

    async def execute_with_product(self, product: Product) -> None:
        await self.deletion(product)()

    def deletion(self, product: Product) -> "ProductDeletion":
        """A delete operation that is safe to hand to a retry loop."""
        return ProductDeletion(self.product_repository, self.reminder_scheduler, product)


class ProductDeletion:
    """Deletes a product and its reminder.

    Calling it again after a reminder failure only retries the reminder removal:
    the store delete runs once, so a retry never reports the product as missing.
    """

    def __init__(self, product_repository: ProductRepository, reminder_scheduler: ReminderScheduler,
                 product: Product):
        self.product_repository = product_repository
        self.reminder_scheduler = reminder_scheduler
        self.product = product
        self.store_deleted = False

    async def __call__(self) -> None:
        if not self.store_deleted:
            logger.debug("Deleting product: %s", self.product.name)
            await self.product_repository.delete_product(self.product.id)
            self.store_deleted = True
        await self.reminder_scheduler.remove_notification(self.product.id)
        logger.info("Product deleted: %s", self.product.name)


class SearchProductsUseCase:
    def __init__(self, product_repository: ProductRepository):
        self.product_repository = product_repository

    async def fetch_all_products(self) -> List[Product]:
        return await self.product_repository.fetch_products()

    async def search_products(self, query: str, sort_option: ProductSortOption) -> List[Product]:
        """Search through the store; an empty query returns every product."""
        if not query:
            results = await self.product_repository.fetch_products()
        else:
            results = await self.product_repository.search_products(query)
        logger.info("Store search for %r: %d results", query, len(results))
        return sort_option.sort(results)

    def execute(self, query: str, products: List[Product], sort_option: ProductSortOption) -> List[Product]:
        """Filter an already loaded list without touching the store."""
        return sort_option.sort(filter_products(products, query))


def filter_products(products: List[Product], query: str) -> List[Product]:
    if not query:
        return list(products)
    needle = query.lower()
    return [
        p for p in products
        if needle in p.name.lower()
        or needle in p.category.value.lower()
        or needle in p.location.value.lower()
        or needle in p.lot_number.lower()
    ]
