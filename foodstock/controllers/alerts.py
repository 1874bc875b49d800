"""Alerts screen: expired and soon-expiring products with dismiss and delete."""
from __future__ import annotations
import uuid
from typing import List

from foodstock.domain.Alerts import AlertType, ExpirationAlertsResult
from foodstock.domain.Product import Product
from foodstock.logic.alerts.manager import ManageExpirationAlertsUseCase
from foodstock.logic.products.use_cases import DeleteProductUseCase
from foodstock.logic.retry.executor import OperationExecutor


class AlertsController(OperationExecutor):
    def __init__(self, manage_alerts_use_case: ManageExpirationAlertsUseCase,
                 delete_product_use_case: DeleteProductUseCase, **kwargs):
        super().__init__("AlertsController", **kwargs)
        self.manage_alerts_use_case = manage_alerts_use_case
        self.delete_product_use_case = delete_product_use_case
        self.expired_products: List[Product] = []
        self.soon_expired_products: List[Product] = []

    @property
    def total_alerts_count(self) -> int:
        return len(self.expired_products) + len(self.soon_expired_products)

    @property
    def has_alerts(self) -> bool:
        return self.total_alerts_count > 0

    async def load_alerts(self) -> None:
        def on_success(result: ExpirationAlertsResult):
            self.expired_products = list(result.expired_products)
            self.soon_expired_products = list(result.soon_expired_products)
            self.logger.info("Alerts loaded - total: %d", result.total_count)

        await self.execute_with_retry(self.manage_alerts_use_case.load_alerts, on_success)

    async def refresh_alerts(self) -> None:
        await self.load_alerts()

    async def delete_product(self, product: Product) -> None:
        async def on_success(_):
            self.logger.info("Product deleted from alerts: %s", product.name)
            await self.load_alerts()

        deletion = self.delete_product_use_case.deletion(product)
        await self.execute_with_retry(deletion, on_success)
        if self.error is not None and deletion.store_deleted:
            # gone from the store, only its reminder is left behind
            self._remove_locally(product.id)

    async def dismiss_product(self, product: Product) -> None:
        """Hide the alert right away, then drop its reminder.

        The local removal is never rolled back: if the reminder cannot be removed
        the error is surfaced but the product stays hidden.
        """
        self._remove_locally(product.id)
        try:
            await self.manage_alerts_use_case.dismiss_alert(product)
        except Exception as error:
            self.handle_error(error)
        else:
            self.logger.info("Alert dismissed for: %s", product.name)

    def _remove_locally(self, product_id: uuid.UUID) -> None:
        self.expired_products = [p for p in self.expired_products if p.id != product_id]
        self.soon_expired_products = [p for p in self.soon_expired_products if p.id != product_id]

    def get_alert_type_for_product(self, product: Product) -> AlertType:
        if any(p.id == product.id for p in self.expired_products):
            return AlertType.EXPIRED
        if any(p.id == product.id for p in self.soon_expired_products):
            return AlertType.SOON_EXPIRED
        return AlertType.UNKNOWN
