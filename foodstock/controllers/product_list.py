"""Product list screen: load, search, sort, delete, and refresh on store changes."""
from __future__ import annotations
import asyncio
import uuid
from typing import Any, List, Optional, Set

from foodstock.domain.Product import Product, ProductSortOption
from foodstock.events.Event_Bus import EventBus, PRODUCTS_CHANGED
from foodstock.logic.alerts.manager import ManageExpirationAlertsUseCase
from foodstock.logic.products.use_cases import DeleteProductUseCase, SearchProductsUseCase, filter_products
from foodstock.logic.retry.executor import OperationExecutor
from foodstock.utilities import config
from foodstock.utilities.debouncer import Debouncer


class ProductListController(OperationExecutor):
    def __init__(self, search_products_use_case: SearchProductsUseCase,
                 delete_product_use_case: DeleteProductUseCase,
                 manage_alerts_use_case: ManageExpirationAlertsUseCase,
                 event_bus: Optional[EventBus] = None,
                 *, debounce_seconds: float = config.SEARCH_DEBOUNCE_SECONDS,
                 soon_expired_threshold_days: int = config.SOON_EXPIRED_THRESHOLD_DAYS,
                 **kwargs):
        super().__init__("ProductListController", **kwargs)
        self.search_products_use_case = search_products_use_case
        self.delete_product_use_case = delete_product_use_case
        self.manage_alerts_use_case = manage_alerts_use_case
        self.soon_expired_threshold_days = soon_expired_threshold_days
        self.products: List[Product] = []
        self.filtered_products: List[Product] = []
        self._search_text = ""
        self._sort_option = ProductSortOption.NAME
        self._is_refreshing = False
        self._debouncer = Debouncer(debounce_seconds)
        self._pending_refreshes: Set[asyncio.Task] = set()
        self._event_bus = event_bus
        if event_bus is not None:
            event_bus.subscribe_weak(PRODUCTS_CHANGED, self._on_products_changed)

    # --- Search / sort state ---------------------------------------------------
    @property
    def search_text(self) -> str:
        return self._search_text

    @search_text.setter
    def search_text(self, value: str) -> None:
        self._search_text = value
        self._filter_and_sort()

    @property
    def sort_option(self) -> ProductSortOption:
        return self._sort_option

    @sort_option.setter
    def sort_option(self, value: ProductSortOption) -> None:
        self._sort_option = value
        self._filter_and_sort()

    def _filter_and_sort(self) -> None:
        self.filtered_products = self._sort_option.sort(filter_products(self.products, self._search_text))

    # --- Counts ----------------------------------------------------------------
    @property
    def expired_products_count(self) -> int:
        now = self._clock()
        return sum(1 for p in self.products if p.is_expired(now))

    @property
    def soon_expired_products_count(self) -> int:
        now = self._clock()
        return sum(1 for p in self.products if p.is_soon_expired(now, self.soon_expired_threshold_days))

    @property
    def alert_products_count(self) -> int:
        return self.expired_products_count + self.soon_expired_products_count

    # --- Operations ------------------------------------------------------------
    async def load_products(self) -> None:
        async def operation():
            fetched = await self.search_products_use_case.fetch_all_products()
            await self._schedule_notifications(fetched)
            return fetched

        def on_success(fetched: List[Product]):
            self.products = fetched
            self._filter_and_sort()
            self.logger.info("Products loaded: %d", len(fetched))

        await self.execute_with_retry(operation, on_success)

    async def refresh_products(self) -> None:
        if self._is_refreshing:
            return
        self._is_refreshing = True
        try:
            await self.load_products()
        finally:
            self._is_refreshing = False

    async def delete_product(self, product: Product) -> None:
        deletion = self.delete_product_use_case.deletion(product)
        await self.execute_with_retry(deletion, lambda _: self.load_products())
        if self.error is not None and deletion.store_deleted:
            # gone from the store, only its reminder is left behind
            self.products = [p for p in self.products if p.id != product.id]
            self._filter_and_sort()

    async def search_products(self, query: str) -> None:
        self.search_text = query
        if not query:
            return

        def on_success(results: List[Product]):
            self.filtered_products = results

        await self.execute_with_retry(
            lambda: self.search_products_use_case.search_products(query, self._sort_option),
            on_success,
        )

    def schedule_search(self, query: str) -> asyncio.Task:
        """Debounced search: rapid keystrokes only trigger the last query."""
        return self._debouncer.run(lambda: self.search_products(query))

    def get_product(self, product_id: uuid.UUID) -> Optional[Product]:
        return next((p for p in self.products if p.id == product_id), None)

    async def _schedule_notifications(self, products: List[Product]) -> None:
        try:
            await self.manage_alerts_use_case.schedule_notifications_for_upcoming_products(products)
        except Exception as error:
            # reminders are best-effort here, the list still loads
            self.logger.error("Failed to schedule notifications: %s", error)

    # --- Store change notifications --------------------------------------------
    def _on_products_changed(self, event_name: str, payload: Any) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            self.logger.debug("Ignoring %s outside of an event loop", event_name)
            return
        self.logger.debug("Store change detected (%s), refreshing", payload)
        task = loop.create_task(self.refresh_products())
        self._pending_refreshes.add(task)
        task.add_done_callback(self._pending_refreshes.discard)

    async def wait_for_pending_refreshes(self) -> None:
        if self._pending_refreshes:
            await asyncio.gather(*list(self._pending_refreshes))

    def close(self) -> None:
        self._debouncer.cancel()
        if self._event_bus is not None:
            self._event_bus.unsubscribe(PRODUCTS_CHANGED, self._on_products_changed)
