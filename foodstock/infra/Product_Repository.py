"""Product repositories: the durable store behind every screen.

Two implementations share one async interface: an in-memory store (also used as
the fallback when the JSON file cannot be opened) and a JSON file store whose
file I/O runs on a worker thread.
"""
from __future__ import annotations
import asyncio
import json
import logging
import os
import uuid
from abc import ABC, abstractmethod
from datetime import datetime, timedelta
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Optional

from foodstock.domain.Errors import DataError
from foodstock.domain.Product import Product
from foodstock.events.Event_Bus import EventBus, publish_products_changed
from foodstock.infra.paths import PRODUCTS_FILE

logger = logging.getLogger(__name__)

_READ_ERRORS = (OSError, ValueError, KeyError, TypeError)


class ProductRepository(ABC):
    """Async product store. Subclasses only provide raw read/write of the whole collection."""

    def __init__(self, event_bus: Optional[EventBus] = None,
                 clock: Optional[Callable[[], datetime]] = None):
        self._event_bus = event_bus
        self._clock = clock or datetime.now
        self._lock = asyncio.Lock()
        self.initialization_error: Optional[DataError] = None

    @property
    def is_using_in_memory_fallback(self) -> bool:
        return self.initialization_error is not None

    @abstractmethod
    async def _read_all(self) -> Dict[uuid.UUID, Product]:
        ...

    @abstractmethod
    async def _write_all(self, products: Dict[uuid.UUID, Product]) -> None:
        ...

    async def _load(self) -> Dict[uuid.UUID, Product]:
        try:
            return await self._read_all()
        except _READ_ERRORS as e:
            logger.error("Failed to read products: %s", e)
            raise DataError.fetch_failed() from e

    async def _save(self, products: Dict[uuid.UUID, Product], failure: DataError) -> None:
        try:
            await self._write_all(products)
        except (OSError, TypeError, ValueError) as e:
            logger.error("Failed to write products: %s", e)
            raise failure from e

    # --- CRUD ------------------------------------------------------------------
    async def fetch_products(self) -> List[Product]:
        return list((await self._load()).values())

    async def add_product(self, product: Product) -> None:
        async with self._lock:
            products = await self._load()
            if product.id in products:
                raise DataError.store_error("Produit déjà existant")
            products[product.id] = product
            await self._save(products, DataError.save_failed())
        logger.debug("Product added: %s", product.name)
        publish_products_changed(self._event_bus, "added", product.id)

    async def update_product(self, product: Product) -> None:
        async with self._lock:
            products = await self._load()
            if product.id not in products:
                raise DataError.not_found()
            products[product.id] = product
            await self._save(products, DataError.save_failed())
        logger.debug("Product updated: %s", product.name)
        publish_products_changed(self._event_bus, "updated", product.id)

    async def delete_product(self, product_id: uuid.UUID) -> None:
        async with self._lock:
            products = await self._load()
            if product_id not in products:
                raise DataError.not_found()
            del products[product_id]
            await self._save(products, DataError.delete_failed())
        logger.debug("Product deleted: %s", product_id)
        publish_products_changed(self._event_bus, "deleted", product_id)

    # --- Queries ---------------------------------------------------------------
    async def search_products(self, query: str) -> List[Product]:
        needle = query.strip().lower()
        return [
            p for p in await self.fetch_products()
            if needle in p.name.lower()
            or needle in p.category.value.lower()
            or needle in p.lot_number.lower()
        ]

    async def get_products_expiring_within(self, days: int) -> List[Product]:
        now = self._clock()
        limit = now + timedelta(days=days)
        return [p for p in await self.fetch_products() if now <= p.expiration_date <= limit]

    async def get_expired_products(self) -> List[Product]:
        now = self._clock()
        return [p for p in await self.fetch_products() if p.expiration_date < now]


class InMemoryProductRepository(ProductRepository):
    def __init__(self, products: Optional[Iterable[Product]] = None, **kwargs):
        super().__init__(**kwargs)
        self._products: Dict[uuid.UUID, Product] = {p.id: p for p in products or []}

    async def _read_all(self) -> Dict[uuid.UUID, Product]:
        return dict(self._products)

    async def _write_all(self, products: Dict[uuid.UUID, Product]) -> None:
        self._products = dict(products)


class JsonProductRepository(ProductRepository):
    def __init__(self, path: Optional[Path] = None, **kwargs):
        super().__init__(**kwargs)
        self.path = Path(path or PRODUCTS_FILE)

    def read_file(self) -> Dict[uuid.UUID, Product]:
        '''Reads the JSON array of products. A missing file is an empty store.'''
        if not self.path.exists():
            return {}
        with open(self.path, 'r', encoding='utf-8') as f:
            data = json.load(f)
        products = (Product.from_dict(entry) for entry in data)
        return {p.id: p for p in products}

    def _write_file(self, products: Dict[uuid.UUID, Product]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(self.path.suffix + '.tmp')
        with open(tmp_path, 'w', encoding='utf-8') as f:
            json.dump([p.to_dict() for p in products.values()], f, ensure_ascii=False, indent=2)
        os.replace(tmp_path, self.path)

    async def _read_all(self) -> Dict[uuid.UUID, Product]:
        return await asyncio.to_thread(self.read_file)

    async def _write_all(self, products: Dict[uuid.UUID, Product]) -> None:
        await asyncio.to_thread(self._write_file, products)


def create_product_repository(path: Optional[Path] = None, event_bus: Optional[EventBus] = None,
                              clock: Optional[Callable[[], datetime]] = None) -> ProductRepository:
    """Open the JSON store, falling back to memory when the file is unreadable."""
    repository = JsonProductRepository(path, event_bus=event_bus, clock=clock)
    try:
        repository.read_file()
        return repository
    except _READ_ERRORS as e:
        logger.error("Product store %s unusable, falling back to memory: %s", repository.path, e)
    fallback = InMemoryProductRepository(event_bus=event_bus, clock=clock)
    fallback.initialization_error = DataError.store_fatal_error()
    return fallback


__all__ = ['ProductRepository', 'InMemoryProductRepository', 'JsonProductRepository',
           'create_product_repository']
