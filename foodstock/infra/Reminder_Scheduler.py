"""Local expiration reminders.

A reminder fires REMINDER_LEAD_HOURS before a product expires and is keyed by
``expiration_<product id>`` so a product has at most one pending reminder.
"""
from __future__ import annotations
import asyncio
import json
import logging
import os
import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass, field, asdict
from datetime import datetime, timedelta
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

from foodstock.domain.Errors import NotificationError
from foodstock.domain.Product import Product
from foodstock.infra.paths import REMINDERS_FILE
from foodstock.utilities.constants import REMINDER_CATEGORY, REMINDER_ID_PREFIX, REMINDER_LEAD_HOURS

logger = logging.getLogger(__name__)


class PermissionStatus(Enum):
    AUTHORIZED = "authorized"
    DENIED = "denied"


def reminder_identifier(product_id: uuid.UUID) -> str:
    return f"{REMINDER_ID_PREFIX}{product_id}"


@dataclass
class NotificationContent:
    title: str
    body: str
    identifier: str
    category_identifier: str = REMINDER_CATEGORY
    user_info: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def for_product(cls, product: Product, days_until_expiration: int) -> "NotificationContent":
        if days_until_expiration <= 0:
            title = "⚠️ Produit expiré"
            body = f"{product.name} a expiré. Vérifiez sa qualité avant consommation."
        else:
            title = "🔔 Expiration proche"
            plural = "s" if days_until_expiration > 1 else ""
            body = f"{product.name} expire dans {days_until_expiration} jour{plural}"
        return cls(
            title=title,
            body=body,
            identifier=reminder_identifier(product.id),
            user_info={
                "productId": str(product.id),
                "productName": product.name,
                "expirationDate": product.expiration_date.timestamp(),
            },
        )


class ReminderScheduler(ABC):
    def __init__(self, clock: Optional[Callable[[], datetime]] = None, permission_granted: bool = True):
        self._clock = clock or datetime.now
        self.permission_granted = permission_granted
        self._lock = asyncio.Lock()

    @abstractmethod
    async def _read_all(self) -> Dict[str, dict]:
        ...

    @abstractmethod
    async def _write_all(self, pending: Dict[str, dict]) -> None:
        ...

    async def _load(self) -> Dict[str, dict]:
        try:
            pending = await self._read_all()
        except (OSError, ValueError, TypeError) as e:
            logger.error("Failed to read reminders: %s", e)
            raise NotificationError.scheduling_failed() from e
        if not isinstance(pending, dict):
            logger.error("Reminder store holds %s instead of an object", type(pending).__name__)
            raise NotificationError.scheduling_failed()
        return pending

    async def _save(self, pending: Dict[str, dict]) -> None:
        try:
            await self._write_all(pending)
        except (OSError, TypeError, ValueError) as e:
            logger.error("Failed to write reminders: %s", e)
            raise NotificationError.scheduling_failed() from e

    # --- Permission ------------------------------------------------------------
    async def request_permission(self) -> None:
        if not self.permission_granted:
            raise NotificationError.permission_denied()

    async def check_permission_status(self) -> PermissionStatus:
        return PermissionStatus.AUTHORIZED if self.permission_granted else PermissionStatus.DENIED

    # --- Scheduling ------------------------------------------------------------
    async def schedule_expiration_notification(self, product: Product) -> None:
        if not product.name.strip():
            raise NotificationError.invalid_content()
        await self.request_permission()

        now = self._clock()
        fire_at = product.expiration_date - timedelta(hours=REMINDER_LEAD_HOURS)
        content = NotificationContent.for_product(product, max(1, product.days_until_expiration(now)))

        async with self._lock:
            pending = await self._load()
            pending.pop(content.identifier, None)
            if fire_at > now:
                pending[content.identifier] = {"fire_at": fire_at.isoformat(), **asdict(content)}
            await self._save(pending)

        if fire_at > now:
            logger.debug("Reminder %s scheduled for %s", content.identifier, fire_at)
        else:
            logger.debug("Reminder for %s skipped: %s already past", product.name, fire_at)

    async def remove_notification(self, product_id: uuid.UUID) -> None:
        identifier = reminder_identifier(product_id)
        async with self._lock:
            pending = await self._load()
            if pending.pop(identifier, None) is not None:
                await self._save(pending)

    async def remove_all_notifications(self) -> None:
        async with self._lock:
            await self._save({})

    async def pending_identifiers(self) -> List[str]:
        return list(await self._load())

    async def pending_reminder(self, product_id: uuid.UUID) -> Optional[dict]:
        return (await self._load()).get(reminder_identifier(product_id))


class InMemoryReminderScheduler(ReminderScheduler):
    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self._pending: Dict[str, dict] = {}

    async def _read_all(self) -> Dict[str, dict]:
        return dict(self._pending)

    async def _write_all(self, pending: Dict[str, dict]) -> None:
        self._pending = dict(pending)


class JsonReminderScheduler(ReminderScheduler):
    def __init__(self, path: Optional[Path] = None, **kwargs):
        super().__init__(**kwargs)
        self.path = Path(path or REMINDERS_FILE)

    def _read_file(self) -> Dict[str, dict]:
        if not self.path.exists():
            return {}
        with open(self.path, 'r', encoding='utf-8') as f:
            return json.load(f)

    def _write_file(self, pending: Dict[str, dict]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(self.path.suffix + '.tmp')
        with open(tmp_path, 'w', encoding='utf-8') as f:
            json.dump(pending, f, ensure_ascii=False, indent=2)
        os.replace(tmp_path, self.path)

    async def _read_all(self) -> Dict[str, dict]:
        return await asyncio.to_thread(self._read_file)

    async def _write_all(self, pending: Dict[str, dict]) -> None:
        await asyncio.to_thread(self._write_file, pending)


__all__ = ['ReminderScheduler', 'InMemoryReminderScheduler', 'JsonReminderScheduler',
           'NotificationContent', 'PermissionStatus', 'reminder_identifier']
