import tempfile
import unittest
from datetime import datetime, timedelta
from pathlib import Path

from foodstock.domain.Errors import NotificationError
from foodstock.domain.Product import Product, ProductCategory, ProductLocation
from foodstock.infra.Reminder_Scheduler import (
    InMemoryReminderScheduler, JsonReminderScheduler, NotificationContent, PermissionStatus, reminder_identifier
)

NOW = datetime(2026, 10, 19, 12, 0)


def clock():
    return NOW


def make_product(name="Yaourt", expires_in_days=3):
    return Product(
        name=name, quantity=4.0, unit="pièce(s)", category=ProductCategory.DAIRY,
        location=ProductLocation.REFRIGERATOR, arrival_date=NOW - timedelta(days=1),
        expiration_date=NOW + timedelta(days=expires_in_days), lot_number="Y-42",
    )


class TestReminderScheduler(unittest.IsolatedAsyncioTestCase):

    def setUp(self):
        self.scheduler = InMemoryReminderScheduler(clock=clock)

    async def test_reminder_fires_a_day_before_expiration(self):
        product = make_product(expires_in_days=3)
        await self.scheduler.schedule_expiration_notification(product)
        reminder = await self.scheduler.pending_reminder(product.id)
        self.assertEqual(reminder["identifier"], f"expiration_{product.id}")
        self.assertEqual(datetime.fromisoformat(reminder["fire_at"]), NOW + timedelta(days=2))
        self.assertEqual(reminder["body"], "Yaourt expire dans 3 jours")
        self.assertEqual(reminder["user_info"]["productId"], str(product.id))

    async def test_rescheduling_replaces_existing_reminder(self):
        product = make_product(expires_in_days=3)
        await self.scheduler.schedule_expiration_notification(product)
        await self.scheduler.schedule_expiration_notification(product.replace(expiration_date=NOW + timedelta(days=5)))
        self.assertEqual(await self.scheduler.pending_identifiers(), [reminder_identifier(product.id)])
        reminder = await self.scheduler.pending_reminder(product.id)
        self.assertEqual(datetime.fromisoformat(reminder["fire_at"]), NOW + timedelta(days=4))

    async def test_past_fire_time_is_not_scheduled(self):
        product = make_product(expires_in_days=0.5)
        await self.scheduler.schedule_expiration_notification(product)
        self.assertEqual(await self.scheduler.pending_identifiers(), [])

    async def test_past_fire_time_drops_previous_reminder(self):
        product = make_product(expires_in_days=3)
        await self.scheduler.schedule_expiration_notification(product)
        await self.scheduler.schedule_expiration_notification(product.replace(expiration_date=NOW + timedelta(hours=2)))
        self.assertIsNone(await self.scheduler.pending_reminder(product.id))

    async def test_blank_name_is_invalid_content(self):
        with self.assertRaises(NotificationError) as ctx:
            await self.scheduler.schedule_expiration_notification(make_product(name="  "))
        self.assertEqual(ctx.exception, NotificationError.invalid_content())

    async def test_permission_denied(self):
        scheduler = InMemoryReminderScheduler(clock=clock, permission_granted=False)
        self.assertEqual(await scheduler.check_permission_status(), PermissionStatus.DENIED)
        with self.assertRaises(NotificationError) as ctx:
            await scheduler.schedule_expiration_notification(make_product())
        self.assertEqual(ctx.exception, NotificationError.permission_denied())
        self.assertEqual(await scheduler.pending_identifiers(), [])

    async def test_remove_notifications(self):
        first, second = make_product("A", 5), make_product("B", 6)
        await self.scheduler.schedule_expiration_notification(first)
        await self.scheduler.schedule_expiration_notification(second)
        await self.scheduler.remove_notification(first.id)
        await self.scheduler.remove_notification(first.id)
        self.assertEqual(await self.scheduler.pending_identifiers(), [reminder_identifier(second.id)])
        await self.scheduler.remove_all_notifications()
        self.assertEqual(await self.scheduler.pending_identifiers(), [])


class TestJsonReminderScheduler(unittest.IsolatedAsyncioTestCase):

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmp.cleanup)
        self.path = Path(self.tmp.name) / "reminders.json"

    async def test_reminders_survive_reopen(self):
        product = make_product(expires_in_days=4)
        await JsonReminderScheduler(self.path, clock=clock).schedule_expiration_notification(product)
        reopened = JsonReminderScheduler(self.path, clock=clock)
        self.assertEqual(await reopened.pending_identifiers(), [reminder_identifier(product.id)])

    async def test_corrupt_file_is_scheduling_failure(self):
        self.path.write_text("not json", encoding="utf-8")
        with self.assertRaises(NotificationError) as ctx:
            await JsonReminderScheduler(self.path, clock=clock).pending_identifiers()
        self.assertEqual(ctx.exception, NotificationError.scheduling_failed())

    async def test_wrong_shape_is_scheduling_failure(self):
        self.path.write_text("[]", encoding="utf-8")
        scheduler = JsonReminderScheduler(self.path, clock=clock)
        with self.assertRaises(NotificationError) as ctx:
            await scheduler.schedule_expiration_notification(make_product())
        self.assertEqual(ctx.exception, NotificationError.scheduling_failed())
        with self.assertRaises(NotificationError):
            await scheduler.remove_notification(make_product().id)


class TestNotificationContent(unittest.TestCase):

    def test_wording(self):
        product = make_product("Beurre")
        self.assertEqual(NotificationContent.for_product(product, 1).body, "Beurre expire dans 1 jour")
        expired = NotificationContent.for_product(product, 0)
        self.assertEqual(expired.title, "⚠️ Produit expiré")
        self.assertEqual(expired.category_identifier, "EXPIRATION_REMINDER")
