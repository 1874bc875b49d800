import asyncio
import logging

from foodstock.controllers.alerts import AlertsController
from foodstock.controllers.product_list import ProductListController
from foodstock.events.Event_Bus import EventBus
from foodstock.infra.Product_Repository import create_product_repository
from foodstock.infra.Reminder_Scheduler import JsonReminderScheduler
from foodstock.logic.alerts.manager import ManageExpirationAlertsUseCase
from foodstock.logic.products.use_cases import DeleteProductUseCase, SearchProductsUseCase
from foodstock.utilities.logger import setup_logger

logger = logging.getLogger("foodstock.main")


async def main() -> int:
    bus = EventBus()
    repository = create_product_repository(event_bus=bus)
    if repository.initialization_error is not None:
        logger.warning("%s %s", repository.initialization_error.description,
                       repository.initialization_error.recovery_suggestion)
    scheduler = JsonReminderScheduler()

    manage_alerts = ManageExpirationAlertsUseCase(repository, scheduler)
    delete_product = DeleteProductUseCase(repository, scheduler)
    product_list = ProductListController(SearchProductsUseCase(repository), delete_product, manage_alerts, bus)
    alerts = AlertsController(manage_alerts, delete_product)

    await product_list.load_products()
    await alerts.load_alerts()
    product_list.close()

    for controller in (product_list, alerts):
        if controller.error is not None:
            logger.error("%s: %s", controller.error.description, controller.error.recovery_suggestion)
            return 1

    logger.info("%d products, %d expired, %d expiring soon",
                len(product_list.products), len(alerts.expired_products), len(alerts.soon_expired_products))
    for product in alerts.expired_products + alerts.soon_expired_products:
        logger.info("  %s [%s]", product, alerts.get_alert_type_for_product(product).title)
    return 0


if __name__ == "__main__":
    setup_logger("foodstock")
    raise SystemExit(asyncio.run(main()))
