"""
Barbershop core entry point.

Opens the shop against the configured JSON store and either prints the
client's agenda or hands over to the interactive console.

Usage:
    Agenda:       python main.py agenda
    Console mode: python main.py console
    Backup:       python main.py backup
"""

import logging
import sys

from barbershop.config import settings
from barbershop.notifications import LogNotifier, WebhookNotifier
from barbershop.shop import BarberShop
from barbershop.storage import JsonFileStore

logger = logging.getLogger(__name__)


def _build_shop() -> BarberShop:
    """Build a BarberShop persisted under the configured data directory."""
    notifier = WebhookNotifier() if settings.notifications.webhook_url else LogNotifier()
    shop = BarberShop(store=JsonFileStore(), notifier=notifier)
    logger.info(
        "Shop opened: %d providers, %d services, %d appointments",
        len(shop.providers), len(shop.catalog), len(shop.appointments),
    )
    return shop


def _print_agenda() -> None:
    shop = _build_shop()
    upcoming = shop.upcoming()
    print(f"{settings.business.name} - upcoming appointments ({len(upcoming)})")
    for app in upcoming:
        print(f"  {app.date} {app.time}-{app.end_time}  {app.provider_name}  {app.id}")


def _run_backup() -> None:
    _build_shop().save_all()


def _run_console_mode() -> None:
    """Start the console demo against the JSON store."""
    from console_demo import ConsoleSession

    ConsoleSession(store=JsonFileStore()).run()


if __name__ == "__main__":
    mode = sys.argv[1] if len(sys.argv) > 1 else "agenda"
    if mode == "console":
        _run_console_mode()
    elif mode == "backup":
        _run_backup()
    else:
        _print_agenda()
