"""Main entry point for the checklist bot."""
import logging
import signal
import sys

from bot import ChecklistBot, TelegramTransport
from checklist import ChecklistFactory
from config import load_settings
from dispatcher import Dispatcher
from errors import ConfigError
from storage import ConnectionStorage, JsonFileStorage
from store import ChecklistStore
from telegram_api import TelegramClient
from templates import TaskTemplates

logger = logging.getLogger("checklist_bot")


def build_bot(settings) -> ChecklistBot:
    templates = TaskTemplates.from_file(settings.template_file) if settings.template_file else TaskTemplates()
    factory = ChecklistFactory(templates, settings.url_prefix)
    store = ChecklistStore(JsonFileStorage(settings.store_file), factory)
    client = TelegramClient(settings.bot_token)
    dispatcher = Dispatcher(store, TelegramTransport(client), native_checklists=settings.native_checklists,
                            connections=ConnectionStorage(settings.connections_file))
    return ChecklistBot(client, dispatcher, poll_timeout=settings.poll_timeout)


def main() -> int:
    try:
        settings = load_settings()
    except ConfigError as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        return 1
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s %(levelname)s %(message)s",
    )
    try:
        bot = build_bot(settings)
    except ConfigError as exc:
        logger.error("Configuration error: %s", exc)
        return 1
    signal.signal(signal.SIGINT, lambda signum, frame: bot.stop('SIGINT'))
    signal.signal(signal.SIGTERM, lambda signum, frame: bot.stop('SIGTERM'))
    bot.run()
    return 0


if __name__ == "__main__":
    sys.exit(main())
