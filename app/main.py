import asyncio
from typing import Iterable, Optional

from core.config import settings
from core.logging import get_module_logger
from infrastructure.commands import (
    Author,
    CommandRegistry,
    DirectoryService,
    Member,
    Message,
    MessageHandler,
    Notice,
    build_tree,
)
from infrastructure.commands.permissions import ADMINISTRATOR
from modules import utility

logger = get_module_logger()

REGISTRIES = (utility.registry,)


def create_message_handler(
    directory: Optional[DirectoryService] = None,
    registries: Iterable[CommandRegistry] = REGISTRIES,
) -> MessageHandler:
    """Build the command tree once and wrap it in a message handler."""
    tree = build_tree(registries)
    return MessageHandler(tree, directory=directory)


def list_configs():
    """List all configuration settings keys"""
    config_settings = {"settings": []}

    for key, value in settings.model_dump().items():
        if isinstance(value, dict):
            config_settings[key] = list(value.keys())
        else:
            config_settings["settings"].append({key: value})

    logger.info("configuration_initialized", base_settings=config_settings["settings"])
    for key, value in config_settings.items():
        if key != "settings":
            logger.info("configuration_loaded", config_setting=key, keys=value)


class ConsoleChannel:
    """Reply channel printing to the terminal, for local development."""

    async def send_text(self, text: str) -> None:
        print(text)

    async def send_notice(self, notice: Notice) -> None:
        header = " - ".join(part for part in (notice.author, notice.title) if part)
        if header:
            print(f"[{header}]")
        print(notice.body)


async def main():
    """Run the bot against standard input, as the guild owner."""
    logger.info("application_startup", git_sha=settings.GIT_SHA)
    list_configs()

    handler = create_message_handler()
    author = Author(id="0", tag="console")
    member = Member(id="0", permissions=ADMINISTRATOR, guild_owner_id="0")
    channel = ConsoleChannel()

    while True:
        try:
            content = await asyncio.to_thread(input, "> ")
        except EOFError:
            break
        message = Message(content=content, author=author, channel_id="console", member=member)
        await handler.handle(message, channel)

    logger.info("application_shutdown")


if __name__ == "__main__":
    asyncio.run(main())
