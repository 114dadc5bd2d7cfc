"""Per-message command handling.

MessageHandler is the boundary between the chat platform client and the
command tree. The client calls `handle` once per inbound message, from its own
task; handling is independent from one message to the next.
"""

from typing import List, Optional

import structlog

from core.config import settings
from core.logging import get_module_logger
from infrastructure.commands.context import Message, MessageContext, ResponseChannel
from infrastructure.commands.directory import DirectoryService
from infrastructure.commands.errors import CommandError
from infrastructure.commands.tree import CommandTree

logger = get_module_logger()


class MessageHandler:
    """Turn inbound messages into command invocations.

    Command flow:
    1. Ignore messages authored by bots
    2. Ignore messages not starting with the command prefix
    3. Tokenize the text after the prefix on whitespace
    4. Run the command tree
    5. Report user errors as an error notice, anything else as plain text

    Example:
        handler = MessageHandler(tree, directory=client_directory)
        await handler.handle(message, responder)
    """

    def __init__(
        self,
        tree: CommandTree,
        directory: Optional[DirectoryService] = None,
        prefix: Optional[str] = None,
    ):
        """Initialize handler.

        Args:
            tree: Command tree to dispatch into
            directory: Directory service used by argument lookups
            prefix: Command prefix, defaults to the configured COMMAND_PREFIX
        """
        self.tree = tree
        self.directory = directory
        self.prefix = settings.bot.COMMAND_PREFIX if prefix is None else prefix

    def tokenize(self, content: str) -> List[str]:
        """Split the text following the prefix into tokens."""
        return content[len(self.prefix) :].split()

    def is_command(self, message: Message) -> bool:
        return not message.author.bot and message.content.startswith(self.prefix)

    async def handle(self, message: Message, responder: ResponseChannel) -> None:
        """Handle one inbound message.

        Args:
            message: Inbound message
            responder: Reply channel of the message
        """
        if not self.is_command(message):
            return

        ctx = MessageContext(
            message=message,
            tree=self.tree,
            directory=self.directory,
            responder=responder,
        )
        tokens = self.tokenize(message.content)

        with structlog.contextvars.bound_contextvars(
            correlation_id=ctx.correlation_id,
            author_id=message.author.id,
            channel_id=message.channel_id,
        ):
            try:
                await self.tree.run(tokens, ctx)
            except CommandError as e:
                logger.info("command_rejected", tokens=tokens, error=str(e))
                await ctx.send_error(str(e))
            except Exception as e:  # pylint: disable=broad-except
                logger.exception("unhandled_command_error", tokens=tokens, error=str(e))
                await ctx.send(f"{type(e).__name__}: {e}")
