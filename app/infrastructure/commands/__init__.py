"""Command framework for chat bot commands.

This framework provides:
- ArgType: Typed, validated argument specifications
- CommandRegistry: Register commands and subcommands from a module
- CommandTree: Resolve, check and run commands from message tokens
- MessageContext: Per-message execution context
- MessageHandler: Entry point called by the chat platform client

Example:
    from infrastructure.commands import (
        ArgType, CommandRegistry, MessageHandler, build_tree
    )

    registry = CommandRegistry("fun")

    @registry.command(
        "echo",
        args=[ArgType.STRING("text").extend()],
        help="Repeat a message",
    )
    async def echo(ctx, text):
        await ctx.send(text)

    handler = MessageHandler(build_tree([registry]), directory=client)
    await handler.handle(message, responder)
"""

from infrastructure.commands.arguments import ArgType
from infrastructure.commands.context import (
    Author,
    Message,
    MessageContext,
    ResponseChannel,
)
from infrastructure.commands.directory import (
    Channel,
    DirectoryService,
    Member,
    Role,
    User,
    find_like,
)
from infrastructure.commands.errors import CommandError, EntityNotFoundError
from infrastructure.commands.handler import MessageHandler
from infrastructure.commands.registry import (
    CommandDefinition,
    CommandRegistry,
    build_tree,
)
from infrastructure.commands.responses import ErrorMessage, Notice, SuccessMessage
from infrastructure.commands.tree import ROOT, CommandNode, CommandTree, Resolution

__all__ = [
    # Arguments
    "ArgType",
    # Context
    "Author",
    "Message",
    "MessageContext",
    "ResponseChannel",
    # Directory
    "Channel",
    "DirectoryService",
    "Member",
    "Role",
    "User",
    "find_like",
    # Errors
    "CommandError",
    "EntityNotFoundError",
    # Core
    "CommandDefinition",
    "CommandNode",
    "CommandRegistry",
    "CommandTree",
    "MessageHandler",
    "Resolution",
    "ROOT",
    "build_tree",
    # Responses
    "ErrorMessage",
    "Notice",
    "SuccessMessage",
]
