"""Command execution context."""

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Optional, Protocol
from uuid import uuid4

from core.logging import get_module_logger
from infrastructure.commands.directory import DirectoryService, Member
from infrastructure.commands.responses.models import (
    ErrorMessage,
    Notice,
    SuccessMessage,
)

if TYPE_CHECKING:
    from infrastructure.commands.tree import CommandTree

logger = get_module_logger()


class ResponseChannel(Protocol):
    """Protocol for platform-specific reply channels."""

    async def send_text(self, text: str) -> None:
        """Send a plain text message."""
        ...  # pylint: disable=unnecessary-ellipsis

    async def send_notice(self, notice: Notice) -> None:
        """Send a structured notice (embed).

        Args:
            notice: Notice from infrastructure.commands.responses.models
        """
        ...  # pylint: disable=unnecessary-ellipsis


@dataclass(frozen=True)
class Author:
    """Author of an inbound message."""

    id: str
    tag: str = ""
    bot: bool = False


@dataclass(frozen=True)
class Message:
    """Inbound chat message.

    Attributes:
        content: Raw message text, including the command prefix
        author: Message author
        channel_id: Channel the message was posted in
        member: Guild member of the author, None outside guilds
    """

    content: str
    author: Author
    channel_id: str = ""
    member: Optional[Member] = None


@dataclass
class MessageContext:
    """Per-message execution context handed to argument types and handlers.

    Bundles the inbound message with the capabilities a command may need:
    the reply channel, the directory service and the command tree itself.

    Example:
        async def ping(ctx: MessageContext):
            await ctx.send("pong")
            await ctx.send_success("Still alive")
    """

    message: Message
    tree: "CommandTree"
    directory: Optional[DirectoryService] = None
    responder: Optional[ResponseChannel] = None
    correlation_id: Optional[str] = None

    def __post_init__(self):
        """Initialize defaults."""
        if self.correlation_id is None:
            self.correlation_id = str(uuid4())

    @property
    def member(self) -> Optional[Member]:
        """Guild member of the message author."""
        return self.message.member

    async def send(self, text: str) -> None:
        """Send a plain text reply."""
        if self.responder is None:
            logger.warning("send called without responder set", text=text)
            return
        await self.responder.send_text(text)

    async def send_notice(self, notice: Notice) -> None:
        """Send a structured notice."""
        if self.responder is None:
            logger.warning("send_notice called without responder set")
            return
        await self.responder.send_notice(notice)

    async def send_error(self, text: str) -> None:
        """Send a red error notice."""
        await self.send_notice(ErrorMessage(text).to_notice())

    async def send_success(self, text: str) -> None:
        """Send a green success notice."""
        await self.send_notice(SuccessMessage(text).to_notice())
