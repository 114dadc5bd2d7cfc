"""Platform-agnostic response models for command handlers."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional

ERROR_COLOR = 0xFF0000
SUCCESS_COLOR = 0x00FF00
HELP_COLOR = 150


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class Notice:
    """Structured message (embed) sent to a reply channel.

    Attributes:
        body: Main text content.
        title: Optional title line.
        color: RGB color of the accent bar, as an integer.
        author: Optional short label displayed above the body.
        timestamp: Creation time (UTC).
    """

    body: str
    title: Optional[str] = None
    color: int = HELP_COLOR
    author: Optional[str] = None
    timestamp: datetime = field(default_factory=_utcnow)


@dataclass
class ErrorMessage:
    """Platform-agnostic error message representation.

    Attributes:
        message: Error message text displayed to the user.
        details: Optional detailed error information.
    """

    message: str
    details: Optional[str] = None

    def to_notice(self) -> Notice:
        """Render as a red notice with the message in bold."""
        body = f"**{self.message}**"
        if self.details:
            body += f"\n{self.details}"
        return Notice(body=body, color=ERROR_COLOR, author="Error!")


@dataclass
class SuccessMessage:
    """Platform-agnostic success message representation.

    Attributes:
        message: Success message text displayed to the user.
        details: Optional additional details about the success.
    """

    message: str
    details: Optional[str] = None

    def to_notice(self) -> Notice:
        """Render as a green notice with the message in bold."""
        body = f"**{self.message}**"
        if self.details:
            body += f"\n{self.details}"
        return Notice(body=body, color=SUCCESS_COLOR, author="Success!")
