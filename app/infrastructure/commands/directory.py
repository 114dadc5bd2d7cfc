"""Directory lookups for channels, users, members and roles.

The chat platform client owns the actual directory. Argument types only see
it through the DirectoryService protocol, so any client (or a test double)
exposing these coroutines can back them.
"""

from dataclasses import dataclass, field
import re
from typing import Callable, FrozenSet, Iterable, List, Protocol, TypeVar

T = TypeVar("T")

_MARKDOWN_CHARS = re.compile(r"([\\*_~`|>])")


@dataclass(frozen=True)
class Channel:
    """Guild channel."""

    id: str
    name: str


@dataclass(frozen=True)
class User:
    """Platform user, as seen in the client cache.

    Attributes:
        id: User identifier
        tag: Display key used for fuzzy lookups (e.g. "anna#0042")
        bot: True for bot accounts
    """

    id: str
    tag: str
    bot: bool = False


@dataclass(frozen=True)
class Role:
    """Guild role."""

    id: str
    name: str


@dataclass(frozen=True)
class Member:
    """Guild member with the data needed for permission checks.

    Attributes:
        id: User identifier of the member
        display_name: Nickname or user name in the guild
        role_ids: Identifiers of the roles held by the member
        permissions: Guild permission bit field
        guild_owner_id: Identifier of the guild owner
    """

    id: str
    display_name: str = ""
    role_ids: FrozenSet[str] = field(default_factory=frozenset)
    permissions: int = 0
    guild_owner_id: str = ""


class DirectoryService(Protocol):
    """Protocol for platform-specific directory lookups.

    The fetch coroutines raise EntityNotFoundError when the id is unknown.
    """

    async def fetch_channel(self, channel_id: str) -> Channel:
        """Fetch a guild channel by id."""
        ...  # pylint: disable=unnecessary-ellipsis

    async def fetch_member(self, user_id: str) -> Member:
        """Fetch a guild member by user id."""
        ...  # pylint: disable=unnecessary-ellipsis

    async def fetch_role(self, role_id: str) -> Role:
        """Fetch a guild role by id."""
        ...  # pylint: disable=unnecessary-ellipsis

    def cached_users(self) -> Iterable[User]:
        """Users already loaded in the client cache."""
        ...  # pylint: disable=unnecessary-ellipsis


def find_like(query: str, candidates: Iterable[T], key: Callable[[T], str]) -> List[T]:
    """Fuzzy-match candidates against a query.

    Candidates whose key contains the query (case-insensitive) are kept. If
    exactly one of them equals the query case-insensitively, it is returned
    alone even though other candidates also contain the query.

    Args:
        query: Text typed by the user
        candidates: Entities to search
        key: Function returning the display key of a candidate

    Returns:
        List of matching candidates, in input order

    Example:
        find_like("ann", users, lambda u: u.tag)   # [Anna, Annabelle]
        find_like("Anna", users, lambda u: u.tag)  # [Anna]
    """
    needle = query.lower()
    matches = [c for c in candidates if needle in key(c).lower()]
    exact = [c for c in matches if key(c).lower() == needle]
    if len(exact) == 1:
        return exact
    return matches


def escape(text: str) -> str:
    """Escape markdown control characters so text is echoed literally."""
    return _MARKDOWN_CHARS.sub(r"\\\1", text)
