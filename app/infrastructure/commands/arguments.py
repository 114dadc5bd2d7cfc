"""Typed argument specifications.

An ArgType validates raw text against a pattern, then converts it with an
asynchronous reader. Argument types are immutable: the builder methods return
a modified copy, so a factory result can be shared between commands.

Example:
    ArgType.RANGE("count", 1, 100).make_optional().default(10)
    ArgType.CHANNEL("target") | ArgType.INTEGER("target id")
    ArgType.STRING("reason").extend()        # consumes all remaining tokens
    ArgType.STRING("title").extend(-1)       # all remaining but the last one
"""

import asyncio
from dataclasses import dataclass, replace
import re
from typing import (
    TYPE_CHECKING,
    Any,
    Awaitable,
    Callable,
    Generic,
    Iterable,
    Optional,
    Tuple,
    TypeVar,
)

from core.config import settings
from infrastructure.commands.directory import (
    Channel,
    DirectoryService,
    Member,
    Role,
    User,
    escape,
    find_like,
)
from infrastructure.commands.errors import CommandError, EntityNotFoundError

if TYPE_CHECKING:
    from infrastructure.commands.context import MessageContext

T = TypeVar("T")

Reader = Callable[[str, "MessageContext"], Awaitable[Any]]

ANY_TEXT = re.compile(r"^.+$", re.MULTILINE)
INTEGER_PATTERN = re.compile(r"^[+-]?\d+$")
FLOAT_PATTERN = re.compile(r"^[+-]?\d+(\.\d*)?$")
CHANNEL_PATTERN = re.compile(r"^<#\d+>$|^\d+$")
MENTION_PATTERN = re.compile(r"^<@!?\d+>$|^\d+$")
ROLE_PATTERN = re.compile(r"^<@&\d+>$|^\d+$")
LINK_PATTERN = re.compile(r"^.+\..+$")


@dataclass(frozen=True)
class ArgType(Generic[T]):
    """Named, typed slot in a command signature.

    Attributes:
        name: Display name used in errors and help
        kind: Short type label (string, integer, channel, ...)
        pattern: Regular expression the raw text must match before coercion
        reader: Coroutine function converting raw text to the typed value
        optional: Whether empty input yields the fallback instead of failing
        fallback: Value returned for empty input when optional
        width: Tokens consumed; values <= 0 take everything remaining except
            the last abs(width) tokens
        alternatives: Other argument types tried against the same text
    """

    name: str
    kind: str
    pattern: re.Pattern
    reader: Reader
    optional: bool = False
    fallback: Any = None
    width: int = 1
    alternatives: Tuple["ArgType[Any]", ...] = ()

    def make_optional(self) -> "ArgType[Optional[T]]":
        return replace(self, optional=True)

    def extend(self, n: int = 0) -> "ArgType[T]":
        return replace(self, width=n)

    def default(self, value: T) -> "ArgType[T]":
        return replace(self, fallback=value)

    def or_(self, other: "ArgType[Any]") -> "ArgType[Any]":
        """Also accept the text when `other` parses it.

        Branches are tried concurrently; the first declared success wins.
        """
        return replace(self, alternatives=self.alternatives + (other,))

    __or__ = or_

    async def _read(self, raw: str, ctx: "MessageContext") -> T:
        if not self.pattern.search(raw):
            raise CommandError(f"Argument {self.name} is not in the right form")
        return await self.reader(raw, ctx)

    async def parse(self, raw: str, ctx: "MessageContext") -> T:
        """Validate and convert raw text.

        Args:
            raw: Tokens allocated to this argument, joined by single spaces
            ctx: Context of the message being handled

        Returns:
            Value of the earliest declared branch that succeeded

        Raises:
            CommandError: If the argument is required and missing, or if no
                branch accepts the text
        """
        if not raw:
            if self.optional:
                return self.fallback
            raise CommandError(f"Required argument <{self.name}> is missing")

        branches = (self,) + self.alternatives
        results = await asyncio.gather(
            *(branch._read(raw, ctx) for branch in branches),
            return_exceptions=True,
        )
        for result in results:
            if isinstance(result, BaseException) and not isinstance(result, Exception):
                raise result
        for result in results:
            if not isinstance(result, Exception):
                return result

        if len(results) == 1:
            raise results[0]
        lines = "\n".join(f"- {error}" for error in results)
        raise CommandError(f"None of the possibilities for the argument worked\n{lines}")

    def __str__(self) -> str:
        return f"*({self.name})*" if self.optional else f"*<{self.name}>*"

    # Built-in families

    @classmethod
    def STRING(cls, name: str) -> "ArgType[str]":
        async def read(arg: str, ctx: "MessageContext") -> str:
            return escape(arg)

        return cls(name, "string", ANY_TEXT, read)

    @classmethod
    def INTEGER(cls, name: str) -> "ArgType[int]":
        async def read(arg: str, ctx: "MessageContext") -> int:
            return _check_magnitude(_to_int(arg, settings.commands.INTEGER_LIMIT))

        return cls(name, "integer", INTEGER_PATTERN, read)

    @classmethod
    def RANGE(cls, name: str, start: int, stop: Optional[float] = None) -> "ArgType[int]":
        """Integer in [start, stop); stop defaults to the configured limit."""

        async def read(arg: str, ctx: "MessageContext") -> int:
            n = _to_int(arg, _range_bound(start, stop))
            return _check_range(name, n, start, stop)

        return cls(name, "integer", INTEGER_PATTERN, read)

    @classmethod
    def FLOAT(cls, name: str) -> "ArgType[float]":
        async def read(arg: str, ctx: "MessageContext") -> float:
            return _check_magnitude(float(arg))

        return cls(name, "float", FLOAT_PATTERN, read)

    @classmethod
    def FLOATRANGE(
        cls, name: str, start: float, stop: Optional[float] = None
    ) -> "ArgType[float]":
        """Float in [start, stop); stop defaults to the configured limit."""

        async def read(arg: str, ctx: "MessageContext") -> float:
            return _check_range(name, float(arg), start, stop)

        return cls(name, "float", FLOAT_PATTERN, read)

    @classmethod
    def CHOICE(cls, name: str, values: Iterable[str]) -> "ArgType[str]":
        choices = tuple(values)

        async def read(arg: str, ctx: "MessageContext") -> str:
            if arg not in choices:
                raise CommandError(
                    f"Argument {name} must be one of: {', '.join(choices)}"
                )
            return arg

        return cls(name, "string", ANY_TEXT, read)

    @classmethod
    def LINK(cls, name: str) -> "ArgType[str]":
        async def read(arg: str, ctx: "MessageContext") -> str:
            return arg

        return cls(name, "url", LINK_PATTERN, read)

    @classmethod
    def CHANNEL(cls, name: str) -> "ArgType[Channel]":
        async def read(arg: str, ctx: "MessageContext") -> Channel:
            channel_id = re.sub(r"[<#>]", "", arg)
            try:
                return await _directory(ctx).fetch_channel(channel_id)
            except EntityNotFoundError as e:
                raise CommandError(
                    f"The channel given as {name} does not exist"
                ) from e

        return cls(name, "channel", CHANNEL_PATTERN, read)

    @classmethod
    def MENTION(cls, name: str) -> "ArgType[Member]":
        async def read(arg: str, ctx: "MessageContext") -> Member:
            user_id = re.sub(r"[<@!>]", "", arg)
            try:
                return await _directory(ctx).fetch_member(user_id)
            except EntityNotFoundError as e:
                raise CommandError(
                    f"The user given as {name} is not a member of this server"
                ) from e

        return cls(name, "mention", MENTION_PATTERN, read)

    @classmethod
    def ROLE(cls, name: str) -> "ArgType[Role]":
        async def read(arg: str, ctx: "MessageContext") -> Role:
            role_id = re.sub(r"[<@&>]", "", arg)
            try:
                return await _directory(ctx).fetch_role(role_id)
            except EntityNotFoundError as e:
                raise CommandError(f"The role given as {name} does not exist") from e

        return cls(name, "role", ROLE_PATTERN, read)

    @classmethod
    def USERNAME(cls, name: str) -> "ArgType[User]":
        async def read(arg: str, ctx: "MessageContext") -> User:
            matches = find_like(arg, _directory(ctx).cached_users(), lambda u: u.tag)
            if len(matches) > 1:
                raise CommandError("The username search is not precise enough")
            if not matches:
                raise CommandError("No cached user has this username")
            return matches[0]

        return cls(name, "username", ANY_TEXT, read)


def _directory(ctx: "MessageContext") -> DirectoryService:
    if ctx.directory is None:
        raise RuntimeError("No directory service attached to the message context")
    return ctx.directory


def _check_magnitude(n):
    limit = settings.commands.INTEGER_LIMIT
    if n > limit or n < -limit:
        raise CommandError(f"Numbers are limited to {limit:g} in absolute value")
    return n


def _check_range(name: str, n, start, stop):
    if stop is None:
        stop = settings.commands.INTEGER_LIMIT
    if n < start or n >= stop:
        raise CommandError(f"The value of {name} must be between {start} and {stop:g}")
    return n


def _range_bound(start, stop):
    if stop is None:
        stop = settings.commands.INTEGER_LIMIT
    return max(abs(start), abs(stop))


def _to_int(arg: str, bound) -> int:
    """Convert integer text, saturating tokens with more digits than `bound`.

    int() refuses very long digit strings, so such tokens are mapped to a
    value just past the bound and left to the magnitude or range check.
    """
    digits = arg.lstrip("+-").lstrip("0")
    bound = int(bound)
    if len(digits) > len(str(bound)):
        n = bound + 1
    else:
        n = int(digits or "0")
    return -n if arg.startswith("-") else n
