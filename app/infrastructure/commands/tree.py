"""Command tree: resolution, argument allocation and invocation.

Nodes are stored in an arena and addressed by integer handles. A node knows
its parent and children by handle only, and the tree is never modified after
construction, so it can be read concurrently by every message being handled.
"""

import asyncio
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import (
    Any,
    Awaitable,
    Callable,
    Iterator,
    List,
    Mapping,
    NamedTuple,
    Optional,
    Sequence,
    Tuple,
)

from core.logging import get_module_logger
from infrastructure.commands.arguments import ArgType
from infrastructure.commands.context import MessageContext
from infrastructure.commands.errors import CommandError
from infrastructure.commands.permissions import is_admin, is_moderator
from infrastructure.commands.responses.models import HELP_COLOR, Notice

logger = get_module_logger()

ROOT = 0

Handler = Callable[..., Awaitable[None]]


@dataclass(frozen=True)
class CommandNode:
    """One invocable command or namespace of subcommands.

    Attributes:
        name: Command name, matched case-insensitively among siblings
        args: Argument types, in call order
        handler: Coroutine function called as handler(ctx, *values); None
            for namespace-only nodes
        help: One-line description
        long_help: Detailed description, falls back to help
        mod: Only moderators may run this node
        admin: Only administrators may run this node
        no_arg_error: Refuse to run without any argument token
        parent: Handle of the parent node, None for the root
        children: Lower-cased child name to child handle
    """

    name: str
    args: Tuple[ArgType, ...] = ()
    handler: Optional[Handler] = None
    help: str = ""
    long_help: str = ""
    mod: bool = False
    admin: bool = False
    no_arg_error: bool = False
    parent: Optional[int] = None
    children: Mapping[str, int] = field(default_factory=dict)

    @property
    def has_subcommands(self) -> bool:
        return bool(self.children)

    def get_long_help(self) -> str:
        return self.long_help or self.help


class Resolution(NamedTuple):
    """Deepest node reached by a tree walk and the tokens left after it."""

    node: int
    remaining: Tuple[str, ...]


class CommandTree:
    """Immutable tree of commands.

    Use infrastructure.commands.registry.build_tree() to create one from
    module registries.

    Example:
        tree = build_tree([utility.registry, moderation.registry])
        resolution = tree.resolve(["role", "add", "@someone"])
        await tree.run(["role", "add", "@someone"], ctx)
    """

    def __init__(self, nodes: Sequence[CommandNode], prefix: str = "+"):
        if not nodes or nodes[ROOT].parent is not None:
            raise ValueError("The first node of a command tree must be its root")
        self._nodes: Tuple[CommandNode, ...] = tuple(
            _freeze_children(node) for node in nodes
        )
        self.prefix = prefix

    def __len__(self) -> int:
        return len(self._nodes)

    def node(self, handle: int) -> CommandNode:
        return self._nodes[handle]

    def children(self, handle: int) -> List[int]:
        return list(self._nodes[handle].children.values())

    def child(self, handle: int, name: str) -> Optional[int]:
        """Handle of the child called `name` (any case), or None."""
        return self._nodes[handle].children.get(name.lower())

    def commands(self, handle: int = ROOT) -> Iterator[int]:
        """Every node below `handle`, depth first, parents before children."""
        for child in self._nodes[handle].children.values():
            yield child
            yield from self.commands(child)

    def find(self, path: Sequence[str]) -> Optional[int]:
        """Exact lookup of a command path, e.g. ["role", "add"]."""
        handle = ROOT
        for part in path:
            handle = self.child(handle, part)
            if handle is None:
                return None
        return handle

    def resolve(self, tokens: Sequence[str], start: int = ROOT) -> Resolution:
        """Walk down the tree as long as the next token names a child.

        Args:
            tokens: Whitespace-delimited tokens, without the command prefix
            start: Node to start from

        Returns:
            Resolution with the deepest node matched and the remaining tokens
        """
        handle = start
        tokens = tuple(tokens)
        while tokens:
            child = self.child(handle, tokens[0])
            if child is None:
                break
            handle, tokens = child, tokens[1:]
        return Resolution(handle, tokens)

    async def run(self, tokens: Sequence[str], ctx: MessageContext) -> None:
        """Resolve, check and run the command designated by the tokens.

        Raises:
            CommandError: If the command cannot run with the given tokens
        """
        handle, remaining = self.resolve(tokens)
        node = self._nodes[handle]
        if node.no_arg_error and not remaining:
            raise CommandError("This command cannot be called without arguments")
        self.check_permissions(handle, ctx)
        values = await self.parse_args(handle, remaining, ctx)
        logger.debug(
            "running_command",
            command=self.full_name(handle),
            argument_count=len(values),
        )
        if node.handler is not None:
            await node.handler(ctx, *values)

    def check_permissions(self, handle: int, ctx: MessageContext) -> None:
        """Check the node's own flags; ancestors are not consulted."""
        node = self._nodes[handle]
        if node.admin and not is_admin(ctx.member):
            raise CommandError("Only an administrator can use this command")
        if node.mod and not is_moderator(ctx.member):
            raise CommandError("You are not allowed to use this command")

    def allocate(self, handle: int, tokens: Sequence[str]) -> Tuple[List[str], List[str]]:
        """Split tokens between the node's arguments.

        Arguments take tokens from the front in declaration order: a positive
        width takes exactly that many, a width <= 0 takes everything except
        the last abs(width) tokens.

        Returns:
            Tuple of (raw text per argument, unconsumed tokens)
        """
        remaining = list(tokens)
        raws = []
        for arg in self._nodes[handle].args:
            n = arg.width if arg.width > 0 else max(len(remaining) + arg.width, 0)
            raws.append(" ".join(remaining[:n]))
            del remaining[:n]
        return raws, remaining

    async def parse_args(
        self, handle: int, tokens: Sequence[str], ctx: MessageContext
    ) -> Tuple[Any, ...]:
        """Allocate tokens, then coerce every argument concurrently.

        Raises:
            CommandError: If an argument fails or tokens are left over
        """
        node = self._nodes[handle]
        raws, leftover = self.allocate(handle, tokens)
        values = await asyncio.gather(
            *(arg.parse(raw, ctx) for arg, raw in zip(node.args, raws))
        )
        if leftover and handle == ROOT:
            raise CommandError(f"Unknown command `{leftover[0]}`")
        if leftover:
            message = (
                f"Too many arguments were passed (at most {len(node.args)} expected)"
            )
            if node.has_subcommands:
                message += (
                    f"\n`{leftover[0]}` is not a subcommand of `{self.full_name(handle)}`"
                )
            raise CommandError(message)
        return tuple(values)

    def full_name(self, handle: int) -> str:
        """Name as typed by users, e.g. "+role add"."""
        names = []
        node = self._nodes[handle]
        while node.parent is not None:
            names.append(node.name)
            node = self._nodes[node.parent]
        return self.prefix + " ".join(reversed(names))

    def usage(self, handle: int) -> str:
        node = self._nodes[handle]
        parts = [f"**{self.full_name(handle)}**"]
        parts.extend(str(arg) for arg in node.args)
        if node.has_subcommands:
            parts.append("***(...)***")
        return " ".join(parts)

    def help_notice(self, handle: int) -> Notice:
        """Help page of a command: usage, description and subcommands."""
        node = self._nodes[handle]
        # the root has no usage line, its page only lists top-level commands
        body = "" if handle == ROOT else f"{self.usage(handle)}\n\n"
        if node.get_long_help():
            body += f"{node.get_long_help()}\n\n"
        if node.no_arg_error:
            body += "This command cannot be called without arguments\n\n"
        if node.has_subcommands:
            body += "\n".join(
                f"{self.usage(child)} | {self._nodes[child].help}"
                + (" (staff)" if self._nodes[child].mod else "")
                for child in self.children(handle)
            )
        else:
            body += "This command has no subcommands"
        return Notice(title="Help", color=HELP_COLOR, body=body)


def _freeze_children(node: CommandNode) -> CommandNode:
    if isinstance(node.children, MappingProxyType):
        return node
    frozen = MappingProxyType({k.lower(): v for k, v in node.children.items()})
    return replace(node, args=tuple(node.args), children=frozen)
