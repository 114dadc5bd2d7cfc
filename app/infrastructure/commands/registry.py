"""Command registry for registration and tree construction."""

from dataclasses import dataclass, replace
from typing import Callable, Dict, Iterable, List, Optional, Sequence, Tuple

from core.config import settings
from core.logging import get_module_logger
from infrastructure.commands.arguments import ArgType
from infrastructure.commands.tree import ROOT, CommandNode, CommandTree, Handler

logger = get_module_logger()


@dataclass(frozen=True)
class CommandDefinition:
    """Command as declared by a module, before the tree is built.

    Attributes:
        path: Names from the root to this command, e.g. ("role", "add")
        args: Argument types
        handler: Coroutine function, None for namespace-only commands
        help: One-line description
        long_help: Detailed description
        mod: Moderator only
        admin: Administrator only
        no_arg_error: Refuse to run without argument tokens
    """

    path: Tuple[str, ...]
    args: Tuple[ArgType, ...] = ()
    handler: Optional[Handler] = None
    help: str = ""
    long_help: str = ""
    mod: bool = False
    admin: bool = False
    no_arg_error: bool = False

    @property
    def name(self) -> str:
        return self.path[-1]


def _split_path(parent: str) -> Tuple[str, ...]:
    return tuple(parent.split())


class CommandRegistry:
    """Registry collecting the commands of one module.

    Attributes:
        namespace: Module namespace, used in logs
        _definitions: Registered definitions keyed by lower-cased path

    Example:
        registry = CommandRegistry("moderation")

        registry.group("role", help="Manage roles", mod=True)

        @registry.command(
            "add",
            parent="role",
            args=[ArgType.MENTION("member"), ArgType.ROLE("role")],
            help="Give a role to a member",
            mod=True,
        )
        async def add_role(ctx, member, role):
            ...
    """

    def __init__(self, namespace: str):
        """Initialize registry.

        Args:
            namespace: Module namespace for commands
        """
        self.namespace = namespace
        self._definitions: Dict[Tuple[str, ...], CommandDefinition] = {}

    def _register(self, definition: CommandDefinition) -> None:
        key = tuple(part.lower() for part in definition.path)
        if key in self._definitions:
            raise ValueError(
                f"Duplicate command '{' '.join(definition.path)}' in {self.namespace}"
            )
        self._definitions[key] = definition
        logger.debug(
            "command_registered",
            namespace=self.namespace,
            name=" ".join(definition.path),
        )

    def command(
        self,
        name: str,
        parent: str = "",
        args: Sequence[ArgType] = (),
        help: str = "",
        long_help: str = "",
        mod: bool = False,
        admin: bool = False,
        no_arg_error: bool = False,
    ) -> Callable[[Handler], Handler]:
        """Decorator to register a command handler.

        Args:
            name: Command name
            parent: Space-separated path of the parent command ("" for top level)
            args: Argument types, in call order
            help: One-line description
            long_help: Detailed description for the help page
            mod: Restrict to moderators
            admin: Restrict to administrators
            no_arg_error: Refuse to run without argument tokens

        Returns:
            Decorator function that registers the handler

        Raises:
            ValueError: If the same path is registered twice
        """

        def decorator(handler: Handler) -> Handler:
            self._register(
                CommandDefinition(
                    path=_split_path(parent) + (name,),
                    args=tuple(args),
                    handler=handler,
                    help=help,
                    long_help=long_help,
                    mod=mod,
                    admin=admin,
                    no_arg_error=no_arg_error,
                )
            )
            return handler

        return decorator

    def group(
        self,
        name: str,
        parent: str = "",
        help: str = "",
        long_help: str = "",
        mod: bool = False,
        admin: bool = False,
    ) -> None:
        """Register a namespace-only command holding subcommands."""
        self._register(
            CommandDefinition(
                path=_split_path(parent) + (name,),
                help=help,
                long_help=long_help,
                mod=mod,
                admin=admin,
            )
        )

    def get_command(self, path: str) -> Optional[CommandDefinition]:
        """Get a definition by its space-separated path."""
        return self._definitions.get(tuple(p.lower() for p in path.split()))

    def list_commands(self) -> List[CommandDefinition]:
        return list(self._definitions.values())


def build_tree(
    registries: Iterable[CommandRegistry], prefix: Optional[str] = None
) -> CommandTree:
    """Materialize the definitions of several registries as one tree.

    Args:
        registries: Module registries
        prefix: Command prefix used in names and help, defaults to the
            configured COMMAND_PREFIX

    Returns:
        Immutable CommandTree

    Raises:
        ValueError: If a parent is missing or sibling names collide
    """
    definitions = [d for registry in registries for d in registry.list_commands()]
    definitions.sort(key=lambda d: len(d.path))

    nodes: List[CommandNode] = [CommandNode(name="")]
    children: List[Dict[str, int]] = [{}]
    handles: Dict[Tuple[str, ...], int] = {(): ROOT}

    for definition in definitions:
        key = tuple(part.lower() for part in definition.path)
        parent = handles.get(key[:-1])
        if parent is None:
            raise ValueError(
                f"Parent command '{' '.join(definition.path[:-1])}' not found "
                f"for '{definition.name}'"
            )
        if key[-1] in children[parent]:
            raise ValueError(f"Duplicate subcommands for command '{nodes[parent].name}'")
        handle = len(nodes)
        nodes.append(
            CommandNode(
                name=definition.name,
                args=definition.args,
                handler=definition.handler,
                help=definition.help,
                long_help=definition.long_help,
                mod=definition.mod,
                admin=definition.admin,
                no_arg_error=definition.no_arg_error,
                parent=parent,
            )
        )
        children.append({})
        children[parent][key[-1]] = handle
        handles[key] = handle

    tree = CommandTree(
        [replace(node, children=children[i]) for i, node in enumerate(nodes)],
        prefix=settings.bot.COMMAND_PREFIX if prefix is None else prefix,
    )
    logger.info("commands_loaded", count=len(tree) - 1)
    return tree
