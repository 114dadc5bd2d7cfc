"""Built-in utility commands."""

from core.config import settings
from core.logging import get_module_logger
from infrastructure.commands import ArgType, CommandError, CommandRegistry
from infrastructure.commands.arguments import ANY_TEXT
from infrastructure.commands.context import MessageContext
from infrastructure.commands.directory import escape

logger = get_module_logger()

registry = CommandRegistry("utility")


async def _read_path(arg: str, ctx: MessageContext) -> str:
    # command names are matched verbatim, markdown included
    return arg


COMMAND_PATH = ArgType("command", "string", ANY_TEXT, _read_path)


@registry.command("test", help="Replies 'Test passed!'")
async def run_test(ctx: MessageContext) -> None:
    await ctx.send("Test passed!")


@registry.command("version", help="Shows the deployed version of the bot")
async def show_version(ctx: MessageContext) -> None:
    await ctx.send(f"Bot version: `{settings.GIT_SHA}`")


@registry.command(
    "help",
    args=[COMMAND_PATH.extend().make_optional()],
    help="Shows the help page of a command",
    long_help=(
        "Without argument, lists every top-level command. "
        "Otherwise shows the help page of the given command, "
        "for example `help role add`."
    ),
)
async def help_command(ctx: MessageContext, command: str) -> None:
    path = command.split() if command else []
    handle = ctx.tree.find(path)
    if handle is None:
        raise CommandError(f"The command `{escape(command)}` does not exist")
    logger.debug("help_requested", command=command)
    await ctx.send_notice(ctx.tree.help_notice(handle))
