import pytest

import main
from infrastructure.commands.registry import CommandRegistry
from tests.factories.commands import make_message


def test_create_message_handler_loads_utility_commands():
    handler = main.create_message_handler()

    assert handler.tree.find(["test"]) is not None
    assert handler.tree.find(["help"]) is not None


def test_create_message_handler_with_custom_registries():
    registry = CommandRegistry("custom")
    registry.group("ping")

    handler = main.create_message_handler(registries=[registry])

    assert handler.tree.find(["ping"]) is not None
    assert handler.tree.find(["test"]) is None


@pytest.mark.asyncio
async def test_console_channel_prints_notices(capsys):
    handler = main.create_message_handler()

    await handler.handle(make_message("+nope"), main.ConsoleChannel())

    out = capsys.readouterr().out
    assert "[Error!]" in out
    assert "Unknown command `nope`" in out
