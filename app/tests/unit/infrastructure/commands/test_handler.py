"""Unit tests for MessageHandler."""

from unittest.mock import AsyncMock

import pytest

from infrastructure.commands.arguments import ArgType
from infrastructure.commands.errors import CommandError
from infrastructure.commands.handler import MessageHandler
from infrastructure.commands.registry import CommandRegistry
from infrastructure.commands.responses.models import ERROR_COLOR
from tests.factories.commands import make_message, make_tree


@pytest.fixture
def echo_handler():
    return AsyncMock()


@pytest.fixture
def message_handler(echo_handler, directory):
    registry = CommandRegistry("test")
    registry.command("echo", args=[ArgType.STRING("text").extend()])(echo_handler)

    @registry.command("crash")
    async def crash(ctx):
        raise KeyError("boom")

    @registry.command("refuse")
    async def refuse(ctx):
        raise CommandError("Not today")

    return MessageHandler(make_tree(registry), directory=directory, prefix="+")


@pytest.mark.unit
class TestMessageFiltering:
    """Tests for messages that must be ignored."""

    @pytest.mark.asyncio
    async def test_ignores_bot_authors(self, message_handler, echo_handler, responder):
        await message_handler.handle(make_message("+echo hi", bot=True), responder)

        echo_handler.assert_not_awaited()
        responder.send_notice.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_ignores_messages_without_prefix(
        self, message_handler, echo_handler, responder
    ):
        await message_handler.handle(make_message("echo hi"), responder)

        echo_handler.assert_not_awaited()
        responder.send_text.assert_not_awaited()


@pytest.mark.unit
class TestDispatch:
    """Tests for dispatching commands."""

    @pytest.mark.asyncio
    async def test_tokenizes_on_whitespace(self, message_handler, echo_handler, responder):
        await message_handler.handle(make_message("+echo   hello \t world"), responder)

        echo_handler.assert_awaited_once()
        ctx, text = echo_handler.await_args.args
        assert text == "hello world"
        assert ctx.directory is message_handler.directory
        assert ctx.responder is responder

    def test_tokenize_strips_prefix(self, message_handler):
        assert message_handler.tokenize("+Echo a  b") == ["Echo", "a", "b"]
        assert message_handler.tokenize("+") == []

    @pytest.mark.asyncio
    async def test_each_message_gets_its_own_context(
        self, message_handler, echo_handler, responder
    ):
        await message_handler.handle(make_message("+echo one"), responder)
        await message_handler.handle(make_message("+echo two"), responder)

        first, second = (call.args[0] for call in echo_handler.await_args_list)
        assert first is not second
        assert first.correlation_id != second.correlation_id


@pytest.mark.unit
class TestErrorReporting:
    """Tests for the error boundary."""

    @pytest.mark.asyncio
    async def test_user_error_sends_one_error_notice(self, message_handler, responder):
        await message_handler.handle(make_message("+refuse"), responder)

        responder.send_notice.assert_awaited_once()
        notice = responder.send_notice.await_args.args[0]
        assert notice.color == ERROR_COLOR
        assert notice.author == "Error!"
        assert notice.body == "**Not today**"
        responder.send_text.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_parse_error_is_a_user_error(self, message_handler, responder):
        await message_handler.handle(make_message("+echo"), responder)

        notice = responder.send_notice.await_args.args[0]
        assert "Required argument <text> is missing" in notice.body

    @pytest.mark.asyncio
    async def test_unknown_command_is_reported(self, message_handler, responder):
        await message_handler.handle(make_message("+nope"), responder)

        notice = responder.send_notice.await_args.args[0]
        assert "Unknown command `nope`" in notice.body

    @pytest.mark.asyncio
    async def test_system_error_is_reported_in_degraded_form(
        self, message_handler, responder
    ):
        await message_handler.handle(make_message("+crash"), responder)

        responder.send_text.assert_awaited_once_with("KeyError: 'boom'")
        responder.send_notice.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_default_prefix_comes_from_settings(self, directory):
        handler = MessageHandler(make_tree(), directory=directory)

        assert handler.prefix == "+"
