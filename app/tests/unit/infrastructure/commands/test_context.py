"""Unit tests for MessageContext."""

import pytest

from infrastructure.commands.responses.models import (
    ERROR_COLOR,
    SUCCESS_COLOR,
    Notice,
)
from tests.factories.commands import make_member, make_message


@pytest.mark.unit
class TestMessageContextCreation:
    """Tests for MessageContext creation."""

    def test_correlation_id_generated(self, command_context_factory):
        """MessageContext generates a correlation_id if not provided."""
        ctx1 = command_context_factory()
        ctx2 = command_context_factory()

        assert ctx1.correlation_id is not None
        assert ctx1.correlation_id != ctx2.correlation_id

    def test_member_comes_from_message(self, command_context_factory):
        member = make_member("42", role_ids=["7"])
        ctx = command_context_factory(message=make_message(member=member))

        assert ctx.member is member


@pytest.mark.unit
class TestMessageContextReplies:
    """Tests for reply helpers."""

    @pytest.mark.asyncio
    async def test_send_text(self, ctx, responder):
        await ctx.send("pong")

        responder.send_text.assert_awaited_once_with("pong")

    @pytest.mark.asyncio
    async def test_send_notice(self, ctx, responder):
        notice = Notice(body="body", title="title")

        await ctx.send_notice(notice)

        responder.send_notice.assert_awaited_once_with(notice)

    @pytest.mark.asyncio
    async def test_send_error(self, ctx, responder):
        await ctx.send_error("Nope")

        notice = responder.send_notice.await_args.args[0]
        assert notice.body == "**Nope**"
        assert notice.color == ERROR_COLOR
        assert notice.author == "Error!"
        assert notice.timestamp is not None

    @pytest.mark.asyncio
    async def test_send_success(self, ctx, responder):
        await ctx.send_success("Done")

        notice = responder.send_notice.await_args.args[0]
        assert notice.body == "**Done**"
        assert notice.color == SUCCESS_COLOR
        assert notice.author == "Success!"

    @pytest.mark.asyncio
    async def test_replies_without_responder_are_dropped(self, command_context_factory):
        ctx = command_context_factory()
        ctx.responder = None

        await ctx.send("lost")
        await ctx.send_error("lost")
