"""Feature-level fixtures for command framework tests."""

import asyncio
import re
from unittest.mock import AsyncMock

import pytest

from infrastructure.commands.arguments import ANY_TEXT, ArgType
from infrastructure.commands.errors import CommandError
from tests.factories.commands import make_context


@pytest.fixture
def command_context_factory(directory, responder):
    """Factory for MessageContext instances wired to the shared fakes."""

    def _factory(**kwargs):
        kwargs.setdefault("directory", directory)
        kwargs.setdefault("responder", responder)
        return make_context(**kwargs)

    return _factory


@pytest.fixture
def ctx(command_context_factory):
    return command_context_factory()


@pytest.fixture
def argument_factory():
    """Factory for ArgType instances with scripted readers.

    Args (of the returned callable):
        name: Argument name
        value: Value returned by the reader
        error: Message of a CommandError raised by the reader instead
        delay: Seconds the reader sleeps before answering
        pattern: Validation pattern (default: any text)
    """

    def _factory(name="arg", value=None, error=None, delay=0.0, pattern=None):
        async def _read(raw, ctx):
            await asyncio.sleep(delay)
            if error is not None:
                raise CommandError(error)
            return raw if value is None else value

        reader = AsyncMock(side_effect=_read)
        return ArgType(
            name,
            "test",
            re.compile(pattern) if pattern else ANY_TEXT,
            reader,
        )

    return _factory
