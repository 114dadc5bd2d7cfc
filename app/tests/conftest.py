import core.config as core_config
import pytest

from tests.factories.commands import FakeDirectory, make_responder
from infrastructure.commands.directory import Channel, Member, Role, User


@pytest.fixture
def moderator_settings(monkeypatch):
    """Configure moderator role "900" and moderator user "901"."""
    monkeypatch.setattr(
        core_config.settings.commands, "MODERATOR_ROLE_IDS", ["900"], raising=False
    )
    monkeypatch.setattr(
        core_config.settings.commands, "MODERATOR_USER_IDS", ["901"], raising=False
    )
    return core_config.settings.commands


@pytest.fixture
def directory():
    """Directory service with a few known entities."""
    return FakeDirectory(
        channels=[Channel(id="200", name="general")],
        members=[Member(id="300", display_name="anna")],
        roles=[Role(id="400", name="staff")],
        users=[
            User(id="1", tag="Anna"),
            User(id="2", tag="Annabelle"),
            User(id="3", tag="Bob"),
        ],
    )


@pytest.fixture
def responder():
    """Reply channel recording sent texts and notices."""
    return make_responder()
