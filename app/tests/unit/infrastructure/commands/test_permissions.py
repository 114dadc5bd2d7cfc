"""Unit tests for permission predicates."""

import pytest

from infrastructure.commands.permissions import ADMINISTRATOR, is_admin, is_moderator
from tests.factories.commands import make_member


@pytest.mark.unit
class TestIsAdmin:
    def test_administrator_bit(self):
        assert is_admin(make_member(permissions=ADMINISTRATOR | 1)) is True
        assert is_admin(make_member(permissions=1)) is False

    def test_no_member(self):
        assert is_admin(None) is False


@pytest.mark.unit
class TestIsModerator:
    """Each condition alone grants moderator status."""

    def test_plain_member(self, moderator_settings):
        assert is_moderator(make_member("100")) is False

    def test_moderator_role(self, moderator_settings):
        assert is_moderator(make_member("100", role_ids=["5", "900"])) is True

    def test_moderator_user(self, moderator_settings):
        assert is_moderator(make_member("901")) is True

    def test_administrator(self, moderator_settings):
        assert is_moderator(make_member("100", permissions=ADMINISTRATOR)) is True

    def test_guild_owner(self, moderator_settings):
        assert is_moderator(make_member("100", guild_owner_id="100")) is True

    def test_no_member(self, moderator_settings):
        assert is_moderator(None) is False
