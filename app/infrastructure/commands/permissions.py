"""Permission predicates for command gates."""

from typing import Optional

from core.config import settings
from infrastructure.commands.directory import Member

ADMINISTRATOR = 1 << 3


def is_admin(member: Optional[Member]) -> bool:
    """Whether the member holds the Administrator permission bit."""
    if member is None:
        return False
    return bool(member.permissions & ADMINISTRATOR)


def is_moderator(member: Optional[Member]) -> bool:
    """Whether the member may run moderator commands.

    True when the member holds a configured moderator role, is listed as a
    moderator user, is an administrator, or owns the guild.
    """
    if member is None:
        return False
    role_ids = settings.commands.MODERATOR_ROLE_IDS
    user_ids = settings.commands.MODERATOR_USER_IDS
    return (
        any(role_id in role_ids for role_id in member.role_ids)
        or member.id in user_ids
        or is_admin(member)
        or (bool(member.guild_owner_id) and member.guild_owner_id == member.id)
    )
