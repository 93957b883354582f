"""Discord permission adapter.

Implements the core PermissionPort: an author may trigger cards only when
they can embed links in the channel the message was posted in. Every lookup
that cannot be completed yields UNRESOLVED, which the core treats as denial.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

import discord

from core.models import PermissionState

LOGGER = logging.getLogger(__name__)


async def _resolve_member(guild: Any, author: Any) -> Optional[Any]:
    """Return the author's guild membership, or None when it cannot be found."""

    if isinstance(author, discord.Member) and author.guild == guild:
        return author

    author_id = getattr(author, "id", None)
    if author_id is None:
        return None

    member = guild.get_member(author_id)
    if member is not None:
        return member

    try:
        return await guild.fetch_member(author_id)
    except discord.NotFound:
        LOGGER.debug("Author %s is no longer a member of guild %s", author_id, guild.id)
    except discord.HTTPException as exc:
        LOGGER.warning("Failed to fetch member %s in guild %s: %s", author_id, guild.id, exc)
    return None


class DiscordPermissionGate:
    """Resolve the rich-content permission chain for a discord.py message."""

    async def resolve(self, channel_context: Any) -> PermissionState:
        message = channel_context

        # DMs and group DMs have no guild, so there is nothing to check against.
        guild = getattr(message, "guild", None)
        if guild is None or getattr(guild, "unavailable", False):
            return PermissionState.UNRESOLVED

        member = await _resolve_member(guild, message.author)
        if member is None:
            return PermissionState.UNRESOLVED

        # Without the @everyone role the guild's roles are not cached yet.
        if guild.default_role is None:
            return PermissionState.UNRESOLVED

        channel = getattr(message, "channel", None)
        if channel is None or not hasattr(channel, "permissions_for"):
            return PermissionState.UNRESOLVED

        try:
            permissions = channel.permissions_for(member)
        except discord.ClientException:
            LOGGER.debug("Could not compute permissions in channel %s", getattr(channel, "id", None))
            return PermissionState.UNRESOLVED

        if permissions.embed_links:
            return PermissionState.ALLOWED
        return PermissionState.DENIED
