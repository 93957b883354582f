"""Discord-to-core message mapping adapter.

This keeps discord.py-specific details out of the core pipeline.
"""

from __future__ import annotations

from typing import Any, Optional

import discord

from core.models import IncomingMessage, PreviewDescriptor


def _optional_str(value: Any) -> Optional[str]:
    # discord.py uses None for missing embed attributes; older versions used
    # an Embed.Empty sentinel.
    if isinstance(value, str) and value:
        return value
    return None


def preview_from_embed(embed: discord.Embed) -> PreviewDescriptor:
    """Describe an embed Discord attached to a message."""

    provider = getattr(embed, "provider", None)
    return PreviewDescriptor(
        kind=str(getattr(embed, "type", "") or ""),
        provider_name=_optional_str(getattr(provider, "name", None)),
        url=_optional_str(getattr(embed, "url", None)),
    )


def build_incoming_message(message: discord.Message) -> IncomingMessage:
    """Build a core IncomingMessage from a discord.py Message.

    The original message is kept as the channel context so the permission
    and sender adapters can reach its guild, channel and author.
    """

    embeds = getattr(message, "embeds", None) or []
    return IncomingMessage(
        text=message.content or "",
        author=message.author,
        channel_context=message,
        existing_previews=tuple(preview_from_embed(embed) for embed in embeds),
    )
