"""Discord reply adapter.

Sends all cards for one message as a single reply with mentions disabled.
"""

from __future__ import annotations

from typing import Sequence

import discord

from adapters.embed_formatting import build_embeds
from core.config import EmbedConfig
from core.errors import CardDeliveryError
from core.models import IncomingMessage, VisualCard


class DiscordCardSender:
    """Sender adapter that replies to the original Discord message."""

    def __init__(self, config: EmbedConfig) -> None:
        self._config = config

    async def send(self, message: IncomingMessage, cards: Sequence[VisualCard]) -> None:
        """Reply with one message holding every card."""

        original = message.channel_context
        embeds = build_embeds(cards, self._config.footer_icon_url)
        try:
            await original.channel.send(
                embeds=embeds,
                reference=original,
                mention_author=False,
                allowed_mentions=discord.AllowedMentions.none(),
            )
        except discord.HTTPException as exc:
            raise CardDeliveryError(f"Discord API error {exc.status}: {exc.text}") from exc
