"""Card-to-embed formatting helpers.

Keeping formatting here keeps cards consistent and out of the sender.
"""

from __future__ import annotations

from typing import List, Optional, Sequence

import discord

from core.models import VisualCard

SPOTIFY_GREEN = discord.Colour(0x1DB954)


def build_embed(card: VisualCard, footer_icon_url: Optional[str] = None) -> discord.Embed:
    """Return the Discord embed for one card."""

    embed = discord.Embed(title=card.title, url=card.url, colour=SPOTIFY_GREEN)
    # Discord rejects empty thumbnail URLs, so a missing image means no thumbnail.
    if card.thumbnail_url:
        embed.set_thumbnail(url=card.thumbnail_url)
    for field in card.fields:
        embed.add_field(name=field.name, value=field.value, inline=field.inline)
    embed.set_footer(text=card.footer_text, icon_url=footer_icon_url or None)
    return embed


def build_embeds(cards: Sequence[VisualCard], footer_icon_url: Optional[str] = None) -> List[discord.Embed]:
    return [build_embed(card, footer_icon_url) for card in cards]
