"""Client factories for trackcard.

We explicitly manage the Discord client's lifecycle so it is obvious when the
gateway connection starts and when it ends.
"""

from __future__ import annotations

import logging
import os

import discord
from dotenv import load_dotenv

from adapters.spotify_client import SpotifyCatalogClient


def build_intents() -> discord.Intents:
    """Return the gateway intents needed to read guild message content."""

    intents = discord.Intents.none()
    intents.guilds = True
    intents.guild_messages = True
    intents.message_content = True
    return intents


def discord_token() -> str:
    """Read DISCORD_TOKEN via python-dotenv to keep secrets out of the repo."""

    load_dotenv()
    token = os.getenv("DISCORD_TOKEN")
    # Fail fast on missing credentials instead of an opaque login error.
    if not token:
        raise RuntimeError("Missing DISCORD_TOKEN in environment")
    return token


def build_client() -> discord.Client:
    """Create the Discord client. Handlers are registered by the app."""

    logging.getLogger(__name__).info("Initializing Discord client")
    return discord.Client(intents=build_intents())


def build_catalog_client(timeout_seconds: float = 10.0) -> SpotifyCatalogClient:
    """Create the Spotify client from SPOTIFY_CLIENT_ID/SPOTIFY_CLIENT_SECRET."""

    load_dotenv()

    client_id = os.getenv("SPOTIFY_CLIENT_ID")
    client_secret = os.getenv("SPOTIFY_CLIENT_SECRET")
    if not client_id or not client_secret:
        raise RuntimeError("Missing SPOTIFY_CLIENT_ID or SPOTIFY_CLIENT_SECRET in environment")

    logging.getLogger(__name__).info("Initializing Spotify client")

    return SpotifyCatalogClient(client_id, client_secret, timeout_seconds=timeout_seconds)
