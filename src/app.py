"""Application entry point for the trackcard bot."""

from __future__ import annotations

import argparse
import asyncio
import logging
import os
from logging.handlers import RotatingFileHandler
from typing import Optional

import discord
from art import tprint
from dotenv import load_dotenv

import settings
from adapters.discord_mapper import build_incoming_message
from adapters.discord_permissions import DiscordPermissionGate
from adapters.discord_sender import DiscordCardSender
from adapters.spotify_client import SpotifyCatalogClient
from client import build_catalog_client, build_client, discord_token
from core.config import EmbedConfig, PipelineConfig
from core.errors import CatalogAuthError
from core.processor import LinkPreviewProcessor

NAME = "TRACKCARD"
FONT = "tarty-1"

DEFAULT_REDACTED_ENV = ["DISCORD_TOKEN", "SPOTIFY_CLIENT_SECRET"]


def _print_banner() -> None:
    tprint(NAME, FONT, space=1)


class _RedactingFormatter(logging.Formatter):
    def __init__(self, secrets: list[str], fmt: str, datefmt: Optional[str] = None) -> None:
        super().__init__(fmt=fmt, datefmt=datefmt)
        self._secrets = [secret for secret in secrets if secret]

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        for secret in self._secrets:
            message = message.replace(secret, "***")
        return message


def _collect_redaction_values(config: dict) -> list[str]:
    redact_cfg = config.get("redact", {}) if config else {}
    if not redact_cfg.get("enabled", True):
        return []
    values = []
    for name in redact_cfg.get("patterns", DEFAULT_REDACTED_ENV):
        value = os.getenv(name)
        if value:
            values.append(value)
    return sorted(set(values), key=len, reverse=True)


def _configure_logging() -> None:
    config = settings.LOGGING or {}
    if not config.get("enabled", True):
        return

    load_dotenv()
    level_name = str(config.get("level", "INFO")).upper()
    level = getattr(logging, level_name, logging.INFO)

    fmt = "%(asctime)s %(levelname)s %(name)s: %(message)s"
    datefmt = "%Y-%m-%d %H:%M:%S"
    secrets = _collect_redaction_values(config)
    formatter = _RedactingFormatter(secrets, fmt=fmt, datefmt=datefmt)

    handlers: list[logging.Handler] = []

    if config.get("console", True):
        console_handler = logging.StreamHandler()
        console_handler.setLevel(level)
        console_handler.setFormatter(formatter)
        handlers.append(console_handler)

    file_cfg = config.get("file", {})
    if file_cfg.get("enabled", False):
        path = file_cfg.get("path", "logs/trackcard.log")
        if not os.path.isabs(path):
            path = os.path.join(settings.PROJECT_ROOT, path)
        directory = os.path.dirname(path)
        if directory:
            os.makedirs(directory, exist_ok=True)

        max_bytes = int(file_cfg.get("max_bytes", 5 * 1024 * 1024))
        backup_count = int(file_cfg.get("backup_count", 5))
        file_handler = RotatingFileHandler(
            path,
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding="utf-8",
        )
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        handlers.append(file_handler)

    if not handlers:
        return

    logging.basicConfig(level=level, handlers=handlers)
    # discord.py's gateway chatter is noisy at INFO.
    logging.getLogger("discord").setLevel(max(level, logging.WARNING))


def _register_handlers(client: discord.Client, processor: LinkPreviewProcessor) -> None:
    logger = logging.getLogger(__name__)

    @client.event
    async def on_ready() -> None:
        logger.info("%s is ready!", client.user)

    # discord.py dispatches every event in its own task, so messages are
    # processed independently of each other.
    @client.event
    async def on_message(message: discord.Message) -> None:
        # Ignore bots, including ourselves, to avoid reply loops.
        if message.author.bot:
            return
        try:
            await processor.handle(build_incoming_message(message))
        except Exception:
            logger.exception("Error while processing message %s", message.id)


async def _serve(client: discord.Client, catalog: SpotifyCatalogClient, token: str) -> None:
    logger = logging.getLogger(__name__)
    async with catalog:
        try:
            await catalog.authenticate()
        except CatalogAuthError:
            logger.critical("Spotify authentication failed, check SPOTIFY_CLIENT_ID/SECRET")
            raise SystemExit(1)

        async with client:
            try:
                await client.start(token)
            except discord.LoginFailure:
                logger.critical("Discord login failed, check DISCORD_TOKEN")
                raise SystemExit(1)


def _run() -> None:
    _print_banner()
    _configure_logging()
    logger = logging.getLogger(__name__)

    logger.info("Starting trackcard")

    token = discord_token()
    catalog = build_catalog_client(settings.REQUEST_TIMEOUT_SECONDS)
    client = build_client()

    pipeline_config = PipelineConfig(
        market=settings.MARKET,
        provider_name=settings.PROVIDER_NAME,
        max_references=settings.MAX_REFERENCES,
    )
    logger.info(
        "Market %s, up to %s link(s) per message", pipeline_config.market, pipeline_config.max_references
    )

    processor = LinkPreviewProcessor(
        permissions=DiscordPermissionGate(),
        catalog=catalog,
        sender=DiscordCardSender(EmbedConfig(footer_icon_url=settings.FOOTER_ICON_URL)),
        config=pipeline_config,
    )
    _register_handlers(client, processor)

    try:
        asyncio.run(_serve(client, catalog, token))
    except KeyboardInterrupt:
        logger.info("Shutting down")


def main(argv: Optional[list[str]] = None) -> None:
    parser = argparse.ArgumentParser(prog="trackcard")
    subparsers = parser.add_subparsers(dest="command")

    subparsers.add_parser("run", help="Start the bot")

    parser.parse_args(argv)
    _run()


if __name__ == "__main__":
    main()
