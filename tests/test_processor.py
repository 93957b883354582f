from __future__ import annotations

import asyncio
from types import SimpleNamespace
from typing import Any, Optional, Sequence

import discord

from adapters.discord_sender import DiscordCardSender
from core.config import EmbedConfig, PipelineConfig
from core.errors import CardDeliveryError, CatalogFetchError
from core.models import (
    CandidateReference,
    CatalogItem,
    Contributor,
    IncomingMessage,
    PermissionState,
    PreviewDescriptor,
    VisualCard,
)
from core.processor import LinkPreviewProcessor

TRACK_TEXT = "check this https://open.spotify.com/track/abc123?si=xyz out"


class FakePermissions:
    def __init__(self, state: PermissionState) -> None:
        self._state = state
        self.contexts: list[Any] = []

    async def resolve(self, channel_context: Any) -> PermissionState:
        self.contexts.append(channel_context)
        return self._state


class FakeCatalog:
    def __init__(self, contributors: int = 2, failing: Optional[set[str]] = None) -> None:
        self._contributors = contributors
        self._failing = failing or set()
        self.requested: list[str] = []

    async def fetch_item(self, reference: CandidateReference, market: str) -> CatalogItem:
        self.requested.append(reference.identifier)
        if reference.identifier in self._failing:
            raise CatalogFetchError("404")
        return CatalogItem(
            name=f"Song {reference.identifier}",
            canonical_url=f"https://open.spotify.com/track/{reference.identifier}",
            collection_name="Record",
            collection_url="https://open.spotify.com/album/rec1",
            collection_release_date="2021-05-07",
            contributors=tuple(
                Contributor(name=f"Artist {i}", url=f"https://open.spotify.com/artist/{i}")
                for i in range(self._contributors)
            ),
        )


class FakeSender:
    def __init__(self, error: Optional[Exception] = None) -> None:
        self._error = error
        self.sent: list[tuple[IncomingMessage, list[VisualCard]]] = []

    async def send(self, message: IncomingMessage, cards: Sequence[VisualCard]) -> None:
        self.sent.append((message, list(cards)))
        if self._error is not None:
            raise self._error


def _processor(
    permissions: PermissionState = PermissionState.ALLOWED,
    catalog: Optional[FakeCatalog] = None,
    sender: Optional[Any] = None,
) -> tuple[LinkPreviewProcessor, FakeCatalog, Any]:
    catalog = catalog or FakeCatalog()
    sender = sender or FakeSender()
    processor = LinkPreviewProcessor(
        permissions=FakePermissions(permissions),
        catalog=catalog,
        sender=sender,
        config=PipelineConfig(market="US"),
    )
    return processor, catalog, sender


def _message(text: str, previews: tuple[PreviewDescriptor, ...] = (), context: Any = None) -> IncomingMessage:
    return IncomingMessage(text=text, author="user-1", channel_context=context, existing_previews=previews)


def test_single_link_produces_one_card() -> None:
    processor, catalog, sender = _processor()
    asyncio.run(processor.handle(_message(TRACK_TEXT)))

    assert catalog.requested == ["abc123"]
    assert len(sender.sent) == 1
    _, cards = sender.sent[0]
    assert len(cards) == 1
    assert cards[0].fields[1].name == "Artists"


class DummyChannel:
    def __init__(self) -> None:
        self.calls: list[dict] = []

    async def send(self, **kwargs) -> None:
        self.calls.append(kwargs)


def test_reply_is_sent_with_mentions_suppressed() -> None:
    channel = DummyChannel()
    original = SimpleNamespace(channel=channel, id=42)
    processor, _, _ = _processor(sender=DiscordCardSender(EmbedConfig(footer_icon_url="https://icon")))

    asyncio.run(processor.handle(_message(TRACK_TEXT, context=original)))

    assert len(channel.calls) == 1
    call = channel.calls[0]
    assert call["reference"] is original
    assert call["mention_author"] is False
    mentions = call["allowed_mentions"]
    assert isinstance(mentions, discord.AllowedMentions)
    assert not mentions.everyone and not mentions.users and not mentions.roles
    assert not mentions.replied_user
    assert len(call["embeds"]) == 1
    assert call["embeds"][0].fields[1].name == "Artists"


def test_platform_preview_suppresses_card() -> None:
    previews = (PreviewDescriptor(kind="link", provider_name="Spotify", url="https://open.spotify.com/track/abc123"),)
    processor, catalog, sender = _processor()
    asyncio.run(processor.handle(_message(TRACK_TEXT, previews)))

    assert catalog.requested == []
    assert sender.sent == []


def test_wrapped_link_sends_nothing() -> None:
    processor, catalog, sender = _processor()
    asyncio.run(processor.handle(_message("<https://open.spotify.com/track/abc123>")))

    assert catalog.requested == []
    assert sender.sent == []


def test_only_first_three_links_are_enriched() -> None:
    text = " ".join(f"https://open.spotify.com/track/id{i}" for i in range(5))
    processor, catalog, sender = _processor()
    asyncio.run(processor.handle(_message(text)))

    assert catalog.requested == ["id0", "id1", "id2"]
    assert [card.title for card in sender.sent[0][1]] == ["Song id0", "Song id1", "Song id2"]


def test_denied_and_unresolved_permissions_stop_the_pipeline() -> None:
    for state in (PermissionState.DENIED, PermissionState.UNRESOLVED):
        processor, catalog, sender = _processor(permissions=state)
        asyncio.run(processor.handle(_message(TRACK_TEXT)))
        assert catalog.requested == []
        assert sender.sent == []


def test_no_links_sends_nothing() -> None:
    processor, catalog, sender = _processor()
    asyncio.run(processor.handle(_message("just chatting")))
    assert catalog.requested == []
    assert sender.sent == []


def test_all_fetches_failing_sends_nothing() -> None:
    processor, _, sender = _processor(catalog=FakeCatalog(failing={"abc123"}))
    asyncio.run(processor.handle(_message(TRACK_TEXT)))
    assert sender.sent == []


def test_partial_fetch_failure_keeps_remaining_cards() -> None:
    text = "https://open.spotify.com/track/a https://open.spotify.com/track/b"
    processor, _, sender = _processor(catalog=FakeCatalog(failing={"a"}))
    asyncio.run(processor.handle(_message(text)))
    assert [card.title for card in sender.sent[0][1]] == ["Song b"]


def test_item_without_artists_aborts_the_reply() -> None:
    processor, catalog, sender = _processor(catalog=FakeCatalog(contributors=0))
    asyncio.run(processor.handle(_message(TRACK_TEXT)))
    assert catalog.requested == ["abc123"]
    assert sender.sent == []


def test_send_failure_is_swallowed() -> None:
    processor, _, sender = _processor(sender=FakeSender(error=CardDeliveryError("403")))
    asyncio.run(processor.handle(_message(TRACK_TEXT)))
    assert len(sender.sent) == 1


def test_same_message_gives_same_cards() -> None:
    processor, _, sender = _processor()
    message = _message(TRACK_TEXT + " https://open.spotify.com/album/rec9")
    asyncio.run(processor.handle(message))
    asyncio.run(processor.handle(message))
    first, second = sender.sent
    assert first[1] == second[1]
