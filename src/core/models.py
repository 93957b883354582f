"""Core domain models.

These dataclasses are shared across the core and adapters to avoid tight
coupling to any integration-specific types.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional, Tuple

LINK_PREVIEW_KIND = "link"


class ReferenceKind(str, Enum):
    """Catalog reference shapes recognized in message text."""

    TRACK = "track"
    ALBUM = "album"


class PermissionState(str, Enum):
    """Outcome of resolving whether an author may trigger rich content."""

    ALLOWED = "allowed"
    DENIED = "denied"
    UNRESOLVED = "unresolved"


@dataclass(frozen=True)
class PreviewDescriptor:
    """A preview the chat platform already attached to a message."""

    kind: str
    provider_name: Optional[str] = None
    url: Optional[str] = None


@dataclass(frozen=True)
class IncomingMessage:
    """Minimal message context used by the core processing pipeline.

    ``author`` and ``channel_context`` are opaque to the core; adapters put
    whatever they need to resolve permissions and send replies there.
    """

    text: str
    author: Any
    channel_context: Any
    existing_previews: Tuple[PreviewDescriptor, ...] = ()


@dataclass(frozen=True)
class CandidateReference:
    """A catalog identifier found in message text, not yet enriched."""

    identifier: str
    kind: ReferenceKind = ReferenceKind.TRACK
    left_escaped: bool = False
    right_escaped: bool = False

    @property
    def suppressed(self) -> bool:
        # Only a link wrapped on both sides counts as an explicit opt-out.
        return self.left_escaped and self.right_escaped


@dataclass(frozen=True)
class Contributor:
    name: str
    url: str


@dataclass(frozen=True)
class CatalogItem:
    """Metadata fetched for one reference. Never cached or persisted."""

    name: str
    canonical_url: str
    collection_name: str
    collection_url: str
    collection_release_date: str
    contributors: Tuple[Contributor, ...]
    thumbnail_url: Optional[str] = None
    kind: ReferenceKind = ReferenceKind.TRACK
    total_tracks: Optional[int] = None


@dataclass(frozen=True)
class CardField:
    name: str
    value: str
    inline: bool = True


@dataclass(frozen=True)
class VisualCard:
    """Presentation-ready projection of one CatalogItem."""

    title: str
    url: str
    thumbnail_url: str
    footer_text: str
    fields: Tuple[CardField, ...] = field(default_factory=tuple)
