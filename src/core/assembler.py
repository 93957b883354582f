"""Card assembly from fetched catalog metadata (core domain)."""

from __future__ import annotations

from typing import Iterable, List

from core.errors import CardAssemblyError
from core.models import CardField, CatalogItem, ReferenceKind, VisualCard


def _link(text: str, url: str) -> str:
    return f"[{text}]({url})"


def _contributors_field(item: CatalogItem) -> CardField:
    if not item.contributors:
        raise CardAssemblyError(f"Catalog item {item.name!r} has no artists")
    label = "Artists" if len(item.contributors) > 1 else "Artist"
    value = ", ".join(_link(contributor.name, contributor.url) for contributor in item.contributors)
    return CardField(name=label, value=value)


def build_card(item: CatalogItem) -> VisualCard:
    """Project one catalog item onto card fields.

    Tracks show their album next to the artists; albums show their track
    count instead.
    """

    artists = _contributors_field(item)
    if item.kind is ReferenceKind.ALBUM:
        total = "?" if item.total_tracks is None else str(item.total_tracks)
        fields = (artists, CardField(name="Tracks", value=total))
    else:
        album = CardField(name="Album", value=_link(item.collection_name, item.collection_url))
        fields = (album, artists)

    return VisualCard(
        title=item.name,
        url=item.canonical_url,
        thumbnail_url=item.thumbnail_url or "",
        footer_text=f"Released {item.collection_release_date}",
        fields=fields,
    )


def assemble_cards(items: Iterable[CatalogItem]) -> List[VisualCard]:
    """Return one card per item, in the same order."""

    return [build_card(item) for item in items]
