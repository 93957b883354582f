"""Ports (interfaces) used by the core pipeline.

Ports define the minimal contracts for permission, catalog and delivery
adapters so that the core can be reused with different backends.
"""

from __future__ import annotations

from typing import Any, Protocol, Sequence

from core.models import CandidateReference, CatalogItem, IncomingMessage, PermissionState, VisualCard


class PermissionPort(Protocol):
    """Resolves whether the author of a message may trigger rich content."""

    async def resolve(self, channel_context: Any) -> PermissionState:
        ...


class CatalogPort(Protocol):
    """Catalog lookups required by the enrichment step.

    Implementations raise ``CatalogFetchError`` for any per-item failure.
    """

    async def fetch_item(self, reference: CandidateReference, market: str) -> CatalogItem:
        ...


class CardSenderPort(Protocol):
    """Delivery of the assembled cards as one reply.

    Implementations raise ``CardDeliveryError`` when the send fails.
    """

    async def send(self, message: IncomingMessage, cards: Sequence[VisualCard]) -> None:
        ...
