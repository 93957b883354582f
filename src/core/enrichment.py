"""Catalog enrichment fan-out (core domain)."""

from __future__ import annotations

import asyncio
import logging
from typing import Iterable, List

from core.errors import CatalogFetchError
from core.models import CandidateReference, CatalogItem
from core.ports import CatalogPort

LOGGER = logging.getLogger(__name__)


class Enricher:
    """Fetch catalog metadata for a batch of references."""

    def __init__(self, catalog: CatalogPort, market: str) -> None:
        self._catalog = catalog
        self._market = market

    async def fetch_all(self, references: Iterable[CandidateReference]) -> List[CatalogItem]:
        """Fetch every reference concurrently and keep the successes in order.

        A failed lookup is dropped without affecting its siblings. Any error
        other than ``CatalogFetchError`` is a bug and is re-raised once all
        lookups have settled.
        """

        references = list(references)
        if not references:
            return []

        results = await asyncio.gather(
            *(self._catalog.fetch_item(reference, self._market) for reference in references),
            return_exceptions=True,
        )

        items: List[CatalogItem] = []
        unexpected: List[BaseException] = []
        for reference, result in zip(references, results):
            if isinstance(result, CatalogFetchError):
                LOGGER.debug("Dropping %s %s: %s", reference.kind.value, reference.identifier, result)
                continue
            if isinstance(result, BaseException):
                unexpected.append(result)
                continue
            items.append(result)

        if unexpected:
            raise unexpected[0]
        return items
