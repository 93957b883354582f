"""Core message processing pipeline.

This module is integration-agnostic. It only relies on ports for permission
checks, catalog lookups and delivery, enabling other chat platforms or
catalogs without changes here.
"""

from __future__ import annotations

import logging

from core.assembler import assemble_cards
from core.config import PipelineConfig
from core.dedup import is_already_rendered
from core.enrichment import Enricher
from core.errors import CardAssemblyError, CardDeliveryError
from core.extractor import extract_references
from core.models import IncomingMessage, PermissionState
from core.ports import CardSenderPort, CatalogPort, PermissionPort

LOGGER = logging.getLogger(__name__)


class LinkPreviewProcessor:
    """Orchestrates permission checks, extraction, dedup, enrichment and replies.

    Each call to ``handle`` is independent; the processor holds no per-message
    state, so concurrent calls for different messages are safe.
    """

    def __init__(
        self,
        permissions: PermissionPort,
        catalog: CatalogPort,
        sender: CardSenderPort,
        config: PipelineConfig,
    ) -> None:
        self._permissions = permissions
        self._enricher = Enricher(catalog, config.market)
        self._sender = sender
        self._config = config

    async def handle(self, message: IncomingMessage) -> None:
        """Process one message through the pipeline. Never raises for bad input."""

        # Fail closed: only a positively confirmed permission proceeds.
        state = await self._permissions.resolve(message.channel_context)
        if state is not PermissionState.ALLOWED:
            LOGGER.debug("Skipping message, rich content permission is %s", state.value)
            return

        references = extract_references(message.text, self._config.max_references)
        if not references:
            return

        # The platform may have rendered its own preview already.
        references = [
            reference
            for reference in references
            if not is_already_rendered(
                message.existing_previews, reference.identifier, self._config.provider_name
            )
        ]
        if not references:
            LOGGER.debug("All references already have a platform preview")
            return

        items = await self._enricher.fetch_all(references)
        if not items:
            LOGGER.info("No catalog lookups succeeded for %s reference(s)", len(references))
            return

        try:
            cards = assemble_cards(items)
        except CardAssemblyError:
            LOGGER.exception("Malformed catalog data, dropping reply")
            return

        try:
            await self._sender.send(message, cards)
        except CardDeliveryError as exc:
            LOGGER.warning("Failed to send %s card(s): %s", len(cards), exc)
            return
        LOGGER.info("Sent %s card(s)", len(cards))
