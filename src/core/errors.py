"""Error hierarchy shared by the core and adapters."""

from __future__ import annotations


class TrackcardError(Exception):
    """Base class for all trackcard errors."""


class CatalogFetchError(TrackcardError):
    """A single catalog lookup failed (network, HTTP status or payload)."""


class CatalogAuthError(CatalogFetchError):
    """The client-credentials grant was rejected or could not be completed."""


class CardAssemblyError(TrackcardError, ValueError):
    """Fetched metadata violates a data contract needed to build a card."""


class CardDeliveryError(TrackcardError):
    """Sending the reply with cards failed."""
