"""Duplicate-render helpers (core domain)."""

from __future__ import annotations

from typing import Iterable

from core.models import LINK_PREVIEW_KIND, PreviewDescriptor

DEFAULT_PROVIDER_NAME = "Spotify"


def is_already_rendered(
    previews: Iterable[PreviewDescriptor],
    identifier: str,
    provider_name: str = DEFAULT_PROVIDER_NAME,
) -> bool:
    """Return True when the platform already rendered a preview for identifier.

    Provider names are compared exactly, including case.
    """

    for preview in previews:
        if preview.kind != LINK_PREVIEW_KIND:
            continue
        if preview.provider_name != provider_name:
            continue
        if preview.url and identifier in preview.url:
            return True
    return False
