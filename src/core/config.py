"""Core configuration dataclasses.

We keep config parsing outside the core, but these dataclasses define the
shape the core expects so adapters and app layers can build safely.
"""

from __future__ import annotations

from dataclasses import dataclass

DEFAULT_MAX_REFERENCES = 3


@dataclass(frozen=True)
class PipelineConfig:
    """Settings for the link preview pipeline."""

    market: str
    provider_name: str = "Spotify"
    max_references: int = DEFAULT_MAX_REFERENCES


@dataclass(frozen=True)
class EmbedConfig:
    """Embed rendering settings consumed by the Discord sender adapter."""

    footer_icon_url: str
