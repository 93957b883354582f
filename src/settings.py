"""Static configuration for trackcard.

Non-secret settings (market, footer icon, limits, logging) live in a single
JSON file for quick edits without touching Python. Secrets stay in the
environment (.env).
"""

import json
import os

from core.config import DEFAULT_MAX_REFERENCES

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))

CONFIG_PATH = os.environ.get("TRACKCARD_CONFIG", os.path.join(PROJECT_ROOT, "config.json"))


def _load_json_config() -> dict:
    """Load config.json with a flat, user-friendly schema."""

    if not os.path.exists(CONFIG_PATH):
        raise FileNotFoundError(f"Config file not found: {CONFIG_PATH}")

    with open(CONFIG_PATH, "r", encoding="utf-8") as handle:
        return json.load(handle)


_CONFIG = _load_json_config()

# Expose the raw config for modules that need structured access.
CONFIG = _CONFIG

# Catalog settings. The market decides regional availability of tracks.
_catalog = _CONFIG.get("catalog", {})
MARKET = str(_catalog.get("market", "US"))
FOOTER_ICON_URL = _catalog.get("footer_icon_url") or ""
# Compared exactly against the provider name of Discord's own link embeds.
PROVIDER_NAME = str(_catalog.get("provider_name", "Spotify"))

# Upper bound on links looked up per message.
_pipeline = _CONFIG.get("pipeline", {})
MAX_REFERENCES = int(_pipeline.get("max_references", DEFAULT_MAX_REFERENCES))
# Catalog HTTP timeout in seconds.
REQUEST_TIMEOUT_SECONDS = float(_pipeline.get("request_timeout_seconds", 10))

# Logging configuration (optional).
LOGGING = _CONFIG.get("logging", {})
