"""Core domain package for trackcard.

Core contains link extraction, duplicate filtering, enrichment and card
assembly without any Discord or Spotify-specific code, keeping the business
logic portable.
"""
