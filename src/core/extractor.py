"""Catalog link extraction (core domain)."""

from __future__ import annotations

import re
from typing import List

from core.config import DEFAULT_MAX_REFERENCES
from core.models import CandidateReference, ReferenceKind

# <https://open.spotify.com/intl-de/track/4uLU6hMCjMI75M1A2tKUQC?si=abc>
# The optional angle brackets are Discord's markup for "do not embed this link".
REFERENCE_PATTERN = re.compile(
    r"(?P<left><)?"
    r"https?://open\.spotify\.com/"
    r"(?:intl-[A-Za-z-]+/)?"
    r"(?P<kind>track|album)/"
    r"(?P<identifier>[A-Za-z0-9]+)"
    r"(?:[/?#][^\s<>]*)?"
    r"(?P<right>>)?"
)


def extract_references(text: str, limit: int = DEFAULT_MAX_REFERENCES) -> List[CandidateReference]:
    """Return up to ``limit`` catalog references in left-to-right order.

    Matching rules:
    - Scheme-less or partial links never match; this is not an error.
    - Trailing paths, query strings and fragments are consumed and are not
      part of the identifier.
    - A link wrapped in ``<...>`` is dropped and does not use up a slot.
    """

    references: List[CandidateReference] = []
    if limit <= 0:
        return references

    for match in REFERENCE_PATTERN.finditer(text):
        reference = CandidateReference(
            identifier=match.group("identifier"),
            kind=ReferenceKind(match.group("kind")),
            left_escaped=match.group("left") is not None,
            right_escaped=match.group("right") is not None,
        )
        if reference.suppressed:
            continue
        references.append(reference)
        # Hard cap protects the catalog API from bursts; Discord allows more.
        if len(references) >= limit:
            break

    return references
