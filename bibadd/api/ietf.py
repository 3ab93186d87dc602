"""IETF datatracker lookup by RFC number."""

from __future__ import annotations

import logging

from bibadd.core.bibtex import BibtexFormat
from bibadd.core.collection import Collection, CollectionResolver

from .client import Client
from .format_api import entries_by_url

logger = logging.getLogger(__name__)


def rfc_url(number: int) -> str:
    return f"https://datatracker.ietf.org/doc/rfc{number}/bibtex/"


def entries_by_rfc(
    number: int, client: Client | None = None
) -> Collection | CollectionResolver:
    """Fetch the BibTeX record of RFC ``number``."""
    logger.info("Searching for RFC %d using the IETF datatracker", number)
    return entries_by_url(rfc_url(number), BibtexFormat, client)
