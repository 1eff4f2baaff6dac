"""Client for the remote tag vocabulary (tag name -> canonical name)."""

from __future__ import annotations

import logging
from typing import Dict, List, Optional

import httpx
from pydantic import TypeAdapter, ValidationError

from .config import get_settings
from .errors import VocabularyUnavailableError
from .models import TagMapping

logger = logging.getLogger(__name__)

_MAPPINGS = TypeAdapter(List[TagMapping])


def build_vocabulary(mappings: List[TagMapping]) -> Dict[str, str]:
    """Index mappings by source name; the first entry for a name wins."""
    vocabulary: Dict[str, str] = {}
    for mapping in mappings:
        vocabulary.setdefault(mapping.name, mapping.mapped_name)
    return vocabulary


class TagVocabularyClient:
    """Fetches the whole vocabulary in one request. No retry, no cache."""

    def __init__(
        self,
        url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        settings = get_settings()
        self.url = url or settings.TAG_VOCABULARY_URL
        self.timeout = timeout if timeout is not None else settings.TAG_VOCABULARY_TIMEOUT
        self.transport = transport

    def fetch(self) -> Dict[str, str]:
        logger.info("Fetching tag vocabulary from %s", self.url)
        try:
            with httpx.Client(timeout=self.timeout, transport=self.transport) as client:
                response = client.get(self.url)
                response.raise_for_status()
                mappings = _MAPPINGS.validate_json(response.content)
        except httpx.HTTPError as exc:
            raise VocabularyUnavailableError(f"tag vocabulary request failed: {exc}") from exc
        except ValidationError as exc:
            raise VocabularyUnavailableError(f"tag vocabulary response is malformed: {exc}") from exc

        vocabulary = build_vocabulary(mappings)
        logger.info("Loaded %d tag mappings", len(vocabulary))
        return vocabulary
