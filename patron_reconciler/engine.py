"""
Reconciliation engine.

Parses the three uploaded tables, fetches the tag vocabulary once, resolves
every constituent in input order and serializes the profile and tag tables.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from typing import Dict, Iterable, List, Optional, Protocol, TypeVar

from .codec import parse_table, serialize_table
from .config import NonPaidDonationPolicy, get_settings
from .errors import ReconciliationError
from .models import (
    ConstituentRecord,
    CsvFiles,
    DebugPayload,
    DonationRecord,
    EmailRecord,
    ProcessedProfile,
    ReconciliationResult,
    TagSummary,
)
from .resolver import resolve_profile
from .rules import PATRON_ID
from .vocabulary import TagVocabularyClient

logger = logging.getLogger(__name__)

R = TypeVar("R", DonationRecord, EmailRecord)


class VocabularyProvider(Protocol):
    def fetch(self) -> Dict[str, str]: ...


def group_by_patron(records: Iterable[R]) -> Dict[str, List[R]]:
    grouped: Dict[str, List[R]] = defaultdict(list)
    for record in records:
        grouped[record.patron_id].append(record)
    return grouped


def summarize_tags(profiles: Iterable[ProcessedProfile]) -> List[TagSummary]:
    """Count tags across profiles, in first-seen order. Every token counts, blanks included."""
    counts: Dict[str, int] = {}
    for profile in profiles:
        if not profile.tags:
            continue
        for tag in profile.tags.split(","):
            tag = tag.strip()
            counts[tag] = counts.get(tag, 0) + 1
    return [TagSummary(tag_name=name, tag_count=count) for name, count in counts.items()]


def process_files(
    constituents_raw: bytes,
    donations_raw: bytes,
    emails_raw: bytes,
    debug: bool = False,
    vocabulary_client: Optional[VocabularyProvider] = None,
    policy: Optional[NonPaidDonationPolicy] = None,
) -> ReconciliationResult:
    if policy is None:
        policy = get_settings().NON_PAID_DONATION_POLICY
    if vocabulary_client is None:
        vocabulary_client = TagVocabularyClient()

    try:
        constituents = [
            ConstituentRecord.from_row(row)
            for row in parse_table(constituents_raw, "constituents", required_columns=[PATRON_ID])
        ]
        donations = group_by_patron(
            DonationRecord.from_row(row)
            for row in parse_table(donations_raw, "donations", required_columns=[PATRON_ID])
        )
        emails = group_by_patron(
            EmailRecord.from_row(row)
            for row in parse_table(emails_raw, "emails", required_columns=[PATRON_ID])
        )

        vocabulary = vocabulary_client.fetch()

        profiles = [
            resolve_profile(
                constituent,
                emails.get(constituent.patron_id, []),
                donations.get(constituent.patron_id, []),
                vocabulary,
                policy=policy,
            )
            for constituent in constituents
        ]
        tags = summarize_tags(profiles)
    except ReconciliationError:
        logger.exception("Error processing files")
        raise
    except Exception as exc:
        logger.exception("Unexpected error processing files")
        raise ReconciliationError(f"unexpected error: {exc}") from exc

    profile_rows = [profile.to_row() for profile in profiles]
    tag_rows = [tag.to_row() for tag in tags]
    logger.info("Resolved %d profiles, %d distinct tags", len(profile_rows), len(tag_rows))

    return ReconciliationResult(
        csv_files=CsvFiles(
            constituents=serialize_table(profile_rows),
            tags=serialize_table(tag_rows),
        ),
        debug=DebugPayload(constituents=profile_rows, tags=tag_rows) if debug else None,
    )
