"""
Identity resolution: one constituent row plus its related rows in, one profile out.

Nothing here performs I/O; the tag vocabulary is handed in by the caller.
"""

from __future__ import annotations

from typing import Iterable, List, Mapping

from .config import NonPaidDonationPolicy
from .donations import aggregate_donations, format_lifetime_total
from .models import (
    ConstituentRecord,
    ConstituentType,
    DonationRecord,
    EmailRecord,
    ProcessedProfile,
)
from .normalize import compose_background, normalize_date, normalize_email, validate_title
from .rules import MAX_PROFILE_EMAILS


def select_emails(primary: str, additional: Iterable[str]) -> List[str]:
    """
    Order a patron's normalized emails: the primary first when present,
    otherwise the first additional one. Only the first two are kept.
    """
    ordered = [primary] if primary else []
    # deduped even without a primary, so one address never fills both slots
    # (the upstream tool kept repeats in that case)
    for email in additional:
        if email and email not in ordered:
            ordered.append(email)
    return ordered[:MAX_PROFILE_EMAILS]


def remap_tags(raw: str, vocabulary: Mapping[str, str]) -> str:
    if not raw:
        return ""
    tokens = [token.strip() for token in raw.split(",")]
    return ",".join(vocabulary.get(token, token) for token in tokens)


def classify_constituent(constituent: ConstituentRecord) -> ConstituentType:
    if not constituent.first_name and not constituent.last_name and constituent.company:
        return ConstituentType.COMPANY
    return ConstituentType.PERSON


def resolve_profile(
    constituent: ConstituentRecord,
    emails: Iterable[EmailRecord],
    donations: Iterable[DonationRecord],
    vocabulary: Mapping[str, str],
    policy: NonPaidDonationPolicy = NonPaidDonationPolicy.SUBTRACT,
) -> ProcessedProfile:
    patron_id = constituent.patron_id

    additional = [
        normalized
        for normalized in (normalize_email(e.email) for e in emails if e.patron_id == patron_id)
        if normalized
    ]
    primary = normalize_email(constituent.primary_email)
    selected = select_emails(primary, additional) + ["", ""]

    summary = aggregate_donations(
        (d for d in donations if d.patron_id == patron_id),
        policy=policy,
    )

    constituent_type = classify_constituent(constituent)
    is_company = constituent_type is ConstituentType.COMPANY

    return ProcessedProfile(
        constituent_id=patron_id,
        constituent_type=constituent_type,
        first_name="" if is_company else constituent.first_name,
        last_name="" if is_company else constituent.last_name,
        company_name=constituent.company if is_company else "",
        created_at=normalize_date(constituent.date_entered),
        email_1=selected[0],
        email_2=selected[1],
        title=validate_title(constituent.salutation),
        tags=remap_tags(constituent.tags, vocabulary),
        background_information=compose_background(constituent.title, constituent.marital_status),
        lifetime_donation_amount=format_lifetime_total(summary.lifetime_total),
        most_recent_donation_date=summary.most_recent_date,
        most_recent_donation_amount=summary.most_recent_amount,
    )
