from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal
from typing import Iterable, List, Optional

from .config import NonPaidDonationPolicy
from .models import DonationRecord
from .normalize import format_instant, normalize_currency, parse_amount, parse_date
from .rules import PAID_STATUS

# undated donations sort after every dated one
_UNDATED = datetime.min.replace(tzinfo=timezone.utc)


@dataclass(frozen=True)
class NormalizedDonation:
    amount: Optional[Decimal]
    date: Optional[datetime]
    status: str

    @property
    def is_paid(self) -> bool:
        return self.status == PAID_STATUS


@dataclass(frozen=True)
class DonationSummary:
    lifetime_total: Decimal
    most_recent_amount: str = ""
    most_recent_date: str = ""


def normalize_donations(donations: Iterable[DonationRecord]) -> List[NormalizedDonation]:
    """Normalize amounts and dates, newest first."""
    normalized = [
        NormalizedDonation(
            amount=parse_amount(d.amount),
            date=parse_date(d.date),
            status=d.status,
        )
        for d in donations
    ]
    normalized.sort(key=lambda d: d.date or _UNDATED, reverse=True)
    return normalized


def aggregate_donations(
    donations: Iterable[DonationRecord],
    policy: NonPaidDonationPolicy = NonPaidDonationPolicy.SUBTRACT,
) -> DonationSummary:
    """
    Reduce one patron's donations to a lifetime total and the most recent paid gift.

    Every status other than "Paid" counts against the lifetime total under the
    default policy. Amounts that fail to parse contribute nothing.
    """
    ordered = normalize_donations(donations)

    total = Decimal("0")
    for donation in ordered:
        if donation.amount is None:
            continue
        if donation.is_paid:
            total += donation.amount
        elif policy is NonPaidDonationPolicy.SUBTRACT:
            total -= donation.amount

    latest_paid = next((d for d in ordered if d.is_paid), None)
    if latest_paid is None:
        return DonationSummary(lifetime_total=total)

    return DonationSummary(
        lifetime_total=total,
        most_recent_amount=normalize_currency(latest_paid.amount) if latest_paid.amount is not None else "",
        most_recent_date=format_instant(latest_paid.date) if latest_paid.date is not None else "",
    )


def format_lifetime_total(total: Decimal) -> str:
    return normalize_currency(total) if total > 0 else ""
