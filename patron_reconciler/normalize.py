"""
Field normalizers.

Pure functions turning raw cell text into canonical values. A value that
fails validation degrades to an empty string; none of these raise.
"""

from __future__ import annotations

import logging
import re
from datetime import datetime, timezone
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Callable, List, Optional, Union

from email_validator import EmailNotValidError, validate_email

from .rules import ALLOWED_TITLES

logger = logging.getLogger(__name__)

_CENTS = Decimal("0.01")
_CURRENCY_NOISE = re.compile(r"[$,]")

# "Jan 19, 2020" / "January 19, 2020"; month names are matched without locale
_NAMED_DATE = re.compile(r"^([A-Za-z]{3,9})\.?\s+(\d{1,2}),?\s+(\d{4})$")
_MONTHS = {
    name: number
    for number, name in enumerate(
        ("jan", "feb", "mar", "apr", "may", "jun", "jul", "aug", "sep", "oct", "nov", "dec"),
        start=1,
    )
}


def normalize_email(raw: Optional[str]) -> str:
    if not raw:
        return ""
    candidate = raw.strip().lower()
    if not candidate:
        return ""
    try:
        validate_email(candidate, check_deliverability=False)
    except EmailNotValidError:
        return ""
    return candidate


def _to_cents(amount: Decimal) -> Optional[Decimal]:
    # quantize fails past the context precision (28 digits)
    try:
        return amount.quantize(_CENTS, rounding=ROUND_HALF_UP)
    except InvalidOperation:
        return None


def parse_amount(raw: Optional[str]) -> Optional[Decimal]:
    """Parse currency text like ``"$3,000.00"``; ``None`` when empty or not a number."""
    if not raw:
        return None
    cleaned = _CURRENCY_NOISE.sub("", raw).strip()
    if not cleaned:
        return None
    try:
        amount = Decimal(cleaned)
    except InvalidOperation:
        logger.warning("Unparseable amount: %r", raw)
        return None
    if not amount.is_finite() or _to_cents(amount) is None:
        logger.warning("Unparseable amount: %r", raw)
        return None
    return amount


def normalize_currency(raw: Union[str, Decimal, int, float, None]) -> str:
    """
    Render an amount as ``$`` plus exactly two decimals.

    Accepts currency text or an already numeric total.
    """
    if raw is None or raw == "":
        return ""
    if isinstance(raw, str):
        amount = parse_amount(raw)
        if amount is None:
            return ""
    else:
        amount = Decimal(str(raw))
    cents = _to_cents(amount) if amount.is_finite() else None
    if cents is None:
        logger.warning("Amount out of range: %r", raw)
        return ""
    return f"${cents}"


def _parse_iso(text: str) -> Optional[datetime]:
    candidate = text[:-1] + "+00:00" if text.endswith(("Z", "z")) else text
    try:
        return datetime.fromisoformat(candidate)
    except ValueError:
        return None


def _parse_named(text: str) -> Optional[datetime]:
    match = _NAMED_DATE.match(text)
    if match is None:
        return None
    name, day, year = match.groups()
    month = _MONTHS.get(name[:3].lower())
    if month is None:
        return None
    try:
        return datetime(int(year), month, int(day))
    except ValueError:
        return None


def _parse_slash_timestamp(text: str) -> Optional[datetime]:
    try:
        return datetime.strptime(text, "%m/%d/%Y %H:%M")
    except ValueError:
        return None


def _parse_month_first(text: str) -> Optional[datetime]:
    parts = text.split("/")
    if len(parts) != 3:
        return None
    month, day, year = (part.strip() for part in parts)
    return _parse_iso(f"{year}-{month.zfill(2)}-{day.zfill(2)}")


DATE_STRATEGIES: List[Callable[[str], Optional[datetime]]] = [
    _parse_iso,
    _parse_named,
    _parse_slash_timestamp,
    _parse_month_first,
]


def parse_date(raw: Optional[str]) -> Optional[datetime]:
    """Run the date strategies in order; first success wins. Result is UTC."""
    if not raw:
        return None
    text = raw.strip()
    if not text:
        return None
    for strategy in DATE_STRATEGIES:
        parsed = strategy(text)
        if parsed is not None:
            if parsed.tzinfo is None:
                return parsed.replace(tzinfo=timezone.utc)
            try:
                return parsed.astimezone(timezone.utc)
            except (OverflowError, ValueError):
                # offset pushes the instant outside datetime's range
                return None
    return None


def format_instant(value: datetime) -> str:
    # 2018-01-25T00:00:00.000Z
    utc = value.astimezone(timezone.utc)
    return utc.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def normalize_date(raw: Optional[str]) -> str:
    parsed = parse_date(raw)
    return format_instant(parsed) if parsed is not None else ""


def validate_title(raw: Optional[str]) -> str:
    return raw if raw in ALLOWED_TITLES else ""


def compose_background(job_title: Optional[str], marital_status: Optional[str]) -> str:
    parts = []
    if job_title:
        parts.append(f"Job Title: {job_title}")
    if marital_status:
        parts.append(f"Marital Status: {marital_status}")
    return "; ".join(parts)
