from __future__ import annotations

from enum import Enum
from typing import Any, Dict, List, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field

from .rules import (
    CONSTITUENT_COLUMNS,
    DONATION_COLUMNS,
    EMAIL_COLUMNS,
    PROFILE_COLUMNS,
    TAG_SUMMARY_COLUMNS,
)


def _pick(row: Mapping[str, Optional[str]], columns: Dict[str, str]) -> Dict[str, str]:
    # csv rows may carry None for missing cells
    return {field: row.get(column) or "" for field, column in columns.items()}


class ConstituentRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    patron_id: str
    first_name: str = ""
    last_name: str = ""
    date_entered: str = ""
    primary_email: str = ""
    company: str = ""
    salutation: str = ""
    title: str = ""
    tags: str = ""
    marital_status: str = ""

    @classmethod
    def from_row(cls, row: Mapping[str, Optional[str]]) -> "ConstituentRecord":
        return cls(**_pick(row, CONSTITUENT_COLUMNS))


class DonationRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    patron_id: str
    amount: str = ""
    date: str = ""
    payment_method: str = ""
    campaign: str = ""
    status: str = ""

    @classmethod
    def from_row(cls, row: Mapping[str, Optional[str]]) -> "DonationRecord":
        return cls(**_pick(row, DONATION_COLUMNS))


class EmailRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    patron_id: str
    email: str = ""

    @classmethod
    def from_row(cls, row: Mapping[str, Optional[str]]) -> "EmailRecord":
        return cls(**_pick(row, EMAIL_COLUMNS))


class TagMapping(BaseModel):
    name: str
    mapped_name: str


class ConstituentType(str, Enum):
    PERSON = "Person"
    COMPANY = "Company"


class ProcessedProfile(BaseModel):
    constituent_id: str
    constituent_type: ConstituentType
    first_name: str = ""
    last_name: str = ""
    company_name: str = ""
    created_at: str = ""
    email_1: str = ""
    email_2: str = ""
    title: str = ""
    tags: str = ""
    background_information: str = ""
    lifetime_donation_amount: str = ""
    most_recent_donation_date: str = ""
    most_recent_donation_amount: str = ""

    def to_row(self) -> Dict[str, str]:
        values = self.model_dump(mode="json")
        return {column: values[field] for field, column in PROFILE_COLUMNS.items()}


class TagSummary(BaseModel):
    tag_name: str
    tag_count: int

    def to_row(self) -> Dict[str, Any]:
        return {
            TAG_SUMMARY_COLUMNS["tag_name"]: self.tag_name,
            TAG_SUMMARY_COLUMNS["tag_count"]: self.tag_count,
        }


class CsvFiles(BaseModel):
    constituents: str
    tags: str


class DebugPayload(BaseModel):
    constituents: List[Dict[str, Any]] = Field(default_factory=list)
    tags: List[Dict[str, Any]] = Field(default_factory=list)


class ReconciliationResult(BaseModel):
    csv_files: CsvFiles
    debug: Optional[DebugPayload] = None


class UploadResponse(BaseModel):
    message: str = "Files processed successfully"
    data: ReconciliationResult


class HealthResponse(BaseModel):
    ok: bool = True
