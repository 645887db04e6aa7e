"""Data models for the contact discovery pipeline."""

import re
from datetime import datetime
from typing import Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator

Channel = Literal["email", "phone"]
FactKind = Literal["work", "personal", "mobile", "landline", "company"]
SourceStatus = Literal["success", "error", "skipped"]
Stage = Literal["SEARCH", "ENRICH", "REGIONAL_ENRICH", "CONSOLIDATE", "VALIDATE", "DONE"]

# Higher wins when duplicates from different sources disagree on kind
KIND_PRIORITY: dict[str, int] = {
    "work": 4,
    "mobile": 3,
    "landline": 2,
    "company": 1,
    "personal": 0,
}

_NON_DIGITS = re.compile(r"\D")


def digits_only(value: str) -> str:
    return _NON_DIGITS.sub("", value or "")


def normalize_email_kind(raw: Optional[str]) -> FactKind:
    """Map a provider's email type label onto the fact kinds."""
    label = (raw or "").strip().lower()
    if label in ("personal", "private", "home"):
        return "personal"
    return "work"


def normalize_phone_kind(raw: Optional[str]) -> FactKind:
    """Map a provider's phone type label onto the fact kinds."""
    label = (raw or "").strip().lower().replace("-", "_")
    if label in ("company", "hq", "work_hq", "switchboard", "main"):
        return "company"
    if label in ("landline", "direct", "direct_dial", "work", "office", "fixed_line"):
        return "landline"
    return "mobile"


class IdentityQuery(BaseModel):
    """A partially-known person to resolve."""
    model_config = ConfigDict(frozen=True)

    first_name: str
    last_name: str
    company: Optional[str] = None
    title: Optional[str] = None
    location: Optional[str] = None
    domain: Optional[str] = None
    profile_url: Optional[str] = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


class Candidate(BaseModel):
    """A single raw search-engine hit."""
    model_config = ConfigDict(frozen=True)

    url: str
    title: str = ""
    snippet: str = ""
    rank: int = 0
    from_authoritative_source: bool = False  # knowledge panel vs organic


class ScoredMatch(BaseModel):
    """Best profile candidate with its score (0-100) and confidence."""
    model_config = ConfigDict(frozen=True)

    url: str
    title: str = ""
    score: int = Field(ge=0, le=100)
    confidence: float = Field(ge=0.0, le=0.99)
    matched_rules: list[str] = []
    strategy: Optional[str] = None


class ContactFact(BaseModel):
    """One email or phone reported by one source."""
    model_config = ConfigDict(frozen=True)

    value: str
    channel: Channel
    kind: FactKind
    source: str
    confidence: float = Field(ge=0.0, le=1.0)

    @model_validator(mode="before")
    @classmethod
    def _normalize_value(cls, data):
        if isinstance(data, dict) and isinstance(data.get("value"), str):
            value = data["value"].strip()
            if data.get("channel") == "email":
                value = value.lower()
            data = {**data, "value": value}
        return data

    @property
    def dedup_key(self) -> str:
        if self.channel == "email":
            return self.value.lower()
        return digits_only(self.value)


class SourceResult(BaseModel):
    """Uniform output of one enrichment provider.

    status == "success" with no facts means the provider answered and had
    nothing, which is different from "error".
    """
    model_config = ConfigDict(frozen=True)

    source: str
    status: SourceStatus = "success"
    emails: list[ContactFact] = []
    phones: list[ContactFact] = []
    profile_url: Optional[str] = None
    error: Optional[str] = None
    duration_ms: int = 0

    @classmethod
    def failed(cls, source: str, message: str, duration_ms: int = 0) -> "SourceResult":
        return cls(source=source, status="error", error=message, duration_ms=duration_ms)

    @classmethod
    def skipped(cls, source: str, reason: str) -> "SourceResult":
        return cls(source=source, status="skipped", error=reason)

    @property
    def found_any(self) -> bool:
        return bool(self.emails or self.phones)


class PhoneValidation(BaseModel):
    """Outcome of validating one phone number."""
    model_config = ConfigDict(frozen=True)

    valid: bool
    line_type: Optional[str] = None
    location: Optional[str] = None
    international_format: Optional[str] = None
    carrier: Optional[str] = None
    method: Literal["provider", "heuristic"] = "heuristic"


class EmailValidation(BaseModel):
    """Outcome of validating one email address.

    reason is the provider's verdict (e.g. "deliverable", "risky") or one of
    the local outcomes "invalid_format", "disposable", "format_valid".
    """
    model_config = ConfigDict(frozen=True)

    valid: bool
    reason: str
    confidence: float = Field(ge=0.0, le=1.0)
    status: Optional[str] = None
    disposable: Optional[bool] = None
    webmail: Optional[bool] = None
    method: Literal["provider", "heuristic"] = "heuristic"


class ConsolidatedFact(BaseModel):
    """A contact fact merged across sources."""
    model_config = ConfigDict(frozen=True)

    value: str
    channel: Channel
    kind: FactKind
    confidence: float = Field(ge=0.0, le=1.0)
    sources: list[str]
    occurrence_count: int
    flags: list[str] = []
    validation: Optional[Union[PhoneValidation, EmailValidation]] = None

    @model_validator(mode="after")
    def _check_count(self):
        if self.occurrence_count != len(self.sources):
            raise ValueError("occurrence_count must equal len(sources)")
        return self


class CompanyLookup(BaseModel):
    """Result of a company lookup by domain."""
    model_config = ConfigDict(frozen=True)

    found: bool = False
    name: Optional[str] = None
    domain: Optional[str] = None
    phone: Optional[str] = None
    linkedin: Optional[str] = None


class StageNote(BaseModel):
    """A pipeline stage that failed and was skipped over."""
    model_config = ConfigDict(frozen=True)

    stage: Stage
    message: str


class ResolutionResult(BaseModel):
    """Everything the pipeline learned about one identity."""
    model_config = ConfigDict(frozen=True)

    query: IdentityQuery
    profile_url: Optional[str] = None
    profile_confidence: Optional[float] = None
    profile_source: Optional[Literal["input", "search", "provider"]] = None
    domain: Optional[str] = None
    emails: list[ConsolidatedFact] = []
    phones: list[ConsolidatedFact] = []
    sources: dict[str, SourceResult] = {}
    notes: list[StageNote] = []
    stages: list[Stage] = []
    started_at: datetime
    duration_ms: int = 0

    @property
    def found_any(self) -> bool:
        return bool(self.emails or self.phones)

    def source_status(self, source: str) -> Optional[SourceStatus]:
        result = self.sources.get(source)
        return result.status if result else None


class BatchResult(BaseModel):
    """Result of resolving several identities one after another."""

    total: int = 0
    succeeded: int = 0
    failed: int = 0
    results: list[ResolutionResult] = []
    errors: list[dict] = []  # {"input": ..., "error": ...}
    duration_ms: int = 0
