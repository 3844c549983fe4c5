"""
Core Data Models for the Expense Tracker

These models define the schemas for every record held by the store
and every result handed back to the presentation layer.

DESIGN DECISION: Records are frozen Pydantic models. Once an expense is
added it can only be removed (delete or reload), never edited in place.
"""

import datetime as dt
import re
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional
from uuid import UUID, uuid4

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
    model_validator,
)


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class TransactionType(str, Enum):
    """
    How an expense was paid.

    The enum value is the literal written to the ledger file.
    """
    CASH = "Cash"
    CREDIT = "Credit"


class QueryPeriod(str, Enum):
    """Temporal scope of a summary query."""
    ALL = "all"
    DAY = "day"
    MONTH = "month"
    YEAR = "year"
    RANGE = "range"


# =============================================================================
# CALENDAR DATE
# =============================================================================

_DATE_PATTERN = re.compile(r"([0-9]{4})-([0-9]{2})-([0-9]{2})")


class CalendarDate(BaseModel):
    """
    A (year, month, day) triple with a coarse range check.

    Month must be 1-12 and day 1-31. Month lengths are NOT checked,
    so 2024-02-30 is a valid CalendarDate. Ordering is lexicographic
    on (year, month, day).
    """
    model_config = ConfigDict(frozen=True)

    year: int = Field(..., ge=0, le=9999)
    month: int = Field(..., ge=1, le=12)
    day: int = Field(..., ge=1, le=31)

    @classmethod
    def parse(cls, text: str) -> "CalendarDate":
        """
        Parse the fixed-width ``YYYY-MM-DD`` form.

        Raises:
            ValueError: If the text deviates from the pattern or a
                component is out of range.
        """
        match = _DATE_PATTERN.fullmatch(text)
        if not match:
            raise ValueError(f"Date must use the YYYY-MM-DD format: {text!r}")
        year, month, day = (int(part) for part in match.groups())
        return cls(year=year, month=month, day=day)

    @classmethod
    def from_date(cls, value: dt.date) -> "CalendarDate":
        return cls(year=value.year, month=value.month, day=value.day)

    def as_tuple(self) -> tuple[int, int, int]:
        return (self.year, self.month, self.day)

    def isoformat(self) -> str:
        return f"{self.year:04d}-{self.month:02d}-{self.day:02d}"

    def __str__(self) -> str:
        return self.isoformat()

    def __lt__(self, other: "CalendarDate") -> bool:
        if not isinstance(other, CalendarDate):
            return NotImplemented
        return self.as_tuple() < other.as_tuple()

    def __le__(self, other: "CalendarDate") -> bool:
        if not isinstance(other, CalendarDate):
            return NotImplemented
        return self.as_tuple() <= other.as_tuple()

    def __gt__(self, other: "CalendarDate") -> bool:
        if not isinstance(other, CalendarDate):
            return NotImplemented
        return self.as_tuple() > other.as_tuple()

    def __ge__(self, other: "CalendarDate") -> bool:
        if not isinstance(other, CalendarDate):
            return NotImplemented
        return self.as_tuple() >= other.as_tuple()


# =============================================================================
# CORE EXPENSE MODEL
# =============================================================================

class Expense(BaseModel):
    """
    A single spending event.

    Negative amounts are legal and represent refunds. There is no
    identifier: a record is addressed by its position in the store.
    """
    model_config = ConfigDict(str_strip_whitespace=True, frozen=True)

    description: str = Field(
        ...,
        description="What the money was spent on"
    )
    amount: Decimal = Field(
        ...,
        description="Signed currency amount"
    )
    date: CalendarDate = Field(
        ...,
        description="Day the expense happened"
    )
    category: str = Field(
        ...,
        description="Free-text category label"
    )
    transaction_type: TransactionType = Field(
        ...,
        description="Cash or credit"
    )

    @field_validator('amount')
    @classmethod
    def amount_must_be_finite(cls, v: Decimal) -> Decimal:
        if not v.is_finite():
            raise ValueError("Amount must be a finite number")
        return v


# =============================================================================
# PERSISTENCE RESULT MODELS
# =============================================================================

class ValidationIssue(BaseModel):
    """A single problem found while decoding a ledger row."""

    field: str = Field(
        ...,
        description="Column (or 'row') with the issue"
    )
    issue_type: str = Field(
        ...,
        description="Type of issue (e.g., 'invalid_date', 'unknown_type')"
    )
    message: str = Field(
        ...,
        description="Human-readable description of the issue"
    )
    severity: str = Field(
        ...,
        pattern="^(error|warning|info)$",
        description="Issue severity"
    )
    suggested_fix: Optional[str] = Field(
        default=None,
        description="Suggested fix if available"
    )
    line_number: Optional[int] = Field(
        default=None,
        ge=1,
        description="Line in the ledger file the issue was found on"
    )


class LoadResult(BaseModel):
    """
    Outcome of decoding the ledger file.

    A missing file is a successful load of zero records. On failure
    ``expenses`` is empty and must not be applied to the store.
    """

    success: bool
    error_message: Optional[str] = None
    source: str = Field(
        ...,
        description="Path that was read"
    )
    file_found: bool = True
    expenses: list[Expense] = Field(default_factory=list)
    issues: list[ValidationIssue] = Field(
        default_factory=list,
        description="Rows that were skipped"
    )

    @property
    def loaded_count(self) -> int:
        return len(self.expenses)

    @property
    def skipped_count(self) -> int:
        return len(self.issues)


class SaveResult(BaseModel):
    """Outcome of encoding the store to the ledger file."""

    success: bool
    error_message: Optional[str] = None
    destination: str
    saved_count: int = Field(default=0, ge=0)


# =============================================================================
# QUERY MODELS
# =============================================================================

class ExpenseQuery(BaseModel):
    """
    A summary request over the store.

    Each period needs its own parameters:
    - day: ``day``
    - month: ``month`` and ``year``
    - year: ``year``
    - range: ``start`` and ``end`` (order is NOT checked; an inverted
      range simply matches nothing)
    """

    query_id: UUID = Field(
        default_factory=uuid4
    )
    created_at: datetime = Field(
        default_factory=datetime.utcnow
    )
    period: QueryPeriod = Field(
        default=QueryPeriod.ALL,
        description="Temporal scope of the query"
    )

    day: Optional[CalendarDate] = None
    month: Optional[int] = Field(default=None, ge=1, le=12)
    year: Optional[int] = Field(default=None, ge=0, le=9999)
    start: Optional[CalendarDate] = None
    end: Optional[CalendarDate] = None

    group_by: Optional[str] = Field(
        default=None,
        pattern="^(category|type|month)$"
    )

    @model_validator(mode='after')
    def validate_period_parameters(self) -> 'ExpenseQuery':
        """Check the period has the parameters it filters on."""
        if self.period == QueryPeriod.DAY and self.day is None:
            raise ValueError("A day query needs a day")
        if self.period == QueryPeriod.MONTH and (self.month is None or self.year is None):
            raise ValueError("A month query needs a month and a year")
        if self.period == QueryPeriod.YEAR and self.year is None:
            raise ValueError("A year query needs a year")
        if self.period == QueryPeriod.RANGE and (self.start is None or self.end is None):
            raise ValueError("A range query needs a start and an end date")
        return self


class QueryResult(BaseModel):
    """Result of executing an ExpenseQuery against the store."""

    query_id: UUID
    executed_at: datetime = Field(
        default_factory=datetime.utcnow
    )

    # Success/failure
    success: bool
    error_message: Optional[str] = None

    # Results
    data_found: bool = Field(
        ...,
        description="Was any expense matched?"
    )
    result_count: int = Field(
        ge=0,
        description="Number of matched expenses"
    )
    expenses: list[Expense] = Field(
        default_factory=list,
        description="Matched expenses in insertion order"
    )
    total_amount: Decimal = Field(
        default=Decimal("0"),
        description="Sum of matched amounts"
    )
    breakdown: dict[str, Decimal] = Field(
        default_factory=dict,
        description="Totals per group when group_by is set"
    )

    query_description: str = Field(
        ...,
        description="Human-readable description of what was queried"
    )
