"""
CSV Ledger Storage

The ledger is a flat CSV file with five named columns:

    Date,Description,Amount,Category,Type
    "2024-03-05","Coffee",4.50,"Food","Cash"

DESIGN DECISION: Reading is forgiving per row and strict per file.
A bad row (unparseable date, amount or type, wrong field count) is
skipped and reported; a missing or mismatched header fails the whole
load. A missing file is a first run, not an error.

Text fields are written through the csv module, so embedded quotes,
commas and newlines survive a save/load round-trip.

TRADEOFFS:
- Writes are not atomic; a crash mid-save can truncate the file
- The whole ledger is rewritten on every save (fine for personal use)
"""

import csv
import re
from decimal import Decimal
from pathlib import Path
from typing import Optional, Sequence, Union

import structlog

from expense_tracker.models.expense import (
    CalendarDate,
    Expense,
    LoadResult,
    SaveResult,
    TransactionType,
    ValidationIssue,
)
from expense_tracker.services.storage.interface import (
    ExpenseStorageInterface,
    HeaderMismatchError,
    RowRejectedError,
)


# Column order of the ledger file
LEDGER_COLUMNS = [
    "Date",
    "Description",
    "Amount",
    "Category",
    "Type",
]

# Dates that mean "no date" rather than a typo
ZERO_DATE_STRINGS = frozenset({"0-00-00", "0000-00-00"})

# Signed decimal, optionally in the exponent form Decimal uses for str()
_AMOUNT_PATTERN = re.compile(r"-?[0-9]+(\.[0-9]+)?([eE][+-]?[0-9]+)?")


logger = structlog.get_logger(__name__)


class CsvExpenseStorage(ExpenseStorageInterface):
    """
    CSV file implementation of ledger storage.

    One expense per line, in store order, under a fixed header.
    """

    def __init__(self, path: Union[str, Path]):
        self._path = Path(path)

    @property
    def location(self) -> str:
        return str(self._path)

    # -------------------------------------------------------------------------
    # Encoding
    # -------------------------------------------------------------------------

    def _expense_to_row(self, expense: Expense) -> list:
        """Convert an Expense to a CSV row (amount stays numeric, so unquoted)."""
        return [
            expense.date.isoformat(),
            expense.description,
            expense.amount,
            expense.category,
            expense.transaction_type.value,
        ]

    def save_expenses(self, expenses: Sequence[Expense]) -> SaveResult:
        """Write the header and every expense, replacing the existing file."""
        rows = [self._expense_to_row(expense) for expense in expenses]
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            with self._path.open("w", newline="", encoding="utf-8") as handle:
                handle.write(",".join(LEDGER_COLUMNS) + "\n")
                writer = csv.writer(
                    handle,
                    quoting=csv.QUOTE_NONNUMERIC,
                    lineterminator="\n",
                )
                writer.writerows(rows)
        except OSError as e:
            logger.error("ledger_write_failed", path=self.location, error=str(e))
            return SaveResult(
                success=False,
                error_message=f"Could not write ledger file {self.location}: {e}",
                destination=self.location,
            )

        logger.info("ledger_saved", path=self.location, count=len(rows))
        return SaveResult(
            success=True,
            destination=self.location,
            saved_count=len(rows),
        )

    # -------------------------------------------------------------------------
    # Decoding
    # -------------------------------------------------------------------------

    def _reject(
        self,
        field: str,
        issue_type: str,
        message: str,
        line_number: int,
        severity: str = "warning",
        suggested_fix: Optional[str] = None,
    ) -> RowRejectedError:
        return RowRejectedError(
            ValidationIssue(
                field=field,
                issue_type=issue_type,
                message=message,
                severity=severity,
                suggested_fix=suggested_fix,
                line_number=line_number,
            )
        )

    def _row_to_expense(self, raw: list[str], width: int, line_number: int) -> Expense:
        """
        Convert one CSV row to an Expense.

        Raises:
            RowRejectedError: If the row must be skipped
        """
        fields = [field.strip(" ") for field in raw]
        if len(fields) != width:
            raise self._reject(
                "row",
                "field_count",
                f"Expected {width} fields, found {len(fields)}",
                line_number,
            )

        date_text, description, amount_text, category, type_text = fields[:5]

        if date_text in ZERO_DATE_STRINGS:
            raise self._reject(
                "Date",
                "zero_date",
                f"Row has no date ({date_text})",
                line_number,
                severity="info",
            )
        try:
            expense_date = CalendarDate.parse(date_text)
        except ValueError as e:
            raise self._reject(
                "Date",
                "invalid_date",
                f"Could not parse date string {date_text!r}",
                line_number,
                suggested_fix="Use YYYY-MM-DD with month 01-12 and day 01-31",
            ) from e

        if not _AMOUNT_PATTERN.fullmatch(amount_text):
            raise self._reject(
                "Amount",
                "invalid_amount",
                f"Could not parse amount {amount_text!r}",
                line_number,
                suggested_fix="Use a plain decimal number such as 4.50 or -12.00",
            )
        amount = Decimal(amount_text)

        try:
            transaction_type = TransactionType(type_text)
        except ValueError as e:
            raise self._reject(
                "Type",
                "unknown_type",
                f"Unknown transaction type {type_text!r}",
                line_number,
                suggested_fix="Use Cash or Credit",
            ) from e

        return Expense(
            description=description,
            amount=amount,
            date=expense_date,
            category=category,
            transaction_type=transaction_type,
        )

    def _check_header(self, raw: list[str]) -> list[str]:
        header = [field.strip(" ") for field in raw]
        if header[:len(LEDGER_COLUMNS)] != LEDGER_COLUMNS:
            raise HeaderMismatchError(
                f"CSV header missing or does not match {','.join(LEDGER_COLUMNS)}: "
                f"found {','.join(header)}"
            )
        return header

    def _log_skipped_row(self, issue: ValidationIssue) -> None:
        log = logger.info if issue.severity == "info" else logger.warning
        log(
            "ledger_row_skipped",
            path=self.location,
            line=issue.line_number,
            issue_type=issue.issue_type,
            reason=issue.message,
        )

    def _read_ledger(
        self,
        reader,
    ) -> tuple[list[Expense], list[ValidationIssue]]:
        header = None
        expenses: list[Expense] = []
        issues: list[ValidationIssue] = []

        for raw in reader:
            if not any(field.strip() for field in raw):
                continue  # Skip empty lines

            if header is None:
                header = self._check_header(raw)
                continue

            try:
                expenses.append(
                    self._row_to_expense(raw, len(header), reader.line_num)
                )
            except RowRejectedError as e:
                self._log_skipped_row(e.issue)
                issues.append(e.issue)

        if header is None:
            raise HeaderMismatchError("CSV header missing: the ledger file is empty")

        return expenses, issues

    def load_expenses(self) -> LoadResult:
        """Read the ledger file; see the module docstring for the row policy."""
        try:
            with self._path.open(newline="", encoding="utf-8-sig") as handle:
                expenses, issues = self._read_ledger(csv.reader(handle))
        except FileNotFoundError:
            logger.info("ledger_file_missing", path=self.location)
            return LoadResult(
                success=True,
                source=self.location,
                file_found=False,
            )
        except HeaderMismatchError as e:
            logger.error("ledger_header_invalid", path=self.location, error=str(e))
            return LoadResult(
                success=False,
                error_message=str(e),
                source=self.location,
            )
        except (OSError, UnicodeDecodeError, csv.Error) as e:
            logger.error("ledger_read_failed", path=self.location, error=str(e))
            return LoadResult(
                success=False,
                error_message=f"Failed to read ledger file {self.location}: {e}",
                source=self.location,
            )

        logger.info(
            "ledger_loaded",
            path=self.location,
            loaded=len(expenses),
            skipped=len(issues),
        )
        return LoadResult(
            success=True,
            source=self.location,
            expenses=expenses,
            issues=issues,
        )
