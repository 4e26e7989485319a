"""Capital ledger data model."""

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from enum import Enum

from shop_ledger.models._fields import _pick
from shop_ledger.utils.date_utils import normalize_date, normalize_datetime
from shop_ledger.utils.decimal_utils import to_decimal


class CapitalType(Enum):
    """Direction of a capital movement."""

    DEPOSIT = "Deposit"  # Money into the business
    WITHDRAWAL = "Withdrawal"  # Money out of the business


class CapitalSource(Enum):
    """Where a capital movement came from or went to."""

    ETSY_PAYOUT = "Etsy Payout"
    LOAN = "Loan"
    DIVIDEND = "Dividend"
    INVESTMENT = "Investment"
    LOAN_REPAYMENT = "Loan Repayment"


# Loan repayments only make sense as money leaving the business
ALLOWED_SOURCES: dict[CapitalType, frozenset[CapitalSource]] = {
    CapitalType.DEPOSIT: frozenset({
        CapitalSource.ETSY_PAYOUT,
        CapitalSource.LOAN,
        CapitalSource.DIVIDEND,
        CapitalSource.INVESTMENT,
    }),
    CapitalType.WITHDRAWAL: frozenset(CapitalSource),
}


@dataclass
class CapitalEntry:
    """A ledger line for money moving outside normal order revenue.

    The amount is always stored positive; the direction lives in entry_type.

    Attributes:
        id: Document identifier in the store.
        entry_type: Deposit or withdrawal.
        source: Provenance tag.
        amount: Positive amount moved.
        transaction_date: Date of the movement, or None if unreadable.
        submitted_by: Identity of the user who recorded the entry.
        notes: Optional free-text notes.
        created_at: Store creation timestamp.
        updated_at: Store last-update timestamp.
    """

    id: str
    entry_type: CapitalType
    source: CapitalSource
    amount: Decimal
    transaction_date: date | None
    submitted_by: str
    notes: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def is_deposit(self) -> bool:
        return self.entry_type is CapitalType.DEPOSIT

    @property
    def signed_amount(self) -> Decimal:
        """Amount with the sign implied by the entry type."""
        return self.amount if self.is_deposit else -self.amount

    @classmethod
    def from_dict(cls, data: dict[str, object]) -> "CapitalEntry":
        """Create a CapitalEntry from a store document.

        Args:
            data: Dictionary containing entry data (camelCase or snake_case keys).

        Returns:
            A new CapitalEntry instance.

        Raises:
            KeyError: If the id, type or amount is missing.
            ValueError: If the type, source or amount is invalid.
        """
        type_value = _pick(data, "type", "entry_type")
        if type_value is None:
            raise KeyError("type")
        try:
            entry_type = CapitalType(str(type_value))
        except ValueError:
            raise ValueError(f"Unknown capital entry type: {type_value!r}") from None

        source_value = str(_pick(data, "source", default=""))
        try:
            source = CapitalSource(source_value)
        except ValueError:
            raise ValueError(f"Unknown capital source: {source_value!r}") from None

        amount = _pick(data, "amount")
        if amount is None:
            raise KeyError("amount")

        notes = _pick(data, "notes")

        return cls(
            id=str(data["id"]),
            entry_type=entry_type,
            source=source,
            amount=to_decimal(amount),
            transaction_date=normalize_date(_pick(data, "transactionDate", "transaction_date")),
            submitted_by=str(_pick(data, "submittedBy", "submitted_by", default="")),
            notes=str(notes) if notes else None,
            created_at=normalize_datetime(_pick(data, "createdAt", "created_at")),
            updated_at=normalize_datetime(_pick(data, "updatedAt", "updated_at")),
        )

    def __repr__(self) -> str:
        return (
            f"CapitalEntry(id={self.id!r}, type={self.entry_type.value}, "
            f"source={self.source.value}, amount={self.amount})"
        )
