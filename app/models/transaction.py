"""Financial record snapshots and the masked ledger view built from them."""

from dataclasses import dataclass
from datetime import date
from enum import Enum as PyEnum
from typing import Optional


class TransactionType(str, PyEnum):
    """Transaction direction"""

    INCOME = "INCOME"
    EXPENSE = "EXPENSE"


@dataclass(frozen=True)
class RecordSnapshot:
    """
    Financial record as supplied by the record store.

    Amount is always non-negative; direction comes from type.
    """

    id: str
    owner_user_id: str
    amount: float
    category: str
    type: TransactionType
    date: date
    description: Optional[str] = None


@dataclass(frozen=True)
class MaskedRecord:
    """
    Record as it may be shown to a viewer.

    When is_masked is True the amount is reported as 0; category, type,
    date and description stay visible.
    """

    id: str
    owner_user_id: str
    amount: float
    category: str
    type: TransactionType
    date: date
    description: Optional[str]
    is_masked: bool

    @classmethod
    def from_record(cls, record: RecordSnapshot, masked: bool) -> "MaskedRecord":
        return cls(
            id=record.id,
            owner_user_id=record.owner_user_id,
            amount=0.0 if masked else record.amount,
            category=record.category,
            type=record.type,
            date=record.date,
            description=record.description,
            is_masked=masked,
        )


@dataclass(frozen=True)
class LedgerView:
    """
    Masked records plus totals for a viewer.

    Totals count masked records as 0. has_masked_data tells the UI to
    render a "some data is hidden" indicator.
    """

    records: list[MaskedRecord]
    total_income: float
    total_expense: float
    has_masked_data: bool

    @property
    def balance(self) -> float:
        return self.total_income - self.total_expense
