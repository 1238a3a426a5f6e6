"""Value-level visibility: whether a record's amount is shown or masked."""

from datetime import date
from typing import Iterable, Mapping

from app.models.transaction import LedgerView, MaskedRecord, RecordSnapshot, TransactionType
from app.models.user import UserSnapshot


def should_mask_amount(
    viewer: UserSnapshot, owner: UserSnapshot, as_of: date, adult_age: int = 18
) -> bool:
    """
    Decide whether owner's amounts are hidden from viewer.

    Precondition: owner is in viewer's scope and viewer is not owner
    (a user always sees their own data; callers short-circuit that case).

    - Minor owner: never masked (guardianship is assumed)
    - Adult owner: visible only to their creator, and only with
      allow_parent_view set; masked for everybody else
    """
    if owner.is_minor(as_of, adult_age):
        return False
    if owner.created_by == viewer.id and owner.allow_parent_view:
        return False
    return True


def mask_records(
    viewer: UserSnapshot,
    records: Iterable[RecordSnapshot],
    owners: Mapping[str, UserSnapshot],
    as_of: date,
    adult_age: int = 18,
) -> LedgerView:
    """
    Apply masking to already scope-filtered records and compute totals.

    Masked records report amount 0 and count as 0 in the totals.

    Args:
        viewer: Viewing user
        records: Records whose owners are all in viewer's scope
        owners: User snapshots keyed by ID (must contain every owner)
        as_of: Evaluation date for age calculation
        adult_age: Age at which the consent rule starts to apply

    Returns:
        LedgerView with masked records, totals and has_masked_data
    """
    masked_records = []
    total_income = 0.0
    total_expense = 0.0

    for record in records:
        masked = False
        if record.owner_user_id != viewer.id:
            owner = owners[record.owner_user_id]
            masked = should_mask_amount(viewer, owner, as_of, adult_age)

        view = MaskedRecord.from_record(record, masked)
        masked_records.append(view)

        if view.type == TransactionType.INCOME:
            total_income += view.amount
        else:
            total_expense += view.amount

    return LedgerView(
        records=masked_records,
        total_income=total_income,
        total_expense=total_expense,
        has_masked_data=any(r.is_masked for r in masked_records),
    )
