"""Split calculation: how a single expense is divided among household members.

Amounts are handled in integer cents so every split sums exactly to the
expense amount; leftover cents are handed out in roster order.
"""

import logging
from typing import Sequence

from app.errors import EmptyMembership, InvalidAmount, SplitMismatch, UnknownMember
from app.models import Expense, Household, MemberWeight, SplitMethod, SplitShare
from app.money import from_cents, to_cents

logger = logging.getLogger("household")

# Custom splits may be off by at most one cent from the expense amount
SPLIT_TOLERANCE_CENTS = 1

# Explicit member percentages may miss 100 by this many points
PERCENT_TOLERANCE = 0.01


def _even_cents(total: int, count: int) -> list[int]:
    base = total // count
    remainder = total - base * count
    return [base + (1 if i < remainder else 0) for i in range(count)]


def _equal_split(total: int, members: Sequence[str]) -> list[SplitShare]:
    count = len(members)
    if count == 0:
        raise EmptyMembership("Cannot split an expense between zero members")
    percentage = 100 / count
    return [
        SplitShare(member_id=mid, owed_amount=from_cents(cents), owed_percentage=percentage)
        for mid, cents in zip(members, _even_cents(total, count))
    ]


def _effective_percentages(weights: Sequence[MemberWeight]) -> list[float]:
    """Explicit percentages as given; raw weights share whatever is left of 100."""
    explicit = sum(w.percentage for w in weights if w.percentage)
    raw_total = sum(w.weight or 0 for w in weights if not w.percentage)
    remaining = 100 - explicit

    if remaining < -PERCENT_TOLERANCE or (raw_total == 0 and abs(remaining) > PERCENT_TOLERANCE):
        raise SplitMismatch(f"Member percentages add up to {explicit:g}, expected 100")

    result = []
    for w in weights:
        if w.percentage:
            result.append(w.percentage)
        elif raw_total:
            result.append((w.weight or 0) / raw_total * max(remaining, 0))
        else:
            result.append(0.0)
    return result


def _percentage_split(
    total: int,
    members: Sequence[str],
    weights: Sequence[MemberWeight],
) -> list[SplitShare]:
    if not members:
        raise EmptyMembership("Cannot split an expense between zero members")

    roster = set(members)
    unknown = [w.member_id for w in weights if w.member_id not in roster]
    if unknown:
        raise UnknownMember(unknown)
    if any((w.percentage or 0) < 0 or (w.weight or 0) < 0 for w in weights):
        raise InvalidAmount("Member weights must not be negative")

    if not any(w.percentage or w.weight for w in weights):
        logger.debug("No member weights configured, splitting equally")
        return _equal_split(total, members)

    percentages = _effective_percentages(weights)
    # Dividing by the actual sum absorbs float drift around 100
    total_percentage = sum(percentages)

    # Round cumulative totals rather than each share so the cents always add up
    result: list[SplitShare] = []
    running = 0.0
    allocated = 0
    for w, pct in zip(weights, percentages):
        running += pct
        upto = int(total * running / total_percentage + 0.5)
        result.append(SplitShare(
            member_id=w.member_id,
            owed_amount=from_cents(upto - allocated),
            owed_percentage=pct,
        ))
        allocated = upto
    return result


def _custom_split(
    total: int,
    members: Sequence[str],
    split_details: Sequence[SplitShare],
) -> list[SplitShare]:
    if not split_details:
        return _equal_split(total, members)

    if members:
        roster = set(members)
        unknown = [d.member_id for d in split_details if d.member_id not in roster]
        if unknown:
            raise UnknownMember(unknown)

    if any(d.owed_amount < 0 for d in split_details):
        raise InvalidAmount("Owed amounts must not be negative")

    assigned = sum(to_cents(d.owed_amount) for d in split_details)
    if abs(assigned - total) > SPLIT_TOLERANCE_CENTS:
        raise SplitMismatch(
            f"Custom split adds up to {from_cents(assigned)}, expected {from_cents(total)}"
        )

    return [
        SplitShare(
            member_id=d.member_id,
            owed_amount=d.owed_amount,
            owed_percentage=d.owed_percentage,
        )
        for d in split_details
    ]


def compute_split(
    amount,
    split_method: SplitMethod | str,
    *,
    members: Sequence[str] = (),
    payer_id: str | None = None,
    split_details: Sequence[SplitShare] | None = None,
    member_weights: Sequence[MemberWeight] | None = None,
) -> list[SplitShare]:
    """Work out what each member owes for an expense.

    - equal: amount / len(members) each.
    - percentage: explicit percentages as given, raw weights share the rest;
      no weights at all falls back to equal.
    - custom: ``split_details`` as given, or equal when none are given.
    - none: the payer owes everything; no payer means no split at all.

    Raises InvalidAmount, EmptyMembership, UnknownMember or SplitMismatch.
    """
    method = SplitMethod(split_method)
    total = to_cents(amount)
    if total < 0:
        raise InvalidAmount(f"Expense amount must not be negative, got {amount}")

    if method == SplitMethod.EQUAL:
        return _equal_split(total, members)

    if method == SplitMethod.PERCENTAGE:
        return _percentage_split(total, members, member_weights or [])

    if method == SplitMethod.CUSTOM:
        return _custom_split(total, members, split_details or [])

    if not payer_id:
        return []
    return [SplitShare(member_id=payer_id, owed_amount=from_cents(total), owed_percentage=100.0)]


def split_expense(expense: Expense, household: Household) -> Expense:
    """Return a copy of ``expense`` with its split details computed for ``household``.

    This is what gets persisted whenever an expense's amount, split method or
    split inputs change.
    """
    method = expense.split_method or household.default_split_method
    details = compute_split(
        expense.amount,
        method,
        members=household.member_ids,
        payer_id=expense.payer_id,
        split_details=expense.split_details,
        member_weights=household.member_weights,
    )
    logger.debug(
        "Expense split",
        extra={"extra_data": {
            "expense_id": expense.id,
            "split_method": method.value,
            "shares": len(details),
        }},
    )
    return expense.model_copy(update={"split_method": method, "split_details": details})
