"""Balance aggregation and debt simplification for a household."""

import logging
from typing import Iterable, Sequence

from app import config
from app.directory import MemberDirectory
from app.models import (
    BalanceReport,
    DebtRelationship,
    Expense,
    MemberBalance,
    MemberRef,
    Settlement,
    SettlementStatus,
)
from app.money import Currency, from_cents, to_cents

logger = logging.getLogger("household")


def compute_balances(
    expenses: Iterable[Expense],
    directory: MemberDirectory,
    settlements: Iterable[Settlement] | None = None,
) -> BalanceReport:
    """Compute each participant's paid, owed and net balance.

    The payer of an expense (``paid_by``, else its owner) is credited the full
    amount; every member in its split details is debited their share.
    Completed settlements move money from sender to recipient.

    Members that never pay or owe are left out. Ids the directory cannot
    resolve are skipped and listed in ``BalanceReport.unresolved``.
    """
    rows: dict[str, dict] = {}
    unresolved: list[str] = []

    def ensure(member_id: str) -> dict | None:
        if member_id in rows:
            return rows[member_id]
        if member_id in unresolved:
            return None
        member = directory.lookup(member_id)
        if member is None:
            unresolved.append(member_id)
            logger.warning(
                "Skipping unresolved participant",
                extra={"extra_data": {"member_id": member_id}},
            )
            return None
        rows[member_id] = {"member": member, "paid": 0, "owed": 0, "out": 0, "in": 0}
        return rows[member_id]

    for expense in expenses:
        payer = ensure(expense.payer_id)
        if payer:
            payer["paid"] += to_cents(expense.amount)

        for share in expense.split_details:
            row = ensure(share.member_id)
            if row:
                row["owed"] += to_cents(share.owed_amount)

    for settlement in settlements or []:
        if settlement.status != SettlementStatus.COMPLETED:
            continue
        sender = ensure(settlement.from_member)
        recipient = ensure(settlement.to_member)
        amount = to_cents(settlement.amount)
        if sender:
            sender["out"] += amount
        if recipient:
            recipient["in"] += amount

    balances = []
    for member_id, row in rows.items():
        member = row["member"]
        balances.append(MemberBalance(
            member_id=member_id,
            name=member.name,
            email=member.email,
            total_paid=from_cents(row["paid"]),
            total_owed=from_cents(row["owed"]),
            settled_out=from_cents(row["out"]),
            settled_in=from_cents(row["in"]),
            balance=from_cents(row["paid"] - row["owed"] + row["out"] - row["in"]),
        ))

    return BalanceReport(balances=balances, unresolved=unresolved)


def _ref(balance: MemberBalance) -> MemberRef:
    return MemberRef(id=balance.member_id, name=balance.name, email=balance.email)


def simplify_debts(
    balances: Sequence[MemberBalance],
    currency: Currency | str | None = None,
    tolerance=None,
) -> list[DebtRelationship]:
    """Suggest payments that settle every balance, using a greedy pass.

    The largest creditor is repeatedly paired with the largest debtor. This
    needs at most ``creditors + debtors - 1`` payments but is not guaranteed
    to find the global minimum. Balances within ``tolerance`` of zero count
    as settled.
    """
    currency = currency or config.CURRENCY
    code = currency.code if isinstance(currency, Currency) else currency
    band = to_cents(config.SETTLE_TOLERANCE if tolerance is None else tolerance)

    creditors = []
    debtors = []
    for b in balances:
        cents = to_cents(b.balance)
        if cents > band:
            creditors.append({"member": b, "amount": cents})
        elif cents < -band:
            debtors.append({"member": b, "amount": -cents})

    creditors.sort(key=lambda x: x["amount"], reverse=True)
    debtors.sort(key=lambda x: x["amount"], reverse=True)

    debts: list[DebtRelationship] = []
    ci = 0
    di = 0

    while ci < len(creditors) and di < len(debtors):
        transfer = min(creditors[ci]["amount"], debtors[di]["amount"])
        debts.append(DebtRelationship(
            from_member=_ref(debtors[di]["member"]),
            to_member=_ref(creditors[ci]["member"]),
            amount=from_cents(transfer),
            currency=code,
        ))
        creditors[ci]["amount"] -= transfer
        debtors[di]["amount"] -= transfer
        # A leftover within the band counts as settled
        if creditors[ci]["amount"] <= band:
            ci += 1
        if debtors[di]["amount"] <= band:
            di += 1

    logger.debug(
        "Debts simplified",
        extra={"extra_data": {
            "creditors": len(creditors),
            "debtors": len(debtors),
            "payments": len(debts),
        }},
    )
    return debts


def settle_up(
    expenses: Iterable[Expense],
    directory: MemberDirectory,
    settlements: Iterable[Settlement] | None = None,
    currency: Currency | str | None = None,
) -> tuple[BalanceReport, list[DebtRelationship]]:
    """Balances plus the payments that would clear them."""
    report = compute_balances(expenses, directory, settlements)
    return report, simplify_debts(report.balances, currency)
