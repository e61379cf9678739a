from decimal import Decimal

from app import config
from app.models import BalanceReport, DebtRelationship, Expense, MemberBalance, MemberRef, SplitShare


def _amount(value: Decimal) -> float:
    return float(value)


def serialize_share(share: SplitShare) -> dict:
    return {
        "memberId": share.member_id,
        "owedAmount": _amount(share.owed_amount),
        "owedPercentage": share.owed_percentage,
    }


def serialize_expense(expense: Expense) -> dict:
    return {
        "id": expense.id,
        "description": expense.description,
        "amount": _amount(expense.amount),
        "ownerId": expense.owner_id,
        "paidBy": expense.payer_id,
        "date": expense.date.isoformat() if expense.date else None,
        "splitMethod": expense.split_method.value if expense.split_method else None,
        "splitDetails": [serialize_share(s) for s in expense.split_details],
    }


def serialize_balance(balance: MemberBalance) -> dict:
    return {
        "memberId": balance.member_id,
        "name": balance.name,
        "email": balance.email,
        "totalPaid": _amount(balance.total_paid),
        "totalOwed": _amount(balance.total_owed),
        "settledOut": _amount(balance.settled_out),
        "settledIn": _amount(balance.settled_in),
        "balance": _amount(balance.balance),
        "formattedBalance": config.CURRENCY.format(balance.balance),
    }


def serialize_member_ref(ref: MemberRef) -> dict:
    return {"id": ref.id, "name": ref.name, "email": ref.email}


def serialize_debt(debt: DebtRelationship) -> dict:
    return {
        "from": serialize_member_ref(debt.from_member),
        "to": serialize_member_ref(debt.to_member),
        "amount": _amount(debt.amount),
        "formattedAmount": config.CURRENCY.format(debt.amount),
        "currency": debt.currency,
    }


def serialize_report(report: BalanceReport) -> dict:
    return {
        "balances": [serialize_balance(b) for b in report.balances],
        "unresolved": list(report.unresolved),
    }
