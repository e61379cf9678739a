"""
Tests for balance aggregation and debt simplification.
"""

from decimal import Decimal

import pytest

from app import config
from app.balances import compute_balances, settle_up, simplify_debts
from app.models import (
    Expense,
    Household,
    MemberBalance,
    MemberWeight,
    Settlement,
    SettlementStatus,
    SplitMethod,
    SplitShare,
)
from app.splits import split_expense


def _balance(member_id: str, amount: str) -> MemberBalance:
    return MemberBalance(member_id=member_id, name=member_id.title(), balance=Decimal(amount))


def _settle(balances, debts) -> dict[str, Decimal]:
    """Apply each suggested payment and return what is left per member."""
    remaining = {b.member_id: b.balance for b in balances}
    for debt in debts:
        remaining[debt.from_member.id] += debt.amount
        remaining[debt.to_member.id] -= debt.amount
    return remaining


@pytest.fixture
def dinner(household):
    """90 paid by Alice, shared equally by three."""
    expense = Expense(id="e1", amount=Decimal("90"), owner_id="alice", split_method=SplitMethod.EQUAL)
    return split_expense(expense, household)


@pytest.fixture
def expense_mix(household):
    expenses = [
        Expense(amount=Decimal("90"), owner_id="alice", split_method="equal"),
        Expense(amount=Decimal("100"), owner_id="bob", split_method="equal"),
        Expense(amount=Decimal("12.34"), owner_id="carol", paid_by="bob", split_method="equal"),
        Expense(amount=Decimal("50"), owner_id="carol", split_method="none"),
        Expense(
            amount=Decimal("75"),
            owner_id="carol",
            split_method="custom",
            split_details=[
                SplitShare(member_id="alice", owed_amount=Decimal("25")),
                SplitShare(member_id="bob", owed_amount=Decimal("50")),
            ],
        ),
    ]
    return [split_expense(e, household) for e in expenses]


class TestComputeBalances:
    """Tests for the balance aggregator."""

    def test_equal_dinner(self, dinner, directory):
        """Test payer is credited and every member is debited their share."""
        report = compute_balances([dinner], directory)
        alice = report.get("alice")
        assert alice.total_paid == Decimal("90")
        assert alice.total_owed == Decimal("30")
        assert alice.balance == Decimal("60")
        assert alice.name == "Alice"
        assert alice.email == "alice@example.com"
        assert report.get("bob").balance == Decimal("-30")
        assert report.get("carol").balance == Decimal("-30")
        assert report.complete

    def test_first_encounter_order(self, dinner, directory):
        report = compute_balances([dinner], directory)
        assert [b.member_id for b in report.balances] == ["alice", "bob", "carol"]

    def test_percentage_household(self, directory):
        """Test 70/30 split paid by Bob."""
        household = Household(
            member_ids=["alice", "bob"],
            member_weights=[
                MemberWeight(member_id="alice", percentage=70),
                MemberWeight(member_id="bob", percentage=30),
            ],
        )
        expense = split_expense(
            Expense(amount=Decimal("100"), owner_id="alice", paid_by="bob", split_method="percentage"),
            household,
        )
        report = compute_balances([expense], directory)
        bob = report.get("bob")
        assert bob.total_paid == Decimal("100")
        assert bob.total_owed == Decimal("30")
        assert bob.balance == Decimal("70")
        assert report.get("alice").balance == Decimal("-70")

    def test_uninvolved_members_absent(self, household, directory):
        """Test members who never pay or owe are not zero-filled."""
        expense = split_expense(
            Expense(amount=Decimal("50"), owner_id="alice", split_method="none"), household,
        )
        report = compute_balances([expense], directory)
        assert [b.member_id for b in report.balances] == ["alice"]
        assert report.get("bob") is None

    def test_no_expenses(self, directory):
        report = compute_balances([], directory)
        assert report.balances == []
        assert report.unresolved == []

    def test_unresolved_participants_reported(self, directory):
        """Test unknown ids are skipped and surfaced rather than silently dropped."""
        expenses = [
            Expense(
                amount=Decimal("40"),
                owner_id="ghost",
                split_details=[
                    SplitShare(member_id="alice", owed_amount=Decimal("20")),
                    SplitShare(member_id="ghost", owed_amount=Decimal("20")),
                ],
            ),
            Expense(
                amount=Decimal("10"),
                owner_id="alice",
                split_details=[SplitShare(member_id="phantom", owed_amount=Decimal("10"))],
            ),
        ]
        report = compute_balances(expenses, directory)
        assert report.unresolved == ["ghost", "phantom"]
        assert not report.complete
        alice = report.get("alice")
        assert alice.total_paid == Decimal("10")
        assert alice.total_owed == Decimal("20")

    def test_balance_conservation(self, expense_mix, directory):
        """Test balances sum to zero when everyone resolves."""
        report = compute_balances(expense_mix, directory)
        assert sum(b.balance for b in report.balances) == Decimal("0")

    def test_order_does_not_matter(self, expense_mix, directory):
        forward = compute_balances(expense_mix, directory)
        backward = compute_balances(list(reversed(expense_mix)), directory)
        assert {b.member_id: b.balance for b in forward.balances} == {
            b.member_id: b.balance for b in backward.balances
        }

    def test_idempotent(self, expense_mix, directory):
        """Test recomputing the same expenses gives identical results."""
        assert compute_balances(expense_mix, directory) == compute_balances(expense_mix, directory)

    def test_completed_settlement_counts(self, dinner, directory):
        """Test a completed payment moves money between members."""
        settlements = [Settlement(from_member="bob", to_member="alice", amount=Decimal("30"),
                                  status=SettlementStatus.COMPLETED)]
        report = compute_balances([dinner], directory, settlements)
        assert report.get("bob").balance == Decimal("0")
        assert report.get("bob").settled_out == Decimal("30")
        assert report.get("alice").settled_in == Decimal("30")
        assert report.get("alice").balance == Decimal("30")
        assert report.get("carol").balance == Decimal("-30")

    @pytest.mark.parametrize("status", [SettlementStatus.PENDING, SettlementStatus.CANCELLED])
    def test_open_settlements_ignored(self, dinner, directory, status):
        settlements = [Settlement(from_member="bob", to_member="alice", amount=Decimal("30"), status=status)]
        report = compute_balances([dinner], directory, settlements)
        assert report.get("bob").balance == Decimal("-30")

    def test_settlement_accepts_wire_names(self):
        settlement = Settlement.model_validate({"from": "bob", "to": "alice", "amount": 5})
        assert settlement.from_member == "bob"
        assert settlement.status == SettlementStatus.PENDING


class TestSimplifyDebts:
    """Tests for the greedy debt simplifier."""

    def test_equal_dinner(self, dinner, directory):
        """Test Bob and Carol each pay Alice 30."""
        report = compute_balances([dinner], directory)
        debts = simplify_debts(report.balances)
        assert [(d.from_member.id, d.to_member.id, d.amount) for d in debts] == [
            ("bob", "alice", Decimal("30.00")),
            ("carol", "alice", Decimal("30.00")),
        ]
        assert debts[0].from_member.name == "Bob"
        assert debts[0].to_member.email == "alice@example.com"
        assert debts[0].currency == config.CURRENCY.code

    def test_single_payment(self):
        debts = simplify_debts([_balance("alice", "-70"), _balance("bob", "70")])
        assert len(debts) == 1
        assert (debts[0].from_member.id, debts[0].to_member.id) == ("alice", "bob")
        assert debts[0].amount == Decimal("70.00")

    def test_nothing_to_settle(self):
        assert simplify_debts([_balance("alice", "0")]) == []
        assert simplify_debts([]) == []

    def test_near_zero_balances_are_settled(self):
        """Test balances within a cent of zero produce no payments."""
        assert simplify_debts([_balance("alice", "0.01"), _balance("bob", "-0.01")]) == []

    def test_leftover_cent_does_not_spawn_payment(self):
        """Test a party left within a cent of zero is treated as settled."""
        balances = [_balance("a", "10.00"), _balance("b", "0.02"), _balance("c", "-10.01")]
        debts = simplify_debts(balances)
        assert [(d.from_member.id, d.to_member.id, d.amount) for d in debts] == [
            ("c", "a", Decimal("10.00")),
        ]

    def test_custom_tolerance(self):
        balances = [_balance("alice", "0.50"), _balance("bob", "-0.50")]
        assert simplify_debts(balances, tolerance=Decimal("1")) == []
        assert len(simplify_debts(balances)) == 1

    def test_currency_override(self):
        debts = simplify_debts([_balance("alice", "-5"), _balance("bob", "5")], currency="USD")
        assert debts[0].currency == "USD"

    def test_largest_first(self):
        """Test the biggest creditor is paired with the biggest debtor first."""
        balances = [
            _balance("a", "10"),
            _balance("b", "40"),
            _balance("c", "-15"),
            _balance("d", "-35"),
        ]
        debts = simplify_debts(balances)
        assert (debts[0].from_member.id, debts[0].to_member.id, debts[0].amount) == ("d", "b", Decimal("35.00"))

    def test_input_not_mutated(self, dinner, directory):
        report = compute_balances([dinner], directory)
        simplify_debts(report.balances)
        assert report.get("alice").balance == Decimal("60")
        assert report.get("bob").balance == Decimal("-30")

    def test_payments_clear_all_balances(self, expense_mix, directory):
        """Test applying every suggested payment zeroes every balance."""
        report = compute_balances(expense_mix, directory)
        debts = simplify_debts(report.balances)
        for left in _settle(report.balances, debts).values():
            assert abs(left) <= Decimal("0.01")
        assert all(d.amount > 0 for d in debts)

    def test_transaction_bound(self):
        """Test the greedy pass stays within creditors + debtors - 1 payments."""
        balances = [
            _balance("c1", "5"),
            _balance("c2", "5"),
            _balance("d1", "-3"),
            _balance("d2", "-3"),
            _balance("d3", "-4"),
        ]
        debts = simplify_debts(balances)
        assert 3 <= len(debts) <= 4
        for left in _settle(balances, debts).values():
            assert left == 0

    def test_fewer_than_all_pairs(self, expense_mix, directory):
        report = compute_balances(expense_mix, directory)
        creditors = [b for b in report.balances if b.balance > 0]
        debtors = [b for b in report.balances if b.balance < 0]
        debts = simplify_debts(report.balances)
        assert len(debts) <= len(creditors) + len(debtors) - 1


class TestSettleUp:
    def test_balances_and_debts(self, dinner, directory):
        report, debts = settle_up([dinner], directory)
        assert report.get("alice").balance == Decimal("60")
        assert len(debts) == 2

    def test_unshared_expense_needs_no_payments(self, household, directory):
        expense = split_expense(
            Expense(amount=Decimal("50"), owner_id="alice", split_method="none"), household,
        )
        report, debts = settle_up([expense], directory)
        assert [(s.member_id, s.owed_percentage) for s in expense.split_details] == [("alice", 100.0)]
        assert report.get("alice").balance == Decimal("0")
        assert debts == []
