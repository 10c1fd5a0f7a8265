"""Tests for ledger aggregation into net balances."""

from decimal import Decimal
from types import SimpleNamespace

from app.schemas.ledger import LedgerExpense, LedgerShare
from app.services.balances import aggregate_balances, member_totals, to_net_balances
from app.services.simplify import simplify_debts

D = Decimal

A, B, C = 1, 2, 3


def expense(id, paid_by, amount, shares, is_settled=False):
    return LedgerExpense(
        id=id,
        group_id=10,
        paid_by=paid_by,
        amount=amount,
        is_settled=is_settled,
        shares=[
            LedgerShare(user_id=s[0], amount_owed=s[1], is_paid=s[2] if len(s) > 2 else False)
            for s in shares
        ],
    )


def test_payer_share_nets_against_credit():
    ledger = [expense(1, A, D("30"), [(A, D("10")), (B, D("10")), (C, D("10"))])]

    assert aggregate_balances(ledger) == {A: D("20.00"), B: D("-10.00"), C: D("-10.00")}


def test_multiple_expenses_accumulate():
    ledger = [
        expense(1, A, D("30"), [(A, D("10")), (B, D("10")), (C, D("10"))]),
        expense(2, B, D("60"), [(A, D("20")), (B, D("20")), (C, D("20"))]),
    ]

    balances = aggregate_balances(ledger)

    assert balances == {B: D("30.00"), C: D("-30.00")}
    assert A not in balances


def test_paid_shares_are_excluded():
    ledger = [expense(1, A, D("30"), [(A, D("10")), (B, D("10"), True), (C, D("10"))])]

    # the payer keeps full credit; only the unpaid shares count as debt
    assert aggregate_balances(ledger) == {A: D("20.00"), C: D("-10.00")}


def test_settled_expense_is_skipped_even_with_unpaid_shares():
    ledger = [
        expense(1, A, D("30"), [(B, D("15")), (C, D("15"))], is_settled=True),
        expense(2, B, D("10"), [(C, D("10"))]),
    ]

    assert aggregate_balances(ledger) == {B: D("10.00"), C: D("-10.00")}


def test_noise_at_or_below_a_cent_is_dropped():
    ledger = [expense(1, A, D("10.00"), [(A, D("3.34")), (B, D("3.33")), (C, D("3.33"))])]

    balances = aggregate_balances(ledger)

    assert balances == {A: D("6.66"), B: D("-3.33"), C: D("-3.33")}

    ledger = [expense(2, A, D("0.01"), [(B, D("0.01"))])]
    assert aggregate_balances(ledger) == {}


def test_unknown_users_pass_through():
    ledger = [expense(1, A, D("5"), [(99, D("5"))])]

    assert aggregate_balances(ledger) == {A: D("5.00"), 99: D("-5.00")}


def test_aggregation_is_idempotent():
    ledger = [
        expense(1, A, D("30"), [(A, D("10")), (B, D("10")), (C, D("10"))]),
        expense(2, C, D("7.50"), [(A, D("2.50")), (B, D("2.50"), True), (C, D("2.50"))]),
    ]

    assert aggregate_balances(ledger) == aggregate_balances(ledger)


def test_accepts_row_like_objects():
    row = SimpleNamespace(
        paid_by=A,
        amount=12.5,
        is_settled=False,
        shares=[
            SimpleNamespace(user_id=B, amount_owed=12.5, is_paid=False),
        ],
    )

    assert aggregate_balances([row]) == {A: D("12.50"), B: D("-12.50")}


def test_feeds_simplify():
    ledger = [
        expense(1, C, D("40"), [(A, D("30")), (B, D("10"))]),
    ]

    transfers = simplify_debts(aggregate_balances(ledger))

    assert transfers == [(A, C, D("30.00")), (B, C, D("10.00"))]


def test_member_totals():
    ledger = [
        expense(1, A, D("30"), [(A, D("10")), (B, D("10")), (C, D("10"))]),
        expense(2, B, D("12"), [(A, D("6")), (B, D("6"), True)]),
        expense(3, A, D("100"), [(B, D("100"))], is_settled=True),
    ]

    assert member_totals(ledger, A) == {"total_paid": D("30.00"), "total_owed": D("16.00")}
    assert member_totals(ledger, B) == {"total_paid": D("12.00"), "total_owed": D("10.00")}


def test_to_net_balances_orders_by_member():
    result = to_net_balances({3: D("-5.00"), 1: D("5.00")})

    assert [(b.user_id, b.amount) for b in result] == [(1, 5.0), (3, -5.0)]
