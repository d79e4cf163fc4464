"""
Tests for the ledger engine: debt matrix, balances and suggestions.
"""
import unittest
import sys
import os
from decimal import Decimal

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from group_ledger.balances import aggregate, detailed_balances, net_balances
from group_ledger.debt_matrix import build_debt_matrix
from group_ledger.models import Expense, ExpenseSplit, Member, Settlement
from group_ledger.suggestions import format_suggestions, settlement_suggestions, suggest


def make_expense(amount, paid_by, shares):
    return Expense(
        amount=amount,
        paid_by=paid_by,
        splits=[ExpenseSplit(member_id=mid, amount=amt) for mid, amt in shares.items()]
    )


def by_member(balances):
    return {b.member_id: b for b in balances}


class TestDebtMatrix(unittest.TestCase):
    """Tests for building pairwise debts."""

    def setUp(self):
        self.a = Member("A", member_id="a")
        self.b = Member("B", member_id="b")
        self.c = Member("C", member_id="c")
        self.members = [self.a, self.b, self.c]

    def test_every_member_gets_a_row(self):
        matrix = build_debt_matrix(self.members, [], [])
        self.assertEqual(set(matrix), {"a", "b", "c"})
        self.assertEqual(matrix["a"], {})
        self.assertEqual(matrix.owed("a", "b"), 0.0)

    def test_payer_share_is_not_a_debt(self):
        expense = make_expense(90.0, "a", {"a": 30.0, "b": 30.0, "c": 30.0})
        matrix = build_debt_matrix(self.members, [expense], [])

        self.assertEqual(matrix.owed("b", "a"), 30.0)
        self.assertEqual(matrix.owed("c", "a"), 30.0)
        self.assertNotIn("a", matrix["a"])

    def test_debts_accumulate_across_expenses(self):
        expenses = [
            make_expense(20.0, "a", {"a": 10.0, "b": 10.0}),
            make_expense(30.0, "a", {"a": 15.0, "b": 15.0}),
            make_expense(8.0, "b", {"a": 4.0, "b": 4.0}),
        ]
        matrix = build_debt_matrix(self.members, expenses, [])

        # Both directions are kept, nothing is netted at this stage
        self.assertEqual(matrix.owed("b", "a"), 25.0)
        self.assertEqual(matrix.owed("a", "b"), 4.0)

    def test_settlement_reduces_debt(self):
        expense = make_expense(100.0, "a", {"a": 50.0, "b": 50.0})
        settlement = Settlement(from_member="b", to_member="a", amount=20.0)
        matrix = build_debt_matrix(self.members, [expense], [settlement])

        self.assertEqual(matrix.owed("b", "a"), 30.0)

    def test_overpayment_is_clamped_without_reverse_credit(self):
        expense = make_expense(40.0, "b", {"a": 20.0, "b": 20.0})
        settlement = Settlement(from_member="a", to_member="b", amount=25.0)
        matrix = build_debt_matrix(self.members, [expense], [settlement])

        self.assertEqual(matrix.owed("a", "b"), 0.0)
        self.assertEqual(matrix.owed("b", "a"), 0.0)

    def test_settlement_order_does_not_matter(self):
        expense = make_expense(40.0, "b", {"a": 20.0, "b": 20.0})
        first = Settlement(from_member="a", to_member="b", amount=15.0)
        second = Settlement(from_member="a", to_member="b", amount=10.0)

        forward = build_debt_matrix(self.members, [expense], [first, second])
        backward = build_debt_matrix(self.members, [expense], [second, first])

        self.assertEqual(forward.owed("a", "b"), 0.0)
        self.assertEqual(backward.owed("a", "b"), 0.0)

    def test_settlement_without_debt_stays_zero(self):
        settlement = Settlement(from_member="a", to_member="c", amount=12.0)
        matrix = build_debt_matrix(self.members, [], [settlement])

        self.assertEqual(matrix.owed("a", "c"), 0.0)
        self.assertEqual(matrix.owed("c", "a"), 0.0)

    def test_unknown_member_creates_entries(self):
        expense = make_expense(30.0, "a", {"a": 15.0, "ghost": 15.0})
        matrix = build_debt_matrix(self.members, [expense], [])

        self.assertIn("ghost", matrix)
        self.assertEqual(matrix.owed("ghost", "a"), 15.0)

    def test_inputs_are_not_modified(self):
        expenses = [make_expense(90.0, "a", {"a": 30.0, "b": 30.0, "c": 30.0})]
        settlements = [Settlement(from_member="b", to_member="a", amount=30.0)]
        before = (list(self.members), list(expenses), list(settlements))

        build_debt_matrix(self.members, expenses, settlements)

        self.assertEqual((self.members, expenses, settlements), before)

    def test_no_float_drift(self):
        expenses = [make_expense(0.3, "a", {"a": 0.1, "b": 0.1, "c": 0.1})] * 10
        matrix = build_debt_matrix(self.members, expenses, [])

        self.assertEqual(matrix.owed("b", "a"), 1.0)
        self.assertEqual(matrix.owed_exact("c", "a"), Decimal("1.0"))

    def test_to_dataframe(self):
        expense = make_expense(90.0, "a", {"a": 30.0, "b": 30.0, "c": 30.0})
        df = build_debt_matrix(self.members, [expense], []).to_dataframe()

        self.assertEqual(df.shape, (3, 3))
        self.assertEqual(df.loc["b", "a"], 30.0)
        self.assertEqual(df.loc["a", "b"], 0.0)
        self.assertEqual(df.to_numpy().sum(), 60.0)


class TestBalanceAggregator(unittest.TestCase):
    """Tests for per-member balances."""

    def setUp(self):
        self.alice = Member("Alice", member_id="alice")
        self.bob = Member("Bob", member_id="bob")
        self.members = [self.alice, self.bob]
        self.dinner = make_expense(100.0, "alice", {"alice": 50.0, "bob": 50.0})

    def test_simple_split(self):
        balances = by_member(detailed_balances(self.members, [self.dinner], []))

        self.assertEqual(balances["alice"].net_balance, 50.0)
        self.assertEqual(balances["bob"].net_balance, -50.0)
        self.assertEqual(balances["alice"].owed_by, {"bob": 50.0})
        self.assertEqual(balances["bob"].owes, {"alice": 50.0})
        self.assertEqual(balances["alice"].owes, {})

    def test_settled_group(self):
        repaid = Settlement(from_member="bob", to_member="alice", amount=50.0)
        balances = detailed_balances(self.members, [self.dinner], [repaid])

        for b in balances:
            self.assertEqual(b.net_balance, 0.0)
            self.assertEqual(b.owes, {})
            self.assertEqual(b.owed_by, {})

    def test_order_follows_members(self):
        balances = detailed_balances([self.bob, self.alice], [self.dinner], [])
        self.assertEqual([b.member_id for b in balances], ["bob", "alice"])
        self.assertEqual(balances[0].display_name, "Bob")

    def test_inactive_member(self):
        carol = Member("Carol", member_id="carol")
        balances = by_member(detailed_balances(self.members + [carol], [self.dinner], []))

        self.assertEqual(balances["carol"].net_balance, 0.0)
        self.assertEqual(balances["carol"].owes, {})
        self.assertEqual(balances["carol"].owed_by, {})

    def test_overpaid_creditor_keeps_original_balance(self):
        expense = make_expense(40.0, "bob", {"alice": 20.0, "bob": 20.0})
        overpaid = Settlement(from_member="alice", to_member="bob", amount=25.0)
        balances = by_member(detailed_balances(self.members, [expense], [overpaid]))

        # The extra 5 is dropped, Bob does not end up owing Alice
        self.assertEqual(balances["bob"].net_balance, 0.0)
        self.assertEqual(balances["alice"].net_balance, 0.0)
        self.assertEqual(balances["bob"].owes, {})

    def test_zero_sum(self):
        members = [Member(name, member_id=name) for name in "abcde"]
        expenses = [
            make_expense(100.0, "a", {"a": 33.34, "b": 33.33, "c": 33.33}),
            make_expense(57.15, "b", {"b": 11.43, "c": 11.43, "d": 11.43, "e": 11.43, "a": 11.43}),
            make_expense(12.01, "e", {"a": 6.0, "d": 6.01}),
            make_expense(250.0, "d", {"c": 125.0, "e": 125.0}),
        ]
        settlements = [
            Settlement(from_member="b", to_member="a", amount=10.0),
            Settlement(from_member="c", to_member="d", amount=200.0),
            Settlement(from_member="a", to_member="e", amount=6.0),
        ]
        balances = detailed_balances(members, expenses, settlements)

        total = sum(b.net_balance for b in balances)
        self.assertAlmostEqual(total, 0.0, delta=0.01 * len(members))

    def test_aggregate_uses_given_matrix(self):
        matrix = build_debt_matrix(self.members, [self.dinner], [])
        balances = aggregate(self.members, matrix)
        self.assertEqual(balances[1].net_balance, -50.0)

    def test_creditor_outside_members_is_listed(self):
        expense = make_expense(30.0, "ghost", {"alice": 15.0, "ghost": 15.0})
        balances = by_member(detailed_balances(self.members, [expense], []))

        self.assertEqual(balances["alice"].owes, {"ghost": 15.0})
        self.assertEqual(balances["alice"].net_balance, -15.0)

    def test_idempotent(self):
        settlements = [Settlement(from_member="bob", to_member="alice", amount=12.5)]
        first = detailed_balances(self.members, [self.dinner], settlements)
        second = detailed_balances(self.members, [self.dinner], settlements)
        self.assertEqual(first, second)

        self.assertEqual(suggest(first, self.members), suggest(second, self.members))
        self.assertEqual(
            settlement_suggestions(self.members, [self.dinner], settlements),
            settlement_suggestions(self.members, [self.dinner], settlements)
        )

    def test_sub_cent_splits_round_once(self):
        carol = Member("Carol", member_id="carol")
        expense = make_expense(
            100.0, "alice", {"alice": 33.33, "bob": 33.335, "carol": 33.335}
        )
        balances = by_member(detailed_balances(self.members + [carol], [expense], []))

        # 33.335 + 33.335 = 66.67 exactly, rounded only at the end
        self.assertEqual(balances["alice"].net_balance, 66.67)
        self.assertEqual(balances["alice"].owed_by, {"bob": 33.34, "carol": 33.34})
        self.assertEqual(balances["bob"].net_balance, -33.34)
        self.assertEqual(balances["bob"].owes, {"alice": 33.34})

    def test_sub_cent_debts_add_up(self):
        expenses = [make_expense(0.01, "alice", {"alice": 0.006, "bob": 0.004})] * 3
        balances = by_member(detailed_balances(self.members, expenses, []))

        self.assertEqual(balances["bob"].owes, {"alice": 0.01})
        self.assertEqual(balances["bob"].net_balance, -0.01)
        self.assertEqual(balances["alice"].net_balance, 0.01)


class TestNetBalances(unittest.TestCase):
    """Tests for the simple net balance view."""

    def setUp(self):
        self.members = [Member(n, member_id=n) for n in ("ivan", "maria", "georgi")]

    def test_payer_credited_and_splits_debited(self):
        expense = make_expense(90.0, "ivan", {"ivan": 30.0, "maria": 30.0, "georgi": 30.0})
        balances = by_member(net_balances(self.members, [expense], []))

        self.assertEqual(balances["ivan"].balance, 60.0)
        self.assertEqual(balances["maria"].balance, -30.0)
        self.assertEqual(balances["maria"].settlements, {"ivan": 30.0})
        self.assertEqual(balances["ivan"].settlements, {})

    def test_settlements_move_balances(self):
        expense = make_expense(90.0, "ivan", {"ivan": 30.0, "maria": 30.0, "georgi": 30.0})
        payment = Settlement(from_member="maria", to_member="ivan", amount=30.0)
        balances = by_member(net_balances(self.members, [expense], [payment]))

        self.assertEqual(balances["ivan"].balance, 30.0)
        self.assertEqual(balances["maria"].balance, 0.0)
        self.assertEqual(balances["georgi"].settlements, {"ivan": 30.0})

    def test_unknown_ids_ignored(self):
        expense = make_expense(20.0, "ghost", {"ivan": 10.0, "ghost": 10.0})
        balances = by_member(net_balances(self.members, [expense], []))

        self.assertEqual(balances["ivan"].balance, -10.0)
        self.assertEqual(balances["ivan"].settlements, {})


class TestSettlementSuggester(unittest.TestCase):
    """Tests for suggested transfers."""

    def setUp(self):
        self.a = Member("A", member_id="a")
        self.b = Member("B", member_id="b")
        self.c = Member("C", member_id="c")
        self.members = [self.a, self.b, self.c]

    def test_single_debt(self):
        members = [self.a, self.b]
        expense = make_expense(100.0, "a", {"a": 50.0, "b": 50.0})
        suggestions = settlement_suggestions(members, [expense], [])

        self.assertEqual(len(suggestions), 1)
        s = suggestions[0]
        self.assertEqual((s.from_member, s.to_member, s.amount), ("b", "a", 50.0))
        self.assertEqual((s.from_name, s.to_name), ("B", "A"))

    def test_ties_keep_member_order(self):
        expense = make_expense(90.0, "a", {"a": 30.0, "b": 30.0, "c": 30.0})
        suggestions = settlement_suggestions(self.members, [expense], [])

        self.assertEqual(
            [(s.from_member, s.to_member, s.amount) for s in suggestions],
            [("b", "a", 30.0), ("c", "a", 30.0)]
        )

    def test_sorted_by_amount_descending(self):
        expenses = [
            make_expense(10.0, "a", {"b": 10.0}),
            make_expense(40.0, "b", {"c": 40.0}),
            make_expense(25.0, "c", {"a": 25.0}),
        ]
        suggestions = settlement_suggestions(self.members, expenses, [])
        self.assertEqual([s.amount for s in suggestions], [40.0, 25.0, 10.0])

    def test_chains_are_not_merged(self):
        expenses = [
            make_expense(10.0, "b", {"a": 10.0}),
            make_expense(10.0, "c", {"b": 10.0}),
        ]
        suggestions = settlement_suggestions(self.members, expenses, [])
        self.assertEqual(len(suggestions), 2)

    def test_total_matches_residual_debt(self):
        expenses = [
            make_expense(90.0, "a", {"a": 30.0, "b": 30.0, "c": 30.0}),
            make_expense(15.0, "c", {"a": 7.5, "b": 7.5}),
        ]
        settlements = [Settlement(from_member="b", to_member="a", amount=12.0)]
        balances = detailed_balances(self.members, expenses, settlements)
        suggestions = suggest(balances, self.members)

        residual = sum(sum(b.owes.values()) for b in balances)
        self.assertAlmostEqual(sum(s.amount for s in suggestions), residual, places=2)

    def test_empty_when_settled(self):
        expense = make_expense(90.0, "a", {"a": 30.0, "b": 30.0, "c": 30.0})
        settlements = [
            Settlement(from_member="b", to_member="a", amount=30.0),
            Settlement(from_member="c", to_member="a", amount=30.0),
        ]
        self.assertEqual(settlement_suggestions(self.members, [expense], settlements), [])

    def test_unknown_creditor_name(self):
        expense = make_expense(30.0, "ghost", {"a": 15.0, "ghost": 15.0})
        suggestions = settlement_suggestions(self.members, [expense], [])

        self.assertEqual(suggestions[0].to_member, "ghost")
        self.assertEqual(suggestions[0].to_name, "Unknown")

    def test_suggest_without_member_list(self):
        expense = make_expense(90.0, "a", {"a": 30.0, "b": 30.0, "c": 30.0})
        suggestions = suggest(detailed_balances(self.members, [expense], []))
        self.assertEqual(suggestions[0].to_name, "A")

    def test_format_suggestions(self):
        expense = make_expense(90.0, "a", {"a": 30.0, "b": 30.0, "c": 30.0})
        text = format_suggestions(settlement_suggestions(self.members, [expense], []), "BGN")

        self.assertIn("1. B pays A: 30.00 BGN", text)
        self.assertIn("Total transactions: 2", text)
        self.assertEqual(format_suggestions([]), "All settled! No payments needed.")


if __name__ == '__main__':
    unittest.main()
