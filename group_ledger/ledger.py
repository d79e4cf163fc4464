"""
Group-level view over the ledger engine.
"""
from collections.abc import Iterable

import pandas as pd

from .balances import aggregate, net_balances
from .debt_matrix import DebtMatrix, build_debt_matrix
from .models import (
    DetailedBalance, Expense, Group, MemberBalance, Settlement,
    SettlementSuggestion,
)
from .money import ZERO, quantize, to_decimal
from .suggestions import format_suggestions, suggest


class GroupLedger:
    """
    Binds a group to a snapshot of its expenses and settlements.

    Nothing is cached: every call recomputes from the snapshot.
    """

    def __init__(
        self,
        group: Group,
        expenses: Iterable[Expense] = (),
        settlements: Iterable[Settlement] = ()
    ):
        self.group = group
        self.members = tuple(group.members)
        self.expenses = tuple(expenses)
        self.settlements = tuple(settlements)

    def debt_matrix(self) -> DebtMatrix:
        return build_debt_matrix(self.members, self.expenses, self.settlements)

    def detailed_balances(self) -> list[DetailedBalance]:
        return aggregate(self.members, self.debt_matrix())

    def suggestions(self) -> list[SettlementSuggestion]:
        return suggest(self.detailed_balances(), self.members)

    def net_balances(self) -> list[MemberBalance]:
        return net_balances(self.members, self.expenses, self.settlements)

    def total_expenses(self) -> float:
        """Sum of all expense amounts in the snapshot."""
        return quantize(sum((to_decimal(e.amount) for e in self.expenses), ZERO))

    def balances_dataframe(self) -> pd.DataFrame:
        """
        Get detailed balances as a DataFrame.

        Positive balance = others owe them money
        Negative balance = they owe money to others

        Returns:
            DataFrame with member_id, name, owes, owed_by, balance columns
        """
        data = []
        for b in self.detailed_balances():
            data.append({
                'member_id': b.member_id,
                'name': b.display_name,
                'owes': sum(b.owes.values()),
                'owed_by': sum(b.owed_by.values()),
                'balance': b.net_balance
            })

        if not data:
            return pd.DataFrame(columns=['member_id', 'name', 'owes', 'owed_by', 'balance'])
        return pd.DataFrame(data)

    def suggestions_dataframe(self) -> pd.DataFrame:
        """
        Get suggested transfers as a DataFrame.

        Returns:
            DataFrame with from, to, amount, currency columns
        """
        suggestions = self.suggestions()

        if not suggestions:
            return pd.DataFrame(columns=['from', 'to', 'amount', 'currency'])

        return pd.DataFrame([
            {
                'from': s.from_name,
                'to': s.to_name,
                'amount': s.amount,
                'currency': self.group.base_currency
            }
            for s in suggestions
        ])

    def expense_summary(self) -> pd.DataFrame:
        """Get summary of all expenses."""
        if not self.expenses:
            return pd.DataFrame()

        data = []
        for exp in self.expenses:
            payer = self.group.get_member_by_id(exp.paid_by)
            data.append({
                'id': exp.id,
                'description': exp.description,
                'amount': exp.amount,
                'paid_by': payer.display_name if payer else exp.paid_by,
                'split_method': exp.split_method.value,
                'date': exp.date,
                'category': exp.category
            })

        return pd.DataFrame(data)

    def settlement_summary(self) -> str:
        return format_suggestions(self.suggestions(), self.group.base_currency)
