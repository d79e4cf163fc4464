"""
Group Ledger - shared expense tracking and debt netting.
"""
from .balances import aggregate, detailed_balances, net_balances
from .debt_matrix import DebtMatrix, build_debt_matrix
from .ledger import GroupLedger
from .models import (
    DetailedBalance, Expense, ExpenseSplit, Group, Member, MemberBalance,
    Settlement, SettlementSuggestion, SplitMethod,
)
from .repository import GroupRepository
from .suggestions import settlement_suggestions, suggest

__all__ = [
    "DebtMatrix",
    "DetailedBalance",
    "Expense",
    "ExpenseSplit",
    "Group",
    "GroupLedger",
    "GroupRepository",
    "Member",
    "MemberBalance",
    "Settlement",
    "SettlementSuggestion",
    "SplitMethod",
    "aggregate",
    "build_debt_matrix",
    "detailed_balances",
    "net_balances",
    "settlement_suggestions",
    "suggest",
]
