"""
Settlement suggestions - lists the residual debts still to be paid.

Each unresolved debtor -> creditor entry becomes one suggestion. Indirect
chains are not merged, so A -> B -> C stays two transfers.
"""
import logging
from collections.abc import Iterable, Sequence
from typing import Optional

from .balances import detailed_balances
from .models import (
    DetailedBalance, Expense, Member, Settlement, SettlementSuggestion,
    UNKNOWN_MEMBER_NAME, member_names,
)

LOGGER = logging.getLogger(__name__)


def suggest(
    balances: Iterable[DetailedBalance],
    members: Optional[Iterable[Member]] = None
) -> list[SettlementSuggestion]:
    """
    Turn detailed balances into suggested transfers.

    Args:
        balances: Output of aggregate()
        members: Optional member list used to resolve creditor names

    Returns:
        Suggestions sorted by amount descending; ties keep input order
    """
    balances = list(balances)
    names = {b.member_id: b.display_name for b in balances}
    if members is not None:
        names.update(member_names(members))

    suggestions = []
    for balance in balances:
        for creditor_id, amount in balance.owes.items():
            if amount > 0:
                suggestions.append(SettlementSuggestion(
                    from_member=balance.member_id,
                    to_member=creditor_id,
                    amount=amount,
                    from_name=balance.display_name,
                    to_name=names.get(creditor_id, UNKNOWN_MEMBER_NAME)
                ))

    LOGGER.debug("Generated %d settlement suggestions", len(suggestions))
    return sorted(suggestions, key=lambda s: s.amount, reverse=True)


def settlement_suggestions(
    members: Sequence[Member],
    expenses: Iterable[Expense],
    settlements: Iterable[Settlement]
) -> list[SettlementSuggestion]:
    """Run the full pipeline: debt matrix, balances, suggestions."""
    return suggest(detailed_balances(members, expenses, settlements), members)


def format_suggestions(
    suggestions: Sequence[SettlementSuggestion],
    currency: str = ""
) -> str:
    """
    Get human-readable settlement instructions.

    Returns:
        Formatted string with one line per suggested payment
    """
    if not suggestions:
        return "All settled! No payments needed."

    suffix = f" {currency}" if currency else ""
    lines = ["Settlements needed:", ""]

    for i, s in enumerate(suggestions, 1):
        lines.append(f"  {i}. {s.from_name} pays {s.to_name}: {s.amount:.2f}{suffix}")

    lines.append("")
    lines.append(f"Total transactions: {len(suggestions)}")

    return "\n".join(lines)
