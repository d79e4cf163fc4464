"""
Per-member balances derived from the debt matrix.
"""
from collections.abc import Iterable, Sequence
from decimal import Decimal

from .debt_matrix import DebtMatrix, build_debt_matrix
from .models import DetailedBalance, Expense, Member, MemberBalance, Settlement
from .money import ZERO, quantize, to_decimal


def aggregate(members: Sequence[Member], debt_matrix: DebtMatrix) -> list[DetailedBalance]:
    """
    Reduce the debt matrix to one DetailedBalance per member.

    Positive net_balance means the member is owed money, negative means they
    owe. Totals are summed exactly and rounded once per member; the owes and
    owed_by entries are rounded as they are reported.

    Args:
        members: Group members; output follows this order
        debt_matrix: Result of build_debt_matrix

    Returns:
        List of DetailedBalance, one per member
    """
    results = []
    for member in members:
        member_id = member.member_id

        owes = {
            creditor: amount
            for creditor, amount in debt_matrix.row_exact(member_id).items()
            if amount > 0
        }

        owed_by = {}
        for other in members:
            if other.member_id == member_id:
                continue
            amount = debt_matrix.owed_exact(other.member_id, member_id)
            if amount > 0:
                owed_by[other.member_id] = amount

        net = sum(owed_by.values(), ZERO) - sum(owes.values(), ZERO)

        results.append(DetailedBalance(
            member_id=member_id,
            display_name=member.display_name,
            owes=_rounded(owes),
            owed_by=_rounded(owed_by),
            net_balance=quantize(net)
        ))

    return results


def _rounded(amounts: dict[str, Decimal]) -> dict[str, float]:
    # Sub-cent leftovers would show as 0.00; leave them out
    rounded = {k: quantize(v) for k, v in amounts.items()}
    return {k: v for k, v in rounded.items() if v > 0}


def detailed_balances(
    members: Sequence[Member],
    expenses: Iterable[Expense],
    settlements: Iterable[Settlement]
) -> list[DetailedBalance]:
    """Build the debt matrix and aggregate it in one call."""
    return aggregate(members, build_debt_matrix(members, expenses, settlements))


def net_balances(
    members: Sequence[Member],
    expenses: Iterable[Expense],
    settlements: Iterable[Settlement]
) -> list[MemberBalance]:
    """
    Calculate each member's overall position without pairwise tracking.

    The payer is credited the full expense amount and every split is debited
    from its member. A settlement credits the sender and debits the receiver.
    Ids outside members are ignored.

    The settlements breakdown pairs every debtor with every creditor for the
    smaller of the two absolute balances; it is an indication, not a plan.
    """
    balances = {m.member_id: ZERO for m in members}

    for expense in expenses:
        if expense.paid_by in balances:
            balances[expense.paid_by] += to_decimal(expense.amount)
        for split in expense.splits:
            if split.member_id in balances:
                balances[split.member_id] -= to_decimal(split.amount)

    for settlement in settlements:
        if settlement.from_member in balances:
            balances[settlement.from_member] += to_decimal(settlement.amount)
        if settlement.to_member in balances:
            balances[settlement.to_member] -= to_decimal(settlement.amount)

    results = []
    for member in members:
        own = balances[member.member_id]
        breakdown = {}
        if own < 0:
            for other in members:
                other_balance = balances[other.member_id]
                if other.member_id != member.member_id and other_balance > 0:
                    breakdown[other.member_id] = quantize(min(-own, other_balance))

        results.append(MemberBalance(
            member_id=member.member_id,
            display_name=member.display_name,
            balance=quantize(own),
            settlements=breakdown
        ))

    return results
