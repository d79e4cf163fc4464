"""
Expense splitting logic with support for multiple split methods.

These helpers build Expense records on the caller's side; the ledger engine
itself never checks that splits add up.
"""
import numpy as np
from typing import Optional

from .models import Expense, ExpenseSplit, Group, SplitMethod
from .money import SPLIT_TOLERANCE, from_cents, to_cents


def _distribute(total_cents: int, weights: np.ndarray) -> np.ndarray:
    """Split cents proportionally to weights.

    The rounding remainder goes to the first entry with a nonzero weight, so a
    member weighted at zero is never billed.
    """
    cents = np.floor(total_cents * weights / weights.sum()).astype(np.int64)
    first = int(np.flatnonzero(weights)[0])
    cents[first] += total_cents - cents.sum()
    return cents


def split_equal(total_amount: float, member_ids: list[str]) -> tuple[ExpenseSplit, ...]:
    """
    Split an amount equally between members.

    Rounding remainder goes to the first member so shares add up exactly.
    """
    if not member_ids:
        raise ValueError("Equal split needs at least one member")

    cents = _distribute(to_cents(total_amount), np.ones(len(member_ids)))
    return tuple(
        ExpenseSplit(member_id=mid, amount=from_cents(int(c)))
        for mid, c in zip(member_ids, cents)
    )


def split_percentage(
    total_amount: float,
    percentages: dict[str, float]
) -> tuple[ExpenseSplit, ...]:
    """
    Split an amount by percentages.

    Args:
        total_amount: Total cost
        percentages: Dict mapping member_id to percentage (should sum to 100)
    """
    pct_array = np.array(list(percentages.values()), dtype=np.float64)

    if not np.isclose(pct_array.sum(), 100.0):
        raise ValueError(f"Percentages must sum to 100, got {pct_array.sum()}")

    cents = _distribute(to_cents(total_amount), pct_array)
    return tuple(
        ExpenseSplit(member_id=mid, amount=from_cents(int(c)), percentage=pct)
        for (mid, pct), c in zip(percentages.items(), cents)
    )


def split_shares(total_amount: float, shares: dict[str, int]) -> tuple[ExpenseSplit, ...]:
    """
    Split an amount by shares.

    Args:
        total_amount: Total cost
        shares: Dict mapping member_id to number of shares
    """
    shares_array = np.array(list(shares.values()), dtype=np.float64)

    if shares_array.size == 0 or shares_array.sum() <= 0:
        raise ValueError("Total number of shares must be positive")

    cents = _distribute(to_cents(total_amount), shares_array)
    return tuple(
        ExpenseSplit(member_id=mid, amount=from_cents(int(c)), shares=count)
        for (mid, count), c in zip(shares.items(), cents)
    )


def split_custom(
    total_amount: float,
    custom_amounts: dict[str, float]
) -> tuple[ExpenseSplit, ...]:
    """
    Use exact amounts per member.

    Args:
        total_amount: Total cost
        custom_amounts: Dict mapping member_id to exact amount
    """
    amounts_array = np.array(list(custom_amounts.values()), dtype=np.float64)
    difference = abs(total_amount - amounts_array.sum())

    if difference > SPLIT_TOLERANCE + 1e-9:
        raise ValueError(
            f"Custom amounts must sum to total ({total_amount:.2f}), "
            f"got {amounts_array.sum():.2f}"
        )

    return tuple(
        ExpenseSplit(member_id=mid, amount=float(amt))
        for mid, amt in custom_amounts.items()
    )


def adjust_last_split(
    total_amount: float,
    splits: tuple[ExpenseSplit, ...]
) -> tuple[ExpenseSplit, ...]:
    """Move whatever is left over onto the last split."""
    if not splits:
        return splits

    remaining = to_cents(total_amount) - sum(to_cents(s.amount) for s in splits)
    last = splits[-1]
    adjusted = ExpenseSplit(
        member_id=last.member_id,
        amount=from_cents(to_cents(last.amount) + remaining),
        percentage=last.percentage,
        shares=last.shares
    )
    return splits[:-1] + (adjusted,)


class ExpenseCalculator:
    """Builds expense records for a group."""

    def __init__(self, group: Group):
        self.group = group

    def expense_equal(
        self,
        description: str,
        total_amount: float,
        paid_by: str,
        members: Optional[list[str]] = None,
        category: Optional[str] = None
    ) -> Expense:
        """
        Create an expense split equally among members.

        Args:
            description: What the expense is for
            total_amount: Total cost
            paid_by: ID of member who paid
            members: List of member IDs to split among (default: all)
            category: Optional category
        """
        if members is None:
            members = [m.member_id for m in self.group.members]

        return self._expense(
            description, total_amount, paid_by,
            split_equal(total_amount, members), SplitMethod.EQUAL, category
        )

    def expense_percentage(
        self,
        description: str,
        total_amount: float,
        paid_by: str,
        percentages: dict[str, float],
        category: Optional[str] = None
    ) -> Expense:
        """Create an expense split by percentages."""
        return self._expense(
            description, total_amount, paid_by,
            split_percentage(total_amount, percentages), SplitMethod.PERCENTAGE, category
        )

    def expense_shares(
        self,
        description: str,
        total_amount: float,
        paid_by: str,
        shares: dict[str, int],
        category: Optional[str] = None
    ) -> Expense:
        """Create an expense split by shares."""
        return self._expense(
            description, total_amount, paid_by,
            split_shares(total_amount, shares), SplitMethod.SHARES, category
        )

    def expense_custom(
        self,
        description: str,
        total_amount: float,
        paid_by: str,
        custom_amounts: dict[str, float],
        category: Optional[str] = None
    ) -> Expense:
        """Create an expense with custom amounts per member."""
        return self._expense(
            description, total_amount, paid_by,
            split_custom(total_amount, custom_amounts), SplitMethod.CUSTOM, category
        )

    def _expense(self, description, total_amount, paid_by, splits, method, category):
        if total_amount <= 0:
            raise ValueError(f"Expense amount must be positive, got {total_amount}")

        return Expense(
            amount=total_amount,
            paid_by=paid_by,
            splits=splits,
            description=description,
            group_id=self.group.id,
            split_method=method,
            category=category
        )
