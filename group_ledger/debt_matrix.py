"""
Pairwise debt matrix built from expenses and settlements.
"""
import logging
from collections.abc import Iterable, Iterator, Mapping
from decimal import Decimal

import pandas as pd

from .models import Expense, Member, Settlement
from .money import ZERO, quantize, to_decimal

LOGGER = logging.getLogger(__name__)


class DebtMatrix(Mapping):
    """
    Read-only mapping debtor_id -> {creditor_id: amount}.

    Row member currently owes column member the amount. Entries are kept as
    exact decimals and never go negative; a missing entry means zero. Values
    read through the mapping or owed() are rounded to two decimals.
    """

    def __init__(self, debts: dict[str, dict[str, Decimal]]):
        self._debts = debts

    def __getitem__(self, debtor_id: str) -> dict[str, float]:
        row = self._debts[debtor_id]
        return {creditor: quantize(amount) for creditor, amount in row.items()}

    def __iter__(self) -> Iterator[str]:
        return iter(self._debts)

    def __len__(self) -> int:
        return len(self._debts)

    def owed_exact(self, debtor_id: str, creditor_id: str) -> Decimal:
        """Unrounded amount debtor owes creditor (0 when absent)."""
        return self._debts.get(debtor_id, {}).get(creditor_id, ZERO)

    def owed(self, debtor_id: str, creditor_id: str) -> float:
        """Amount debtor owes creditor (0.0 when absent)."""
        return quantize(self.owed_exact(debtor_id, creditor_id))

    def row_exact(self, debtor_id: str) -> dict[str, Decimal]:
        """Copy of a debtor's unrounded row."""
        return dict(self._debts.get(debtor_id, {}))

    def to_dataframe(self) -> pd.DataFrame:
        """
        Get the matrix as a square DataFrame.

        Rows are debtors, columns creditors, missing entries filled with 0.
        """
        ids = list(self._debts)
        for row in self._debts.values():
            for creditor in row:
                if creditor not in ids:
                    ids.append(creditor)

        df = pd.DataFrame(
            [[self.owed(d, c) for c in ids] for d in ids],
            index=ids,
            columns=ids,
            dtype=float
        )
        return df


def build_debt_matrix(
    members: Iterable[Member],
    expenses: Iterable[Expense],
    settlements: Iterable[Settlement]
) -> DebtMatrix:
    """
    Derive who owes whom from expenses and recorded settlements.

    Args:
        members: Group members; each gets an (initially empty) row
        expenses: Shared expenses with their splits
        settlements: Repayments already made

    Returns:
        DebtMatrix of non-negative debtor -> creditor amounts
    """
    debt: dict[str, dict[str, Decimal]] = {m.member_id: {} for m in members}

    for expense in expenses:
        payer = expense.paid_by
        for split in expense.splits:
            if split.member_id == payer:
                continue
            row = debt.setdefault(split.member_id, {})
            row[payer] = row.get(payer, ZERO) + to_decimal(split.amount)

    # Overpayment is dropped: it never turns into a credit the other way.
    for settlement in settlements:
        row = debt.setdefault(settlement.from_member, {})
        current = row.get(settlement.to_member, ZERO)
        row[settlement.to_member] = max(ZERO, current - to_decimal(settlement.amount))

    LOGGER.debug("Built debt matrix with %d rows", len(debt))
    return DebtMatrix(debt)
