"""
In-memory store for groups, expenses and settlements.

Records are keyed by id. Groups and expenses are upserted (last write wins);
a settlement whose id is already stored is ignored so a repayment is never
recorded twice.
"""
import logging
from typing import Optional

from .ledger import GroupLedger
from .models import Expense, Group, Settlement

LOGGER = logging.getLogger(__name__)


class GroupRepository:
    """Holds the records the ledger engine reads."""

    def __init__(self):
        self._groups: dict[str, Group] = {}
        self._expenses: dict[str, Expense] = {}
        self._settlements: dict[str, Settlement] = {}

    # Groups

    def save_group(self, group: Group) -> Group:
        self._groups[group.id] = group
        LOGGER.info("Saved group %s (%s)", group.id, group.name)
        return group

    def get_group(self, group_id: str) -> Group:
        if group_id not in self._groups:
            raise KeyError(f"Group {group_id} not found")
        return self._groups[group_id]

    def find_group(self, name: str) -> Optional[Group]:
        """Find a group by name (case-insensitive)."""
        for group in self._groups.values():
            if group.name.lower() == name.lower():
                return group
        return None

    def list_groups(self) -> list[Group]:
        return list(self._groups.values())

    def delete_group(self, group_id: str) -> None:
        """Remove a group together with its expenses and settlements."""
        self.get_group(group_id)
        del self._groups[group_id]
        self._expenses = {
            k: e for k, e in self._expenses.items() if e.group_id != group_id
        }
        self._settlements = {
            k: s for k, s in self._settlements.items() if s.group_id != group_id
        }
        LOGGER.info("Deleted group %s", group_id)

    # Expenses

    def save_expense(self, expense: Expense) -> Expense:
        self._expenses[expense.id] = expense
        LOGGER.info("Saved expense %s for group %s", expense.id, expense.group_id)
        return expense

    def delete_expense(self, expense_id: str) -> None:
        if self._expenses.pop(expense_id, None) is not None:
            LOGGER.info("Deleted expense %s", expense_id)

    def expenses_for(self, group_id: str) -> list[Expense]:
        return [e for e in self._expenses.values() if e.group_id == group_id]

    # Settlements

    def save_settlement(self, settlement: Settlement) -> Settlement:
        """Store a settlement; returns the stored record for that id."""
        if settlement.id in self._settlements:
            LOGGER.warning("Settlement %s already recorded, ignoring", settlement.id)
            return self._settlements[settlement.id]

        self._settlements[settlement.id] = settlement
        LOGGER.info(
            "Recorded settlement %s: %s -> %s %.2f",
            settlement.id, settlement.from_member, settlement.to_member, settlement.amount
        )
        return settlement

    def settlements_for(self, group_id: str) -> list[Settlement]:
        return [s for s in self._settlements.values() if s.group_id == group_id]

    def ledger_for(self, group_id: str) -> GroupLedger:
        """Snapshot a group's records for balance calculations."""
        return GroupLedger(
            self.get_group(group_id),
            self.expenses_for(group_id),
            self.settlements_for(group_id)
        )
