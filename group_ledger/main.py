"""
Group Ledger - CLI Interface

Track shared group expenses and see who owes whom.
"""
import logging
import sys
from typing import Optional

from .calculator import ExpenseCalculator
from .models import DEFAULT_CURRENCY, Group, Settlement
from .repository import GroupRepository


class GroupLedgerApp:
    """Main application class for the Group Ledger."""

    def __init__(self, repository: Optional[GroupRepository] = None):
        self.repository = repository or GroupRepository()
        self.group: Optional[Group] = None
        self.calculator: Optional[ExpenseCalculator] = None

    def create_group(self, name: str, base_currency: str = DEFAULT_CURRENCY) -> None:
        """Create a new expense group and make it current."""
        self.group = self.repository.save_group(Group(name=name, base_currency=base_currency))
        self.calculator = ExpenseCalculator(self.group)
        print(f"Created group: {name}")

    def add_member(self, name: str) -> None:
        """Add a member to the current group."""
        if not self.group:
            print("Error: Create a group first!")
            return
        m = self.group.add_member(name)
        self.repository.save_group(self.group)
        print(f"Added: {name} (ID: {m.member_id})")

    def add_expense(
        self,
        description: str,
        amount: float,
        paid_by_name: str,
        split_method: str = "equal",
        split_data: Optional[dict] = None
    ) -> None:
        """Add an expense to the current group."""
        if not self.group or not self.calculator:
            print("Error: Create a group first!")
            return

        payer = self.group.get_member_by_name(paid_by_name)
        if not payer:
            print(f"Error: Member '{paid_by_name}' not found!")
            return

        try:
            if split_method == "equal":
                expense = self.calculator.expense_equal(description, amount, payer.member_id)
            else:
                if not split_data:
                    print(f"Error: {split_method.capitalize()} split requires split_data!")
                    return
                by_id = self._names_to_ids(split_data)
                if split_method == "percentage":
                    expense = self.calculator.expense_percentage(
                        description, amount, payer.member_id, by_id
                    )
                elif split_method == "shares":
                    expense = self.calculator.expense_shares(
                        description, amount, payer.member_id, by_id
                    )
                elif split_method == "custom":
                    expense = self.calculator.expense_custom(
                        description, amount, payer.member_id, by_id
                    )
                else:
                    print(f"Error: Unknown split method '{split_method}'")
                    return

            self.repository.save_expense(expense)
            print(f"Added expense: {description} ({amount:.2f} {self.group.base_currency})")

        except ValueError as e:
            print(f"Error: {e}")

    def record_payment(self, from_name: str, to_name: str, amount: float) -> None:
        """Record a repayment between two members."""
        if not self.group:
            print("Error: Create a group first!")
            return

        sender = self.group.get_member_by_name(from_name)
        receiver = self.group.get_member_by_name(to_name)
        if not sender or not receiver:
            print("Error: Both members must belong to the group!")
            return
        if sender == receiver:
            print("Error: A member cannot pay themselves!")
            return
        if amount <= 0:
            print("Error: Amount must be positive!")
            return

        self.repository.save_settlement(Settlement(
            from_member=sender.member_id,
            to_member=receiver.member_id,
            amount=amount,
            description=f"{from_name} paid {to_name}",
            group_id=self.group.id
        ))
        print(f"Recorded: {from_name} paid {to_name} {amount:.2f} {self.group.base_currency}")

    def show_balances(self) -> None:
        """Display current balances for all members."""
        if not self.group:
            print("Error: Create a group first!")
            return

        print("\n--- Balances ---")
        ledger = self.repository.ledger_for(self.group.id)
        df = ledger.balances_dataframe()
        if df.empty:
            print("No data")
            return

        for _, row in df.iterrows():
            balance = row['balance']
            if balance == 0:
                print(f"  {row['name']}: settled up")
                continue
            status = "owes" if balance < 0 else "is owed"
            print(f"  {row['name']}: {status} {abs(balance):.2f}")
        print(f"  Total spent: {ledger.total_expenses():.2f} {self.group.base_currency}")
        print()

    def show_expenses(self) -> None:
        """Display all expenses."""
        if not self.group:
            print("Error: Create a group first!")
            return

        print("\n--- Expenses ---")
        df = self.repository.ledger_for(self.group.id).expense_summary()
        if df.empty:
            print("No expenses recorded")
            return

        for _, row in df.iterrows():
            print(f"  [{row['split_method']}] {row['description']}: "
                  f"{row['amount']:.2f} (paid by {row['paid_by']})")
        print()

    def show_settlements(self) -> None:
        """Display the outstanding debts as suggested payments."""
        if not self.group:
            print("Error: Create a group first!")
            return

        print(self.repository.ledger_for(self.group.id).settlement_summary())

    def _names_to_ids(self, split_data: dict) -> dict:
        by_id = {}
        for name, value in split_data.items():
            m = self.group.get_member_by_name(name)
            if not m:
                raise ValueError(f"Member '{name}' not found")
            by_id[m.member_id] = value
        return by_id


def interactive_mode():
    """Run the application in interactive mode."""
    app = GroupLedgerApp()

    print("=" * 50)
    print("  Group Ledger - Interactive Mode")
    print("=" * 50)
    print("\nCommands:")
    print("  group <name>                 - Create new group")
    print("  add <name>                   - Add member")
    print("  expense <desc> <amt> <payer> - Add equal split expense")
    print("  pay <from> <to> <amt>        - Record a repayment")
    print("  balances                     - Show balances")
    print("  expenses                     - Show all expenses")
    print("  settle                       - Show outstanding payments")
    print("  quit                         - Exit")
    print()

    while True:
        try:
            cmd = input("> ").strip().split()
            if not cmd:
                continue

            action = cmd[0].lower()

            if action == "quit" or action == "exit":
                print("Goodbye!")
                break
            elif action == "group" and len(cmd) >= 2:
                app.create_group(" ".join(cmd[1:]))
            elif action == "add" and len(cmd) >= 2:
                app.add_member(" ".join(cmd[1:]))
            elif action == "expense" and len(cmd) >= 4:
                desc = cmd[1]
                amt = float(cmd[2])
                payer = " ".join(cmd[3:])
                app.add_expense(desc, amt, payer)
            elif action == "pay" and len(cmd) == 4:
                app.record_payment(cmd[1], cmd[2], float(cmd[3]))
            elif action == "balances":
                app.show_balances()
            elif action == "expenses":
                app.show_expenses()
            elif action == "settle":
                app.show_settlements()
            else:
                print("Unknown command. Type 'quit' to exit.")

        except KeyboardInterrupt:
            print("\nGoodbye!")
            break
        except (ValueError, KeyError) as e:
            print(f"Error: {e}")


def demo():
    """Run a demonstration of the group ledger."""
    print("=" * 50)
    print("  Group Ledger - Demo")
    print("=" * 50)

    app = GroupLedgerApp()

    app.create_group("Trip to Plovdiv")

    app.add_member("Ivan")
    app.add_member("Maria")
    app.add_member("Georgi")

    app.add_expense("Dinner", 90.00, "Ivan")
    app.add_expense("Taxi", 30.00, "Maria")
    app.add_expense("Museum tickets", 45.00, "Georgi")
    app.add_expense("Drinks", 60.00, "Ivan", "shares", {"Ivan": 1, "Maria": 2, "Georgi": 1})

    app.record_payment("Maria", "Ivan", 20.00)

    app.show_expenses()
    app.show_balances()
    app.show_settlements()


def configure_logging(verbose: bool = False) -> None:
    """Send log records to stderr; only warnings unless verbose."""
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="[%(asctime)s] [%(levelname)s] %(name)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def main(argv: Optional[list[str]] = None) -> None:
    argv = sys.argv[1:] if argv is None else argv
    configure_logging("--verbose" in argv)

    if "--demo" in argv:
        demo()
    else:
        interactive_mode()


if __name__ == "__main__":
    main()
