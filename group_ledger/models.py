"""
Data models for the group ledger.
"""
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional
import uuid


DEFAULT_CURRENCY = "BGN"
UNKNOWN_MEMBER_NAME = "Unknown"


def _short_id() -> str:
    return str(uuid.uuid4())[:8]


class SplitMethod(Enum):
    """Supported methods for splitting expenses."""
    EQUAL = "equal"
    PERCENTAGE = "percentage"
    SHARES = "shares"
    CUSTOM = "custom"


@dataclass(frozen=True)
class Member:
    """Represents a person in an expense group."""
    display_name: str
    member_id: str = field(default_factory=_short_id)
    email: Optional[str] = None

    def __hash__(self):
        return hash(self.member_id)

    def __eq__(self, other):
        if isinstance(other, Member):
            return self.member_id == other.member_id
        return False


@dataclass(frozen=True)
class ExpenseSplit:
    """Represents how much a member owes for an expense."""
    member_id: str
    amount: float
    percentage: Optional[float] = None
    shares: Optional[int] = None


@dataclass(frozen=True)
class Expense:
    """Represents a single shared expense in a group."""
    amount: float
    paid_by: str  # member_id
    splits: tuple[ExpenseSplit, ...] = ()
    description: str = ""
    group_id: Optional[str] = None
    split_method: SplitMethod = SplitMethod.CUSTOM
    category: Optional[str] = None
    date: datetime = field(default_factory=datetime.now)
    id: str = field(default_factory=_short_id)

    def __post_init__(self):
        # Accept any sequence of splits but store an immutable snapshot
        object.__setattr__(self, "splits", tuple(self.splits))


@dataclass(frozen=True)
class Settlement:
    """Represents a repayment already made from one member to another."""
    from_member: str
    to_member: str
    amount: float
    description: str = ""
    group_id: Optional[str] = None
    date: datetime = field(default_factory=datetime.now)
    id: str = field(default_factory=_short_id)


@dataclass(frozen=True)
class DetailedBalance:
    """Per-member view of the debt matrix."""
    member_id: str
    display_name: str
    owes: dict[str, float]
    owed_by: dict[str, float]
    net_balance: float


@dataclass(frozen=True)
class SettlementSuggestion:
    """One unresolved debt entry; not a minimised transfer plan."""
    from_member: str
    to_member: str
    amount: float
    from_name: str = UNKNOWN_MEMBER_NAME
    to_name: str = UNKNOWN_MEMBER_NAME


@dataclass(frozen=True)
class MemberBalance:
    """Simple net position of a member (positive = is owed money)."""
    member_id: str
    display_name: str
    balance: float
    settlements: dict[str, float]


@dataclass
class Group:
    """Represents a group of people sharing expenses."""
    name: str
    members: list[Member] = field(default_factory=list)
    description: str = ""
    base_currency: str = DEFAULT_CURRENCY
    id: str = field(default_factory=_short_id)
    created_at: datetime = field(default_factory=datetime.now)

    def add_member(self, display_name: str, email: Optional[str] = None) -> Member:
        """Add a new member to the group."""
        member = Member(display_name=display_name, email=email)
        self.members.append(member)
        return member

    def get_member_by_id(self, member_id: str) -> Optional[Member]:
        """Find a member by their ID."""
        for m in self.members:
            if m.member_id == member_id:
                return m
        return None

    def get_member_by_name(self, name: str) -> Optional[Member]:
        """Find a member by their display name (case-insensitive)."""
        for m in self.members:
            if m.display_name.lower() == name.lower():
                return m
        return None


def member_names(members) -> dict[str, str]:
    """Map member ids to display names."""
    return {m.member_id: m.display_name for m in members}
