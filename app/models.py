from datetime import date as date_type
from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, Field, field_validator

from app.money import round_amount


class SplitMethod(str, Enum):
    EQUAL = "equal"
    PERCENTAGE = "percentage"
    CUSTOM = "custom"
    NONE = "none"


class Frequency(str, Enum):
    DAILY = "daily"
    WEEKLY = "weekly"
    BIWEEKLY = "biweekly"
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    YEARLY = "yearly"


class SettlementStatus(str, Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


# --- Household ---

class Member(BaseModel):
    id: str
    name: str
    email: str | None = None


class MemberWeight(BaseModel):
    member_id: str
    percentage: float | None = None  # used as given, wins over weight
    weight: float | None = None  # normalized against the other raw weights


class Household(BaseModel):
    id: str | None = None
    name: str | None = None
    member_ids: list[str] = []
    member_weights: list[MemberWeight] = []
    default_split_method: SplitMethod = SplitMethod.EQUAL


# --- Expenses ---

class SplitShare(BaseModel):
    member_id: str
    owed_amount: Decimal
    owed_percentage: float | None = None

    @field_validator("owed_amount")
    @classmethod
    def two_places(cls, v):
        return round_amount(v)


class Expense(BaseModel):
    id: str | None = None
    description: str = ""
    amount: Decimal
    owner_id: str
    paid_by: str | None = None  # NULL = owner paid
    split_method: SplitMethod | None = None  # NULL = household default
    split_details: list[SplitShare] = []
    date: date_type | None = None

    @property
    def payer_id(self) -> str:
        return self.paid_by or self.owner_id


class Settlement(BaseModel):
    """A recorded payment between two members."""

    id: str | None = None
    from_member: str = Field(alias="from")
    to_member: str = Field(alias="to")
    amount: Decimal
    status: SettlementStatus = SettlementStatus.PENDING

    model_config = {"populate_by_name": True}


# --- Derived results ---

class MemberBalance(BaseModel):
    member_id: str
    name: str
    email: str | None = None
    total_paid: Decimal = Decimal("0.00")
    total_owed: Decimal = Decimal("0.00")
    settled_out: Decimal = Decimal("0.00")  # completed settlements this member sent
    settled_in: Decimal = Decimal("0.00")
    balance: Decimal = Decimal("0.00")  # > 0 creditor, < 0 debtor


class BalanceReport(BaseModel):
    balances: list[MemberBalance]
    unresolved: list[str] = []  # ids the member directory could not resolve

    @property
    def complete(self) -> bool:
        return not self.unresolved

    def get(self, member_id: str) -> MemberBalance | None:
        for b in self.balances:
            if b.member_id == member_id:
                return b
        return None


class MemberRef(BaseModel):
    id: str
    name: str
    email: str | None = None


class DebtRelationship(BaseModel):
    from_member: MemberRef
    to_member: MemberRef
    amount: Decimal
    currency: str


class RecurringSchedule(BaseModel):
    frequency: Frequency
    next_occurrence: date_type
    end_date: date_type | None = None
    is_active: bool = True
