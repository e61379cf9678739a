from datetime import date as date_type

from pydantic import BaseModel, Field

from app.models import Expense, Frequency, Household, Member, MemberBalance, Settlement


# --- Splits ---

class SplitIn(BaseModel):
    expense: Expense
    household: Household


# --- Balances ---

class BalancesIn(BaseModel):
    members: list[Member]  # directory used to resolve payer/split ids
    expenses: list[Expense]
    settlements: list[Settlement] = []


class SimplifyIn(BaseModel):
    balances: list[MemberBalance]


# --- Recurrence ---

class RecurrenceIn(BaseModel):
    date: date_type
    frequency: Frequency
    count: int = Field(1, ge=1, le=60)
    end_date: date_type | None = None
