from fastapi import APIRouter, Request

from app import config
from app.ratelimit import limiter
from app.schemas import SplitIn
from app.serializers import serialize_expense
from app.splits import split_expense

router = APIRouter()


@router.post("/splits")
@limiter.limit(config.RATE_LIMIT)
def compute_expense_split(request: Request, data: SplitIn):
    expense = split_expense(data.expense, data.household)
    return serialize_expense(expense)
