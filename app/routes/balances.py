import logging

from fastapi import APIRouter, Request

from app import config
from app.balances import settle_up, simplify_debts
from app.directory import InMemoryDirectory
from app.ratelimit import limiter
from app.schemas import BalancesIn, SimplifyIn
from app.serializers import serialize_debt, serialize_report

logger = logging.getLogger("household")

router = APIRouter()


@router.post("/balances")
@limiter.limit(config.RATE_LIMIT)
def get_balances(request: Request, data: BalancesIn):
    directory = InMemoryDirectory(data.members)
    report, debts = settle_up(data.expenses, directory, data.settlements)
    if not report.complete:
        logger.warning(
            "Balances computed with unresolved participants",
            extra={"extra_data": {"unresolved": report.unresolved}},
        )
    return {
        **serialize_report(report),
        "debts": [serialize_debt(d) for d in debts],
        "currency": config.CURRENCY.code,
    }


@router.post("/debts/simplify")
@limiter.limit(config.RATE_LIMIT)
def get_simplified_debts(request: Request, data: SimplifyIn):
    debts = simplify_debts(data.balances)
    return {
        "debts": [serialize_debt(d) for d in debts],
        "currency": config.CURRENCY.code,
    }
