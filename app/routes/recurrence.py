from fastapi import APIRouter, Request

from app import config
from app.ratelimit import limiter
from app.recurrence import upcoming_occurrences
from app.schemas import RecurrenceIn

router = APIRouter()


@router.post("/recurrence/next")
@limiter.limit(config.RATE_LIMIT)
def get_next_occurrences(request: Request, data: RecurrenceIn):
    dates = upcoming_occurrences(data.date, data.frequency, data.count, data.end_date)
    return {
        "frequency": data.frequency.value,
        "occurrences": [d.isoformat() for d in dates],
    }
