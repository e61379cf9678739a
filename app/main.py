import sentry_sdk
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from app import config
from app.errors import LedgerError
from app.logging_config import setup_logging
from app.middleware import RequestLoggingMiddleware
from app.ratelimit import limiter
from app.routes import balances, recurrence, splits

# Sentry
if config.SENTRY_DSN:
    sentry_sdk.init(
        dsn=config.SENTRY_DSN,
        traces_sample_rate=0.1,
        send_default_pii=False,
    )

logger = setup_logging()

app = FastAPI(title="Household Ledger API", version="0.1.0")
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)


@app.exception_handler(LedgerError)
async def ledger_error_handler(request: Request, exc: LedgerError):
    logger.info(
        "Rejected ledger request",
        extra={"extra_data": {"code": exc.code, "path": request.url.path}},
    )
    return JSONResponse(status_code=400, content={"detail": exc.message, "code": exc.code})


# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST"],
    allow_headers=["Content-Type"],
)
app.add_middleware(RequestLoggingMiddleware)

# Routes
app.include_router(splits.router, prefix="/api")
app.include_router(balances.router, prefix="/api")
app.include_router(recurrence.router, prefix="/api")


@app.get("/health")
def health():
    return {"status": "ok", "currency": config.CURRENCY.code}
