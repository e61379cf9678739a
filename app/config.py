import os
from decimal import Decimal

from dotenv import load_dotenv

from app.money import Currency

load_dotenv()

# Unit of account for every balance and debt (single currency)
CURRENCY = Currency(
    code=os.getenv("CURRENCY_CODE", "EUR"),
    symbol=os.getenv("CURRENCY_SYMBOL", "€"),
)

# Balances within this band of zero count as settled
SETTLE_TOLERANCE = Decimal(os.getenv("SETTLE_TOLERANCE", "0.01"))

CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "http://localhost:5173").split(",")]
SENTRY_DSN = os.getenv("SENTRY_DSN")
RATE_LIMIT = os.getenv("RATE_LIMIT", "120/minute")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
