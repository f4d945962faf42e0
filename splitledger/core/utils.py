import calendar
import re
from datetime import datetime, timedelta
from decimal import Decimal, ROUND_HALF_UP, getcontext

getcontext().prec = 28
CENTS = Decimal("0.01")
TOLERANCE = Decimal("0.01")
ZERO = Decimal("0")

def qround(d: Decimal) -> Decimal:
    return d.quantize(CENTS, rounding=ROUND_HALF_UP)

def to_decimal(value) -> Decimal:
    if isinstance(value, Decimal):
        return value
    # str() first so floats like 0.1 don't leak binary noise
    return Decimal(str(value))

def within_tolerance(a: Decimal, b: Decimal) -> bool:
    return abs(a - b) < TOLERANCE

def add_months(dt: datetime, months: int) -> datetime:
    month_index = dt.month - 1 + months
    year = dt.year + month_index // 12
    month = month_index % 12 + 1
    day = min(dt.day, calendar.monthrange(year, month)[1])
    return dt.replace(year=year, month=month, day=day)

def next_due_date(current: datetime, frequency: str, custom_days: int | None = None) -> datetime:
    if frequency == "daily":
        return current + timedelta(days=1)
    if frequency == "weekly":
        return current + timedelta(days=7)
    if frequency == "yearly":
        return add_months(current, 12)
    if frequency == "custom" and custom_days:
        return current + timedelta(days=custom_days)
    return add_months(current, 1)

def normalize_phone(phone: str, country_code: str = "+91") -> str | None:
    if phone.startswith(country_code):
        normalized = phone
    else:
        normalized = country_code + re.sub(r"\D", "", phone)

    if not re.fullmatch(re.escape(country_code) + r"\d{10}", normalized):
        return None
    return normalized
