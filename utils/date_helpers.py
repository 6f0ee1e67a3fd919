from datetime import date, datetime
import calendar
from utils.constants import DATE_FORMAT, MONTH_FORMAT

# Formats accepted by the CSV importer, tried in order.
CSV_DATE_FORMATS = ("%Y-%m-%d", "%m/%d/%Y")


def today() -> date:
    return date.today()


def parse_date(date_str: str) -> date | None:
    """Parse a date string in YYYY-MM-DD format, returning None on failure."""
    if not date_str:
        return None
    for fmt in ("%Y-%m-%d", "%Y/%m/%d", "%Y.%m.%d"):
        try:
            return datetime.strptime(date_str, fmt).date()
        except ValueError:
            continue
    return None


def parse_csv_date(date_str: str) -> date | None:
    """Parse an imported date: ISO first, then US MM/DD/YYYY."""
    if not date_str:
        return None
    text = date_str.strip()
    for fmt in CSV_DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    return None


def format_date(d: date) -> str:
    return d.strftime(DATE_FORMAT)


def format_month(d: date) -> str:
    return d.strftime(MONTH_FORMAT)


def parse_month(month_str: str) -> date | None:
    """Return the first day of the given YYYY-MM month string."""
    if not month_str:
        return None
    try:
        return datetime.strptime(month_str, MONTH_FORMAT).date()
    except ValueError:
        return None


def month_key(year: int, month: int) -> str:
    if not 1 <= month <= 12:
        raise ValueError(f"Invalid month: {month}")
    return f"{year:04d}-{month:02d}"


def clamp_day_to_month(year: int, month: int, day: int) -> int:
    """Clamp day to valid range for the given year/month."""
    max_day = calendar.monthrange(year, month)[1]
    return min(day, max_day)


def add_months(d: date, n: int) -> date:
    """Add n months to date d, clamping day to month end."""
    month = d.month - 1 + n
    year = d.year + month // 12
    month = month % 12 + 1
    day = clamp_day_to_month(year, month, d.day)
    return d.replace(year=year, month=month, day=day)


def months_ago_str(n: int, ref: date | None = None) -> str:
    """YYYY-MM-DD of the date n calendar months before ref (default today)."""
    return format_date(add_months(ref or today(), -n))


def short_month_name(month_str: str) -> str:
    """Convert YYYY-MM to e.g. 'Feb'."""
    d = parse_month(month_str)
    if d is None:
        return month_str
    return d.strftime("%b")
