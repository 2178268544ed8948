"""Per-day usage limits keyed on the Japan Standard Time calendar day."""

from datetime import UTC, datetime, timedelta, timezone

JST = timezone(timedelta(hours=9), name="JST")

AI_CHECK_COOKIE_NAME = "ai-check-last-jst"
AI_CHECK_LIMIT_MESSAGE = "AIチェッカーは日本時間で1日1回までご利用いただけます。"


def parse_timestamp(value: str | datetime | None) -> datetime | None:
    """Parse an ISO 8601 timestamp; naive values are taken as UTC."""
    if value is None:
        return None

    if isinstance(value, datetime):
        parsed = value
    else:
        text = value.strip()
        if not text:
            return None
        if text.endswith("Z"):
            text = f"{text[:-1]}+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return None

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


def to_jst_date_key(moment: datetime | None = None) -> str:
    """``YYYY-MM-DD`` of ``moment`` on the JST calendar."""
    moment = moment or datetime.now(UTC)
    return moment.astimezone(JST).strftime("%Y-%m-%d")


def is_same_jst_date(first: str | datetime | None, second: str | datetime | None) -> bool:
    first_dt = parse_timestamp(first)
    second_dt = parse_timestamp(second)
    if first_dt is None or second_dt is None:
        return False
    return to_jst_date_key(first_dt) == to_jst_date_key(second_dt)


def next_jst_midnight(moment: datetime | None = None) -> datetime:
    """The next 00:00 JST after ``moment``, as a UTC datetime."""
    moment = moment or datetime.now(UTC)
    local = moment.astimezone(JST)
    midnight = local.replace(hour=0, minute=0, second=0, microsecond=0) + timedelta(days=1)
    return midnight.astimezone(UTC)


def to_iso(moment: datetime) -> str:
    """UTC ISO 8601 with millisecond precision and a ``Z`` suffix."""
    return moment.astimezone(UTC).strftime("%Y-%m-%dT%H:%M:%S.") + f"{moment.microsecond // 1000:03d}Z"
