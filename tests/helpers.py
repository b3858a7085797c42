# tests/helpers.py
from datetime import date, datetime, timedelta, timezone

UTC = timezone.utc


def end_of(year: int, month: int) -> datetime:
    """해당 월 말일 23:59:59.999 (UTC)"""
    if month == 12:
        first_next = datetime(year + 1, 1, 1, tzinfo=UTC)
    else:
        first_next = datetime(year, month + 1, 1, tzinfo=UTC)
    return first_next - timedelta(milliseconds=1)


def at(year: int, month: int, day: int, hour: int = 12) -> datetime:
    return datetime(year, month, day, hour, tzinfo=UTC)


def visits(year: int, month: int, days) -> list[str]:
    """지정한 날짜마다 체크인 1회 (ISO 문자열)"""
    return [at(year, month, d, 7).isoformat() for d in days]


def iso(value: datetime) -> str:
    return value.isoformat().replace("+00:00", "Z")


def parse_dt(text: str) -> datetime:
    return datetime.fromisoformat(text.replace("Z", "+00:00"))


def day_visits(days) -> list[str]:
    return [datetime.combine(d, datetime.min.time(), UTC).replace(hour=9).isoformat() for d in days]


def utc_today() -> date:
    return datetime.now(UTC).date()


def member_payload(**overrides) -> dict:
    member = {
        "member_id": 1,
        "name": "테스트회원",
        "plan": "Standard",
        "expiry_date": iso(end_of(2023, 12)),
        "manual_due_months": 0,
        "balance": 0,
        "attendance": [],
    }
    member.update(overrides)
    return member
