"""
services/months.py

달력 월(Calendar Month) 경계 계산 유틸리티 모음.

회비는 "월 단위"로 청구되므로, 모든 계산은
설정된 타임존 기준의 월 시작/월 말 시각을 기준으로 한다.

주요 기능:
- 월 말(23:59:59.999) / 다음 달 1일(00:00:00.000) 계산
- 'YYYY-MM' 형식의 월 키(period) 생성 및 검증
- 특정 시각의 현지 날짜(local date) 추출
- 화면 표시용 월 라벨 생성

설계 원칙:
- 현재 시각을 직접 읽지 않음 (now는 항상 호출 측에서 전달)
- 파싱할 수 없는 날짜는 예외 대신 fallback 시각으로 대체
- 타임존 정보가 없는 시각은 UTC로 간주

관련 파일:
- app.services.attendance : 출석 집계 / 연속 출석
- app.services.dues       : 미납 계산 / 납부 처리

"""

import calendar
import re
from datetime import date, datetime, time, timezone, tzinfo
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError


DEFAULT_TIMEZONE = "Asia/Dhaka"

UTC = timezone.utc

_PERIOD_RE = re.compile(r"^\d{4}-\d{2}$")

# 로케일에 따라 바뀌지 않도록 고정
_MONTH_ABBR = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")

_END_OF_DAY = time(23, 59, 59, 999000)


def get_zone(tz: str | tzinfo | None = None) -> tzinfo:
    if tz is None:
        tz = DEFAULT_TIMEZONE
    if isinstance(tz, tzinfo):
        return tz
    try:
        return ZoneInfo(tz)
    except (ZoneInfoNotFoundError, ValueError):
        raise ValueError(f"unknown timezone: {tz}")


"""
문자열 / date / datetime 값을 타임존이 있는 시각(datetime)으로 변환

- ISO-8601 문자열 허용 (끝의 'Z' 포함)
- 날짜만 있는 값, 타임존이 없는 값은 UTC로 간주
- 변환할 수 없으면 None 반환 (예외 없음)

"""

def parse_instant(value) -> datetime | None:
    if value is None:
        return None

    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, date):
        dt = datetime.combine(value, time())
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        if text[-1] in "Zz":
            text = text[:-1] + "+00:00"
        try:
            dt = datetime.fromisoformat(text)
        except ValueError:
            return None
    else:
        return None

    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=UTC)
    return dt


def local_date(instant: datetime, tz: str | tzinfo | None = None) -> date:
    return instant.astimezone(get_zone(tz)).date()


def add_months(year: int, month: int, months: int) -> tuple[int, int]:
    index = year * 12 + (month - 1) + months
    return index // 12, index % 12 + 1


def period_of(year: int, month: int) -> str:
    return f"{year:04d}-{month:02d}"


def _local(value, tz, fallback) -> datetime:
    zone = get_zone(tz)
    instant = parse_instant(value) or parse_instant(fallback) or datetime.now(UTC)
    return instant.astimezone(zone)


"""
해당 월의 마지막 시각 (23:59:59.999, 현지 기준)

- value를 파싱할 수 없으면 fallback(보통 now)을 기준으로 계산
- fallback도 없으면 현재 시각 기준

"""

def month_end(value, tz: str | tzinfo | None = None, fallback=None) -> datetime:
    local = _local(value, tz, fallback)
    last_day = calendar.monthrange(local.year, local.month)[1]
    return datetime.combine(date(local.year, local.month, last_day), _END_OF_DAY, tzinfo=local.tzinfo)


# 다음 달 1일 00:00:00.000 (현지 기준)
def next_month_start(value, tz: str | tzinfo | None = None, fallback=None) -> datetime:
    local = _local(value, tz, fallback)
    year, month = add_months(local.year, local.month, 1)
    return datetime(year, month, 1, tzinfo=local.tzinfo)


def month_key(value, tz: str | tzinfo | None = None, fallback=None) -> str:
    local = _local(value, tz, fallback)
    return period_of(local.year, local.month)


"""
월 키(period) 형식 검증

- 'YYYY-MM' 형식만 허용
- 월(month)은 01 ~ 12 범위만 허용
- 형식이 잘못되면 ValueError 발생

"""

def validate_period(period: str) -> None:
    if not _PERIOD_RE.match(period):
        raise ValueError("period must be in 'YYYY-MM' format")
    try:
        month = int(period.split("-")[1])
    except Exception:
        raise ValueError("period must be in 'YYYY-MM' format")

    if month < 1 or month > 12:
        raise ValueError("month must be between 01 and 12")


"""
화면 표시용 월 라벨

- 'Feb' 처럼 짧은 영문 월 이름
- 기준 연도(보통 now의 연도)와 다르면 'Feb 2023' 처럼 연도 추가

"""

def format_month_label(period: str, current_year: int) -> str:
    year, month = (int(part) for part in period.split("-"))
    name = _MONTH_ABBR[month - 1]
    return name if year == current_year else f"{name} {year}"
