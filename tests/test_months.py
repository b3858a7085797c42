"""
달력 월 경계 계산 테스트.
- 월 말 / 다음 달 1일 계산 (윤년 2월, 연도 경계 포함)
- 타임존 기준 월 판정, 파싱 불가 날짜의 fallback 처리
- period('YYYY-MM') 형식 / 월 범위 검증, 월 라벨
"""

from datetime import date, datetime, timezone

import pytest

from app.services.months import (
    format_month_label,
    get_zone,
    local_date,
    month_end,
    month_key,
    next_month_start,
    parse_instant,
    validate_period,
)
from tests.helpers import UTC, at, end_of


def test_month_end_is_last_millisecond_of_month():
    assert month_end(at(2024, 4, 10), "UTC") == datetime(2024, 4, 30, 23, 59, 59, 999000, tzinfo=UTC)


def test_month_end_leap_and_common_february():
    assert month_end(at(2024, 2, 3), "UTC").day == 29
    assert month_end(at(2023, 2, 3), "UTC").day == 28


def test_next_month_start_crosses_year_boundary():
    assert next_month_start(end_of(2023, 12), "UTC") == datetime(2024, 1, 1, tzinfo=UTC)


@pytest.mark.parametrize("year", [2019, 2020, 2023, 2024])
def test_next_month_start_of_month_end_lands_in_following_month(year):
    for month in range(1, 13):
        for day in (1, 15, 28):
            nxt = next_month_start(month_end(at(year, month, day), "UTC"), "UTC")
            expected_year, expected_month = (year + 1, 1) if month == 12 else (year, month + 1)
            assert (nxt.year, nxt.month, nxt.day) == (expected_year, expected_month, 1)


def test_month_boundaries_follow_configured_timezone():
    # 2024-01-31 20:00 UTC == 2024-02-01 02:00 (Asia/Dhaka, UTC+6)
    instant = datetime(2024, 1, 31, 20, 0, tzinfo=UTC)

    assert month_key(instant, "UTC") == "2024-01"
    assert month_key(instant, "Asia/Dhaka") == "2024-02"
    assert local_date(instant, "Asia/Dhaka") == date(2024, 2, 1)

    end = month_end(instant, "Asia/Dhaka")
    assert end.astimezone(UTC) == datetime(2024, 2, 29, 17, 59, 59, 999000, tzinfo=UTC)


def test_month_end_falls_back_for_unparseable_value():
    fallback = at(2024, 5, 3)
    assert month_end("not-a-date", "UTC", fallback=fallback) == end_of(2024, 5)
    assert month_end(None, "UTC", fallback=fallback) == end_of(2024, 5)


def test_parse_instant_variants():
    assert parse_instant("garbage") is None
    assert parse_instant("") is None
    assert parse_instant(None) is None
    assert parse_instant("2024-01-05") == datetime(2024, 1, 5, tzinfo=UTC)
    assert parse_instant("2024-01-05T10:00:00Z") == datetime(2024, 1, 5, 10, tzinfo=UTC)
    assert parse_instant(datetime(2024, 1, 5, 10)) == datetime(2024, 1, 5, 10, tzinfo=timezone.utc)
    assert parse_instant(date(2024, 1, 5)) == datetime(2024, 1, 5, tzinfo=UTC)


def test_unknown_timezone_rejected():
    with pytest.raises(ValueError):
        get_zone("Mars/Olympus_Mons")


def test_validate_period_format():
    validate_period("2026-01")

    with pytest.raises(ValueError) as e:
        validate_period("2026-7")  # 월 2자리
    assert str(e.value) == "period must be in 'YYYY-MM' format"


# 2026-00 or 2026-13 1월~12월 오류 체크
def test_validate_period_month_range():
    for bad_period in ["2026-00", "2026-13"]:
        with pytest.raises(ValueError) as e:
            validate_period(bad_period)
        assert str(e.value) == "month must be between 01 and 12"


def test_month_label_appends_year_only_for_other_years():
    assert format_month_label("2024-02", 2024) == "Feb"
    assert format_month_label("2023-12", 2024) == "Dec 2023"
