"""
미납 현황 계산(calculate_dues) 테스트.
- 출석 기준 이상인 달만 미납, 미만인 달은 공백 월(gap)
- 수동 미납은 now 기준 지난 달부터 거꾸로, 출석과 무관
- 현재 달 납부 여부(is_running_month_paid), 60개월 순회 제한
"""

import logging

from app.services.dues import MAX_SCAN_MONTHS, calculate_dues
from tests.helpers import at, end_of, visits

NOW = at(2024, 3, 15)


def test_manual_dues_only_when_expiry_missing():
    result = calculate_dues(None, visits(2024, 2, [1, 2, 3]), 3, 2, NOW, "UTC")

    assert result.count == 2
    assert result.months == ["2024-01", "2024-02"]
    assert result.labels == ["Jan", "Feb"]
    assert result.gap_months == 0
    assert result.is_running_month_paid is False
    assert result.paid_until is None


def test_manual_dues_cross_year_labels():
    result = calculate_dues(None, [], 3, 3, at(2024, 2, 10), "UTC")

    assert result.months == ["2023-11", "2023-12", "2024-01"]
    assert result.labels == ["Nov 2023", "Dec 2023", "Jan"]


def test_threshold_is_inclusive():
    attendance = visits(2024, 2, [5, 12, 19])
    result = calculate_dues(end_of(2024, 1), attendance, 3, 0, NOW, "UTC")

    # 2월: 3일 출석 → 미납, 3월: 출석 없음 → 공백
    assert result.months == ["2024-02"]
    assert result.labels == ["Feb"]
    assert result.count == 1
    assert result.gap_months == 1


def test_below_threshold_months_are_gaps():
    attendance = visits(2024, 2, [5, 12])
    result = calculate_dues(end_of(2024, 1), attendance, 3, 0, NOW, "UTC")

    assert result.count == 0
    assert result.months == []
    assert result.gap_months == 2


def test_repeated_checkins_on_one_day_do_not_reach_threshold():
    attendance = ["2024-02-05T07:00:00Z", "2024-02-05T12:00:00Z", "2024-02-05T19:00:00Z"]
    result = calculate_dues(end_of(2024, 1), attendance, 2, 0, NOW, "UTC")

    assert result.count == 0
    assert result.gap_months == 2


def test_running_month_paid_when_expiry_in_future():
    result = calculate_dues(end_of(2024, 3), visits(2024, 3, [1, 2, 3]), 3, 0, NOW, "UTC")

    assert result.is_running_month_paid is True
    assert result.count == 0
    assert result.gap_months == 0
    assert result.paid_until == end_of(2024, 3)


def test_running_month_flag_independent_of_manual_dues():
    result = calculate_dues(end_of(2024, 3), [], 3, 1, NOW, "UTC")

    assert result.is_running_month_paid is True
    assert result.months == ["2024-02"]


def test_manual_and_scanned_months_merge_oldest_first():
    attendance = visits(2024, 1, [3, 4, 5]) + visits(2024, 3, [1, 2, 3])
    result = calculate_dues(end_of(2023, 12), attendance, 3, 1, NOW, "UTC")

    # 1월 미납(출석), 2월 수동 미납, 3월 미납(출석) / 2월 출석 없음 → 공백 1
    assert result.months == ["2024-01", "2024-02", "2024-03"]
    assert result.labels == ["Jan", "Feb", "Mar"]
    assert result.count == 3
    assert result.gap_months == 1


def test_scan_is_capped_at_sixty_months(caplog):
    with caplog.at_level(logging.WARNING, logger="app.services.dues"):
        result = calculate_dues(end_of(1990, 1), [], 3, 0, NOW, "UTC")

    assert result.gap_months == MAX_SCAN_MONTHS
    assert result.count == 0
    assert "truncated" in caplog.text


def test_scan_reaching_now_in_exactly_sixty_months_is_not_truncated(caplog):
    # 2019-04 ~ 2024-03 = 60개월, 마지막 달이 now가 속한 달
    with caplog.at_level(logging.WARNING, logger="app.services.dues"):
        result = calculate_dues(end_of(2019, 3), [], 3, 0, NOW, "UTC")

    assert result.gap_months == MAX_SCAN_MONTHS
    assert "truncated" not in caplog.text


def test_unparseable_expiry_skips_scan():
    result = calculate_dues("not-a-date", visits(2024, 2, [1, 2, 3]), 3, 1, NOW, "UTC")

    assert result.months == ["2024-02"]
    assert result.gap_months == 0
    assert result.paid_until is None
    assert result.is_running_month_paid is False


def test_gap_classification_is_stable_across_calls():
    attendance = visits(2024, 2, [1])
    first = calculate_dues(end_of(2024, 1), attendance, 3, 0, NOW, "UTC")
    second = calculate_dues(end_of(2024, 1), attendance, 3, 0, NOW, "UTC")

    assert first == second
    assert "2024-02" not in first.months
    assert first.gap_months == 2


def test_iso_string_inputs_and_timezone():
    # 2024-01-31 20:00 UTC 체크인은 Asia/Dhaka 기준 2월 1일
    attendance = ["2024-01-31T20:00:00Z", "2024-02-10T05:00:00Z", "2024-02-11T05:00:00Z"]
    expiry = "2024-01-31T17:59:59.999Z"  # 1월 말 (Asia/Dhaka)

    result = calculate_dues(expiry, attendance, 3, 0, "2024-02-20T00:00:00Z", "Asia/Dhaka")

    assert result.months == ["2024-02"]
    assert result.gap_months == 0
