"""
services/attendance.py

출석(Attendance) 기록 집계 로직.

체크인 시각 목록(ISO 문자열)을 받아
- 월별 "출석한 날짜 수" (같은 날 여러 번 체크인해도 1일)
- 현재 연속 출석 일수(streak)
를 계산한다.

설계 원칙:
- 파싱할 수 없는 시각은 조용히 버림
- 날짜 추출은 항상 설정된 타임존 기준
- streak는 표시용 정보이며 회비 계산에는 사용하지 않음
- 체크인 판정은 기록을 남기지 않고 결과만 돌려줌

"""

from datetime import date, tzinfo
from typing import Iterable

from app.schemas.attendance import CheckInResponse
from app.schemas.dues import MemberSnapshot
from app.services.months import local_date, parse_instant, period_of


def attendance_days(timestamps: Iterable[str] | None, tz: str | tzinfo | None = None) -> set[date]:
    days = set()
    for ts in timestamps or []:
        instant = parse_instant(ts)
        if instant is None:
            continue
        days.add(local_date(instant, tz))
    return days


"""
월별 출석 일수 집계

- key: 'YYYY-MM'
- value: 그 달에 출석한 서로 다른 날짜 수

"""

def aggregate_attendance(timestamps: Iterable[str] | None, tz: str | tzinfo | None = None) -> dict[str, int]:
    by_month: dict[str, set[date]] = {}
    for day in attendance_days(timestamps, tz):
        by_month.setdefault(period_of(day.year, day.month), set()).add(day)
    return {key: len(days) for key, days in by_month.items()}


"""
현재 연속 출석 일수

- 가장 최근 출석일이 오늘 또는 어제가 아니면 0
- 최근 출석일부터 하루씩 이어지는 동안만 센다 (첫 공백에서 중단)
- today는 시뮬레이션 시각이 아닌 실제 현지 날짜

"""

def current_streak(timestamps: Iterable[str] | None, today: date, tz: str | tzinfo | None = None) -> int:
    days = sorted(attendance_days(timestamps, tz), reverse=True)
    if not days:
        return 0

    if (today - days[0]).days not in (0, 1):
        return 0

    streak = 1
    for newer, older in zip(days, days[1:]):
        if (newer - older).days != 1:
            break
        streak += 1
    return streak


"""
체크인 판정

1. 미납 개월 수 기준 상태가 inactive면 거부 ("Membership Inactive")
2. now의 현지 날짜에 이미 출석 기록이 있으면 거부 ("Already checked in today")
3. 만료일이 없거나 now 이전이면 expired, 그 외 success
   - expired여도 입장은 허용 (표시용 태그)

"""

def evaluate_check_in(
    member: MemberSnapshot,
    now,
    tz: str | tzinfo | None = None,
    threshold: int = 3,
    inactive_after: int = 3,
) -> CheckInResponse:
    # dues 모듈이 이 모듈의 집계 함수를 사용하므로 함수 안에서 import
    from app.services.dues import calculate_dues, member_status

    instant = parse_instant(now)
    if instant is None:
        raise ValueError("now must be a valid timestamp")

    due = calculate_dues(
        member.expiry_date, member.attendance, threshold, member.manual_due_months, instant, tz
    )
    if member_status(due.count, inactive_after) == "inactive":
        raise ValueError("Membership Inactive")

    if local_date(instant, tz) in attendance_days(member.attendance, tz):
        raise ValueError("Already checked in today")

    expiry = parse_instant(member.expiry_date)
    is_expired = expiry is None or expiry < instant

    return CheckInResponse(
        status="expired" if is_expired else "success",
        is_expired=is_expired,
        name=member.name,
        check_in_time=instant,
    )
