"""
services/report.py

대시보드용 회원 회비 현황 집계.

회원 목록(호출 측 스냅샷)을 받아 회원별로
미납 월 / 상태(active, due, inactive) / 미납 총액 / 연속 출석을 계산하고,
전체 통계(상태별 인원, 총 미납액)를 함께 만든다.

설계 원칙:
- 계산 규칙은 app.services.dues에 위임
- 회원 상태 변경 저장은 호출 측 책임 (여기서는 계산만)
- 요금제 이름이 설정에 없으면 가격 0으로 취급

"""

from datetime import date, datetime, tzinfo
from typing import Iterable

from app.schemas.dues import MemberSnapshot
from app.schemas.report import DuesReportStats, MemberDuesRow
from app.schemas.settings import Plan
from app.services.attendance import current_streak
from app.services.dues import calculate_dues, find_plan_price, member_status, outstanding_amount


REPORT_COLUMNS = [
    "member_id",
    "name",
    "plan",
    "status",
    "due_months",
    "due_month_labels",
    "gap_months",
    "outstanding",
    "balance",
    "streak",
]


def member_row(
    member: MemberSnapshot,
    *,
    plans: Iterable[Plan],
    threshold: int,
    inactive_after: int,
    now: datetime,
    today: date,
    tz: str | tzinfo | None = None,
) -> MemberDuesRow:
    due = calculate_dues(member.expiry_date, member.attendance, threshold, member.manual_due_months, now, tz)
    price = find_plan_price(plans, member.plan)

    return MemberDuesRow(
        member_id=member.member_id,
        name=member.name,
        plan=member.plan,
        status=member_status(due.count, inactive_after),
        due_months=due.count,
        due_month_periods=due.months,
        due_month_labels=due.labels,
        gap_months=due.gap_months,
        is_running_month_paid=due.is_running_month_paid,
        outstanding=outstanding_amount(due.count, price, member.balance),
        balance=member.balance,
        streak=current_streak(member.attendance, today, tz),
    )


"""
회원 목록 전체 현황 계산

- rows: 회원별 현황 (입력 순서 유지)
- stats: active / due / inactive 인원 수와 총 미납액

"""

def dues_report(
    members: Iterable[MemberSnapshot],
    *,
    plans: Iterable[Plan],
    threshold: int,
    inactive_after: int,
    now: datetime,
    today: date,
    tz: str | tzinfo | None = None,
) -> tuple[list[MemberDuesRow], DuesReportStats]:
    plans = list(plans)
    rows = [
        member_row(
            m,
            plans=plans,
            threshold=threshold,
            inactive_after=inactive_after,
            now=now,
            today=today,
            tz=tz,
        )
        for m in members
    ]

    stats = DuesReportStats()
    for r in rows:
        if r.status == "inactive":
            stats.inactive_members += 1
        elif r.status == "due":
            stats.due_members += 1
        else:
            stats.active += 1
        stats.total_outstanding += r.outstanding
    return rows, stats


# CSV / Excel 한 행
def report_values(row: MemberDuesRow) -> list:
    return [
        row.member_id if row.member_id is not None else "",
        row.name or "",
        row.plan or "",
        row.status,
        row.due_months,
        " ".join(row.due_month_labels),
        row.gap_months,
        row.outstanding,
        row.balance,
        row.streak,
    ]
