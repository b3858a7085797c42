"""
services/dues.py

회비(Dues) 도메인의 비즈니스 로직 모음.

이 파일은 월 회비 미납 계산, 납부 적용, 회원 상태 판단 등
회비 시스템의 핵심 규칙을 담당한다.

라우터는 이 파일의 함수를 호출하여
계산 결과를 받아 응답만 처리한다.

핵심 규칙:
- 청구 대상 월(billable): 그 달 출석 일수 >= 기준 일수
- 공백 월(gap): 출석 일수 < 기준 일수 → 청구하지 않고 무료로 넘어감
- 수동 미납(manual due): 이전 시스템에서 이관된 미납 개월 수
  출석과 무관하게 항상 미납이며, 납부 시 가장 먼저 차감
- 만료일(expiry): 마지막으로 정산된 달의 월 말 시각

설계 원칙:
- 순수 계산 함수 (DB / 현재 시각 접근 없음, now는 항상 인자로 전달)
- 잘못된 입력으로 예외를 내지 않음 (검증은 라우터/스키마에서 수행)
- 월 순회는 최대 60회로 제한

관련 파일:
- app.services.months     : 월 경계 계산
- app.services.attendance : 월별 출석 일수 집계
- app.schemas.dues        : DueResult / PaymentResult
- app.routers.dues        : 회비 계산 / 납부 API

"""

import logging
from datetime import datetime, tzinfo
from typing import Iterable

from app.schemas.dues import DueResult, PaymentResult, PaymentType
from app.schemas.settings import Plan
from app.services.attendance import aggregate_attendance
from app.services.months import (
    add_months,
    format_month_label,
    get_zone,
    month_end,
    month_key,
    next_month_start,
    parse_instant,
    period_of,
)


logger = logging.getLogger(__name__)

# 오래된 만료일로 인한 무한 순회 방지
MAX_SCAN_MONTHS = 60

# 가격 0인 요금제는 납부액이 있으면 사실상 무제한 선납으로 취급
FREE_PLAN_MONTHS = 99


def _as_instant(now) -> datetime:
    instant = parse_instant(now)
    if instant is None:
        raise ValueError("now must be a valid timestamp")
    return instant


"""
수동 미납 월 목록 생성

- now가 속한 달의 "지난 달"이 가장 최근 미납 월
- 그 이전 달들로 manual_due 개수만큼 거슬러 올라감
- 오래된 달부터 반환

"""

def build_manual_due_months(manual_due: int, now: datetime, tz: str | tzinfo | None = None) -> list[str]:
    if manual_due <= 0:
        return []
    local = now.astimezone(get_zone(tz))
    return [
        period_of(*add_months(local.year, local.month, -i))
        for i in range(manual_due, 0, -1)
    ]


"""
회원 미납 현황 계산

1. 수동 미납 월을 now 기준 지난 달부터 거꾸로 생성
2. 만료일이 now 이후이면 현재 달은 납부된 것으로 표시
3. 만료일 다음 달부터 now까지 한 달씩 순회
   - 출석 일수 >= threshold → 미납 월
   - 그 외 → 공백 월 (gap_months 증가, 청구 없음)
4. 수동 미납 + 순회 결과를 오래된 달 순으로 합침

- 만료일이 없거나 파싱 불가하면 순회를 건너뛰고 수동 미납만 계산

"""

def calculate_dues(
    expiry,
    attendance: Iterable[str] | None,
    threshold: int,
    manual_due: int,
    now,
    tz: str | tzinfo | None = None,
) -> DueResult:
    now = _as_instant(now)
    paid_until = parse_instant(expiry)

    months = build_manual_due_months(manual_due, now, tz)
    is_running_month_paid = paid_until is not None and paid_until >= now
    gap_months = 0

    if paid_until is not None:
        days_by_month = aggregate_attendance(attendance, tz)
        cursor = next_month_start(paid_until, tz)
        for _ in range(MAX_SCAN_MONTHS):
            if cursor > now:
                break
            key = month_key(cursor, tz)
            if days_by_month.get(key, 0) >= threshold:
                months.append(key)
            else:
                gap_months += 1
            cursor = next_month_start(cursor, tz)
        # 순회 제한에 걸려 now까지 도달하지 못한 경우만 경고
        if cursor <= now:
            logger.warning("due scan truncated at %d months (paid_until=%s)", MAX_SCAN_MONTHS, paid_until.isoformat())

    # 'YYYY-MM' 문자열 정렬 == 시간 순 정렬
    months.sort()
    current_year = now.astimezone(get_zone(tz)).year

    return DueResult(
        count=len(months),
        months=months,
        labels=[format_month_label(m, current_year) for m in months],
        gap_months=gap_months,
        is_running_month_paid=is_running_month_paid,
        paid_until=paid_until,
    )


"""
납부 적용

1. 기존 잔액 + 납부액을 요금제 가격으로 나눠 "납부 가능 개월 수" 계산
   - 나머지는 지갑 잔액으로 남김
   - 가격 0 요금제는 납부액이 있으면 99개월
2. 수동 미납을 먼저 차감 (만료일은 움직이지 않음)
3. 만료일 다음 달부터 최대 60개월 순회
   - 지난 달/이번 달 중 청구 대상 월: 1개월 차감 후 만료일 이동, 남은 개월이 없으면 중단
   - 지난 달/이번 달 중 공백 월: 차감 없이 만료일 이동
   - 미래 월(선납): 1개월 차감 후 만료일 이동, 남은 개월이 없으면 중단

NOTE:
- 같은 회원에 대한 동시 납부 직렬화는 호출 측 책임

"""

def process_payment(
    current_expiry,
    attendance: Iterable[str] | None,
    amount_paid: int,
    plan_price: int,
    current_balance: int,
    current_manual_due: int,
    threshold: int,
    now,
    tz: str | tzinfo | None = None,
) -> PaymentResult:
    now = _as_instant(now)

    balance = current_balance + amount_paid
    if plan_price > 0:
        months_to_pay, balance = divmod(balance, plan_price)
    else:
        months_to_pay = FREE_PLAN_MONTHS if amount_paid > 0 else 0

    manual_due = current_manual_due
    while manual_due > 0 and months_to_pay > 0:
        manual_due -= 1
        months_to_pay -= 1

    expiry = month_end(current_expiry, tz, fallback=now)
    days_by_month = aggregate_attendance(attendance, tz)
    cursor = next_month_start(expiry, tz)

    for _ in range(MAX_SCAN_MONTHS):
        if cursor <= now:
            billable = days_by_month.get(month_key(cursor, tz), 0) >= threshold
            if billable:
                if months_to_pay <= 0:
                    break
                months_to_pay -= 1
        else:
            if months_to_pay <= 0:
                break
            months_to_pay -= 1

        expiry = month_end(cursor, tz)
        cursor = next_month_start(cursor, tz)
    else:
        # 60개월을 모두 돌았는데도 남은 달(now 이전) 또는 남은 납부 개월이 있으면 잘린 것
        if cursor <= now or (plan_price > 0 and months_to_pay > 0):
            logger.warning("payment scan truncated at %d months, %d unused month(s)", MAX_SCAN_MONTHS, months_to_pay)

    logger.debug(
        "payment applied: amount=%d price=%d expiry %s -> %s manual_due %d -> %d",
        amount_paid, plan_price, current_expiry, expiry.isoformat(), current_manual_due, manual_due,
    )

    return PaymentResult(new_expiry=expiry, new_balance=balance, new_manual_due=manual_due)


"""
납부 유형별 적용

- admission(입회비): 기록만 하고 만료일/잔액에는 영향 없음
- plan 이외 유형은 납부액이 0 이하면 변화 없음
- 적용된 납부가 없으면 만료일은 입력값 그대로 (월 말 보정도 하지 않음)
- renewal_fee가 있으면 재등록비를 먼저 renewal로 적용한 뒤 본 납부 적용

"""

def apply_member_payment(
    *,
    expiry,
    attendance: Iterable[str] | None,
    balance: int,
    manual_due: int,
    amount: int,
    payment_type: PaymentType,
    plan_price: int,
    threshold: int,
    now,
    tz: str | tzinfo | None = None,
    renewal_fee: int = 0,
) -> PaymentResult:
    now = _as_instant(now)
    # 실제로 적용되는 납부가 없으면 저장된 만료일을 그대로 돌려줌 (None 포함)
    state = PaymentResult(
        new_expiry=parse_instant(expiry),
        new_balance=balance,
        new_manual_due=manual_due,
    )

    charges: list[tuple[PaymentType, int]] = []
    if renewal_fee > 0:
        charges.append(("renewal", renewal_fee))
    charges.append((payment_type, amount))

    for kind, value in charges:
        if kind == "admission":
            continue
        if value <= 0 and kind != "plan":
            continue
        state = process_payment(
            state.new_expiry,
            attendance,
            value,
            plan_price,
            state.new_balance,
            state.new_manual_due,
            threshold,
            now,
            tz,
        )
    return state


# 미납 개월 수 기준 회원 상태
def member_status(due_count: int, inactive_after: int) -> str:
    if due_count >= inactive_after:
        return "inactive"
    if due_count > 0:
        return "due"
    return "active"


# 미납 총액 (지갑 잔액 차감, 음수면 0)
def outstanding_amount(due_count: int, plan_price: int, balance: int) -> int:
    if due_count <= 0:
        return 0
    return max(0, due_count * plan_price - balance)


def find_plan_price(plans: Iterable[Plan], name: str | None) -> int:
    plan = next((p for p in plans if p.name == name), None)
    return plan.price if plan else 0


"""
신규 회원 초기 상태

- 일반 가입: 가입한 달의 "지난 달" 말일까지 정산된 것으로 시작, 수동 미납 0
- 이관 회원: legacy_dues 개월 전 달의 말일을 만료일로, 수동 미납 = legacy_dues

"""

def initial_membership(
    now,
    tz: str | tzinfo | None = None,
    *,
    migration: bool = False,
    legacy_dues: int = 0,
) -> tuple[datetime, int]:
    now = _as_instant(now)
    zone = get_zone(tz)
    local = now.astimezone(zone)

    back = max(0, legacy_dues) if migration else 1
    year, month = add_months(local.year, local.month, -back)
    anchor = datetime(year, month, 1, tzinfo=zone)

    manual_due = max(0, legacy_dues) if migration else 0
    return month_end(anchor, zone), manual_due
