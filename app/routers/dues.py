"""
dues.py

회원 회비 계산 / 납부 적용 API 모음.

이 서비스는 회원 데이터를 저장하지 않는다.
호출 측(관리 화면, 백오피스 등)이 회원의 현재 상태(만료일, 잔액,
수동 미납, 출석 기록)를 요청에 담아 보내면,
계산 결과와 "저장해야 할 새 상태"를 돌려준다.

주요 기능:
- 회원 미납 현황 계산 (미납 월 / 공백 월 / 상태 / 미납 총액)
- 납부 적용 결과 계산 (새 만료일 / 잔액 / 수동 미납)
- 신규 / 이관 회원의 초기 만료일 계산

설계 원칙:
- 계산 로직은 service 계층(app.services.dues)에 위임
- threshold / now 미지정 시 설정값 / 시스템 시계 사용
- 같은 회원에 대한 납부는 호출 측에서 한 번에 하나씩 저장해야 함

관련 파일:
- app.services.dues        : 미납 계산 / 납부 적용 로직
- app.schemas.dues         : 요청/응답 스키마
- app.core.deps            : 설정 / 시계 의존성

"""

from fastapi import APIRouter, Depends, HTTPException

from app.core.clock import SystemClock
from app.core.config import Settings
from app.core.deps import get_clock, get_settings
from app.schemas.dues import (
    DuesCalculateRequest,
    DuesCalculateResponse,
    PaymentApplyRequest,
    PaymentApplyResponse,
    InitialMembershipRequest,
    InitialMembershipResponse,
)
from app.services.dues import (
    apply_member_payment,
    calculate_dues,
    find_plan_price,
    initial_membership,
    member_status,
    outstanding_amount,
)

router = APIRouter(prefix="/dues", tags=["dues"])


"""
회원 미납 현황 계산 API

- 출석 기준 이상인 달만 미납으로 계산 (공백 월은 청구 없음)
- 수동 미납은 출석과 무관하게 미납
- 미납 개월 수에 따라 active / due / inactive 상태 판단

"""
@router.post("/calculate", response_model=DuesCalculateResponse)
def calculate_member_dues(
    body: DuesCalculateRequest,
    cfg: Settings = Depends(get_settings),
    clock: SystemClock = Depends(get_clock),
):
    member = body.member
    threshold = body.threshold if body.threshold is not None else cfg.ATTENDANCE_THRESHOLD_DAYS
    now = body.now or clock.now

    try:
        due = calculate_dues(member.expiry_date, member.attendance, threshold, member.manual_due_months, now, cfg.TIMEZONE)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    price = find_plan_price(cfg.membership_plans, member.plan)

    return DuesCalculateResponse(
        due=due,
        status=member_status(due.count, cfg.INACTIVE_AFTER_DUE_MONTHS),
        plan_price=price,
        outstanding=outstanding_amount(due.count, price, member.balance),
    )


"""
납부 적용 API

- 납부액을 "개월 수"로 환산해 수동 미납 → 청구 대상 월 → 선납 순으로 차감
- 공백 월은 차감 없이 만료일만 이동
- 반환된 result(new_expiry / new_balance / new_manual_due)를 호출 측이 저장
- 적용 후 상태 기준 미납 현황(due)을 함께 반환

"""
@router.post("/payments", response_model=PaymentApplyResponse)
def apply_payment(
    body: PaymentApplyRequest,
    cfg: Settings = Depends(get_settings),
    clock: SystemClock = Depends(get_clock),
):
    member = body.member
    threshold = body.threshold if body.threshold is not None else cfg.ATTENDANCE_THRESHOLD_DAYS
    now = body.now or clock.now
    price = body.plan_price if body.plan_price is not None else find_plan_price(cfg.membership_plans, member.plan)

    try:
        result = apply_member_payment(
            expiry=member.expiry_date,
            attendance=member.attendance,
            balance=member.balance,
            manual_due=member.manual_due_months,
            amount=body.amount,
            payment_type=body.payment_type,
            plan_price=price,
            threshold=threshold,
            now=now,
            tz=cfg.TIMEZONE,
            renewal_fee=body.renewal_fee,
        )
        due = calculate_dues(result.new_expiry, member.attendance, threshold, result.new_manual_due, now, cfg.TIMEZONE)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return PaymentApplyResponse(result=result, plan_price=price, due=due)


"""
신규 회원 초기 상태 계산 API

- 일반 가입: 지난 달 말일까지 정산된 상태로 시작
- 이관(migration): legacy_dues 개월을 수동 미납으로 등록

"""
@router.post("/initial", response_model=InitialMembershipResponse)
def initial_member_state(
    body: InitialMembershipRequest,
    cfg: Settings = Depends(get_settings),
    clock: SystemClock = Depends(get_clock),
):
    expiry, manual_due = initial_membership(
        body.now or clock.now,
        cfg.TIMEZONE,
        migration=body.migration,
        legacy_dues=body.legacy_dues,
    )
    return InitialMembershipResponse(expiry_date=expiry, manual_due_months=manual_due)
