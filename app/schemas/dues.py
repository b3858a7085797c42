from datetime import datetime
from typing import Literal, Optional, List

from pydantic import BaseModel, Field, ConfigDict, model_validator


PeriodStr = str  # 'YYYY-MM' (현지 타임존 기준 달력 월)

MemberStatus = Literal["active", "due", "inactive"]

PaymentType = Literal["plan", "renewal", "wallet", "admission"]

# 이관 미납 개월 수 상한 (10년)
MAX_MANUAL_DUE_MONTHS = 120


class DueResult(BaseModel):
    """미납 계산 결과.

    - months: 오래된 달부터 정렬된 미납 월 목록 (수동 미납 포함)
    - gap_months: 출석 기준 미달로 청구하지 않은 달 수
    - is_running_month_paid: 저장된 만료일이 now 이후인지 여부
    """

    model_config = ConfigDict(frozen=True)

    count: int
    months: List[PeriodStr]
    labels: List[str]
    gap_months: int = 0
    is_running_month_paid: bool = False
    paid_until: Optional[datetime] = None

    @model_validator(mode="after")
    def _lengths_match(self):
        if not (self.count == len(self.months) == len(self.labels)):
            raise ValueError("count, months and labels must have the same length")
        return self


class PaymentResult(BaseModel):
    """납부 적용 결과. 호출 측에서 그대로 저장한다."""

    model_config = ConfigDict(frozen=True)

    # 만료일이 없던 회원에게 admission만 적용한 경우 None
    new_expiry: Optional[datetime]
    new_balance: int
    new_manual_due: int


class MemberSnapshot(BaseModel):
    """호출 측이 보관하는 회원 상태 (엔진은 저장하지 않음)."""

    model_config = ConfigDict(extra="forbid")

    member_id: Optional[int] = None
    name: Optional[str] = None
    plan: Optional[str] = None
    expiry_date: Optional[datetime] = None
    manual_due_months: int = Field(0, ge=0, le=MAX_MANUAL_DUE_MONTHS)
    balance: int = Field(0, ge=0)
    # 원본 체크인 시각 문자열. 파싱 불가 값은 집계 시 버려짐
    attendance: List[str] = Field(default_factory=list)


class DuesCalculateRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    member: MemberSnapshot
    threshold: Optional[int] = Field(None, ge=0)
    now: Optional[datetime] = None


class DuesCalculateResponse(BaseModel):
    due: DueResult
    status: MemberStatus
    plan_price: int
    outstanding: int


class PaymentApplyRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    member: MemberSnapshot
    amount: int = Field(..., ge=0, examples=[500])
    payment_type: PaymentType = "plan"
    renewal_fee: int = Field(0, ge=0)
    # 지정하지 않으면 member.plan 이름으로 설정의 요금제 가격 사용
    plan_price: Optional[int] = Field(None, ge=0)
    threshold: Optional[int] = Field(None, ge=0)
    now: Optional[datetime] = None


class PaymentApplyResponse(BaseModel):
    result: PaymentResult
    plan_price: int
    due: DueResult


class InitialMembershipRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    migration: bool = False
    legacy_dues: int = Field(0, ge=0, le=MAX_MANUAL_DUE_MONTHS)
    now: Optional[datetime] = None


class InitialMembershipResponse(BaseModel):
    expiry_date: datetime
    manual_due_months: int
