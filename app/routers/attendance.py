"""
attendance.py

출석 집계 조회 / 체크인 판정 API.

체크인 시각 목록을 받아 월별 출석 일수와
현재 연속 출석 일수(streak)를 반환한다.
출석 기록 저장은 이 서비스의 범위가 아니며, 호출 측이 목록을 전달한다.

설계 원칙:
- 집계 로직은 service 계층(app.services.attendance)에 위임
- period 지정 시 'YYYY-MM' 형식 검증 후 해당 월 일수만 추가로 반환
- streak는 시뮬레이션 시각이 아닌 실제 날짜 기준
- 체크인 판정은 시뮬레이션 시각(now) 기준, 기록 추가는 호출 측 책임

관련 파일:
- app.services.attendance  : 월별 출석 일수 / streak 계산
- app.schemas.attendance   : 요청/응답 스키마

"""

from fastapi import APIRouter, Depends, HTTPException, Query

from app.core.clock import SystemClock
from app.core.config import Settings
from app.core.deps import get_clock, get_settings
from app.schemas.attendance import (
    AttendanceSummaryRequest,
    AttendanceSummaryResponse,
    CheckInRequest,
    CheckInResponse,
)
from app.services.attendance import aggregate_attendance, current_streak, evaluate_check_in
from app.services.months import validate_period

router = APIRouter(prefix="/attendance", tags=["attendance"])


"""
출석 요약 API

- months: 'YYYY-MM' → 출석한 서로 다른 날짜 수
- period 지정 시 해당 월의 일수를 period_days로 반환 (기록이 없으면 0)
- 파싱 불가한 시각은 조용히 제외

"""
@router.post("/summary", response_model=AttendanceSummaryResponse)
def attendance_summary(
    body: AttendanceSummaryRequest,
    period: str | None = Query(default=None, description="예: 2026-01"),
    clock: SystemClock = Depends(get_clock),
):
    if period:
        try:
            validate_period(period)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))

    months = aggregate_attendance(body.attendance, clock.timezone)

    return AttendanceSummaryResponse(
        months=months,
        period=period,
        period_days=months.get(period, 0) if period else None,
        streak=current_streak(body.attendance, clock.wall_today, clock.timezone),
    )


"""
체크인 판정 API

- inactive 회원 / 같은 날 중복 체크인은 400
- 만료일이 지났으면 status=expired (입장은 허용)
- 반환된 check_in_time을 출석 기록에 추가하는 것은 호출 측 책임

"""
@router.post("/check-in", response_model=CheckInResponse)
def check_in(
    body: CheckInRequest,
    cfg: Settings = Depends(get_settings),
    clock: SystemClock = Depends(get_clock),
):
    try:
        return evaluate_check_in(
            body.member,
            body.now or clock.now,
            cfg.TIMEZONE,
            threshold=body.threshold if body.threshold is not None else cfg.ATTENDANCE_THRESHOLD_DAYS,
            inactive_after=cfg.INACTIVE_AFTER_DUE_MONTHS,
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
