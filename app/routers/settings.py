from fastapi import APIRouter, Depends

from app.core.clock import SystemClock
from app.core.config import Settings
from app.core.deps import get_clock, get_settings
from app.schemas.settings import ClockResponse, SettingsResponse

router = APIRouter(prefix="/settings", tags=["settings"])


"""
현재 적용 중인 회비 설정 / 시계 조회 API

- 시간 시뮬레이션 중이면 simulated=True 와 시뮬레이션 시각 반환

"""
@router.get("", response_model=SettingsResponse)
def current_settings(
    cfg: Settings = Depends(get_settings),
    clock: SystemClock = Depends(get_clock),
):
    return SettingsResponse(
        clock=ClockResponse(
            timezone=clock.timezone,
            simulated=clock.simulated,
            simulated_time=clock.simulated_time,
            now=clock.now,
            today=clock.today,
        ),
        attendance_threshold=cfg.ATTENDANCE_THRESHOLD_DAYS,
        inactive_after_months=cfg.INACTIVE_AFTER_DUE_MONTHS,
        renewal_fee=cfg.RENEWAL_FEE,
        currency=cfg.CURRENCY,
        membership_plans=cfg.membership_plans,
    )
