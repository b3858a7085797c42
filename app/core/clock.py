"""
clock.py

시스템 시계(SystemClock) 결정 로직.

회비 계산의 기준 시각(now)은 실제 현재 시각 또는
운영자가 설정한 시뮬레이션 시각이 될 수 있다.
엔진은 시계를 직접 읽지 않으므로, 요청마다 여기서 now를 결정해 전달한다.

설계 원칙:
- 시뮬레이션 값이 파싱 불가하면 무시하고 실제 시각 사용
- 연속 출석(streak)용 wall_today는 항상 실제 시각 기준

관련 파일:
- app.core.config        : TIMEZONE / TIME_SIMULATION_* 설정
- app.core.deps          : get_clock 의존성

"""

from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict

from app.core.config import Settings
from app.services.months import UTC, get_zone, local_date, parse_instant


class SystemClock(BaseModel):
    model_config = ConfigDict(frozen=True)

    timezone: str
    simulated: bool
    simulated_time: Optional[datetime]
    now: datetime
    today: date
    wall_today: date


def resolve_clock(cfg: Settings, wall_now: datetime | None = None) -> SystemClock:
    zone = get_zone(cfg.TIMEZONE)
    wall = wall_now or datetime.now(UTC)

    now = wall
    simulated = False
    if cfg.TIME_SIMULATION_ENABLED and cfg.TIME_SIMULATION_VALUE:
        parsed = parse_instant(cfg.TIME_SIMULATION_VALUE)
        if parsed is not None:
            now = parsed
            simulated = True

    return SystemClock(
        timezone=cfg.TIMEZONE,
        simulated=simulated,
        simulated_time=now if simulated else None,
        now=now,
        today=local_date(now, zone),
        wall_today=local_date(wall, zone),
    )
