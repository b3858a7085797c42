from fastapi import Depends

from app.core.clock import SystemClock, resolve_clock
from app.core.config import Settings, settings


# 테스트에서는 app.dependency_overrides로 교체
def get_settings() -> Settings:
    return settings


def get_clock(cfg: Settings = Depends(get_settings)) -> SystemClock:
    return resolve_clock(cfg)
