import pytest
from fastapi.testclient import TestClient

from app.main import app as fastapi_app
from app.core.config import Settings
from app.core.deps import get_settings


# 테스트 기준 시각 고정 (운영자 시간 시뮬레이션 사용)
SIMULATED_NOW = "2024-03-15T10:00:00Z"

PLANS = '[{"name": "Standard", "price": 500, "admissionFee": 200}, "Free"]'


@pytest.fixture()
def test_settings():
    """.env 영향 없이 UTC / 고정 시각으로 동작하는 설정"""
    return Settings(
        _env_file=None,
        TIMEZONE="UTC",
        ATTENDANCE_THRESHOLD_DAYS=3,
        INACTIVE_AFTER_DUE_MONTHS=3,
        MEMBERSHIP_PLANS=PLANS,
        TIME_SIMULATION_ENABLED=True,
        TIME_SIMULATION_VALUE=SIMULATED_NOW,
    )


@pytest.fixture()
def client(test_settings):
    fastapi_app.dependency_overrides[get_settings] = lambda: test_settings
    with TestClient(fastapi_app) as c:
        yield c
    fastapi_app.dependency_overrides.clear()
