"""
config.py

애플리케이션 전역 설정(Configuration) 관리 파일.

이 파일은 .env 환경 변수들을 Pydantic BaseSettings를 통해 로드하여
회비 엔진과 API 전반에서 공통으로 사용하는 설정 값을 제공한다.

주요 설정 항목:
- 타임존 (월 경계 계산 기준)
- 출석 기준 일수 / 비활성 전환 기준 미납 개월 수
- 요금제(plan) 목록 및 재등록비
- 운영자 시간 시뮬레이션 옵션
- CORS 허용 도메인 목록

설계 원칙:
- 모든 환경 변수는 이 파일을 통해서만 접근
- 로컬 / 테스트 / 운영 환경을 .env로 분리하여 관리
- 설정 값은 런타임 중 변경되지 않는 불변 객체로 취급

관련 파일:
- app.main               : CORS / 로그 레벨 설정 사용
- app.core.clock         : 타임존 / 시간 시뮬레이션 설정 사용
- app.core.deps          : 라우터에 설정 주입

"""

import json
from functools import cached_property
from typing import List

from pydantic import ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from app.schemas.settings import Plan
from app.services.months import DEFAULT_TIMEZONE, get_zone


# .env 파일에 정의된 환경 변수를 로드하는 설정 클래스
# extra="ignore" 옵션으로 정의되지 않은 환경 변수는 무시
class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore", frozen=True)

    TIMEZONE: str = DEFAULT_TIMEZONE

    ATTENDANCE_THRESHOLD_DAYS: int = 3
    INACTIVE_AFTER_DUE_MONTHS: int = 3
    RENEWAL_FEE: int = 0
    CURRENCY: str = "BDT"

    # JSON 문자열로 저장된 요금제 목록
    # 예: '[{"name": "Standard", "price": 500, "admissionFee": 0}]'
    MEMBERSHIP_PLANS: str = "[]"

    # 운영자 시간 시뮬레이션
    # - 활성화 + 값이 파싱 가능할 때만 now를 대체
    TIME_SIMULATION_ENABLED: bool = False
    TIME_SIMULATION_VALUE: str | None = None

    LOG_LEVEL: str = "INFO"

    # CORS 허용 도메인 (프론트엔드 주소)
    CORS_ORIGINS: List[str] = ["http://localhost:5173", "http://127.0.0.1:5173"]

    @field_validator("TIMEZONE")
    @classmethod
    def _known_timezone(cls, v: str) -> str:
        get_zone(v)
        return v

    @field_validator("ATTENDANCE_THRESHOLD_DAYS", "INACTIVE_AFTER_DUE_MONTHS", "RENEWAL_FEE")
    @classmethod
    def _non_negative(cls, v: int) -> int:
        if v < 0:
            raise ValueError("must be >= 0")
        return v

    # 잘못된 요금제 항목은 요청 처리 중이 아니라 기동 시점에 실패
    @field_validator("MEMBERSHIP_PLANS")
    @classmethod
    def _valid_plans(cls, v: str) -> str:
        try:
            parse_membership_plans(v)
        except ValidationError as e:
            raise ValueError(f"invalid MEMBERSHIP_PLANS: {e.errors()[0]['msg']}")
        return v

    @cached_property
    def membership_plans(self) -> list[Plan]:
        return parse_membership_plans(self.MEMBERSHIP_PLANS)


"""
요금제 목록 파싱

- 문자열만 있는 항목은 가격 0인 요금제로 취급
- JSON 자체가 깨져 있으면 가격 0인 Standard 요금제 하나로 대체
- 리스트가 아니면 빈 목록

"""

def parse_membership_plans(raw: str | None) -> list[Plan]:
    try:
        data = json.loads(raw or "[]")
    except ValueError:
        return [Plan(name="Standard", price=0, admission_fee=0)]

    if not isinstance(data, list):
        return []

    plans = []
    for p in data:
        if isinstance(p, str):
            plans.append(Plan(name=p, price=0, admission_fee=0))
        elif isinstance(p, dict):
            plans.append(Plan.model_validate(p))
    return plans


# 애플리케이션 전역에서 import하여 사용하는 Settings 인스턴스
# 실행 시 한 번만 생성됨
settings = Settings()
