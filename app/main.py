"""
main.py

FastAPI 애플리케이션 진입점(Entry Point).

이 파일은 서버 실행 시 가장 먼저 로드되며,
애플리케이션 전반의 설정과 라우터 등록을 담당한다.

주요 역할:
- FastAPI 앱 인스턴스 생성
- 로그 레벨 / CORS 미들웨어 설정
- 각 도메인별 라우터(dues, reports, attendance, settings) 등록
- 헬스 체크 엔드포인트 제공

설계 원칙:
- 비즈니스 로직은 포함하지 않고 설정/조립 역할만 수행
- 실제 기능은 routers / services 계층에 위임
- 이 서비스는 상태를 저장하지 않음 (회원 데이터는 호출 측 소유)

관련 파일:
- app.core.config        : 환경 변수 및 설정 로드
- app.core.deps          : 설정 / 시계 의존성
- app.routers.*          : 기능별 API 라우터

"""

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.core.config import settings
from app.routers import dues, reports, attendance
from app.routers import settings as settings_router

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(title="Gym Dues Backend")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(dues.router)
app.include_router(reports.router)
app.include_router(attendance.router)
app.include_router(settings_router.router)

"""
서버 헬스 체크 엔드포인트

- 애플리케이션 프로세스가 정상 동작 중인지 확인
- 로드밸런서 / 배포 환경에서 서버 상태 확인 용도

"""
@app.get("/health")
def health():
    return {"status": "ok"}
