"""
reports.py

대시보드용 회비 현황 리포트 API 모음.

호출 측이 보낸 회원 목록 전체에 대해
회원별 미납 현황과 상태별 통계를 계산하고,
CSV / Excel(xlsx) 파일로 내보내는 기능을 담당한다.

주요 기능:
- 회원별 미납 현황 + 전체 통계 조회 (JSON)
- CSV 내보내기 (UTF-8 BOM)
- Excel(xlsx) 내보내기

설계 원칙:
- 계산 로직은 service 계층(app.services.report)에 위임
- 이 라우터는 요청/응답 처리에만 집중
- 상태 변경 결과의 저장은 호출 측 책임

관련 파일:
- app.services.report      : 회원별 현황 / 통계 계산
- app.schemas.report       : 요청/응답 스키마
"""

import csv
import io
from starlette.responses import StreamingResponse, Response
from openpyxl import Workbook

from fastapi import APIRouter, Depends, HTTPException

from app.core.clock import SystemClock
from app.core.config import Settings
from app.core.deps import get_clock, get_settings
from app.schemas.report import DuesReportRequest, DuesReportResponse
from app.services.months import month_key
from app.services.report import REPORT_COLUMNS, dues_report, report_values

router = APIRouter(prefix="/dues/report", tags=["dues-report"])


def _build_report(body: DuesReportRequest, cfg: Settings, clock: SystemClock):
    now = body.now or clock.now
    try:
        rows, stats = dues_report(
            body.members,
            plans=cfg.membership_plans,
            threshold=body.threshold if body.threshold is not None else cfg.ATTENDANCE_THRESHOLD_DAYS,
            inactive_after=cfg.INACTIVE_AFTER_DUE_MONTHS,
            now=now,
            today=clock.wall_today,
            tz=cfg.TIMEZONE,
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return now, rows, stats


"""
회비 현황 리포트 조회 API

- 회원별 상태(active / due / inactive), 미납 월 라벨, 미납 총액, streak
- 전체 통계: 상태별 인원 수, 총 미납액

"""
@router.post("", response_model=DuesReportResponse)
def dues_report_json(
    body: DuesReportRequest,
    cfg: Settings = Depends(get_settings),
    clock: SystemClock = Depends(get_clock),
):
    now, rows, stats = _build_report(body, cfg, clock)
    return DuesReportResponse(now=now, rows=rows, stats=stats)


"""
    회비 현황 CSV 다운로드 API

    - 회원별 현황을 CSV 파일로 반환
    - StreamingResponse를 사용해 회원 수가 많아도 메모리 부담 없이 처리
    - UTF-8 BOM을 추가하여 Excel에서 한글이 깨지지 않도록 처리

"""
@router.post("/export")
def export_report_csv(
    body: DuesReportRequest,
    cfg: Settings = Depends(get_settings),
    clock: SystemClock = Depends(get_clock),
):
    now, rows, _ = _build_report(body, cfg, clock)
    period = month_key(now, cfg.TIMEZONE)

    def generate():
        # Excel에서 UTF-8 CSV 한글 깨짐 방지를 위해 BOM(Byte Order Mark) 먼저 출력
        yield "\ufeff"

        output = io.StringIO()
        writer = csv.writer(output)

        # CSV 헤더 행
        writer.writerow(REPORT_COLUMNS)
        yield output.getvalue()
        output.seek(0)
        output.truncate(0)

        for r in rows:
            writer.writerow(report_values(r))
            yield output.getvalue()
            output.seek(0)
            output.truncate(0)

    filename = f"dues_report_{period}.csv"
    headers = {
        "Content-Disposition": f'attachment; filename="{filename}"'
    }

    return StreamingResponse(
        generate(),
        media_type="text/csv; charset=utf-8",
        headers=headers,
    )


"""
회비 현황 Excel(xlsx) 다운로드 API

- CSV 대신 Excel 형식이 필요한 경우를 위한 엔드포인트
- openpyxl을 사용하여 XLSX 파일 생성
- 별도 summary 시트에 상태별 인원 / 총 미납액 요약 추가

"""

@router.post("/export.xlsx")
def export_report_xlsx(
    body: DuesReportRequest,
    cfg: Settings = Depends(get_settings),
    clock: SystemClock = Depends(get_clock),
):
    now, rows, stats = _build_report(body, cfg, clock)
    period = month_key(now, cfg.TIMEZONE)

    wb = Workbook()
    ws = wb.active
    ws.title = "dues_report"

    # Excel 시트 헤더
    ws.append(REPORT_COLUMNS)

    # 데이터
    for r in rows:
        ws.append(report_values(r))

    summary = wb.create_sheet("summary")
    summary.append(["period", period])
    summary.append(["active", stats.active])
    summary.append(["due_members", stats.due_members])
    summary.append(["inactive_members", stats.inactive_members])
    summary.append(["total_outstanding", stats.total_outstanding])

    buf = io.BytesIO()
    wb.save(buf)
    data = buf.getvalue()

    # Content-Disposition 헤더를 통해 브라우저에서 파일 다운로드로 처리
    filename = f"dues_report_{period}.xlsx"
    headers = {
        "Content-Disposition": f'attachment; filename="{filename}"'
    }

    return Response(
        content=data,
        media_type="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        headers=headers,
    )

# NOTE:
# CSV는 엑셀 호환성 문제로 BOM + UTF-8 스트리밍 방식 사용
# XLSX는 Excel에서 바로 열기 위한 대안 포맷
