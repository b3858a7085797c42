from datetime import datetime
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, Field, ConfigDict

from app.schemas.dues import MemberSnapshot, PeriodStr


class AttendanceSummaryRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    attendance: List[str] = Field(default_factory=list, examples=[["2026-01-05T07:30:00Z"]])


class AttendanceSummaryResponse(BaseModel):
    months: Dict[PeriodStr, int]
    period: Optional[PeriodStr] = None
    period_days: Optional[int] = None
    streak: int = 0


class CheckInRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    member: MemberSnapshot
    threshold: Optional[int] = Field(None, ge=0)
    now: Optional[datetime] = None


class CheckInResponse(BaseModel):
    """체크인 판정 결과. check_in_time을 출석 기록에 추가하는 것은 호출 측 책임."""

    model_config = ConfigDict(frozen=True)

    status: Literal["success", "expired"]
    is_expired: bool
    name: Optional[str] = None
    check_in_time: datetime
