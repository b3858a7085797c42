from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, ConfigDict

from app.schemas.dues import MemberSnapshot, MemberStatus, PeriodStr


class DuesReportRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    members: List[MemberSnapshot] = Field(default_factory=list)
    threshold: Optional[int] = Field(None, ge=0)
    now: Optional[datetime] = None


class MemberDuesRow(BaseModel):
    member_id: Optional[int]
    name: Optional[str]
    plan: Optional[str]
    status: MemberStatus
    due_months: int
    due_month_periods: List[PeriodStr]
    due_month_labels: List[str]
    gap_months: int
    is_running_month_paid: bool
    outstanding: int
    balance: int
    streak: int


class DuesReportStats(BaseModel):
    active: int = 0
    due_members: int = 0
    inactive_members: int = 0
    total_outstanding: int = 0


class DuesReportResponse(BaseModel):
    now: datetime
    rows: List[MemberDuesRow]
    stats: DuesReportStats
