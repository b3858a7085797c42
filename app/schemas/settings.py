from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class Plan(BaseModel):
    # 설정 JSON은 camelCase(admissionFee)로 저장되어 있음
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str
    price: int = Field(0, ge=0)
    admission_fee: int = Field(0, ge=0, alias="admissionFee")


class ClockResponse(BaseModel):
    timezone: str
    simulated: bool
    simulated_time: Optional[datetime]
    now: datetime
    today: date


class SettingsResponse(BaseModel):
    clock: ClockResponse
    attendance_threshold: int
    inactive_after_months: int
    renewal_fee: int
    currency: str
    membership_plans: list[Plan]
