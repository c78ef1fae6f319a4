import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from app.core.constants import MINUTES_PER_HOUR, SECONDS_PER_MINUTE, TIME_ENTRY_STATUS_APPROVED


class Holiday(BaseModel):
    """Norwegian public holiday."""
    model_config = ConfigDict(frozen=True)

    date: datetime.date
    name: str


class WageSupplementRule(BaseModel):
    """Wage supplement (tillegg) rule as configured by an administrator."""
    model_config = ConfigDict(frozen=True)

    id: str | None = None
    name: str
    description: str | None = None
    supplement_type: str
    amount: Decimal
    applies_to: str
    time_start: str | None = None
    time_end: str | None = None
    is_active: bool | None = True
    priority: int | None = None


class WorkInterval(BaseModel):
    """Actual worked interval, naive local time. May cross midnight."""
    model_config = ConfigDict(frozen=True)

    start: datetime.datetime
    end: datetime.datetime

    @property
    def duration_minutes(self) -> int:
        return int((self.end - self.start).total_seconds() // SECONDS_PER_MINUTE)


class OverlapResult(BaseModel):
    """Overlap and supplement amount for one rule against one interval."""
    rule_id: str | None = None
    rule_name: str
    applies_to: str
    supplement_type: str
    overlap_minutes: int = Field(ge=0)
    amount: Decimal

    @property
    def overlap_hours(self) -> float:
        return self.overlap_minutes / MINUTES_PER_HOUR


class TimeEntry(BaseModel):
    """Clock-in/clock-out record from the timesheet."""
    id: str | None = None
    employee_id: str
    clock_in: datetime.datetime
    clock_out: datetime.datetime
    break_minutes: int = Field(default=0, ge=0)
    status: str = TIME_ENTRY_STATUS_APPROVED

    def interval(self) -> WorkInterval:
        return WorkInterval(start=self.clock_in, end=self.clock_out)


class Employee(BaseModel):
    """Employee payroll details."""
    id: str
    full_name: str
    salary_type: str = "hourly"
    hourly_rate: Decimal = Decimal("0")
    fixed_monthly_salary: Decimal | None = None
    contracted_hours_per_month: Decimal | None = None
    included_night_hours: Decimal = Decimal("0")
    employment_percentage: Decimal = Decimal("100")


class PayrollLineItem(BaseModel):
    """Single line in the payroll basis (one component for one day)."""
    date: datetime.date
    type: str
    hours: float
    rate: Decimal
    amount: Decimal
    description: str | None = None


class OvertimeSplit(BaseModel):
    """Worked minutes split into regular, 50 % and 100 % overtime."""
    regular_minutes: int = 0
    overtime_50_minutes: int = 0
    overtime_100_minutes: int = 0

    @property
    def regular_hours(self) -> float:
        return self.regular_minutes / MINUTES_PER_HOUR

    @property
    def overtime_50_hours(self) -> float:
        return self.overtime_50_minutes / MINUTES_PER_HOUR

    @property
    def overtime_100_hours(self) -> float:
        return self.overtime_100_minutes / MINUTES_PER_HOUR

    @property
    def total_minutes(self) -> int:
        return self.regular_minutes + self.overtime_50_minutes + self.overtime_100_minutes


class ShiftPay(BaseModel):
    """Pay breakdown for one time entry."""
    worked_minutes: int
    overtime: OvertimeSplit
    base_pay: Decimal
    overtime_pay: Decimal
    supplement_pay: Decimal
    total_pay: Decimal
    supplements: list[OverlapResult] = []
    line_items: list[PayrollLineItem] = []


class PayrollResult(BaseModel):
    """Payroll for one employee over a period."""
    employee_id: str
    employee_name: str
    salary_type: str
    hourly_rate: Decimal
    employment_percentage: Decimal
    regular_hours: float = 0.0
    overtime_50_hours: float = 0.0
    overtime_100_hours: float = 0.0
    supplement_hours: dict[str, float] = {}
    saturday_hours: float = 0.0
    sunday_hours: float = 0.0
    total_hours: float = 0.0
    base_pay: Decimal = Decimal("0")
    overtime_pay: Decimal = Decimal("0")
    supplement_pay: Decimal = Decimal("0")
    gross_pay: Decimal = Decimal("0")
    line_items: list[PayrollLineItem] = []
    fixed_monthly_salary: Decimal | None = None
    contracted_hours_per_month: Decimal | None = None
    included_night_hours: Decimal | None = None
    extra_night_hours: float | None = None
