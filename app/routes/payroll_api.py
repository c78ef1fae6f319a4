# app/routes/payroll_api.py
"""
JSON API for holiday lookups and payroll calculations.
"""

import datetime
from collections.abc import Callable
from decimal import Decimal

from fastapi import APIRouter, Depends, Request
from fastapi.responses import PlainTextResponse
from pydantic import BaseModel, Field

from app.core.constants import MINUTES_PER_HOUR
from app.core.holidays import HolidayCalendar
from app.core.models import (
    Employee,
    Holiday,
    OverlapResult,
    PayrollResult,
    ShiftPay,
    TimeEntry,
    WageSupplementRule,
    WorkInterval,
)
from app.core.payroll import calculate_payroll_for_period, calculate_shift_pay, compute_supplements, export_payroll_csv
from app.core.storage import load_wage_supplements

router = APIRouter(prefix="/api", tags=["payroll_api"])


class SupplementRequest(BaseModel):
    start: datetime.datetime
    end: datetime.datetime
    base_hourly_rate: Decimal
    rules: list[WageSupplementRule] | None = None


class ShiftPayRequest(BaseModel):
    entry: TimeEntry
    hourly_rate: Decimal
    weekly_hours_before: float = Field(default=0.0, ge=0)
    rules: list[WageSupplementRule] | None = None


class PeriodPayrollRequest(BaseModel):
    period_start: datetime.date
    period_end: datetime.date
    employees: list[Employee]
    entries: list[TimeEntry] = []
    rules: list[WageSupplementRule] | None = None


class HolidayCheck(BaseModel):
    date: datetime.date
    is_holiday: bool
    name: str | None = None


def get_holiday_calendar(request: Request) -> HolidayCalendar:
    """Holiday calendar owned by the application (created in lifespan)."""
    return request.app.state.holiday_calendar


class ConfiguredRules:
    """
    Configured wage supplement rules, read from file on first use.

    Requests that carry their own rules never read the file.
    """

    def __init__(self, loader: Callable[[], list[WageSupplementRule]] = load_wage_supplements):
        self._loader = loader
        self._rules: list[WageSupplementRule] | None = None

    def get(self) -> list[WageSupplementRule]:
        if self._rules is None:
            self._rules = self._loader()
        return self._rules


def get_wage_supplements() -> ConfiguredRules:
    """Configured wage supplement rules (loaded lazily)."""
    return ConfiguredRules()


def _rules_or_configured(
    requested: list[WageSupplementRule] | None,
    configured: ConfiguredRules,
) -> list[WageSupplementRule]:
    return requested if requested is not None else configured.get()


@router.get("/holidays/{year}", response_model=list[Holiday])
async def list_holidays(year: int, calendar: HolidayCalendar = Depends(get_holiday_calendar)):
    """All Norwegian public holidays for a year, in date order."""
    return calendar.holidays(year)


@router.get("/holidays/check/{day}", response_model=HolidayCheck)
async def check_holiday(day: datetime.date, calendar: HolidayCalendar = Depends(get_holiday_calendar)):
    """Whether a date is a Norwegian public holiday."""
    name = calendar.holiday_name(day)
    return HolidayCheck(date=day, is_holiday=name is not None, name=name)


@router.post("/supplements/calculate", response_model=list[OverlapResult])
async def calculate_supplements(
    body: SupplementRequest,
    calendar: HolidayCalendar = Depends(get_holiday_calendar),
    configured: ConfiguredRules = Depends(get_wage_supplements),
):
    """Per-rule overlap and amount for one worked interval."""
    interval = WorkInterval(start=body.start, end=body.end)
    rules = _rules_or_configured(body.rules, configured)
    return compute_supplements(interval, rules, body.base_hourly_rate, calendar)


@router.post("/payroll/shift", response_model=ShiftPay)
async def calculate_shift(
    body: ShiftPayRequest,
    calendar: HolidayCalendar = Depends(get_holiday_calendar),
    configured: ConfiguredRules = Depends(get_wage_supplements),
):
    """Pay breakdown for one time entry."""
    rules = _rules_or_configured(body.rules, configured)
    weekly_minutes = int(round(body.weekly_hours_before * MINUTES_PER_HOUR))
    return calculate_shift_pay(body.entry, body.hourly_rate, rules, calendar, weekly_minutes)


@router.post("/payroll/period", response_model=list[PayrollResult])
async def calculate_period(
    body: PeriodPayrollRequest,
    calendar: HolidayCalendar = Depends(get_holiday_calendar),
    configured: ConfiguredRules = Depends(get_wage_supplements),
):
    """Payroll for all employees over a period."""
    rules = _rules_or_configured(body.rules, configured)
    return calculate_payroll_for_period(
        body.entries, body.employees, rules, body.period_start, body.period_end, calendar
    )


@router.post("/payroll/period/export", response_class=PlainTextResponse)
async def export_period(
    body: PeriodPayrollRequest,
    calendar: HolidayCalendar = Depends(get_holiday_calendar),
    configured: ConfiguredRules = Depends(get_wage_supplements),
):
    """Payroll for a period as semicolon-separated CSV."""
    rules = _rules_or_configured(body.rules, configured)
    results = calculate_payroll_for_period(
        body.entries, body.employees, rules, body.period_start, body.period_end, calendar
    )
    return PlainTextResponse(export_payroll_csv(results), media_type="text/csv; charset=utf-8")
